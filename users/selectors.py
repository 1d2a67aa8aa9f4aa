"""User directory lookups.

The core stores user ids only; these helpers resolve ids to display data for
history and dispute views.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from django.contrib.auth import get_user_model


def get_user(user_id: int):
    """Return the user with `user_id`, or None."""

    return get_user_model().objects.filter(pk=user_id).first()


def get_directory_entry(user_id: Optional[int]) -> Optional[Dict[str, str]]:
    if not user_id:
        return None
    return get_directory_entries([user_id]).get(user_id)


def get_directory_entries(user_ids: Iterable[int]) -> Dict[int, Dict[str, str]]:
    """Map user ids to `{"name", "email"}` in one query.

    Ids that no longer exist are simply absent; callers render them as unknown.
    """

    ids = {int(i) for i in user_ids if i}
    if not ids:
        return {}
    out = {}
    for user in get_user_model().objects.filter(pk__in=ids):
        out[user.id] = {"name": user.display_name, "email": user.email or ""}
    return out
