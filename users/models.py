"""User model for marketplace participants.

Students sell services, clients buy them, admins moderate disputes.
"""

from common.choices import UserRole
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_STUDENT = UserRole.STUDENT
    ROLE_CLIENT = UserRole.CLIENT
    ROLE_ADMIN = UserRole.ADMIN

    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.CLIENT, db_index=True)

    @property
    def display_name(self) -> str:
        full = self.get_full_name().strip()
        return full or self.username

    @property
    def is_moderator(self) -> bool:
        """Admins (by role or staff flag) may review and resolve disputes."""
        return self.is_active and (self.role == UserRole.ADMIN or self.is_staff)
