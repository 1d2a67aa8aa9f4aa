from decimal import Decimal

import pytest
from audit.services import record_edit
from catalog.tests.factories import ServiceFactory
from django.urls import reverse
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, StudentFactory

pytestmark = pytest.mark.django_db


def test_service_history_joins_user_directory():
    service = ServiceFactory(seller__first_name="Ada", seller__last_name="Byron")
    record_edit(
        service_id=service.id,
        user_id=service.seller_id,
        field_changed="price",
        old_value=Decimal("100.00"),
        new_value=Decimal("120.00"),
        has_active_orders=True,
    )
    client = APIClient()
    client.force_authenticate(user=service.seller)
    r = client.get(reverse("audit:service-history", kwargs={"service_id": service.id}))
    assert r.status_code == 200
    row = r.json()[0]
    assert row["user_name"] == "Ada Byron"
    assert row["user_email"] == service.seller.email
    assert row["old_value"] == "100.00" and row["new_value"] == "120.00"
    assert row["has_active_orders"] is True


def test_service_history_limit_and_validation():
    service = ServiceFactory()
    for i in range(3):
        record_edit(
            service_id=service.id,
            user_id=service.seller_id,
            field_changed="title",
            old_value=f"t{i}",
            new_value=f"t{i + 1}",
            has_active_orders=False,
        )
    client = APIClient()
    client.force_authenticate(user=service.seller)
    url = reverse("audit:service-history", kwargs={"service_id": service.id})
    assert len(client.get(url, {"limit": 2}).json()) == 2
    bad = client.get(url, {"limit": "-4"})
    assert bad.status_code == 400 and bad.json()["field"] == "limit"


def test_service_history_hidden_from_other_sellers_but_visible_to_admins():
    service = ServiceFactory()
    client = APIClient()
    client.force_authenticate(user=StudentFactory())
    url = reverse("audit:service-history", kwargs={"service_id": service.id})
    assert client.get(url).status_code == 404
    client.force_authenticate(user=AdminFactory())
    assert client.get(url).status_code == 200


def test_history_survives_user_deletion_for_admins():
    seller = StudentFactory()
    record_edit(
        service_id=77, user_id=seller.id, field_changed="title", old_value="a", new_value="b", has_active_orders=False
    )
    seller_id = seller.id
    seller.delete()
    client = APIClient()
    client.force_authenticate(user=AdminFactory())
    r = client.get(reverse("audit:user-history", kwargs={"user_id": seller_id}))
    assert r.status_code == 200
    assert len(r.json()) == 1 and r.json()[0]["user_name"] == ""


def test_user_history_is_private():
    me = StudentFactory()
    other = StudentFactory()
    client = APIClient()
    client.force_authenticate(user=me)
    assert client.get(reverse("audit:user-history", kwargs={"user_id": me.id})).status_code == 200
    assert client.get(reverse("audit:user-history", kwargs={"user_id": other.id})).status_code == 404
