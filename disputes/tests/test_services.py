from decimal import Decimal
from unittest.mock import patch

import pytest
from catalog.services import update_service
from common.choices import DisputeResolution
from common.exceptions import (
    AlreadyResolvedError,
    DuplicateDisputeError,
    InvalidStateError,
    PermissionDeniedError,
    ValidationError,
)
from disputes.models import Dispute
from disputes.selectors import get_by_order, has_open_dispute, list_disputes
from disputes.services import begin_review, open_dispute, resolve_dispute
from orders.models import Order
from orders.services import confirm_delivery
from orders.tests.factories import OrderFactory
from settlements.models import SettlementInstruction
from users.tests.factories import AdminFactory, UserFactory

pytestmark = pytest.mark.django_db


def test_open_dispute_moves_order_to_disputed():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="  Not delivered  ")
    order.refresh_from_db()
    assert order.status == Order.STATUS_DISPUTED
    assert dispute.status == Dispute.STATUS_OPEN
    assert dispute.reason == "Not delivered"
    assert dispute.resolution is None
    assert has_open_dispute(order.id)


def test_seller_may_open_a_dispute_too():
    order = OrderFactory(status=Order.STATUS_COMPLETED)
    dispute = open_dispute(order_id=order.id, initiator_id=order.seller_id, reason="Buyer vanished")
    assert dispute.initiator_id == order.seller_id


def test_second_dispute_is_rejected_as_duplicate():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="First")
    with pytest.raises(DuplicateDisputeError):
        open_dispute(order_id=order.id, initiator_id=order.seller_id, reason="Second")
    assert Dispute.objects.filter(order=order).count() == 1


@pytest.mark.parametrize("status", [Order.STATUS_PENDING, Order.STATUS_CANCELLED, Order.STATUS_RESOLVED_RELEASE])
def test_non_disputable_states_are_rejected(status):
    order = OrderFactory(status=status)
    with pytest.raises(InvalidStateError):
        open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    order.refresh_from_db()
    assert order.status == status
    assert not Dispute.objects.exists()


def test_empty_reason_is_rejected_before_any_write():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    with pytest.raises(ValidationError) as exc:
        open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="   ")
    assert exc.value.field == "reason"
    order.refresh_from_db()
    assert order.status == Order.STATUS_ACTIVE


def test_outsiders_cannot_open_disputes():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    with pytest.raises(PermissionDeniedError):
        open_dispute(order_id=order.id, initiator_id=UserFactory().id, reason="Nosy")
    assert not Dispute.objects.exists()


def test_unknown_order_raises_does_not_exist():
    with pytest.raises(Order.DoesNotExist):
        open_dispute(order_id=999999, initiator_id=1, reason="Ghost")


def test_begin_review_is_idempotent_and_reassigns():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    first, second = AdminFactory(), AdminFactory()

    reviewed = begin_review(dispute_id=dispute.id, admin_id=first.id)
    assert reviewed.status == Dispute.STATUS_UNDER_REVIEW and reviewed.reviewer_id == first.id
    again = begin_review(dispute_id=dispute.id, admin_id=first.id)
    assert again.reviewer_id == first.id
    taken = begin_review(dispute_id=dispute.id, admin_id=second.id)
    assert taken.reviewer_id == second.id


def test_only_moderators_review_and_resolve():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    with pytest.raises(PermissionDeniedError):
        begin_review(dispute_id=dispute.id, admin_id=order.buyer_id)
    with pytest.raises(PermissionDeniedError):
        resolve_dispute(dispute_id=dispute.id, admin_id=order.seller_id, resolution=DisputeResolution.REFUND_BUYER)
    dispute.refresh_from_db()
    assert dispute.status == Dispute.STATUS_OPEN


def test_invalid_resolution_and_percentage_are_rejected():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    admin = AdminFactory()
    with pytest.raises(ValidationError):
        resolve_dispute(dispute_id=dispute.id, admin_id=admin.id, resolution="split_the_difference")
    with pytest.raises(ValidationError):
        resolve_dispute(
            dispute_id=dispute.id,
            admin_id=admin.id,
            resolution=DisputeResolution.PARTIAL_REFUND,
            refund_percentage="120",
        )
    assert Order.objects.get(pk=order.id).status == Order.STATUS_DISPUTED


@pytest.mark.parametrize(
    "resolution,order_status",
    [
        (DisputeResolution.REFUND_BUYER, Order.STATUS_RESOLVED_REFUND),
        (DisputeResolution.PARTIAL_REFUND, Order.STATUS_RESOLVED_PARTIAL_REFUND),
        (DisputeResolution.RELEASE_TO_SELLER, Order.STATUS_RESOLVED_RELEASE),
    ],
)
def test_resolution_maps_to_order_state(resolution, order_status):
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    admin = AdminFactory()
    with patch("disputes.services.dispatch_instruction"):
        resolved = resolve_dispute(dispute_id=dispute.id, admin_id=admin.id, resolution=resolution)
    assert resolved.status == Dispute.STATUS_RESOLVED
    assert resolved.resolved_by_id == admin.id and resolved.resolved_at is not None
    assert resolved.order.status == order_status


def test_partial_refund_uses_configured_default_percentage(settings):
    settings.DISPUTES_DEFAULT_PARTIAL_REFUND_PERCENT = "30"
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Half done")
    resolved = resolve_dispute(
        dispute_id=dispute.id, admin_id=AdminFactory().id, resolution=DisputeResolution.PARTIAL_REFUND
    )
    assert resolved.refund_percentage == Decimal("30.00")


def test_resolution_is_final_and_settles_once(django_capture_on_commit_callbacks):
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    admin = AdminFactory()

    with patch("disputes.services.dispatch_instruction") as dispatch:
        with django_capture_on_commit_callbacks(execute=True):
            resolve_dispute(dispute_id=dispute.id, admin_id=admin.id, resolution=DisputeResolution.REFUND_BUYER)
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(AlreadyResolvedError) as exc:
                resolve_dispute(
                    dispute_id=dispute.id, admin_id=AdminFactory().id, resolution=DisputeResolution.RELEASE_TO_SELLER
                )

    assert exc.value.dispute.resolution == DisputeResolution.REFUND_BUYER
    assert callbacks == []
    assert dispatch.call_count == 1
    assert SettlementInstruction.objects.filter(dispute=dispute).count() == 1
    dispute.refresh_from_db()
    assert dispute.resolution == DisputeResolution.REFUND_BUYER
    assert Order.objects.get(pk=order.id).status == Order.STATUS_RESOLVED_REFUND


def test_resolved_dispute_cannot_be_reviewed_again():
    order = OrderFactory(status=Order.STATUS_ACTIVE)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    admin = AdminFactory()
    resolve_dispute(dispute_id=dispute.id, admin_id=admin.id, resolution=DisputeResolution.RELEASE_TO_SELLER)
    with pytest.raises(InvalidStateError):
        begin_review(dispute_id=dispute.id, admin_id=admin.id)


def test_resolved_order_cannot_be_disputed_again():
    order = OrderFactory(status=Order.STATUS_COMPLETED)
    dispute = open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Late")
    resolve_dispute(dispute_id=dispute.id, admin_id=AdminFactory().id, resolution=DisputeResolution.REFUND_BUYER)
    with pytest.raises(InvalidStateError):
        open_dispute(order_id=order.id, initiator_id=order.buyer_id, reason="Again")
    assert get_by_order(order.id) == dispute


def test_queue_filters_by_status():
    a = OrderFactory(status=Order.STATUS_ACTIVE)
    b = OrderFactory(status=Order.STATUS_ACTIVE)
    first = open_dispute(order_id=a.id, initiator_id=a.buyer_id, reason="One")
    second = open_dispute(order_id=b.id, initiator_id=b.buyer_id, reason="Two")
    begin_review(dispute_id=second.id, admin_id=AdminFactory().id)
    assert list(list_disputes(status=Dispute.STATUS_OPEN)) == [first]
    assert list(list_disputes(status=Dispute.STATUS_UNDER_REVIEW)) == [second]
    assert set(list_disputes()) == {first, second}


def test_order_42_partial_refund_end_to_end(settings, django_capture_on_commit_callbacks):
    settings.SETTLEMENT_WEBHOOK_URL = ""
    settings.DISPUTES_DEFAULT_PARTIAL_REFUND_PERCENT = "50"
    order = OrderFactory(id=42, status=Order.STATUS_ACTIVE, price=Decimal("80.00"), commission_rate=Decimal("10.00"))
    service = order.service

    # The seller reprices while the order is in progress; the order keeps its price
    outcomes = update_service(service_id=service.id, user_id=service.seller_id, changes={"price": "95.00"})
    assert outcomes[0].flagged is True

    order = confirm_delivery(order, actor_id=order.buyer_id)
    assert order.status == Order.STATUS_COMPLETED
    assert order.price == Decimal("80.00")

    dispute = open_dispute(order_id=42, initiator_id=order.buyer_id, reason="Work not delivered as described.")
    assert dispute.status == Dispute.STATUS_OPEN
    assert dispute.reason == "Work not delivered as described."
    assert Order.objects.get(pk=42).status == Order.STATUS_DISPUTED

    admin = AdminFactory()
    dispute = begin_review(dispute_id=dispute.id, admin_id=admin.id)
    assert dispute.status == Dispute.STATUS_UNDER_REVIEW
    assert dispute.reviewer_id == admin.id

    with django_capture_on_commit_callbacks(execute=True):
        resolved = resolve_dispute(
            dispute_id=dispute.id,
            admin_id=admin.id,
            resolution=DisputeResolution.PARTIAL_REFUND,
            admin_note="50% refund agreed",
        )

    assert resolved.status == Dispute.STATUS_RESOLVED
    assert resolved.resolution == DisputeResolution.PARTIAL_REFUND
    assert resolved.admin_note == "50% refund agreed"
    assert resolved.refund_percentage == Decimal("50.00")
    assert Order.objects.get(pk=42).status == Order.STATUS_RESOLVED_PARTIAL_REFUND

    instruction = SettlementInstruction.objects.get(dispute=dispute)
    assert instruction.order_amount == Decimal("80.00")
    assert instruction.refund_amount == Decimal("40.00")
    assert instruction.commission_amount == Decimal("4.00")
    assert instruction.seller_amount == Decimal("36.00")
    assert instruction.status == SettlementInstruction.STATUS_PENDING

    with pytest.raises(AlreadyResolvedError) as exc:
        resolve_dispute(
            dispute_id=dispute.id,
            admin_id=admin.id,
            resolution=DisputeResolution.PARTIAL_REFUND,
            admin_note="50% refund agreed",
        )
    assert exc.value.dispute.id == dispute.id
    assert SettlementInstruction.objects.filter(dispute=dispute).count() == 1
    assert Order.objects.get(pk=42).status == Order.STATUS_RESOLVED_PARTIAL_REFUND
