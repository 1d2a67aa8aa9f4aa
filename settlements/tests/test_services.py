import hashlib
import hmac
import json
from decimal import Decimal

import httpx
import pytest
from common.choices import DisputeResolution
from disputes.tests.factories import DisputeFactory
from django.db import IntegrityError, transaction
from orders.tests.factories import OrderFactory
from settlements.models import SettlementInstruction
from settlements.services import (
    compute_settlement,
    create_instruction,
    dispatch_instruction,
    retry_instruction,
    sign_payload,
)


class DummyResp:
    def __init__(self, status_code=200):
        self.status_code = status_code


def _instruction(resolution=DisputeResolution.REFUND_BUYER, refund_percentage=None):
    order = OrderFactory(status="resolved_refund", price=Decimal("80.00"), commission_rate=Decimal("10.00"))
    dispute = DisputeFactory(order=order, resolved=True, resolution=resolution, refund_percentage=refund_percentage)
    return create_instruction(dispute=dispute)


@pytest.mark.parametrize(
    "resolution,percentage,refund,seller,commission",
    [
        (DisputeResolution.REFUND_BUYER, None, "80.00", "0.00", "0.00"),
        (DisputeResolution.RELEASE_TO_SELLER, None, "0.00", "72.00", "8.00"),
        (DisputeResolution.PARTIAL_REFUND, Decimal("50"), "40.00", "36.00", "4.00"),
        (DisputeResolution.PARTIAL_REFUND, Decimal("33.33"), "26.66", "48.01", "5.33"),
    ],
)
def test_compute_settlement_splits_amount(resolution, percentage, refund, seller, commission):
    amounts = compute_settlement(
        price=Decimal("80.00"), commission_rate=Decimal("10.00"), resolution=resolution, refund_percentage=percentage
    )
    assert amounts.order_amount == Decimal("80.00")
    assert amounts.refund_amount == Decimal(refund)
    assert amounts.seller_amount == Decimal(seller)
    assert amounts.commission_amount == Decimal(commission)
    assert amounts.refund_amount + amounts.seller_amount + amounts.commission_amount == amounts.order_amount


def test_compute_settlement_rejects_unknown_resolution():
    with pytest.raises(ValueError):
        compute_settlement(price=Decimal("1"), commission_rate=Decimal("0"), resolution="coin_flip")


@pytest.mark.django_db
def test_one_instruction_per_dispute():
    instruction = _instruction()
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            create_instruction(dispute=instruction.dispute)
    assert SettlementInstruction.objects.count() == 1


@pytest.mark.django_db
def test_without_endpoint_instruction_waits_for_pickup(monkeypatch, settings):
    settings.SETTLEMENT_WEBHOOK_URL = ""

    def fail_post(*args, **kwargs):
        raise AssertionError("no HTTP call expected")

    monkeypatch.setattr("httpx.post", fail_post)
    instruction = dispatch_instruction(_instruction().id)
    assert instruction.status == SettlementInstruction.STATUS_PENDING
    assert instruction.attempts == 0


@pytest.mark.django_db
def test_dispatch_signs_and_posts_payload(monkeypatch, settings):
    settings.SETTLEMENT_WEBHOOK_URL = "https://settle.example.test/hook"
    settings.SETTLEMENT_WEBHOOK_SECRET = "whsec_test"
    seen = {}

    def fake_post(url, content=None, headers=None, timeout=None):
        seen.update(url=url, content=content, headers=headers)
        return DummyResp(200)

    monkeypatch.setattr("httpx.post", fake_post)
    instruction = dispatch_instruction(_instruction(DisputeResolution.PARTIAL_REFUND, Decimal("50.00")).id)

    assert instruction.status == SettlementInstruction.STATUS_DISPATCHED
    assert instruction.attempts == 1
    assert seen["url"] == "https://settle.example.test/hook"
    expected = hmac.new(b"whsec_test", msg=seen["content"], digestmod=hashlib.sha512).hexdigest()
    assert seen["headers"]["X-Settlement-Signature"] == expected == sign_payload(seen["content"])
    body = json.loads(seen["content"])
    assert body["refund_amount"] == "40.00" and body["seller_amount"] == "36.00"


@pytest.mark.django_db
def test_dispatch_happens_at_most_once(monkeypatch, settings):
    settings.SETTLEMENT_WEBHOOK_URL = "https://settle.example.test/hook"
    calls = []

    def fake_post(url, content=None, headers=None, timeout=None):
        calls.append(url)
        return DummyResp(204)

    monkeypatch.setattr("httpx.post", fake_post)
    instruction = _instruction()
    dispatch_instruction(instruction.id)
    again = dispatch_instruction(instruction.id)
    assert len(calls) == 1
    assert again.status == SettlementInstruction.STATUS_DISPATCHED


@pytest.mark.django_db
def test_failed_dispatch_is_recorded_and_reported(monkeypatch, settings):
    settings.SETTLEMENT_WEBHOOK_URL = "https://settle.example.test/hook"
    reported = []
    monkeypatch.setattr("httpx.post", lambda *a, **k: DummyResp(502))
    monkeypatch.setattr("sentry_sdk.capture_message", lambda msg, level=None: reported.append(msg))

    instruction = dispatch_instruction(_instruction().id)
    assert instruction.status == SettlementInstruction.STATUS_FAILED
    assert instruction.last_error == "HTTP 502"
    assert reported == ["settlement_dispatch_failed"]


@pytest.mark.django_db
def test_transport_error_then_retry_succeeds(monkeypatch, settings):
    settings.SETTLEMENT_WEBHOOK_URL = "https://settle.example.test/hook"
    monkeypatch.setattr("sentry_sdk.capture_message", lambda *a, **k: None)

    def boom(*args, **kwargs):
        raise httpx.ConnectError("refused")

    monkeypatch.setattr("httpx.post", boom)
    instruction = dispatch_instruction(_instruction().id)
    assert instruction.status == SettlementInstruction.STATUS_FAILED
    assert instruction.last_error == "ConnectError"

    monkeypatch.setattr("httpx.post", lambda *a, **k: DummyResp(200))
    retried = retry_instruction(instruction.id)
    assert retried.status == SettlementInstruction.STATUS_DISPATCHED
    assert retried.attempts == 2 and retried.last_error == ""


@pytest.mark.django_db
def test_retry_ignores_instructions_that_did_not_fail(settings):
    settings.SETTLEMENT_WEBHOOK_URL = ""
    instruction = _instruction()
    assert retry_instruction(instruction.id).status == SettlementInstruction.STATUS_PENDING


@pytest.mark.django_db
def test_malformed_endpoint_marks_instruction_failed(monkeypatch, settings):
    settings.SETTLEMENT_WEBHOOK_URL = "https://settle.example.test/hook"
    monkeypatch.setattr("sentry_sdk.capture_message", lambda *a, **k: None)

    def invalid(*args, **kwargs):
        raise httpx.InvalidURL("Invalid port")

    monkeypatch.setattr("httpx.post", invalid)
    instruction = dispatch_instruction(_instruction().id)
    assert instruction.status == SettlementInstruction.STATUS_FAILED
    assert instruction.last_error == "InvalidURL"

    monkeypatch.setattr("httpx.post", lambda *a, **k: DummyResp(200))
    assert retry_instruction(instruction.id).status == SettlementInstruction.STATUS_DISPATCHED
