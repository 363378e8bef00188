import re
import threading
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from rewards_service.errors import MissingFieldError, NotFoundError, ValidationError
from rewards_service.intake import OrderIntake, get_reward_name
from rewards_service.ledger import OrderLedger
from rewards_service.models import Order, OrderStatus


def test_submit_records_complete_order(intake, ledger, make_submission):
    order = intake.submit(make_submission(externalRefID="kyron-1", message="Well done"))

    assert order.referenceOrderID == "RA-00000001"
    assert order.status is OrderStatus.COMPLETE
    assert order.rewardName == "Amazon eGift Card"
    assert order.recipient.email == "sarah.johnson@kyronhr.com"
    assert order.deliveryMethod == "EMAIL"
    assert order.sendEmail is True
    assert order.externalRefID == "kyron-1"
    assert order.message == "Well done"
    assert order.senderName == "Emily Davis"
    assert ledger.get("RA-00000001") is order


def test_references_increase_and_are_unique(intake, make_submission):
    first = intake.submit(make_submission())
    second = intake.submit(make_submission())

    pattern = re.compile(r"^RA-\d{8}$")
    assert pattern.match(first.referenceOrderID)
    assert pattern.match(second.referenceOrderID)
    assert int(second.referenceOrderID[3:]) > int(first.referenceOrderID[3:])


def test_unknown_utid_falls_back_to_generic_name(intake, make_submission):
    order = intake.submit(make_submission(utid="U000000"))
    assert order.rewardName == "Digital Gift Card"
    assert get_reward_name("U761382") == "Starbucks Card"


def test_missing_top_level_fields_are_listed(intake, ledger):
    with pytest.raises(MissingFieldError) as excinfo:
        intake.submit({"customer_identifier": "kyron-hr-customer"})

    assert excinfo.value.fields == ["account_identifier", "order_info"]
    assert "account_identifier" in excinfo.value.message
    assert len(ledger) == 0


def test_missing_utid_is_listed_and_nothing_recorded(intake, ledger, make_submission):
    payload = make_submission()
    del payload["order_info"]["utid"]

    with pytest.raises(MissingFieldError) as excinfo:
        intake.submit(payload)

    assert "utid" in excinfo.value.fields
    assert "utid" in excinfo.value.message
    assert len(ledger) == 0
    assert ledger.list() == []


def test_missing_recipient_email_is_listed(intake, make_submission):
    with pytest.raises(MissingFieldError) as excinfo:
        intake.submit(make_submission(recipient={"firstName": "Sarah"}, amount=None))
    assert excinfo.value.fields == ["amount", "recipient.email"]


def test_non_positive_amount_rejected(intake, ledger, make_submission):
    with pytest.raises(ValidationError, match="positive"):
        intake.submit(make_submission(amount=-5))
    assert len(ledger) == 0


def test_malformed_payload_rejected(intake, make_submission):
    with pytest.raises(ValidationError, match="order_info.amount"):
        intake.submit(make_submission(amount="fifty"))


def test_explicit_send_email_false_is_kept(intake, make_submission):
    order = intake.submit(make_submission(sendEmail=False, senderLastName=None))
    assert order.sendEmail is False
    assert order.senderName == "Emily"


def test_ledger_get_unknown_reference(ledger):
    with pytest.raises(NotFoundError, match="Order not found"):
        ledger.get("RA-00000042")


def test_ledger_lists_newest_first(make_submission):
    ledger = OrderLedger()
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    stamps = iter([base, base + timedelta(minutes=5), base + timedelta(minutes=5), base - timedelta(days=1)])
    intake = OrderIntake(ledger, clock=lambda: next(stamps))

    refs = [intake.submit(make_submission()).referenceOrderID for _ in range(4)]

    listed = [order.referenceOrderID for order in ledger.list()]
    assert listed == [refs[1], refs[2], refs[0], refs[3]]


def test_ledger_rejects_duplicate_reference(intake, ledger, make_submission):
    order = intake.submit(make_submission())
    with pytest.raises(ValidationError, match="Duplicate"):
        ledger.append(order)


def test_order_status_transitions_once(intake, make_submission):
    order = intake.submit(make_submission())
    with pytest.raises(ValueError):
        order.mark_failed()


def test_reference_counter_is_serialized():
    ledger = OrderLedger()
    issued = []

    def worker():
        for _ in range(200):
            issued.append(ledger.next_reference())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(issued) == 1600
    assert len(set(issued)) == 1600
    assert ledger.next_reference() == "RA-00001601"


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_amount_rejected(intake, ledger, make_submission, amount):
    with pytest.raises(ValidationError, match="order_info.amount"):
        intake.submit(make_submission(amount=amount))
    assert len(ledger) == 0
    assert ledger.list() == []


def test_recorded_orders_are_read_only(intake, ledger, make_submission):
    order = intake.submit(make_submission())
    stored = ledger.get(order.referenceOrderID)

    with pytest.raises(PydanticValidationError):
        stored.amount = 1
    with pytest.raises(PydanticValidationError):
        stored.status = OrderStatus.FAILED
    with pytest.raises(PydanticValidationError):
        stored.recipient.email = "someone.else@kyronhr.com"

    assert ledger.get(order.referenceOrderID).amount == 50
    assert ledger.get(order.referenceOrderID).status is OrderStatus.COMPLETE


def test_transition_returns_new_order():
    pending = Order(
        referenceOrderID="RA-00000009",
        utid="U163059",
        rewardName="Amazon eGift Card",
        recipient={"email": "john.smith@kyronhr.com"},
        amount=25,
        createdAt=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )

    failed = pending.mark_failed()

    assert failed.status is OrderStatus.FAILED
    assert pending.status is OrderStatus.PENDING
    assert failed.referenceOrderID == pending.referenceOrderID
