"""
intake.py — Order Intake

Validates inbound order submissions, materializes them as ledger orders and
records them. No real fulfillment happens: the fulfillment step is a stub
that completes every order immediately.

Intake Steps:
1. Check the top-level fields (customer_identifier, account_identifier, order_info)
2. Check the order_info fields (utid, amount, recipient with email)
3. Issue the next order reference from the ledger
4. Resolve the reward name from the utid
5. Fulfill (stub: PENDING → COMPLETE)
6. Append the order to the ledger
"""

import math
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from .errors import MissingFieldError, ValidationError
from .models import Order, OrderRecipient, OrderSubmission
from .logging_config import get_logger

log = get_logger(__name__)

REWARD_NAMES = {
    "U163059": "Amazon eGift Card",
    "U761382": "Starbucks Card",
    "U147689": "PayPal USD",
    "U792088": "Visa Prepaid Card USD",
    "U561593": "Reward Link Preferred + Donations",
}
FALLBACK_REWARD_NAME = "Digital Gift Card"


def get_reward_name(utid):
    return REWARD_NAMES.get(utid, FALLBACK_REWARD_NAME)


def _is_missing(value):
    return value is None or value == ""


class OrderIntake:
    """
    Entry point for order submissions.

    Args:
        ledger (OrderLedger): Store receiving created orders and issuing references.
        clock (callable, optional): Returns the creation timestamp; defaults to UTC now.
    """

    def __init__(self, ledger, clock=None):
        self.ledger = ledger
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def submit(self, request):
        """
        Validates a submission and records the resulting order.

        Args:
            request (OrderSubmission | Mapping): The submission payload.

        Returns:
            Order: The recorded order with status COMPLETE.

        Raises:
            MissingFieldError: If required top-level or order_info fields are absent.
            ValidationError: If the payload is malformed or the amount is not a positive finite number.
        """
        submission = self._parse(request)
        self._check_required(submission)

        info = submission.order_info
        if not math.isfinite(info.amount) or info.amount <= 0:
            raise ValidationError("order_info.amount must be a positive number")

        reference = self.ledger.next_reference()
        log_prefix = f"[Order: {reference}]"

        order = Order(
            referenceOrderID=reference,
            utid=info.utid,
            rewardName=get_reward_name(info.utid),
            recipient=OrderRecipient(email=info.recipient.email),
            sendEmail=True if info.sendEmail is None else info.sendEmail,
            externalRefID=info.externalRefID,
            amount=info.amount,
            createdAt=self.clock(),
            message=info.message,
            senderName=" ".join(part for part in (info.senderFirstName, info.senderLastName) if part),
        )

        order = self._fulfill(order)
        self.ledger.append(order)

        log.info(
            f"{log_prefix} Order created: recipient={order.recipient.email} "
            f"amount={order.amount} utid={order.utid} status={order.status.value}"
        )
        return order

    def _fulfill(self, order):
        # Stub: the rewards platform is never called, so every order completes.
        # A real integration places the platform order here and calls
        # order.mark_failed() when it is rejected.
        return order.mark_complete()

    @staticmethod
    def _parse(request):
        if isinstance(request, OrderSubmission):
            return request
        try:
            return OrderSubmission.model_validate(request)
        except PydanticValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ValidationError(f"Invalid order submission fields: {fields}") from e

    @staticmethod
    def _check_required(submission):
        missing = [
            name
            for name in ("customer_identifier", "account_identifier", "order_info")
            if _is_missing(getattr(submission, name))
        ]
        if missing:
            raise MissingFieldError("Missing required fields", missing)

        info = submission.order_info
        missing = [name for name in ("utid", "amount", "recipient") if _is_missing(getattr(info, name))]
        if info.recipient is not None and _is_missing(info.recipient.email):
            missing.append("recipient.email")
        if missing:
            raise MissingFieldError("Missing required order_info fields", missing)
