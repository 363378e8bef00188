"""
checkout.py — Checkout and Order Composition

Combines the current cart with a gift purpose and a set of recipients into
an `OrderIntent`, and turns an intent into the order submissions accepted by
the intake endpoint.

Cost policy:
    The whole cart is replicated for every selected recipient, so the order
    cost is `cart.total_amount * len(recipients)`.
"""

from datetime import date, datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .cart import Cart, CartLine
from .employees import Employee
from .errors import ValidationError
from .models import OrderInfo, OrderSubmission, SubmissionRecipient


class Purpose(BaseModel):
    """
    Policy describing how recipients and delivery dates behave for an order.

    Attributes:
        tag (str): Identifier, e.g. 'birthday'.
        label (str): Display label in the checkout dialog.
        requires_date (bool): Whether a scheduled date must be supplied.
        allows_multiple_recipients (bool): Whether more than one recipient may be selected.
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    requires_date: bool
    allows_multiple_recipients: bool


BIRTHDAY = Purpose(
    tag="birthday",
    label="Send gift cards on employee DOB",
    requires_date=False,
    allows_multiple_recipients=True,
)

SCHEDULED_INCENTIVE = Purpose(
    tag="scheduled-incentive",
    label="Q2 Incentives",
    requires_date=True,
    allows_multiple_recipients=True,
)

PURPOSES = {purpose.tag: purpose for purpose in (BIRTHDAY, SCHEDULED_INCENTIVE)}


def get_purpose(tag):
    try:
        return PURPOSES[tag]
    except KeyError:
        raise ValidationError(f"Unknown purpose '{tag}', expected one of: {', '.join(PURPOSES)}") from None


class Sender(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str = ""
    email: Optional[str] = None


class OrderIntent(BaseModel):
    """
    A composed but not yet submitted order.

    Attributes:
        lines (Tuple[CartLine, ...]): Cart lines sent to every recipient.
        purpose (Purpose): Selected gift purpose.
        recipients (Tuple[Employee, ...]): Selected recipients, without duplicates.
        scheduled_date (date, optional): Delivery date, required by some purposes.
        total_cart_value (float): Cart total for one recipient.
        total_order_cost (float): Cart total times the number of recipients.
        order_date (datetime): When the intent was composed (UTC).
    """
    model_config = ConfigDict(frozen=True)

    lines: Tuple[CartLine, ...]
    purpose: Purpose
    recipients: Tuple[Employee, ...]
    scheduled_date: Optional[date] = None
    total_cart_value: float
    total_order_cost: float
    order_date: datetime


def compute_order_cost(cart: Cart, recipient_count: int) -> float:
    """Returns the cost of sending the whole cart to `recipient_count` recipients."""
    return cart.total_amount * recipient_count


def compose_order(cart, purpose, recipients, scheduled_date=None, today=None):
    """
    Validates a checkout selection and captures it as an `OrderIntent`.

    Args:
        cart (Cart): The current cart snapshot.
        purpose (Purpose): The selected gift purpose.
        recipients (Iterable[Employee]): Selected recipients. Duplicates are dropped.
        scheduled_date (date, optional): Delivery date.
        today (date, optional): Reference date for the scheduled-date check.

    Returns:
        OrderIntent: The composed intent with `order_date` set to now.

    Raises:
        ValidationError: If the cart is empty, no recipient is selected, several
            recipients are selected for a single-recipient purpose, or the
            purpose requires a date that is missing or in the past.
    """
    unique = {}
    for recipient in recipients or ():
        unique.setdefault(recipient.id, recipient)
    recipients = tuple(unique.values())

    if cart.is_empty:
        raise ValidationError("Cart is empty")
    if not recipients:
        raise ValidationError("At least one recipient must be selected")
    if not purpose.allows_multiple_recipients and len(recipients) > 1:
        raise ValidationError(f"Purpose '{purpose.tag}' allows exactly one recipient, got {len(recipients)}")
    if purpose.requires_date:
        if scheduled_date is None:
            raise ValidationError(f"Purpose '{purpose.tag}' requires a scheduled date")
        today = today or date.today()
        if scheduled_date < today:
            raise ValidationError(f"Scheduled date {scheduled_date.isoformat()} is in the past")

    return OrderIntent(
        lines=cart.items,
        purpose=purpose,
        recipients=recipients,
        scheduled_date=scheduled_date,
        total_cart_value=cart.total_amount,
        total_order_cost=compute_order_cost(cart, len(recipients)),
        order_date=datetime.now(timezone.utc),
    )


def _default_message(purpose, recipient, sender):
    if purpose.tag == BIRTHDAY.tag:
        return f"Happy Birthday, {recipient.first_name}! 🎉 Hope you have a wonderful day!"
    return f"Recognition from {sender.first_name} {sender.last_name}".rstrip()


def build_submissions(intent, customer_identifier, account_identifier, sender):
    """
    Expands an intent into one `OrderSubmission` per recipient, line and unit.

    Each submission carries an `externalRefID` of the form
    `kyron-<purpose>-<employee id>-<n>`, numbered per recipient from 1.
    """
    submissions = []
    for recipient in intent.recipients:
        n = 0
        for line in intent.lines:
            for _ in range(line.quantity):
                n += 1
                order_info = OrderInfo(
                    utid=line.catalog_item.utid,
                    amount=line.amount,
                    recipient=SubmissionRecipient(
                        email=recipient.email,
                        firstName=recipient.first_name,
                        lastName=recipient.last_name,
                    ),
                    sendEmail=True,
                    externalRefID=f"kyron-{intent.purpose.tag}-{recipient.id}-{n}",
                    message=line.message or _default_message(intent.purpose, recipient, sender),
                    senderFirstName=sender.first_name,
                    senderLastName=sender.last_name,
                    senderEmail=sender.email,
                    emailSubject=f"🎉 You've received recognition from {sender.first_name}!",
                )
                submissions.append(OrderSubmission(
                    customer_identifier=customer_identifier,
                    account_identifier=account_identifier,
                    order_info=order_info,
                ))
    return submissions
