"""
workflow.py — Checkout Orchestration

This module contains the checkout workflow of the rewards storefront.
It turns the cart of a checkout session into recorded gift card orders.

Workflow Overview:
1. Compose the order intent from the cart, purpose and recipients
2. Expand the intent into one order submission per recipient, line and unit
3. Submit every order (in-process intake or the REST client)
4. Clear the cart once every order has been recorded
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict

from . import config
from .checkout import OrderIntent, build_submissions, compose_order
from .errors import RewardsError
from .models import Order
from .logging_config import get_logger

log = get_logger(__name__)


class CheckoutResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    intent: OrderIntent
    orders: Tuple[Order, ...]

    @property
    def total_cost(self):
        return self.intent.total_order_cost


def process_checkout(
        session,
        purpose,
        recipients,
        submit,
        sender,
        scheduled_date=None,
        customer_identifier=None,
        account_identifier=None,
):
    """
    Executes the complete checkout for one cart session.

    Args:
        session (CartSession): The session whose cart is checked out.
        purpose (Purpose): The selected gift purpose.
        recipients (Iterable[Employee]): Selected recipients.
        submit (callable): Records one `OrderSubmission` and returns the `Order`,
            e.g. `OrderIntake.submit` or `RewardsOrderClient.submit_order`.
        sender (Sender): The manager sending the gifts.
        scheduled_date (date, optional): Delivery date for purposes that require one.
        customer_identifier (str, optional): Defaults to `REWARDS_CUSTOMER_ID`.
        account_identifier (str, optional): Defaults to `REWARDS_ACCOUNT_ID`.

    Returns:
        CheckoutResult: The composed intent and the recorded orders.

    Raises:
        ValidationError: If the selection cannot be composed into an order.
        RewardsError: If recording an order fails. The cart is left untouched;
            orders recorded before the failure stay in the ledger.
    """
    intent = compose_order(session.cart, purpose, recipients, scheduled_date)
    log_prefix = f"[Checkout: {purpose.tag}]"
    log.info(
        f"{log_prefix} Starting checkout of {len(intent.lines)} line(s) for "
        f"{len(intent.recipients)} recipient(s), total {intent.total_order_cost:.2f}."
    )

    submissions = build_submissions(
        intent,
        customer_identifier or config.CUSTOMER_IDENTIFIER,
        account_identifier or config.ACCOUNT_IDENTIFIER,
        sender,
    )

    orders = []
    try:
        for submission in submissions:
            orders.append(submit(submission))
    except RewardsError as e:
        log.error(
            f"{log_prefix} Checkout aborted after {len(orders)} of {len(submissions)} order(s): {e.message}. "
            f"Cart kept."
        )
        raise

    session.clear()
    log.info(f"{log_prefix} Checkout complete: {', '.join(o.referenceOrderID for o in orders)}.")
    return CheckoutResult(intent=intent, orders=tuple(orders))
