"""
models.py — Data Models for the Rewards Catalog and Order Intake

This module defines the wire-level data structures of the rewards service.
It uses Pydantic models to ensure type safety and automatic validation of
catalog files, inbound order submissions and recorded orders. Field names
follow the JSON payloads exchanged with the portal.

Models:
    - CatalogItem: A purchasable reward variant identified by its utid.
    - Brand: A merchant offering one or more catalog items.
    - Catalog: The full static catalog file.
    - OrderSubmission: The order payload received by the intake endpoint.
    - Order: A ledger-recorded gift card order.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CatalogItem(BaseModel):
    """
    Represents a single reward variant of a brand.

    Attributes:
        utid (str): Unique reward-variant identifier.
        rewardName (str): Display name of the reward.
        currencyCode (str): ISO 4217 currency code (e.g., 'USD').
        minValue (float): Smallest amount a buyer may choose.
        maxValue (float): Largest amount a buyer may choose. Never below minValue.
        countries (List[str]): Countries the reward can be delivered to.
        fulfillmentType (str): Delivery type, e.g. 'DIGITAL'.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    utid: str
    rewardName: str
    currencyCode: str = "USD"
    minValue: float
    maxValue: float
    countries: List[str] = Field(default_factory=list)
    fulfillmentType: str = "DIGITAL"

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.minValue > self.maxValue:
            raise ValueError(f"minValue {self.minValue} exceeds maxValue {self.maxValue} for {self.utid}")
        return self

    def accepts(self, amount: float) -> bool:
        """Returns whether `amount` lies within the item's value bounds."""
        return self.minValue <= amount <= self.maxValue


class Brand(BaseModel):
    """
    Represents a merchant in the catalog.

    Attributes:
        brandKey (str): Unique brand identifier.
        brandName (str): Display name.
        description (str): Marketing description shown in the storefront.
        imageUrl (str): Logo URL.
        category (str): Catalog category the brand is listed under.
        items (List[CatalogItem]): Purchasable variants; at least one.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    brandKey: str
    brandName: str
    description: str = ""
    imageUrl: str = ""
    category: str = ""
    items: List[CatalogItem] = Field(..., min_length=1)

    def get_item(self, utid: str) -> Optional[CatalogItem]:
        """Returns the variant with the given utid, or None."""
        for item in self.items:
            if item.utid == utid:
                return item
        return None


class Catalog(BaseModel):
    """The static catalog file as loaded from disk."""
    model_config = ConfigDict(frozen=True, extra="allow")

    catalogName: str
    totalBrands: int
    categories: List[str] = Field(default_factory=list)
    brands: List[Brand]


class SubmissionRecipient(BaseModel):
    """Recipient block of an order submission. Only `email` is required by the intake."""
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None


class OrderInfo(BaseModel):
    """
    The `order_info` block of an order submission.

    `utid`, `amount` and `recipient` are required, but are declared optional
    here so the intake can report every missing field in one error.
    """
    model_config = ConfigDict(extra="allow")

    utid: Optional[str] = None
    amount: Optional[float] = Field(None, allow_inf_nan=False)
    recipient: Optional[SubmissionRecipient] = None
    sendEmail: Optional[bool] = None
    externalRefID: Optional[str] = None
    message: Optional[str] = None
    senderFirstName: Optional[str] = None
    senderLastName: Optional[str] = None
    senderEmail: Optional[str] = None
    emailSubject: Optional[str] = None


class OrderSubmission(BaseModel):
    """
    Represents an order request sent to the intake endpoint.

    Attributes:
        customer_identifier (str): Rewards platform customer the order is billed to.
        account_identifier (str): Funding account of that customer.
        order_info (OrderInfo): The reward, amount and recipient of the order.
    """
    customer_identifier: Optional[str] = None
    account_identifier: Optional[str] = None
    order_info: Optional[OrderInfo] = None


class OrderStatus(str, Enum):
    """
    Lifecycle of a recorded order.

    PENDING is the initial state; an order moves to COMPLETE or FAILED
    exactly once and never leaves either of them.
    """
    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


class OrderRecipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str


class Order(BaseModel):
    """
    A gift card order recorded in the ledger.

    Attributes:
        referenceOrderID (str): Unique reference, e.g. 'RA-00000001'.
        status (OrderStatus): Current lifecycle state.
        utid (str): Ordered reward variant.
        rewardName (str): Display name resolved from the utid.
        recipient (OrderRecipient): Delivery address.
        sendEmail (bool): Whether the reward is emailed to the recipient.
        deliveryMethod (str): Always 'EMAIL'.
        externalRefID (str, optional): Caller-supplied correlation id.
        amount (float): Reward value.
        createdAt (datetime): Creation timestamp (UTC).
        message (str, optional): Personal message to the recipient.
        senderName (str): Sender display name.
    """
    model_config = ConfigDict(frozen=True)

    referenceOrderID: str
    status: OrderStatus = OrderStatus.PENDING
    utid: str
    rewardName: str
    recipient: OrderRecipient
    sendEmail: bool = True
    deliveryMethod: str = "EMAIL"
    externalRefID: Optional[str] = None
    amount: float = Field(..., allow_inf_nan=False)
    createdAt: datetime
    message: Optional[str] = None
    senderName: str = ""

    @field_validator("amount")
    @classmethod
    def _positive_amount(cls, value):
        if value <= 0:
            raise ValueError("amount must be positive")
        return value

    def mark_complete(self):
        """Returns a COMPLETE copy of this PENDING order."""
        return self._transition(OrderStatus.COMPLETE)

    def mark_failed(self):
        """Returns a FAILED copy of this PENDING order."""
        return self._transition(OrderStatus.FAILED)

    def _transition(self, target):
        if self.status is not OrderStatus.PENDING:
            raise ValueError(f"Order {self.referenceOrderID} is already {self.status.value}")
        return self.model_copy(update={"status": target})
