"""
cart.py — Cart Aggregate

The cart is an immutable snapshot of buyer-configured lines. Every change is
expressed as an action and applied by `reduce_cart(cart, action)`, which
returns a new snapshot with recomputed totals. `CartSession` holds the
current snapshot for one checkout session and offers method-style access.

Invariant (after every action):
    total_amount == sum(line.amount * line.quantity)
    total_items  == sum(line.quantity)
"""

import uuid
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError
from .models import Brand, CatalogItem
from .logging_config import get_logger

log = get_logger(__name__)


class Recipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class CartLine(BaseModel):
    """
    One buyer-configured selection of a catalog item.

    Attributes:
        id (str): Unique within the cart.
        brand (Brand): The brand the item belongs to.
        catalog_item (CatalogItem): The selected reward variant.
        amount (float): Value per unit, within the item's bounds.
        quantity (int): Number of units, at least 1.
        recipient (Recipient, optional): Per-line recipient override.
        message (str, optional): Personal message for this line.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    brand: Brand
    catalog_item: CatalogItem
    amount: float
    quantity: int = Field(default=1, ge=1)
    recipient: Optional[Recipient] = None
    message: Optional[str] = None

    @property
    def subtotal(self):
        return self.amount * self.quantity


class Cart(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: Tuple[CartLine, ...] = ()
    total_amount: float = 0
    total_items: int = 0

    @property
    def is_empty(self):
        return not self.items

    def get_line(self, line_id):
        for line in self.items:
            if line.id == line_id:
                return line
        return None


EMPTY_CART = Cart()


# --- Actions ---

class AddItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    brand: Brand
    catalog_item: CatalogItem
    amount: float
    recipient: Optional[Recipient] = None
    message: Optional[str] = None
    line_id: Optional[str] = None


class RemoveItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_id: str


class UpdateQuantity(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_id: str
    quantity: int


class UpdateLine(BaseModel):
    """Replaces amount, recipient or message on an existing line. Unset fields are left alone."""
    model_config = ConfigDict(frozen=True)

    line_id: str
    amount: Optional[float] = None
    recipient: Optional[Recipient] = None
    message: Optional[str] = None


class ClearCart(BaseModel):
    model_config = ConfigDict(frozen=True)


def _check_amount(catalog_item, amount):
    if not catalog_item.accepts(amount):
        raise ValidationError(
            f"Amount {amount} for {catalog_item.rewardName} must be between "
            f"{catalog_item.minValue} and {catalog_item.maxValue} {catalog_item.currencyCode}"
        )


def _with_items(items):
    items = tuple(items)
    return Cart(
        items=items,
        total_amount=sum(line.amount * line.quantity for line in items),
        total_items=sum(line.quantity for line in items),
    )


def new_line_id(brand, catalog_item):
    return f"{brand.brandKey}-{catalog_item.utid}-{uuid.uuid4().hex[:12]}"


def reduce_cart(cart: Cart, action) -> Cart:
    """
    Applies one action to a cart snapshot and returns the resulting snapshot.

    Args:
        cart (Cart): The current snapshot; never modified.
        action: One of AddItem, RemoveItem, UpdateQuantity, UpdateLine, ClearCart.

    Returns:
        Cart: A new snapshot with totals recomputed from its lines.

    Raises:
        ValidationError: If an added or updated amount is outside the item's
            bounds. The input cart is unaffected.
        TypeError: If `action` is not a cart action.
    """
    if isinstance(action, AddItem):
        _check_amount(action.catalog_item, action.amount)
        line = CartLine(
            id=action.line_id or new_line_id(action.brand, action.catalog_item),
            brand=action.brand,
            catalog_item=action.catalog_item,
            amount=action.amount,
            quantity=1,
            recipient=action.recipient,
            message=action.message,
        )
        return _with_items(cart.items + (line,))

    if isinstance(action, RemoveItem):
        return _with_items(line for line in cart.items if line.id != action.line_id)

    if isinstance(action, UpdateQuantity):
        if action.quantity <= 0:
            return reduce_cart(cart, RemoveItem(line_id=action.line_id))
        return _with_items(
            line.model_copy(update={"quantity": action.quantity}) if line.id == action.line_id else line
            for line in cart.items
        )

    if isinstance(action, UpdateLine):
        changes = {
            key: getattr(action, key)
            for key in ("amount", "recipient", "message")
            if key in action.model_fields_set
        }
        if changes.get("amount") is None:
            changes.pop("amount", None)
        new_items = []
        for line in cart.items:
            if line.id == action.line_id:
                if "amount" in changes:
                    _check_amount(line.catalog_item, changes["amount"])
                line = line.model_copy(update=changes)
            new_items.append(line)
        return _with_items(new_items)

    if isinstance(action, ClearCart):
        return EMPTY_CART

    raise TypeError(f"Unknown cart action: {action!r}")


class CartSession:
    """
    Owns the cart of a single checkout session.

    Each method dispatches an action through `reduce_cart` and replaces the
    held snapshot only when the action succeeds.
    """

    def __init__(self, cart: Optional[Cart] = None):
        self.cart = cart or EMPTY_CART

    def dispatch(self, action):
        self.cart = reduce_cart(self.cart, action)
        return self.cart

    def add_item(self, brand, catalog_item, amount, recipient=None, message=None):
        """Adds a new line with quantity 1 and returns it."""
        line_id = new_line_id(brand, catalog_item)
        self.dispatch(AddItem(
            brand=brand,
            catalog_item=catalog_item,
            amount=amount,
            recipient=recipient,
            message=message,
            line_id=line_id,
        ))
        log.debug(f"[Cart] Added {catalog_item.utid} ({amount} {catalog_item.currencyCode}) as line {line_id}.")
        return self.cart.get_line(line_id)

    def remove_item(self, line_id):
        return self.dispatch(RemoveItem(line_id=line_id))

    def update_quantity(self, line_id, quantity):
        return self.dispatch(UpdateQuantity(line_id=line_id, quantity=quantity))

    def update_line(self, line_id, **changes):
        return self.dispatch(UpdateLine(line_id=line_id, **changes))

    def clear(self):
        return self.dispatch(ClearCart())
