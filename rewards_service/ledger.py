"""
ledger.py — Append-only Order Ledger

Holds every recorded order for the lifetime of the process and issues the
human-readable order references. There are no update or delete operations.
"""

import threading

from .errors import NotFoundError, ValidationError

REFERENCE_PREFIX = "RA-"
REFERENCE_DIGITS = 8


class OrderLedger:
    """
    In-memory order store with a serialized reference counter.

    References are `RA-` followed by an 8-digit zero-padded sequence number,
    starting at 1. They are issued under a lock so concurrent request threads
    never receive the same reference, and are never reused.
    """

    def __init__(self, start=1):
        self._lock = threading.Lock()
        self._next = start
        self._orders = []
        self._by_reference = {}

    def __len__(self):
        return len(self._orders)

    def next_reference(self):
        with self._lock:
            number = self._next
            self._next += 1
        return f"{REFERENCE_PREFIX}{number:0{REFERENCE_DIGITS}d}"

    def append(self, order):
        """
        Records an order.

        Raises:
            ValidationError: If an order with the same reference already exists.
        """
        with self._lock:
            if order.referenceOrderID in self._by_reference:
                raise ValidationError(f"Duplicate order reference: {order.referenceOrderID}")
            self._orders.append(order)
            self._by_reference[order.referenceOrderID] = order
        return order

    def get(self, reference):
        try:
            return self._by_reference[reference]
        except KeyError:
            raise NotFoundError("Order not found") from None

    def list(self):
        """Returns all orders, newest first; equal timestamps keep insertion order."""
        with self._lock:
            orders = list(self._orders)
        return sorted(orders, key=lambda order: order.createdAt, reverse=True)
