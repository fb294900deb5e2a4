"""Cart store: the line items of the current browsing session.

All mutation goes through ``CartStore`` methods. Totals and counts are
recomputed from the line items on every read; nothing is cached.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional

import structlog

from .notifications import NotificationEmitter, Severity
from .validation import to_price

logger = structlog.get_logger()

ZERO = Decimal("0")


@dataclass(frozen=True)
class LineItem:
    name: str
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartSnapshot:
    """Immutable read of the cart at one point in time."""

    items: tuple[LineItem, ...] = ()

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items), ZERO)

    @property
    def item_count(self) -> int:
        """Sum of quantities across all lines."""
        return sum(item.quantity for item in self.items)

    def is_empty(self) -> bool:
        return not self.items

    def get(self, name: str) -> Optional[LineItem]:
        for item in self.items:
            if item.name == name:
                return item
        return None


@dataclass
class _Line:
    name: str
    unit_price: Decimal
    quantity: int


class CartStore:
    """
    Owns the cart's line items.

    Every mutation calls the registered change listeners synchronously
    with a fresh snapshot, so projections are repainted before the
    mutating call returns. A failing listener is logged and skipped. Add and remove emit a notification; routine
    quantity edits do not.
    """

    def __init__(self, notifier: Optional[NotificationEmitter] = None):
        self._lines: dict[str, _Line] = {}  # name -> _Line, insertion ordered
        self._notifier = notifier
        self._listeners: list[Callable[[CartSnapshot], None]] = []

    def subscribe(self, listener: Callable[[CartSnapshot], None]) -> None:
        """Register a callback run after every mutation."""
        self._listeners.append(listener)

    def add_item(self, name: str, price: Any) -> None:
        """Add one unit of ``name``; a repeat add bumps the quantity.

        The price is checked on every call, but a repeat add keeps the
        unit price the line was created with.
        """
        unit_price = to_price(price)
        line = self._lines.get(name)
        if line is not None:
            line.quantity += 1
        else:
            line = _Line(name=name, unit_price=unit_price, quantity=1)
            self._lines[name] = line

        logger.info("item_added", name=name, quantity=line.quantity)
        self._changed()
        self._notify(f"{name} added to cart!")

    def remove_item(self, name: str) -> None:
        """Drop the line for ``name``. Absent names are not an error."""
        removed = self._lines.pop(name, None)
        if removed is not None:
            logger.info("item_removed", name=name)
        self._changed()
        self._notify(f"{name} removed from cart!")

    def adjust_quantity(self, name: str, delta: int) -> None:
        """Change the quantity of ``name`` by ``delta``.

        A line driven to zero or below is removed exactly as
        ``remove_item`` would. Unknown names are ignored.
        """
        line = self._lines.get(name)
        if line is None:
            return
        new_quantity = line.quantity + delta
        if new_quantity <= 0:
            self.remove_item(name)
            return

        line.quantity = new_quantity
        logger.debug("quantity_adjusted", name=name, quantity=new_quantity)
        self._changed()

    def clear(self) -> None:
        """Remove every line. Clearing an empty cart changes nothing."""
        if not self._lines:
            return
        self._lines.clear()
        logger.info("cart_cleared")
        self._changed()

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(
            items=tuple(
                LineItem(name=line.name, unit_price=line.unit_price, quantity=line.quantity)
                for line in self._lines.values()
            )
        )

    @property
    def total(self) -> Decimal:
        return self.snapshot().total

    @property
    def item_count(self) -> int:
        return self.snapshot().item_count

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, name: object) -> bool:
        return name in self._lines

    def _changed(self) -> None:
        snapshot = self.snapshot()
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error("cart_listener_failed", error=str(e))

    def _notify(self, message: str) -> None:
        if self._notifier is not None:
            self._notifier.notify(message, Severity.SUCCESS)
