"""Projection of cart state into display models, and the paint step.

``project_cart`` and ``project_payment_summary`` are pure: the same
snapshot always yields equal output. ``CartProjector`` subscribes to a
store, attaches per-row action handlers to the projected rows and hands
the result to a paint callable.
"""

from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal
from functools import partial
from typing import Callable, Optional

from .cart import CartSnapshot, CartStore

CENTS = Decimal("0.01")


def format_money(amount: Decimal) -> str:
    """Format an amount as dollars with two decimals, e.g. '$24.48'."""
    return f"${amount.quantize(CENTS, rounding=ROUND_HALF_UP)}"


@dataclass(frozen=True)
class CartRow:
    name: str
    unit_price: str
    quantity: int
    line_total: str
    # Bound by CartProjector; excluded from equality.
    on_increment: Optional[Callable[[], None]] = field(default=None, compare=False, repr=False)
    on_decrement: Optional[Callable[[], None]] = field(default=None, compare=False, repr=False)
    on_remove: Optional[Callable[[], None]] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class CartView:
    item_count: int
    rows: tuple[CartRow, ...]
    total: str


@dataclass(frozen=True)
class SummaryRow:
    label: str
    amount: str


@dataclass(frozen=True)
class PaymentSummary:
    """Itemized list and total shown when the payment form opens."""

    rows: tuple[SummaryRow, ...]
    total: str


def project_cart(snapshot: CartSnapshot) -> CartView:
    return CartView(
        item_count=snapshot.item_count,
        rows=tuple(
            CartRow(
                name=item.name,
                unit_price=format_money(item.unit_price),
                quantity=item.quantity,
                line_total=format_money(item.line_total),
            )
            for item in snapshot.items
        ),
        total=format_money(snapshot.total),
    )


def project_payment_summary(snapshot: CartSnapshot) -> PaymentSummary:
    return PaymentSummary(
        rows=tuple(
            SummaryRow(label=f"{item.name} x{item.quantity}", amount=format_money(item.line_total))
            for item in snapshot.items
        ),
        total=format_money(snapshot.total),
    )


class TextRenderer:
    """Renders display models as plain text lines."""

    def render_cart(self, view: CartView) -> list[str]:
        lines = [f"Cart ({view.item_count})"]
        if not view.rows:
            lines.append("  (empty)")
        for row in view.rows:
            lines.append(f"  {row.name}  {row.unit_price}  [-] {row.quantity} [+]  {row.line_total}")
        lines.append(f"Total: {view.total}")
        return lines

    def render_summary(self, summary: PaymentSummary) -> list[str]:
        lines = ["Order summary"]
        for row in summary.rows:
            lines.append(f"  {row.label}  {row.amount}")
        lines.append(f"Total: {summary.total}")
        return lines


class CartProjector:
    """
    Keeps a painted view of a CartStore in sync with it.

    ``view`` is a display cache only; it is replaced on every mutation
    and never consulted for totals.
    """

    def __init__(
        self,
        store: CartStore,
        paint: Optional[Callable[[CartView], None]] = None,
    ):
        self.store = store
        self.paint = paint
        self.view: CartView = self._bind(project_cart(store.snapshot()))
        store.subscribe(self.refresh)

    def refresh(self, snapshot: Optional[CartSnapshot] = None) -> CartView:
        if snapshot is None:
            snapshot = self.store.snapshot()
        self.view = self._bind(project_cart(snapshot))
        if self.paint is not None:
            self.paint(self.view)
        return self.view

    def row(self, name: str) -> Optional[CartRow]:
        for row in self.view.rows:
            if row.name == name:
                return row
        return None

    def _bind(self, view: CartView) -> CartView:
        return replace(
            view,
            rows=tuple(
                replace(
                    row,
                    on_increment=partial(self.store.adjust_quantity, row.name, 1),
                    on_decrement=partial(self.store.adjust_quantity, row.name, -1),
                    on_remove=partial(self.store.remove_item, row.name),
                )
                for row in view.rows
            ),
        )


def text_painter(output_fn: Callable[[str], None] = print) -> Callable[[CartView], None]:
    """Build a paint callable that writes rendered cart lines to ``output_fn``."""
    renderer = TextRenderer()

    def paint(view: CartView) -> None:
        for line in renderer.render_cart(view):
            output_fn(line)

    return paint
