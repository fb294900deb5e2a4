"""Storefront page controller.

Wires the cart store, its projector, the notification emitter and the
checkout orchestrator together, and maps the page's user actions onto
them: add/remove/step quantity, the cart panel, and the payment form.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional

import httpx
import structlog

from .cart import CartStore
from .checkout import CheckoutOrchestrator
from .config import Settings
from .errors import UserInputError
from .log import configure_logging
from .notifications import Notification, NotificationEmitter, Severity, log_display
from .payments import PaymentCompleted, PaymentFormInput, PaymentGateway, PaymentResult
from .projector import CartProjector, CartView, PaymentSummary

logger = structlog.get_logger()


@dataclass
class CartPanel:
    """Open/closed state of the cart sidebar."""

    open: bool = False

    def toggle(self) -> None:
        self.open = not self.open

    def collapse(self) -> None:
        self.open = False


class ClickTarget:
    """Where a click landed, relative to the page's overlays."""

    CART_PANEL = "cart_panel"
    CART_ICON = "cart_icon"
    PAYMENT_BACKDROP = "payment_backdrop"
    PAYMENT_FORM = "payment_form"
    PAGE = "page"


class Storefront:
    """
    The page-level surface of the shop.

    Each public method corresponds to one user action on the page. They
    all run to completion synchronously except ``submit_payment``, whose
    only suspension point is the call to the payment service.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        paint: Optional[Callable[[CartView], None]] = None,
        on_notify: Callable[[Notification], None] = log_display,
        on_dismiss: Optional[Callable[[Notification], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings or Settings.from_env()
        emitter_kwargs: dict[str, Any] = {}
        if clock is not None:
            emitter_kwargs["clock"] = clock
        self.notifier = NotificationEmitter(
            on_show=on_notify,
            on_dismiss=on_dismiss,
            lifetime=self.settings.notification_lifetime_seconds,
            **emitter_kwargs,
        )
        self.cart = CartStore(notifier=self.notifier)
        self.projector = CartProjector(self.cart, paint=paint)
        self.panel = CartPanel()
        self.checkout = CheckoutOrchestrator(
            store=self.cart,
            gateway=PaymentGateway.from_settings(self.settings, client=client),
            notifier=self.notifier,
            on_completed=self._payment_completed,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "Storefront":
        """Build a page from environment settings and configure logging for it."""
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        return cls(settings=settings, **kwargs)

    # --- Cart actions ---

    def add_to_cart(self, name: str, price: Decimal | float | str) -> None:
        """Add one unit; a bad price is reported as an error notification."""
        try:
            self.cart.add_item(name, price)
        except UserInputError as e:
            logger.info("add_to_cart_rejected", name=name, reason=e.message)
            self.notifier.notify(e.message, Severity.ERROR)

    def remove_from_cart(self, name: str) -> None:
        self.cart.remove_item(name)

    def increment(self, name: str) -> None:
        row = self.projector.row(name)
        if row is not None:
            row.on_increment()

    def decrement(self, name: str) -> None:
        row = self.projector.row(name)
        if row is not None:
            row.on_decrement()

    @property
    def view(self) -> CartView:
        return self.projector.view

    # --- Cart panel ---

    def toggle_cart(self) -> None:
        self.panel.toggle()

    # --- Payment form ---

    def open_checkout(self) -> Optional[PaymentSummary]:
        return self.checkout.open()

    def close_payment_form(self) -> None:
        self.checkout.close()

    def fill_payment_form(self, **fields: str) -> None:
        for name, value in fields.items():
            self.checkout.set_field(name, value)

    async def submit_payment(self, form: Optional[PaymentFormInput] = None) -> Optional[PaymentResult]:
        return await self.checkout.submit(form)

    @property
    def payment_form_open(self) -> bool:
        return self.checkout.form_open

    @property
    def submitting(self) -> bool:
        """True while the submit button shows its busy state."""
        return self.checkout.submitting

    # --- Global page events ---

    def tick(self) -> None:
        """Expire a notification whose lifetime is over.

        ``submit_payment`` runs on an event loop that dismisses
        notifications on a timer. Notifications raised by the synchronous
        cart actions are dismissed only when the page calls this.
        """
        self.notifier.tick()

    def handle_escape(self) -> None:
        """Escape closes the payment form and the cart panel."""
        if self.checkout.form_open:
            self.checkout.close()
        if self.panel.open:
            self.panel.collapse()

    def handle_click(self, target: str, viewport_width: int) -> None:
        """Close overlays on a click outside of them.

        The payment form closes on a click on its backdrop. The cart panel
        closes on a click outside it only on mobile-sized viewports.
        """
        if target == ClickTarget.PAYMENT_BACKDROP and self.checkout.form_open:
            self.checkout.close()
            return
        if (
            viewport_width <= self.settings.mobile_breakpoint_px
            and self.panel.open
            and target not in (ClickTarget.CART_PANEL, ClickTarget.CART_ICON)
        ):
            self.panel.collapse()

    def _payment_completed(self, result: PaymentCompleted) -> None:
        self.panel.collapse()
        logger.info("storefront_order_placed", transaction_id=result.transaction_id)
