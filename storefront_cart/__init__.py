"""Client-side shopping cart and checkout for a storefront page."""

from .cart import CartSnapshot, CartStore, LineItem
from .checkout import CheckoutOrchestrator, CheckoutPhase
from .config import Settings
from .errors import (
    BusinessDecline,
    CartError,
    TransportFailure,
    UserInputError,
    errmsg,
)
from .log import configure_logging, mask_card_number
from .notifications import Notification, NotificationEmitter, Severity
from .payments import (
    OrderItem,
    PaymentCompleted,
    PaymentFailed,
    PaymentFormInput,
    PaymentGateway,
    PaymentRequest,
    PaymentResult,
    parse_payment_response,
)
from .projector import (
    CartProjector,
    CartRow,
    CartView,
    PaymentSummary,
    SummaryRow,
    TextRenderer,
    format_money,
    project_cart,
    project_payment_summary,
    text_painter,
)
from .storefront import CartPanel, ClickTarget, Storefront
from .validation import validate_payment_form

__all__ = [
    # Cart
    "CartSnapshot",
    "CartStore",
    "LineItem",
    # Checkout
    "CheckoutOrchestrator",
    "CheckoutPhase",
    # Config
    "Settings",
    # Errors
    "BusinessDecline",
    "CartError",
    "TransportFailure",
    "UserInputError",
    "errmsg",
    # Logging
    "configure_logging",
    "mask_card_number",
    # Notifications
    "Notification",
    "NotificationEmitter",
    "Severity",
    # Payments
    "OrderItem",
    "PaymentCompleted",
    "PaymentFailed",
    "PaymentFormInput",
    "PaymentGateway",
    "PaymentRequest",
    "PaymentResult",
    "parse_payment_response",
    # Projection
    "CartProjector",
    "CartRow",
    "CartView",
    "PaymentSummary",
    "SummaryRow",
    "TextRenderer",
    "format_money",
    "project_cart",
    "project_payment_summary",
    "text_painter",
    # Page
    "CartPanel",
    "ClickTarget",
    "Storefront",
    # Validation
    "validate_payment_form",
]
