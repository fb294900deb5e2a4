"""Payment request/response contract and the HTTP gateway.

The payment service takes a single JSON POST:

    {
        "cardholderName": "...", "cardNumber": "...", "expiryDate": "...",
        "cvv": "...", "amount": 24.48,
        "orderItems": [{"productName": "...", "quantity": 2, "price": 9.99}]
    }

and answers with a JSON body carrying ``status``. ``"COMPLETED"`` comes
with a ``transactionId``; anything else is a failure, optionally with an
``errorMessage``. Declines arrive with HTTP 400, so a body that carries a
``status`` is read as a result whatever the HTTP status code.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Union

import httpx
import structlog

from .cart import CartSnapshot
from .config import Settings
from .errors import BusinessDecline, CartError, TransportFailure, errmsg
from .log import mask_card_number

logger = structlog.get_logger()

STATUS_COMPLETED = "COMPLETED"

FAILURE_DECLINED = "declined"
FAILURE_TRANSPORT = "transport"


@dataclass(frozen=True)
class PaymentFormInput:
    """Raw values typed into the payment form for one attempt."""

    cardholder_name: str = ""
    card_number: str = field(default="", repr=False)
    expiry_date: str = field(default="", repr=False)
    cvv: str = field(default="", repr=False)


FORM_FIELDS = ("cardholder_name", "card_number", "expiry_date", "cvv")


@dataclass(frozen=True)
class OrderItem:
    product_name: str
    quantity: int
    price: Decimal

    def to_json(self) -> dict[str, Any]:
        return {
            "productName": self.product_name,
            "quantity": self.quantity,
            "price": float(self.price),
        }


@dataclass(frozen=True)
class PaymentRequest:
    cardholder_name: str
    card_number: str = field(repr=False)
    expiry_date: str = field(repr=False)
    cvv: str = field(repr=False)
    amount: Decimal
    order_items: tuple[OrderItem, ...]

    @classmethod
    def build(cls, form: PaymentFormInput, snapshot: CartSnapshot) -> "PaymentRequest":
        """Combine validated form input with the cart as it is right now."""
        return cls(
            cardholder_name=form.cardholder_name,
            card_number=form.card_number,
            expiry_date=form.expiry_date,
            cvv=form.cvv,
            amount=snapshot.total,
            order_items=tuple(
                OrderItem(product_name=item.name, quantity=item.quantity, price=item.unit_price)
                for item in snapshot.items
            ),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "cardholderName": self.cardholder_name,
            "cardNumber": self.card_number,
            "expiryDate": self.expiry_date,
            "cvv": self.cvv,
            "amount": float(self.amount),
            "orderItems": [item.to_json() for item in self.order_items],
        }


@dataclass(frozen=True)
class PaymentCompleted:
    transaction_id: str

    @property
    def notification_text(self) -> str:
        return f"Payment successful! Transaction ID: {self.transaction_id}"


@dataclass(frozen=True)
class PaymentFailed:
    """A declined payment or one that never got a usable answer."""

    error: CartError

    @property
    def kind(self) -> str:
        """``declined`` for a business decline, ``transport`` otherwise."""
        if isinstance(self.error, BusinessDecline):
            return FAILURE_DECLINED
        return FAILURE_TRANSPORT

    @property
    def declined(self) -> bool:
        return self.kind == FAILURE_DECLINED

    @property
    def notification_text(self) -> str:
        if isinstance(self.error, BusinessDecline):
            return self.error.error_message or errmsg.PAYMENT_FAILED
        return str(self.error)


PaymentResult = Union[PaymentCompleted, PaymentFailed]


def parse_payment_response(body: Any) -> PaymentResult:
    """Interpret a decoded payment-service response body."""
    if not isinstance(body, dict) or "status" not in body:
        return PaymentFailed(TransportFailure(ValueError("response has no status")))

    status = body.get("status")
    if status == STATUS_COMPLETED:
        transaction_id = body.get("transactionId")
        if not transaction_id:
            return PaymentFailed(TransportFailure(ValueError("completed payment has no transactionId")))
        return PaymentCompleted(transaction_id=str(transaction_id))

    return PaymentFailed(BusinessDecline(str(status), body.get("errorMessage") or None))


class PaymentGateway:
    """Sends payment requests to the remote payment service.

    ``submit`` never raises for remote outcomes; network errors, bad
    status codes and undecodable bodies come back as ``PaymentFailed``.
    Exactly one POST is made per call, with no retries.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> "PaymentGateway":
        return cls(settings.payment_service_url, settings.payment_timeout_seconds, client)

    async def submit(self, request: PaymentRequest) -> PaymentResult:
        logger.info(
            "payment_submitted",
            amount=str(request.amount),
            items=len(request.order_items),
            card=mask_card_number(request.card_number),
        )
        try:
            if self._client is not None:
                response = await self._post(self._client, request)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, request)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("payment_transport_failed", error=str(e), error_type=type(e).__name__)
            return PaymentFailed(TransportFailure(e))

        result = self._read_response(response)
        if isinstance(result, PaymentCompleted):
            logger.info("payment_completed", transaction_id=result.transaction_id)
        elif result.declined:
            logger.warning("payment_declined", status=result.error.status, error=result.error.error_message)
        else:
            logger.error("payment_transport_failed", error=str(result.error), http_status=response.status_code)
        return result

    async def _post(self, client: httpx.AsyncClient, request: PaymentRequest) -> httpx.Response:
        return await client.post(self.url, json=request.to_json(), timeout=self.timeout)

    def _read_response(self, response: httpx.Response) -> PaymentResult:
        try:
            body = response.json()
        except ValueError as e:
            if response.is_success:
                return PaymentFailed(TransportFailure(e))
            body = None

        if isinstance(body, dict) and "status" in body:
            return parse_payment_response(body)
        if not response.is_success:
            return PaymentFailed(TransportFailure(ValueError(f"HTTP {response.status_code}")))
        return parse_payment_response(body)
