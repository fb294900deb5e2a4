"""Shared pytest fixtures for storefront cart tests."""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import httpx
import pytest

from storefront_cart.config import Settings
from storefront_cart.notifications import Notification, NotificationEmitter
from storefront_cart.payments import PaymentFormInput

PAYMENT_URL = "http://payments.test/payment-service/api/payments/process"

VALID_FORM = PaymentFormInput(
    cardholder_name="Ada Lovelace",
    card_number="4111111111111111",
    expiry_date="12/30",
    cvv="123",
)


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class NotificationLog:
    shown: list[Notification] = field(default_factory=list)
    dismissed: list[Notification] = field(default_factory=list)

    @property
    def last(self) -> Optional[Notification]:
        return self.shown[-1] if self.shown else None

    @property
    def messages(self) -> list[str]:
        return [n.message for n in self.shown]


class FakePaymentService:
    """Stands in for the remote payment service behind httpx.MockTransport.

    ``respond`` sets the next answer; every request body is recorded.
    """

    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self.status_code = 200
        self.body: Any = {"status": "COMPLETED", "transactionId": "TX123"}
        self.raw: Optional[bytes] = None
        self.error: Optional[Exception] = None
        self.gate = None  # asyncio.Event holding responses back when set

    def respond(self, body: Any = None, status_code: int = 200, raw: Optional[bytes] = None) -> None:
        self.body = body
        self.status_code = status_code
        self.raw = raw
        self.error = None

    def fail_with(self, error: Exception) -> None:
        self.error = error

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notification_log() -> NotificationLog:
    return NotificationLog()


@pytest.fixture
def emitter(clock, notification_log) -> NotificationEmitter:
    return NotificationEmitter(
        on_show=notification_log.shown.append,
        on_dismiss=notification_log.dismissed.append,
        lifetime=3.0,
        clock=clock,
    )


@pytest.fixture
def payment_service() -> FakePaymentService:
    return FakePaymentService()


@pytest.fixture
def settings() -> Settings:
    return Settings(payment_service_url=PAYMENT_URL, payment_timeout_seconds=2.0)


@pytest.fixture
def valid_form() -> PaymentFormInput:
    return VALID_FORM
