"""Checkout orchestration.

Phases::

    IDLE -> FORM_OPEN -> VALIDATING -> SUBMITTING -> SUCCEEDED -> IDLE
                ^             |              |
                +-------------+              +-> FAILED -> FORM_OPEN

A completed payment clears the cart and closes the form. A failed one
leaves the cart alone and keeps the form open for a retry. Only one
payment can be in flight; a submit while SUBMITTING is ignored.
"""

from dataclasses import replace
from enum import Enum, auto
from typing import Callable, Optional

import structlog

from .cart import CartStore
from .errors import UserInputError, errmsg
from .notifications import NotificationEmitter, Severity
from .payments import (
    FORM_FIELDS,
    PaymentCompleted,
    PaymentFailed,
    PaymentFormInput,
    PaymentGateway,
    PaymentRequest,
    PaymentResult,
)
from .projector import PaymentSummary, project_payment_summary
from .validation import require_not_empty, validate_payment_form

logger = structlog.get_logger()


class CheckoutPhase(Enum):
    IDLE = auto()
    FORM_OPEN = auto()
    VALIDATING = auto()
    SUBMITTING = auto()
    SUCCEEDED = auto()
    FAILED = auto()


class CheckoutOrchestrator:
    """
    Drives one checkout attempt at a time.

    The orchestrator owns the payment form draft and the summary shown
    beside it. The payment request is built from a cart snapshot taken
    when the form is submitted, not when it was opened. ``last_request``
    holds it only while the attempt is live; it is dropped on success and
    when the form closes.
    """

    def __init__(
        self,
        store: CartStore,
        gateway: PaymentGateway,
        notifier: NotificationEmitter,
        on_completed: Optional[Callable[[PaymentCompleted], None]] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.notifier = notifier
        self.on_completed = on_completed
        self.phase = CheckoutPhase.IDLE
        self.summary: Optional[PaymentSummary] = None
        self.form = PaymentFormInput()
        self.last_request: Optional[PaymentRequest] = None

    @property
    def form_open(self) -> bool:
        return self.phase in (
            CheckoutPhase.FORM_OPEN,
            CheckoutPhase.VALIDATING,
            CheckoutPhase.SUBMITTING,
            CheckoutPhase.FAILED,
        )

    @property
    def submitting(self) -> bool:
        return self.phase is CheckoutPhase.SUBMITTING

    def open(self) -> Optional[PaymentSummary]:
        """Open the payment form, or refuse with a notification if the cart is empty."""
        if self.phase is not CheckoutPhase.IDLE:
            logger.debug("checkout_already_open", phase=self.phase.name)
            return self.summary

        snapshot = self.store.snapshot()
        try:
            require_not_empty(snapshot.items, errmsg.CART_EMPTY)
        except UserInputError as e:
            logger.info("checkout_rejected", reason=e.message)
            self.notifier.notify(e.message, Severity.ERROR)
            return None

        self.summary = project_payment_summary(snapshot)
        self.form = PaymentFormInput()
        self.phase = CheckoutPhase.FORM_OPEN
        logger.info("checkout_opened", items=len(snapshot.items), total=str(snapshot.total))
        return self.summary

    def set_field(self, name: str, value: str) -> None:
        """Update one field of the form draft."""
        if name not in FORM_FIELDS:
            raise KeyError(name)
        if not self.form_open:
            return
        self.form = replace(self.form, **{name: value})

    def fill(self, form: PaymentFormInput) -> None:
        if self.form_open:
            self.form = form

    def close(self) -> None:
        """Dismiss the form and forget whatever was typed into it.

        A form with a payment in flight stays up until the result is in.
        """
        if self.submitting:
            logger.warning("checkout_close_ignored", reason="payment in flight")
            return
        if self.phase is not CheckoutPhase.IDLE:
            logger.info("checkout_closed", phase=self.phase.name)
        self._reset()

    async def submit(self, form: Optional[PaymentFormInput] = None) -> Optional[PaymentResult]:
        """Validate the form and send the payment.

        Returns the payment result, or None when nothing was sent because
        validation failed, the form is not open, or another payment is
        still in flight.
        """
        if self.submitting:
            logger.warning("checkout_submit_ignored", reason=errmsg.CHECKOUT_IN_FLIGHT)
            return None
        if not self.form_open:
            logger.warning("checkout_submit_ignored", reason=errmsg.FORM_NOT_OPEN)
            return None

        if form is not None:
            self.form = form

        self.phase = CheckoutPhase.VALIDATING
        try:
            validate_payment_form(self.form)
        except UserInputError as e:
            logger.info("payment_form_invalid", reason=e.message)
            self.phase = CheckoutPhase.FORM_OPEN
            self.notifier.notify(e.message, Severity.ERROR)
            return None

        request = PaymentRequest.build(self.form, self.store.snapshot())
        self.last_request = request
        self.phase = CheckoutPhase.SUBMITTING
        try:
            result = await self.gateway.submit(request)
        finally:
            if self.phase is CheckoutPhase.SUBMITTING:
                self.phase = CheckoutPhase.FAILED

        if isinstance(result, PaymentCompleted):
            self._succeed(result)
        else:
            self._fail(result)
        return result

    def _succeed(self, result: PaymentCompleted) -> None:
        self.phase = CheckoutPhase.SUCCEEDED
        self.notifier.notify(result.notification_text, Severity.SUCCESS)
        try:
            self.store.clear()
            if self.on_completed is not None:
                self.on_completed(result)
        finally:
            self._reset()

    def _reset(self) -> None:
        self.form = PaymentFormInput()
        self.summary = None
        self.last_request = None
        self.phase = CheckoutPhase.IDLE

    def _fail(self, result: PaymentFailed) -> None:
        self.phase = CheckoutPhase.FAILED
        self.notifier.notify(result.notification_text, Severity.ERROR)
        # Form stays up with its values for a retry.
        self.phase = CheckoutPhase.FORM_OPEN
