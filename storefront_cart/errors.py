"""Error types and user-facing message constants for the storefront cart."""

from typing import Optional


class errmsg:
    """Message constants shared by the cart, checkout and notifications."""

    CART_EMPTY = "Your cart is empty!"
    FIELDS_REQUIRED = "Please fill in all payment fields!"
    CARD_NUMBER_INVALID = "Please enter a valid card number!"
    PRICE_INVALID = "Unit price must be a non-negative amount"
    PAYMENT_FAILED = "Payment failed!"
    PAYMENT_PROCESSING_FAILED = "Payment processing failed"
    CHECKOUT_IN_FLIGHT = "A payment is already being processed"
    FORM_NOT_OPEN = "Payment form is not open"


class CartError(Exception):
    """Base class for storefront cart errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause and str(self.cause):
            return f"{self.message}: {self.cause}"
        return self.message


class UserInputError(CartError):
    """Input rejected before anything leaves the page.

    Raised for an empty cart at checkout, missing or malformed payment
    fields, and invalid product prices. Always recoverable.
    """


class BusinessDecline(CartError):
    """The payment service reported a non-completed status."""

    def __init__(self, status: str, error_message: Optional[str] = None):
        super().__init__(error_message or errmsg.PAYMENT_FAILED)
        self.status = status
        self.error_message = error_message


class TransportFailure(CartError):
    """The payment service could not be reached or answered garbage."""

    def __init__(self, cause: Exception):
        super().__init__(errmsg.PAYMENT_PROCESSING_FAILED, cause)
