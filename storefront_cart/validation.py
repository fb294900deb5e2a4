"""Validation helpers for cart and checkout precondition checks."""

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import UserInputError, errmsg

MIN_CARD_NUMBER_LENGTH = 16


def require_present(value: str, error_msg: str) -> None:
    """Require that a string field is non-empty."""
    if not value:
        raise UserInputError(error_msg)


def require_min_length(value: str, length: int, error_msg: str) -> None:
    """Require that a string is at least ``length`` characters long."""
    if len(value) < length:
        raise UserInputError(error_msg)


def require_not_empty(items: Sequence[Any], error_msg: str) -> None:
    """Require that a sequence has at least one element."""
    if not items:
        raise UserInputError(error_msg)


def to_price(value: Any) -> Decimal:
    """Coerce a product price to a non-negative Decimal.

    Floats go through ``str`` so 9.99 stays 9.99 instead of its binary
    expansion.
    """
    if isinstance(value, bool):
        raise UserInputError(errmsg.PRICE_INVALID)
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise UserInputError(errmsg.PRICE_INVALID, e) from e
    if not price.is_finite() or price < 0:
        raise UserInputError(errmsg.PRICE_INVALID)
    return price


def validate_payment_form(form) -> None:
    """Check the payment form before a request is built.

    All four fields must be filled in and the card number must be at
    least 16 characters. This is a syntactic policy check only; the
    payment service does the real card validation.
    """
    for value in (form.cardholder_name, form.card_number, form.expiry_date, form.cvv):
        require_present(value, errmsg.FIELDS_REQUIRED)
    require_min_length(form.card_number, MIN_CARD_NUMBER_LENGTH, errmsg.CARD_NUMBER_INVALID)
