"""Tests for error types."""

from storefront_cart.errors import (
    BusinessDecline,
    CartError,
    TransportFailure,
    UserInputError,
    errmsg,
)


class TestCartError:
    """Tests for the CartError base class."""

    def test_message_only(self) -> None:
        err = CartError("something went wrong")
        assert err.message == "something went wrong"
        assert err.cause is None
        assert str(err) == "something went wrong"

    def test_with_cause(self) -> None:
        cause = ValueError("underlying issue")
        err = CartError("wrapper", cause)
        assert err.cause is cause
        assert str(err) == "wrapper: underlying issue"

    def test_blank_cause_is_not_appended(self) -> None:
        err = CartError("wrapper", ValueError())
        assert str(err) == "wrapper"


class TestUserInputError:
    def test_is_cart_error(self) -> None:
        err = UserInputError(errmsg.CART_EMPTY)
        assert isinstance(err, CartError)
        assert str(err) == "Your cart is empty!"


class TestBusinessDecline:
    def test_keeps_server_message(self) -> None:
        err = BusinessDecline("DECLINED", "Insufficient funds")
        assert err.status == "DECLINED"
        assert err.error_message == "Insufficient funds"
        assert str(err) == "Insufficient funds"

    def test_generic_message_without_reason(self) -> None:
        err = BusinessDecline("FAILED")
        assert err.error_message is None
        assert str(err) == errmsg.PAYMENT_FAILED


class TestTransportFailure:
    def test_wraps_cause(self) -> None:
        cause = OSError("socket error")
        err = TransportFailure(cause)
        assert err.cause is cause
        assert str(err) == "Payment processing failed: socket error"
