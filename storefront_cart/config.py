"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass

from .errors import UserInputError

DEFAULT_PAYMENT_SERVICE_URL = "http://localhost:8080/payment-service/api/payments/process"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise UserInputError(f"{name} must be a number, got {raw!r}", e) from e


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise UserInputError(f"{name} must be an integer, got {raw!r}", e) from e


@dataclass(frozen=True)
class Settings:
    """Storefront settings.

    Environment variables:
        PAYMENT_SERVICE_URL: POST endpoint of the payment service
        PAYMENT_TIMEOUT_SECONDS: request timeout (default: 10)
        NOTIFICATION_LIFETIME_SECONDS: how long a notification stays up (default: 3)
        MOBILE_BREAKPOINT_PX: widest viewport treated as mobile (default: 768)
        LOG_LEVEL: structlog filtering level (default: INFO)
    """

    payment_service_url: str = DEFAULT_PAYMENT_SERVICE_URL
    payment_timeout_seconds: float = 10.0
    notification_lifetime_seconds: float = 3.0
    mobile_breakpoint_px: int = 768
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables with fallbacks."""
        return cls(
            payment_service_url=os.environ.get("PAYMENT_SERVICE_URL", DEFAULT_PAYMENT_SERVICE_URL),
            payment_timeout_seconds=_env_float("PAYMENT_TIMEOUT_SECONDS", 10.0),
            notification_lifetime_seconds=_env_float("NOTIFICATION_LIFETIME_SECONDS", 3.0),
            mobile_breakpoint_px=_env_int("MOBILE_BREAKPOINT_PX", 768),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
