"""Runtime configuration for the ordering engine, read from the environment."""

import calendar
import os
from zoneinfo import ZoneInfo

DEFAULT_WEEK_RESET_DAY = "sunday"
DEFAULT_SERVICE_TIMEOUT = 10.0

_WEEKDAYS = {name.lower(): index for index, name in enumerate(calendar.day_name)}


def environment() -> str:
    return os.getenv("PROTEAN_ENV", "development").lower()


def week_reset_day() -> int:
    """Weekday (Monday=0 .. Sunday=6) on which the ordering week restarts."""
    name = os.getenv("ORDER_WEEK_RESETS_ON", DEFAULT_WEEK_RESET_DAY).strip().lower()
    if name not in _WEEKDAYS:
        raise ValueError(f"Unknown weekday for ORDER_WEEK_RESETS_ON: {name!r}")
    return _WEEKDAYS[name]


def order_timezone() -> ZoneInfo:
    return ZoneInfo(os.getenv("ORDER_TIMEZONE", "UTC"))


def order_service_adapter() -> str:
    return os.getenv("ORDER_SERVICE_ADAPTER", "fake").lower()


def order_service_url() -> str:
    return os.getenv("ORDER_SERVICE_URL", "http://localhost:3000/api")


def order_service_token() -> str | None:
    return os.getenv("ORDER_SERVICE_TOKEN") or None


def order_service_timeout() -> float:
    return float(os.getenv("ORDER_SERVICE_TIMEOUT", DEFAULT_SERVICE_TIMEOUT))


def cart_store_dir() -> str | None:
    """Directory for persisted carts; ``None`` keeps carts in memory."""
    return os.getenv("CART_STORE_DIR") or None


def cart_device_id() -> str:
    return os.getenv("CART_DEVICE_ID", "butcher-cart")


def account_id() -> str:
    return os.getenv("ORDER_ACCOUNT_ID", "local")


def account_privileged() -> bool:
    return os.getenv("ORDER_ACCOUNT_PRIVILEGED", "false").strip().lower() in ("1", "true", "yes")
