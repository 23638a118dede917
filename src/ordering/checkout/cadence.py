"""Weekly ordering cadence.

Non-privileged accounts may place one order per cadence window. A window
starts at midnight on the configured reset weekday (Sunday by default) and
lasts until the next one. The check is advisory: the order service enforces
the same rule, this gate only keeps the UI from offering a doomed submission.
"""

from datetime import UTC, datetime, time, timedelta

from ordering import config


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


def window_start(now: datetime, reset_weekday: int | None = None) -> datetime:
    """Midnight of the latest ``reset_weekday`` at or before ``now``.

    Computed in ``now``'s timezone; naive datetimes are taken as UTC.
    """
    if reset_weekday is None:
        reset_weekday = config.week_reset_day()

    now = _aware(now)
    days_since_reset = (now.weekday() - reset_weekday) % 7
    start_day = now.date() - timedelta(days=days_since_reset)
    return datetime.combine(start_day, time.min, tzinfo=now.tzinfo)


def can_order(
    last_order_at: datetime | None,
    now: datetime,
    privileged: bool,
    reset_weekday: int | None = None,
) -> bool:
    if privileged:
        return True
    if last_order_at is None:
        return True
    return _aware(last_order_at) < window_start(now, reset_weekday)


def next_window_start(now: datetime, reset_weekday: int | None = None) -> datetime:
    """When a blocked account may order again."""
    return window_start(now, reset_weekday) + timedelta(days=7)
