"""Analytics utilities for aggregating admin user records.

Provides pure functions that turn the raw user collection returned by the
admin API into the four summary tables shown on the dashboard:

- status breakdown (``user_stats``)
- registrations per calendar month (``registration_stats``)
- gender breakdown (``gender_stats``)
- approval breakdown (``approval_stats``)

Records are plain mappings decoded from JSON. Missing or empty fields are
grouped under "Unknown"; a registration date that cannot be parsed only drops
the record from the monthly table.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, timezone
from functools import reduce
from types import MappingProxyType
from typing import Any

from .models import AggregateResult, MonthlyEntry, SummaryEntry

UNKNOWN = "Unknown"
APPROVED = "Approved"
NOT_APPROVED = "Not Approved"

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

UserRecord = Mapping[str, Any]
Counts = Mapping[str, int]


def _text_or_unknown(value: Any) -> str:
    # Falsy values (None, "", 0, False) count as missing
    return str(value) if value else UNKNOWN


def status_label(user: UserRecord) -> str:
    """Return the status category for ``user``."""
    return _text_or_unknown(user.get("status"))


def gender_label(user: UserRecord) -> str:
    """Return the gender category for ``user``."""
    return _text_or_unknown(user.get("gender"))


def approval_label(user: UserRecord) -> str:
    """Map the ``isApproved`` flag onto its display label."""
    return APPROVED if user.get("isApproved") else NOT_APPROVED


def _parse_register_date(value: Any) -> datetime | date | None:
    if isinstance(value, datetime | date):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        # Epoch milliseconds
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
        # Reduced-precision ISO forms: YYYY-MM and YYYY
        for fmt in ("%Y-%m", "%Y"):
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
    return None


def registration_month(user: UserRecord) -> int | None:
    """Return the zero-based registration month of ``user``.

    Reads ``metadata.register_date``. Returns ``None`` when metadata is
    missing or the date cannot be parsed.
    """

    metadata = user.get("metadata")
    if not isinstance(metadata, Mapping):
        return None
    parsed = _parse_register_date(metadata.get("register_date"))
    if parsed is None:
        return None
    return parsed.month - 1


def _increment(counts: Counts, key: str) -> Counts:
    # New keys are appended, so first-seen order is kept
    return MappingProxyType({**counts, key: counts.get(key, 0) + 1})


def count_by(
    users: Iterable[UserRecord], label: Callable[[UserRecord], str]
) -> tuple[SummaryEntry, ...]:
    """Group ``users`` by ``label`` and count each group.

    Args:
        users: Iterable of user records.
        label: Function mapping a record to its category name.

    Returns:
        One entry per distinct category in first-seen order.
    """

    empty: Counts = MappingProxyType({})
    counts = reduce(lambda acc, user: _increment(acc, label(user)), users, empty)
    return tuple(SummaryEntry(name=name, value=value) for name, value in counts.items())


def summarize_status(users: Iterable[UserRecord]) -> tuple[SummaryEntry, ...]:
    return count_by(users, status_label)


def summarize_gender(users: Iterable[UserRecord]) -> tuple[SummaryEntry, ...]:
    return count_by(users, gender_label)


def summarize_approval(users: Iterable[UserRecord]) -> tuple[SummaryEntry, ...]:
    return count_by(users, approval_label)


def summarize_registrations(users: Iterable[UserRecord]) -> tuple[MonthlyEntry, ...]:
    """Count registrations per calendar month.

    The table always holds twelve entries in calendar order so that months
    without registrations still show up. Records without a parseable
    registration date are skipped.
    """

    seeded = (0,) * len(MONTH_ABBREVIATIONS)

    def _add(totals: tuple[int, ...], user: UserRecord) -> tuple[int, ...]:
        month = registration_month(user)
        if month is None:
            return totals
        return totals[:month] + (totals[month] + 1,) + totals[month + 1 :]

    totals = reduce(_add, users, seeded)
    return tuple(
        MonthlyEntry(name=name, registrations=count)
        for name, count in zip(MONTH_ABBREVIATIONS, totals)
    )


def aggregate_users(users: Iterable[UserRecord]) -> AggregateResult:
    """Compute all four summary tables for ``users``."""

    records = list(users)
    return AggregateResult(
        user_stats=summarize_status(records),
        registration_stats=summarize_registrations(records),
        gender_stats=summarize_gender(records),
        approval_stats=summarize_approval(records),
    )
