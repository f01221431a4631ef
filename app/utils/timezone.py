"""
WIB (Western Indonesia Time) helpers.

Deadlines are stored as UTC instants. Everything a user sees or types is WIB,
which is a fixed UTC+7 offset with no daylight saving, so a constant offset
is all we need.
"""
from datetime import datetime, timedelta, timezone
from typing import Union
from dateutil import parser

WIB_OFFSET = timedelta(hours=7)
WIB = timezone(WIB_OFFSET, "WIB")
WIB_LABEL = "Asia/Jakarta (WIB)"

# Value format of an HTML datetime-local field
INPUT_FORMAT = "%Y-%m-%dT%H:%M"

BULAN = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

DateLike = Union[str, datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_wib_time() -> datetime:
    """Returns the current time in WIB (UTC+7) as an aware datetime object."""
    return datetime.now(WIB)


def _as_utc(value: DateLike) -> datetime:
    # Stored values without an offset are UTC (SQLite drops tzinfo on read)
    if isinstance(value, str):
        value = parser.isoparse(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_wib(value: DateLike) -> datetime:
    """Same instant as `value`, expressed in WIB."""
    return _as_utc(value).astimezone(WIB)


def to_utc(wib_time: DateLike) -> datetime:
    """
    Convert a civil time entered by a user to the UTC instant we store.

    Input without an offset (e.g. '2025-06-21T10:30' from a datetime-local
    field, or a naive datetime) is read as WIB. Input that already carries
    an offset is converted as is.
    """
    parsed = parser.parse(wib_time) if isinstance(wib_time, str) else wib_time
    if parsed.tzinfo is not None:
        return parsed.astimezone(timezone.utc)
    return (parsed - WIB_OFFSET).replace(tzinfo=timezone.utc)


def format_date_indonesian(value: DateLike) -> str:
    """Long Indonesian date, e.g. '21 Juni 2025 pukul 22.30'."""
    local = to_wib(value)
    return f"{local.day} {BULAN[local.month - 1]} {local.year} pukul {local:%H.%M}"


def format_for_input(value: DateLike) -> str:
    """WIB civil time string that round-trips through `to_utc`."""
    return to_wib(value).strftime(INPUT_FORMAT)
