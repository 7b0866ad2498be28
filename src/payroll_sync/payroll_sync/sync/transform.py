"""Conversion between local values and remote wire values.

Local files carry dates as ISO-8601 strings or `datetime` objects; the remote
store carries them as native timestamps. Both directions walk lists and dicts
recursively and leave every other value untouched.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from google.api_core.datetime_helpers import DatetimeWithNanoseconds

from ..common.datetime_utils import is_iso_date_string, parse_iso


def _to_timestamp(value: datetime) -> DatetimeWithNanoseconds:
    return DatetimeWithNanoseconds(
        value.year,
        value.month,
        value.day,
        value.hour,
        value.minute,
        value.second,
        value.microsecond,
        tzinfo=value.tzinfo,
    )


def to_remote(value: Any, *, parse_strings: bool = True) -> Any:
    """Convert a local value tree into its remote form.

    With `parse_strings` on, strings that fully match an ISO-8601 date are
    sent as timestamps. Schema-aware callers turn it off and convert the
    fields they know are dates themselves.
    """
    if isinstance(value, DatetimeWithNanoseconds):
        return value
    if isinstance(value, datetime):
        return _to_timestamp(value)
    if isinstance(value, date):
        return _to_timestamp(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        if parse_strings and is_iso_date_string(value):
            try:
                return _to_timestamp(parse_iso(value))
            except ValueError:
                return value
        return value
    if isinstance(value, (list, tuple)):
        return [to_remote(v, parse_strings=parse_strings) for v in value]
    if isinstance(value, dict):
        return {k: to_remote(v, parse_strings=parse_strings) for k, v in value.items()}
    return value


def from_remote(value: Any) -> Any:
    """Convert a remote value tree back into plain local values."""
    if isinstance(value, DatetimeWithNanoseconds):
        return datetime(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond,
            tzinfo=value.tzinfo,
        )
    if isinstance(value, list):
        return [from_remote(v) for v in value]
    if isinstance(value, dict):
        return {k: from_remote(v) for k, v in value.items()}
    return value
