"""
Time helpers shared by the slot generator and the booking committer.

Conventions:
- Datetimes handled by the services are timezone aware.
- Datetimes persisted in DocTypes are naive UTC.
- Weekdays follow the stored convention 0 = Sunday ... 6 = Saturday.
"""

import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Tuple, Union

import pytz
from frappe.utils import get_datetime

FRACTION_PATTERN = re.compile(r"\.(\d+)")


def to_utc(value: datetime) -> datetime:
	"""Aware UTC datetime. Naive values are taken as UTC."""
	if value.tzinfo is None:
		return pytz.UTC.localize(value)
	return value.astimezone(pytz.UTC)


def to_db(value: datetime) -> datetime:
	"""Naive UTC datetime for Datetime fields."""
	return to_utc(value).replace(tzinfo=None)


def from_db(value: Union[datetime, str]) -> datetime:
	"""Aware UTC datetime from a stored (naive UTC) Datetime value."""
	if isinstance(value, str):
		value = get_datetime(value)
	return to_utc(value)


def format_rfc3339(value: datetime) -> str:
	"""2026-01-19T09:00:00Z"""
	return to_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_rfc3339(value: str) -> datetime:
	"""
	Parse an RFC3339 timestamp into an aware UTC datetime.

	Raises:
		ValueError: if the value is not a valid timestamp
	"""
	value = value.strip()
	if value.endswith(("Z", "z")):
		value = value[:-1] + "+00:00"
	# fromisoformat on 3.10 only takes 3 or 6 fraction digits
	value = FRACTION_PATTERN.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
	return to_utc(datetime.fromisoformat(value))


def weekday_index(target_date: date) -> int:
	"""Weekday with Sunday = 0, as stored in Scheduling Window."""
	return (target_date.weekday() + 1) % 7


def localize_hour(target_date: date, hour: int, tz: tzinfo) -> datetime:
	"""
	Aware datetime for ``hour`` o'clock on ``target_date`` in ``tz``.

	Hour 24 is the midnight that ends the day.
	"""
	naive = datetime.combine(target_date, time(0)) + timedelta(hours=hour)
	if hasattr(tz, "localize"):
		return tz.localize(naive)
	return naive.replace(tzinfo=tz)


def day_bounds(target_date: date, tz: tzinfo) -> Tuple[datetime, datetime]:
	"""[start, end) of ``target_date`` in ``tz``, as aware datetimes."""
	return localize_hour(target_date, 0, tz), localize_hour(target_date + timedelta(days=1), 0, tz)
