"""
Slot Generation Service

Derives the bookable slots of a Scheduling Link for one calendar date from:
- the advisor's active Scheduling Windows for that weekday
- the meetings already booked on the link that day
- link constraints (expiry, max uses, advance-booking horizon)

``generate_slots`` is pure and does the interval walk. ``get_available_slots``
reads the stores, applies the short-circuits and calls it.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Union

from frappe.utils import getdate

from .config import OVERLAP_POLICY_DEDUPE, OVERLAP_POLICY_KEEP, SchedulingConfig, get_scheduling_config
from .links import get_max_uses
from .overlap import count_link_meetings, find_overlapping, get_link_meetings_between
from .timeutils import day_bounds, format_rfc3339, from_db, localize_hour, to_utc, weekday_index
from .windows import get_active_windows

# Reasons returned alongside an empty slot list
REASON_EXPIRED = "expired"
REASON_TOO_FAR = "too_far_in_advance"
REASON_NO_AVAILABILITY = "no_availability"
REASON_EXHAUSTED = "exhausted"


@dataclass
class SlotQuery:
	"""Result of a slot lookup for one date."""

	slots: List[Dict[str, datetime]] = field(default_factory=list)
	reason: Optional[str] = None

	def serialize(self) -> List[Dict[str, str]]:
		return serialize_slots(self.slots)


def generate_slots(
	target_date: date,
	windows: Iterable[Any],
	meetings: Iterable[Dict[str, datetime]],
	duration_minutes: int,
	now: datetime,
	tz: tzinfo,
	overlap_policy: str = OVERLAP_POLICY_KEEP
) -> List[Dict[str, datetime]]:
	"""
	Walk each window in steps of ``duration_minutes`` and keep free slots.

	Args:
		target_date: calendar date in the reference timezone
		windows: objects or dicts with start_hour / end_hour
		meetings: [{"start": datetime, "end": datetime}, ...] aware
		duration_minutes: slot length, > 0
		now: aware evaluation instant; slots must start strictly after it
		tz: reference timezone the window hours are expressed in
		overlap_policy: "keep" emits duplicates from overlapping windows,
			"dedupe" drops intervals that were already emitted

	Returns:
		list[dict]: [{"start": datetime, "end": datetime}, ...] aware UTC,
		chronological

	A slot ending exactly at the window end is valid.
	"""
	if duration_minutes <= 0:
		return []

	step = timedelta(minutes=duration_minutes)
	meetings = list(meetings)
	now = to_utc(now)

	slots = []
	for window in windows:
		start_hour = window["start_hour"] if isinstance(window, dict) else window.start_hour
		end_hour = window["end_hour"] if isinstance(window, dict) else window.end_hour

		window_start = to_utc(localize_hour(target_date, start_hour, tz))
		window_end = to_utc(localize_hour(target_date, end_hour, tz))

		slot_start = window_start
		while slot_start + step <= window_end:
			slot_end = slot_start + step

			if slot_start > now and not find_overlapping(slot_start, slot_end, meetings):
				slots.append({"start": slot_start, "end": slot_end})

			slot_start = slot_end

	# stable: windows with the same start keep their order
	slots.sort(key=lambda s: s["start"])

	if overlap_policy == OVERLAP_POLICY_DEDUPE:
		seen = set()
		unique = []
		for slot in slots:
			key = (slot["start"], slot["end"])
			if key in seen:
				continue
			seen.add(key)
			unique.append(slot)
		slots = unique

	return slots


def serialize_slots(slots: Iterable[Dict[str, datetime]]) -> List[Dict[str, str]]:
	return [{"start": format_rfc3339(s["start"]), "end": format_rfc3339(s["end"])} for s in slots]


def get_available_slots(
	link: Any,
	target_date: Union[date, str],
	config: Optional[SchedulingConfig] = None,
	now: Optional[datetime] = None
) -> SlotQuery:
	"""
	Bookable slots of a link on a date. Read-only.

	Short-circuits, in order:
		1. link expired before the date          -> reason "expired"
		2. date beyond today + max_days_in_advance -> reason "too_far_in_advance"
		3. no active window on that weekday       -> reason "no_availability"
		4. max_uses reached                       -> reason "exhausted"

	Args:
		link: Scheduling Link doc
		target_date: date or "YYYY-MM-DD"
		config: SchedulingConfig (site config when omitted)
		now: evaluation instant (config.now() when omitted)

	Returns:
		SlotQuery
	"""
	config = config or get_scheduling_config()
	tz = config.tz
	now = to_utc(now) if now else config.now()

	if isinstance(target_date, str):
		target_date = getdate(target_date)

	day_start, day_end = day_bounds(target_date, tz)

	# 1. Expiry
	if link.expires_at and to_utc(day_start) > from_db(link.expires_at):
		return SlotQuery(reason=REASON_EXPIRED)

	# 2. Advance-booking horizon
	today = now.astimezone(tz).date()
	if target_date > today + timedelta(days=link.max_days_in_advance or 0):
		return SlotQuery(reason=REASON_TOO_FAR)

	# 3. Windows for the weekday
	windows = get_active_windows(link.advisor, weekday_index(target_date))
	if not windows:
		return SlotQuery(reason=REASON_NO_AVAILABILITY)

	# 4. Max uses
	max_uses = get_max_uses(link)
	if max_uses is not None and count_link_meetings(link.name) >= max_uses:
		return SlotQuery(reason=REASON_EXHAUSTED)

	meetings = get_link_meetings_between(link.name, day_start, day_end)

	slots = generate_slots(
		target_date,
		windows,
		meetings,
		link.duration,
		now,
		tz,
		overlap_policy=config.slot_overlap_policy
	)
	return SlotQuery(slots=slots)


def get_available_slots_range(
	link: Any,
	from_date: Union[date, str],
	to_date: Union[date, str],
	config: Optional[SchedulingConfig] = None,
	now: Optional[datetime] = None
) -> Dict[str, List[Dict[str, str]]]:
	"""
	Slots for every date in [from_date, to_date], for calendar views.

	Returns:
		dict: {"2026-01-19": [{"start": "...Z", "end": "...Z"}, ...], ...}
		dates without slots are omitted
	"""
	config = config or get_scheduling_config()
	now = to_utc(now) if now else config.now()

	if isinstance(from_date, str):
		from_date = getdate(from_date)
	if isinstance(to_date, str):
		to_date = getdate(to_date)

	result = {}
	current_date = from_date

	while current_date <= to_date:
		query = get_available_slots(link, current_date, config=config, now=now)
		if query.slots:
			result[current_date.strftime("%Y-%m-%d")] = query.serialize()
		current_date += timedelta(days=1)

	return result
