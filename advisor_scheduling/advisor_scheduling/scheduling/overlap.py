"""
Overlap Detection Service

Detects conflicts between a candidate slot and the meetings already booked
on a Scheduling Link. The same predicate is used by the slot generator and
by the booking committer.
"""

import frappe
from datetime import datetime
from typing import Any, Dict, Iterable, List

from .timeutils import from_db, to_db


def overlaps(
	slot_start: datetime,
	slot_end: datetime,
	meeting_start: datetime,
	meeting_end: datetime
) -> bool:
	"""
	True if [slot_start, slot_end) collides with a meeting.

	Half-open intervals, so back-to-back slots do not collide. A meeting that
	starts exactly at slot_start always collides, even if it is degenerate.
	"""
	if slot_start == meeting_start:
		return True
	return slot_start < meeting_end and slot_end > meeting_start


def find_overlapping(
	slot_start: datetime,
	slot_end: datetime,
	meetings: Iterable[Dict[str, Any]]
) -> List[Dict[str, Any]]:
	"""Meetings (dicts with aware "start"/"end") that collide with the slot."""
	return [
		meeting for meeting in meetings
		if overlaps(slot_start, slot_end, meeting["start"], meeting["end"])
	]


def get_link_meetings_between(
	scheduling_link: str,
	range_start: datetime,
	range_end: datetime
) -> List[Dict[str, Any]]:
	"""
	Meetings of a link whose start falls in [range_start, range_end).

	Returns:
		list[dict]: [{"name": str, "start": datetime, "end": datetime}, ...]
		with aware UTC datetimes, ordered by start
	"""
	rows = frappe.get_all(
		"Scheduling Meeting",
		filters=[
			["scheduling_link", "=", scheduling_link],
			["start_time", ">=", to_db(range_start)],
			["start_time", "<", to_db(range_end)],
		],
		fields=["name", "start_time", "end_time"],
		order_by="start_time asc"
	)

	return [
		{"name": row.name, "start": from_db(row.start_time), "end": from_db(row.end_time)}
		for row in rows
	]


def check_overlap(
	scheduling_link: str,
	start_datetime: datetime,
	end_datetime: datetime,
	for_update: bool = False
) -> Dict[str, Any]:
	"""
	Detect meetings on a link that collide with [start_datetime, end_datetime).

	Args:
		scheduling_link: name of the Scheduling Link
		start_datetime: aware start of the candidate slot
		end_datetime: aware end of the candidate slot
		for_update: locking read of the latest committed rows (booking path)

	Returns:
		dict: {
			"has_overlap": bool,
			"overlapping_meetings": [list of meeting names]
		}

	The query selects a superset (start <= end_datetime AND end >= start)
	and the exact predicate is applied in Python with ``overlaps``.
	"""
	rows = frappe.get_all(
		"Scheduling Meeting",
		filters={
			"scheduling_link": scheduling_link,
			"start_time": ["<=", to_db(end_datetime)],
			"end_time": [">=", to_db(start_datetime)],
		},
		fields=["name", "start_time", "end_time"],
		for_update=for_update
	)

	meetings = [
		{"name": row.name, "start": from_db(row.start_time), "end": from_db(row.end_time)}
		for row in rows
	]
	overlapping = [m["name"] for m in find_overlapping(start_datetime, end_datetime, meetings)]

	return {
		"has_overlap": bool(overlapping),
		"overlapping_meetings": overlapping
	}


def count_link_meetings(scheduling_link: str, for_update: bool = False) -> int:
	"""
	Number of meetings booked on a link (for max_uses).

	With for_update the rows are read with SELECT ... FOR UPDATE, which sees
	meetings committed after the transaction's snapshot was taken.
	"""
	if not for_update:
		return frappe.db.count("Scheduling Meeting", {"scheduling_link": scheduling_link})

	return len(frappe.get_all(
		"Scheduling Meeting",
		filters={"scheduling_link": scheduling_link},
		pluck="name",
		for_update=True
	))


def list_link_meetings(scheduling_link: str) -> List[Dict[str, Any]]:
	"""All meetings of a link, ordered by start."""
	return frappe.get_all(
		"Scheduling Meeting",
		filters={"scheduling_link": scheduling_link},
		fields=["name", "client_email", "linkedin_url", "start_time", "end_time", "answers", "context_notes"],
		order_by="start_time asc"
	)
