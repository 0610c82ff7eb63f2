"""
Booking Service

Commits a meeting on a Scheduling Link. This is the only mutating entry
point for meetings.

Flow:
	1. Lock the link row (SELECT ... FOR UPDATE) for the rest of the transaction
	2. Validate the link: active, not expired, not exhausted
	3. Validate the slot: start < end, no overlapping meeting on the link
	4. Insert the Scheduling Meeting (unique slot_key as storage backstop)
	5. Best-effort: deactivate the window the slot came from
	6. Fire-and-forget: enqueue the advisor notification after commit

Steps 5 and 6 never turn a committed booking into a failure.

Every read after the lock is a locking read. Under REPEATABLE READ a plain
SELECT would return the snapshot taken before the lock was granted and miss
meetings committed by the request that held it.
"""

import frappe
from frappe import _
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from .config import SchedulingConfig, get_scheduling_config
from .errors import (
	InvalidSlotError,
	LinkExhaustedError,
	LinkExpiredError,
	LinkInactiveError,
	SlotUnavailableError,
)
from .links import get_custom_questions, get_link_for_update, get_max_uses
from .overlap import check_overlap, count_link_meetings
from .timeutils import from_db, to_db, to_utc
from .windows import deactivate_window, find_consumed_window

NOTIFICATION_JOB = "advisor_scheduling.advisor_scheduling.notifications.meeting.send_meeting_notification"


def book_meeting(
	scheduling_link: str,
	start_time: datetime,
	end_time: datetime,
	client_email: str,
	answers: Union[Dict[str, str], List[str]],
	linkedin_url: Optional[str] = None,
	config: Optional[SchedulingConfig] = None,
	now: Optional[datetime] = None
) -> Any:
	"""
	Validate a requested slot against current state and persist the meeting.

	Args:
		scheduling_link: Scheduling Link name
		start_time: aware slot start
		end_time: aware slot end
		client_email: booking client's email (already validated)
		answers: {question: answer} map, or pre-formatted "question: answer" list
		linkedin_url: optional client profile URL
		config: SchedulingConfig (site config when omitted)
		now: evaluation instant (config.now() when omitted)

	Returns:
		Scheduling Meeting doc

	Raises:
		LinkNotFoundError, LinkInactiveError, LinkExpiredError,
		LinkExhaustedError, InvalidSlotError, SlotUnavailableError
	"""
	config = config or get_scheduling_config()
	now = to_utc(now) if now else config.now()

	link = get_link_for_update(scheduling_link)
	validate_link_bookable(link, now)

	start_time = to_utc(start_time)
	end_time = to_utc(end_time)

	if start_time >= end_time:
		frappe.throw(_("Invalid time slot"), InvalidSlotError)

	overlap_result = check_overlap(link.name, start_time, end_time, for_update=True)
	if overlap_result["has_overlap"]:
		frappe.throw(_("This time slot is no longer available"), SlotUnavailableError)

	if isinstance(answers, dict):
		answers = format_answers(answers, get_custom_questions(link))

	meeting = _insert_meeting(link, start_time, end_time, client_email, linkedin_url, answers)

	frappe.logger("advisor_scheduling").info(
		f"Meeting {meeting.name} booked on {link.name} "
		f"({start_time.isoformat()} - {end_time.isoformat()}) for {client_email}"
	)

	_consume_window(link, start_time, config)
	_enqueue_notification(meeting, config)

	return meeting


def validate_link_bookable(link: Any, now: datetime) -> None:
	"""
	Raises the Conflict error matching the first failed check:
	inactive, expired, exhausted.

	The meeting count is a locking read; call with the link row locked.
	"""
	if not link.is_active:
		frappe.throw(_("This scheduling link is no longer active"), LinkInactiveError)

	if link.expires_at and now > from_db(link.expires_at):
		frappe.throw(_("This scheduling link has expired"), LinkExpiredError)

	max_uses = get_max_uses(link)
	if max_uses is not None and count_link_meetings(link.name, for_update=True) >= max_uses:
		frappe.throw(
			_("This scheduling link has reached its maximum number of uses"),
			LinkExhaustedError
		)


def format_answers(answers: Dict[str, Any], questions: List[str]) -> List[str]:
	"""
	Flatten {question: answer} into "question: answer" strings.

	Questions of the link come first, in the link's order; any other keys
	follow in submission order.
	"""
	ordered = [q for q in questions if q in answers]
	ordered += [q for q in answers if q not in ordered]

	return [f"{question}: {answers[question] if answers[question] is not None else ''}" for question in ordered]


def _insert_meeting(
	link: Any,
	start_time: datetime,
	end_time: datetime,
	client_email: str,
	linkedin_url: Optional[str],
	answers: List[str]
) -> Any:
	meeting = frappe.get_doc({
		"doctype": "Scheduling Meeting",
		"scheduling_link": link.name,
		"advisor": link.advisor,
		"client_email": client_email,
		"linkedin_url": linkedin_url or None,
		"start_time": to_db(start_time),
		"end_time": to_db(end_time),
		"answers": frappe.as_json(answers),
		"context_notes": frappe.as_json({})
	})

	frappe.db.savepoint("insert_meeting")
	try:
		meeting.insert(ignore_permissions=True)
	except (frappe.UniqueValidationError, frappe.DuplicateEntryError):
		# Unique slot_key: same link + start committed by a concurrent request
		frappe.db.rollback(save_point="insert_meeting")
		# Drop the "Slot Key must be unique" message queued by the insert
		frappe.clear_messages()
		frappe.throw(_("This time slot is no longer available"), SlotUnavailableError)

	return meeting


def _consume_window(link: Any, start_time: datetime, config: SchedulingConfig) -> None:
	"""
	Deactivate the window that contains the booked slot start.

	Best effort: a failure is rolled back to a savepoint and logged.
	"""
	frappe.db.savepoint("consume_window")
	try:
		window_name = find_consumed_window(link.advisor, start_time.astimezone(config.tz))
		if not window_name:
			frappe.logger("advisor_scheduling").info(
				f"No active window to consume for {link.name} at {start_time.isoformat()}"
			)
			return

		deactivate_window(window_name)
	except Exception:
		frappe.db.rollback(save_point="consume_window")
		frappe.log_error(
			title="Scheduling Window Consumption Failed",
			message=frappe.get_traceback()
		)


def _enqueue_notification(meeting: Any, config: SchedulingConfig) -> None:
	"""Hand the meeting to the notification worker once the booking commits."""
	if not config.send_notifications:
		return

	try:
		frappe.enqueue(
			NOTIFICATION_JOB,
			queue=config.notification_queue,
			timeout=config.notification_timeout,
			enqueue_after_commit=True,
			meeting_name=meeting.name
		)
	except Exception:
		frappe.log_error(
			title="Meeting Notification Enqueue Failed",
			message=frappe.get_traceback()
		)
