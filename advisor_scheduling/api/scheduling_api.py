"""
Scheduling API Endpoints

Whitelisted functions for the advisor dashboard and the public booking page.

Advisor endpoints require a logged-in Frappe session. Public endpoints allow
guest access with:
- Rate limiting by IP address
- Honeypot validation for bot detection (booking)
- Input validation and sanitization

Error mapping (via the exception's http_status_code):
- 404 unknown link / window
- 400 validation errors and booking conflicts
- 500 unexpected failures, with details in the Error Log only
"""

import frappe
from frappe import _
from typing import Any, Dict, List, Optional

from advisor_scheduling.advisor_scheduling.doctype.scheduling_window.scheduling_window import WEEKDAY_NAMES
from advisor_scheduling.advisor_scheduling.scheduling.booking import book_meeting
from advisor_scheduling.advisor_scheduling.scheduling.config import get_scheduling_config
from advisor_scheduling.advisor_scheduling.scheduling.errors import (
	LinkNotFoundError,
	SchedulingInternalError,
	SchedulingValidationError,
)
from advisor_scheduling.advisor_scheduling.scheduling.links import (
	create_link,
	deactivate_link,
	get_link,
	list_links,
	serialize_link,
)
from advisor_scheduling.advisor_scheduling.scheduling.overlap import list_link_meetings
from advisor_scheduling.advisor_scheduling.scheduling.slots import (
	get_available_slots as get_slots_for_date,
	get_available_slots_range as get_slots_for_range,
)
from advisor_scheduling.advisor_scheduling.scheduling.timeutils import format_rfc3339, from_db
from advisor_scheduling.advisor_scheduling.scheduling.windows import (
	activate_window,
	create_window,
	deactivate_window,
	list_windows,
)

from advisor_scheduling.api.shared import (
	check_honeypot,
	check_rate_limit,
	require_advisor,
	sanitize_string,
	validate_answers,
	validate_client_email,
	validate_date_string,
	validate_docname,
	validate_int,
	validate_rfc3339_string,
	validate_url,
)

# Raised on purpose with a client-facing message; everything else is internal
CLIENT_ERRORS = (
	frappe.ValidationError,
	frappe.AuthenticationError,
	frappe.PermissionError,
	frappe.TooManyRequestsError,
)


def _internal_error(context: str) -> None:
	"""Log the current exception and raise a generic 500."""
	frappe.log_error(title=f"Scheduling API Error: {context}", message=frappe.get_traceback())
	frappe.throw(_("Something went wrong, please try again later"), SchedulingInternalError)


def _created() -> None:
	frappe.response["http_status_code"] = 201


def _get_owned_link(link: str, advisor: str) -> Any:
	doc = get_link(link)
	if doc.advisor != advisor:
		frappe.throw(_("Scheduling link not found"), LinkNotFoundError)
	return doc


def _serialize_window(window: Any) -> Dict[str, Any]:
	return {
		"id": window.name,
		"start_hour": window.start_hour,
		"end_hour": window.end_hour,
		"weekday": window.weekday,
		"weekday_name": WEEKDAY_NAMES[window.weekday],
		"is_active": bool(window.is_active),
	}


def _serialize_meeting(row: Any) -> Dict[str, Any]:
	return {
		"id": row.name,
		"client_email": row.client_email,
		"linkedin_url": row.linkedin_url or "",
		"start_time": format_rfc3339(from_db(row.start_time)),
		"end_time": format_rfc3339(from_db(row.end_time)),
		"answers": frappe.parse_json(row.answers) if row.answers else [],
		"context_notes": frappe.parse_json(row.context_notes) if row.context_notes else {},
	}


# ===================
# Scheduling Links
# ===================

@frappe.whitelist(methods=["POST"])
def create_scheduling_link(
	title: str,
	duration: int,
	custom_questions: Any,
	max_days_in_advance: int,
	max_uses: Optional[int] = None,
	expires_at: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Create a bookable link for the logged-in advisor.

	Args:
		title: link title shown to clients
		duration: meeting length in minutes (> 0)
		custom_questions: list (or JSON list) of prompts, at least one
		max_days_in_advance: booking horizon in days (>= 0)
		max_uses: optional cap on meetings (empty = unlimited)
		expires_at: optional RFC3339 expiry

	Returns:
		dict: the created link (HTTP 201)

	Example:
		```javascript
		frappe.call({
			method: "advisor_scheduling.api.scheduling.create_scheduling_link",
			args: {
				title: "Intro call",
				duration: 30,
				custom_questions: ["What would you like to discuss?"],
				max_days_in_advance: 14
			}
		});
		```
	"""
	advisor = require_advisor()

	title = sanitize_string(title, 140)
	if not title:
		frappe.throw(_("title is required"), SchedulingValidationError)

	duration = validate_int(duration, "duration", minimum=1)
	max_days_in_advance = validate_int(max_days_in_advance, "max_days_in_advance", minimum=0)
	if max_uses not in (None, ""):
		max_uses = validate_int(max_uses, "max_uses", minimum=1)
	else:
		max_uses = None

	if isinstance(custom_questions, str):
		try:
			custom_questions = frappe.parse_json(custom_questions)
		except ValueError:
			custom_questions = None
	if not isinstance(custom_questions, list) or not custom_questions:
		frappe.throw(_("custom_questions must be a non-empty list"), SchedulingValidationError)
	custom_questions = [sanitize_string(q, 500) for q in custom_questions]

	expires = validate_rfc3339_string(expires_at, "expires_at") if expires_at else None

	try:
		link = create_link(
			advisor,
			title,
			duration,
			custom_questions,
			max_days_in_advance,
			max_uses=max_uses,
			expires_at=expires
		)
		_created()
		return serialize_link(link)

	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("create_scheduling_link")


@frappe.whitelist(methods=["GET"])
def get_scheduling_links() -> List[Dict[str, Any]]:
	"""All links of the logged-in advisor, newest first."""
	advisor = require_advisor()

	try:
		return list_links(advisor)
	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("get_scheduling_links")


@frappe.whitelist(methods=["GET"])
def get_scheduling_link(link: str) -> Dict[str, Any]:
	advisor = require_advisor()
	link = validate_docname(link, "link")
	return serialize_link(_get_owned_link(link, advisor))


@frappe.whitelist(allow_guest=True, methods=["GET"])
def get_public_scheduling_link(link: str) -> Dict[str, Any]:
	"""
	Link details for the public booking page.

	Rate limited per IP (public_rate_limit per minute).
	"""
	config = get_scheduling_config()
	check_rate_limit("get_public_scheduling_link", limit=config.public_rate_limit, seconds=60)

	link = validate_docname(link, "link")
	return serialize_link(get_link(link))


@frappe.whitelist(methods=["POST"])
def deactivate_scheduling_link(link: str) -> Dict[str, Any]:
	"""Soft-delete a link. Deactivating an inactive link is a no-op."""
	advisor = require_advisor()
	link = validate_docname(link, "link")

	try:
		return serialize_link(deactivate_link(link, advisor))
	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("deactivate_scheduling_link")


@frappe.whitelist(methods=["GET"])
def get_link_meetings(link: str) -> List[Dict[str, Any]]:
	"""Meetings booked on one of the advisor's links, by start time."""
	advisor = require_advisor()
	link = validate_docname(link, "link")
	_get_owned_link(link, advisor)

	try:
		return [_serialize_meeting(row) for row in list_link_meetings(link)]

	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("get_link_meetings")


# ===================
# Scheduling Windows
# ===================

@frappe.whitelist(methods=["POST"])
def create_scheduling_window(start_hour: int, end_hour: int, weekday: int) -> Dict[str, Any]:
	"""
	Create a weekly availability window for the logged-in advisor.

	Args:
		start_hour: 0-23
		end_hour: 1-24, greater than start_hour
		weekday: 0 (Sunday) - 6 (Saturday)

	Returns:
		dict: the created window (HTTP 201)
	"""
	advisor = require_advisor()

	start_hour = validate_int(start_hour, "start_hour", minimum=0, maximum=24)
	end_hour = validate_int(end_hour, "end_hour", minimum=0, maximum=24)
	weekday = validate_int(weekday, "weekday", minimum=0, maximum=6)

	try:
		window = create_window(advisor, weekday, start_hour, end_hour)
		_created()
		return _serialize_window(window)

	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("create_scheduling_window")


@frappe.whitelist(methods=["GET"])
def get_scheduling_windows() -> List[Dict[str, Any]]:
	advisor = require_advisor()

	try:
		return [_serialize_window(window) for window in list_windows(advisor)]
	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("get_scheduling_windows")


@frappe.whitelist(methods=["DELETE", "POST"])
def delete_scheduling_window(window: str) -> Dict[str, Any]:
	"""Soft-delete (deactivate) a window. Idempotent."""
	advisor = require_advisor()
	window = validate_docname(window, "window")

	try:
		deactivate_window(window, advisor)
		return {"message": _("Scheduling window deleted successfully")}

	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("delete_scheduling_window")


@frappe.whitelist(methods=["POST"])
def activate_scheduling_window(window: str) -> Dict[str, Any]:
	"""Re-open a deactivated or consumed window. Idempotent."""
	advisor = require_advisor()
	window = validate_docname(window, "window")

	try:
		doc = activate_window(window, advisor)
		return _serialize_window(doc)

	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("activate_scheduling_window")


# ===================
# Slots
# ===================

def _available_slots(link: str, date: str) -> List[Dict[str, str]]:
	link = validate_docname(link, "link")
	doc = get_link(link)
	target_date = validate_date_string(date, "date")

	try:
		return get_slots_for_date(doc, target_date, config=get_scheduling_config()).serialize()
	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("get_available_slots")


@frappe.whitelist(methods=["GET"])
def get_available_slots(link: str, date: Optional[str] = None) -> List[Dict[str, str]]:
	"""
	Bookable slots of a link on a date (advisor preview).

	Args:
		link: Scheduling Link name
		date: YYYY-MM-DD

	Returns:
		list[dict]: [{"start": "2026-01-19T09:00:00Z", "end": "2026-01-19T09:30:00Z"}, ...]

	An empty list (not an error) is returned for dates with no availability,
	and for expired, exhausted or too-far-in-advance links.
	"""
	require_advisor()
	return _available_slots(link, date)


@frappe.whitelist(allow_guest=True, methods=["GET"])
def get_public_available_slots(link: str, date: Optional[str] = None) -> List[Dict[str, str]]:
	"""
	Public variant of get_available_slots.

	Rate limited per IP (public_rate_limit per minute).

	Example:
		```javascript
		frappe.call({
			method: "advisor_scheduling.api.scheduling.get_public_available_slots",
			args: {link: "a1b2c3d4e5", date: "2026-01-19"},
			callback: function(r) {
				console.log(r.message); // [{start, end}, ...]
			}
		});
		```
	"""
	config = get_scheduling_config()
	check_rate_limit("get_available_slots", limit=config.public_rate_limit, seconds=60)
	return _available_slots(link, date)


@frappe.whitelist(allow_guest=True, methods=["GET"])
def get_available_slots_range(link: str, from_date: Optional[str] = None, to_date: Optional[str] = None) -> Dict[str, List[Dict[str, str]]]:
	"""
	Slots per date for a calendar view, dates without slots omitted.

	The range is capped at max_range_days (31 by default).
	"""
	config = get_scheduling_config()
	check_rate_limit("get_available_slots", limit=config.public_rate_limit, seconds=60)

	link = validate_docname(link, "link")
	doc = get_link(link)
	start_date = validate_date_string(from_date, "from_date")
	end_date = validate_date_string(to_date, "to_date")

	if start_date > end_date:
		frappe.throw(_("from_date must be on or before to_date"), SchedulingValidationError)
	if (end_date - start_date).days >= config.max_range_days:
		frappe.throw(
			_("Date range cannot exceed {0} days").format(config.max_range_days),
			SchedulingValidationError
		)

	try:
		return get_slots_for_range(doc, start_date, end_date, config=config)
	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("get_available_slots_range")


# ===================
# Meetings
# ===================

def _create_meeting(
	link: str,
	client_email: str,
	start_time: str,
	end_time: str,
	answers: Any,
	linkedin_url: Optional[str]
) -> Dict[str, Any]:
	config = get_scheduling_config()

	link = validate_docname(link, "link")
	get_link(link)

	client_email = validate_client_email(client_email)
	linkedin_url = validate_url(linkedin_url, "linkedin_url")
	start = validate_rfc3339_string(start_time, "start_time")
	end = validate_rfc3339_string(end_time, "end_time")
	answers = validate_answers(answers)

	try:
		meeting = book_meeting(
			link,
			start,
			end,
			client_email,
			answers,
			linkedin_url=linkedin_url,
			config=config
		)
		_created()
		return meeting.as_summary()

	except CLIENT_ERRORS:
		raise
	except Exception:
		_internal_error("create_meeting")


@frappe.whitelist(methods=["POST"])
def create_meeting(
	link: str,
	client_email: Optional[str] = None,
	start_time: Optional[str] = None,
	end_time: Optional[str] = None,
	answers: Any = None,
	linkedin_url: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Book a meeting on a link (logged-in user).

	Args:
		link: Scheduling Link name
		client_email: required, valid email
		start_time: RFC3339
		end_time: RFC3339
		answers: map of question -> answer
		linkedin_url: optional client profile URL

	Returns:
		dict: meeting summary (HTTP 201)
	"""
	require_advisor()
	return _create_meeting(link, client_email, start_time, end_time, answers, linkedin_url)


@frappe.whitelist(allow_guest=True, methods=["POST"])
def create_public_meeting(
	link: str,
	client_email: Optional[str] = None,
	start_time: Optional[str] = None,
	end_time: Optional[str] = None,
	answers: Any = None,
	linkedin_url: Optional[str] = None,
	honeypot: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Book a meeting from the public booking page.

	Rate limited per IP (booking_rate_limit per minute).
	Protected by honeypot field.

	Example:
		```javascript
		frappe.call({
			method: "advisor_scheduling.api.scheduling.create_public_meeting",
			args: {
				link: "a1b2c3d4e5",
				client_email: "client@example.com",
				start_time: "2026-01-19T09:00:00Z",
				end_time: "2026-01-19T09:30:00Z",
				answers: {"What would you like to discuss?": "Retirement planning"}
			}
		});
		```
	"""
	config = get_scheduling_config()
	check_honeypot(honeypot)
	check_rate_limit("create_meeting", limit=config.booking_rate_limit, seconds=60)

	return _create_meeting(link, client_email, start_time, end_time, answers, linkedin_url)
