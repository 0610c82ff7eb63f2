"""
Scheduling Validators

Input validation for the scheduling endpoints. Each validator returns the
cleaned value or raises a 400 SchedulingValidationError (InvalidDateError
for dates and timestamps).
"""

import json
import re
from datetime import date, datetime
from typing import Any, Dict, Optional

import frappe
from frappe import _
from frappe.utils import validate_email_address

from advisor_scheduling.advisor_scheduling.scheduling.errors import InvalidDateError, SchedulingValidationError
from advisor_scheduling.advisor_scheduling.scheduling.timeutils import parse_rfc3339

RFC3339_PATTERN = re.compile(
	r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


def validate_date_string(date_str: str, field_name: str = "date") -> date:
	"""
	Validate and parse a YYYY-MM-DD date.

	Raises:
		InvalidDateError: missing or malformed date
	"""
	if not date_str:
		frappe.throw(_("Missing {0} parameter (expected format: YYYY-MM-DD)").format(field_name), InvalidDateError)

	date_str = str(date_str).strip()

	if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
		frappe.throw(_("Invalid {0} format (expected: YYYY-MM-DD)").format(field_name), InvalidDateError)

	try:
		return datetime.strptime(date_str, "%Y-%m-%d").date()
	except ValueError:
		frappe.throw(_("Invalid {0} format (expected: YYYY-MM-DD)").format(field_name), InvalidDateError)


def validate_rfc3339_string(value: str, field_name: str = "datetime") -> datetime:
	"""
	Validate and parse an RFC3339 timestamp with offset.

	Returns:
		datetime: aware UTC datetime

	Raises:
		InvalidDateError: missing or malformed timestamp
	"""
	if not value:
		frappe.throw(_("{0} is required").format(field_name), InvalidDateError)

	value = str(value).strip()

	if not RFC3339_PATTERN.match(value):
		frappe.throw(
			_("Invalid {0} format (expected RFC3339, e.g. 2026-01-19T09:00:00Z)").format(field_name),
			InvalidDateError
		)

	try:
		return parse_rfc3339(value)
	except ValueError:
		frappe.throw(
			_("Invalid {0} format (expected RFC3339, e.g. 2026-01-19T09:00:00Z)").format(field_name),
			InvalidDateError
		)


def validate_client_email(email: str) -> str:
	"""Required, syntactically valid email address."""
	if not email:
		frappe.throw(_("client_email is required"), SchedulingValidationError)

	email = str(email).strip()
	if len(email) > 254 or not validate_email_address(email, throw=False):
		frappe.throw(_("Invalid client_email"), SchedulingValidationError)

	return email


def validate_url(url: Optional[str], field_name: str = "url") -> Optional[str]:
	"""Optional http(s) URL."""
	if not url:
		return None

	url = str(url).strip()
	if len(url) > 500 or not re.match(r"^https?://[^\s<>\"]+$", url, re.IGNORECASE):
		frappe.throw(_("Invalid {0}").format(field_name), SchedulingValidationError)

	return url


def validate_answers(answers: Any) -> Dict[str, str]:
	"""
	Required map of question -> answer.

	Accepts a dict or its JSON encoding (form-encoded requests).
	"""
	if isinstance(answers, str):
		try:
			answers = json.loads(answers)
		except ValueError:
			frappe.throw(_("answers must be a map of question to answer"), SchedulingValidationError)

	if answers is None or not isinstance(answers, dict):
		frappe.throw(_("answers is required (map of question to answer)"), SchedulingValidationError)

	cleaned = {}
	for question, answer in answers.items():
		question = str(question).strip()[:500]
		if not question:
			continue
		cleaned[question] = "" if answer is None else str(answer).strip()[:5000]

	return cleaned


def validate_int(value: Any, field_name: str, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
	"""Required integer within optional bounds."""
	if value is None or value == "":
		frappe.throw(_("{0} is required").format(field_name), SchedulingValidationError)

	try:
		value = int(value)
	except (TypeError, ValueError):
		frappe.throw(_("{0} must be an integer").format(field_name), SchedulingValidationError)

	if minimum is not None and value < minimum:
		frappe.throw(_("{0} must be at least {1}").format(field_name, minimum), SchedulingValidationError)
	if maximum is not None and value > maximum:
		frappe.throw(_("{0} must be at most {1}").format(field_name, maximum), SchedulingValidationError)

	return value


def validate_docname(name: str, field_name: str = "name") -> str:
	"""
	Validate a document name (ID).

	Ensures the name is not too long and doesn't contain injection patterns.
	"""
	if not name:
		frappe.throw(_("{0} is required").format(field_name), SchedulingValidationError)

	name = str(name).strip()

	if len(name) > 140:
		frappe.throw(_("{0} is too long").format(field_name), SchedulingValidationError)

	dangerous_patterns = [
		r"<script",
		r"javascript:",
		r"onclick",
		r"onerror",
		r"SELECT\s+",
		r"INSERT\s+",
		r"UPDATE\s+",
		r"DELETE\s+",
		r"DROP\s+",
		r"UNION\s+",
		r"--",
		r";",
	]

	for pattern in dangerous_patterns:
		if re.search(pattern, name, re.IGNORECASE):
			frappe.throw(_("Invalid {0}").format(field_name), SchedulingValidationError)

	return name
