"""
Window Store

Data access for Scheduling Windows: recurring weekly blocks of bookable
hours owned by an advisor. Windows are never hard-deleted, only toggled
through ``is_active``.
"""

import frappe
from frappe import _
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import WindowNotFoundError
from .timeutils import weekday_index

WINDOW_FIELDS = ["name", "advisor", "weekday", "start_hour", "end_hour", "is_active"]


def create_window(advisor: str, weekday: int, start_hour: int, end_hour: int) -> Any:
	"""
	Insert an active Scheduling Window.

	Range checks (weekday 0-6, hours 0-24, start < end) run in the DocType
	controller and raise SchedulingValidationError.
	"""
	window = frappe.get_doc({
		"doctype": "Scheduling Window",
		"advisor": advisor,
		"weekday": weekday,
		"start_hour": start_hour,
		"end_hour": end_hour,
		"is_active": 1
	})
	window.insert(ignore_permissions=True)
	return window


def list_windows(advisor: str) -> List[Dict[str, Any]]:
	return frappe.get_all(
		"Scheduling Window",
		filters={"advisor": advisor},
		fields=WINDOW_FIELDS,
		order_by="weekday asc, start_hour asc"
	)


def get_active_windows(advisor: str, weekday: int) -> List[Dict[str, Any]]:
	"""Active windows of an advisor on a weekday (0 = Sunday), by start hour."""
	return frappe.get_all(
		"Scheduling Window",
		filters={"advisor": advisor, "weekday": weekday, "is_active": 1},
		fields=WINDOW_FIELDS,
		order_by="start_hour asc, end_hour asc"
	)


def _get_owned_window(name: str, advisor: Optional[str]) -> Any:
	filters = {"name": name}
	if advisor:
		filters["advisor"] = advisor

	if not frappe.db.exists("Scheduling Window", filters):
		frappe.throw(_("Scheduling window not found"), WindowNotFoundError)

	return frappe.get_doc("Scheduling Window", name)


def set_window_active(name: str, active: bool, advisor: Optional[str] = None) -> Any:
	"""
	Activate or deactivate a window. Idempotent: setting the current state
	again is a no-op.

	Args:
		name: Scheduling Window name
		active: target state
		advisor: when given, the window must belong to this advisor

	Raises:
		WindowNotFoundError: unknown window or owned by someone else
	"""
	window = _get_owned_window(name, advisor)

	if bool(window.is_active) == active:
		return window

	window.db_set("is_active", 1 if active else 0)
	frappe.logger("advisor_scheduling").info(
		f"Scheduling Window {window.name} {'activated' if active else 'deactivated'}"
	)
	return window


def deactivate_window(name: str, advisor: Optional[str] = None) -> Any:
	return set_window_active(name, False, advisor)


def activate_window(name: str, advisor: Optional[str] = None) -> Any:
	return set_window_active(name, True, advisor)


def find_consumed_window(advisor: str, slot_start_local: datetime) -> Optional[str]:
	"""
	Best-effort lookup of the active window a booking depends on.

	Matches by weekday and by hour of the slot start in the reference
	timezone (start_hour <= hour < end_hour). There is no foreign key between
	meetings and windows; with overlapping windows the first match by start
	hour wins.

	Args:
		advisor: owner of the link
		slot_start_local: slot start converted to the reference timezone

	Returns:
		str | None: window name
	"""
	weekday = weekday_index(slot_start_local.date())
	hour = slot_start_local.hour

	matches = frappe.get_all(
		"Scheduling Window",
		filters={
			"advisor": advisor,
			"weekday": weekday,
			"is_active": 1,
			"start_hour": ["<=", hour],
			"end_hour": [">", hour],
		},
		pluck="name",
		order_by="start_hour asc",
		limit=1
	)
	return matches[0] if matches else None
