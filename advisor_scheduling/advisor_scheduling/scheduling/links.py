"""
Link Store

Data access for Scheduling Links. A link is immutable after creation except
for its ``is_active`` flag.
"""

import frappe
from frappe import _
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import LinkNotFoundError
from .timeutils import format_rfc3339, from_db, to_db

LINK_FIELDS = [
	"name",
	"advisor",
	"title",
	"duration",
	"max_uses",
	"expires_at",
	"max_days_in_advance",
	"custom_questions",
	"is_active",
]


def create_link(
	advisor: str,
	title: str,
	duration: int,
	custom_questions: List[str],
	max_days_in_advance: int,
	max_uses: Optional[int] = None,
	expires_at: Optional[datetime] = None
) -> Any:
	"""
	Insert an active Scheduling Link.

	Field validation (duration > 0, horizon >= 0, at least one question)
	runs in the DocType controller.
	"""
	link = frappe.get_doc({
		"doctype": "Scheduling Link",
		"advisor": advisor,
		"title": title,
		"duration": duration,
		"max_uses": max_uses,
		"expires_at": to_db(expires_at) if expires_at else None,
		"max_days_in_advance": max_days_in_advance,
		"custom_questions": frappe.as_json(list(custom_questions or [])),
		"is_active": 1
	})
	link.insert(ignore_permissions=True)
	return link


def get_link(name: str) -> Any:
	"""
	Raises:
		LinkNotFoundError: unknown link
	"""
	if not name or not frappe.db.exists("Scheduling Link", name):
		frappe.throw(_("Scheduling link not found"), LinkNotFoundError)
	return frappe.get_doc("Scheduling Link", name)


def get_link_for_update(name: str) -> Any:
	"""
	Load a link while holding a row lock until the transaction ends.

	Concurrent bookings on the same link queue up on this lock, which makes
	the overlap check and the insert that follows a single atomic unit, as
	long as those checks also read with FOR UPDATE.
	"""
	locked = frappe.db.get_value("Scheduling Link", name, "name", for_update=True)
	if not locked:
		frappe.throw(_("Scheduling link not found"), LinkNotFoundError)
	# Locking load, so is_active and expires_at are the committed values
	return frappe.get_doc("Scheduling Link", name, for_update=True)


def list_links(advisor: str) -> List[Dict[str, Any]]:
	rows = frappe.get_all(
		"Scheduling Link",
		filters={"advisor": advisor},
		fields=LINK_FIELDS,
		order_by="creation desc"
	)
	return [serialize_link(row) for row in rows]


def deactivate_link(name: str, advisor: Optional[str] = None) -> Any:
	"""Soft-delete a link. Idempotent."""
	link = get_link(name)
	if advisor and link.advisor != advisor:
		frappe.throw(_("Scheduling link not found"), LinkNotFoundError)

	if link.is_active:
		link.db_set("is_active", 0)
		frappe.logger("advisor_scheduling").info(f"Scheduling Link {link.name} deactivated")
	return link


def get_max_uses(link: Any) -> Optional[int]:
	"""max_uses as an int, or None for unlimited (empty or 0)."""
	return link.max_uses or None


def get_custom_questions(link: Any) -> List[str]:
	questions = link.get("custom_questions")
	if not questions:
		return []
	if isinstance(questions, str):
		questions = frappe.parse_json(questions)
	return [str(q) for q in questions]


def serialize_link(link: Any) -> Dict[str, Any]:
	"""API representation of a link (doc or get_all row)."""
	expires_at = link.get("expires_at")
	return {
		"id": link.get("name"),
		"title": link.get("title"),
		"duration": link.get("duration"),
		"max_uses": get_max_uses(link),
		"expires_at": format_rfc3339(from_db(expires_at)) if expires_at else None,
		"max_days_in_advance": link.get("max_days_in_advance"),
		"custom_questions": get_custom_questions(link),
		"is_active": bool(link.get("is_active")),
	}
