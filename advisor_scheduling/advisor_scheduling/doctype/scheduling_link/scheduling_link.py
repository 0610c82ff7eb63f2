# Copyright (c) 2026, Advisor Scheduling Contributors
# For license information, please see license.txt

"""
Scheduling Link DocType

Shareable booking page over an advisor's availability.
"""

import json

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint, get_datetime

from advisor_scheduling.advisor_scheduling.scheduling.errors import SchedulingValidationError

# Everything but is_active is frozen once the link exists
IMMUTABLE_FIELDS = (
	"advisor",
	"title",
	"duration",
	"max_uses",
	"expires_at",
	"max_days_in_advance",
	"custom_questions",
)


def get_changed_fields(doc: Document, fieldnames) -> list:
	"""
	Fields whose stored value differs from the one being saved.

	Values are compared by field type, so 0 and empty Ints, datetime strings
	and objects, or reformatted JSON do not count as changes.
	"""
	before = doc.get_doc_before_save()
	if not before:
		return []

	changed = []
	for fieldname in fieldnames:
		old, new = before.get(fieldname), doc.get(fieldname)
		fieldtype = doc.meta.get_field(fieldname).fieldtype

		if fieldtype in ("Int", "Check"):
			differs = cint(old) != cint(new)
		elif fieldtype == "Datetime":
			differs = (get_datetime(old) if old else None) != (get_datetime(new) if new else None)
		elif fieldtype == "JSON":
			differs = frappe.parse_json(old or "null") != frappe.parse_json(new or "null")
		else:
			differs = (old or None) != (new or None)

		if differs:
			changed.append(fieldname)

	return changed


class SchedulingLink(Document):
	"""
	Validations:
	- title required
	- duration > 0 (minutes)
	- max_days_in_advance >= 0
	- max_uses >= 0 (0 or empty = unlimited)
	- custom_questions: JSON array with at least one non-empty prompt
	- only is_active may change after creation
	"""

	def validate(self) -> None:
		if not self.advisor:
			self.advisor = frappe.session.user

		self._validate_title()
		self._validate_duration()
		self._validate_limits()
		self._validate_custom_questions()
		self._validate_immutable()

	def _validate_title(self) -> None:
		if not (self.title or "").strip():
			frappe.throw(_("Title is required"), SchedulingValidationError)

	def _validate_duration(self) -> None:
		if not self.duration or int(self.duration) <= 0:
			frappe.throw(_("Duration must be greater than 0 minutes"), SchedulingValidationError)

	def _validate_limits(self) -> None:
		if self.max_days_in_advance is not None and int(self.max_days_in_advance) < 0:
			frappe.throw(_("Max Days In Advance cannot be negative"), SchedulingValidationError)

		if self.max_uses is not None and int(self.max_uses) < 0:
			frappe.throw(_("Max Uses cannot be negative"), SchedulingValidationError)

	def _validate_custom_questions(self) -> None:
		questions = self.custom_questions
		if isinstance(questions, str):
			try:
				questions = json.loads(questions) if questions.strip() else []
			except ValueError:
				frappe.throw(_("Custom Questions must be a JSON array of strings"), SchedulingValidationError)

		if not isinstance(questions, list):
			frappe.throw(_("Custom Questions must be a JSON array of strings"), SchedulingValidationError)

		questions = [str(q).strip() for q in questions if q is not None and str(q).strip()]
		if not questions:
			frappe.throw(_("At least one custom question is required"), SchedulingValidationError)

		self.custom_questions = frappe.as_json(questions)

	def _validate_immutable(self) -> None:
		if self.is_new():
			return

		changed = get_changed_fields(self, IMMUTABLE_FIELDS)
		if changed:
			frappe.throw(
				_("Scheduling links cannot be edited after creation ({0})").format(", ".join(changed)),
				SchedulingValidationError
			)
