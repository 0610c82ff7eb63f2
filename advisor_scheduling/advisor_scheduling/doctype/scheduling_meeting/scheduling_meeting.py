# Copyright (c) 2026, Advisor Scheduling Contributors
# For license information, please see license.txt

"""
Scheduling Meeting DocType

A confirmed booking against a Scheduling Link. Meetings are created by
the booking service only and, once inserted, only context_notes may change.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import get_datetime

from advisor_scheduling.advisor_scheduling.doctype.scheduling_link.scheduling_link import get_changed_fields
from advisor_scheduling.advisor_scheduling.scheduling.errors import InvalidSlotError, SchedulingValidationError
from advisor_scheduling.advisor_scheduling.scheduling.timeutils import format_rfc3339, from_db

FROZEN_FIELDS = (
	"scheduling_link",
	"advisor",
	"client_email",
	"linkedin_url",
	"start_time",
	"end_time",
	"answers",
	"slot_key",
)


def make_slot_key(scheduling_link: str, start_time) -> str:
	"""Normalized (link, UTC start) key backing the unique index."""
	return f"{scheduling_link}|{format_rfc3339(from_db(start_time))}"


class SchedulingMeeting(Document):
	def validate(self) -> None:
		self._validate_times()
		self._set_advisor()
		self._validate_frozen()

	def before_insert(self) -> None:
		if self.scheduling_link and self.start_time:
			self.slot_key = make_slot_key(self.scheduling_link, self.start_time)

	def _validate_times(self) -> None:
		if not self.start_time or not self.end_time:
			frappe.throw(_("Start Time and End Time are required"), SchedulingValidationError)

		if get_datetime(self.start_time) >= get_datetime(self.end_time):
			frappe.throw(_("Start Time must be before End Time"), InvalidSlotError)

	def _set_advisor(self) -> None:
		if not self.advisor and self.scheduling_link:
			self.advisor = frappe.db.get_value("Scheduling Link", self.scheduling_link, "advisor")

	def _validate_frozen(self) -> None:
		if self.is_new():
			return

		changed = get_changed_fields(self, FROZEN_FIELDS)
		if changed:
			frappe.throw(
				_("Meetings cannot be modified after booking ({0})").format(", ".join(changed)),
				SchedulingValidationError
			)

	def get_answers(self) -> list:
		return frappe.parse_json(self.answers) if self.answers else []

	def get_context_notes(self) -> dict:
		return frappe.parse_json(self.context_notes) if self.context_notes else {}

	def as_summary(self) -> dict:
		"""API representation of the created meeting."""
		return {
			"id": self.name,
			"scheduling_link": self.scheduling_link,
			"client_email": self.client_email,
			"linkedin_url": self.linkedin_url or "",
			"start_time": format_rfc3339(from_db(self.start_time)),
			"end_time": format_rfc3339(from_db(self.end_time)),
			"answers": self.get_answers(),
			"context_notes": self.get_context_notes(),
		}
