# Copyright (c) 2026, Advisor Scheduling Contributors
# For license information, please see license.txt

"""
Scheduling Window DocType

Recurring weekly block of bookable hours for an advisor.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from advisor_scheduling.advisor_scheduling.scheduling.errors import SchedulingValidationError

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class SchedulingWindow(Document):
	"""
	Validations:
	- advisor defaults to the session user
	- weekday in 0-6 (0 = Sunday)
	- start_hour and end_hour in 0-24, start_hour < end_hour
	"""

	def validate(self) -> None:
		self._set_advisor()
		self._validate_weekday()
		self._validate_hours()

	def _set_advisor(self) -> None:
		if not self.advisor:
			self.advisor = frappe.session.user

	def _validate_weekday(self) -> None:
		if self.weekday is None or not 0 <= int(self.weekday) <= 6:
			frappe.throw(_("Weekday must be between 0 (Sunday) and 6 (Saturday)"), SchedulingValidationError)

	def _validate_hours(self) -> None:
		for fieldname in ("start_hour", "end_hour"):
			value = self.get(fieldname)
			if value is None or not 0 <= int(value) <= 24:
				frappe.throw(
					_("{0} must be between 0 and 24").format(self.meta.get_label(fieldname)),
					SchedulingValidationError
				)

		if int(self.start_hour) >= int(self.end_hour):
			frappe.throw(
				_("Start Hour ({0}) must be less than End Hour ({1})").format(self.start_hour, self.end_hour),
				SchedulingValidationError
			)
