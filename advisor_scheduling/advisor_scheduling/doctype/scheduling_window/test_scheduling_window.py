# Copyright (c) 2026, Advisor Scheduling Contributors
# See license.txt

"""
Tests for Scheduling Window DocType
"""

import frappe
from frappe.tests.utils import FrappeTestCase

from advisor_scheduling.advisor_scheduling.scheduling.errors import SchedulingValidationError
from advisor_scheduling.advisor_scheduling.tests.utils import make_advisor, make_window


class TestSchedulingWindow(FrappeTestCase):
	def setUp(self):
		self.advisor = make_advisor("window-advisor@example.com")

	def tearDown(self):
		frappe.db.rollback()

	def test_valid_window(self):
		window = make_window(self.advisor, weekday=0, start_hour=0, end_hour=24)

		self.assertTrue(frappe.db.exists("Scheduling Window", window.name))
		self.assertEqual(window.is_active, 1)

	def test_start_must_be_before_end(self):
		with self.assertRaises(SchedulingValidationError):
			make_window(self.advisor, start_hour=10, end_hour=10)

	def test_hours_in_range(self):
		with self.assertRaises(SchedulingValidationError):
			make_window(self.advisor, start_hour=9, end_hour=25)

	def test_weekday_in_range(self):
		with self.assertRaises(SchedulingValidationError):
			make_window(self.advisor, weekday=7)

	def test_advisor_defaults_to_session_user(self):
		window = frappe.get_doc({
			"doctype": "Scheduling Window",
			"weekday": 2,
			"start_hour": 8,
			"end_hour": 12
		}).insert(ignore_permissions=True)

		self.assertEqual(window.advisor, frappe.session.user)
