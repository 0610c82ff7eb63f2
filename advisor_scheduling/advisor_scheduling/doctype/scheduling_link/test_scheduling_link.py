# Copyright (c) 2026, Advisor Scheduling Contributors
# See license.txt

"""
Tests for Scheduling Link DocType

Tests field validation and immutability after creation.
"""

import frappe
from frappe.tests.utils import FrappeTestCase

from advisor_scheduling.advisor_scheduling.scheduling.errors import SchedulingValidationError
from advisor_scheduling.advisor_scheduling.tests.utils import make_advisor, make_link


class TestSchedulingLink(FrappeTestCase):
	"""Tests for Scheduling Link DocType."""

	def setUp(self):
		self.advisor = make_advisor("link-advisor@example.com")

	def tearDown(self):
		frappe.db.rollback()

	def test_duration_must_be_positive(self):
		with self.assertRaises(SchedulingValidationError):
			make_link(self.advisor, duration=0)

	def test_questions_required(self):
		with self.assertRaises(SchedulingValidationError):
			make_link(self.advisor, custom_questions="[]")

		with self.assertRaises(SchedulingValidationError):
			make_link(self.advisor, custom_questions='["", "  "]')

	def test_questions_must_be_a_list(self):
		with self.assertRaises(SchedulingValidationError):
			make_link(self.advisor, custom_questions='{"q": "a"}')

	def test_questions_are_normalized(self):
		link = make_link(self.advisor, custom_questions='[" Goal? ", "Budget?"]')

		self.assertEqual(frappe.parse_json(link.custom_questions), ["Goal?", "Budget?"])

	def test_fields_are_frozen_after_creation(self):
		link = make_link(self.advisor)
		link.duration = 60

		with self.assertRaises(SchedulingValidationError):
			link.save(ignore_permissions=True)

	def test_is_active_can_change(self):
		link = make_link(self.advisor)
		link.is_active = 0
		link.save(ignore_permissions=True)

		self.assertEqual(frappe.db.get_value("Scheduling Link", link.name, "is_active"), 0)
