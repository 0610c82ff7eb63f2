"""
Tests for api/shared/validators.py
"""

import unittest
from datetime import date

import frappe

from advisor_scheduling.advisor_scheduling.scheduling.errors import InvalidDateError, SchedulingValidationError
from advisor_scheduling.advisor_scheduling.tests.utils import utc
from advisor_scheduling.api.shared import (
	validate_answers,
	validate_client_email,
	validate_date_string,
	validate_docname,
	validate_int,
	validate_rfc3339_string,
	validate_url,
)


class TestValidators(unittest.TestCase):
	def test_date_string(self):
		self.assertEqual(validate_date_string("2026-01-19"), date(2026, 1, 19))

	def test_date_string_rejects_bad_input(self):
		for value in (None, "", "19/01/2026", "2026-13-01", "2026-02-30"):
			with self.assertRaises(InvalidDateError, msg=value):
				validate_date_string(value)

	def test_rfc3339_utc(self):
		self.assertEqual(validate_rfc3339_string("2026-01-19T09:00:00Z"), utc(2026, 1, 19, 9, 0))

	def test_rfc3339_offset_is_normalized(self):
		self.assertEqual(validate_rfc3339_string("2026-01-19T04:00:00-05:00"), utc(2026, 1, 19, 9, 0))

	def test_rfc3339_fraction_of_any_length(self):
		for value in ("2026-01-19T09:00:00.5Z", "2026-01-19T09:00:00.50Z", "2026-01-19T09:00:00.500000000Z"):
			self.assertEqual(validate_rfc3339_string(value), utc(2026, 1, 19, 9, 0, 0, 500000), msg=value)

	def test_rfc3339_requires_offset(self):
		with self.assertRaises(InvalidDateError):
			validate_rfc3339_string("2026-01-19T09:00:00")

	def test_client_email(self):
		self.assertEqual(validate_client_email(" client@example.com "), "client@example.com")

		for value in (None, "", "not-an-email"):
			with self.assertRaises(SchedulingValidationError, msg=value):
				validate_client_email(value)

	def test_url(self):
		self.assertIsNone(validate_url(None))
		self.assertEqual(
			validate_url("https://www.linkedin.com/in/someone"),
			"https://www.linkedin.com/in/someone"
		)

		with self.assertRaises(SchedulingValidationError):
			validate_url("javascript:alert(1)")

	def test_answers_accepts_json(self):
		self.assertEqual(validate_answers('{"Goal": "Retire early"}'), {"Goal": "Retire early"})

	def test_answers_must_be_a_map(self):
		for value in (None, "[1, 2]", "not json", ["a"]):
			with self.assertRaises(SchedulingValidationError, msg=value):
				validate_answers(value)

	def test_int_bounds(self):
		self.assertEqual(validate_int("30", "duration", minimum=1), 30)

		with self.assertRaises(SchedulingValidationError):
			validate_int(0, "duration", minimum=1)
		with self.assertRaises(SchedulingValidationError):
			validate_int(7, "weekday", minimum=0, maximum=6)
		with self.assertRaises(SchedulingValidationError):
			validate_int("abc", "duration")

	def test_docname(self):
		self.assertEqual(validate_docname(" a1b2c3d4e5 "), "a1b2c3d4e5")

		with self.assertRaises(SchedulingValidationError):
			validate_docname("x; DROP TABLE users")

	def test_errors_are_client_errors(self):
		with self.assertRaises(frappe.ValidationError) as ctx:
			validate_date_string("bad")

		self.assertEqual(ctx.exception.http_status_code, 400)
