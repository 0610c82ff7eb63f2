"""
Tests for scheduling/slots.py

Tests the interval walk of generate_slots and the short-circuits of
get_available_slots.
"""

import unittest
from datetime import date, datetime

import frappe
import pytz
from frappe.tests.utils import FrappeTestCase

from advisor_scheduling.advisor_scheduling.scheduling.booking import book_meeting
from advisor_scheduling.advisor_scheduling.scheduling.slots import (
	REASON_EXHAUSTED,
	REASON_EXPIRED,
	REASON_NO_AVAILABILITY,
	REASON_TOO_FAR,
	generate_slots,
	get_available_slots,
	get_available_slots_range,
	serialize_slots,
)
from advisor_scheduling.advisor_scheduling.tests.utils import (
	TEST_DATE,
	TEST_NOW,
	make_advisor,
	make_config,
	make_link,
	make_window,
	utc,
)

UTC = pytz.UTC
MORNING = [{"start_hour": 9, "end_hour": 10}]


class TestGenerateSlots(unittest.TestCase):
	"""Pure slot generation, no database."""

	def test_thirty_minute_slots_in_one_hour_window(self):
		slots = generate_slots(TEST_DATE, MORNING, [], 30, TEST_NOW, UTC)

		self.assertEqual(serialize_slots(slots), [
			{"start": "2026-01-19T09:00:00Z", "end": "2026-01-19T09:30:00Z"},
			{"start": "2026-01-19T09:30:00Z", "end": "2026-01-19T10:00:00Z"},
		])

	def test_slot_ending_at_window_end_is_included(self):
		slots = generate_slots(TEST_DATE, MORNING, [], 60, TEST_NOW, UTC)

		self.assertEqual(len(slots), 1)
		self.assertEqual(slots[0]["end"], utc(2026, 1, 19, 10, 0))

	def test_partial_slot_is_dropped(self):
		slots = generate_slots(TEST_DATE, MORNING, [], 45, TEST_NOW, UTC)

		self.assertEqual(len(slots), 1)
		self.assertEqual(slots[0]["start"], utc(2026, 1, 19, 9, 0))
		self.assertEqual(slots[0]["end"], utc(2026, 1, 19, 9, 45))

	def test_duration_longer_than_window(self):
		self.assertEqual(generate_slots(TEST_DATE, MORNING, [], 90, TEST_NOW, UTC), [])

	def test_non_positive_duration(self):
		self.assertEqual(generate_slots(TEST_DATE, MORNING, [], 0, TEST_NOW, UTC), [])

	def test_slots_must_start_after_now(self):
		now = utc(2026, 1, 19, 9, 0)
		slots = generate_slots(TEST_DATE, MORNING, [], 30, now, UTC)

		# 09:00 is not strictly after now
		self.assertEqual([s["start"] for s in slots], [utc(2026, 1, 19, 9, 30)])

	def test_booked_meeting_removes_slot(self):
		meetings = [{"start": utc(2026, 1, 19, 9, 0), "end": utc(2026, 1, 19, 9, 30)}]
		slots = generate_slots(TEST_DATE, MORNING, meetings, 30, TEST_NOW, UTC)

		self.assertEqual([s["start"] for s in slots], [utc(2026, 1, 19, 9, 30)])

	def test_partially_overlapping_meeting_removes_both_slots(self):
		meetings = [{"start": utc(2026, 1, 19, 9, 15), "end": utc(2026, 1, 19, 9, 45)}]
		slots = generate_slots(TEST_DATE, MORNING, meetings, 30, TEST_NOW, UTC)

		self.assertEqual(slots, [])

	def test_back_to_back_meeting_does_not_block(self):
		meetings = [{"start": utc(2026, 1, 19, 8, 30), "end": utc(2026, 1, 19, 9, 0)}]
		slots = generate_slots(TEST_DATE, MORNING, meetings, 30, TEST_NOW, UTC)

		self.assertEqual(len(slots), 2)

	def test_zero_length_meeting_at_slot_start_blocks(self):
		meetings = [{"start": utc(2026, 1, 19, 9, 30), "end": utc(2026, 1, 19, 9, 30)}]
		slots = generate_slots(TEST_DATE, MORNING, meetings, 30, TEST_NOW, UTC)

		self.assertEqual([s["start"] for s in slots], [utc(2026, 1, 19, 9, 0)])

	def test_window_hours_follow_reference_timezone(self):
		bogota = pytz.timezone("America/Bogota")
		slots = generate_slots(TEST_DATE, MORNING, [], 60, TEST_NOW, bogota)

		# 09:00 in Bogota (UTC-5)
		self.assertEqual(serialize_slots(slots), [
			{"start": "2026-01-19T14:00:00Z", "end": "2026-01-19T15:00:00Z"},
		])

	def test_window_ending_at_midnight(self):
		windows = [{"start_hour": 23, "end_hour": 24}]
		slots = generate_slots(TEST_DATE, windows, [], 30, TEST_NOW, UTC)

		self.assertEqual(slots[-1]["end"], utc(2026, 1, 20, 0, 0))

	def test_overlapping_windows_keep_duplicates(self):
		windows = [{"start_hour": 9, "end_hour": 10}, {"start_hour": 9, "end_hour": 11}]
		slots = generate_slots(TEST_DATE, windows, [], 60, TEST_NOW, UTC, overlap_policy="keep")

		self.assertEqual(
			[s["start"] for s in slots],
			[utc(2026, 1, 19, 9, 0), utc(2026, 1, 19, 9, 0), utc(2026, 1, 19, 10, 0)]
		)

	def test_overlapping_windows_dedupe(self):
		windows = [{"start_hour": 9, "end_hour": 10}, {"start_hour": 9, "end_hour": 11}]
		slots = generate_slots(TEST_DATE, windows, [], 60, TEST_NOW, UTC, overlap_policy="dedupe")

		self.assertEqual(
			[s["start"] for s in slots],
			[utc(2026, 1, 19, 9, 0), utc(2026, 1, 19, 10, 0)]
		)

	def test_slots_are_sorted_across_windows(self):
		windows = [{"start_hour": 14, "end_hour": 15}, {"start_hour": 9, "end_hour": 10}]
		slots = generate_slots(TEST_DATE, windows, [], 60, TEST_NOW, UTC)

		self.assertEqual(
			[s["start"] for s in slots],
			[utc(2026, 1, 19, 9, 0), utc(2026, 1, 19, 14, 0)]
		)

	def test_same_inputs_same_output(self):
		first = generate_slots(TEST_DATE, MORNING, [], 30, TEST_NOW, UTC)
		second = generate_slots(TEST_DATE, MORNING, [], 30, TEST_NOW, UTC)

		self.assertEqual(first, second)

	def test_accepts_window_objects(self):
		windows = [frappe._dict(start_hour=9, end_hour=10)]
		slots = generate_slots(TEST_DATE, windows, [], 30, TEST_NOW, UTC)

		self.assertEqual(len(slots), 2)


class TestGetAvailableSlots(FrappeTestCase):
	"""Slot lookup against stored windows, links and meetings."""

	def setUp(self):
		self.advisor = make_advisor("slots-advisor@example.com")
		self.config = make_config()
		make_window(self.advisor, weekday=1, start_hour=9, end_hour=10)

	def tearDown(self):
		frappe.db.rollback()

	def test_returns_slots_for_weekday(self):
		link = make_link(self.advisor)
		query = get_available_slots(link, TEST_DATE, config=self.config, now=TEST_NOW)

		self.assertIsNone(query.reason)
		self.assertEqual(query.serialize(), [
			{"start": "2026-01-19T09:00:00Z", "end": "2026-01-19T09:30:00Z"},
			{"start": "2026-01-19T09:30:00Z", "end": "2026-01-19T10:00:00Z"},
		])

	def test_accepts_date_string(self):
		link = make_link(self.advisor)
		query = get_available_slots(link, "2026-01-19", config=self.config, now=TEST_NOW)

		self.assertEqual(len(query.slots), 2)

	def test_expired_link(self):
		link = make_link(self.advisor, expires_at=datetime(2024, 1, 1))
		query = get_available_slots(
			link, date(2024, 2, 1), config=self.config, now=utc(2024, 1, 1, 0, 0)
		)

		self.assertEqual(query.slots, [])
		self.assertEqual(query.reason, REASON_EXPIRED)

	def test_too_far_in_advance(self):
		link = make_link(self.advisor, max_days_in_advance=0)
		query = get_available_slots(link, TEST_DATE, config=self.config, now=TEST_NOW)

		self.assertEqual(query.slots, [])
		self.assertEqual(query.reason, REASON_TOO_FAR)

	def test_no_window_on_weekday(self):
		link = make_link(self.advisor)
		# Tuesday
		query = get_available_slots(link, date(2026, 1, 20), config=self.config, now=TEST_NOW)

		self.assertEqual(query.slots, [])
		self.assertEqual(query.reason, REASON_NO_AVAILABILITY)

	def test_inactive_window_is_ignored(self):
		link = make_link(self.advisor)
		make_window(self.advisor, weekday=3, start_hour=9, end_hour=10, is_active=0)
		# Wednesday
		query = get_available_slots(link, date(2026, 1, 21), config=self.config, now=TEST_NOW)

		self.assertEqual(query.reason, REASON_NO_AVAILABILITY)

	def test_exhausted_link(self):
		link = make_link(self.advisor, max_uses=1)
		make_window(self.advisor, weekday=1, start_hour=14, end_hour=15)

		book_meeting(
			link.name,
			utc(2026, 1, 19, 9, 0),
			utc(2026, 1, 19, 9, 30),
			"client@example.com",
			{"What would you like to discuss?": "Taxes"},
			config=self.config,
			now=TEST_NOW
		)

		query = get_available_slots(link, TEST_DATE, config=self.config, now=TEST_NOW)

		self.assertEqual(query.slots, [])
		self.assertEqual(query.reason, REASON_EXHAUSTED)

	def test_booked_slot_is_not_offered(self):
		link = make_link(self.advisor)
		make_window(self.advisor, weekday=1, start_hour=14, end_hour=15)

		book_meeting(
			link.name,
			utc(2026, 1, 19, 14, 0),
			utc(2026, 1, 19, 14, 30),
			"client@example.com",
			{},
			config=self.config,
			now=TEST_NOW
		)

		query = get_available_slots(link, TEST_DATE, config=self.config, now=TEST_NOW)
		starts = [s["start"] for s in query.slots]

		# The 14:00 window was consumed by the booking
		self.assertEqual(starts, [utc(2026, 1, 19, 9, 0), utc(2026, 1, 19, 9, 30)])

	def test_range_omits_empty_dates(self):
		link = make_link(self.advisor)
		result = get_available_slots_range(
			link, date(2026, 1, 19), date(2026, 1, 25), config=self.config, now=TEST_NOW
		)

		self.assertEqual(list(result.keys()), ["2026-01-19"])
		self.assertEqual(len(result["2026-01-19"]), 2)
