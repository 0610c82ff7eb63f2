"""
Fixtures shared by the scheduling tests.
"""

from datetime import datetime

import frappe
import pytz

from advisor_scheduling.advisor_scheduling.scheduling.config import get_scheduling_config

# Monday
TEST_DATE = datetime(2026, 1, 19).date()
# Sunday noon before TEST_DATE
TEST_NOW = datetime(2026, 1, 18, 12, 0, tzinfo=pytz.UTC)


def make_advisor(email: str) -> str:
	"""Create (or reuse) a website user acting as advisor."""
	if not frappe.db.exists("User", email):
		frappe.get_doc({
			"doctype": "User",
			"email": email,
			"first_name": email.split("@")[0],
			"send_welcome_email": 0,
			"enabled": 1
		}).insert(ignore_permissions=True)
	return email


def make_window(advisor: str, weekday: int = 1, start_hour: int = 9, end_hour: int = 10, is_active: int = 1):
	return frappe.get_doc({
		"doctype": "Scheduling Window",
		"advisor": advisor,
		"weekday": weekday,
		"start_hour": start_hour,
		"end_hour": end_hour,
		"is_active": is_active
	}).insert(ignore_permissions=True)


def make_link(advisor: str, **kwargs):
	values = {
		"doctype": "Scheduling Link",
		"advisor": advisor,
		"title": "Intro call",
		"duration": 30,
		"max_days_in_advance": 30,
		"custom_questions": frappe.as_json(["What would you like to discuss?"]),
		"is_active": 1
	}
	values.update(kwargs)
	return frappe.get_doc(values).insert(ignore_permissions=True)


def utc(*args) -> datetime:
	return datetime(*args, tzinfo=pytz.UTC)


def make_config(**overrides):
	"""UTC config without background notifications."""
	values = {"timezone": "UTC", "send_notifications": False}
	values.update(overrides)
	return get_scheduling_config(values)
