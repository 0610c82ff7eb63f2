"""
Scheduling Configuration

Explicit configuration object for the booking engine. Values come from the
site config (``site_config.json``) under keys prefixed ``advisor_scheduling_``
and are read once per request by ``get_scheduling_config``; the resulting
object is passed down to the services instead of being read ambiently.

Example site_config.json:

	{
		"advisor_scheduling_timezone": "America/Bogota",
		"advisor_scheduling_slot_overlap_policy": "dedupe",
		"advisor_scheduling_notification_timeout": 180
	}
"""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Dict, Optional

import frappe
import pytz

CONF_PREFIX = "advisor_scheduling_"

OVERLAP_POLICY_KEEP = "keep"
OVERLAP_POLICY_DEDUPE = "dedupe"
OVERLAP_POLICIES = (OVERLAP_POLICY_KEEP, OVERLAP_POLICY_DEDUPE)


@dataclass(frozen=True)
class SchedulingConfig:
	timezone: str = "UTC"
	slot_overlap_policy: str = OVERLAP_POLICY_KEEP
	send_notifications: bool = True
	notification_queue: str = "short"
	# seconds
	notification_timeout: int = 120
	public_rate_limit: int = 30
	booking_rate_limit: int = 5
	max_range_days: int = 31

	@property
	def tz(self) -> tzinfo:
		"""Reference timezone for window hours and weekdays."""
		try:
			return pytz.timezone(self.timezone)
		except pytz.UnknownTimeZoneError:
			frappe.logger("advisor_scheduling").warning(
				f"Unknown timezone '{self.timezone}' in scheduling config, using UTC"
			)
			return pytz.UTC

	def now(self) -> datetime:
		"""Evaluation instant, timezone aware (UTC)."""
		return datetime.now(pytz.UTC)


def get_scheduling_config(overrides: Optional[Dict[str, Any]] = None) -> SchedulingConfig:
	"""
	Build a SchedulingConfig from the current site config.

	Args:
		overrides: explicit values that win over site config (tests, scripts)

	Returns:
		SchedulingConfig
	"""
	values = {}
	for field in SchedulingConfig.__dataclass_fields__:
		key = CONF_PREFIX + field
		if frappe.conf.get(key) is not None:
			values[field] = frappe.conf.get(key)

	if overrides:
		values.update(overrides)

	policy = values.get("slot_overlap_policy", OVERLAP_POLICY_KEEP)
	if policy not in OVERLAP_POLICIES:
		frappe.logger("advisor_scheduling").warning(
			f"Unknown slot_overlap_policy '{policy}', falling back to '{OVERLAP_POLICY_KEEP}'"
		)
		values["slot_overlap_policy"] = OVERLAP_POLICY_KEEP

	return SchedulingConfig(**values)
