"""
Scheduled Tasks

Background tasks that run periodically:
- deactivate_expired_links: soft-deletes links whose expires_at has passed
"""

import frappe

from .timeutils import to_db
from .config import get_scheduling_config


def deactivate_expired_links() -> int:
	"""
	Set is_active = 0 on active links whose expires_at is in the past.
	Runs hourly (see hooks.py).

	Expiry is already enforced on read and on booking; this only keeps the
	stored status in line with it so link listings show the right state.

	Returns:
		int: number of links deactivated
	"""
	now = to_db(get_scheduling_config().now())

	expired_links = frappe.get_all(
		"Scheduling Link",
		filters={
			"is_active": 1,
			"expires_at": ["<", now],
		},
		pluck="name"
	)

	deactivated_count = 0

	for link_name in expired_links:
		try:
			frappe.db.set_value("Scheduling Link", link_name, "is_active", 0)
			deactivated_count += 1

			frappe.logger("advisor_scheduling").info(
				f"Expired Scheduling Link deactivated: {link_name}"
			)

		except Exception:
			frappe.log_error(
				title="Expired Link Deactivation Failed",
				message=f"Scheduling Link {link_name}\n{frappe.get_traceback()}"
			)
			continue

	if deactivated_count > 0:
		frappe.logger("advisor_scheduling").info(
			f"deactivate_expired_links: {deactivated_count} links deactivated"
		)

	frappe.db.commit()

	return deactivated_count
