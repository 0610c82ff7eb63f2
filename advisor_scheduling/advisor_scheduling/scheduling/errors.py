"""
Scheduling Errors

Exception taxonomy for the availability and booking engine.

Every class carries the ``http_status_code`` that Frappe's request handler
uses when the exception escapes a whitelisted method:

- NotFound   -> 404 (LinkNotFoundError, WindowNotFoundError)
- Validation -> 400 (SchedulingValidationError and subclasses)
- Conflict   -> 400 (SchedulingConflictError and subclasses)
- Internal   -> 500 (SchedulingInternalError, generic message only)
"""

import frappe


class LinkNotFoundError(frappe.DoesNotExistError):
	"""Unknown Scheduling Link."""

	http_status_code = 404


class WindowNotFoundError(frappe.DoesNotExistError):
	"""Unknown Scheduling Window, or one owned by another advisor."""

	http_status_code = 404


class SchedulingValidationError(frappe.ValidationError):
	"""Malformed input: bad date, non-positive duration, missing fields."""

	http_status_code = 400


class InvalidDateError(SchedulingValidationError):
	pass


class InvalidSlotError(SchedulingValidationError):
	"""Requested slot has start >= end."""

	pass


class SchedulingConflictError(frappe.ValidationError):
	"""Request is well formed but the current state does not allow it."""

	http_status_code = 400


class LinkInactiveError(SchedulingConflictError):
	pass


class LinkExpiredError(SchedulingConflictError):
	pass


class LinkExhaustedError(SchedulingConflictError):
	"""Link already has max_uses meetings."""

	pass


class SlotUnavailableError(SchedulingConflictError):
	"""Another meeting on the same link overlaps the requested slot."""

	pass


class SchedulingInternalError(frappe.ValidationError):
	"""Storage or unexpected failure. Details go to the Error Log only."""

	http_status_code = 500
