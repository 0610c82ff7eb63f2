"""
Security Utilities for Public APIs

Guards the guest scheduling endpoints (link page, slots, booking) and the
advisor-only management endpoints.
"""

import re
import time
import frappe
from frappe import _
from frappe.utils import cint

from advisor_scheduling.advisor_scheduling.scheduling.errors import SchedulingValidationError

RATE_LIMIT_PREFIX = "rate_limit:advisor_scheduling"
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


# ===================
# Rate Limiting
# ===================

def check_rate_limit(action: str, limit: int = 10, seconds: int = 60) -> None:
	"""
	Allow at most ``limit`` calls of ``action`` per client IP in each
	fixed ``seconds`` window. Counters live in the Redis cache and expire
	with their window.

	Raises:
		frappe.TooManyRequestsError: limit reached for the current window
	"""
	if limit <= 0:
		return

	ip = get_client_ip()
	bucket = int(time.time() // seconds)
	cache_key = f"{RATE_LIMIT_PREFIX}:{action}:{ip}:{bucket}"

	hits = cint(frappe.cache.get_value(cache_key))
	if hits >= limit:
		frappe.logger("advisor_scheduling").warning(
			f"Rate limit hit for {action} from {ip} ({limit} per {seconds}s)"
		)
		frappe.throw(
			_("Too many requests. Please wait a moment and try again."),
			frappe.TooManyRequestsError
		)

	frappe.cache.set_value(cache_key, hits + 1, expires_in_sec=seconds)


def get_client_ip() -> str:
	"""
	Client IP as resolved by Frappe for the current request (first
	X-Forwarded-For hop, else REMOTE_ADDR). "local" outside a request.
	"""
	return getattr(frappe.local, "request_ip", None) or "local"


# ===================
# Honeypot Validation
# ===================

def check_honeypot(honeypot_value: str = None) -> None:
	"""
	Reject a booking whose hidden honeypot field was filled in.

	The client gets the same generic 400 as any malformed request.
	"""
	if not honeypot_value:
		return

	frappe.logger("advisor_scheduling").warning(
		f"Booking rejected by honeypot from {get_client_ip()}: {str(honeypot_value)[:100]!r}"
	)
	frappe.throw(_("Invalid request"), SchedulingValidationError)


# ===================
# Advisor Session
# ===================

def require_advisor() -> str:
	"""
	Return the logged-in advisor (Frappe user).

	Raises:
		frappe.AuthenticationError: for Guest sessions
	"""
	if frappe.session.user == "Guest":
		frappe.throw(_("Authentication required"), frappe.AuthenticationError)
	return frappe.session.user


# ===================
# Input Sanitization
# ===================

def sanitize_string(value: str, max_length: int = 500) -> str:
	"""Titles and questions: control characters removed, trimmed, capped. None when blank."""
	cleaned = CONTROL_CHARS.sub("", str(value or "")).strip()[:max_length].strip()
	return cleaned or None
