"""
Shared utilities for the Advisor Scheduling API.

Re-exports security helpers (rate limiting, honeypot, advisor session,
sanitization) and the scheduling input validators.
"""

from advisor_scheduling.api.security import (
	check_honeypot,
	check_rate_limit,
	get_client_ip,
	require_advisor,
	sanitize_string,
)

from .validators import (
	validate_answers,
	validate_client_email,
	validate_date_string,
	validate_docname,
	validate_int,
	validate_rfc3339_string,
	validate_url,
)

__all__ = [
	# Security
	"check_honeypot",
	"check_rate_limit",
	"get_client_ip",
	"require_advisor",
	"sanitize_string",
	# Validators
	"validate_answers",
	"validate_client_email",
	"validate_date_string",
	"validate_docname",
	"validate_int",
	"validate_rfc3339_string",
	"validate_url",
]
