"""
Advisor Scheduling API

Structure:
    api/
    ├── __init__.py              # This file
    ├── scheduling/              # Scheduling domain
    │   └── __init__.py          # Re-exports from scheduling_api
    ├── shared/                  # Shared utilities
    │   ├── __init__.py          # Re-exports security helpers and validators
    │   └── validators.py        # Scheduling input validators
    ├── scheduling_api.py        # Whitelisted endpoints
    └── security.py              # Rate limiting, honeypot, advisor session

Usage:
    frappe.call("advisor_scheduling.api.scheduling.get_public_available_slots", ...)
"""

from . import scheduling
from . import shared

__all__ = [
	"scheduling",
	"shared",
]
