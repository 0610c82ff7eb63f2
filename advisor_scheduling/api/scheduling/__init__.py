"""
Scheduling API Domain

Scheduling links, weekly windows, slot lookup and meeting booking.
"""

from advisor_scheduling.api.scheduling_api import (
	# Links
	create_scheduling_link,
	get_scheduling_links,
	get_scheduling_link,
	get_public_scheduling_link,
	deactivate_scheduling_link,
	get_link_meetings,
	# Windows
	create_scheduling_window,
	get_scheduling_windows,
	delete_scheduling_window,
	activate_scheduling_window,
	# Slots
	get_available_slots,
	get_public_available_slots,
	get_available_slots_range,
	# Meetings
	create_meeting,
	create_public_meeting,
)

__all__ = [
	# Links
	"create_scheduling_link",
	"get_scheduling_links",
	"get_scheduling_link",
	"get_public_scheduling_link",
	"deactivate_scheduling_link",
	"get_link_meetings",
	# Windows
	"create_scheduling_window",
	"get_scheduling_windows",
	"delete_scheduling_window",
	"activate_scheduling_window",
	# Slots
	"get_available_slots",
	"get_public_available_slots",
	"get_available_slots_range",
	# Meetings
	"create_meeting",
	"create_public_meeting",
]
