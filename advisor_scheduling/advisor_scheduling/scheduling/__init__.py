"""
Scheduling Services Module

Core availability and booking engine:
- Window store (windows.py)
- Link store (links.py)
- Overlap detection and meeting queries (overlap.py)
- Slot generation (slots.py)
- Booking commit (booking.py)
- Scheduled tasks (tasks.py)
- Configuration, errors and time helpers (config.py, errors.py, timeutils.py)
"""
