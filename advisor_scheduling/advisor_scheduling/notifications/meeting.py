# Copyright (c) 2026, Advisor Scheduling Contributors
# For license information, please see license.txt

"""
Meeting Notification Service

Emails the advisor when a client books a meeting. Runs as a background job
enqueued by the booking service after the booking commits.

Extensible via hooks:
  - scheduling_meeting_enrichment: callables receiving (meeting, payload)
    and returning a {question: note} mapping stored in context_notes
  - scheduling_meeting_recipients: callables receiving (meeting, link) and
    returning extra recipients
"""

import frappe
from frappe import _
from frappe.utils import escape_html
from typing import Any, Dict

from advisor_scheduling.advisor_scheduling.scheduling.timeutils import format_rfc3339, from_db


def has_outgoing_email() -> bool:
	"""Return True if at least one outgoing Email Account is configured in Frappe."""
	return bool(frappe.db.count("Email Account", {"enable_outgoing": 1}))


def build_notification_payload(meeting: Any, link: Any) -> Dict[str, Any]:
	"""Data handed to the notification: client, link, slot, answers, meeting id."""
	return {
		"meeting_id": meeting.name,
		"client_email": meeting.client_email,
		"linkedin_url": meeting.linkedin_url or "",
		"link_title": link.title,
		"duration": link.duration,
		"start_time": format_rfc3339(from_db(meeting.start_time)),
		"end_time": format_rfc3339(from_db(meeting.end_time)),
		"answers": meeting.get_answers(),
	}


def collect_context_notes(meeting: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
	"""
	Run enrichment hooks and merge their notes.

	A failing hook is logged and skipped; the remaining hooks still run.
	"""
	notes = {}
	for hook_path in frappe.get_hooks("scheduling_meeting_enrichment"):
		try:
			extra = frappe.get_attr(hook_path)(meeting, payload)
			if extra:
				notes.update(extra)
		except Exception:
			frappe.log_error(
				title="Meeting Enrichment Hook Failed",
				message=f"{hook_path}\n{frappe.get_traceback()}"
			)
	return notes


def render_notification(payload: Dict[str, Any], notes: Dict[str, Any]) -> str:
	lines = [
		_("New Meeting Scheduled"),
		"",
		_("Link: {0}").format(payload["link_title"]),
		_("Client Email: {0}").format(payload["client_email"]),
		_("LinkedIn URL: {0}").format(payload["linkedin_url"] or "-"),
		_("Start Time: {0}").format(payload["start_time"]),
		_("End Time: {0}").format(payload["end_time"]),
		"",
		_("Questions and Answers:"),
	]

	for answer in payload["answers"]:
		lines.append(f"- {answer}")
		question = answer.split(": ", 1)[0]
		if notes.get(question):
			lines.append(f"  {_('Context')}: {notes[question]}")

	return "<br>".join(escape_html(line) for line in lines)


def send_meeting_notification(meeting_name: str) -> None:
	"""
	Enrich the meeting and email the advisor.

	Every failure is logged and swallowed: the booking is already committed.

	Args:
		meeting_name: name of the booked Scheduling Meeting
	"""
	try:
		meeting = frappe.get_doc("Scheduling Meeting", meeting_name)
		link = frappe.get_doc("Scheduling Link", meeting.scheduling_link)
		payload = build_notification_payload(meeting, link)

		notes = collect_context_notes(meeting, payload)
		if notes:
			# context_notes is the only field allowed to change after booking
			frappe.db.set_value(
				"Scheduling Meeting", meeting.name, "context_notes", frappe.as_json(notes),
				update_modified=False
			)
			frappe.db.commit()

		if not has_outgoing_email():
			frappe.logger("advisor_scheduling").warning(
				f"Meeting notification skipped for {meeting_name}: "
				"no outgoing Email Account configured in Frappe."
			)
			return

		recipients = [link.advisor]
		for hook_path in frappe.get_hooks("scheduling_meeting_recipients"):
			try:
				extra = frappe.get_attr(hook_path)(meeting, link)
				if extra:
					recipients.extend(extra)
			except Exception:
				frappe.log_error(
					title="Meeting Recipients Hook Failed",
					message=f"{hook_path}\n{frappe.get_traceback()}"
				)

		# Deduplicate and remove empty
		recipients = list({r for r in recipients if r})

		frappe.sendmail(
			recipients=recipients,
			subject=_("New Meeting Scheduled: {0}").format(link.title),
			message=render_notification(payload, notes),
			reference_doctype="Scheduling Meeting",
			reference_name=meeting.name,
		)

		frappe.logger("advisor_scheduling").info(
			f"Meeting notification sent for {meeting_name} to {recipients}"
		)

	except Exception:
		frappe.log_error(
			title="Meeting Notification Failed",
			message=f"Scheduling Meeting {meeting_name}\n{frappe.get_traceback()}"
		)
