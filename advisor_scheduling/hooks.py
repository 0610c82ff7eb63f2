app_name = "advisor_scheduling"
app_title = "Advisor Scheduling"
app_publisher = "Advisor Scheduling Contributors"
app_description = "Advisor availability windows, shareable scheduling links and meeting booking"
app_email = "maintainers@advisor-scheduling.dev"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of web template
# web_include_css = "/assets/advisor_scheduling/css/booking.css"
# web_include_js = "/assets/advisor_scheduling/js/booking.js"

# Installation
# ------------

# after_install = "advisor_scheduling.install.after_install"

# Scheduling Extensions
# ---------------------
# Other apps can plug into the advisor notification sent after a booking.
#
# Called with (meeting, payload); each returns a dict of extra context notes
# (e.g. profile enrichment for linkedin_url). Notes are stored on the
# Scheduling Meeting and included in the email. Failures are logged and skipped.
# scheduling_meeting_enrichment = [
# 	"my_app.enrichment.linkedin_summary"
# ]
#
# Called with (meeting, link); each returns a list of extra recipient emails.
# scheduling_meeting_recipients = [
# 	"my_app.notifications.cc_team_inbox"
# ]

# Document Events
# ---------------
# Hook on document methods and events

# doc_events = {
# 	"Scheduling Meeting": {
# 		"after_insert": "method"
# 	}
# }

# Scheduled Tasks
# ---------------

scheduler_events = {
	"hourly": [
		"advisor_scheduling.advisor_scheduling.scheduling.tasks.deactivate_expired_links"
	]
}

# Testing
# -------

# before_tests = "advisor_scheduling.install.before_tests"

# Request Events
# ----------------
# before_request = ["advisor_scheduling.utils.before_request"]
# after_request = ["advisor_scheduling.utils.after_request"]

# User Data Protection
# --------------------

user_data_fields = [
	{
		"doctype": "Scheduling Meeting",
		"filter_by": "client_email",
		"redact_fields": ["client_email", "linkedin_url", "answers", "context_notes"],
		"partial": 1,
	},
]

# Automatically update python controller files with type annotations for this app.
# export_python_type_annotations = True
