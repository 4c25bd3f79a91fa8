"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Clients re-check the live session and poll notices on these cadences.
LIVE_SESSION_POLL_SECONDS = 10
NOTICE_POLL_SECONDS = 30

LOW_ATTENDANCE_THRESHOLD = 75

# Machine-generated timetable notices start with this marker, followed by the action.
TIMETABLE_NOTICE_PREFIX = "🚨 TIMETABLE_"

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"
