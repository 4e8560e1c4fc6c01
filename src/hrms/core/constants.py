"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveType, Role

DEFAULT_HISTORY_LIMIT = 31
DEFAULT_LIST_LIMIT = 500
DEFAULT_SESSION_DAYS = 7

DEFAULT_CONFLICT_RETRIES = 3

# Opening entitlements (days) for a new hire. The Unpaid total is informational only.
DEFAULT_LEAVE_ENTITLEMENTS = {
    LeaveType.ANNUAL: 20,
    LeaveType.SICK: 10,
    LeaveType.CASUAL: 5,
    LeaveType.UNPAID: 99,
}

HR_ROLES = frozenset({Role.ADMIN, Role.HR})
APPROVER_ROLES = frozenset({Role.ADMIN, Role.HR, Role.MANAGER})

# Column widths in schema.sql; longer input is rejected before it reaches MySQL.
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 150
MAX_REASON_LENGTH = 500
MAX_HOLIDAY_DESCRIPTION_LENGTH = 255
