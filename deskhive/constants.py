"""Global constants for the DeskHive application."""

# Collection names
USERS_COLLECTION = "users"
COMMUNITIES_COLLECTION = "communities"
TASKS_SUBCOLLECTION = "tasks"
FEED_SUBCOLLECTION = "feed"
ISSUES_COLLECTION = "issues"
ANNOUNCEMENTS_COLLECTION = "announcements"
CHECK_INS_COLLECTION = "checkIns"
EMPLOYEE_OF_MONTH_COLLECTION = "employeeOfMonth"

# Session keys
SESSION_USER_ID = "user_id"
SESSION_ROLE = "role"

# Roles
ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"
ROLE_PROJECT_LEAD = "projectLead"

# Issue case IDs: no I, O, 0 or 1
CASE_ID_PREFIX = "ISS-"
CASE_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CASE_ID_LENGTH = 6

# Temporary project-lead credentials
TEMP_PASSWORD_PREFIX = "Lead@"
TEMP_PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789"
TEMP_PASSWORD_LENGTH = 6

# Passwords issued by the provisioning function
MEMBER_PASSWORD_ALPHABET = (
    "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789!@#$%"  # nosec B105
)
MEMBER_PASSWORD_LENGTH = 8

# Document key formats
DATE_KEY_FORMAT = "%Y-%m-%d"
AWARD_KEY_FORMAT = "%Y-%m"
AWARD_MONTH_LABEL_FORMAT = "%B %Y"

# Listing limits
RECENT_CHECK_INS_LIMIT = 7
AWARD_HISTORY_LIMIT = 6

# Email-related constants
SMTP_AUTH_ERROR_CODE = 534
