"""Global constants for the classroll application."""

# Collection names
USERS_COLLECTION = "users"
CLASSES_COLLECTION = "classes"
RECORDS_COLLECTION = "attendanceRecords"
TEACHER_ACTIONS_COLLECTION = "teacherActions"

# Weekday numbering used by the session calendar (Sunday = 0)
SUNDAY = 0
MONDAY = 1
TUESDAY = 2
WEDNESDAY = 3
THURSDAY = 4
FRIDAY = 5
SATURDAY = 6
DEFAULT_SESSION_WEEKDAY = SATURDAY

# Supported calendar range
MIN_YEAR = 1
MAX_YEAR = 9999

# Roles
ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"
ROLES = (ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT)

# Member options
MEMBERSHIP_MEMBER = "Member"
MEMBERSHIP_VISITOR = "Visitor"
MEMBERSHIP_CHOICES = (MEMBERSHIP_MEMBER, MEMBERSHIP_VISITOR)

# Group types
DEFAULT_GROUP_TYPE = "Church Service"
ALL_GROUP_TYPES = "All"

# Teacher actions
ACTION_SUBMIT_ATTENDANCE = "SUBMIT_ATTENDANCE"

# Member list separator in CSV exports
CSV_MEMBER_SEPARATOR = "; "
