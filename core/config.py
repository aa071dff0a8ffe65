import os

from dotenv import load_dotenv

from utils.timezone_helpers import validate_timezone

# Load environment variables from .env file, if it exists
load_dotenv()

# Single zone used to bucket attendance records into calendar days
ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", "UTC")

if not validate_timezone(ATTENDANCE_TIMEZONE):
    raise ValueError(f"ATTENDANCE_TIMEZONE is not a valid IANA zone: {ATTENDANCE_TIMEZONE}")

# Radius applied when an admin creates an office without one
DEFAULT_OFFICE_RADIUS_METERS = float(os.getenv("MAX_DISTANCE_METERS", "200"))

# Default values can be provided if the env var is not set
DEV_DOMAIN = os.getenv("DEV_DOMAIN", "http://localhost:5173")
PRODUCTION_DOMAIN = os.getenv("PRODUCTION_DOMAIN")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Roles
EMPLOYEE_ROLE = "employee"
ADMIN_ROLES = ["admin"]
REPORT_ROLES = ["admin", "manager"]
