from .attendance import (
    AttendanceRead,
    AttendanceRecord,
    AttendanceStatus,
    CheckInRequest,
    CheckOutRequest,
)
from .office_location import GeoPoint, OfficeLocation, OfficeLocationSummary
from .user import UserProfile, UserRole
