from typing import Any, Optional

from fastapi import status


class AttendanceError(Exception):
    """Base class for every outcome reported back to the caller.

    ``code`` is the stable, machine-checkable kind; ``status_code`` is the
    HTTP status the API layer answers with.
    """

    code = "AttendanceError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be completed."

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"detail": self.message, "code": self.code}
        body.update(self.extra)
        return body


class Unauthenticated(AttendanceError):
    code = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class Forbidden(AttendanceError):
    code = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized access"


class LocationNotFound(AttendanceError):
    code = "LocationNotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Invalid or inactive office location"


class OutOfRange(AttendanceError):
    code = "OutOfRange"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Outside allowed radius"


class AlreadyCheckedIn(AttendanceError):
    code = "AlreadyCheckedIn"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already checked in today"


class RecordNotFound(AttendanceError):
    code = "RecordNotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Attendance not found"


class AlreadyCheckedOut(AttendanceError):
    code = "AlreadyCheckedOut"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already checked out"


class InvalidCoordinates(AttendanceError):
    code = "InvalidCoordinates"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Coordinates are out of range"


class ValidationError(AttendanceError):
    code = "ValidationError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing or malformed fields"


class NotFound(AttendanceError):
    code = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StorageError(AttendanceError):
    # The underlying cause is logged, never sent to the client
    code = "StorageError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
