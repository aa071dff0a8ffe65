"""Lifecycle of a single attendance record: created open, closed exactly once."""

from datetime import date, datetime
from typing import Optional

from core.errors import AlreadyCheckedOut, Forbidden, ValidationError
from models.attendance import AttendanceRecord, AttendanceStatus
from models.office_location import OfficeLocation
from utils.timezone_helpers import ensure_timezone_aware, local_date


def work_date_for(instant: datetime, tz: str) -> date:
    """Calendar day an instant is bucketed into.

    Used for the duplicate check, the stored work_date, and report/history
    defaults alike, so they can never disagree.
    """
    return local_date(instant, tz)


def open_record(
    user_id: str,
    office: OfficeLocation,
    point: tuple[float, float],
    now: datetime,
    tz: str,
) -> AttendanceRecord:
    longitude, latitude = point
    return AttendanceRecord(
        user_id=user_id,
        office_location_id=office.id,
        check_in_time=now,
        check_in_longitude=longitude,
        check_in_latitude=latitude,
        status=AttendanceStatus.OPEN,
        work_date=work_date_for(now, tz),
    )


def ensure_owner(record: AttendanceRecord, user_id: str) -> None:
    if record.user_id != user_id:
        raise Forbidden("Unauthorized access")


def close_record(
    record: AttendanceRecord,
    point: tuple[float, float],
    now: datetime,
    notes: Optional[str] = None,
) -> AttendanceRecord:
    """Move an open record to closed in place. Closed is terminal."""
    if not record.is_open:
        raise AlreadyCheckedOut("Already checked out", attendance_id=record.id)

    if now < ensure_timezone_aware(record.check_in_time):
        raise ValidationError("Check-out time cannot precede check-in time.")

    longitude, latitude = point
    record.check_out_time = now
    record.check_out_longitude = longitude
    record.check_out_latitude = latitude
    record.status = AttendanceStatus.CLOSED
    if notes:
        record.notes = notes
    return record
