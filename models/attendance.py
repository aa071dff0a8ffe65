from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import field_serializer
from sqlmodel import Field, Index, Relationship, SQLModel

from models.office_location import (
    GeoPoint,
    OfficeLocation,
    OfficeLocationSummary,
    summarize_office,
)
from utils.timezone_helpers import format_utc_datetime


# Enum Limiting Record Status to Just Two Vals
class AttendanceStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


# Defines the Structure of Data for a Check In Call
class CheckInRequest(SQLModel):
    office_location_id: str = Field(min_length=1)
    longitude: float
    latitude: float


# Defines the Structure of Data for a Check Out Call
class CheckOutRequest(SQLModel):
    attendance_id: int
    longitude: float
    latitude: float
    notes: Optional[str] = Field(default=None, max_length=2000)


# Defines a Table "attendance_records"; one row per check-in, closed in place on check-out
class AttendanceRecord(SQLModel, table=True):
    __tablename__ = "attendance_records"

    __table_args__ = (
        # History queries filter by user and sort by day
        Index("ix_attendance_records_user_id_work_date", "user_id", "work_date"),
        # Daily report pulls a whole day
        Index("ix_attendance_records_work_date", "work_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    office_location_id: str = Field(foreign_key="office_locations.id")
    check_in_time: datetime
    check_in_longitude: float
    check_in_latitude: float
    check_out_time: Optional[datetime] = Field(default=None)
    check_out_longitude: Optional[float] = Field(default=None)
    check_out_latitude: Optional[float] = Field(default=None)
    status: AttendanceStatus = Field(default=AttendanceStatus.OPEN)
    work_date: date
    notes: Optional[str] = Field(default=None)

    office_location: Optional[OfficeLocation] = Relationship()

    @property
    def is_open(self) -> bool:
        return self.status == AttendanceStatus.OPEN


# At most one open record per user per day, enforced by the database so that
# two racing check-ins cannot both insert.
Index(
    "uq_attendance_records_open_per_user_day",
    AttendanceRecord.user_id,
    AttendanceRecord.work_date,
    unique=True,
    postgresql_where=(AttendanceRecord.status == AttendanceStatus.OPEN),
    sqlite_where=(AttendanceRecord.status == AttendanceStatus.OPEN),
)


# Response shape for a single record
class AttendanceRead(SQLModel):
    id: int
    user_id: str
    office_location_id: str
    office_location: Optional[OfficeLocationSummary] = None
    check_in_time: datetime
    check_in_location: GeoPoint
    check_out_time: Optional[datetime] = None
    check_out_location: Optional[GeoPoint] = None
    status: AttendanceStatus
    work_date: date
    notes: Optional[str] = None

    @field_serializer("check_in_time", "check_out_time")
    def serialize_timestamp(self, dt: Optional[datetime]) -> Optional[str]:
        """Ensure timestamps are formatted as UTC with Z suffix"""
        return format_utc_datetime(dt)

    @classmethod
    def from_record(cls, record: AttendanceRecord) -> "AttendanceRead":
        check_out_location = None
        if record.check_out_longitude is not None and record.check_out_latitude is not None:
            check_out_location = GeoPoint(
                longitude=record.check_out_longitude,
                latitude=record.check_out_latitude,
            )
        return cls(
            id=record.id,
            user_id=record.user_id,
            office_location_id=record.office_location_id,
            office_location=summarize_office(record.office_location),
            check_in_time=record.check_in_time,
            check_in_location=GeoPoint(
                longitude=record.check_in_longitude,
                latitude=record.check_in_latitude,
            ),
            check_out_time=record.check_out_time,
            check_out_location=check_out_location,
            status=record.status,
            work_date=record.work_date,
            notes=record.notes,
        )
