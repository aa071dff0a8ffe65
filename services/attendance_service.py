import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from core.config import ATTENDANCE_TIMEZONE, EMPLOYEE_ROLE, REPORT_ROLES
from core.errors import (
    AlreadyCheckedIn,
    Forbidden,
    LocationNotFound,
    NotFound,
    OutOfRange,
    RecordNotFound,
    StorageError,
    ValidationError,
)
from models.attendance import AttendanceRead, AttendanceRecord, AttendanceStatus
from models.office_location import OfficeLocation
from models.user import UserProfile, UserRole
from services.attendance_state import (
    close_record,
    ensure_owner,
    open_record,
    work_date_for,
)
from services.user_directory import UserDirectory
from utils.geofence import is_within_radius, validate_coordinates
from utils.timezone_helpers import utc_now

logger = logging.getLogger(__name__)


class DailyReport(BaseModel):
    date: date
    timezone: str
    total_employees: int
    present_count: int
    absent_count: int
    present_percentage: float
    attendance_records: List[AttendanceRead]
    absent_users: List[UserProfile]


class AttendanceService:
    """Check-in / check-out orchestration against an injected session and user directory."""

    def __init__(
        self,
        session: Session,
        users: UserDirectory,
        tz: str = ATTENDANCE_TIMEZONE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session = session
        self.users = users
        self.tz = tz
        self.clock = clock

    def today(self) -> date:
        return work_date_for(self.clock(), self.tz)

    # --- Mutations ---

    def check_in(
        self,
        user: UserProfile,
        office_location_id: str,
        point: tuple[float, float],
    ) -> AttendanceRecord:
        validate_coordinates(*point)

        office = self._run_query(
            select(OfficeLocation).where(OfficeLocation.id == office_location_id),
            "office lookup",
        ).first()
        if not office or not office.is_active:
            raise LocationNotFound("Invalid or inactive office location")

        now = self.clock()
        today = work_date_for(now, self.tz)

        existing = self._find_open_record(user.uid, today)
        if existing:
            raise AlreadyCheckedIn("Already checked in today", attendance_id=existing.id)

        if not is_within_radius(point, office.point, office.radius_meters):
            logger.info(
                "Rejected check-in for %s at office %s: (%s,%s) outside %sm",
                user.uid, office.id, point[0], point[1], office.radius_meters,
            )
            raise OutOfRange(
                f"Outside allowed radius of {office.radius_meters:g}m for {office.name}."
            )

        record = open_record(user.uid, office, point, now, self.tz)
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent check-in for the same day
            self.session.rollback()
            logger.info("Concurrent duplicate check-in rejected for %s on %s", user.uid, today)
            raise AlreadyCheckedIn("Already checked in today") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Error saving check-in for %s", user.uid)
            raise StorageError() from e

        self.session.refresh(record)
        logger.info("User %s checked in at office %s (record %s)", user.uid, office.id, record.id)
        return record

    def check_out(
        self,
        user: UserProfile,
        attendance_id: int,
        point: tuple[float, float],
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        # No geofence check on the way out; only the coordinates' validity
        validate_coordinates(*point)

        # Row lock so two concurrent check-outs cannot both close the record
        record = self._run_query(
            select(AttendanceRecord)
            .where(AttendanceRecord.id == attendance_id)
            .with_for_update(),
            "attendance lookup",
        ).first()
        if not record:
            raise RecordNotFound("Attendance not found")

        ensure_owner(record, user.uid)
        close_record(record, point, self.clock(), notes)

        self.session.add(record)
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Error saving check-out for record %s", attendance_id)
            raise StorageError() from e

        self.session.refresh(record)
        logger.info("User %s checked out (record %s)", user.uid, record.id)
        return record

    # --- Reads ---

    def get_open_record(self, user: UserProfile) -> Optional[AttendanceRecord]:
        return self._find_open_record(user.uid, self.today())

    def get_history(
        self,
        requester: UserProfile,
        target_user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AttendanceRecord]:
        is_self = requester.uid == target_user_id
        if not is_self and requester.role.value not in REPORT_ROLES:
            raise Forbidden("Unauthorized access")

        if not is_self and self.users.get_user(target_user_id) is None:
            raise NotFound("Target user not found")

        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date.")

        statement = select(AttendanceRecord).where(AttendanceRecord.user_id == target_user_id)
        if start_date:
            statement = statement.where(AttendanceRecord.work_date >= start_date)
        if end_date:
            statement = statement.where(AttendanceRecord.work_date <= end_date)
        statement = statement.order_by(
            AttendanceRecord.work_date.desc(), AttendanceRecord.check_in_time.desc()
        )

        return list(self._run_query(statement, "attendance history"))

    def get_daily_report(
        self,
        requester: UserProfile,
        report_date: Optional[date] = None,
    ) -> DailyReport:
        if requester.role.value not in REPORT_ROLES:
            raise Forbidden("Unauthorized access")

        report_date = report_date or self.today()

        records = list(
            self._run_query(
                select(AttendanceRecord)
                .where(AttendanceRecord.work_date == report_date)
                .order_by(AttendanceRecord.check_in_time),
                "daily report",
            )
        )

        roster = self.users.list_users_by_role(UserRole(EMPLOYEE_ROLE))
        checked_in_users = {record.user_id for record in records}
        absent_users = [u for u in roster if u.uid not in checked_in_users]

        total_employees = len(roster)
        present_count = total_employees - len(absent_users)
        present_percentage = (
            present_count / total_employees * 100 if total_employees else 0.0
        )

        return DailyReport(
            date=report_date,
            timezone=self.tz,
            total_employees=total_employees,
            present_count=present_count,
            absent_count=len(absent_users),
            present_percentage=present_percentage,
            attendance_records=[AttendanceRead.from_record(r) for r in records],
            absent_users=absent_users,
        )

    # --- Helpers ---

    def _find_open_record(self, user_id: str, day: date) -> Optional[AttendanceRecord]:
        return self._run_query(
            select(AttendanceRecord)
            .where(AttendanceRecord.user_id == user_id)
            .where(AttendanceRecord.work_date == day)
            .where(AttendanceRecord.status == AttendanceStatus.OPEN),
            "open record lookup",
        ).first()

    def _run_query(self, statement, what: str):
        try:
            return self.session.exec(statement)
        except SQLAlchemyError as e:
            logger.exception("Error running %s query", what)
            raise StorageError() from e
