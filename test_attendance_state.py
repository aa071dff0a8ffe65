#!/usr/bin/env python3
"""
Attendance record lifecycle: open on check-in, closed exactly once on check-out.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.errors import AlreadyCheckedOut, Forbidden, ValidationError
from models.attendance import AttendanceStatus
from models.office_location import OfficeLocation
from services.attendance_state import close_record, ensure_owner, open_record, work_date_for

OFFICE = OfficeLocation(id="hq", name="HQ", address="x", longitude=0.0, latitude=0.0, radius_meters=100)
CHECK_IN_AT = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_open_record_starts_open_with_check_in_fields():
    record = open_record("alice", OFFICE, (0.0001, 0.0002), CHECK_IN_AT, "UTC")

    assert record.status == AttendanceStatus.OPEN
    assert record.user_id == "alice"
    assert record.office_location_id == "hq"
    assert record.check_in_time == CHECK_IN_AT
    assert (record.check_in_longitude, record.check_in_latitude) == (0.0001, 0.0002)
    assert record.work_date == date(2026, 3, 2)
    assert record.check_out_time is None


def test_close_record_populates_check_out_fields():
    record = open_record("alice", OFFICE, (0.0, 0.0), CHECK_IN_AT, "UTC")
    later = CHECK_IN_AT + timedelta(hours=8)

    close_record(record, (0.0003, 0.0004), later, notes="left early")

    assert record.status == AttendanceStatus.CLOSED
    assert record.check_out_time == later
    assert (record.check_out_longitude, record.check_out_latitude) == (0.0003, 0.0004)
    assert record.notes == "left early"
    assert record.check_out_time >= record.check_in_time


def test_closed_is_terminal():
    record = open_record("alice", OFFICE, (0.0, 0.0), CHECK_IN_AT, "UTC")
    first_close = CHECK_IN_AT + timedelta(hours=1)
    close_record(record, (0.0, 0.0), first_close)

    with pytest.raises(AlreadyCheckedOut):
        close_record(record, (1.0, 1.0), CHECK_IN_AT + timedelta(hours=2), notes="again")

    assert record.status == AttendanceStatus.CLOSED
    assert record.check_out_time == first_close
    assert record.notes is None


def test_check_out_before_check_in_is_rejected():
    record = open_record("alice", OFFICE, (0.0, 0.0), CHECK_IN_AT, "UTC")

    with pytest.raises(ValidationError):
        close_record(record, (0.0, 0.0), CHECK_IN_AT - timedelta(seconds=1))
    assert record.status == AttendanceStatus.OPEN


def test_naive_check_in_time_from_database_is_treated_as_utc():
    record = open_record("alice", OFFICE, (0.0, 0.0), CHECK_IN_AT, "UTC")
    record.check_in_time = CHECK_IN_AT.replace(tzinfo=None)

    close_record(record, (0.0, 0.0), CHECK_IN_AT + timedelta(minutes=5))
    assert record.status == AttendanceStatus.CLOSED


def test_ensure_owner():
    record = open_record("alice", OFFICE, (0.0, 0.0), CHECK_IN_AT, "UTC")
    ensure_owner(record, "alice")
    with pytest.raises(Forbidden):
        ensure_owner(record, "mallory")


def test_work_date_uses_configured_zone():
    # 02:30 UTC on March 2nd is still March 1st in New York
    instant = datetime(2026, 3, 2, 2, 30, tzinfo=timezone.utc)
    assert work_date_for(instant, "UTC") == date(2026, 3, 2)
    assert work_date_for(instant, "America/New_York") == date(2026, 3, 1)
    # and already March 2nd in Tokyo at 20:00 UTC on March 1st
    assert work_date_for(datetime(2026, 3, 1, 20, 0, tzinfo=timezone.utc), "Asia/Tokyo") == date(2026, 3, 2)
