from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from core.deps import get_attendance_service, get_current_user
from models.attendance import AttendanceRead, CheckInRequest, CheckOutRequest
from models.user import UserProfile
from services.attendance_service import AttendanceService, DailyReport

# Defines API Endpoints
router = APIRouter()


# Check In Endpoint
@router.post("/check-in", status_code=status.HTTP_201_CREATED)
def check_in(
    data: CheckInRequest,
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
    user: Annotated[UserProfile, Depends(get_current_user)],
):
    record = service.check_in(
        user,
        data.office_location_id,
        (data.longitude, data.latitude),
    )
    return {"message": "Check-in successful", "attendance": AttendanceRead.from_record(record)}


# Check Out Endpoint
@router.post("/check-out")
def check_out(
    data: CheckOutRequest,
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
    user: Annotated[UserProfile, Depends(get_current_user)],
):
    record = service.check_out(
        user,
        data.attendance_id,
        (data.longitude, data.latitude),
        notes=data.notes,
    )
    return {"message": "Check-out successful", "attendance": AttendanceRead.from_record(record)}


# Today's Open Record, if any
@router.get("/today")
def get_todays_open_record(
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
    user: Annotated[UserProfile, Depends(get_current_user)],
):
    record = service.get_open_record(user)
    if not record:
        return {"attendance": None, "message": "Not checked in today."}
    return {"attendance": AttendanceRead.from_record(record)}


@router.get("/history/{user_id}", response_model=List[AttendanceRead])
def get_history(
    user_id: str,
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
    user: Annotated[UserProfile, Depends(get_current_user)],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    """
    Attendance history for a user, newest day first. Employees may only read
    their own; admins and managers may read anyone's.
    """
    records = service.get_history(user, user_id, start_date, end_date)
    return [AttendanceRead.from_record(r) for r in records]


@router.get("/daily-report", response_model=DailyReport)
def get_daily_report(
    service: Annotated[AttendanceService, Depends(get_attendance_service)],
    user: Annotated[UserProfile, Depends(get_current_user)],
    report_date: Annotated[Optional[date], Query(alias="date")] = None,
):
    return service.get_daily_report(user, report_date)
