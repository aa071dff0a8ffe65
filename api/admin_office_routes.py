import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, model_validator
from pydantic import Field as PydanticField
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from core.config import DEFAULT_OFFICE_RADIUS_METERS
from core.deps import require_admin_role
from core.errors import LocationNotFound, StorageError, ValidationError
from db.session import get_session
from models.attendance import AttendanceRecord
from models.office_location import OfficeLocation
from models.user import UserProfile

logger = logging.getLogger(__name__)

# --- Router Definition ---
router = APIRouter()


# --- Pydantic Data Models ---


class OfficeLocationCreate(BaseModel):
    name: str = PydanticField(..., min_length=1)
    address: str = PydanticField(..., min_length=1)
    longitude: float = PydanticField(..., ge=-180, le=180)
    latitude: float = PydanticField(..., ge=-90, le=90)
    radius_meters: Optional[float] = PydanticField(default=None, gt=0)
    is_active: bool = True


# All optional; only fields the client sends are applied
class OfficeLocationUpdate(BaseModel):
    name: Optional[str] = PydanticField(default=None, min_length=1)
    address: Optional[str] = PydanticField(default=None, min_length=1)
    longitude: Optional[float] = PydanticField(default=None, ge=-180, le=180)
    latitude: Optional[float] = PydanticField(default=None, ge=-90, le=90)
    radius_meters: Optional[float] = PydanticField(default=None, gt=0)
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def coordinates_come_in_pairs(self):
        if (self.longitude is None) != (self.latitude is None):
            raise ValueError("longitude and latitude must be updated together")
        return self


def _get_office_or_404(session: Session, office_id: str) -> OfficeLocation:
    db_office = session.get(OfficeLocation, office_id)
    if not db_office:
        raise LocationNotFound(f"Office location with ID '{office_id}' not found.")
    return db_office


def _ensure_name_free(session: Session, name: str, office_id: Optional[str] = None) -> None:
    clash = session.exec(select(OfficeLocation).where(OfficeLocation.name == name)).first()
    if clash and clash.id != office_id:
        raise ValidationError("Office location with this name already exists")


def _commit(
    session: Session,
    action: str,
    office_id: str,
    conflict_message: str = "Office location with this name already exists",
) -> None:
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        # Lost a race on the unique name, or a record still references the office
        raise ValidationError(conflict_message) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error trying to %s office location %s", action, office_id)
        raise StorageError(f"Could not {action} office location.") from e


# --- API Endpoints ---


@router.post("", response_model=OfficeLocation, status_code=status.HTTP_201_CREATED)
def create_office_location(
    office_in: OfficeLocationCreate,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[UserProfile, Depends(require_admin_role)],
):
    _ensure_name_free(session, office_in.name)

    office_data = office_in.model_dump()
    if office_data["radius_meters"] is None:
        office_data["radius_meters"] = DEFAULT_OFFICE_RADIUS_METERS

    db_office = OfficeLocation(**office_data)
    session.add(db_office)
    _commit(session, "create", db_office.id)
    session.refresh(db_office)

    logger.info("Admin %s created office location %s (%s)", admin_user.email, db_office.id, db_office.name)
    return db_office


@router.get("", response_model=List[OfficeLocation])
def list_all_office_locations(
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[UserProfile, Depends(require_admin_role)],
):
    # Includes inactive offices, unlike the public listing
    return session.exec(select(OfficeLocation).order_by(OfficeLocation.name)).all()


@router.get("/{office_id}", response_model=OfficeLocation)
def read_office_location(
    office_id: str,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[UserProfile, Depends(require_admin_role)],
):
    return _get_office_or_404(session, office_id)


@router.put("/{office_id}", response_model=OfficeLocation)
def update_office_location(
    office_id: str,
    office_update: OfficeLocationUpdate,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[UserProfile, Depends(require_admin_role)],
):
    db_office = _get_office_or_404(session, office_id)

    # Only fields the client actually sent; an explicit null means "leave as is"
    update_data = {
        key: value
        for key, value in office_update.model_dump(exclude_unset=True).items()
        if value is not None
    }

    if "name" in update_data:
        _ensure_name_free(session, update_data["name"], office_id)

    for key, value in update_data.items():
        setattr(db_office, key, value)

    session.add(db_office)
    _commit(session, "update", office_id)
    session.refresh(db_office)

    logger.info("Admin %s updated office location %s", admin_user.email, office_id)
    return db_office


@router.delete("/{office_id}", status_code=status.HTTP_200_OK)
def delete_office_location(
    office_id: str,
    session: Annotated[Session, Depends(get_session)],
    admin_user: Annotated[UserProfile, Depends(require_admin_role)],
):
    db_office = _get_office_or_404(session, office_id)

    in_use = session.exec(
        select(AttendanceRecord.id).where(AttendanceRecord.office_location_id == office_id)
    ).first()
    if in_use is not None:
        raise ValidationError(
            "Office location has attendance records; deactivate it instead of deleting."
        )

    session.delete(db_office)
    _commit(session, "delete", office_id, "Office location is still referenced by attendance records.")

    logger.info("Admin %s deleted office location %s", admin_user.email, office_id)
    return {"message": "Office location deleted successfully"}
