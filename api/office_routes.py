from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from core.errors import LocationNotFound
from db.session import get_session
from models.office_location import OfficeLocation

router = APIRouter()


# --- API Endpoints ---


@router.get("", response_model=List[OfficeLocation])
def list_active_office_locations(
    session: Annotated[Session, Depends(get_session)],
):
    """
    Active office locations, for clients to pick where they are checking in.
    """
    statement = (
        select(OfficeLocation)
        .where(OfficeLocation.is_active == True)  # noqa: E712
        .order_by(OfficeLocation.name)
    )
    return session.exec(statement).all()


@router.get("/{office_id}", response_model=OfficeLocation)
def read_office_location(
    office_id: str,
    session: Annotated[Session, Depends(get_session)],
):
    office = session.get(OfficeLocation, office_id)
    if not office:
        raise LocationNotFound(f"Office location with ID {office_id} not found.")
    return office
