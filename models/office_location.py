from typing import Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel

# Office w/ Circular Geofence Employees Check In Against


class OfficeLocation(SQLModel, table=True):
    __tablename__ = "office_locations"

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        primary_key=True,
        description="Opaque office identifier",
    )
    name: str = Field(index=True, unique=True, description="Unique display name")
    address: str = Field(description="Street address")
    longitude: float = Field(..., description="Longitude of office center")
    latitude: float = Field(..., description="Latitude of office center")
    radius_meters: float = Field(..., gt=0, description="Allowed check-in radius in meters")
    is_active: bool = Field(default=True, description="Inactive offices reject check-ins")

    @property
    def point(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)


class GeoPoint(SQLModel):
    """A (longitude, latitude) pair as sent by clients. Range checks happen in utils.geofence."""

    longitude: float
    latitude: float


# Compact view embedded in attendance responses
class OfficeLocationSummary(SQLModel):
    id: str
    name: str
    address: str


def summarize_office(office: Optional[OfficeLocation]) -> Optional[OfficeLocationSummary]:
    if office is None:
        return None
    return OfficeLocationSummary(id=office.id, name=office.name, address=office.address)
