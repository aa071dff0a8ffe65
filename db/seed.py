# Insert Sample Office Locations
import logging

from sqlmodel import Session, SQLModel, select

from db.session import engine
from models.office_location import OfficeLocation

logger = logging.getLogger(__name__)

SAMPLE_OFFICES = [
    {
        "name": "Head Office",
        "address": "1 Main Street",
        "longitude": -76.9428334513501,
        "latitude": 38.9931538759034,
        "radius_meters": 100.0,
    },
    {
        "name": "Branch Office",
        "address": "200 Market Street",
        "longitude": -76.9395,
        "latitude": 38.9952,
        "radius_meters": 150.0,
    },
]


def seed_office_locations():
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        for office_data in SAMPLE_OFFICES:
            # Names are unique; skip offices that already exist
            existing = session.exec(
                select(OfficeLocation).where(OfficeLocation.name == office_data["name"])
            ).first()
            if existing:
                logger.info("%s already exists", office_data["name"])
                continue

            session.add(OfficeLocation(**office_data))
            logger.info("Added %s", office_data["name"])

        session.commit()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_office_locations()
