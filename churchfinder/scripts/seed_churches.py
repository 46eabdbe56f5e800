#!/usr/bin/env python3
import logging
from churchfinder.core.database import db
from churchfinder.core.logging_config import setup_logging
from churchfinder.models.church import Church
from churchfinder.schemas.church import ChurchCreate
from churchfinder.services.church_service import create_church

logger = logging.getLogger(__name__)

SAMPLE_CHURCHES = [
    {
        "name": "St. Francis of Assisi Catholic Church",
        "denomination": "Catholic",
        "address": "1200 Market St",
        "city": "Denver",
        "state": "CO",
        "zip_code": "80202",
        "latitude": 39.7487,
        "longitude": -104.9967,
        "description": "A downtown parish with daily Mass and a weekly Spanish liturgy.",
        "founded_year": 1921,
        "average_attendance": 850,
        "verified": True,
        "service_times": {"sunday": ["8:00 AM", "10:30 AM", "12:30 PM"], "saturday": ["5:00 PM"]},
        "languages": ["English", "Spanish"],
    },
    {
        "name": "Grace Community Church",
        "denomination": "Non-denominational",
        "address": "455 Colfax Ave",
        "city": "Denver",
        "state": "CO",
        "zip_code": "80203",
        "latitude": 39.7402,
        "longitude": -104.9812,
        "description": "Contemporary worship and small groups throughout the week.",
        "founded_year": 1998,
        "average_attendance": 400,
        "service_times": {"sunday": ["9:00 AM", "11:00 AM"], "wednesday": ["7:00 PM"]},
        "languages": ["English"],
    },
    {
        "name": "First Baptist Church of Boulder",
        "denomination": "Baptist",
        "address": "1237 Pine St",
        "city": "Boulder",
        "state": "CO",
        "zip_code": "80302",
        "latitude": 40.0190,
        "longitude": -105.2790,
        "founded_year": 1872,
        "average_attendance": 300,
        "service_times": {"sunday": ["10:00 AM"]},
        "languages": ["English", "Korean"],
    },
]

def seed_churches() -> None:
    """Seed the churches table with sample listings when it is empty."""
    with db.session() as session:
        existing_count = session.query(Church).count()

        if existing_count > 0:
            logger.info(f"Churches table already has {existing_count} records. Skipping seed.")
            return

        logger.info("Seeding churches table...")
        for church_data in SAMPLE_CHURCHES:
            create_church(session, ChurchCreate(**church_data))
            logger.info(f"Added church: {church_data['name']}")

    logger.info("Church seeding completed.")

if __name__ == "__main__":
    setup_logging()
    db.init_db()
    seed_churches()
