# wildtrack/seed.py
"""Default catalog and administrator.

Run ``python -m wildtrack.seed`` to create the tables, replace the safari
catalog with the defaults below and create the default administrator when it
does not exist yet. ``POST /api/safaris/seed`` reuses ``replace_catalog``.
"""
import logging
import re
from typing import List

from sqlalchemy.orm import Session

from wildtrack import auth, models
from wildtrack.config import settings

logger = logging.getLogger(__name__)

_MEETING_POINT = "Main Lodge Reception"

DEFAULT_PACKAGES = [
    {
        "name": "Big Five Morning Safari",
        "description": "Track lion, leopard, rhino, elephant and buffalo with an expert ranger during the golden morning hours.",
        "short_description": "Track the Big Five during the golden morning hours",
        "price": 1200,
        "duration": "4 hours",
        "max_guests": 8,
        "min_guests": 2,
        "image": "https://images.unsplash.com/photo-1547471080-7cc2caa01a7e?w=800&q=80",
        "features": ["Expert ranger guide", "Open safari vehicle", "Refreshments included", "Small groups"],
        "includes": ["Morning coffee & snacks", "Bottled water", "Binoculars", "Park fees"],
        "schedule": {"startTime": "05:30", "endTime": "09:30", "meetingPoint": _MEETING_POINT},
        "is_popular": True,
        "category": "morning",
        "requirements": ["Comfortable clothing", "Closed shoes", "Sun hat", "Camera"],
    },
    {
        "name": "Family Afternoon Safari",
        "description": "A child-friendly game drive paced for all ages, with guides who turn every sighting into a lesson.",
        "short_description": "Child-friendly safari perfect for the whole family",
        "price": 950,
        "duration": "3 hours",
        "max_guests": 6,
        "min_guests": 2,
        "image": "https://images.unsplash.com/photo-1551009175-8a68da93d5f9?w=800&q=80",
        "features": ["Family-friendly guide", "Educational focus", "Flexible pace", "Child seats available"],
        "includes": ["Juice & snacks", "Activity booklet", "Junior ranger certificate"],
        "schedule": {"startTime": "14:00", "endTime": "17:00", "meetingPoint": _MEETING_POINT},
        "is_popular": True,
        "category": "afternoon",
        "requirements": ["Sun protection", "Comfortable shoes"],
    },
    {
        "name": "Night Safari Drive",
        "description": "Spotlight drive through the bush after dark in search of leopards, hyenas and bush babies.",
        "short_description": "Discover nocturnal wildlife under the African stars",
        "price": 1400,
        "duration": "3 hours",
        "max_guests": 6,
        "min_guests": 2,
        "image": "https://images.unsplash.com/photo-1534177616072-ef7dc12044d2?w=800&q=80",
        "features": ["Spotlight tracking", "Nocturnal wildlife", "Star gazing", "Night vision equipment"],
        "includes": ["Warm drinks", "Snacks", "Blankets", "Safety briefing"],
        "schedule": {"startTime": "19:00", "endTime": "22:00", "meetingPoint": _MEETING_POINT},
        "is_popular": True,
        "category": "night",
        "requirements": ["Warm jacket", "Closed shoes", "Insect repellent"],
    },
    {
        "name": "Private Tour",
        "description": "Your own vehicle and guide for a full day, with an itinerary built around you.",
        "short_description": "Exclusive private vehicle and dedicated guide",
        "price": 2500,
        "duration": "Full day",
        "max_guests": 4,
        "min_guests": 1,
        "image": "https://images.unsplash.com/photo-1504173010664-32509aeebb62?w=800&q=80",
        "features": ["Private vehicle", "Dedicated guide", "Custom itinerary", "Flexible timing"],
        "includes": ["Full day vehicle", "Private guide", "Gourmet lunch", "Premium drinks"],
        "schedule": {"startTime": "Flexible", "endTime": "Flexible", "meetingPoint": _MEETING_POINT},
        "is_popular": False,
        "category": "private",
        "requirements": ["Advance booking required"],
    },
    {
        "name": "Bird Watching Safari",
        "description": "A specialist birding guide helps you spot raptors, bee-eaters and hundreds of other species.",
        "short_description": "Spot over 350 bird species with expert guides",
        "price": 800,
        "duration": "3 hours",
        "max_guests": 6,
        "min_guests": 2,
        "image": "https://images.unsplash.com/photo-1444464666168-49d633b86797?w=800&q=80",
        "features": ["Birding specialist", "High-quality binoculars", "Species checklist", "Best viewing spots"],
        "includes": ["Binoculars", "Bird guide book", "Coffee & tea", "Checklist"],
        "schedule": {"startTime": "06:00", "endTime": "09:00", "meetingPoint": _MEETING_POINT},
        "is_popular": False,
        "category": "specialty",
        "requirements": ["Neutral colored clothing", "Camera with zoom lens optional"],
    },
    {
        "name": "Walking Safari",
        "description": "Explore the bush on foot with armed rangers and learn to read tracks, plants and insects.",
        "short_description": "Explore the bush on foot with armed rangers",
        "price": 700,
        "duration": "2 hours",
        "max_guests": 8,
        "min_guests": 2,
        "image": "https://images.unsplash.com/photo-1575550959106-5a7defe28b56?w=800&q=80",
        "features": ["Armed ranger guide", "Tracking lessons", "Botanical education", "Close encounters"],
        "includes": ["Safety briefing", "Walking stick", "Water", "First aid kit"],
        "schedule": {"startTime": "07:00", "endTime": "09:00", "meetingPoint": _MEETING_POINT},
        "is_popular": False,
        "category": "specialty",
        "requirements": ["Good fitness level", "Closed hiking shoes", "Long pants", "Age 16+"],
    },
]


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return slug.strip("-")


def replace_catalog(db: Session) -> List[models.SafariPackage]:
    """Delete every safari package and insert the defaults, in one commit."""
    db.query(models.SafariPackage).delete()
    packages = [
        models.SafariPackage(slug=slugify(data["name"]), currency="ZAR", is_available=True, **data)
        for data in DEFAULT_PACKAGES
    ]
    db.add_all(packages)
    db.commit()
    for package in packages:
        db.refresh(package)
    return packages


def ensure_default_admin(db: Session) -> bool:
    exists = db.query(models.Admin).filter(models.Admin.username == settings.SEED_ADMIN_USERNAME).first()
    if exists:
        return False
    db.add(models.Admin(
        username=settings.SEED_ADMIN_USERNAME,
        password=auth.get_password_hash(settings.SEED_ADMIN_PASSWORD),
        name="Administrator",
        email="admin@umzuluwildtrack.co.za",
        role="admin",
    ))
    db.commit()
    return True


def seed_database() -> None:
    from wildtrack.database import SessionLocal, init_db

    init_db()
    db = SessionLocal()
    try:
        packages = replace_catalog(db)
        logger.info("Created %d safari packages", len(packages))
        if ensure_default_admin(db):
            logger.info("Created default admin user %r", settings.SEED_ADMIN_USERNAME)
        else:
            logger.info("Admin user %r already exists", settings.SEED_ADMIN_USERNAME)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    seed_database()
