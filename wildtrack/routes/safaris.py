# wildtrack/routes/safaris.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from wildtrack import auth, database, models, schemas, seed
from wildtrack.dependencies import isoformat, parse_bool

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/safaris",
    tags=["Safaris"]
)

DUPLICATE_NAME = "Safari package with this name already exists"

# Column name for every snake_case payload field that maps 1:1 onto the model
_UPDATABLE_FIELDS = (
    "name", "description", "short_description", "price", "currency", "duration",
    "max_guests", "min_guests", "image", "features", "includes", "requirements",
    "schedule", "is_available", "is_popular", "category",
)


def format_safari(safari: models.SafariPackage) -> dict:
    return {
        "_id": safari.id,
        "name": safari.name,
        "slug": safari.slug,
        "description": safari.description,
        "shortDescription": safari.short_description,
        "price": safari.price,
        "currency": safari.currency,
        "duration": safari.duration,
        "maxGuests": safari.max_guests,
        "minGuests": safari.min_guests,
        "image": safari.image,
        "features": safari.features or [],
        "includes": safari.includes or [],
        "requirements": safari.requirements or [],
        "schedule": safari.schedule,
        "isAvailable": safari.is_available,
        "isPopular": safari.is_popular,
        "category": safari.category,
        "createdAt": isoformat(safari.created_at),
        "updatedAt": isoformat(safari.updated_at),
    }


def get_safari_or_404(db: Session, safari_id: int) -> models.SafariPackage:
    safari = db.query(models.SafariPackage).filter(models.SafariPackage.id == safari_id).first()
    if not safari:
        raise HTTPException(status_code=404, detail="Safari package not found")
    return safari


def name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(models.SafariPackage).filter(
        (models.SafariPackage.name == name) | (models.SafariPackage.slug == seed.slugify(name))
    )
    if exclude_id is not None:
        query = query.filter(models.SafariPackage.id != exclude_id)
    return query.first() is not None


def commit_package(db: Session, action: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        # Unique name/slug lost a race with a concurrent write
        db.rollback()
        raise HTTPException(status_code=400, detail=DUPLICATE_NAME)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Safari package %s failed", action)
        raise HTTPException(status_code=500, detail=f"Server error {action} safari package")


# Public - List Packages
@router.get("")
def list_safaris(
    available: Optional[str] = None,
    category: Optional[schemas.SafariCategory] = None,
    popular: Optional[str] = None,
    db: Session = Depends(database.get_db),
):
    query = db.query(models.SafariPackage)
    if parse_bool(available):
        query = query.filter(models.SafariPackage.is_available.is_(True))
    if category:
        query = query.filter(models.SafariPackage.category == category)
    if parse_bool(popular):
        query = query.filter(models.SafariPackage.is_popular.is_(True))

    safaris = query.order_by(
        models.SafariPackage.is_popular.desc(),
        models.SafariPackage.price.asc(),
        models.SafariPackage.id.asc(),
    ).all()
    return {"success": True, "count": len(safaris), "safaris": [format_safari(s) for s in safaris]}


# Admin Only - Replace the Catalog with the Defaults
@router.post("/seed", dependencies=[Depends(auth.verify_admin_user)])
def seed_safaris(db: Session = Depends(database.get_db)):
    try:
        packages = seed.replace_catalog(db)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Seeding safari packages failed")
        raise HTTPException(status_code=500, detail="Server error seeding safari packages")

    logger.info("Seeded %d safari packages", len(packages))
    return {
        "success": True,
        "message": f"Seeded {len(packages)} safari packages",
        "packages": [format_safari(p) for p in packages],
    }


# Public - Single Package
@router.get("/{safari_id}")
def get_safari(safari_id: int, db: Session = Depends(database.get_db)):
    safari = get_safari_or_404(db, safari_id)
    return {"success": True, "safari": format_safari(safari)}


# Admin Only - Create a Package
@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth.verify_admin_user)])
def create_safari(payload: schemas.SafariCreate, db: Session = Depends(database.get_db)):
    if name_taken(db, payload.name):
        raise HTTPException(status_code=400, detail=DUPLICATE_NAME)

    data = payload.model_dump()
    data["schedule"] = payload.schedule.model_dump(by_alias=True) if payload.schedule else None
    safari = models.SafariPackage(slug=seed.slugify(payload.name), **data)
    db.add(safari)
    commit_package(db, "creating")
    db.refresh(safari)

    logger.info("Safari package %r created", safari.name)
    return {
        "success": True,
        "message": "Safari package created successfully",
        "safari": format_safari(safari),
    }


# Admin Only - Update a Package
@router.put("/{safari_id}", dependencies=[Depends(auth.verify_admin_user)])
def update_safari(safari_id: int, payload: schemas.SafariUpdate, db: Session = Depends(database.get_db)):
    safari = get_safari_or_404(db, safari_id)
    changes = payload.model_dump(exclude_unset=True)

    if "name" in changes and changes["name"] != safari.name:
        if name_taken(db, changes["name"], exclude_id=safari.id):
            raise HTTPException(status_code=400, detail=DUPLICATE_NAME)
        safari.slug = seed.slugify(changes["name"])
    if "schedule" in changes:
        changes["schedule"] = payload.schedule.model_dump(by_alias=True) if payload.schedule else None

    min_guests = changes.get("min_guests", safari.min_guests)
    max_guests = changes.get("max_guests", safari.max_guests)
    if min_guests > max_guests:
        raise HTTPException(status_code=400, detail="minGuests cannot exceed maxGuests")

    for field in _UPDATABLE_FIELDS:
        if field in changes:
            setattr(safari, field, changes[field])

    commit_package(db, "updating")
    db.refresh(safari)

    return {
        "success": True,
        "message": "Safari package updated successfully",
        "safari": format_safari(safari),
    }


# Admin Only - Flip Availability (read-modify-write, last writer wins)
@router.patch("/{safari_id}/toggle", dependencies=[Depends(auth.verify_admin_user)])
def toggle_availability(safari_id: int, db: Session = Depends(database.get_db)):
    safari = get_safari_or_404(db, safari_id)

    safari.is_available = not safari.is_available
    commit_package(db, "toggling")
    db.refresh(safari)

    state = "available" if safari.is_available else "unavailable"
    return {
        "success": True,
        "message": f"Safari package is now {state}",
        "isAvailable": safari.is_available,
        "safari": format_safari(safari),
    }


# Admin Only - Delete a Package
@router.delete("/{safari_id}", dependencies=[Depends(auth.verify_admin_user)])
def delete_safari(safari_id: int, db: Session = Depends(database.get_db)):
    safari = get_safari_or_404(db, safari_id)

    db.delete(safari)
    commit_package(db, "deleting")

    return {"success": True, "message": "Safari package deleted successfully"}
