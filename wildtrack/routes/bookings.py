# wildtrack/routes/bookings.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wildtrack import auth, database, models, schemas
from wildtrack.dependencies import Pagination, get_pagination, isoformat

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/bookings",
    tags=["Bookings"]
)


def format_booking(booking: models.Booking) -> dict:
    return {
        "_id": booking.id,
        "name": booking.name,
        "email": booking.email,
        "phone": booking.phone,
        "safariPackage": booking.safari_package,
        "date": isoformat(booking.date),
        "guests": booking.guests,
        "message": booking.message,
        "totalAmount": booking.total_amount,
        "status": booking.status,
        "notes": booking.notes,
        "createdAt": isoformat(booking.created_at),
        "updatedAt": isoformat(booking.updated_at),
    }


def get_booking_or_404(db: Session, booking_id: int) -> models.Booking:
    booking = db.query(models.Booking).filter(models.Booking.id == booking_id).first()
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


# Public - Submit a Booking Enquiry
@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(payload: schemas.BookingCreate, db: Session = Depends(database.get_db)):
    safari = db.query(models.SafariPackage).filter(
        models.SafariPackage.name == payload.safari_package
    ).first()
    # Packages missing from the catalog (e.g. "Custom Package") are quoted later
    total_amount = safari.price * payload.guests if safari else 0

    booking = models.Booking(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        safari_package=payload.safari_package,
        date=payload.date,
        guests=payload.guests,
        message=payload.message or None,
        total_amount=total_amount,
        status="pending",
    )
    try:
        db.add(booking)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Create booking failed")
        raise HTTPException(status_code=500, detail="Server error creating booking")
    db.refresh(booking)

    logger.info("Booking %s received for %s (%s guests)", booking.id, booking.safari_package, booking.guests)
    return {
        "success": True,
        "message": "Booking enquiry submitted successfully",
        "booking": {
            "id": booking.id,
            "name": booking.name,
            "safariPackage": booking.safari_package,
            "date": isoformat(booking.date),
            "formattedDate": booking.date.strftime("%A, %d %B %Y"),
            "guests": booking.guests,
            "totalAmount": booking.total_amount,
            "status": booking.status,
        },
    }


# Admin - List Bookings
@router.get("", dependencies=[Depends(auth.verify_admin_user)])
def list_bookings(
    status: Optional[schemas.BookingStatus] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(database.get_db),
):
    query = db.query(models.Booking)
    if status:
        query = query.filter(models.Booking.status == status)

    total = query.count()
    bookings = (
        query.order_by(models.Booking.created_at.desc(), models.Booking.id.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )

    return {
        "success": True,
        "count": len(bookings),
        "total": total,
        "totalPages": pagination.total_pages(total),
        "currentPage": pagination.page,
        "bookings": [format_booking(b) for b in bookings],
    }


# Admin - Booking Overview (declared before /{booking_id})
@router.get("/stats/overview", dependencies=[Depends(auth.verify_admin_user)])
def booking_stats(db: Session = Depends(database.get_db)):
    counts = dict(
        db.query(models.Booking.status, func.count(models.Booking.id))
        .group_by(models.Booking.status)
        .all()
    )
    stats = {"total": sum(counts.values())}
    for booking_status in schemas.BOOKING_STATUSES:
        stats[booking_status] = counts.get(booking_status, 0)

    recent = (
        db.query(models.Booking)
        .order_by(models.Booking.created_at.desc(), models.Booking.id.desc())
        .limit(5)
        .all()
    )

    return {
        "success": True,
        "stats": stats,
        "recentBookings": [
            {
                "_id": b.id,
                "name": b.name,
                "safariPackage": b.safari_package,
                "date": isoformat(b.date),
                "status": b.status,
                "createdAt": isoformat(b.created_at),
            }
            for b in recent
        ],
    }


# Admin - Single Booking
@router.get("/{booking_id}", dependencies=[Depends(auth.verify_admin_user)])
def get_booking(booking_id: int, db: Session = Depends(database.get_db)):
    booking = get_booking_or_404(db, booking_id)
    return {"success": True, "booking": format_booking(booking)}


# Admin - Update Status / Notes
@router.put("/{booking_id}", dependencies=[Depends(auth.verify_admin_user)])
def update_booking(booking_id: int, payload: schemas.BookingUpdate, db: Session = Depends(database.get_db)):
    booking = get_booking_or_404(db, booking_id)

    if payload.status:
        booking.status = payload.status
    if "notes" in payload.model_fields_set:
        booking.notes = payload.notes

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Update booking %s failed", booking_id)
        raise HTTPException(status_code=500, detail="Server error updating booking")
    db.refresh(booking)

    return {
        "success": True,
        "message": "Booking updated successfully",
        "booking": format_booking(booking),
    }


# Admin - Delete Booking
@router.delete("/{booking_id}", dependencies=[Depends(auth.verify_admin_user)])
def delete_booking(booking_id: int, db: Session = Depends(database.get_db)):
    booking = get_booking_or_404(db, booking_id)

    try:
        db.delete(booking)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Delete booking %s failed", booking_id)
        raise HTTPException(status_code=500, detail="Server error deleting booking")

    return {"success": True, "message": "Booking deleted successfully"}
