# wildtrack/routes/messages.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wildtrack import auth, database, models, schemas
from wildtrack.dependencies import Pagination, get_pagination, isoformat, parse_bool

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/messages",
    tags=["Messages"]
)


def format_message(message: models.Message) -> dict:
    return {
        "_id": message.id,
        "name": message.name,
        "email": message.email,
        "phone": message.phone,
        "subject": message.subject,
        "message": message.message,
        "isRead": message.is_read,
        "category": message.category,
        "createdAt": isoformat(message.created_at),
        "updatedAt": isoformat(message.updated_at),
    }


def get_message_or_404(db: Session, message_id: int) -> models.Message:
    message = db.query(models.Message).filter(models.Message.id == message_id).first()
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")
    return message


# Public - Contact Form
@router.post("", status_code=status.HTTP_201_CREATED)
def create_message(payload: schemas.MessageCreate, db: Session = Depends(database.get_db)):
    message = models.Message(
        name=payload.name,
        email=payload.email,
        phone=payload.phone or None,
        subject=payload.subject,
        message=payload.message,
        category=payload.category,
        is_read=False,
    )
    try:
        db.add(message)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Create message failed")
        raise HTTPException(status_code=500, detail="Server error sending message")
    db.refresh(message)

    return {
        "success": True,
        "message": "Message sent successfully. We will get back to you soon!",
        "data": {
            "id": message.id,
            "name": message.name,
            "subject": message.subject,
            "createdAt": isoformat(message.created_at),
        },
    }


# Admin - List Messages
@router.get("", dependencies=[Depends(auth.verify_admin_user)])
def list_messages(
    isRead: Optional[str] = None,
    category: Optional[schemas.MessageCategory] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(database.get_db),
):
    query = db.query(models.Message)
    is_read = parse_bool(isRead)
    if is_read is not None:
        query = query.filter(models.Message.is_read.is_(is_read))
    if category:
        query = query.filter(models.Message.category == category)

    total = query.count()
    messages = (
        query.order_by(models.Message.created_at.desc(), models.Message.id.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    unread_count = db.query(models.Message).filter(models.Message.is_read.is_(False)).count()

    return {
        "success": True,
        "count": len(messages),
        "total": total,
        "unreadCount": unread_count,
        "totalPages": pagination.total_pages(total),
        "currentPage": pagination.page,
        "messages": [format_message(m) for m in messages],
    }


@router.get("/stats/overview", dependencies=[Depends(auth.verify_admin_user)])
def message_stats(db: Session = Depends(database.get_db)):
    total = db.query(models.Message).count()
    unread = db.query(models.Message).filter(models.Message.is_read.is_(False)).count()
    categories = (
        db.query(models.Message.category, func.count(models.Message.id))
        .group_by(models.Message.category)
        .order_by(models.Message.category)
        .all()
    )
    recent = (
        db.query(models.Message)
        .order_by(models.Message.created_at.desc(), models.Message.id.desc())
        .limit(5)
        .all()
    )

    return {
        "success": True,
        "stats": {
            "total": total,
            "unread": unread,
            "categories": [{"_id": category, "count": count} for category, count in categories],
        },
        "recentMessages": [
            {
                "_id": m.id,
                "name": m.name,
                "subject": m.subject,
                "isRead": m.is_read,
                "createdAt": isoformat(m.created_at),
            }
            for m in recent
        ],
    }


@router.get("/{message_id}", dependencies=[Depends(auth.verify_admin_user)])
def get_message(message_id: int, db: Session = Depends(database.get_db)):
    message = get_message_or_404(db, message_id)
    return {"success": True, "data": format_message(message)}


@router.put("/{message_id}/read", dependencies=[Depends(auth.verify_admin_user)])
def mark_as_read(message_id: int, db: Session = Depends(database.get_db)):
    message = get_message_or_404(db, message_id)

    message.is_read = True
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Mark message %s as read failed", message_id)
        raise HTTPException(status_code=500, detail="Server error updating message")
    db.refresh(message)

    return {"success": True, "message": "Message marked as read", "data": format_message(message)}


@router.delete("/{message_id}", dependencies=[Depends(auth.verify_admin_user)])
def delete_message(message_id: int, db: Session = Depends(database.get_db)):
    message = get_message_or_404(db, message_id)

    try:
        db.delete(message)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Delete message %s failed", message_id)
        raise HTTPException(status_code=500, detail="Server error deleting message")

    return {"success": True, "message": "Message deleted successfully"}
