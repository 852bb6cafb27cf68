# wildtrack/models.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, Integer, String, Text

from wildtrack.database import Base


def utcnow():
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Admin(TimestampMixin, Base):
    __tablename__ = "admins"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(String(20), default="admin", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)


class Booking(TimestampMixin, Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    safari_package = Column(String(100), nullable=False)
    date = Column(Date, nullable=False, index=True)
    guests = Column(Integer, nullable=False)
    message = Column(Text, nullable=True)
    total_amount = Column(Float, default=0, nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)
    notes = Column(Text, nullable=True)


class Message(TimestampMixin, Base):
    __tablename__ = "messages"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    category = Column(String(20), default="general", nullable=False, index=True)


class SafariPackage(TimestampMixin, Base):
    __tablename__ = "safari_packages"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(200), nullable=True)
    price = Column(Float, nullable=False, index=True)
    currency = Column(String(3), default="ZAR", nullable=False)
    duration = Column(String(20), nullable=False)
    max_guests = Column(Integer, nullable=False)
    min_guests = Column(Integer, default=1, nullable=False)
    image = Column(String, nullable=True)
    features = Column(JSON, default=list, nullable=False)
    includes = Column(JSON, default=list, nullable=False)
    requirements = Column(JSON, default=list, nullable=False)
    schedule = Column(JSON, nullable=True)
    is_available = Column(Boolean, default=True, nullable=False, index=True)
    is_popular = Column(Boolean, default=False, nullable=False, index=True)
    category = Column(String(20), default="morning", nullable=False, index=True)
