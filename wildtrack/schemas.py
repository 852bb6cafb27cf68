# wildtrack/schemas.py
import datetime as dt
import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

SafariPackageName = Literal[
    "Big Five Morning Safari",
    "Family Afternoon Safari",
    "Night Safari Drive",
    "Private Tour",
    "Bird Watching Safari",
    "Photography Safari",
    "Walking Safari",
    "Custom Package",
]
BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]
MessageCategory = Literal["general", "booking", "feedback", "partnership", "other"]
Currency = Literal["ZAR", "USD", "EUR", "GBP"]
Duration = Literal["2 hours", "3 hours", "4 hours", "Half day", "Full day", "Multi-day"]
SafariCategory = Literal["morning", "afternoon", "night", "private", "specialty"]
AdminRole = Literal["admin", "manager"]

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")
DEFAULT_SAFARI_IMAGE = "https://images.unsplash.com/photo-1516426122078-c23e76319801?w=800&q=80"


def _valid_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please provide a valid email address")
    return value.lower()


class _Payload(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


# Auth
class LoginRequest(_Payload):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminCreate(_Payload):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: AdminRole = "admin"


# Bookings
class BookingCreate(_Payload):
    name: str = Field(..., min_length=1, max_length=100)
    email: str
    phone: str = Field(..., min_length=1, max_length=20)
    safari_package: SafariPackageName = Field(..., alias="safariPackage")
    date: dt.date
    guests: int = Field(..., ge=1, le=20)
    message: Optional[str] = Field(None, max_length=1000)

    check_email = field_validator("email")(_valid_email)

    @field_validator("date")
    @classmethod
    def date_not_in_past(cls, value: dt.date) -> dt.date:
        if value < dt.date.today():
            raise ValueError("Date must be today or in the future")
        return value


class BookingUpdate(_Payload):
    status: Optional[BookingStatus] = None
    notes: Optional[str] = Field(None, max_length=1000)


# Messages
class MessageCreate(_Payload):
    name: str = Field(..., min_length=1, max_length=100)
    email: str
    phone: Optional[str] = Field(None, max_length=20)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    category: MessageCategory = "general"

    check_email = field_validator("email")(_valid_email)

    @field_validator("category", mode="before")
    @classmethod
    def default_blank_category(cls, value):
        # The contact form posts an empty string when nothing is picked
        return value or "general"


# Safari packages
class Schedule(_Payload):
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    meeting_point: Optional[str] = Field(None, alias="meetingPoint")


class SafariCreate(_Payload):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    short_description: Optional[str] = Field(None, alias="shortDescription", max_length=200)
    price: float = Field(..., gt=0, allow_inf_nan=False)
    currency: Currency = "ZAR"
    duration: Duration
    max_guests: int = Field(..., alias="maxGuests", ge=1, le=50)
    min_guests: int = Field(1, alias="minGuests", ge=1)
    image: str = DEFAULT_SAFARI_IMAGE
    features: List[str] = []
    includes: List[str] = []
    requirements: List[str] = []
    schedule: Optional[Schedule] = None
    is_available: bool = Field(True, alias="isAvailable")
    is_popular: bool = Field(False, alias="isPopular")
    category: SafariCategory = "morning"

    @model_validator(mode="after")
    def guest_bounds(self):
        if self.min_guests > self.max_guests:
            raise ValueError("minGuests cannot exceed maxGuests")
        return self


class SafariUpdate(_Payload):
    """Partial update: only the fields present in the body are applied.

    Non-nullable fields default to None but reject an explicit null.
    """

    name: str = Field(None, min_length=1, max_length=100)
    description: str = Field(None, min_length=1, max_length=1000)
    short_description: Optional[str] = Field(None, alias="shortDescription", max_length=200)
    price: float = Field(None, gt=0, allow_inf_nan=False)
    currency: Currency = None
    duration: Duration = None
    max_guests: int = Field(None, alias="maxGuests", ge=1, le=50)
    min_guests: int = Field(None, alias="minGuests", ge=1)
    image: Optional[str] = None
    features: List[str] = None
    includes: List[str] = None
    requirements: List[str] = None
    schedule: Optional[Schedule] = None
    is_available: bool = Field(None, alias="isAvailable")
    is_popular: bool = Field(None, alias="isPopular")
    category: SafariCategory = None
