# schemas.py (Pydantic v2)
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.networks import validate_email
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import date, datetime

from models.Activity import ActivityType
from models.TripMember import MemberRole, InvitationStatus


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; snake_case input is accepted too."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageRead(CamelModel):
    message: str


def _checked_email(v: str) -> str:
    """Reject malformed addresses but keep the address exactly as submitted.

    EmailStr would return a normalized copy (lower-cased domain), and the
    stored value has to match what the caller later logs in with.
    """
    v = v.strip()
    validate_email(v)
    return v


# ---------- Auth ----------
class SignupWrite(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _checked_email(v)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must not be blank")
        return v

class LoginWrite(CamelModel):
    # Plain string: an unknown or malformed email gets the same 401 as a bad password
    email: str
    password: str

class UserPublic(CamelModel):
    id: int
    username: str
    email: str

class AuthRead(CamelModel):
    token: str
    user: UserPublic


# ---------- Activities ----------
class ActivityBase(CamelModel):
    title: str = Field(min_length=1, max_length=150)
    date: date
    time: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = None
    type: ActivityType = ActivityType.ACTIVITY

class ActivityWrite(ActivityBase):
    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v):
        return ActivityType.ACTIVITY if v is None else v

class ActivityRead(ActivityBase):
    id: int


# ---------- Trips ----------
class TripBase(CamelModel):
    title: str = Field(min_length=1, max_length=150)
    destination: str = Field(min_length=1, max_length=150)
    start_date: date
    end_date: date

class TripWrite(TripBase):
    pass

class TripRead(TripBase):
    id: int
    activities: List[ActivityRead] = []
    created_at: datetime
    updated_at: datetime

class TripBrief(CamelModel):
    """Trip fields disclosed when an invitation is accepted"""
    id: int
    title: str
    destination: str

class TripSummary(TripBrief):
    """Trip fields joined into a pending invitation"""
    start_date: date
    end_date: date


# ---------- Invitations ----------
class InvitationWrite(CamelModel):
    email: str
    role: Optional[MemberRole] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _checked_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def empty_role_is_default(cls, v):
        # "", null and omitted all fall back to the default role
        return v or None

class InvitationRead(CamelModel):
    id: int
    trip_id: int
    user_id: Optional[int] = None
    role: MemberRole
    invited_email: str
    status: InvitationStatus
    created_at: datetime
    updated_at: datetime

class PendingInvitationRead(InvitationRead):
    trip: Optional[TripSummary] = None

class InvitationCreated(CamelModel):
    message: str
    invitation: InvitationRead

class InvitationAccepted(CamelModel):
    message: str
    trip: TripBrief
