"""Stored entity records and the payloads used to create or update them.

Records are frozen: every change goes through the store, which builds a
new record and replaces the old one under the same id.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class UserRole(str, Enum):
    student = "student"
    leader = "leader"
    admin = "admin"


class ClubCategory(str, Enum):
    academic = "Academic"
    sports = "Sports"
    arts = "Arts"
    technology = "Technology"
    service = "Service"


class MembershipRole(str, Enum):
    member = "member"
    officer = "officer"
    leader = "leader"


class User(BaseModel):
    id: str
    username: str
    # Never serialized. The default lets a serialized user validate back into a User.
    password: str = Field(default="", exclude=True, repr=False)
    email: str
    full_name: str
    school_id: str
    role: UserRole = UserRole.student
    created_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class Club(BaseModel):
    id: str
    name: str
    description: str
    category: ClubCategory
    leader_id: str | None = None
    meeting_time: str | None = None
    meeting_location: str | None = None
    is_active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class Membership(BaseModel):
    id: str
    user_id: str
    club_id: str
    role: MembershipRole = MembershipRole.member
    joined_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class Announcement(BaseModel):
    id: str
    title: str
    content: str
    club_id: str
    author_id: str
    created_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class NewUser(BaseModel):
    username: str
    password: str = Field(repr=False)
    email: str
    full_name: str
    school_id: str
    role: UserRole = UserRole.student


class NewClub(BaseModel):
    name: str
    description: str
    category: ClubCategory
    leader_id: str | None = None
    meeting_time: str | None = None
    meeting_location: str | None = None
    is_active: bool = True


class ClubUpdate(BaseModel):
    """Partial club changes. Only fields that were explicitly set are applied."""

    name: str | None = None
    description: str | None = None
    category: ClubCategory | None = None
    leader_id: str | None = None
    meeting_time: str | None = None
    meeting_location: str | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def reject_cleared_required_fields(self) -> "ClubUpdate":
        for field_name in ("name", "description", "category", "is_active"):
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be cleared.")
        return self

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


class NewMembership(BaseModel):
    user_id: str
    club_id: str
    role: MembershipRole = MembershipRole.member


class NewAnnouncement(BaseModel):
    title: str
    content: str
    club_id: str
    author_id: str


class AnnouncementUpdate(BaseModel):
    title: str | None = None
    content: str | None = None

    @model_validator(mode="after")
    def reject_cleared_fields(self) -> "AnnouncementUpdate":
        for field_name in self.model_fields_set:
            if getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be cleared.")
        return self

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
