"""Read models returned by the query surface."""

from datetime import datetime

from pydantic import BaseModel

from clubsphere.storage.records import ClubCategory, Club, MembershipRole, User


class ClubView(BaseModel):
    id: str
    name: str
    description: str
    category: ClubCategory
    leader_id: str | None = None
    meeting_time: str | None = None
    meeting_location: str | None = None
    is_active: bool
    created_at: datetime
    member_count: int
    leader: User | None = None
    # Only filled when the query names a viewer.
    is_member: bool | None = None
    user_role: MembershipRole | None = None


class MembershipWithClub(BaseModel):
    id: str
    user_id: str
    club_id: str
    role: MembershipRole
    joined_at: datetime
    club: Club


class MembershipWithUser(BaseModel):
    id: str
    user_id: str
    club_id: str
    role: MembershipRole
    joined_at: datetime
    user: User


class AnnouncementView(BaseModel):
    id: str
    title: str
    content: str
    club_id: str
    author_id: str
    created_at: datetime
    club: Club
    author: User


class AdminStats(BaseModel):
    total_students: int
    total_leaders: int
    active_clubs: int
    total_memberships: int
