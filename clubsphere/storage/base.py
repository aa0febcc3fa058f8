from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from clubsphere.storage.records import (
    Announcement,
    AnnouncementUpdate,
    Club,
    ClubCategory,
    ClubUpdate,
    Membership,
    MembershipRole,
    NewAnnouncement,
    NewClub,
    NewMembership,
    NewUser,
    User,
)
from clubsphere.storage.views import (
    AdminStats,
    AnnouncementView,
    ClubView,
    MembershipWithClub,
    MembershipWithUser,
)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConflictError(RuntimeError):
    """A create would break a uniqueness rule (username, email, membership)."""


class Storage:
    """Data access used by the route layer.

    Lookups signal absence with None (or False for deletes) instead of
    raising. Only ConflictError is raised for expected failures.
    """

    # Users
    def get_user(self, user_id: str) -> User | None:
        raise NotImplementedError

    def get_user_by_username(self, username: str) -> User | None:
        raise NotImplementedError

    def get_user_by_email(self, email: str) -> User | None:
        raise NotImplementedError

    def create_user(self, data: NewUser) -> User:
        raise NotImplementedError

    # Clubs
    def get_club(self, club_id: str) -> Club | None:
        raise NotImplementedError

    def create_club(self, data: NewClub) -> Club:
        raise NotImplementedError

    def create_club_with_leader(self, data: NewClub, leader_id: str) -> Club:
        raise NotImplementedError

    def update_club(self, club_id: str, updates: ClubUpdate) -> Club | None:
        raise NotImplementedError

    def delete_club(self, club_id: str) -> bool:
        raise NotImplementedError

    def get_club_view(self, club_id: str, viewer_id: str | None = None) -> ClubView | None:
        raise NotImplementedError

    def list_active_clubs(self, viewer_id: str | None = None) -> list[ClubView]:
        raise NotImplementedError

    def list_clubs_by_category(
        self, category: ClubCategory | str, viewer_id: str | None = None
    ) -> list[ClubView]:
        raise NotImplementedError

    def search_clubs(self, text: str, viewer_id: str | None = None) -> list[ClubView]:
        raise NotImplementedError

    # Memberships
    def get_membership(self, user_id: str, club_id: str) -> Membership | None:
        raise NotImplementedError

    def create_membership(self, data: NewMembership) -> Membership:
        raise NotImplementedError

    def update_membership_role(
        self, user_id: str, club_id: str, role: MembershipRole
    ) -> Membership | None:
        raise NotImplementedError

    def delete_membership(self, user_id: str, club_id: str) -> bool:
        raise NotImplementedError

    def list_user_memberships(self, user_id: str) -> list[MembershipWithClub]:
        raise NotImplementedError

    def list_club_memberships(self, club_id: str) -> list[MembershipWithUser]:
        raise NotImplementedError

    # Announcements
    def get_announcement(self, announcement_id: str) -> Announcement | None:
        raise NotImplementedError

    def create_announcement(self, data: NewAnnouncement) -> Announcement:
        raise NotImplementedError

    def update_announcement(
        self, announcement_id: str, updates: AnnouncementUpdate
    ) -> Announcement | None:
        raise NotImplementedError

    def delete_announcement(self, announcement_id: str) -> bool:
        raise NotImplementedError

    def list_club_announcements(self, club_id: str) -> list[AnnouncementView]:
        raise NotImplementedError

    def list_user_announcements(self, user_id: str) -> list[AnnouncementView]:
        raise NotImplementedError

    # Admin
    def get_stats(self) -> AdminStats:
        raise NotImplementedError
