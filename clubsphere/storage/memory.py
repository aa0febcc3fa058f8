import logging
from threading import RLock
from uuid import uuid4

from clubsphere.storage import resolver
from clubsphere.storage.base import Clock, ConflictError, Storage, utcnow
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
    UserRole,
)
from clubsphere.storage.views import (
    AdminStats,
    AnnouncementView,
    ClubView,
    MembershipWithClub,
    MembershipWithUser,
)

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """Volatile storage backed by one dict per entity type.

    Dicts keep insertion order, which the announcement ordering relies on
    to break timestamp ties.
    """

    def __init__(self, clock: Clock = utcnow) -> None:
        self._clock = clock
        self._lock = RLock()
        self._users: dict[str, User] = {}
        self._clubs: dict[str, Club] = {}
        self._memberships: dict[str, Membership] = {}
        self._announcements: dict[str, Announcement] = {}

    # Users

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return next((user for user in list(self._users.values()) if user.username == username), None)

    def get_user_by_email(self, email: str) -> User | None:
        return next((user for user in list(self._users.values()) if user.email == email), None)

    def create_user(self, data: NewUser) -> User:
        with self._lock:
            if self.get_user_by_username(data.username) is not None:
                raise ConflictError("Username already exists.")
            if self.get_user_by_email(data.email) is not None:
                raise ConflictError("Email already exists.")

            user = User(id=str(uuid4()), created_at=self._clock(), **data.model_dump())
            self._users[user.id] = user
        logger.debug("Created user %s (%s)", user.id, user.role.value)
        return user

    # Clubs

    def get_club(self, club_id: str) -> Club | None:
        return self._clubs.get(club_id)

    def create_club(self, data: NewClub) -> Club:
        club = Club(id=str(uuid4()), created_at=self._clock(), **data.model_dump())
        with self._lock:
            self._clubs[club.id] = club
        logger.debug("Created club %s", club.id)
        return club

    def create_club_with_leader(self, data: NewClub, leader_id: str) -> Club:
        with self._lock:
            club = self.create_club(data.model_copy(update={"leader_id": leader_id}))
            self.create_membership(
                NewMembership(user_id=leader_id, club_id=club.id, role=MembershipRole.leader)
            )
        return club

    def update_club(self, club_id: str, updates: ClubUpdate) -> Club | None:
        with self._lock:
            club = self._clubs.get(club_id)
            if club is None:
                return None
            updated = club.model_copy(update=updates.changes())
            self._clubs[club_id] = updated
        return updated

    def delete_club(self, club_id: str) -> bool:
        with self._lock:
            club = self._clubs.get(club_id)
            if club is None:
                return False
            self._clubs[club_id] = club.model_copy(update={"is_active": False})
        logger.debug("Deactivated club %s", club_id)
        return True

    def get_club_view(self, club_id: str, viewer_id: str | None = None) -> ClubView | None:
        club = self._clubs.get(club_id)
        if club is None:
            return None
        return self._club_view(club, viewer_id)

    def list_active_clubs(self, viewer_id: str | None = None) -> list[ClubView]:
        return [self._club_view(club, viewer_id) for club in self._active_clubs()]

    def list_clubs_by_category(
        self, category: ClubCategory | str, viewer_id: str | None = None
    ) -> list[ClubView]:
        return [
            self._club_view(club, viewer_id)
            for club in self._active_clubs()
            if club.category == category
        ]

    def search_clubs(self, text: str, viewer_id: str | None = None) -> list[ClubView]:
        return [
            self._club_view(club, viewer_id)
            for club in self._active_clubs()
            if resolver.matches_search(club, text)
        ]

    # Memberships

    def get_membership(self, user_id: str, club_id: str) -> Membership | None:
        return next(
            (
                membership
                for membership in list(self._memberships.values())
                if membership.user_id == user_id and membership.club_id == club_id
            ),
            None,
        )

    def create_membership(self, data: NewMembership) -> Membership:
        with self._lock:
            if self.get_membership(data.user_id, data.club_id) is not None:
                raise ConflictError("Already a member of this club.")
            membership = Membership(id=str(uuid4()), joined_at=self._clock(), **data.model_dump())
            self._memberships[membership.id] = membership
        logger.debug("User %s joined club %s as %s", data.user_id, data.club_id, membership.role.value)
        return membership

    def update_membership_role(
        self, user_id: str, club_id: str, role: MembershipRole
    ) -> Membership | None:
        with self._lock:
            membership = self.get_membership(user_id, club_id)
            if membership is None:
                return None
            updated = membership.model_copy(update={"role": MembershipRole(role)})
            self._memberships[membership.id] = updated
        return updated

    def delete_membership(self, user_id: str, club_id: str) -> bool:
        with self._lock:
            membership = self.get_membership(user_id, club_id)
            if membership is None:
                return False
            del self._memberships[membership.id]
        logger.debug("User %s left club %s", user_id, club_id)
        return True

    def list_user_memberships(self, user_id: str) -> list[MembershipWithClub]:
        results = []
        for membership in list(self._memberships.values()):
            if membership.user_id != user_id:
                continue
            club = self._clubs.get(membership.club_id)
            if club is None or not club.is_active:
                continue
            results.append(resolver.membership_with_club(membership, club))
        return results

    def list_club_memberships(self, club_id: str) -> list[MembershipWithUser]:
        results = []
        for membership in list(self._memberships.values()):
            if membership.club_id != club_id:
                continue
            user = self._users.get(membership.user_id)
            if user is None:
                continue
            results.append(resolver.membership_with_user(membership, user))
        return results

    # Announcements

    def get_announcement(self, announcement_id: str) -> Announcement | None:
        return self._announcements.get(announcement_id)

    def create_announcement(self, data: NewAnnouncement) -> Announcement:
        announcement = Announcement(id=str(uuid4()), created_at=self._clock(), **data.model_dump())
        with self._lock:
            self._announcements[announcement.id] = announcement
        logger.debug("Posted announcement %s to club %s", announcement.id, announcement.club_id)
        return announcement

    def update_announcement(
        self, announcement_id: str, updates: AnnouncementUpdate
    ) -> Announcement | None:
        with self._lock:
            announcement = self._announcements.get(announcement_id)
            if announcement is None:
                return None
            updated = announcement.model_copy(update=updates.changes())
            self._announcements[announcement_id] = updated
        return updated

    def delete_announcement(self, announcement_id: str) -> bool:
        with self._lock:
            return self._announcements.pop(announcement_id, None) is not None

    def list_club_announcements(self, club_id: str) -> list[AnnouncementView]:
        return self._announcement_views(
            announcement
            for announcement in list(self._announcements.values())
            if announcement.club_id == club_id
        )

    def list_user_announcements(self, user_id: str) -> list[AnnouncementView]:
        club_ids = {membership.club_id for membership in self.list_user_memberships(user_id)}
        return self._announcement_views(
            announcement
            for announcement in list(self._announcements.values())
            if announcement.club_id in club_ids
        )

    # Admin

    def get_stats(self) -> AdminStats:
        users = list(self._users.values())
        return AdminStats(
            total_students=sum(1 for user in users if user.role == UserRole.student),
            total_leaders=sum(1 for user in users if user.role == UserRole.leader),
            active_clubs=len(self._active_clubs()),
            total_memberships=len(self._memberships),
        )

    # Helpers

    def _active_clubs(self) -> list[Club]:
        return [club for club in list(self._clubs.values()) if club.is_active]

    def _club_view(self, club: Club, viewer_id: str | None) -> ClubView:
        member_count = sum(
            1 for membership in list(self._memberships.values()) if membership.club_id == club.id
        )
        leader = self._users.get(club.leader_id) if club.leader_id else None
        viewer_membership = self.get_membership(viewer_id, club.id) if viewer_id else None
        return resolver.club_view(
            club,
            member_count=member_count,
            leader=leader,
            viewer_membership=viewer_membership,
            has_viewer=viewer_id is not None,
        )

    def _announcement_views(self, announcements) -> list[AnnouncementView]:
        views = []
        for announcement in resolver.newest_first(announcements):
            club = self._clubs.get(announcement.club_id)
            author = self._users.get(announcement.author_id)
            if club is None or author is None:
                continue
            views.append(resolver.announcement_view(announcement, club, author))
        return views
