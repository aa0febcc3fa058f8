import logging
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from clubsphere.models.announcement import AnnouncementRow
from clubsphere.models.club import ClubRow
from clubsphere.models.membership import MembershipRow
from clubsphere.models.user import UserRow
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


def _enum_value(value):
    return getattr(value, "value", value)


class SqlStorage(Storage):
    """Storage on the SQLAlchemy tables in clubsphere.models.

    Each call runs in its own session; multi-row writes commit once.
    """

    def __init__(self, session_factory: sessionmaker, clock: Clock = utcnow) -> None:
        self._session_factory = session_factory
        self._clock = clock

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    # Users

    def get_user(self, user_id: str) -> User | None:
        with self._session() as db:
            row = db.get(UserRow, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._session() as db:
            row = db.query(UserRow).filter(UserRow.username == username).first()
            return User.model_validate(row) if row else None

    def get_user_by_email(self, email: str) -> User | None:
        with self._session() as db:
            row = db.query(UserRow).filter(UserRow.email == email).first()
            return User.model_validate(row) if row else None

    def create_user(self, data: NewUser) -> User:
        with self._session() as db:
            clash = db.query(UserRow).filter(
                or_(UserRow.username == data.username, UserRow.email == data.email)
            ).first()
            if clash is not None:
                field = "Username" if clash.username == data.username else "Email"
                raise ConflictError(f"{field} already exists.")

            row = UserRow(
                id=str(uuid4()),
                username=data.username,
                password=data.password,
                email=data.email,
                full_name=data.full_name,
                school_id=data.school_id,
                role=_enum_value(data.role),
                created_at=self._clock(),
            )
            db.add(row)
            self._commit(db, "Username or email already exists.")
            db.refresh(row)
            logger.debug("Created user %s (%s)", row.id, row.role)
            return User.model_validate(row)

    # Clubs

    def get_club(self, club_id: str) -> Club | None:
        with self._session() as db:
            row = db.get(ClubRow, club_id)
            return Club.model_validate(row) if row else None

    def create_club(self, data: NewClub) -> Club:
        with self._session() as db:
            row = self._add_club(db, data)
            db.commit()
            db.refresh(row)
            logger.debug("Created club %s", row.id)
            return Club.model_validate(row)

    def create_club_with_leader(self, data: NewClub, leader_id: str) -> Club:
        with self._session() as db:
            row = self._add_club(db, data.model_copy(update={"leader_id": leader_id}))
            db.add(
                MembershipRow(
                    id=str(uuid4()),
                    user_id=leader_id,
                    club_id=row.id,
                    role=MembershipRole.leader.value,
                    joined_at=self._clock(),
                )
            )
            db.commit()
            db.refresh(row)
            logger.debug("Created club %s led by %s", row.id, leader_id)
            return Club.model_validate(row)

    def update_club(self, club_id: str, updates: ClubUpdate) -> Club | None:
        with self._session() as db:
            row = db.get(ClubRow, club_id)
            if row is None:
                return None
            for field_name, value in updates.changes().items():
                setattr(row, field_name, _enum_value(value))
            db.commit()
            return Club.model_validate(row)

    def delete_club(self, club_id: str) -> bool:
        with self._session() as db:
            row = db.get(ClubRow, club_id)
            if row is None:
                return False
            row.is_active = False
            db.commit()
            logger.debug("Deactivated club %s", club_id)
            return True

    def get_club_view(self, club_id: str, viewer_id: str | None = None) -> ClubView | None:
        with self._session() as db:
            row = db.get(ClubRow, club_id)
            if row is None:
                return None
            return self._club_views(db, [row], viewer_id)[0]

    def list_active_clubs(self, viewer_id: str | None = None) -> list[ClubView]:
        with self._session() as db:
            rows = self._active_clubs_query(db).all()
            return self._club_views(db, rows, viewer_id)

    def list_clubs_by_category(
        self, category: ClubCategory | str, viewer_id: str | None = None
    ) -> list[ClubView]:
        with self._session() as db:
            rows = self._active_clubs_query(db).filter(ClubRow.category == _enum_value(category)).all()
            return self._club_views(db, rows, viewer_id)

    def search_clubs(self, text: str, viewer_id: str | None = None) -> list[ClubView]:
        with self._session() as db:
            rows = self._active_clubs_query(db).all()
            matches = [row for row in rows if resolver.matches_search(Club.model_validate(row), text)]
            return self._club_views(db, matches, viewer_id)

    # Memberships

    def get_membership(self, user_id: str, club_id: str) -> Membership | None:
        with self._session() as db:
            row = self._membership_row(db, user_id, club_id)
            return Membership.model_validate(row) if row else None

    def create_membership(self, data: NewMembership) -> Membership:
        with self._session() as db:
            if self._membership_row(db, data.user_id, data.club_id) is not None:
                raise ConflictError("Already a member of this club.")
            row = MembershipRow(
                id=str(uuid4()),
                user_id=data.user_id,
                club_id=data.club_id,
                role=_enum_value(data.role),
                joined_at=self._clock(),
            )
            db.add(row)
            self._commit(db, "Already a member of this club.")
            db.refresh(row)
            logger.debug("User %s joined club %s as %s", row.user_id, row.club_id, row.role)
            return Membership.model_validate(row)

    def update_membership_role(
        self, user_id: str, club_id: str, role: MembershipRole
    ) -> Membership | None:
        with self._session() as db:
            row = self._membership_row(db, user_id, club_id)
            if row is None:
                return None
            row.role = _enum_value(role)
            db.commit()
            return Membership.model_validate(row)

    def delete_membership(self, user_id: str, club_id: str) -> bool:
        with self._session() as db:
            row = self._membership_row(db, user_id, club_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            logger.debug("User %s left club %s", user_id, club_id)
            return True

    def list_user_memberships(self, user_id: str) -> list[MembershipWithClub]:
        with self._session() as db:
            pairs = (
                db.query(MembershipRow, ClubRow)
                .join(ClubRow, ClubRow.id == MembershipRow.club_id)
                .filter(MembershipRow.user_id == user_id, ClubRow.is_active.is_(True))
                .order_by(MembershipRow.joined_at.asc())
                .all()
            )
            return [
                resolver.membership_with_club(Membership.model_validate(membership), Club.model_validate(club))
                for membership, club in pairs
            ]

    def list_club_memberships(self, club_id: str) -> list[MembershipWithUser]:
        with self._session() as db:
            pairs = (
                db.query(MembershipRow, UserRow)
                .join(UserRow, UserRow.id == MembershipRow.user_id)
                .filter(MembershipRow.club_id == club_id)
                .order_by(MembershipRow.joined_at.asc())
                .all()
            )
            return [
                resolver.membership_with_user(Membership.model_validate(membership), User.model_validate(user))
                for membership, user in pairs
            ]

    # Announcements

    def get_announcement(self, announcement_id: str) -> Announcement | None:
        with self._session() as db:
            row = self._announcement_row(db, announcement_id)
            return Announcement.model_validate(row) if row else None

    def create_announcement(self, data: NewAnnouncement) -> Announcement:
        with self._session() as db:
            row = AnnouncementRow(id=str(uuid4()), created_at=self._clock(), **data.model_dump())
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.debug("Posted announcement %s to club %s", row.id, row.club_id)
            return Announcement.model_validate(row)

    def update_announcement(
        self, announcement_id: str, updates: AnnouncementUpdate
    ) -> Announcement | None:
        with self._session() as db:
            row = self._announcement_row(db, announcement_id)
            if row is None:
                return None
            for field_name, value in updates.changes().items():
                setattr(row, field_name, value)
            db.commit()
            return Announcement.model_validate(row)

    def delete_announcement(self, announcement_id: str) -> bool:
        with self._session() as db:
            row = self._announcement_row(db, announcement_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def list_club_announcements(self, club_id: str) -> list[AnnouncementView]:
        with self._session() as db:
            return self._announcement_views(db, AnnouncementRow.club_id == club_id)

    def list_user_announcements(self, user_id: str) -> list[AnnouncementView]:
        with self._session() as db:
            active_club_ids = (
                select(MembershipRow.club_id)
                .join(ClubRow, ClubRow.id == MembershipRow.club_id)
                .where(MembershipRow.user_id == user_id, ClubRow.is_active.is_(True))
            )
            return self._announcement_views(db, AnnouncementRow.club_id.in_(active_club_ids))

    # Admin

    def get_stats(self) -> AdminStats:
        with self._session() as db:
            return AdminStats(
                total_students=db.query(UserRow).filter(UserRow.role == UserRole.student.value).count(),
                total_leaders=db.query(UserRow).filter(UserRow.role == UserRole.leader.value).count(),
                active_clubs=self._active_clubs_query(db).count(),
                total_memberships=db.query(MembershipRow).count(),
            )

    # Helpers

    def _commit(self, db: Session, conflict_message: str) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ConflictError(conflict_message) from exc

    def _add_club(self, db: Session, data: NewClub) -> ClubRow:
        row = ClubRow(
            id=str(uuid4()),
            name=data.name,
            description=data.description,
            category=_enum_value(data.category),
            leader_id=data.leader_id,
            meeting_time=data.meeting_time,
            meeting_location=data.meeting_location,
            is_active=data.is_active,
            created_at=self._clock(),
        )
        db.add(row)
        return row

    def _active_clubs_query(self, db: Session):
        return db.query(ClubRow).filter(ClubRow.is_active.is_(True)).order_by(ClubRow.created_at.asc())

    def _membership_row(self, db: Session, user_id: str, club_id: str) -> MembershipRow | None:
        return db.query(MembershipRow).filter(
            MembershipRow.user_id == user_id,
            MembershipRow.club_id == club_id,
        ).first()

    def _announcement_row(self, db: Session, announcement_id: str) -> AnnouncementRow | None:
        return db.query(AnnouncementRow).filter(AnnouncementRow.id == announcement_id).first()

    def _club_views(self, db: Session, rows: list[ClubRow], viewer_id: str | None) -> list[ClubView]:
        if not rows:
            return []
        club_ids = [row.id for row in rows]

        member_counts = dict(
            db.query(MembershipRow.club_id, func.count(MembershipRow.id))
            .filter(MembershipRow.club_id.in_(club_ids))
            .group_by(MembershipRow.club_id)
            .all()
        )

        leader_ids = sorted({row.leader_id for row in rows if row.leader_id})
        leaders = {
            user.id: User.model_validate(user)
            for user in db.query(UserRow).filter(UserRow.id.in_(leader_ids)).all()
        } if leader_ids else {}

        viewer_memberships: dict[str, Membership] = {}
        if viewer_id:
            viewer_memberships = {
                membership.club_id: Membership.model_validate(membership)
                for membership in db.query(MembershipRow).filter(
                    MembershipRow.user_id == viewer_id,
                    MembershipRow.club_id.in_(club_ids),
                ).all()
            }

        return [
            resolver.club_view(
                Club.model_validate(row),
                member_count=member_counts.get(row.id, 0),
                leader=leaders.get(row.leader_id) if row.leader_id else None,
                viewer_membership=viewer_memberships.get(row.id),
                has_viewer=viewer_id is not None,
            )
            for row in rows
        ]

    def _announcement_views(self, db: Session, criterion) -> list[AnnouncementView]:
        triples = (
            db.query(AnnouncementRow, ClubRow, UserRow)
            .join(ClubRow, ClubRow.id == AnnouncementRow.club_id)
            .join(UserRow, UserRow.id == AnnouncementRow.author_id)
            .filter(criterion)
            .order_by(AnnouncementRow.created_at.desc(), AnnouncementRow.seq.desc())
            .all()
        )
        return [
            resolver.announcement_view(
                Announcement.model_validate(announcement),
                Club.model_validate(club),
                User.model_validate(author),
            )
            for announcement, club, author in triples
        ]
