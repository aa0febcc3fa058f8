"""Builds the read models from stored records.

Nothing here touches a store: callers look up the related records and
hand them in, so the same mapping is shared by every storage backend.
"""

from collections.abc import Iterable

from clubsphere.storage.records import Announcement, Club, Membership, User
from clubsphere.storage.views import (
    AnnouncementView,
    ClubView,
    MembershipWithClub,
    MembershipWithUser,
)


def club_view(
    club: Club,
    member_count: int,
    leader: User | None,
    viewer_membership: Membership | None = None,
    has_viewer: bool = False,
) -> ClubView:
    return ClubView(
        id=club.id,
        name=club.name,
        description=club.description,
        category=club.category,
        leader_id=club.leader_id,
        meeting_time=club.meeting_time,
        meeting_location=club.meeting_location,
        is_active=club.is_active,
        created_at=club.created_at,
        member_count=member_count,
        leader=leader,
        is_member=(viewer_membership is not None) if has_viewer else None,
        user_role=viewer_membership.role if viewer_membership is not None else None,
    )


def membership_with_club(membership: Membership, club: Club) -> MembershipWithClub:
    return MembershipWithClub(
        id=membership.id,
        user_id=membership.user_id,
        club_id=membership.club_id,
        role=membership.role,
        joined_at=membership.joined_at,
        club=club,
    )


def membership_with_user(membership: Membership, user: User) -> MembershipWithUser:
    return MembershipWithUser(
        id=membership.id,
        user_id=membership.user_id,
        club_id=membership.club_id,
        role=membership.role,
        joined_at=membership.joined_at,
        user=user,
    )


def announcement_view(announcement: Announcement, club: Club, author: User) -> AnnouncementView:
    return AnnouncementView(
        id=announcement.id,
        title=announcement.title,
        content=announcement.content,
        club_id=announcement.club_id,
        author_id=announcement.author_id,
        created_at=announcement.created_at,
        club=club,
        author=author,
    )


def newest_first(announcements: Iterable[Announcement]) -> list[Announcement]:
    """Order by created_at descending.

    Input is expected in insertion order; reversing it first makes equal
    timestamps come out newest-inserted first, since sorted() is stable.
    """
    return sorted(reversed(list(announcements)), key=lambda item: item.created_at, reverse=True)


def matches_search(club: Club, text: str) -> bool:
    needle = text.lower()
    return (
        needle in club.name.lower()
        or needle in club.description.lower()
        or needle in club.category.value.lower()
    )
