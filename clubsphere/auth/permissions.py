"""Club-level authorization rules applied by the route layer."""

from fastapi import HTTPException, status

from clubsphere.storage.base import Storage
from clubsphere.storage.records import Club, Membership, MembershipRole, User, UserRole

CLUB_CREATOR_ROLES = {UserRole.leader, UserRole.admin}


def can_create_club(user: User) -> bool:
    return user.role in CLUB_CREATOR_ROLES


def can_manage_club(user: User, club: Club, membership: Membership | None) -> bool:
    """Admins, the club's leader, and members holding the leader role manage a club."""
    if user.role == UserRole.admin:
        return True
    if club.leader_id == user.id:
        return True
    return membership is not None and membership.role == MembershipRole.leader


def get_managed_club(storage: Storage, club_id: str, user: User, forbidden_detail: str) -> Club:
    club = storage.get_club(club_id)
    if club is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Club not found")

    membership = storage.get_membership(user.id, club.id)
    if not can_manage_club(user, club, membership):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=forbidden_detail)
    return club
