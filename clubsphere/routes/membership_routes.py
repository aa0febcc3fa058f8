from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from clubsphere.auth.dependencies import get_current_user, get_storage
from clubsphere.auth.permissions import get_managed_club
from clubsphere.storage.base import ConflictError, Storage
from clubsphere.storage.records import Membership, MembershipRole, NewMembership, User
from clubsphere.storage.views import MembershipWithClub, MembershipWithUser

router = APIRouter(tags=['memberships'])


class UpdateMemberRoleRequest(BaseModel):
    role: MembershipRole


@router.post('/clubs/{club_id}/join', response_model=Membership, status_code=status.HTTP_201_CREATED)
def join_club(
    club_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    club = storage.get_club(club_id)
    if club is None or not club.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Club not found')

    if storage.get_membership(current_user.id, club_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='Already a member of this club')

    try:
        return storage.create_membership(
            NewMembership(user_id=current_user.id, club_id=club_id, role=MembershipRole.member)
        )
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='Already a member of this club') from exc


@router.delete('/clubs/{club_id}/leave', status_code=status.HTTP_204_NO_CONTENT)
def leave_club(
    club_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    if not storage.delete_membership(current_user.id, club_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Membership not found')


@router.get('/clubs/{club_id}/members', response_model=list[MembershipWithUser])
def list_club_members(
    club_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    get_managed_club(storage, club_id, current_user, 'Only club leaders and admins can view members')
    return storage.list_club_memberships(club_id)


@router.put('/clubs/{club_id}/members/{user_id}/role', response_model=Membership)
def update_member_role(
    club_id: str,
    user_id: str,
    data: UpdateMemberRoleRequest,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    get_managed_club(storage, club_id, current_user, 'Only club leaders and admins can change member roles')

    membership = storage.update_membership_role(user_id, club_id, data.role)
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Membership not found')
    return membership


@router.get('/user/memberships', response_model=list[MembershipWithClub])
def list_my_memberships(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return storage.list_user_memberships(current_user.id)
