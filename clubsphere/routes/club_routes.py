import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator

from clubsphere.auth.dependencies import get_current_user, get_optional_user, get_storage
from clubsphere.auth.permissions import can_create_club, get_managed_club
from clubsphere.storage.base import Storage
from clubsphere.storage.records import Club, ClubCategory, ClubUpdate, NewClub, User
from clubsphere.storage.views import ClubView

router = APIRouter(tags=['clubs'])

logger = logging.getLogger(__name__)

MAX_CLUB_NAME_LENGTH = 100
MAX_CLUB_DESCRIPTION_LENGTH = 2000


def _normalize_optional(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


class CreateClubRequest(BaseModel):
    name: str
    description: str
    category: ClubCategory
    meeting_time: str | None = None
    meeting_location: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Club name is required.')
        if len(normalized) > MAX_CLUB_NAME_LENGTH:
            raise ValueError(f'Club name must be {MAX_CLUB_NAME_LENGTH} characters or fewer.')
        return normalized

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Club description is required.')
        if len(normalized) > MAX_CLUB_DESCRIPTION_LENGTH:
            raise ValueError(f'Club description must be {MAX_CLUB_DESCRIPTION_LENGTH} characters or fewer.')
        return normalized

    @field_validator('meeting_time', 'meeting_location')
    @classmethod
    def validate_meeting_details(cls, value: str | None) -> str | None:
        return _normalize_optional(value)


@router.get('', response_model=list[ClubView])
def list_clubs(
    category: ClubCategory | None = Query(default=None),
    search: str | None = Query(default=None),
    storage: Storage = Depends(get_storage),
    viewer: User | None = Depends(get_optional_user),
):
    viewer_id = viewer.id if viewer else None
    search_text = (search or '').strip()

    if search_text:
        return storage.search_clubs(search_text, viewer_id=viewer_id)
    if category is not None:
        return storage.list_clubs_by_category(category, viewer_id=viewer_id)
    return storage.list_active_clubs(viewer_id=viewer_id)


@router.get('/{club_id}', response_model=ClubView)
def get_club(
    club_id: str,
    storage: Storage = Depends(get_storage),
    viewer: User | None = Depends(get_optional_user),
):
    club = storage.get_club_view(club_id, viewer_id=viewer.id if viewer else None)
    if club is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Club not found')
    return club


@router.post('', response_model=Club, status_code=status.HTTP_201_CREATED)
def create_club(
    data: CreateClubRequest,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    if not can_create_club(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Only leaders and admins can create clubs',
        )

    club = storage.create_club_with_leader(
        NewClub(
            name=data.name,
            description=data.description,
            category=data.category,
            meeting_time=data.meeting_time,
            meeting_location=data.meeting_location,
        ),
        leader_id=current_user.id,
    )
    logger.info('User %s created club %s', current_user.id, club.id)
    return club


@router.put('/{club_id}', response_model=Club)
def update_club(
    club_id: str,
    updates: ClubUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    get_managed_club(storage, club_id, current_user, 'Only club leaders and admins can edit clubs')

    if 'leader_id' in updates.model_fields_set and updates.leader_id is not None:
        if storage.get_user(updates.leader_id) is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Leader not found')

    updated = storage.update_club(club_id, updates)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Club not found')
    return updated


@router.delete('/{club_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_club(
    club_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    get_managed_club(storage, club_id, current_user, 'Only club leaders and admins can delete clubs')
    storage.delete_club(club_id)
    logger.info('User %s deactivated club %s', current_user.id, club_id)
