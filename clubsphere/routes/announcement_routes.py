from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator

from clubsphere.auth.dependencies import get_current_user, get_storage
from clubsphere.auth.permissions import get_managed_club
from clubsphere.storage.base import Storage
from clubsphere.storage.records import Announcement, AnnouncementUpdate, NewAnnouncement, User
from clubsphere.storage.views import AnnouncementView

router = APIRouter(tags=['announcements'])

MAX_ANNOUNCEMENT_TITLE_LENGTH = 200
MAX_ANNOUNCEMENT_CONTENT_LENGTH = 5000


class CreateAnnouncementRequest(BaseModel):
    title: str
    content: str

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Title is required.')
        if len(normalized) > MAX_ANNOUNCEMENT_TITLE_LENGTH:
            raise ValueError(f'Title must be {MAX_ANNOUNCEMENT_TITLE_LENGTH} characters or fewer.')
        return normalized

    @field_validator('content')
    @classmethod
    def validate_content(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Content is required.')
        if len(normalized) > MAX_ANNOUNCEMENT_CONTENT_LENGTH:
            raise ValueError(f'Content must be {MAX_ANNOUNCEMENT_CONTENT_LENGTH} characters or fewer.')
        return normalized


def get_managed_announcement(
    storage: Storage,
    announcement_id: str,
    user: User,
    forbidden_detail: str,
) -> Announcement:
    announcement = storage.get_announcement(announcement_id)
    if announcement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Announcement not found')
    get_managed_club(storage, announcement.club_id, user, forbidden_detail)
    return announcement


@router.get('/announcements', response_model=list[AnnouncementView])
def list_my_announcements(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return storage.list_user_announcements(current_user.id)


@router.get('/clubs/{club_id}/announcements', response_model=list[AnnouncementView])
def list_club_announcements(club_id: str, storage: Storage = Depends(get_storage)):
    return storage.list_club_announcements(club_id)


@router.post(
    '/clubs/{club_id}/announcements',
    response_model=Announcement,
    status_code=status.HTTP_201_CREATED,
)
def create_announcement(
    club_id: str,
    data: CreateAnnouncementRequest,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    get_managed_club(storage, club_id, current_user, 'Only club leaders and admins can create announcements')

    return storage.create_announcement(
        NewAnnouncement(
            title=data.title,
            content=data.content,
            club_id=club_id,
            author_id=current_user.id,
        )
    )


@router.put('/announcements/{announcement_id}', response_model=Announcement)
def update_announcement(
    announcement_id: str,
    updates: AnnouncementUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    get_managed_announcement(
        storage,
        announcement_id,
        current_user,
        'Only club leaders and admins can edit announcements',
    )

    updated = storage.update_announcement(announcement_id, updates)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Announcement not found')
    return updated


@router.delete('/announcements/{announcement_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_announcement(
    announcement_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    get_managed_announcement(
        storage,
        announcement_id,
        current_user,
        'Only club leaders and admins can delete announcements',
    )
    storage.delete_announcement(announcement_id)
