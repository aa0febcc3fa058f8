import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from clubsphere.routes.club_routes import (
    CreateClubRequest,
    create_club,
    delete_club,
    get_club,
    list_clubs,
    update_club,
)
from clubsphere.storage.records import ClubCategory, ClubUpdate, MembershipRole, NewMembership, UserRole


def _club_request(**overrides) -> CreateClubRequest:
    fields = {
        'name': 'Programming Club',
        'description': 'Learn coding and build projects.',
        'category': ClubCategory.technology,
    }
    fields.update(overrides)
    return CreateClubRequest(**fields)


def test_create_club_request_normalizes_fields() -> None:
    request = _club_request(name='  Chess Club ', meeting_time='   ', meeting_location=' Room 4 ')

    assert request.name == 'Chess Club'
    assert request.meeting_time is None
    assert request.meeting_location == 'Room 4'


def test_create_club_request_rejects_blank_name() -> None:
    with pytest.raises(ValidationError):
        _club_request(name='   ')


def test_create_club_request_rejects_unknown_category() -> None:
    with pytest.raises(ValidationError):
        _club_request(category='Cooking')


def test_create_club_rejects_students(storage, make_user) -> None:
    student = make_user('student')

    with pytest.raises(HTTPException) as exception_info:
        create_club(data=_club_request(), storage=storage, current_user=student)

    assert exception_info.value.status_code == 403
    assert exception_info.value.detail == 'Only leaders and admins can create clubs'


@pytest.mark.parametrize('role', [UserRole.leader, UserRole.admin])
def test_create_club_makes_creator_the_leader(storage, make_user, role: UserRole) -> None:
    creator = make_user('creator', role=role)

    club = create_club(data=_club_request(), storage=storage, current_user=creator)

    assert club.leader_id == creator.id
    assert storage.get_membership(creator.id, club.id).role == MembershipRole.leader


def test_list_clubs_prefers_search_over_category(storage, make_club) -> None:
    art = make_club(name='Art Society', category=ClubCategory.arts)
    make_club(name='Soccer Team', category=ClubCategory.sports)

    views = list_clubs(category=ClubCategory.sports, search=' art ', storage=storage, viewer=None)

    assert [view.id for view in views] == [art.id]


def test_list_clubs_filters_by_category(storage, make_club) -> None:
    make_club(name='Art Society', category=ClubCategory.arts)
    soccer = make_club(name='Soccer Team', category=ClubCategory.sports)

    views = list_clubs(category=ClubCategory.sports, search=None, storage=storage, viewer=None)

    assert [view.id for view in views] == [soccer.id]


def test_list_clubs_fills_viewer_fields(storage, make_user, make_club) -> None:
    student = make_user('student')
    club = make_club()
    storage.create_membership(NewMembership(user_id=student.id, club_id=club.id))

    [view] = list_clubs(category=None, search=None, storage=storage, viewer=student)

    assert view.is_member is True
    assert view.user_role == MembershipRole.member


def test_get_club_returns_not_found(storage) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_club(club_id='missing', storage=storage, viewer=None)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Club not found'


def test_update_club_rejects_non_leader(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    other_leader = make_user('other', role=UserRole.leader)
    club = make_club(leader_id=leader.id)

    with pytest.raises(HTTPException) as exception_info:
        update_club(club_id=club.id, updates=ClubUpdate(name='Hijacked'), storage=storage, current_user=other_leader)

    assert exception_info.value.status_code == 403
    assert exception_info.value.detail == 'Only club leaders and admins can edit clubs'
    assert storage.get_club(club.id).name == club.name


def test_update_club_allows_leader_membership_holder(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    co_leader = make_user('coleader')
    club = make_club(leader_id=leader.id)
    storage.create_membership(NewMembership(user_id=co_leader.id, club_id=club.id, role=MembershipRole.leader))

    updated = update_club(
        club_id=club.id,
        updates=ClubUpdate(meeting_location='Gym'),
        storage=storage,
        current_user=co_leader,
    )

    assert updated.meeting_location == 'Gym'


def test_update_club_allows_admin(storage, make_user, make_club) -> None:
    admin = make_user('admin', role=UserRole.admin)
    club = make_club()

    updated = update_club(club_id=club.id, updates=ClubUpdate(name='Renamed'), storage=storage, current_user=admin)

    assert updated.name == 'Renamed'


def test_update_club_rejects_unknown_leader(storage, make_user, make_club) -> None:
    admin = make_user('admin', role=UserRole.admin)
    club = make_club()

    with pytest.raises(HTTPException) as exception_info:
        update_club(club_id=club.id, updates=ClubUpdate(leader_id='ghost'), storage=storage, current_user=admin)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Leader not found'


def test_update_club_returns_not_found(storage, make_user) -> None:
    admin = make_user('admin', role=UserRole.admin)

    with pytest.raises(HTTPException) as exception_info:
        update_club(club_id='missing', updates=ClubUpdate(name='x'), storage=storage, current_user=admin)

    assert exception_info.value.status_code == 404


def test_delete_club_soft_deletes_for_leader(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    club = make_club(leader_id=leader.id)

    delete_club(club_id=club.id, storage=storage, current_user=leader)

    assert storage.get_club(club.id).is_active is False
    assert list_clubs(category=None, search=None, storage=storage, viewer=None) == []
