from clubsphere.storage.records import (
    ClubCategory,
    MembershipRole,
    NewAnnouncement,
    NewClub,
    NewMembership,
    UserRole,
)


def _join(storage, user, club, role=MembershipRole.member):
    return storage.create_membership(NewMembership(user_id=user.id, club_id=club.id, role=role))


def test_list_active_clubs_enriches_member_count_and_leader(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    student = make_user('student')
    club = make_club(name='Programming Club', category=ClubCategory.technology, leader_id=leader.id)
    _join(storage, student, club)

    [view] = storage.list_active_clubs()

    assert view.id == club.id
    assert view.member_count == 2
    assert view.leader.id == leader.id
    assert view.is_member is None
    assert view.user_role is None


def test_club_view_without_leader_has_none_leader(storage, make_club) -> None:
    club = make_club()

    view = storage.get_club_view(club.id)

    assert view.leader is None
    assert view.member_count == 0


def test_viewer_membership_fields(storage, make_user, make_club) -> None:
    student = make_user('student')
    outsider = make_user('outsider')
    club = make_club()
    _join(storage, student, club, role=MembershipRole.officer)

    [member_view] = storage.list_active_clubs(viewer_id=student.id)
    [outsider_view] = storage.list_active_clubs(viewer_id=outsider.id)

    assert member_view.is_member is True
    assert member_view.user_role == MembershipRole.officer
    assert outsider_view.is_member is False
    assert outsider_view.user_role is None


def test_list_clubs_by_category_requires_exact_match(storage, make_club) -> None:
    soccer = make_club(name='Soccer Team', category=ClubCategory.sports)
    make_club(name='Debate Club', category=ClubCategory.academic)

    views = storage.list_clubs_by_category(ClubCategory.sports)

    assert [view.id for view in views] == [soccer.id]
    assert storage.list_clubs_by_category('Sports')[0].id == soccer.id
    assert storage.list_clubs_by_category('sports') == []


def test_search_clubs_matches_name_and_category_case_insensitively(storage, make_club) -> None:
    art_society = make_club(
        name='Art Society',
        description='Painting and sculpture.',
        category=ClubCategory.service,
    )
    drama = make_club(name='Drama Club', description='Stage plays.', category=ClubCategory.arts)
    make_club(name='Soccer Team', description='Matches every week.', category=ClubCategory.sports)

    found = {view.id for view in storage.search_clubs('art')}

    assert found == {art_society.id, drama.id}


def test_search_clubs_matches_description(storage, make_club) -> None:
    club = make_club(name='Coders', description='Weekly HACKATHON practice.', category=ClubCategory.technology)

    assert [view.id for view in storage.search_clubs('hackathon')] == [club.id]


def test_soft_deleted_club_leaves_listings_but_keeps_memberships(storage, make_user, make_club) -> None:
    student = make_user('student')
    club = make_club(name='Art Society', category=ClubCategory.arts)
    _join(storage, student, club)

    storage.delete_club(club.id)

    assert storage.list_active_clubs() == []
    assert storage.list_clubs_by_category(ClubCategory.arts) == []
    assert storage.search_clubs('art') == []
    members = storage.list_club_memberships(club.id)
    assert [member.user.id for member in members] == [student.id]


def test_get_club_view_still_resolves_inactive_club(storage, make_club) -> None:
    club = make_club()
    storage.delete_club(club.id)

    view = storage.get_club_view(club.id)

    assert view is not None
    assert view.is_active is False


def test_get_club_view_returns_none_for_unknown_id(storage) -> None:
    assert storage.get_club_view('missing') is None


def test_list_user_memberships_excludes_inactive_clubs(storage, make_user, make_club) -> None:
    student = make_user('student')
    chess = make_club(name='Chess Club')
    choir = make_club(name='Choir', category=ClubCategory.arts)
    _join(storage, student, chess)
    _join(storage, student, choir)

    storage.delete_club(choir.id)

    memberships = storage.list_user_memberships(student.id)
    assert [membership.club.id for membership in memberships] == [chess.id]
    assert memberships[0].club.name == 'Chess Club'
    assert storage.get_membership(student.id, choir.id) is not None


def test_list_club_memberships_attaches_users(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    student = make_user('student')
    club = make_club(leader_id=leader.id)
    _join(storage, student, club)

    members = {member.user.username: member.role for member in storage.list_club_memberships(club.id)}

    assert members == {'leader': MembershipRole.leader, 'student': MembershipRole.member}


def test_list_club_announcements_enriched_and_newest_first(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    club = make_club(leader_id=leader.id)
    first = storage.create_announcement(
        NewAnnouncement(title='First', content='Hello.', club_id=club.id, author_id=leader.id)
    )
    second = storage.create_announcement(
        NewAnnouncement(title='Second', content='Again.', club_id=club.id, author_id=leader.id)
    )

    views = storage.list_club_announcements(club.id)

    assert [view.id for view in views] == [second.id, first.id]
    assert views[1].club.id == club.id
    assert views[1].author.id == leader.id


def test_list_user_announcements_spans_member_clubs_only(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    student = make_user('student')
    chess = make_club(name='Chess Club', leader_id=leader.id)
    choir = make_club(name='Choir', category=ClubCategory.arts, leader_id=leader.id)
    soccer = make_club(name='Soccer Team', category=ClubCategory.sports, leader_id=leader.id)
    _join(storage, student, chess)
    _join(storage, student, choir)

    posts = {}
    for club in (chess, soccer, choir):
        posts[club.id] = storage.create_announcement(
            NewAnnouncement(title=f'{club.name} news', content='Details.', club_id=club.id, author_id=leader.id)
        )

    feed = storage.list_user_announcements(student.id)

    assert [view.id for view in feed] == [posts[choir.id].id, posts[chess.id].id]


def test_list_user_announcements_drops_inactive_clubs(storage, make_user, make_club) -> None:
    leader = make_user('leader', role=UserRole.leader)
    student = make_user('student')
    club = make_club(leader_id=leader.id)
    _join(storage, student, club)
    storage.create_announcement(NewAnnouncement(title='Hi', content='Hi.', club_id=club.id, author_id=leader.id))

    storage.delete_club(club.id)

    assert storage.list_user_announcements(student.id) == []


def test_list_user_announcements_empty_without_memberships(storage, make_user) -> None:
    student = make_user('loner')

    assert storage.list_user_announcements(student.id) == []


def test_get_stats_counts_roles_active_clubs_and_memberships(storage, make_user, make_club) -> None:
    make_user('admin', role=UserRole.admin)
    leader = make_user('leader', role=UserRole.leader)
    student_a = make_user('a')
    make_user('b')
    chess = make_club(name='Chess Club', leader_id=leader.id)
    retired = storage.create_club(NewClub(name='Old Club', description='Gone.', category=ClubCategory.service))
    _join(storage, student_a, chess)
    storage.delete_club(retired.id)

    stats = storage.get_stats()

    assert stats.total_students == 2
    assert stats.total_leaders == 1
    assert stats.active_clubs == 1
    assert stats.total_memberships == 2
