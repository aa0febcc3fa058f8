def test_create_and_get_session(sessions) -> None:
    session = sessions.create('user-1')

    fetched = sessions.get(session.session_id)

    assert fetched == session
    assert fetched.user_id == 'user-1'


def test_session_ids_are_unique(sessions) -> None:
    ids = {sessions.create('user-1').session_id for _ in range(20)}

    assert len(ids) == 20


def test_get_unknown_session_returns_none(sessions) -> None:
    assert sessions.get('nope') is None


def test_expired_session_is_not_returned(sessions, session_clock) -> None:
    session = sessions.create('user-1')

    session_clock.advance(601)

    assert sessions.get(session.session_id) is None
    assert len(sessions) == 0


def test_delete_session(sessions) -> None:
    session = sessions.create('user-1')

    assert sessions.delete(session.session_id) is True
    assert sessions.get(session.session_id) is None
    assert sessions.delete(session.session_id) is False


def test_expired_sessions_are_pruned_after_check_period(sessions, session_clock) -> None:
    old = sessions.create('user-1')
    session_clock.advance(590)
    fresh = sessions.create('user-2')
    assert len(sessions) == 2

    session_clock.advance(70)
    sessions.get(fresh.session_id)

    assert len(sessions) == 1
    assert sessions.get(old.session_id) is None
    assert sessions.get(fresh.session_id) is not None


def test_create_sweeps_expired_sessions(sessions, session_clock) -> None:
    sessions.create('user-1')
    sessions.create('user-2')
    session_clock.advance(601)
    sessions.create('user-3')

    assert len(sessions) == 1
    assert sessions.prune() == 0
