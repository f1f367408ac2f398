import json
from datetime import datetime, timedelta, timezone

import pytest

from blog_portal.core.session_service import SessionService
from blog_portal.models import Role
from blog_portal.storage.session_storage import SessionStorage


@pytest.fixture
def session(session_storage):
    return SessionService(storage=session_storage)


def test_login_with_synthesized_user(session, session_storage, make_token, qtbot):
    token = make_token(userId=1)
    with qtbot.waitSignal(session.session_changed, timeout=1000) as blocker:
        user = session.login(token)
    assert user is not None
    assert blocker.args[0] == user
    assert user.role is Role.ADMIN
    assert user.username == "myadmin"
    assert session.is_admin() and not session.is_user()
    assert session_storage.load_token() == token
    stored, corrupt = session_storage.load_user_data()
    assert not corrupt and stored["role"] == "Admin"


def test_login_uses_supplied_role_and_username(session, make_token):
    user = session.login(make_token(userId=1), role="User", username="alice")
    assert user.role is Role.USER
    assert user.username == "alice"
    assert session.has_role("User")


def test_login_default_username_for_user(session, make_token):
    user = session.login(make_token(userId=17))
    assert user.username == "testuser"
    assert user.id == "17"


def test_login_with_full_claims_record(session, make_token):
    user = session.login(make_token(id="u-9", username="bob", role="User", email="bob@x.io"))
    assert (user.id, user.username, user.role, user.email) == ("u-9", "bob", Role.USER, "bob@x.io")


def test_login_fails_silently_on_bad_token(session, session_storage):
    assert session.login("not-a-token") is None
    assert session.current() is None
    assert session_storage.load_token() is None


def test_login_without_identity_is_ignored(session, make_token):
    assert session.login(make_token(name="ghost")) is None
    assert session.login(make_token(id=1)) is None
    assert not session.is_authenticated


def test_logout_clears_everything(session, session_storage, make_token, qtbot):
    session.login(make_token(userId=3))
    with qtbot.waitSignal(session.logged_out, timeout=1000):
        session.logout()
    assert session.current() is None
    assert session.token is None
    assert session.cookie() is None
    assert session_storage.load_token() is None
    assert session_storage.load_user_data() == (None, False)


def test_restore_trusts_stored_user(session_storage, make_token):
    session_storage.save(make_token(userId=99), {"id": "5", "username": "carol", "role": "Admin"})
    user = SessionService(session_storage).restore()
    assert user.username == "carol"
    assert user.role is Role.ADMIN


def test_restore_from_token_only(qsettings, make_token):
    qsettings.setValue(SessionStorage.TOKEN_KEY, make_token(userId=1))
    session = SessionService(SessionStorage(qsettings))
    user = session.restore()
    assert user.role is Role.ADMIN
    assert session.restored


def test_restore_with_undecodable_token_clears_it(qsettings):
    qsettings.setValue(SessionStorage.TOKEN_KEY, "broken")
    storage = SessionStorage(qsettings)
    assert SessionService(storage).restore() is None
    assert storage.load_token() is None


def test_restore_with_corrupt_user_clears_session(qsettings, make_token):
    qsettings.setValue(SessionStorage.TOKEN_KEY, make_token(userId=1))
    qsettings.setValue(SessionStorage.USER_KEY, "{not json")
    storage = SessionStorage(qsettings)
    assert SessionService(storage).restore() is None
    assert storage.load_token() is None


def test_cookie_is_derived_from_storage(session, make_token):
    token = make_token(userId=2)
    session.login(token)
    cookie = session.cookie()
    assert cookie.name == "token"
    assert cookie.value == token
    assert cookie.path == "/"
    assert cookie.max_age == 7 * 24 * 60 * 60


def test_stored_user_json_is_plain_dict(session, qsettings, make_token):
    session.login(make_token(userId=4))
    data = json.loads(qsettings.value(SessionStorage.USER_KEY))
    assert data == {"id": "4", "username": "testuser", "role": "User", "email": ""}


# ---- 7 天过期 ----
def _backdate(qsettings, days):
    issued_at = datetime.now(timezone.utc) - timedelta(days=days)
    qsettings.setValue(SessionStorage.ISSUED_AT_KEY, issued_at.isoformat())


def test_cookie_expires_after_seven_days(session_storage, qsettings, make_token):
    session_storage.save(make_token(userId=1), {"id": "1", "username": "myadmin", "role": "Admin"})
    cookie = session_storage.cookie()
    assert cookie.expires_at - cookie.issued_at == timedelta(days=7)
    assert not session_storage.is_expired()

    _backdate(qsettings, 6)
    assert session_storage.cookie() is not None
    _backdate(qsettings, 8)
    assert session_storage.is_expired()
    assert session_storage.cookie() is None


def test_token_without_issue_time_never_expires(qsettings, make_token):
    qsettings.setValue(SessionStorage.TOKEN_KEY, make_token(userId=2))
    storage = SessionStorage(qsettings)
    assert not storage.is_expired()
    assert storage.cookie() is not None


def test_restore_drops_expired_session(session_storage, qsettings, make_token, qtbot):
    SessionService(session_storage).login(make_token(userId=1))
    _backdate(qsettings, 8)

    session = SessionService(session_storage)
    with qtbot.waitSignal(session.session_changed, timeout=1000) as blocker:
        assert session.restore() is None
    assert blocker.args == [None]
    assert not session.is_admin()
    assert session.cookie() is None
    assert session_storage.load_token() is None
    assert session_storage.load_user_data() == (None, False)


def test_session_expiring_while_running_is_cleared(session, qsettings, make_token, qtbot):
    session.login(make_token(userId=1))
    assert session.is_admin()
    _backdate(qsettings, 8)
    with qtbot.waitSignal(session.session_changed, timeout=1000) as blocker:
        assert session.cookie() is None
    assert blocker.args == [None]
    assert session.current() is None
    assert not session.is_admin()
