"""
Test suite for AuthSession
"""

import pytest

from incident_reporting import AuthSession, SessionEvent, SignupResult, SignupValidationError, User


class TestLogin:

    def test_login_success_sets_user(self, fake_auth):
        session = AuthSession(fake_auth)

        assert session.login("ranger@example.com", "correct-horse") is True
        assert session.is_authenticated
        assert session.user == User(id="user-1", email="ranger@example.com", name="Forest Ranger")
        assert session.access_token == "token-1"
        assert not session.loading

    def test_login_failure_returns_false(self, fake_auth):
        session = AuthSession(fake_auth)

        assert session.login("ranger@example.com", "wrong") is False
        assert not session.is_authenticated

    def test_logout_clears_user(self, fake_auth):
        session = AuthSession(fake_auth)
        session.login("ranger@example.com", "correct-horse")

        session.logout()

        assert session.user is None
        assert session.access_token is None
        assert fake_auth.signed_out == ["token-1"]


class TestSignup:

    def test_signup_signs_in(self, fake_auth):
        session = AuthSession(fake_auth)

        result = session.signup("new@example.com", "secret1", "New Person", confirm_password="secret1")

        assert result is SignupResult.SIGNED_UP
        assert session.user.name == "New Person"
        assert fake_auth.signups == [("new@example.com", "New Person")]

    def test_signup_requires_confirmation(self):
        from conftest import FakeAuthConnector
        session = AuthSession(FakeAuthConnector(confirm_email=True))

        result = session.signup("new@example.com", "secret1", "New Person")

        assert result is SignupResult.CONFIRMATION_REQUIRED
        assert not session.is_authenticated

    @pytest.mark.parametrize("email, password, name, confirm, message", [
        ("new@example.com", "secret1", "New", "secret2", "Passwords must match"),
        ("new@example.com", "abc", "New", "abc", "at least 6 characters"),
        ("not-an-email", "secret1", "New", None, "valid email"),
        ("new@example.com", "secret1", "  ", None, "Name is required"),
    ])
    def test_validation_before_provider_call(self, fake_auth, email, password, name, confirm, message):
        session = AuthSession(fake_auth)

        with pytest.raises(SignupValidationError, match=message):
            session.signup(email, password, name, confirm_password=confirm)
        assert fake_auth.signups == []


class TestRestore:

    def test_restore_valid_token(self, fake_auth):
        session = AuthSession(fake_auth)
        assert session.loading

        user = session.restore("token-1")

        assert user.id == "user-1"
        assert not session.loading

    def test_restore_invalid_token_clears(self, fake_auth):
        session = AuthSession(fake_auth)

        assert session.restore("expired") is None
        assert not session.is_authenticated
        assert not session.loading


class TestSubscriptions:

    def test_listeners_notified(self, fake_auth):
        session = AuthSession(fake_auth)
        events = []
        session.subscribe(lambda event, user: events.append((event, user.id if user else None)))

        session.login("ranger@example.com", "correct-horse")
        session.logout()

        assert events == [(SessionEvent.SIGNED_IN, "user-1"), (SessionEvent.SIGNED_OUT, None)]

    def test_unsubscribe(self, fake_auth):
        session = AuthSession(fake_auth)
        events = []
        unsubscribe = session.subscribe(lambda event, user: events.append(event))

        unsubscribe()
        session.login("ranger@example.com", "correct-horse")

        assert events == []

    def test_failing_listener_does_not_block_others(self, fake_auth):
        session = AuthSession(fake_auth)
        events = []

        def broken(event, user):
            raise RuntimeError("listener bug")

        session.subscribe(broken)
        session.subscribe(lambda event, user: events.append(event))

        session.login("ranger@example.com", "correct-horse")

        assert events == [SessionEvent.SIGNED_IN]


class TestUser:

    def test_name_falls_back_to_email(self):
        user = User.from_provider({"id": "u9", "email": "sam.smith@example.com", "user_metadata": {}})
        assert user.name == "sam.smith"
