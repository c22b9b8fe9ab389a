"""
Test suite for the Supabase auth connector
"""

from unittest.mock import patch

import pytest
import requests

from api_connectors import AuthProviderError, SupabaseAuthConnector

from conftest import make_response


@pytest.fixture
def connector():
    return SupabaseAuthConnector(
        url="https://project.supabase.test/",
        anon_key="anon-key",
        redirect_to="https://app.test/dashboard"
    )


class TestSupabaseAuthConnector:

    def test_anon_key_header(self, connector):
        assert connector.session.headers["apikey"] == "anon-key"

    def test_sign_in_with_password(self, connector):
        payload = {"access_token": "abc", "user": {"id": "u1", "email": "a@b.c"}}
        with patch.object(connector.session, "request", return_value=make_response(200, payload)) as mock_request:
            data = connector.sign_in_with_password("a@b.c", "secret1")

        assert data == payload
        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://project.supabase.test/auth/v1/token")
        assert kwargs["params"] == {"grant_type": "password"}
        assert kwargs["json"] == {"email": "a@b.c", "password": "secret1"}
        assert kwargs["headers"] is None

    def test_sign_up_sends_name_and_redirect(self, connector):
        with patch.object(connector.session, "request", return_value=make_response(200, {"id": "u2"})) as mock_request:
            connector.sign_up("new@b.c", "secret1", full_name="New User")

        _, kwargs = mock_request.call_args
        assert kwargs["json"]["data"] == {"full_name": "New User"}
        assert kwargs["params"] == {"redirect_to": "https://app.test/dashboard"}

    def test_get_user_sends_bearer_token(self, connector):
        with patch.object(connector.session, "request", return_value=make_response(200, {"id": "u1"})) as mock_request:
            connector.get_user("token-1")

        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://project.supabase.test/auth/v1/user")
        assert kwargs["headers"] == {"Authorization": "Bearer token-1"}

    def test_sign_out_with_empty_body(self, connector):
        with patch.object(connector.session, "request", return_value=make_response(204, None, content=b"")):
            connector.sign_out("token-1")

    def test_provider_error_message(self, connector):
        payload = {"error": "invalid_grant", "error_description": "Invalid login credentials"}
        with patch.object(connector.session, "request", return_value=make_response(400, payload)):
            with pytest.raises(AuthProviderError, match="Invalid login credentials") as exc_info:
                connector.sign_in_with_password("a@b.c", "wrong")

        assert exc_info.value.status_code == 400

    def test_unreachable_provider(self, connector):
        with patch.object(connector.session, "request", side_effect=requests.exceptions.ConnectionError()):
            with pytest.raises(AuthProviderError):
                connector.get_user("token-1")

    def test_unconfigured(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
        connector = SupabaseAuthConnector()

        with pytest.raises(AuthProviderError, match="must be configured"):
            connector.sign_in_with_password("a@b.c", "secret1")
