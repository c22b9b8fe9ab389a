"""
Shared fixtures for the Community Fire Watch test suite
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from api_connectors.exceptions import AuthProviderError, WeatherFetchError
from risk_scoring import UnitSystem, WeatherObservation


def make_response(status_code=200, payload=None, json_error=False, content=b"{}"):
    """Mock requests.Response with the given status and JSON body"""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.content = content
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def openweather_payload():
    """Current weather response in imperial units"""
    return {
        "coord": {"lon": -118.2437, "lat": 34.0522},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky"}],
        "main": {"temp": 95.0, "feels_like": 92.1, "humidity": 10, "pressure": 1012},
        "wind": {"speed": 20.0, "deg": 250},
        "dt": 1760000000,
        "name": "Los Angeles",
    }


class FakeWeatherConnector:
    """Returns a fixed observation, or raises a fixed error"""

    def __init__(self, observation=None, error=None):
        self.observation = observation
        self.error = error
        self.calls = []

    def fetch_weather(self, latitude, longitude, units=UnitSystem.METRIC):
        self.calls.append((latitude, longitude, UnitSystem(units)))
        if self.error is not None:
            raise self.error
        return self.observation.model_copy(update={"latitude": latitude, "longitude": longitude})


class FakeAuthConnector:
    """In-memory identity provider with one registered account"""

    USER = {
        "id": "user-1",
        "email": "ranger@example.com",
        "user_metadata": {"full_name": "Forest Ranger"},
    }
    NEIGHBOUR = {
        "id": "user-3",
        "email": "neighbour@example.com",
        "user_metadata": {},
    }

    def __init__(self, confirm_email=False):
        self.confirm_email = confirm_email
        self.signed_out = []
        self.signups = []

    def sign_in_with_password(self, email, password):
        if email == self.USER["email"] and password == "correct-horse":
            return {"access_token": "token-1", "refresh_token": "refresh-1", "user": self.USER}
        raise AuthProviderError("Invalid login credentials", status_code=400)

    def sign_up(self, email, password, full_name=None):
        self.signups.append((email, full_name))
        user = {"id": "user-2", "email": email, "user_metadata": {"full_name": full_name}}
        if self.confirm_email:
            return user
        return {"access_token": "token-2", "refresh_token": "refresh-2", "user": user}

    def sign_out(self, access_token):
        self.signed_out.append(access_token)

    def get_user(self, access_token):
        if access_token == "token-1":
            return self.USER
        if access_token == "token-neighbour":
            return self.NEIGHBOUR
        raise AuthProviderError("invalid JWT", status_code=401)


@pytest.fixture
def imperial_observation():
    return WeatherObservation(
        temperature=95,
        humidity=10,
        wind_speed=20,
        condition="Clear",
        unit_system=UnitSystem.IMPERIAL,
        observed_at=datetime(2025, 7, 1, 14, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def metric_observation():
    return WeatherObservation(
        temperature=20,
        humidity=100,
        wind_speed=0,
        condition="Rain",
        unit_system=UnitSystem.METRIC,
    )


@pytest.fixture
def fake_weather(imperial_observation):
    return FakeWeatherConnector(observation=imperial_observation)


@pytest.fixture
def failing_weather():
    return FakeWeatherConnector(
        error=WeatherFetchError("Weather payload is missing 'main.temp'", WeatherFetchError.MISSING_FIELD, field="main.temp")
    )


@pytest.fixture
def fake_auth():
    return FakeAuthConnector()
