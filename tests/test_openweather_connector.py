"""
Test suite for the OpenWeather connector

Every failure mode must surface as WeatherFetchError rather than a default
observation.
"""

from unittest.mock import patch

import pytest
import requests

from api_connectors import OpenWeatherConnector, WeatherFetchError, parse_weather_payload
from risk_scoring import UnitSystem

from conftest import make_response


@pytest.fixture
def connector():
    return OpenWeatherConnector(api_key="test-key", base_url="https://weather.test")


class TestFetchWeather:
    """Successful fetches"""

    def test_maps_payload_to_observation(self, connector, openweather_payload):
        with patch.object(connector.session, "get", return_value=make_response(200, openweather_payload)) as mock_get:
            observation = connector.fetch_weather(34.0522, -118.2437, UnitSystem.IMPERIAL)

        assert observation.temperature == 95.0
        assert observation.humidity == 10
        assert observation.wind_speed == 20.0
        assert observation.condition == "Clear"
        assert observation.unit_system is UnitSystem.IMPERIAL
        assert observation.latitude == 34.0522
        assert observation.longitude == -118.2437
        assert observation.observed_at is not None

        args, kwargs = mock_get.call_args
        assert args[0] == "https://weather.test/data/2.5/weather"
        assert kwargs["params"] == {
            "lat": 34.0522,
            "lon": -118.2437,
            "appid": "test-key",
            "units": "imperial",
        }
        assert kwargs["timeout"] == 10

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENWEATHER_API_KEY", "env-key")
        assert OpenWeatherConnector().api_key == "env-key"


class TestFetchWeatherFailures:
    """Failures are distinguishable WeatherFetchErrors"""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
        connector = OpenWeatherConnector()

        with patch.object(connector.session, "get") as mock_get:
            with pytest.raises(WeatherFetchError) as exc_info:
                connector.fetch_weather(10, 10)

        assert exc_info.value.reason == WeatherFetchError.CONFIGURATION
        mock_get.assert_not_called()

    def test_network_error(self, connector):
        with patch.object(connector.session, "get", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(WeatherFetchError) as exc_info:
                connector.fetch_weather(10, 10)

        assert exc_info.value.reason == WeatherFetchError.NETWORK
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_timeout(self, connector):
        with patch.object(connector.session, "get", side_effect=requests.exceptions.Timeout("slow")):
            with pytest.raises(WeatherFetchError) as exc_info:
                connector.fetch_weather(10, 10)

        assert exc_info.value.reason == WeatherFetchError.NETWORK

    @pytest.mark.parametrize("status_code", [401, 404, 429, 500])
    def test_non_success_status(self, connector, status_code):
        with patch.object(connector.session, "get", return_value=make_response(status_code, {"cod": status_code})):
            with pytest.raises(WeatherFetchError) as exc_info:
                connector.fetch_weather(10, 10)

        assert exc_info.value.reason == WeatherFetchError.HTTP
        assert exc_info.value.status_code == status_code

    def test_malformed_json(self, connector):
        with patch.object(connector.session, "get", return_value=make_response(200, json_error=True)):
            with pytest.raises(WeatherFetchError) as exc_info:
                connector.fetch_weather(10, 10)

        assert exc_info.value.reason == WeatherFetchError.MALFORMED

    @pytest.mark.parametrize("path", ["main.temp", "main.humidity", "wind.speed", "weather[0].main"])
    def test_missing_field(self, connector, openweather_payload, path):
        if path == "weather[0].main":
            openweather_payload["weather"] = []
        else:
            section, key = path.split(".")
            del openweather_payload[section][key]

        with patch.object(connector.session, "get", return_value=make_response(200, openweather_payload)):
            with pytest.raises(WeatherFetchError) as exc_info:
                connector.fetch_weather(10, 10)

        assert exc_info.value.reason == WeatherFetchError.MISSING_FIELD
        assert exc_info.value.field == path

    def test_invalid_coordinates(self, connector):
        with pytest.raises(ValueError):
            connector.fetch_weather(91, 0)
        with pytest.raises(ValueError):
            connector.fetch_weather(0, -181)


class TestParseWeatherPayload:
    """Payload validation"""

    def test_non_numeric_field(self, openweather_payload):
        openweather_payload["main"]["temp"] = "hot"
        with pytest.raises(WeatherFetchError) as exc_info:
            parse_weather_payload(openweather_payload)
        assert exc_info.value.field == "main.temp"

    def test_missing_section(self, openweather_payload):
        del openweather_payload["wind"]
        with pytest.raises(WeatherFetchError) as exc_info:
            parse_weather_payload(openweather_payload)
        assert exc_info.value.field == "wind.speed"

    def test_payload_not_an_object(self):
        with pytest.raises(WeatherFetchError) as exc_info:
            parse_weather_payload(["not", "a", "dict"])
        assert exc_info.value.reason == WeatherFetchError.MALFORMED

    def test_integer_readings_accepted(self, openweather_payload):
        openweather_payload["main"]["temp"] = 21
        openweather_payload["wind"]["speed"] = 0
        observation = parse_weather_payload(openweather_payload, UnitSystem.METRIC)
        assert observation.temperature == 21.0
        assert observation.wind_speed == 0.0
        assert observation.unit_system is UnitSystem.METRIC
