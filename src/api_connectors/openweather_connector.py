"""
OpenWeather API Connector

Fetches current weather conditions from the OpenWeather API.
API Documentation: https://openweathermap.org/current
"""

import math
import requests
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import os

from risk_scoring.models import UnitSystem, WeatherObservation

from .exceptions import WeatherFetchError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class OpenWeatherConnector:
    """Connector for the OpenWeather current weather API"""

    BASE_URL = "https://api.openweathermap.org"
    WEATHER_PATH = "/data/2.5/weather"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 10
    ):
        """
        Initialize OpenWeather connector

        Args:
            api_key: OpenWeather API key. If None, read from OPENWEATHER_API_KEY
            base_url: API host. If None, read from OPENWEATHER_BASE_URL or use
                the public endpoint
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or os.getenv("OPENWEATHER_API_KEY")
        self.base_url = (base_url or os.getenv("OPENWEATHER_BASE_URL") or self.BASE_URL).rstrip("/")
        self.timeout = timeout

        if not self.api_key:
            logger.warning("OPENWEATHER_API_KEY is not set - weather requests will fail. Get a key at: https://openweathermap.org/api")

        self.session = requests.Session()

    def fetch_weather(
        self,
        latitude: float,
        longitude: float,
        units: UnitSystem = UnitSystem.METRIC
    ) -> WeatherObservation:
        """
        Get current weather at a location

        Args:
            latitude: Latitude (-90 to 90)
            longitude: Longitude (-180 to 180)
            units: METRIC for °C and m/s, IMPERIAL for °F and mph

        Returns:
            WeatherObservation in the requested unit system

        Raises:
            ValueError: coordinates are out of range
            WeatherFetchError: the request failed or the payload is unusable
        """
        _validate_coordinates(latitude, longitude)
        units = UnitSystem(units)

        if not self.api_key:
            raise WeatherFetchError("No OpenWeather API key configured", WeatherFetchError.CONFIGURATION)

        url = f"{self.base_url}{self.WEATHER_PATH}"
        params = {
            "lat": latitude,
            "lon": longitude,
            "appid": self.api_key,
            "units": units.value,
        }

        try:
            logger.info(f"Fetching weather for ({latitude:.4f}, {longitude:.4f}) in {units.value} units")
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching weather: {e}")
            raise WeatherFetchError(f"Weather request failed: {e}", WeatherFetchError.NETWORK) from e

        if not response.ok:
            logger.error(f"Weather API returned HTTP {response.status_code}")
            raise WeatherFetchError(
                f"Weather API returned HTTP {response.status_code}",
                WeatherFetchError.HTTP,
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Weather API returned malformed JSON: {e}")
            raise WeatherFetchError("Weather API returned malformed JSON", WeatherFetchError.MALFORMED) from e

        observation = parse_weather_payload(data, units)
        observation = observation.model_copy(update={"latitude": latitude, "longitude": longitude})

        logger.info(
            f"Weather at ({latitude:.4f}, {longitude:.4f}): {observation.temperature}{units.temperature_unit}, "
            f"{observation.humidity}% humidity, wind {observation.wind_speed} {units.wind_speed_unit}, "
            f"{observation.condition}"
        )
        return observation


def parse_weather_payload(data: Any, units: UnitSystem = UnitSystem.METRIC) -> WeatherObservation:
    """
    Extract the fields the risk scorer needs from an OpenWeather response

    Raises:
        WeatherFetchError: a required field is missing or not numeric
    """
    if not isinstance(data, dict):
        raise WeatherFetchError("Weather payload is not a JSON object", WeatherFetchError.MALFORMED)

    main = data.get("main")
    wind = data.get("wind")
    conditions = data.get("weather")

    temperature = _numeric_field(main, "temp", "main.temp")
    humidity = _numeric_field(main, "humidity", "main.humidity")
    wind_speed = _numeric_field(wind, "speed", "wind.speed")

    if not isinstance(conditions, list) or not conditions or not isinstance(conditions[0], dict) \
            or not isinstance(conditions[0].get("main"), str):
        raise WeatherFetchError(
            "Weather payload is missing 'weather[0].main'",
            WeatherFetchError.MISSING_FIELD,
            field="weather[0].main"
        )

    observed_at = None
    if isinstance(data.get("dt"), (int, float)):
        observed_at = datetime.fromtimestamp(data["dt"], tz=timezone.utc)

    return WeatherObservation(
        temperature=temperature,
        humidity=humidity,
        wind_speed=wind_speed,
        condition=conditions[0]["main"],
        unit_system=units,
        observed_at=observed_at,
    )


def _numeric_field(section: Optional[Dict], key: str, path: str) -> float:
    value = section.get(key) if isinstance(section, dict) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise WeatherFetchError(
            f"Weather payload is missing '{path}'",
            WeatherFetchError.MISSING_FIELD,
            field=path
        )
    return float(value)


def _validate_coordinates(latitude: float, longitude: float):
    if not -90 <= latitude <= 90:
        raise ValueError(f"Latitude must be between -90 and 90, got {latitude}")
    if not -180 <= longitude <= 180:
        raise ValueError(f"Longitude must be between -180 and 180, got {longitude}")


if __name__ == "__main__":
    # Test the connector
    print("\n" + "="*60)
    print("OPENWEATHER CONNECTOR TEST")
    print("="*60 + "\n")

    connector = OpenWeatherConnector()

    print("Fetching current weather for Los Angeles, CA...")
    try:
        weather = connector.fetch_weather(34.0522, -118.2437, UnitSystem.IMPERIAL)
        print(f"\n✓ {weather.temperature}°F, {weather.humidity}% humidity, "
              f"wind {weather.wind_speed} mph, {weather.condition}")
    except WeatherFetchError as e:
        print(f"✗ Could not retrieve weather ({e.reason}): {e}")

    print("\n" + "="*60)
    print("TEST COMPLETE")
    print("="*60)
