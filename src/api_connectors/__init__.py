"""
API Connectors for Community Fire Watch

This package contains connectors for the external services the app relies on:
- OpenWeather: Current weather conditions
- IP geolocation: Approximate user location
- Supabase Auth: User accounts and sessions
"""

from .exceptions import (
    AuthProviderError,
    LocationError,
    LocationTimeout,
    LocationUnavailable,
    PermissionDenied,
    WeatherFetchError,
)
from .location_connector import (
    CachedLocation,
    Coordinates,
    IPGeolocationConnector,
    LocationProvider,
    StaticLocationProvider,
)
from .openweather_connector import OpenWeatherConnector, parse_weather_payload
from .supabase_auth_connector import SupabaseAuthConnector

__all__ = [
    "OpenWeatherConnector",
    "parse_weather_payload",
    "IPGeolocationConnector",
    "StaticLocationProvider",
    "LocationProvider",
    "CachedLocation",
    "Coordinates",
    "SupabaseAuthConnector",
    "WeatherFetchError",
    "LocationError",
    "PermissionDenied",
    "LocationUnavailable",
    "LocationTimeout",
    "AuthProviderError",
]
