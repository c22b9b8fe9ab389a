"""
Location Providers

Resolve the user's current coordinates. The dashboard uses a fixed location
(typed in or picked on the map) or an IP-based lookup.
API Documentation: https://ip-api.com/docs/api:json
"""

import requests
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional
import logging
import os

from .exceptions import LocationError, LocationTimeout, LocationUnavailable, PermissionDenied

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class Coordinates(NamedTuple):
    latitude: float
    longitude: float

    def __str__(self):
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


class LocationProvider(ABC):
    """Source of the user's current location"""

    @abstractmethod
    def get_current_location(self) -> Coordinates:
        """
        Returns:
            Current coordinates

        Raises:
            PermissionDenied, LocationUnavailable or LocationTimeout
        """


class StaticLocationProvider(LocationProvider):
    """Fixed coordinates, e.g. entered in a form"""

    def __init__(self, latitude: float, longitude: float, allowed: bool = True):
        self.coordinates = Coordinates(latitude, longitude)
        self.allowed = allowed

    def get_current_location(self) -> Coordinates:
        if not self.allowed:
            raise PermissionDenied("Location sharing was declined")
        return self.coordinates


class IPGeolocationConnector(LocationProvider):
    """Approximate location from the caller's public IP address"""

    BASE_URL = "http://ip-api.com/json/"

    def __init__(self, base_url: Optional[str] = None, timeout: float = 5):
        self.base_url = base_url or os.getenv("IP_GEOLOCATION_URL", self.BASE_URL)
        self.timeout = timeout
        self.session = requests.Session()

    def get_current_location(self) -> Coordinates:
        try:
            logger.info("Looking up location from IP address")
            response = self.session.get(
                self.base_url,
                params={"fields": "status,message,lat,lon"},
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            logger.error(f"Location lookup timed out: {e}")
            raise LocationTimeout("Location lookup timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error looking up location: {e}")
            raise LocationUnavailable(f"Location lookup failed: {e}") from e
        except ValueError as e:
            logger.error(f"Location lookup returned malformed JSON: {e}")
            raise LocationUnavailable("Location lookup returned malformed JSON") from e

        if not isinstance(data, dict) or data.get("status") != "success":
            message = data.get("message", "unknown error") if isinstance(data, dict) else "unexpected payload"
            logger.warning(f"Location lookup failed: {message}")
            raise LocationUnavailable(f"Location lookup failed: {message}")

        try:
            coordinates = Coordinates(float(data["lat"]), float(data["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable("Location lookup returned no coordinates") from e

        logger.info(f"Resolved location {coordinates}")
        return coordinates


class CachedLocation:
    """
    Ask a provider for the location at most once

    Both a successful result and a failure are remembered, so the user is
    not prompted again within the same session. Call reset() to allow a
    fresh attempt.
    """

    def __init__(self, provider: LocationProvider):
        self.provider = provider
        self._fetched = False
        self._coordinates: Optional[Coordinates] = None
        self._error: Optional[LocationError] = None

    @property
    def fetched(self) -> bool:
        return self._fetched

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self._coordinates

    def get(self) -> Coordinates:
        if not self._fetched:
            self._fetched = True
            try:
                self._coordinates = self.provider.get_current_location()
            except LocationError as e:
                self._error = e
        if self._error is not None:
            raise self._error
        return self._coordinates

    def reset(self):
        self._fetched = False
        self._coordinates = None
        self._error = None
