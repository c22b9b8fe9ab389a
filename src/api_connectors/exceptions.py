"""
Errors raised by the external service connectors

Callers catch these and show an "unavailable" state; connectors never
return a default value in place of a failed fetch.
"""

from typing import Optional


class WeatherFetchError(Exception):
    """The weather provider call failed or returned an unusable payload"""

    CONFIGURATION = "configuration"
    NETWORK = "network"
    HTTP = "http"
    MALFORMED = "malformed"
    MISSING_FIELD = "missing_field"

    def __init__(
        self,
        message: str,
        reason: str,
        status_code: Optional[int] = None,
        field: Optional[str] = None
    ):
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code
        self.field = field


class LocationError(Exception):
    """The current location could not be determined"""


class PermissionDenied(LocationError):
    """The user declined to share their location"""


class LocationUnavailable(LocationError):
    """No location could be obtained from the provider"""


class LocationTimeout(LocationError):
    """The location request took too long"""


class AuthProviderError(Exception):
    """The identity provider rejected a request or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
