"""
Authentication Session

Holds the signed-in user for one client and notifies subscribers when the
user signs in or out. A session object is created per client and passed to
whatever needs it; there is no process-wide current user.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional
import logging

from pydantic import BaseModel

from api_connectors.exceptions import AuthProviderError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class User(BaseModel):
    id: str
    email: str
    name: str

    @classmethod
    def from_provider(cls, data: Dict) -> "User":
        """Build a user from the identity provider's user payload"""
        email = data.get("email") or ""
        metadata = data.get("user_metadata") or {}
        return cls(
            id=str(data["id"]),
            email=email,
            name=metadata.get("full_name") or email.split("@")[0],
        )


class SessionEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    USER_UPDATED = "USER_UPDATED"


class SignupResult(str, Enum):
    SIGNED_UP = "signed_up"
    CONFIRMATION_REQUIRED = "confirmation_required"
    FAILED = "failed"


class SignupValidationError(ValueError):
    """Signup form input was rejected before contacting the provider"""


SessionListener = Callable[[SessionEvent, Optional[User]], None]


class AuthSession:
    """Signed-in state for one client"""

    def __init__(self, auth_connector):
        self.auth_connector = auth_connector
        self.user: Optional[User] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.loading = True
        self._listeners: List[SessionListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for session changes

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def restore(self, access_token: Optional[str] = None) -> Optional[User]:
        """
        Load the user for a stored access token

        An expired or rejected token clears the session.
        """
        token = access_token or self.access_token
        try:
            if token:
                data = self.auth_connector.get_user(token)
                self.access_token = token
                self._set_user(User.from_provider(data), SessionEvent.USER_UPDATED)
        except AuthProviderError as e:
            logger.warning(f"Stored session is no longer valid: {e}")
            self._clear()
        finally:
            self.loading = False
        return self.user

    def login(self, email: str, password: str) -> bool:
        try:
            data = self.auth_connector.sign_in_with_password(email, password)
        except AuthProviderError as e:
            logger.error(f"Login error: {e}")
            return False

        self._start_session(data)
        return self.is_authenticated

    def signup(
        self,
        email: str,
        password: str,
        name: str,
        confirm_password: Optional[str] = None
    ) -> SignupResult:
        """
        Create an account

        Raises:
            SignupValidationError: the form input is invalid. The provider is
                not contacted in that case.
        """
        if not email or "@" not in email:
            raise SignupValidationError("A valid email address is required")
        if not name or not name.strip():
            raise SignupValidationError("Name is required")
        if confirm_password is not None and password != confirm_password:
            raise SignupValidationError("Passwords must match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise SignupValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        try:
            data = self.auth_connector.sign_up(email, password, full_name=name.strip())
        except AuthProviderError as e:
            logger.error(f"Signup error: {e}")
            return SignupResult.FAILED

        if data.get("access_token"):
            self._start_session(data)
            return SignupResult.SIGNED_UP

        logger.info(f"Confirmation email sent to {email}")
        return SignupResult.CONFIRMATION_REQUIRED

    def logout(self):
        token = self.access_token
        try:
            if token:
                self.auth_connector.sign_out(token)
        except AuthProviderError as e:
            logger.warning(f"Sign out was not acknowledged by the provider: {e}")
        finally:
            self._clear()

    def _start_session(self, data: Dict):
        self.access_token = data.get("access_token")
        self.refresh_token = data.get("refresh_token")
        self.loading = False
        if data.get("user"):
            self._set_user(User.from_provider(data["user"]), SessionEvent.SIGNED_IN)

    def _set_user(self, user: User, event: SessionEvent):
        self.user = user
        self._notify(event)

    def _clear(self):
        had_user = self.user is not None
        self.user = None
        self.access_token = None
        self.refresh_token = None
        if had_user:
            self._notify(SessionEvent.SIGNED_OUT)

    def _notify(self, event: SessionEvent):
        for listener in list(self._listeners):
            try:
                listener(event, self.user)
            except Exception as e:
                logger.error(f"Session listener failed on {event.value}: {e}")
