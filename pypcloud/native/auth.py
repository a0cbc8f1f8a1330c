"""Session lifecycle for the pCloud API.

A client authenticates in one of two ways:

1. Username and password: ``/userinfo?getauth=1`` returns a session token,
   which is sent as the ``auth`` query parameter and revoked with ``/logout``
   once the last client handle sharing it is released.
2. OAuth access token: sent as ``Authorization: Bearer`` header. There is
   nothing to revoke, the manager is stateless.

State machine:

    UNAUTHENTICATED -> AUTHENTICATING -> ACTIVE -> REVOKING -> REVOKED
    STATELESS (bearer token, never revoked)
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel

from .models import LogoutResponse, UserInfo
from .results import PCloudError, ResultCode, SessionClosedError

if TYPE_CHECKING:
    from typing import Self

logger = logging.getLogger(__name__)

USERINFO_ENDPOINT = "userinfo"
LOGOUT_ENDPOINT = "logout"

# Used by the blocking logout of the garbage collection fallback
REVOKE_TIMEOUT = 10.0


class SessionState(str, Enum):
    """Lifecycle state of a SessionManager."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    ACTIVE = "active"
    REVOKING = "revoking"
    REVOKED = "revoked"
    STATELESS = "stateless"


class Session(BaseModel):
    """A session token and the API endpoint it was pinned to."""

    model_config = {"frozen": True}

    token: str
    endpoint: str


class SessionManager:
    """Owns the credentials shared by a client and all of its clones.

    Each live client handle holds one reference. Releasing the last reference
    of an active session moves it to REVOKING, and the caller that observed
    this is the only one to send the logout request.

    Example:
        >>> manager = SessionManager()
        >>> token = await manager.login(http, host, "me@example.com", "secret")
        >>> manager.activate(Session(token=token, endpoint=host))

    Attributes:
        state: Current lifecycle state.
        session: The active session, if any.
        access_token: The bearer token of a stateless manager.
    """

    def __init__(self) -> None:
        self.state = SessionState.UNAUTHENTICATED
        self.session: Session | None = None
        self.access_token: str | None = None
        self._references = 0
        # Set once the last handle is released, no handle can be added afterwards
        self._released = False
        self._lock = threading.Lock()

    @classmethod
    def stateless(cls, access_token: str) -> Self:
        """Create a manager authenticating every request with a bearer token."""
        manager = cls()
        manager.access_token = access_token
        manager.state = SessionState.STATELESS
        return manager

    @property
    def references(self) -> int:
        """Number of live client handles."""
        with self._lock:
            return self._references

    @property
    def is_closed(self) -> bool:
        return self.state in (SessionState.REVOKING, SessionState.REVOKED)

    def acquire(self) -> None:
        """Register a new client handle.

        Raises:
            SessionClosedError: If the session is being or has been revoked, or
                its last handle has already been released.
        """
        with self._lock:
            if self.is_closed:
                raise SessionClosedError("The session has been revoked")
            if self._released:
                raise SessionClosedError("All client handles have been closed")
            self._references += 1

    def release(self) -> bool:
        """Unregister a client handle.

        Returns:
            True if this was the last handle. An active session is then moved
            to REVOKING and the caller is expected to revoke it.
        """
        with self._lock:
            if self._references == 0:
                return False
            self._references -= 1
            if self._references > 0:
                return False
            self._released = True
            if self.state == SessionState.ACTIVE:
                self.state = SessionState.REVOKING
            return True

    async def login(
        self, http: httpx.AsyncClient, host: str, username: str, password: str
    ) -> str:
        """Exchange username and password for a session token.

        The manager stays AUTHENTICATING until the token is activated.

        Args:
            http: The HTTP client to send the request with.
            host: API host to log in against, e.g. https://api.pcloud.com
            username: Account email.
            password: Account password.

        Returns:
            The session token.

        Raises:
            InvalidOperationError: ACCESS_DENIED if the credentials were rejected.
            httpx.HTTPError: On transport errors.
        """
        if self.state != SessionState.UNAUTHENTICATED:
            raise RuntimeError(f"Cannot log in from state {self.state.value}")
        self.state = SessionState.AUTHENTICATING

        try:
            response = await http.get(
                f"{host}/{USERINFO_ENDPOINT}",
                params={"getauth": 1, "username": username, "password": password},
            )
            response.raise_for_status()
            info = UserInfo.model_validate(response.json())
        except Exception:
            self.state = SessionState.UNAUTHENTICATED
            raise

        if not info.is_ok or not info.auth:
            self.state = SessionState.UNAUTHENTICATED
            logger.debug("Login of %s failed with result %s", username, info.result)
            raise PCloudError.for_code(ResultCode.ACCESS_DENIED)

        logger.debug("Logged in as %s", username)
        return info.auth

    def activate(self, session: Session) -> None:
        """Start using a session token obtained by login()."""
        with self._lock:
            if self.state != SessionState.AUTHENTICATING:
                raise RuntimeError(f"Cannot activate a session from state {self.state.value}")
            self.session = session
            self.state = SessionState.ACTIVE

    def attach_credentials(
        self, params: dict[str, str | int], headers: dict[str, str]
    ) -> None:
        """Add the credentials of the current state to an outgoing request.

        Raises:
            SessionClosedError: If the session is being or has been revoked.
        """
        if self.state == SessionState.ACTIVE and self.session is not None:
            params["auth"] = self.session.token
        elif self.state == SessionState.STATELESS and self.access_token is not None:
            headers["Authorization"] = f"Bearer {self.access_token}"
        elif self.is_closed:
            raise SessionClosedError("The session has been revoked")

    def _logout_request(self) -> tuple[str, dict[str, str]] | None:
        if self.state != SessionState.REVOKING or self.session is None:
            return None
        return f"{self.session.endpoint}/{LOGOUT_ENDPOINT}", {"auth": self.session.token}

    def _finish_revoke(self, response: httpx.Response) -> None:
        response.raise_for_status()
        logout = LogoutResponse.model_validate(response.json())
        if logout.is_ok and logout.auth_deleted:
            logger.debug("Session token revoked")
        else:
            logger.warning(
                "Session token was not revoked (result %s)", int(logout.result)
            )

    async def revoke_async(self, http: httpx.AsyncClient) -> None:
        """Log out a session in REVOKING state. Always ends in REVOKED.

        Failures are logged, never raised: the token expires on its own.
        """
        request = self._logout_request()
        if request is None:
            return
        url, params = request
        try:
            self._finish_revoke(await http.get(url, params=params))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to revoke session token: %s", e)
        finally:
            self.state = SessionState.REVOKED

    def revoke(self) -> None:
        """Blocking variant of revoke_async(), for use outside an event loop."""
        request = self._logout_request()
        if request is None:
            return
        url, params = request
        try:
            with httpx.Client(timeout=REVOKE_TIMEOUT) as http:
                self._finish_revoke(http.get(url, params=params))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to revoke session token: %s", e)
        finally:
            self.state = SessionState.REVOKED
