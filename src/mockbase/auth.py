"""Single-session auth state and the auth client built on top of it."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal
from urllib.parse import urlencode

from mockbase.config import MockbaseConfig
from mockbase.errors import bad_request
from mockbase.types import APIResponse, Session, User

logger = logging.getLogger(__name__)

AuthEvent = Literal[
    "INITIAL_SESSION", "SIGNED_IN", "SIGNED_OUT", "TOKEN_REFRESHED", "USER_UPDATED"
]
AuthListener = Callable[[str, Session | None], None]


@dataclass
class AuthSubscription:
    """Handle returned by :meth:`AuthState.add_listener`."""

    id: int
    _state: AuthState = field(repr=False)

    def unsubscribe(self) -> None:
        self._state.remove_listener(self.id)


class AuthState:
    """Holds at most one signed-in identity and notifies listeners synchronously."""

    def __init__(self) -> None:
        self.user: User | None = None
        self.session: Session | None = None
        self._listeners: dict[int, AuthListener] = {}
        self._next_id = 1

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def set_user(self, user: User, session: Session) -> None:
        self.user = user
        self.session = session
        logger.debug("signed in user=%s", user.id)
        self.notify_listeners("SIGNED_IN", session)

    def clear_user(self) -> None:
        self.user = None
        self.session = None
        logger.debug("signed out")
        self.notify_listeners("SIGNED_OUT", None)

    def add_listener(self, callback: AuthListener) -> AuthSubscription:
        """Register ``callback`` and replay the current state to it once."""
        sub_id = self._next_id
        self._next_id += 1
        self._listeners[sub_id] = callback
        if self.session is not None:
            callback("SIGNED_IN", self.session)
        else:
            callback("SIGNED_OUT", None)
        return AuthSubscription(id=sub_id, _state=self)

    def remove_listener(self, sub_id: int) -> None:
        self._listeners.pop(sub_id, None)

    def notify_listeners(self, event: str, session: Session | None) -> None:
        # Snapshot so listeners may unsubscribe while being notified.
        for callback in list(self._listeners.values()):
            callback(event, session)

    def reset(self) -> None:
        self.user = None
        self.session = None
        self._listeners.clear()


def build_session(user: User, *, ttl_s: int = 3600) -> Session:
    """Fabricate a bearer session for ``user``."""
    return Session(
        access_token="mock-access-token",
        refresh_token="mock-refresh-token",
        expires_in=ttl_s,
        expires_at=int(time.time()) + ttl_s,
        token_type="bearer",
        user=user,
    )


class AuthClient:
    """``client.auth``: session lifecycle over an :class:`AuthState`.

    Sign-in methods do not authenticate anybody; they record the request so
    tests can assert on it. Use :func:`mockbase.testing.mock_user_login` to
    establish a session.
    """

    def __init__(self, state: AuthState, config: MockbaseConfig) -> None:
        self._state = state
        self._config = config
        self.otp_requests: list[dict[str, Any]] = []
        self.oauth_requests: list[dict[str, Any]] = []

    def get_user(self) -> APIResponse[dict[str, Any]]:
        return APIResponse(data={"user": self._state.user})

    def get_session(self) -> APIResponse[dict[str, Any]]:
        return APIResponse(data={"session": self._state.session})

    def sign_in_with_otp(self, credentials: dict[str, Any]) -> APIResponse[dict[str, Any]]:
        email = credentials.get("email")
        if not email:
            return APIResponse(error=bad_request("An email address is required"))
        self.otp_requests.append(
            {"email": email, "options": dict(credentials.get("options") or {})}
        )
        logger.debug("otp requested for %s", email)
        return APIResponse(data={})

    def sign_in_with_oauth(self, credentials: dict[str, Any]) -> APIResponse[dict[str, Any]]:
        provider = credentials.get("provider")
        if provider not in self._config.oauth_providers:
            return APIResponse(error=bad_request(f"Unsupported provider: {provider}"))
        options = dict(credentials.get("options") or {})
        self.oauth_requests.append({"provider": provider, "options": options})

        params = {"provider": provider}
        if options.get("redirect_to") or options.get("redirectTo"):
            params["redirect_to"] = options.get("redirect_to") or options["redirectTo"]
        url = f"{self._config.base_url}/auth/v1/authorize?{urlencode(params)}"
        return APIResponse(data={"provider": provider, "url": url})

    def sign_out(self) -> APIResponse[None]:
        self._state.clear_user()
        return APIResponse()

    def on_auth_state_change(self, callback: AuthListener) -> APIResponse[dict[str, Any]]:
        subscription = self._state.add_listener(callback)
        return APIResponse(data={"subscription": subscription})

    def reset(self) -> None:
        self.otp_requests.clear()
        self.oauth_requests.clear()
