"""Client-side authentication session.

A ``Session`` owns the bearer token held in the local store and the signed-in
user held in the query cache. Create one at start-up, hand it to the
components that need it, and call ``sign_out`` to tear everything down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .api import ApiClient, ApiError
from .local_store import TOKEN_KEY, LocalStore
from .query_cache import QueryCache

logger = logging.getLogger(__name__)

ME_KEY = "/api/auth/me"


@dataclass
class SignUpData:
    email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    role: str

    def to_payload(self) -> dict:
        return {
            "email": self.email,
            "password": self.password,
            "confirmPassword": self.confirm_password,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
        }


@dataclass
class SignInData:
    email: str
    password: str

    def to_payload(self) -> dict:
        return {"email": self.email, "password": self.password}


@dataclass
class AuthResponse:
    user: dict
    token: str
    message: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "AuthResponse":
        if not isinstance(payload, dict) or not payload.get("token"):
            raise ApiError(None, "Malformed authentication response", payload or {})
        return cls(
            user=payload.get("user") or {},
            token=payload["token"],
            message=payload.get("message", ""),
        )


class Session:
    """Authentication state shared by every dashboard component."""

    def __init__(self, api: ApiClient, cache: QueryCache, store: LocalStore):
        self.api = api
        self.cache = cache
        self.store = store
        self.is_signing_in = False
        self.is_signing_up = False

    @property
    def token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    def current_user(self) -> Optional[dict]:
        """Return the signed-in user, asking the server once per cache lifetime.

        Unauthorized responses drop the stored token. Any other failure reads
        as signed out without being cached, so the next call tries again.
        """

        if ME_KEY in self.cache:
            return self.cache.get(ME_KEY)

        if not self.token:
            self.cache.set(ME_KEY, None)
            return None

        try:
            user = self.api.get(ME_KEY)
        except ApiError as exc:
            if exc.is_unauthorized:
                logger.info("Stored token rejected; clearing session")
                self.store.remove(TOKEN_KEY)
                self.cache.set(ME_KEY, None)
            else:
                logger.warning("Session check failed, treating as signed out: %s", exc)
            return None

        self.cache.set(ME_KEY, user)
        return user

    @property
    def is_authenticated(self) -> bool:
        return self.current_user() is not None

    @property
    def role(self) -> Optional[str]:
        user = self.current_user()
        return user.get("role") if user else None

    def _start(self, response: AuthResponse) -> AuthResponse:
        self.store.set(TOKEN_KEY, response.token)
        self.cache.set(ME_KEY, response.user)
        logger.info("Signed in as user %s", response.user.get("id"))
        return response

    def sign_up(self, data: SignUpData) -> AuthResponse:
        """Create an account; errors propagate to the caller untouched."""

        self.is_signing_up = True
        try:
            payload = self.api.post("/api/auth/signup", json=data.to_payload())
        finally:
            self.is_signing_up = False
        return self._start(AuthResponse.from_payload(payload))

    def sign_in(self, data: SignInData) -> AuthResponse:
        self.is_signing_in = True
        try:
            payload = self.api.post("/api/auth/signin", json=data.to_payload())
        finally:
            self.is_signing_in = False
        return self._start(AuthResponse.from_payload(payload))

    def sign_out(self) -> None:
        """Forget the token and every cached resource, not just the user."""

        self.store.remove(TOKEN_KEY)
        self.cache.clear()
        logger.info("Signed out")

    def forgot_password(self, email: str) -> str:
        payload = self.api.post("/api/auth/forgot-password", json={"email": email})
        return (payload or {}).get("message", "")

    def verify_reset_token(self, token: str) -> bool:
        """Return True for a usable token; a 400 means invalid or expired."""

        try:
            payload = self.api.get(f"/api/auth/verify-reset-token/{token}")
        except ApiError as exc:
            if exc.status_code == 400:
                return False
            raise
        return bool((payload or {}).get("valid"))

    def reset_password(self, token: str, new_password: str) -> str:
        payload = self.api.post(
            "/api/auth/reset-password",
            json={"token": token, "newPassword": new_password},
        )
        return (payload or {}).get("message", "")
