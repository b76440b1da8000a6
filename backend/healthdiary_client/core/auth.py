"""
Health Diary Client — Authentication
=====================================

What:  Login, registration and logout against the API; owns the stored
       token and user.
How:   Results come back as AuthResult instead of exceptions so the login
       and register views can show the message directly.
"""

import json
import logging
from typing import Any, Dict, List, NamedTuple, Optional

from healthdiary_client.core.event_bus import EventBus, Topics
from healthdiary_client.core.http_client import HttpClient
from healthdiary_client.core.storage import SessionStore
from healthdiary_client.exceptions import ApiError, HealthDiaryClientError
from healthdiary_client.models import User

logger = logging.getLogger(__name__)


class AuthResult(NamedTuple):
    success: bool
    error: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None


class Auth:

    def __init__(self, http: HttpClient, session: SessionStore, bus: EventBus):
        self.http = http
        self.session = session
        self.bus = bus

    def get_token(self) -> Optional[str]:
        return self.session.local.get(SessionStore.TOKEN_KEY)

    def get_user(self) -> Optional[User]:
        raw = self.session.local.get(SessionStore.USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate(json.loads(raw))
        except ValueError:
            logger.warning("Stored user is unreadable, ignoring it")
            return None

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    async def login(self, username: str, password: str) -> AuthResult:
        try:
            response = await self.http.post(
                "/auth/login", {"username": username, "password": password},
            )
        except ApiError as e:
            logger.info("Login failed for '%s': %s", username, e.message)
            return AuthResult(False, e.message or "Login failed", e.errors or None)
        except HealthDiaryClientError as e:
            logger.error("Login error: %s", e.message)
            return AuthResult(False, e.message or "Network error")

        if not response or not response.get("token"):
            return AuthResult(False, (response or {}).get("message") or "Login failed")

        user = User.model_validate(response["user"])
        self.session.local.set(SessionStore.TOKEN_KEY, response["token"])
        self.session.local.set(SessionStore.USER_KEY, user.model_dump_json())
        logger.info("Logged in as %s", user.username)

        self.bus.publish(Topics.AUTH_LOGIN, {"user": user})
        return AuthResult(True)

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        try:
            response = await self.http.post(
                "/users", {"username": username, "email": email, "password": password},
            )
        except ApiError as e:
            logger.info("Registration failed for '%s': %s", username, e.message)
            return AuthResult(False, e.message or "Registration failed", e.errors or None)
        except HealthDiaryClientError as e:
            logger.error("Registration error: %s", e.message)
            return AuthResult(
                False,
                e.message or "Registration failed. Please check your information and try again.",
            )

        if response and response.get("user_id"):
            logger.info("Registered '%s' (ID: %s)", username, response["user_id"])
            return AuthResult(True)
        return AuthResult(False, (response or {}).get("message") or "Registration failed")

    def logout(self) -> None:
        self.session.local.remove(SessionStore.TOKEN_KEY)
        self.session.local.remove(SessionStore.USER_KEY)
        logger.info("Logged out")
        self.bus.publish(Topics.AUTH_LOGOUT)
