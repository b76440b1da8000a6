"""
Health Diary Client — Register View
====================================

Checks the form locally before calling the API; the server repeats every
check, so these only save a round trip.
"""

import logging
import re
from html import escape
from typing import Optional

from healthdiary_client.context import ClientContext
from healthdiary_client.core.storage import SessionStore

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Server-side bcrypt limit
MAX_PASSWORD_BYTES = 72

REGISTRATION_SUCCESS = "Registration successful! You can now log in."


def validate_registration(username: str, email: str, password: str) -> Optional[str]:
    """Returns the first problem with the form, or None."""
    if not username or not email or not password:
        return "Please fill in all fields"
    if len(username) < 3 or len(username) > 20:
        return "Username must be 3-20 characters long"
    if not USERNAME_PATTERN.match(username):
        return "Username can only contain letters and numbers"
    if not EMAIL_PATTERN.match(email):
        return "Please enter a valid email address"
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return "Password must be at most 72 characters long"
    return None


class RegisterView:

    def __init__(self, ctx: ClientContext):
        self.ctx = ctx

    @property
    def _banners(self):
        return self.ctx.session.session

    def render(self) -> str:
        error = self._banners.get(SessionStore.REGISTER_ERROR_KEY) or ""
        message = f'<div class="error-message">{escape(error)}</div>' if error else ""
        return (
            '<div class="wrapper"><form id="register-form"><h1>Register</h1>'
            f"{message}"
            '<div class="input-box"><input type="text" id="username" placeholder="Username" required></div>'
            '<div class="input-box"><input type="email" id="email" placeholder="Email" required></div>'
            '<div class="input-box"><input type="password" id="password" placeholder="Password" required></div>'
            '<button type="submit" class="btn">Register</button>'
            '<div class="register-link"><p>Already have an account? <a href="/login">Log in</a></p></div>'
            "</form></div>"
        )

    def _fail(self, message: str) -> bool:
        logger.debug("Registration form error: %s", message)
        self._banners.set(SessionStore.REGISTER_ERROR_KEY, message)
        self.ctx.router.root.render(self.render())
        return False

    def on_input(self) -> None:
        self._banners.remove(SessionStore.REGISTER_ERROR_KEY)

    async def submit(self, username: str, email: str, password: str) -> bool:
        problem = validate_registration(username, email, password)
        if problem:
            return self._fail(problem)

        result = await self.ctx.auth.register(username, email, password)
        if not result.success:
            return self._fail(result.error or "Registration failed")

        self._banners.remove(SessionStore.REGISTER_ERROR_KEY)
        self._banners.set(SessionStore.REGISTRATION_SUCCESS_KEY, REGISTRATION_SUCCESS)
        await self.ctx.router.navigate("/login")
        return True
