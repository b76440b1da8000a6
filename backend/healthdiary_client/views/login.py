"""
Health Diary Client — Login View
=================================

Banners live in session storage so they survive the re-render that follows
a failed attempt:
    loginError           shown until the user types again or logs in
    registrationSuccess  shown once, consumed by the first render
"""

import logging
from html import escape

from healthdiary_client.context import ClientContext
from healthdiary_client.core.storage import SessionStore

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


class LoginView:

    def __init__(self, ctx: ClientContext):
        self.ctx = ctx

    @property
    def _banners(self):
        return self.ctx.session.session

    def render(self) -> str:
        error = self._banners.get(SessionStore.LOGIN_ERROR_KEY) or ""
        success = self._banners.pop(SessionStore.REGISTRATION_SUCCESS_KEY) or ""

        messages = ""
        if success:
            messages += f'<div class="success-message">{escape(success)}</div>'
        if error:
            messages += f'<div class="error-message">{escape(error)}</div>'

        return (
            '<div class="wrapper"><form id="login-form"><h1>Log in</h1>'
            f"{messages}"
            '<div class="input-box"><input type="text" id="username" placeholder="Username" required></div>'
            '<div class="input-box"><input type="password" id="password" placeholder="Password" required></div>'
            '<button type="submit" class="btn">Log in</button>'
            '<div class="register-link"><p>Not registered yet? <a href="/register">Register</a></p></div>'
            "</form></div>"
        )

    def _fail(self, message: str) -> bool:
        logger.debug("Login form error: %s", message)
        self._banners.set(SessionStore.LOGIN_ERROR_KEY, message)
        self.ctx.router.root.render(self.render())
        return False

    def on_input(self) -> None:
        self._banners.remove(SessionStore.LOGIN_ERROR_KEY)

    async def submit(self, username: str, password: str) -> bool:
        """
        Log in and go to the dashboard.

        Returns:
            True on success; on failure the error banner is set and the
            form is re-rendered
        """
        if not username or not password:
            return self._fail("Please fill in all fields")

        result = await self.ctx.auth.login(username, password)
        if not result.success:
            return self._fail(result.error or "Login failed")

        self._banners.remove(SessionStore.LOGIN_ERROR_KEY)
        await self.ctx.router.navigate(DASHBOARD_PATH)
        return True
