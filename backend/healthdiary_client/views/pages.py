"""Static pages: the welcome screen and the 404 fallback."""


class WelcomePage:

    def render(self) -> str:
        return (
            '<div class="welcome-screen">Welcome to the Health Diary application! '
            '<a href="/login">Log in</a></div>'
        )


class NotFoundPage:

    def render(self) -> str:
        return (
            '<div class="not-found">404 - Page not found '
            '<a href="/">Return to home page</a></div>'
        )
