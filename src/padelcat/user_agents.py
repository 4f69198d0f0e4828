"""User-Agent selection for requests to the tournament site.

Real browsers do not change User-Agent mid-session, so HtmlFetcher asks
for headers once when its session opens and reuses them for every request.
"""

from fake_useragent import UserAgent


class UserAgentRotator:
    """Picks desktop User-Agent strings of a single browser family."""

    def __init__(self, browser: str = "Chrome"):
        self._browser_family = self._normalize_family(browser)
        self._ua = UserAgent(
            browsers=[self._browser_family],
            platforms=["desktop"],
            min_version=120.0,
        )

    @staticmethod
    def _normalize_family(browser: str) -> str:
        """Map a loose browser name to a fake-useragent family.

        Defaults to "Chrome" for unknown names.
        """
        name = browser.lower()
        if name.startswith("chrome") or name.startswith("edge"):
            return "Chrome"
        elif name.startswith("safari"):
            return "Safari"
        elif name.startswith("firefox"):
            return "Firefox"
        return "Chrome"

    @property
    def browser_family(self) -> str:
        return self._browser_family

    def get(self) -> str:
        """Return a random UA string from the configured browser family."""
        return self._ua.random

    def get_headers(self) -> dict[str, str]:
        """Return request headers for an HTML page fetch.

        Chrome-family agents also send the Client Hints that real Chrome
        sends on navigation.
        """
        headers: dict[str, str] = {
            "User-Agent": self.get(),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "es-ES,es;q=0.9,ca;q=0.8,en;q=0.7",
        }

        if self._browser_family == "Chrome":
            headers["Sec-CH-UA-Platform"] = '"Windows"'
            headers["Sec-CH-UA-Mobile"] = "?0"

        return headers
