"""
transport.py — The HTTP collaborator of the fetch pipeline.

Wraps a requests.Session:

    build_session()     Apply default headers, auth cookies and proxies.
    load_cookie_jar()   Load a Netscape-format cookies.txt file.
    HttpContext         A session plus extra cookies that are passed
                        explicitly on every request (e.g. the consent
                        cookie), so no pipeline step mutates shared state.

All HTTP status handling lives in raise_http_errors(): 429 means YouTube is
rate-limiting the IP, every other error status is a plain request failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from http.cookiejar import LoadError, MozillaCookieJar

import requests

from yt_transcript_fetcher.errors import (
    CookieInvalid,
    CookiePathInvalid,
    IpBlocked,
    YouTubeRequestFailed,
)
from yt_transcript_fetcher.proxies import ProxyConfig
from yt_transcript_fetcher.settings import COOKIE_DOMAIN, DEFAULT_HEADERS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session setup
# ---------------------------------------------------------------------------

def load_cookie_jar(cookie_path: str) -> MozillaCookieJar:
    """
    Load authentication cookies from a Netscape-format cookie file.

    Each non-comment line holds tab-separated domain, include-subdomains
    flag, path, secure flag, expiry (epoch seconds), name and value, in the
    format browser extensions like "Get cookies.txt" export.

    Args:
        cookie_path: Path to the cookies.txt file.

    Returns:
        The loaded cookie jar.  Expired cookies are dropped on load.

    Raises:
        CookiePathInvalid: The file can't be read or isn't a cookie file.
        CookieInvalid:     No unexpired youtube.com cookie is in the file.
    """
    cookie_jar = MozillaCookieJar(cookie_path)
    try:
        cookie_jar.load(ignore_discard=True)
    except (OSError, LoadError) as exc:
        raise CookiePathInvalid(cookie_path) from exc

    if not any(cookie.domain.lstrip(".").endswith(COOKIE_DOMAIN) for cookie in cookie_jar):
        raise CookieInvalid(cookie_path)

    logger.debug("Loaded %d cookies from %s", len(cookie_jar), cookie_path)
    return cookie_jar


def build_session(
    cookie_path: str | None = None,
    proxy_config: ProxyConfig | None = None,
    session: requests.Session | None = None,
) -> requests.Session:
    """
    Configure a requests.Session for talking to YouTube.

    Args:
        cookie_path:  Optional cookies.txt file used to authenticate.
        proxy_config: Optional proxy configuration.
        session:      An existing session to configure.  A new one is
                      created when omitted.

    Returns:
        The configured session.  It is set up once here and must not be
        reconfigured while requests are in flight.

    Raises:
        CookiePathInvalid, CookieInvalid: See load_cookie_jar().
    """
    if session is None:
        session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)

    if cookie_path:
        session.cookies.update(load_cookie_jar(cookie_path))

    if proxy_config is not None:
        session.proxies.update(proxy_config.to_requests_dict())
        if proxy_config.prevent_keeping_connections_alive:
            session.headers["Connection"] = "close"

    return session


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

def raise_http_errors(response: requests.Response, video_id: str) -> requests.Response:
    """
    Translate an HTTP error status into the pipeline's error taxonomy.

    Raises:
        IpBlocked:            On HTTP 429 (Too Many Requests).
        YouTubeRequestFailed: On any other 4xx/5xx status.
    """
    if response.status_code == 429:
        raise IpBlocked(video_id)
    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        raise YouTubeRequestFailed(video_id, str(exc)) from exc
    return response


@dataclass(frozen=True)
class HttpContext:
    """
    A session plus request-scoped cookies.

    Attributes:
        session: The configured requests.Session.
        cookies: (name, value) pairs sent with every request made through
                 this context, on top of the session's own cookie jar.
        timeout: Passed to requests as-is; None leaves it to requests.
    """
    session: requests.Session
    cookies: tuple[tuple[str, str], ...] = ()
    timeout: float | None = None

    def with_cookie(self, name: str, value: str) -> HttpContext:
        """Return a new context that also sends cookie `name`, replacing any earlier value."""
        cookies = tuple((n, v) for n, v in self.cookies if n != name)
        return replace(self, cookies=cookies + ((name, value),))

    def get(self, url: str, video_id: str) -> str:
        """
        GET `url` and return the response body.

        Raises:
            IpBlocked:            HTTP 429.
            YouTubeRequestFailed: Any other error status, or a connection /
                                  timeout error raised by requests.
        """
        try:
            response = self.session.get(
                url,
                cookies=dict(self.cookies) or None,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise YouTubeRequestFailed(video_id, str(exc)) from exc
        return raise_http_errors(response, video_id).text
