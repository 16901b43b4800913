"""
proxies.py — Proxy configuration for the HTTP session.

A ProxyConfig is a plain, read-only record.  There is one factory per proxy
flavour (generic HTTP/HTTPS proxies, Webshare rotating residential proxies),
and proxy_config_from_options() picks the right one from CLI-style options.

The fetch pipeline reads three things from a config:
    - to_requests_dict()                   → the `proxies` mapping for requests
    - prevent_keeping_connections_alive    → send `Connection: close`
    - retries_when_blocked                 → blocked-request retry budget
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from yt_transcript_fetcher.errors import InvalidProxyConfig


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

class ProxyKind(str, Enum):
    GENERIC = "generic"
    WEBSHARE = "webshare"


@dataclass(frozen=True)
class ProxyConfig:
    """
    Transport-level proxy settings.

    Attributes:
        http_url:    Proxy URL used for plain-HTTP requests.
        https_url:   Proxy URL used for HTTPS requests.
        kind:        Which flavour of proxy this is; error messages are
                     tailored to it.
        prevent_keeping_connections_alive:
                     With rotating proxies the IP only changes on a new
                     connection, so keep-alive has to be disabled.
        retries_when_blocked:
                     How many times the transcript list fetch is attempted
                     when YouTube blocks the request.
    """
    http_url: str
    https_url: str
    kind: ProxyKind
    prevent_keeping_connections_alive: bool = False
    retries_when_blocked: int = 0

    def to_requests_dict(self) -> dict[str, str]:
        """Return the `proxies` mapping expected by requests."""
        return {"http": self.http_url, "https": self.https_url}

    @property
    def is_generic(self) -> bool:
        return self.kind is ProxyKind.GENERIC

    @property
    def is_webshare(self) -> bool:
        return self.kind is ProxyKind.WEBSHARE


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

WEBSHARE_DEFAULT_DOMAIN_NAME = "p.webshare.io"
WEBSHARE_DEFAULT_PORT = 80
WEBSHARE_DEFAULT_RETRIES = 10


def generic_proxy_config(http_url: str | None = None, https_url: str | None = None) -> ProxyConfig:
    """
    Build a config for arbitrary HTTP/HTTPS proxies.

    If only one of the two URLs is given it is used for both schemes.

    Raises:
        InvalidProxyConfig: If neither URL is given.
    """
    if not http_url and not https_url:
        raise InvalidProxyConfig(
            "A generic proxy config requires you to define at least one of the two: "
            "http or https"
        )
    return ProxyConfig(
        http_url=http_url or https_url or "",
        https_url=https_url or http_url or "",
        kind=ProxyKind.GENERIC,
    )


def webshare_proxy_config(
    proxy_username: str,
    proxy_password: str,
    retries_when_blocked: int = WEBSHARE_DEFAULT_RETRIES,
    domain_name: str = WEBSHARE_DEFAULT_DOMAIN_NAME,
    proxy_port: int = WEBSHARE_DEFAULT_PORT,
) -> ProxyConfig:
    """
    Build a config for Webshare's rotating residential proxies.

    The `-rotate` username suffix asks Webshare for a fresh IP per
    connection, which is why keep-alive is disabled and blocked requests are
    retried by default.

    Raises:
        InvalidProxyConfig: If the credentials are missing or the retry
            budget is negative.
    """
    if not proxy_username or not proxy_password:
        raise InvalidProxyConfig(
            "A Webshare proxy config requires both a proxy username and a proxy password"
        )
    if retries_when_blocked < 0:
        raise InvalidProxyConfig("retries_when_blocked must not be negative")

    url = f"http://{proxy_username}-rotate:{proxy_password}@{domain_name}:{proxy_port}/"
    return ProxyConfig(
        http_url=url,
        https_url=url,
        kind=ProxyKind.WEBSHARE,
        prevent_keeping_connections_alive=True,
        retries_when_blocked=retries_when_blocked,
    )


def proxy_config_from_options(
    http_proxy: str | None = None,
    https_proxy: str | None = None,
    webshare_proxy_username: str | None = None,
    webshare_proxy_password: str | None = None,
) -> ProxyConfig | None:
    """
    Pick a proxy config from CLI-style options.

    Webshare credentials win over generic proxy URLs.  Returns None when no
    proxy option was given at all.
    """
    if webshare_proxy_username or webshare_proxy_password:
        return webshare_proxy_config(
            webshare_proxy_username or "",
            webshare_proxy_password or "",
        )
    if http_proxy or https_proxy:
        return generic_proxy_config(http_proxy, https_proxy)
    return None
