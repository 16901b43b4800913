"""
errors.py — Exception taxonomy for yt-transcript-fetcher.

Every failure of the fetch pipeline is a CouldNotRetrieveTranscript scoped
to one video id.  Setup problems (unreadable cookie file, bad proxy config,
unknown output format) form a separate family that isn't tied to a video.

Each exception class only declares its ErrorKind and the payload it carries.
The human-readable cause is produced by render_cause(), a pure function that
dispatches on the kind through a lookup table, and the full message is only
assembled when `.message` / str() is accessed.

Every exception also carries an `http_status` attribute so the FastAPI error
handler can translate library-level errors directly into the correct HTTP
response code without a separate mapping table.

Hierarchy:
    YouTubeTranscriptApiException (500)
    ├── CookieError
    │   ├── CookiePathInvalid
    │   └── CookieInvalid
    ├── InvalidProxyConfig
    ├── UnknownFormatterType (400)
    └── CouldNotRetrieveTranscript
        ├── YouTubeDataUnparsable
        ├── YouTubeRequestFailed (502)
        ├── VideoUnplayable
        ├── VideoUnavailable (404)
        ├── InvalidVideoId (400)
        ├── RequestBlocked (429)
        │   └── IpBlocked (429)
        ├── TranscriptsDisabled (404)
        ├── AgeRestricted (403)
        ├── NotTranslatable (400)
        ├── TranslationLanguageNotAvailable (400)
        ├── FailedToCreateConsentCookie
        └── NoTranscriptFound (404)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, ClassVar, Iterable, Mapping

from yt_transcript_fetcher.settings import WATCH_URL, WEBSHARE_URL


# ---------------------------------------------------------------------------
# Error kinds
# ---------------------------------------------------------------------------

class ErrorKind(str, Enum):
    """Tag identifying which video-scoped failure occurred."""

    COULD_NOT_RETRIEVE = "could_not_retrieve"
    DATA_UNPARSABLE = "data_unparsable"
    REQUEST_FAILED = "request_failed"
    VIDEO_UNPLAYABLE = "video_unplayable"
    VIDEO_UNAVAILABLE = "video_unavailable"
    INVALID_VIDEO_ID = "invalid_video_id"
    REQUEST_BLOCKED = "request_blocked"
    IP_BLOCKED = "ip_blocked"
    TRANSCRIPTS_DISABLED = "transcripts_disabled"
    AGE_RESTRICTED = "age_restricted"
    NOT_TRANSLATABLE = "not_translatable"
    TRANSLATION_LANGUAGE_UNAVAILABLE = "translation_language_unavailable"
    FAILED_CONSENT_COOKIE = "failed_consent_cookie"
    NO_TRANSCRIPT_FOUND = "no_transcript_found"


# ---------------------------------------------------------------------------
# Cause messages
# ---------------------------------------------------------------------------

_ERROR_MESSAGE = "Could not retrieve a transcript for the video {video_url}!"
_CAUSE_MESSAGE_INTRO = " This is most likely caused by:\n\n{cause}"
_ISSUE_REFERRAL = (
    "\n\nIf you are sure that the described cause is not responsible for this error "
    "and that a transcript should be retrievable, please open an issue on the "
    "project's issue tracker. Include the version of yt-transcript-fetcher you are "
    "using and the information needed to reproduce the error, and check that no "
    "open issue already describes your problem!"
)

_BLOCKED_BASE_CAUSE = (
    "YouTube is blocking requests from your IP. This usually is due to one of the "
    "following reasons:\n"
    "- You have done too many requests and your IP has been blocked by YouTube\n"
    "- You are doing requests from an IP belonging to a cloud provider (like AWS, "
    "Google Cloud Platform, Azure, etc.). Unfortunately, most IPs from cloud "
    "providers are blocked by YouTube.\n\n"
)

_REQUEST_BLOCKED_CAUSE = _BLOCKED_BASE_CAUSE + (
    "There are two things you can do to work around this:\n"
    '1. Use proxies to hide your IP address, as explained in the "Working around '
    'IP bans" section of the README.\n'
    "2. (NOT RECOMMENDED) If you authenticate your requests using cookies, you "
    "will be able to continue doing requests for a while. However, YouTube will "
    "eventually permanently ban the account that you have used to authenticate "
    "with! So only do this if you don't mind your account being banned!"
)

_IP_BLOCKED_CAUSE = _BLOCKED_BASE_CAUSE + (
    'Ways to work around this are explained in the "Working around IP bans" '
    "section of the README.\n"
)

_BLOCKED_WITH_GENERIC_PROXY_CAUSE = (
    "YouTube is blocking your requests, despite you using proxies. Keep in mind "
    "a proxy is just a way to hide your real IP behind the IP of that proxy, but "
    "there is no guarantee that the IP of that proxy won't be blocked as well.\n\n"
    "The only truly reliable way to prevent IP blocks is rotating through a large "
    f"pool of residential IPs, by using a provider like Webshare ({WEBSHARE_URL}), "
    'which provides you with a pool of >30M residential IPs (make sure to purchase '
    '"Residential" proxies, NOT "Proxy Server" or "Static Residential"!).\n\n'
    'You will find more information in the "Using Webshare" section of the README.'
)

_BLOCKED_WITH_WEBSHARE_PROXY_CAUSE = (
    "YouTube is blocking your requests, despite you using Webshare proxies. "
    'Please make sure that you have purchased "Residential" proxies and '
    'NOT "Proxy Server" or "Static Residential", as those won\'t work as '
    'reliably! The free tier also uses "Proxy Server" and will NOT work!\n\n'
    'The only reliable option is using "Residential" proxies (not "Static '
    'Residential"), as this allows you to rotate through a pool of over 30M IPs, '
    "which means you will always find an IP that hasn't been blocked by YouTube "
    "yet!"
)

_INVALID_VIDEO_ID_CAUSE = (
    "You provided an invalid video id. Make sure you are using the video id and "
    "NOT the url!\n\n"
    'Do NOT run: `YouTubeTranscriptApi().fetch("https://www.youtube.com/watch?v=1234")`\n'
    'Instead run: `YouTubeTranscriptApi().fetch("1234")`'
)

_AGE_RESTRICTED_CAUSE = (
    "This video is age-restricted. Therefore, you will have to authenticate to be "
    "able to retrieve transcripts for it. You will have to provide a cookie to "
    'authenticate yourself, as explained in the "Cookie Authentication" section of '
    "the README."
)


def _blocked_cause(default: str) -> Callable[[Mapping[str, Any]], str]:
    """Build a renderer whose text depends on the proxy config in the payload."""

    def render(payload: Mapping[str, Any]) -> str:
        proxy_config = payload.get("proxy_config")
        if proxy_config is not None and proxy_config.is_webshare:
            return _BLOCKED_WITH_WEBSHARE_PROXY_CAUSE
        if proxy_config is not None and proxy_config.is_generic:
            return _BLOCKED_WITH_GENERIC_PROXY_CAUSE
        return default

    return render


def _video_unplayable_cause(payload: Mapping[str, Any]) -> str:
    reason = payload.get("reason") or "No reason specified!"
    cause = f"The video is unplayable for the following reason: {reason}"
    sub_reasons = payload.get("sub_reasons") or ()
    if sub_reasons:
        details = "\n".join(f" - {sub_reason}" for sub_reason in sub_reasons)
        cause += f"\n\nAdditional Details:\n{details}"
    return cause


def _no_transcript_found_cause(payload: Mapping[str, Any]) -> str:
    return (
        "No transcripts were found for any of the requested language codes: "
        f"{list(payload['requested_language_codes'])}\n\n"
        f"{payload['transcript_data']}"
    )


# One renderer per kind.  Kinds without an entry have no cause text.
_CAUSE_RENDERERS: dict[ErrorKind, Callable[[Mapping[str, Any]], str]] = {
    ErrorKind.DATA_UNPARSABLE: lambda _: (
        "The data required to fetch the transcript is not parsable. This should "
        "not happen, please open an issue (make sure to include the video ID)!"
    ),
    ErrorKind.REQUEST_FAILED: lambda p: f"Request to YouTube failed: {p['reason']}",
    ErrorKind.VIDEO_UNPLAYABLE: _video_unplayable_cause,
    ErrorKind.VIDEO_UNAVAILABLE: lambda _: "The video is no longer available",
    ErrorKind.INVALID_VIDEO_ID: lambda _: _INVALID_VIDEO_ID_CAUSE,
    ErrorKind.REQUEST_BLOCKED: _blocked_cause(_REQUEST_BLOCKED_CAUSE),
    ErrorKind.IP_BLOCKED: _blocked_cause(_IP_BLOCKED_CAUSE),
    ErrorKind.TRANSCRIPTS_DISABLED: lambda _: "Subtitles are disabled for this video",
    ErrorKind.AGE_RESTRICTED: lambda _: _AGE_RESTRICTED_CAUSE,
    ErrorKind.NOT_TRANSLATABLE: lambda _: "The requested language is not translatable",
    ErrorKind.TRANSLATION_LANGUAGE_UNAVAILABLE: lambda _: (
        "The requested translation language is not available"
    ),
    ErrorKind.FAILED_CONSENT_COOKIE: lambda _: (
        "Failed to automatically give consent to saving cookies"
    ),
    ErrorKind.NO_TRANSCRIPT_FOUND: _no_transcript_found_cause,
}


def render_cause(kind: ErrorKind, payload: Mapping[str, Any]) -> str:
    """
    Render the cause text for an error kind and its payload.

    Args:
        kind:    The ErrorKind tag.
        payload: The structured data carried by the error (see each
                 exception's `payload` property).

    Returns:
        The cause text, or an empty string for kinds without one.
    """
    renderer = _CAUSE_RENDERERS.get(kind)
    if renderer is None:
        return ""
    return renderer(payload)


def build_error_message(kind: ErrorKind, video_id: str, payload: Mapping[str, Any]) -> str:
    """Assemble the full user-facing message for a video-scoped error."""
    message = _ERROR_MESSAGE.format(video_url=WATCH_URL.format(video_id=video_id))
    cause = render_cause(kind, payload)
    if cause:
        message += _CAUSE_MESSAGE_INTRO.format(cause=cause) + _ISSUE_REFERRAL
    return message


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class YouTubeTranscriptApiException(Exception):
    """
    Root exception for everything raised by this package.

    Attributes:
        http_status: Suggested HTTP status code for the REST layer.
    """

    http_status: ClassVar[int] = 500

    @property
    def message(self) -> str:
        """Human-readable description of what went wrong."""
        return str(self)


# ---------------------------------------------------------------------------
# Setup errors (not tied to a video)
# ---------------------------------------------------------------------------

class CookieError(YouTubeTranscriptApiException):
    """Base class for problems with a user-supplied cookie file."""


class CookiePathInvalid(CookieError):
    """The cookie file doesn't exist, can't be read, or isn't in Netscape format."""

    def __init__(self, cookie_path: str) -> None:
        super().__init__(f"Can't load the provided cookie file: {cookie_path}")
        self.cookie_path = cookie_path


class CookieInvalid(CookieError):
    """The cookie file loaded but holds no usable YouTube cookies."""

    def __init__(self, cookie_path: str) -> None:
        super().__init__(
            f"The cookies provided are not valid (may have expired): {cookie_path}"
        )
        self.cookie_path = cookie_path


class InvalidProxyConfig(YouTubeTranscriptApiException):
    """Raised by the proxy factories when the given parameters can't form a config."""

    def __init__(self, message: str = "Invalid proxy configuration") -> None:
        super().__init__(message)


class UnknownFormatterType(YouTubeTranscriptApiException):
    """Raised by FormatterLoader for an output format it doesn't know."""

    http_status: ClassVar[int] = 400

    def __init__(self, formatter_type: str, known: Iterable[str]) -> None:
        super().__init__(
            f"The format '{formatter_type}' is not supported. "
            f"Choose one of the following formats: {', '.join(known)}"
        )
        self.formatter_type = formatter_type


# ---------------------------------------------------------------------------
# Video-scoped errors
# ---------------------------------------------------------------------------

class CouldNotRetrieveTranscript(YouTubeTranscriptApiException):
    """
    Root of every failure that prevents retrieving a transcript for a video.

    Subclasses set `kind` and list the attribute names that make up their
    payload in `payload_fields`; the message is rendered from those on demand.

    Attributes:
        video_id: The video id the failure refers to.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.COULD_NOT_RETRIEVE
    payload_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, video_id: str) -> None:
        super().__init__(video_id)
        self.video_id = video_id

    @property
    def payload(self) -> dict[str, Any]:
        """The structured data this error carries, keyed by field name."""
        return {name: getattr(self, name) for name in self.payload_fields}

    @property
    def cause(self) -> str:
        return render_cause(self.kind, self.payload)

    def __str__(self) -> str:
        return build_error_message(self.kind, self.video_id, self.payload)


class YouTubeDataUnparsable(CouldNotRetrieveTranscript):
    """The player configuration or a caption document couldn't be parsed."""

    kind = ErrorKind.DATA_UNPARSABLE


class YouTubeRequestFailed(CouldNotRetrieveTranscript):
    """An HTTP request failed for a reason other than blocking."""

    kind = ErrorKind.REQUEST_FAILED
    payload_fields = ("reason",)
    http_status = 502

    def __init__(self, video_id: str, reason: str) -> None:
        super().__init__(video_id)
        self.reason = reason


class VideoUnplayable(CouldNotRetrieveTranscript):
    """
    The playability status is neither OK nor one of the specific cases.

    Attributes:
        reason:      YouTube's reason string (may be None).
        sub_reasons: Extra detail lines from the error screen.
    """

    kind = ErrorKind.VIDEO_UNPLAYABLE
    payload_fields = ("reason", "sub_reasons")

    def __init__(self, video_id: str, reason: str | None, sub_reasons: Iterable[str]) -> None:
        super().__init__(video_id)
        self.reason = reason
        self.sub_reasons = tuple(sub_reasons)


class VideoUnavailable(CouldNotRetrieveTranscript):
    kind = ErrorKind.VIDEO_UNAVAILABLE
    http_status = 404


class InvalidVideoId(CouldNotRetrieveTranscript):
    """A URL was passed where a bare video id was expected."""

    kind = ErrorKind.INVALID_VIDEO_ID
    http_status = 400


class RequestBlocked(CouldNotRetrieveTranscript):
    """
    YouTube rejected the request as automated traffic.

    The cause text differs depending on whether (and which) proxy was in use;
    with_proxy_config() returns a copy of the error that knows about it.
    """

    kind = ErrorKind.REQUEST_BLOCKED
    payload_fields = ("proxy_config",)
    http_status = 429

    def __init__(self, video_id: str, proxy_config: Any = None) -> None:
        super().__init__(video_id)
        self.proxy_config = proxy_config

    def with_proxy_config(self, proxy_config: Any) -> RequestBlocked:
        """Return a new error of the same class annotated with `proxy_config`."""
        return type(self)(self.video_id, proxy_config=proxy_config)


class IpBlocked(RequestBlocked):
    kind = ErrorKind.IP_BLOCKED


class TranscriptsDisabled(CouldNotRetrieveTranscript):
    kind = ErrorKind.TRANSCRIPTS_DISABLED
    http_status = 404


class AgeRestricted(CouldNotRetrieveTranscript):
    kind = ErrorKind.AGE_RESTRICTED
    http_status = 403


class NotTranslatable(CouldNotRetrieveTranscript):
    kind = ErrorKind.NOT_TRANSLATABLE
    http_status = 400


class TranslationLanguageNotAvailable(CouldNotRetrieveTranscript):
    kind = ErrorKind.TRANSLATION_LANGUAGE_UNAVAILABLE
    http_status = 400


class FailedToCreateConsentCookie(CouldNotRetrieveTranscript):
    kind = ErrorKind.FAILED_CONSENT_COOKIE


class NoTranscriptFound(CouldNotRetrieveTranscript):
    """
    None of the requested language codes matched an available track.

    Attributes:
        requested_language_codes: The codes the caller asked for, in order.
        transcript_data:          The TranscriptList that was searched; its
                                  string form lists what is available.
    """

    kind = ErrorKind.NO_TRANSCRIPT_FOUND
    payload_fields = ("requested_language_codes", "transcript_data")
    http_status = 404

    def __init__(
        self,
        video_id: str,
        requested_language_codes: Iterable[str],
        transcript_data: Any,
    ) -> None:
        super().__init__(video_id)
        self.requested_language_codes = tuple(requested_language_codes)
        self.transcript_data = transcript_data
