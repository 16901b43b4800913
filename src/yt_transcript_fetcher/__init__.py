"""
yt_transcript_fetcher — Retrieve YouTube transcripts without a headless browser.

Public API:
    YouTubeTranscriptApi    fetch() / list() transcripts for a video id.
    TranscriptList          Every track of a video; find_*_transcript().
    Transcript              One track; fetch() and translate().
    FetchedTranscript       The snippets of a fetched track; to_raw_data().
    generic_proxy_config()  Proxy config for arbitrary HTTP/HTTPS proxies.
    webshare_proxy_config() Proxy config for Webshare rotating proxies.
    extract()               High-level one-call interface (URL → formatted output).
    parse_video_id()        Parse a YouTube URL or validate a bare video ID.

Exception hierarchy (all importable from this package):
    YouTubeTranscriptApiException
    ├── CookieError → CookiePathInvalid, CookieInvalid
    ├── InvalidProxyConfig
    ├── UnknownFormatterType
    └── CouldNotRetrieveTranscript
        ├── YouTubeDataUnparsable, YouTubeRequestFailed
        ├── VideoUnplayable, VideoUnavailable, InvalidVideoId
        ├── RequestBlocked → IpBlocked
        ├── TranscriptsDisabled, AgeRestricted
        ├── NotTranslatable, TranslationLanguageNotAvailable
        ├── FailedToCreateConsentCookie
        └── NoTranscriptFound

Usage:
    from yt_transcript_fetcher import YouTubeTranscriptApi
    transcript = YouTubeTranscriptApi().fetch("dQw4w9WgXcQ", languages=["de", "en"])
"""

from yt_transcript_fetcher.client import YouTubeTranscriptApi
from yt_transcript_fetcher.errors import (
    AgeRestricted,
    CookieError,
    CookieInvalid,
    CookiePathInvalid,
    CouldNotRetrieveTranscript,
    ErrorKind,
    FailedToCreateConsentCookie,
    InvalidProxyConfig,
    InvalidVideoId,
    IpBlocked,
    NoTranscriptFound,
    NotTranslatable,
    RequestBlocked,
    TranscriptsDisabled,
    TranslationLanguageNotAvailable,
    UnknownFormatterType,
    VideoUnavailable,
    VideoUnplayable,
    YouTubeDataUnparsable,
    YouTubeRequestFailed,
    YouTubeTranscriptApiException,
    render_cause,
)
from yt_transcript_fetcher.extractor import extract, parse_video_id
from yt_transcript_fetcher.models import (
    FetchedTranscript,
    FetchedTranscriptSnippet,
    TranslationLanguage,
)
from yt_transcript_fetcher.proxies import (
    ProxyConfig,
    ProxyKind,
    generic_proxy_config,
    webshare_proxy_config,
)
from yt_transcript_fetcher.transcripts import Transcript, TranscriptList

__all__ = [
    "YouTubeTranscriptApi",
    "TranscriptList",
    "Transcript",
    "FetchedTranscript",
    "FetchedTranscriptSnippet",
    "TranslationLanguage",
    "ProxyConfig",
    "ProxyKind",
    "generic_proxy_config",
    "webshare_proxy_config",
    "extract",
    "parse_video_id",
    "ErrorKind",
    "render_cause",
    "YouTubeTranscriptApiException",
    "CookieError",
    "CookiePathInvalid",
    "CookieInvalid",
    "InvalidProxyConfig",
    "UnknownFormatterType",
    "CouldNotRetrieveTranscript",
    "YouTubeDataUnparsable",
    "YouTubeRequestFailed",
    "VideoUnplayable",
    "VideoUnavailable",
    "InvalidVideoId",
    "RequestBlocked",
    "IpBlocked",
    "TranscriptsDisabled",
    "AgeRestricted",
    "NotTranslatable",
    "TranslationLanguageNotAvailable",
    "FailedToCreateConsentCookie",
    "NoTranscriptFound",
]
