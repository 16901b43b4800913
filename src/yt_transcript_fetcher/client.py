"""
client.py — YouTubeTranscriptApi, the library entry point.

    api = YouTubeTranscriptApi()
    transcript = api.fetch("dQw4w9WgXcQ", languages=["de", "en"])
    for snippet in transcript:
        print(snippet.start, snippet.text)

    transcript_list = api.list("dQw4w9WgXcQ")
    german = transcript_list.find_generated_transcript(["de"]).fetch()

Every call propagates its CouldNotRetrieveTranscript subclass unchanged;
nothing is cached between calls.
"""

from __future__ import annotations

from typing import Iterable

import requests

from yt_transcript_fetcher.models import FetchedTranscript
from yt_transcript_fetcher.proxies import ProxyConfig
from yt_transcript_fetcher.transcripts import TranscriptList, TranscriptListFetcher
from yt_transcript_fetcher.transport import HttpContext, build_session

# Used when the caller doesn't say which languages they want.
DEFAULT_LANGUAGES = ("en",)


class YouTubeTranscriptApi:
    """
    Fetch transcripts for YouTube videos.

    The underlying requests.Session is configured once, here.  Don't share
    an instance between threads; create one per thread instead.

    Args:
        cookie_path:  Optional Netscape-format cookies.txt used to
                      authenticate (needed for age-restricted videos).
        proxy_config: Optional proxy configuration (see proxies.py).
        http_client:  Optional pre-built session to configure and use.
        timeout:      Per-request timeout passed to requests.

    Raises:
        CookiePathInvalid, CookieInvalid: The cookie file can't be used.
    """

    def __init__(
        self,
        cookie_path: str | None = None,
        proxy_config: ProxyConfig | None = None,
        http_client: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        session = build_session(cookie_path, proxy_config, http_client)
        self._fetcher = TranscriptListFetcher(HttpContext(session, timeout=timeout), proxy_config)

    def fetch(
        self,
        video_id: str,
        languages: Iterable[str] = DEFAULT_LANGUAGES,
        preserve_formatting: bool = False,
    ) -> FetchedTranscript:
        """
        Fetch the transcript of a video in the first available language.

        Shortcut for `list(video_id).find_transcript(languages).fetch(...)`.

        Args:
            video_id:            The video id (not the URL!).
            languages:           Language codes in descending priority.
            preserve_formatting: Keep inline formatting tags like <i> and <b>.
        """
        return (
            self.list(video_id)
            .find_transcript(languages)
            .fetch(preserve_formatting=preserve_formatting)
        )

    def list(self, video_id: str) -> TranscriptList:
        """List every transcript available for a video."""
        return self._fetcher.fetch(video_id)
