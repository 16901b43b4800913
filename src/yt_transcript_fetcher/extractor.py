"""
extractor.py — One-call convenience layer on top of YouTubeTranscriptApi.

    1. Parsing YouTube URLs / IDs   → parse_video_id()
    2. Fetching a transcript        → get_transcript()
    3. Describing available tracks  → list_transcripts()
    4. One-call fetch + format      → extract()

The REST API uses these; library users who need more control should use
YouTubeTranscriptApi / TranscriptList directly.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from yt_transcript_fetcher.client import DEFAULT_LANGUAGES, YouTubeTranscriptApi
from yt_transcript_fetcher.errors import InvalidVideoId
from yt_transcript_fetcher.formatters import FormatterLoader
from yt_transcript_fetcher.models import FetchedTranscript
from yt_transcript_fetcher.transcripts import TranscriptList

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Regex patterns that cover the most common YouTube URL shapes:
#   - https://www.youtube.com/watch?v=VIDEO_ID
#   - https://youtu.be/VIDEO_ID
#   - https://www.youtube.com/embed/VIDEO_ID
#   - https://www.youtube.com/shorts/VIDEO_ID
#   - https://www.youtube.com/v/VIDEO_ID
# Each pattern captures the 11-character video ID in group "id".
_URL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?.*v=(?P<id>[A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?youtu\.be/(?P<id>[A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube\.com/(?:embed|shorts|v|live)/(?P<id>[A-Za-z0-9_-]{11})"),
]

# A bare video ID is exactly 11 characters from the base64url alphabet.
_BARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")


# ---------------------------------------------------------------------------
# URL / ID parsing
# ---------------------------------------------------------------------------

def parse_video_id(url_or_id: str) -> str:
    """
    Extract a YouTube video ID from a URL string, or validate a raw 11-char ID.

    Args:
        url_or_id: A YouTube URL or a raw video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidVideoId: If the string doesn't match any known format.
    """
    url_or_id = url_or_id.strip()

    for pattern in _URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group("id")

    if _BARE_ID_PATTERN.match(url_or_id):
        return url_or_id

    raise InvalidVideoId(url_or_id)


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------

def get_transcript(
    video_id: str,
    languages: Iterable[str] | None = None,
    *,
    translate: str | None = None,
    api: YouTubeTranscriptApi | None = None,
) -> FetchedTranscript:
    """
    Fetch the transcript for one video, optionally machine-translated.

    Args:
        video_id:  The 11-character YouTube video ID (NOT a full URL).
        languages: Language codes in descending priority.  Defaults to ["en"].
        translate: Optional language code to translate the found track into.
        api:       The YouTubeTranscriptApi to use.  A default one (no
                   cookies, no proxy) is created when omitted.

    Raises:
        CouldNotRetrieveTranscript: (or subclass) on any pipeline failure.
    """
    api = api or YouTubeTranscriptApi()
    transcript = api.list(video_id).find_transcript(languages or DEFAULT_LANGUAGES)
    if translate:
        transcript = transcript.translate(translate)
    return transcript.fetch()


def list_transcripts(video_id: str, *, api: YouTubeTranscriptApi | None = None) -> dict[str, Any]:
    """
    Describe the tracks available for a video as a JSON-serialisable dict.

    Returns:
        A dict with keys: video_id, manually_created, generated,
        translation_languages.
    """
    api = api or YouTubeTranscriptApi()
    return describe_transcript_list(api.list(video_id))


def describe_transcript_list(transcript_list: TranscriptList) -> dict[str, Any]:
    tracks = list(transcript_list)

    def describe(is_generated: bool) -> list[dict[str, Any]]:
        return [
            {
                "language": transcript.language,
                "language_code": transcript.language_code,
                "is_translatable": transcript.is_translatable,
            }
            for transcript in tracks
            if transcript.is_generated == is_generated
        ]

    return {
        "video_id": transcript_list.video_id,
        "manually_created": describe(False),
        "generated": describe(True),
        "translation_languages": [
            {"language": tl.language, "language_code": tl.language_code}
            for tl in transcript_list.translation_languages
        ],
    }


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_json(transcript: FetchedTranscript) -> dict[str, Any]:
    """
    Build a structured JSON-serialisable dict from a fetched transcript.

    Returns:
        A dict with keys: video_id, language, language_code, is_generated,
        snippet_count, snippets.  Each snippet has: text, start, duration.
    """
    snippets = transcript.to_raw_data()
    return {
        "video_id": transcript.video_id,
        "language": transcript.language,
        "language_code": transcript.language_code,
        "is_generated": transcript.is_generated,
        "snippet_count": len(snippets),
        "snippets": snippets,
    }


def extract(
    url_or_id: str,
    languages: Iterable[str] | None = None,
    fmt: str = "text",
    *,
    translate: str | None = None,
    api: YouTubeTranscriptApi | None = None,
) -> str | dict[str, Any]:
    """
    One-call interface: parse URL → fetch transcript → format output.

    Args:
        url_or_id: A YouTube URL or raw video ID.
        languages: Optional language priority list (e.g. ["de", "en"]).
        fmt:       "json" returns a dict (see format_json()); any other
                   FormatterLoader name ("pretty", "text", "srt", "webvtt")
                   returns the rendered string.
        translate: Optional language code to translate the transcript into.
        api:       Optional configured YouTubeTranscriptApi.

    Raises:
        UnknownFormatterType:       fmt isn't a known format.
        CouldNotRetrieveTranscript: (or subclass) on any pipeline failure.
    """
    # Fail on a bad format before doing any network work.
    formatter = FormatterLoader().load(fmt)

    video_id = parse_video_id(url_or_id)
    transcript = get_transcript(video_id, languages, translate=translate, api=api)

    if fmt == "json":
        return format_json(transcript)
    return formatter.format_transcript(transcript)
