"""
test_extractor.py — Unit and integration tests for the convenience layer.

Unit tests (fast, no network):
    - URL / ID parsing for every supported format
    - format_json() and describe_transcript_list() output shape
    - get_transcript() / extract() against a mocked YouTubeTranscriptApi

Integration tests (need network, marked with @pytest.mark.integration):
    - Fetching a transcript from a real YouTube video
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from yt_transcript_fetcher.errors import InvalidVideoId, UnknownFormatterType
from yt_transcript_fetcher.extractor import (
    describe_transcript_list,
    extract,
    format_json,
    get_transcript,
    list_transcripts,
    parse_video_id,
)
from yt_transcript_fetcher.models import (
    FetchedTranscript,
    FetchedTranscriptSnippet,
    TranslationLanguage,
)
from yt_transcript_fetcher.transcripts import Transcript, TranscriptList


# ---------------------------------------------------------------------------
# Helpers — a real FetchedTranscript and a mocked API returning it
# ---------------------------------------------------------------------------

def _make_transcript(snippets_data: list[dict]) -> FetchedTranscript:
    return FetchedTranscript(
        snippets=[FetchedTranscriptSnippet(**s) for s in snippets_data],
        video_id="dQw4w9WgXcQ",
        language="English",
        language_code="en",
        is_generated=True,
    )


_SAMPLE_SEGMENTS = [
    {"text": "Hello world", "start": 0.0, "duration": 1.5},
    {"text": "Second line", "start": 1.5, "duration": 2.0},
]


def _make_api(transcript: FetchedTranscript) -> MagicMock:
    """Mock YouTubeTranscriptApi whose list().find_transcript().fetch() returns `transcript`."""
    api = MagicMock()
    found = api.list.return_value.find_transcript.return_value
    found.fetch.return_value = transcript
    found.translate.return_value.fetch.return_value = transcript
    return api


# ---------------------------------------------------------------------------
# parse_video_id — URL parsing
# ---------------------------------------------------------------------------

class TestParseVideoId:
    """Tests for parse_video_id covering every URL format + bare IDs."""

    def test_standard_watch_url(self) -> None:
        """Standard youtube.com/watch?v= URL."""
        assert parse_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_watch_url_with_extra_params(self) -> None:
        """Watch URL with additional query parameters like playlist or timestamp."""
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf&t=42"
        assert parse_video_id(url) == "dQw4w9WgXcQ"

    def test_short_url(self) -> None:
        """youtu.be short-link format."""
        assert parse_video_id("https://youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_embed_url(self) -> None:
        """youtube.com/embed/ URL used in iframes."""
        assert parse_video_id("https://www.youtube.com/embed/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_shorts_url(self) -> None:
        """youtube.com/shorts/ URL."""
        assert parse_video_id("https://www.youtube.com/shorts/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_live_url(self) -> None:
        assert parse_video_id("https://www.youtube.com/live/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_mobile_url(self) -> None:
        assert parse_video_id("https://m.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_bare_id(self) -> None:
        """Raw 11-character video ID with no URL wrapper."""
        assert parse_video_id("dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_bare_id_with_whitespace(self) -> None:
        """Bare ID with leading/trailing spaces should be trimmed."""
        assert parse_video_id("  dQw4w9WgXcQ  ") == "dQw4w9WgXcQ"

    def test_id_with_hyphens_and_underscores(self) -> None:
        """IDs can contain hyphens and underscores (base64url alphabet)."""
        assert parse_video_id("Ab_Cd-Ef_12") == "Ab_Cd-Ef_12"

    def test_invalid_url_raises(self) -> None:
        """Completely unrelated string should raise InvalidVideoId."""
        with pytest.raises(InvalidVideoId):
            parse_video_id("not-a-youtube-url")

    def test_empty_string_raises(self) -> None:
        """Empty input should raise InvalidVideoId."""
        with pytest.raises(InvalidVideoId):
            parse_video_id("")


# ---------------------------------------------------------------------------
# format_json / describe_transcript_list — structured output
# ---------------------------------------------------------------------------

class TestFormatJson:
    """Tests for the structured JSON builder."""

    def test_structure(self) -> None:
        """Output dict has the track metadata, count and snippets."""
        result = format_json(_make_transcript(_SAMPLE_SEGMENTS))
        assert result == {
            "video_id": "dQw4w9WgXcQ",
            "language": "English",
            "language_code": "en",
            "is_generated": True,
            "snippet_count": 2,
            "snippets": _SAMPLE_SEGMENTS,
        }

    def test_empty_transcript(self) -> None:
        """An empty transcript yields snippet_count 0 and an empty list."""
        result = format_json(_make_transcript([]))
        assert result["snippet_count"] == 0
        assert result["snippets"] == []


class TestDescribeTranscriptList:

    def test_structure(self) -> None:
        http = MagicMock()
        french = TranslationLanguage(language="French", language_code="fr")
        manual = Transcript(http, "dQw4w9WgXcQ", "u1", "English", "en", False, [french])
        generated = Transcript(http, "dQw4w9WgXcQ", "u2", "German (auto-generated)", "de", True, [])
        transcript_list = TranscriptList("dQw4w9WgXcQ", {"en": manual}, {"de": generated}, [french])

        assert describe_transcript_list(transcript_list) == {
            "video_id": "dQw4w9WgXcQ",
            "manually_created": [
                {"language": "English", "language_code": "en", "is_translatable": True},
            ],
            "generated": [
                {"language": "German (auto-generated)", "language_code": "de", "is_translatable": False},
            ],
            "translation_languages": [{"language": "French", "language_code": "fr"}],
        }

    def test_list_transcripts_uses_given_api(self) -> None:
        api = MagicMock()
        api.list.return_value = TranscriptList("dQw4w9WgXcQ", {}, {}, [])

        result = list_transcripts("dQw4w9WgXcQ", api=api)

        api.list.assert_called_once_with("dQw4w9WgXcQ")
        assert result["manually_created"] == []


# ---------------------------------------------------------------------------
# get_transcript / extract — mocked API
# ---------------------------------------------------------------------------

class TestGetTranscript:
    """Tests for the language / translation plumbing of get_transcript()."""

    def test_defaults_to_english(self) -> None:
        transcript = _make_transcript(_SAMPLE_SEGMENTS)
        api = _make_api(transcript)

        assert get_transcript("dQw4w9WgXcQ", api=api) is transcript
        api.list.return_value.find_transcript.assert_called_once_with(("en",))

    def test_language_priority_forwarded(self) -> None:
        api = _make_api(_make_transcript(_SAMPLE_SEGMENTS))
        get_transcript("dQw4w9WgXcQ", ["de", "en"], api=api)
        api.list.return_value.find_transcript.assert_called_once_with(["de", "en"])

    def test_translate(self) -> None:
        api = _make_api(_make_transcript(_SAMPLE_SEGMENTS))
        get_transcript("dQw4w9WgXcQ", translate="fr", api=api)
        api.list.return_value.find_transcript.return_value.translate.assert_called_once_with("fr")


class TestExtract:
    """Tests for the one-call extract() interface."""

    def test_text_format(self) -> None:
        api = _make_api(_make_transcript(_SAMPLE_SEGMENTS))
        result = extract("https://youtu.be/dQw4w9WgXcQ", fmt="text", api=api)
        assert result == "Hello world\nSecond line"
        api.list.assert_called_once_with("dQw4w9WgXcQ")

    def test_json_format_returns_dict(self) -> None:
        api = _make_api(_make_transcript(_SAMPLE_SEGMENTS))
        result = extract("dQw4w9WgXcQ", fmt="json", api=api)
        assert isinstance(result, dict)
        assert result["snippet_count"] == 2

    def test_srt_format(self) -> None:
        api = _make_api(_make_transcript(_SAMPLE_SEGMENTS))
        result = extract("dQw4w9WgXcQ", fmt="srt", api=api)
        assert result.startswith("1\n00:00:00,000 --> 00:00:01,500\nHello world")

    def test_unknown_format_fails_before_fetching(self) -> None:
        api = MagicMock()
        with pytest.raises(UnknownFormatterType):
            extract("dQw4w9WgXcQ", fmt="doc", api=api)
        api.list.assert_not_called()

    def test_invalid_id_fails_before_fetching(self) -> None:
        api = MagicMock()
        with pytest.raises(InvalidVideoId):
            extract("https://example.com/video", api=api)
        api.list.assert_not_called()


# ---------------------------------------------------------------------------
# Integration tests — require network access
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestIntegration:
    """
    Integration tests that hit YouTube's servers.

    Run with:  pytest -m integration
    Deselected by default; use the marker to opt in.
    """

    # "Never Gonna Give You Up" — one of the most stable videos on YouTube,
    # virtually guaranteed to have English captions.
    VIDEO_ID = "dQw4w9WgXcQ"

    def test_extract_text(self) -> None:
        """Fetching a real video in text format returns non-empty text."""
        result = extract(self.VIDEO_ID, fmt="text")
        assert isinstance(result, str)
        assert len(result) > 100

    def test_extract_json(self) -> None:
        """Fetching a real video in JSON format returns structured data."""
        result = extract(self.VIDEO_ID, fmt="json")
        assert isinstance(result, dict)
        assert result["video_id"] == self.VIDEO_ID
        assert result["snippet_count"] > 0
        assert len(result["snippets"]) == result["snippet_count"]

    def test_list_transcripts(self) -> None:
        result = list_transcripts(self.VIDEO_ID)
        codes = [t["language_code"] for t in result["manually_created"] + result["generated"]]
        assert any(code.startswith("en") for code in codes)
