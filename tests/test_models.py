"""
test_models.py — Tests for the fetched-transcript value types.
"""

from __future__ import annotations

import dataclasses

import pytest

from yt_transcript_fetcher.models import FetchedTranscript, FetchedTranscriptSnippet


def _make_transcript() -> FetchedTranscript:
    return FetchedTranscript(
        snippets=[
            FetchedTranscriptSnippet(text="Hey there", start=0.0, duration=1.54),
            FetchedTranscriptSnippet(text="how are you", start=1.54, duration=4.16),
            FetchedTranscriptSnippet(text="good", start=5.7, duration=0.0),
        ],
        video_id="GJLlxj_dtq8",
        language="English",
        language_code="en",
        is_generated=False,
    )


class TestFetchedTranscript:
    """FetchedTranscript behaves like a read-only sequence of snippets."""

    def test_to_raw_data_preserves_order_and_fields(self) -> None:
        assert _make_transcript().to_raw_data() == [
            {"text": "Hey there", "start": 0.0, "duration": 1.54},
            {"text": "how are you", "start": 1.54, "duration": 4.16},
            {"text": "good", "start": 5.7, "duration": 0.0},
        ]

    def test_sequence_protocol(self) -> None:
        transcript = _make_transcript()
        assert len(transcript) == 3
        assert transcript[1].text == "how are you"
        assert transcript[-1].text == "good"
        assert [snippet.start for snippet in transcript] == [0.0, 1.54, 5.7]

    def test_snippets_are_frozen_into_a_tuple(self) -> None:
        """The list passed in is copied, so later mutation doesn't leak in."""
        snippets = [FetchedTranscriptSnippet(text="a", start=0.0, duration=1.0)]
        transcript = FetchedTranscript(snippets, "GJLlxj_dtq8", "English", "en", True)
        snippets.append(FetchedTranscriptSnippet(text="b", start=1.0, duration=1.0))

        assert isinstance(transcript.snippets, tuple)
        assert len(transcript) == 1

    def test_fields_are_read_only(self) -> None:
        transcript = _make_transcript()
        with pytest.raises(dataclasses.FrozenInstanceError):
            transcript.language = "German"  # type: ignore[misc]
        with pytest.raises(dataclasses.FrozenInstanceError):
            transcript[0].text = "changed"  # type: ignore[misc]
