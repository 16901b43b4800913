"""
models.py — Value types produced by the fetch pipeline.

These are plain frozen dataclasses: created once per fetch, never mutated,
and safe to hand to formatters or serialise with to_raw_data().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence


@dataclass(frozen=True)
class FetchedTranscriptSnippet:
    """
    One timed caption fragment.

    Attributes:
        text:     The caption text, with markup stripped (or kept, if
                  formatting was preserved).
        start:    Offset from the start of the video, in seconds.
        duration: How long the caption is shown, in seconds.  May be 0.
    """
    text: str
    start: float
    duration: float


@dataclass(frozen=True)
class TranslationLanguage:
    """A language a caption track can be machine-translated into."""
    language: str
    language_code: str


@dataclass(frozen=True)
class FetchedTranscript:
    """
    The snippets of one caption track, plus where they came from.

    Behaves like a read-only sequence of FetchedTranscriptSnippet.

    Attributes:
        snippets:      The snippets in document order.
        video_id:      The video the track belongs to.
        language:      Human-readable language name (e.g. "English").
        language_code: Language code (e.g. "en", "de-DE").
        is_generated:  True for YouTube's automatic captions and for
                       machine translations.
    """
    snippets: Sequence[FetchedTranscriptSnippet]
    video_id: str
    language: str
    language_code: str
    is_generated: bool

    def __post_init__(self) -> None:
        # Freeze whatever sequence we were given.
        object.__setattr__(self, "snippets", tuple(self.snippets))

    def __iter__(self) -> Iterator[FetchedTranscriptSnippet]:
        return iter(self.snippets)

    def __getitem__(self, index: int) -> FetchedTranscriptSnippet:
        return self.snippets[index]

    def __len__(self) -> int:
        return len(self.snippets)

    def to_raw_data(self) -> list[dict]:
        """Return the snippets as `{"text", "start", "duration"}` dicts, in order."""
        return [
            {
                "text": snippet.text,
                "start": snippet.start,
                "duration": snippet.duration,
            }
            for snippet in self.snippets
        ]
