"""
formatters.py — Render FetchedTranscript objects as text.

    pretty   Indented JSON of the raw snippet data.
    json     Compact JSON of the raw snippet data.
    text     Caption text only, one snippet per line.
    srt      SubRip subtitles.
    webvtt   WebVTT subtitles.

FormatterLoader maps these names to formatter instances for the CLI and the
REST API.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Sequence

from yt_transcript_fetcher.errors import UnknownFormatterType
from yt_transcript_fetcher.models import FetchedTranscript, FetchedTranscriptSnippet


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------

class Formatter(ABC):
    """Turns one or more transcripts into a single string."""

    @abstractmethod
    def format_transcript(self, transcript: FetchedTranscript) -> str:
        ...

    @abstractmethod
    def format_transcripts(self, transcripts: Sequence[FetchedTranscript]) -> str:
        ...


# ---------------------------------------------------------------------------
# JSON formatters
# ---------------------------------------------------------------------------

class PrettyPrintFormatter(Formatter):
    def format_transcript(self, transcript: FetchedTranscript) -> str:
        return json.dumps(transcript.to_raw_data(), indent=2, ensure_ascii=False)

    def format_transcripts(self, transcripts: Sequence[FetchedTranscript]) -> str:
        return json.dumps(
            [transcript.to_raw_data() for transcript in transcripts],
            indent=2,
            ensure_ascii=False,
        )


class JSONFormatter(Formatter):
    def format_transcript(self, transcript: FetchedTranscript) -> str:
        return json.dumps(transcript.to_raw_data(), ensure_ascii=False)

    def format_transcripts(self, transcripts: Sequence[FetchedTranscript]) -> str:
        return json.dumps(
            [transcript.to_raw_data() for transcript in transcripts],
            ensure_ascii=False,
        )


# ---------------------------------------------------------------------------
# Text formatters
# ---------------------------------------------------------------------------

class TextFormatter(Formatter):
    """Just the spoken words: one line per snippet, transcripts separated by two blank lines."""

    def format_transcript(self, transcript: FetchedTranscript) -> str:
        return "\n".join(snippet.text for snippet in transcript)

    def format_transcripts(self, transcripts: Sequence[FetchedTranscript]) -> str:
        return "\n\n\n".join(self.format_transcript(transcript) for transcript in transcripts)


class _TimedTextFormatter(TextFormatter):
    """
    Shared logic for subtitle formats made of numbered / timed cues.

    A cue ends at start + duration, unless the next snippet starts earlier,
    in which case it ends where the next one begins so cues never overlap.
    """

    @abstractmethod
    def _format_timestamp(self, hours: int, mins: int, secs: int, ms: int) -> str:
        ...

    @abstractmethod
    def _format_transcript_header(self, lines: Sequence[str]) -> str:
        ...

    @abstractmethod
    def _format_cue(self, index: int, time_text: str, snippet: FetchedTranscriptSnippet) -> str:
        ...

    def _seconds_to_timestamp(self, time: float) -> str:
        total_ms = round(float(time) * 1000)
        total_secs, ms = divmod(total_ms, 1000)
        hours, remainder = divmod(total_secs, 3600)
        mins, secs = divmod(remainder, 60)
        return self._format_timestamp(hours, mins, secs, ms)

    def format_transcript(self, transcript: FetchedTranscript) -> str:
        snippets = list(transcript)
        lines = []
        for index, snippet in enumerate(snippets):
            end = snippet.start + snippet.duration
            if index < len(snippets) - 1 and snippets[index + 1].start < end:
                end = snippets[index + 1].start
            time_text = f"{self._seconds_to_timestamp(snippet.start)} --> {self._seconds_to_timestamp(end)}"
            lines.append(self._format_cue(index, time_text, snippet))
        return self._format_transcript_header(lines)


class SRTFormatter(_TimedTextFormatter):
    def _format_timestamp(self, hours: int, mins: int, secs: int, ms: int) -> str:
        return f"{hours:02d}:{mins:02d}:{secs:02d},{ms:03d}"

    def _format_transcript_header(self, lines: Sequence[str]) -> str:
        return "\n\n".join(lines) + "\n"

    def _format_cue(self, index: int, time_text: str, snippet: FetchedTranscriptSnippet) -> str:
        return f"{index + 1}\n{time_text}\n{snippet.text}"


class WebVTTFormatter(_TimedTextFormatter):
    def _format_timestamp(self, hours: int, mins: int, secs: int, ms: int) -> str:
        return f"{hours:02d}:{mins:02d}:{secs:02d}.{ms:03d}"

    def _format_transcript_header(self, lines: Sequence[str]) -> str:
        return "WEBVTT\n\n" + "\n\n".join(lines) + "\n"

    def _format_cue(self, index: int, time_text: str, snippet: FetchedTranscriptSnippet) -> str:
        return f"{time_text}\n{snippet.text}"


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

class FormatterLoader:
    """Look up a formatter by its CLI / query-parameter name."""

    TYPES: dict[str, type[Formatter]] = {
        "json": JSONFormatter,
        "pretty": PrettyPrintFormatter,
        "text": TextFormatter,
        "webvtt": WebVTTFormatter,
        "srt": SRTFormatter,
    }

    def load(self, formatter_type: str = "pretty") -> Formatter:
        """
        Return a new formatter instance for `formatter_type`.

        Raises:
            UnknownFormatterType: The name isn't one of TYPES.
        """
        if formatter_type not in self.TYPES:
            raise UnknownFormatterType(formatter_type, self.TYPES)
        return self.TYPES[formatter_type]()
