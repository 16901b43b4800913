"""
parsers.py — Turn raw YouTube responses into Python data.

    extract_js_var()    Pull a JSON object assigned to a page-global
                        `var <name> = {...}` out of watch-page HTML.
    TranscriptParser    Convert a timed-text XML document into
                        FetchedTranscriptSnippet objects.

Neither parser tries to recover from malformed input: a payload that can't
be parsed exactly is a hard failure for the caller to surface.
"""

from __future__ import annotations

import json
import re
from html import unescape
from typing import Any

from defusedxml import ElementTree

from yt_transcript_fetcher.errors import YouTubeDataUnparsable
from yt_transcript_fetcher.models import FetchedTranscriptSnippet


# ---------------------------------------------------------------------------
# Embedded JavaScript variables
# ---------------------------------------------------------------------------

def _find_object_end(text: str, start: int) -> int | None:
    """
    Return the index just past the `}` that closes the `{` at `start`.

    Braces inside double-quoted strings don't count, and a backslash-escaped
    quote doesn't end a string.  Returns None if the object never closes.
    """
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1

    return None


def extract_js_var(html: str, var_name: str, video_id: str) -> dict[str, Any]:
    """
    Extract the JSON object assigned to `var <var_name>` in a page.

    A generic HTML parser can't tell where the object ends (it sits inside a
    <script> body followed by more code), so this does a single forward scan
    that balances braces while skipping over string literals.

    Args:
        html:     The raw page markup.
        var_name: The JavaScript variable name, e.g. "ytInitialPlayerResponse".
        video_id: Only used to build the error.

    Returns:
        The decoded JSON object.

    Raises:
        YouTubeDataUnparsable: The variable isn't in the page, no `{` follows
            it, the braces never balance, or the slice isn't valid JSON.
    """
    _, marker, remainder = html.partition(f"var {var_name}")
    if not marker:
        raise YouTubeDataUnparsable(video_id)

    start = remainder.find("{")
    if start == -1:
        raise YouTubeDataUnparsable(video_id)

    end = _find_object_end(remainder, start)
    if end is None:
        raise YouTubeDataUnparsable(video_id)

    try:
        return json.loads(remainder[start:end])
    except ValueError as exc:
        raise YouTubeDataUnparsable(video_id) from exc


# ---------------------------------------------------------------------------
# Timed-text XML
# ---------------------------------------------------------------------------

# Inline tags kept when formatting is preserved.
FORMATTING_TAGS = ("strong", "em", "b", "i", "mark", "small", "del", "ins", "sub", "sup")


def _parse_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


class TranscriptParser:
    """
    Parse a timed-text document into snippets.

    The document looks like:
        <transcript>
          <text start="0.0" dur="1.54">Hey there</text>
          ...
        </transcript>

    Markup inside a caption arrives HTML-escaped.  It is unescaped and then
    stripped with a tag-exclusion regex: every tag when formatting isn't
    preserved, every tag except FORMATTING_TAGS when it is.
    """

    def __init__(self, preserve_formatting: bool = False) -> None:
        self._html_regex = self._get_html_regex(preserve_formatting)

    @staticmethod
    def _get_html_regex(preserve_formatting: bool) -> re.Pattern[str]:
        if preserve_formatting:
            formats_regex = "|".join(FORMATTING_TAGS)
            return re.compile(rf"<(?!/?(?:{formats_regex})\b)[^>]*>", re.IGNORECASE)
        return re.compile(r"<[^>]*>", re.IGNORECASE)

    def parse(self, raw_data: str) -> list[FetchedTranscriptSnippet]:
        """
        Parse `raw_data` into FetchedTranscriptSnippet objects in document order.

        Elements without text are skipped.  A missing or non-numeric `start`
        becomes 0.0 and a missing or non-numeric `dur` becomes 0.0.  Timing
        is passed through as-is: no sorting, no deduplication.

        Raises:
            xml.etree.ElementTree.ParseError: The document isn't well-formed.
            defusedxml.DefusedXmlException:   The document uses forbidden
                XML constructs (entity expansion, external references).
        """
        root = ElementTree.fromstring(raw_data)
        snippets: list[FetchedTranscriptSnippet] = []
        for element in root.iter("text"):
            text = "".join(element.itertext())
            if not text:
                continue
            snippets.append(
                FetchedTranscriptSnippet(
                    text=self._html_regex.sub("", unescape(text)),
                    start=_parse_float(element.get("start"), 0.0),
                    duration=_parse_float(element.get("dur"), 0.0),
                )
            )
        return snippets
