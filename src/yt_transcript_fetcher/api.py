"""
api.py — FastAPI REST API for yt-transcript-fetcher.

Endpoints:
    GET /transcript/{video_id}    — Fetch a transcript (JSON or rendered text).
    GET /transcripts/{video_id}   — List the tracks available for a video.
    GET /health                   — Simple health-check for load balancers / monitoring.

Run with:
    uvicorn yt_transcript_fetcher.api:app

The global exception handler catches any YouTubeTranscriptApiException and
converts it to the appropriate HTTP response using the status code stored on
the exception.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from yt_transcript_fetcher.errors import YouTubeTranscriptApiException
from yt_transcript_fetcher.extractor import extract, list_transcripts, parse_video_id

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Transcript Fetcher API",
    description="Fetch YouTube video transcripts as structured JSON or as "
                "plain text, SRT or WebVTT subtitles.",
    version="0.1.0",
)


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(YouTubeTranscriptApiException)
async def transcript_error_handler(request: Request, exc: YouTubeTranscriptApiException) -> JSONResponse:
    """
    Translate any library exception into an HTTP error response.

    The http_status on the exception drives the response code, so endpoint
    code just raises the library exception and this handler does the rest.
    """
    logger.debug("Request %s failed: %s", request.url.path, type(exc).__name__)
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

def _split_languages(lang: str) -> list[str] | None:
    languages = [code.strip() for code in lang.split(",") if code.strip()]
    return languages or None


# response_model=None is required because we return different Response subclasses
# (PlainTextResponse or JSONResponse) depending on the format param.
@app.get("/transcript/{video_id}", response_model=None)
def get_transcript(
    video_id: str,
    format: str = Query(
        default="json",
        description="Output format: 'json' for structured data, or 'pretty', 'text', "
                    "'srt', 'webvtt' for rendered text.",
        pattern="^(json|pretty|text|srt|webvtt)$",
    ),
    lang: str = Query(
        default="",
        description="Comma-separated language codes in priority order (e.g. 'de,en'). Empty defaults to English.",
    ),
    translate: str = Query(
        default="",
        description="Optional language code to machine-translate the transcript into.",
    ),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single YouTube video.

    **video_id** is the 11-character YouTube video identifier
    (e.g. `dQw4w9WgXcQ`).

    With `format=json` (default) the response is a JSON object with
    `video_id`, `language`, `language_code`, `is_generated`,
    `snippet_count` and a `snippets` array of `text`, `start`, `duration`.
    Every other format is returned as plain text.
    """
    # extract() may raise library exceptions; the global handler
    # will convert those into the correct HTTP error response.
    result = extract(
        video_id,
        languages=_split_languages(lang),
        fmt=format,
        translate=translate or None,
    )

    if isinstance(result, dict):
        return JSONResponse(content=result)
    return PlainTextResponse(content=result)


@app.get("/transcripts/{video_id}")
def get_transcript_list(video_id: str) -> JSONResponse:
    """
    List the manually created and generated tracks of a video, plus the
    languages they can be translated into.
    """
    return JSONResponse(content=list_transcripts(parse_video_id(video_id)))


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------

@app.get("/health")
async def health() -> dict:
    """
    Minimal health-check endpoint.

    Returns HTTP 200 with {"status": "ok"}.
    """
    return {"status": "ok"}
