"""
transcripts.py — Transcript discovery and selection.

The pipeline for one video:

    watch page HTML
      → extract_js_var("ytInitialPlayerResponse")   (parsers)
      → assert_playability()                        (typed availability errors)
      → TranscriptList.build()                      (manual / generated index)
      → TranscriptList.find_transcript()            (caller picks a track)
      → Transcript.fetch()                          (track XML → snippets)

TranscriptListFetcher drives the first three steps, handles the EU consent
interstitial and retries when YouTube blocks the request.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from html import unescape
from typing import Any, Iterable, Iterator, Mapping

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError

from yt_transcript_fetcher.errors import (
    AgeRestricted,
    FailedToCreateConsentCookie,
    InvalidVideoId,
    IpBlocked,
    NoTranscriptFound,
    NotTranslatable,
    RequestBlocked,
    TranscriptsDisabled,
    TranslationLanguageNotAvailable,
    VideoUnavailable,
    VideoUnplayable,
    YouTubeDataUnparsable,
)
from yt_transcript_fetcher.models import FetchedTranscript, TranslationLanguage
from yt_transcript_fetcher.parsers import TranscriptParser, extract_js_var
from yt_transcript_fetcher.proxies import ProxyConfig
from yt_transcript_fetcher.settings import (
    CONSENT_FORM_MARKER,
    PLAYER_RESPONSE_VAR,
    RECAPTCHA_MARKER,
    WATCH_URL,
)
from yt_transcript_fetcher.transport import HttpContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Transcript — one caption track, not yet fetched
# ---------------------------------------------------------------------------

class Transcript:
    """
    Descriptor for one caption track of a video.

    Nothing is downloaded until fetch() is called.  Instances are never
    mutated; translate() builds a new descriptor.

    Attributes:
        video_id:              The video this track belongs to.
        language:              Human-readable language name.
        language_code:         Language code used for lookups.
        is_generated:          True for automatic captions / translations.
        translation_languages: Languages YouTube can translate this track
                               into.  Empty if it isn't translatable.
    """

    def __init__(
        self,
        http: HttpContext,
        video_id: str,
        url: str,
        language: str,
        language_code: str,
        is_generated: bool,
        translation_languages: Iterable[TranslationLanguage],
    ) -> None:
        self._http = http
        self._url = url
        self.video_id = video_id
        self.language = language
        self.language_code = language_code
        self.is_generated = is_generated
        self.translation_languages = tuple(translation_languages)
        self._translation_languages_dict = {
            translation_language.language_code: translation_language.language
            for translation_language in self.translation_languages
        }

    def fetch(self, preserve_formatting: bool = False) -> FetchedTranscript:
        """
        Download and parse this track.

        Makes exactly one HTTP request; failures propagate without retrying.

        Args:
            preserve_formatting: Keep inline formatting tags such as <i> and <b>.

        Raises:
            YouTubeDataUnparsable: The track document isn't valid XML.
            IpBlocked, YouTubeRequestFailed: See HttpContext.get().
        """
        raw_data = self._http.get(self._url, self.video_id)
        try:
            snippets = TranscriptParser(preserve_formatting=preserve_formatting).parse(raw_data)
        except (ParseError, DefusedXmlException) as exc:
            raise YouTubeDataUnparsable(self.video_id) from exc

        return FetchedTranscript(
            snippets=snippets,
            video_id=self.video_id,
            language=self.language,
            language_code=self.language_code,
            is_generated=self.is_generated,
        )

    @property
    def is_translatable(self) -> bool:
        return len(self.translation_languages) > 0

    def translate(self, language_code: str) -> Transcript:
        """
        Return a descriptor for this track machine-translated into `language_code`.

        Raises:
            NotTranslatable:                 This track can't be translated.
            TranslationLanguageNotAvailable: `language_code` isn't offered.
        """
        if not self.is_translatable:
            raise NotTranslatable(self.video_id)

        if language_code not in self._translation_languages_dict:
            raise TranslationLanguageNotAvailable(self.video_id)

        return Transcript(
            self._http,
            self.video_id,
            f"{self._url}&tlang={language_code}",
            self._translation_languages_dict[language_code],
            language_code,
            True,
            [],
        )

    def __str__(self) -> str:
        translatable = "[TRANSLATABLE]" if self.is_translatable else ""
        return f'{self.language_code} ("{self.language}"){translatable}'

    def __repr__(self) -> str:
        return (
            f"Transcript(video_id={self.video_id!r}, language_code={self.language_code!r}, "
            f"is_generated={self.is_generated!r})"
        )


# ---------------------------------------------------------------------------
# TranscriptList — every track of a video, indexed by language code
# ---------------------------------------------------------------------------

def _text_of(label: Mapping[str, Any]) -> str:
    """Read a YouTube text label, which is either {"simpleText"} or {"runs": [...]}."""
    if "simpleText" in label:
        return label["simpleText"]
    return "".join(run.get("text", "") for run in label.get("runs", []))


class TranscriptList:
    """
    All caption tracks available for one video.

    Manually created and generated tracks live in two separate dicts keyed by
    language code, so a code is never in both.  Iterating yields the manual
    tracks first, then the generated ones.
    """

    def __init__(
        self,
        video_id: str,
        manually_created_transcripts: Mapping[str, Transcript],
        generated_transcripts: Mapping[str, Transcript],
        translation_languages: Iterable[TranslationLanguage],
    ) -> None:
        self.video_id = video_id
        self._manually_created_transcripts = dict(manually_created_transcripts)
        self._generated_transcripts = dict(generated_transcripts)
        self._translation_languages = tuple(translation_languages)

    @staticmethod
    def build(http: HttpContext, video_id: str, captions_json: Mapping[str, Any]) -> TranscriptList:
        """
        Build the list from a `playerCaptionsTracklistRenderer` object.

        Tracks with kind "asr" are generated, everything else is manually
        created.  Only tracks flagged `isTranslatable` get the video's
        translation languages.

        Raises:
            TranscriptsDisabled: There are no caption tracks.
        """
        caption_tracks = captions_json.get("captionTracks") or []
        if not caption_tracks:
            raise TranscriptsDisabled(video_id)

        translation_languages = [
            TranslationLanguage(
                language=_text_of(translation_language.get("languageName", {})),
                language_code=translation_language["languageCode"],
            )
            for translation_language in captions_json.get("translationLanguages", [])
        ]

        manually_created_transcripts: dict[str, Transcript] = {}
        generated_transcripts: dict[str, Transcript] = {}

        for caption in caption_tracks:
            is_generated = caption.get("kind", "") == "asr"
            transcript_dict = generated_transcripts if is_generated else manually_created_transcripts
            transcript_dict[caption["languageCode"]] = Transcript(
                http,
                video_id,
                caption["baseUrl"].replace("&fmt=srv3", ""),
                _text_of(caption.get("name", {})),
                caption["languageCode"],
                is_generated,
                translation_languages if caption.get("isTranslatable", False) else [],
            )

        logger.debug(
            "Video %s: %d manually created, %d generated tracks",
            video_id, len(manually_created_transcripts), len(generated_transcripts),
        )
        return TranscriptList(
            video_id,
            manually_created_transcripts,
            generated_transcripts,
            translation_languages,
        )

    def __iter__(self) -> Iterator[Transcript]:
        yield from self._manually_created_transcripts.values()
        yield from self._generated_transcripts.values()

    @property
    def translation_languages(self) -> tuple[TranslationLanguage, ...]:
        return self._translation_languages

    def find_transcript(self, language_codes: Iterable[str]) -> Transcript:
        """
        Find a track for the first of `language_codes` that has one.

        Within a language, a manually created track is preferred over a
        generated one.

        Args:
            language_codes: Language codes in descending priority.

        Raises:
            NoTranscriptFound: None of the codes has a track.
        """
        return self._find_transcript(
            language_codes,
            [self._manually_created_transcripts, self._generated_transcripts],
        )

    def find_generated_transcript(self, language_codes: Iterable[str]) -> Transcript:
        """Like find_transcript(), but only considers generated tracks."""
        return self._find_transcript(language_codes, [self._generated_transcripts])

    def find_manually_created_transcript(self, language_codes: Iterable[str]) -> Transcript:
        """Like find_transcript(), but only considers manually created tracks."""
        return self._find_transcript(language_codes, [self._manually_created_transcripts])

    def _find_transcript(
        self,
        language_codes: Iterable[str],
        transcript_dicts: list[dict[str, Transcript]],
    ) -> Transcript:
        language_codes = list(language_codes)
        for language_code in language_codes:
            for transcript_dict in transcript_dicts:
                if language_code in transcript_dict:
                    return transcript_dict[language_code]

        raise NoTranscriptFound(self.video_id, language_codes, self)

    def __str__(self) -> str:
        def describe(items: Iterable[Any]) -> str:
            description = "\n".join(f" - {item}" for item in items)
            return description or "None"

        translation_languages = (
            f'{tl.language_code} ("{tl.language}")' for tl in self._translation_languages
        )
        return (
            f"For this video ({self.video_id}) transcripts are available in the "
            "following languages:\n\n"
            "(MANUALLY CREATED)\n"
            f"{describe(self._manually_created_transcripts.values())}\n\n"
            "(GENERATED)\n"
            f"{describe(self._generated_transcripts.values())}\n\n"
            "(TRANSLATION LANGUAGES)\n"
            f"{describe(translation_languages)}"
        )


# ---------------------------------------------------------------------------
# Availability classification
# ---------------------------------------------------------------------------

class _PlayabilityStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"
    LOGIN_REQUIRED = "LOGIN_REQUIRED"


class _PlayabilityFailedReason(str, Enum):
    BOT_DETECTED = "Sign in to confirm you're not a bot"
    AGE_RESTRICTED = "Sign in to confirm your age"
    VIDEO_UNAVAILABLE = "Video unavailable"


def assert_playability(playability_status_data: Mapping[str, Any] | None, video_id: str) -> None:
    """
    Raise the matching error unless the video's playability status is OK.

    A missing status counts as OK.  LOGIN_REQUIRED can mean bot detection or
    an age gate; ERROR with "Video unavailable" means the id doesn't exist (or
    was a URL).  Any other non-OK status is reported as VideoUnplayable with
    YouTube's reason and the detail lines from its error screen.

    Raises:
        RequestBlocked, AgeRestricted, InvalidVideoId, VideoUnavailable,
        VideoUnplayable
    """
    playability_status_data = playability_status_data or {}
    status = playability_status_data.get("status")
    if not status or status == _PlayabilityStatus.OK:
        return

    reason = playability_status_data.get("reason")
    if status == _PlayabilityStatus.LOGIN_REQUIRED and reason:
        if _PlayabilityFailedReason.BOT_DETECTED.value in reason:
            raise RequestBlocked(video_id)
        if _PlayabilityFailedReason.AGE_RESTRICTED.value in reason:
            raise AgeRestricted(video_id)

    if (
        status == _PlayabilityStatus.ERROR
        and reason
        and _PlayabilityFailedReason.VIDEO_UNAVAILABLE.value in reason
    ):
        if video_id.startswith(("http://", "https://")):
            raise InvalidVideoId(video_id)
        raise VideoUnavailable(video_id)

    error_screen = playability_status_data.get("errorScreen") or {}
    renderer = error_screen.get("playerErrorMessageRenderer") or {}
    runs = (renderer.get("subreason") or {}).get("runs") or []
    raise VideoUnplayable(video_id, reason, [run.get("text", "") for run in runs])


# ---------------------------------------------------------------------------
# TranscriptListFetcher — watch page → TranscriptList
# ---------------------------------------------------------------------------

_CONSENT_VALUE_PATTERN = re.compile(r'name="v" value="(.*?)"')


class TranscriptListFetcher:
    """
    Fetch the TranscriptList of a video from its watch page.

    Args:
        http:         The HTTP context every request goes through.
        proxy_config: The proxy config in use, if any.  Its
                      retries_when_blocked bounds how often a blocked
                      attempt is repeated, and it is attached to the final
                      RequestBlocked so the message can mention proxies.
    """

    def __init__(self, http: HttpContext, proxy_config: ProxyConfig | None = None) -> None:
        self._http = http
        self._proxy_config = proxy_config

    def fetch(self, video_id: str) -> TranscriptList:
        """
        Build the TranscriptList for `video_id`.

        The whole discovery sequence is attempted up to
        `proxy_config.retries_when_blocked` times while YouTube keeps blocking
        the request (at least once).  Any other failure is raised immediately.

        Raises:
            RequestBlocked / IpBlocked: Still blocked after the last attempt.
            CouldNotRetrieveTranscript: Any other pipeline failure.
        """
        retries = self._proxy_config.retries_when_blocked if self._proxy_config else 0
        attempt = 0
        while True:
            try:
                return self._fetch_once(video_id)
            except RequestBlocked as exc:
                attempt += 1
                if attempt >= retries:
                    raise exc.with_proxy_config(self._proxy_config) from exc
                logger.warning(
                    "Request for video %s was blocked (attempt %d of %d), retrying",
                    video_id, attempt, retries,
                )

    def _fetch_once(self, video_id: str) -> TranscriptList:
        html, http = self._fetch_video_html(video_id)
        player_response = self._extract_player_response(html, video_id)
        assert_playability(player_response.get("playabilityStatus"), video_id)
        captions_json = (
            (player_response.get("captions") or {}).get("playerCaptionsTracklistRenderer") or {}
        )
        return TranscriptList.build(http, video_id, captions_json)

    def _extract_player_response(self, html: str, video_id: str) -> dict[str, Any]:
        try:
            return extract_js_var(html, PLAYER_RESPONSE_VAR, video_id)
        except YouTubeDataUnparsable:
            if RECAPTCHA_MARKER in html:
                raise IpBlocked(video_id)
            raise

    def _fetch_video_html(self, video_id: str) -> tuple[str, HttpContext]:
        """
        Fetch the watch page, getting past the consent interstitial if needed.

        Returns the page together with the HTTP context to use for the rest
        of this video: the original one, or one that carries the consent
        cookie.
        """
        http = self._http
        html = self._fetch_html(http, video_id)
        if CONSENT_FORM_MARKER in html:
            logger.debug("Consent interstitial for video %s, sending consent cookie", video_id)
            http = self._with_consent_cookie(http, html, video_id)
            html = self._fetch_html(http, video_id)
            if CONSENT_FORM_MARKER in html:
                raise FailedToCreateConsentCookie(video_id)
        return html, http

    @staticmethod
    def _with_consent_cookie(http: HttpContext, html: str, video_id: str) -> HttpContext:
        match = _CONSENT_VALUE_PATTERN.search(html)
        if match is None:
            raise FailedToCreateConsentCookie(video_id)
        return http.with_cookie("CONSENT", f"YES+{match.group(1)}")

    @staticmethod
    def _fetch_html(http: HttpContext, video_id: str) -> str:
        logger.debug("Fetching watch page for video %s", video_id)
        return unescape(http.get(WATCH_URL.format(video_id=video_id), video_id))
