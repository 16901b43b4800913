"""
cli.py — Command-line interface for yt-transcript-fetcher.

Provides the `yt-transcript` command (registered as a console script in
pyproject.toml).  Video ids are processed one after another; a failure for
one video is rendered in the output instead of aborting the batch.

Usage examples:
    yt-transcript dQw4w9WgXcQ
    yt-transcript dQw4w9WgXcQ jNQXAC9IVRw --languages de en
    yt-transcript dQw4w9WgXcQ --languages de,en --format srt
    yt-transcript dQw4w9WgXcQ --list-transcripts
    yt-transcript dQw4w9WgXcQ --translate fr --cookies cookies.txt
"""

from __future__ import annotations

import logging
import sys

import click

from yt_transcript_fetcher.client import YouTubeTranscriptApi
from yt_transcript_fetcher.errors import YouTubeTranscriptApiException
from yt_transcript_fetcher.formatters import FormatterLoader
from yt_transcript_fetcher.models import FetchedTranscript
from yt_transcript_fetcher.proxies import proxy_config_from_options
from yt_transcript_fetcher.transcripts import TranscriptList


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool) -> None:
    """Send library logs to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _split_languages(values: tuple[str, ...]) -> list[str]:
    """
    Flatten repeated --languages values, splitting comma-separated ones.

    ("de,en", "fr") → ["de", "en", "fr"].  Falls back to ["en"] if nothing
    usable was given.
    """
    languages = [
        code.strip()
        for value in values
        for code in value.split(",")
        if code.strip()
    ]
    return languages or ["en"]


def _expand_languages(args: list[str]) -> list[str]:
    """
    Rewrite `--languages de en` as `--languages de --languages en`.

    Every value after --languages up to the next option (or `--`) belongs to
    it, so video ids have to come before the flag.
    """
    expanded: list[str] = []
    collecting = False
    for index, arg in enumerate(args):
        if arg == "--":
            expanded.extend(args[index:])
            return expanded
        if arg == "--languages":
            collecting = True
            expanded.append(arg)
            continue
        if collecting and not arg.startswith("-"):
            if expanded[-1] != "--languages":
                expanded.append("--languages")
            expanded.append(arg)
            continue
        collecting = False
        expanded.append(arg)
    return expanded


class _LanguagesCommand(click.Command):
    """click command whose --languages option takes a space-separated list."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        return super().parse_args(ctx, _expand_languages(args))


def _sanitize_video_ids(video_ids: tuple[str, ...]) -> list[str]:
    # Shells sometimes leave escaping backslashes in ids like \-abc123.
    return [video_id.replace("\\", "") for video_id in video_ids]


def _fetch_transcript(
    transcript_list: TranscriptList,
    languages: list[str],
    exclude_generated: bool,
    exclude_manually_created: bool,
    translate: str | None,
) -> FetchedTranscript:
    if exclude_manually_created:
        transcript = transcript_list.find_generated_transcript(languages)
    elif exclude_generated:
        transcript = transcript_list.find_manually_created_transcript(languages)
    else:
        transcript = transcript_list.find_transcript(languages)

    if translate:
        transcript = transcript.translate(translate)

    return transcript.fetch()


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command(cls=_LanguagesCommand)
@click.argument("video_ids", nargs=-1, required=True, metavar="VIDEO_ID...")
@click.option(
    "--list-transcripts",
    is_flag=True,
    help="List the languages in which transcripts are available for the given videos.",
)
@click.option(
    "--languages",
    multiple=True,
    default=("en",),
    show_default=True,
    help="Language codes in descending priority, space-separated (e.g. "
         "'--languages de en').  Comma-separated values work too.",
)
@click.option(
    "--exclude-generated",
    is_flag=True,
    help="Don't retrieve transcripts that were generated by YouTube.",
)
@click.option(
    "--exclude-manually-created",
    is_flag=True,
    help="Don't retrieve transcripts that were created manually.",
)
@click.option(
    "--format",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(sorted(FormatterLoader.TYPES)),
    default="pretty",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--translate",
    default=None,
    help="Language code to translate the transcript into.",
)
@click.option("--http-proxy", default=None, help="Use the specified HTTP proxy.")
@click.option("--https-proxy", default=None, help="Use the specified HTTPS proxy.")
@click.option(
    "--webshare-proxy-username",
    default=None,
    help="Your Webshare proxy username (see the proxy settings of your Webshare dashboard).",
)
@click.option(
    "--webshare-proxy-password",
    default=None,
    help="Your Webshare proxy password (see the proxy settings of your Webshare dashboard).",
)
@click.option(
    "--cookies",
    type=click.Path(),
    default=None,
    help="Netscape-format cookie file used to authenticate with YouTube.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def main(
    video_ids: tuple[str, ...],
    list_transcripts: bool,
    languages: tuple[str, ...],
    exclude_generated: bool,
    exclude_manually_created: bool,
    fmt: str,
    translate: str | None,
    http_proxy: str | None,
    https_proxy: str | None,
    webshare_proxy_username: str | None,
    webshare_proxy_password: str | None,
    cookies: str | None,
    verbose: bool,
) -> None:
    """
    Retrieve transcripts/subtitles for YouTube videos.

    Works for automatically generated subtitles too and needs no headless
    browser.  VIDEO_ID is the video id, not the URL.
    """
    _setup_logging(verbose)

    # Nothing can match when both kinds are excluded.
    if exclude_generated and exclude_manually_created:
        click.echo("")
        return

    try:
        proxy_config = proxy_config_from_options(
            http_proxy=http_proxy,
            https_proxy=https_proxy,
            webshare_proxy_username=webshare_proxy_username,
            webshare_proxy_password=webshare_proxy_password,
        )
        api = YouTubeTranscriptApi(cookie_path=cookies, proxy_config=proxy_config)
    except YouTubeTranscriptApiException as exc:
        # Setup errors (cookie file, proxy config) affect every video.
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    language_codes = _split_languages(languages)
    results: list[FetchedTranscript | TranscriptList] = []
    exceptions: list[YouTubeTranscriptApiException] = []

    for video_id in _sanitize_video_ids(video_ids):
        try:
            transcript_list = api.list(video_id)
            if list_transcripts:
                results.append(transcript_list)
            else:
                results.append(
                    _fetch_transcript(
                        transcript_list,
                        language_codes,
                        exclude_generated,
                        exclude_manually_created,
                        translate,
                    )
                )
        except YouTubeTranscriptApiException as exc:
            exceptions.append(exc)

    # Errors first, then the content.
    print_sections = [str(exc) for exc in exceptions]
    if results:
        if list_transcripts:
            print_sections.extend(str(transcript_list) for transcript_list in results)
        else:
            print_sections.append(FormatterLoader().load(fmt).format_transcripts(results))

    click.echo("\n\n".join(print_sections))
