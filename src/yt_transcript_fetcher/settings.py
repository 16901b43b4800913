"""
settings.py — URL templates and page markers used by the fetch pipeline.

Everything here is a plain constant.  The pipeline has no config files or
environment variables; callers configure it through constructor / CLI
parameters (cookie path, proxy config, languages).
"""

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

# The watch page embeds the player configuration as `var ytInitialPlayerResponse`.
PLAYER_RESPONSE_VAR = "ytInitialPlayerResponse"

# Served instead of the watch page in the EU until consent is given.
CONSENT_FORM_MARKER = 'action="https://consent.youtube.com/s"'

# Present on the page YouTube serves when it wants a CAPTCHA solved.
RECAPTCHA_MARKER = 'class="g-recaptcha"'

# Headers applied to every session built by transport.build_session().
DEFAULT_HEADERS = {
    "Accept-Language": "en-US",
}

# Only cookies for this domain count when validating a cookie file.
COOKIE_DOMAIN = "youtube.com"

WEBSHARE_URL = "https://www.webshare.io/"
