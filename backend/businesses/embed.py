# businesses/embed.py
import logging
import re
from urllib.parse import urlsplit, parse_qs, quote

logger = logging.getLogger(__name__)

YOUTUBE_HOSTS = ("youtube.com", "www.youtube.com")
SHORT_HOST = "youtu.be"
EMBED_BASE = "https://www.youtube.com/embed/"

VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def extract_youtube_id(url):
    """
    Pull the video id out of a YouTube link.

    Recognised shapes (host optionally prefixed with ``www.`` for youtube.com):
    ``youtu.be/<id>``, ``youtube.com/watch?v=<id>``, ``youtube.com/embed/<id>``
    and ``youtube.com/v/<id>``. Anything else returns None.
    """
    if not url or not isinstance(url, str):
        return None

    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
    except ValueError as e:
        logger.debug(f"Invalid YouTube URL {url!r}: {e}")
        return None

    if parts.scheme not in ("http", "https"):
        return None

    segments = [segment for segment in parts.path.split("/") if segment]
    video_id = None

    if host == SHORT_HOST:
        if len(segments) == 1:
            video_id = segments[0]
    elif host in YOUTUBE_HOSTS:
        if segments == ["watch"]:
            values = parse_qs(parts.query).get("v")
            video_id = values[0] if values else None
        elif len(segments) == 2 and segments[0] in ("embed", "v"):
            video_id = segments[1]

    if not video_id or not VIDEO_ID_RE.match(video_id):
        return None
    return video_id


def youtube_embed_url(url, origin):
    """
    Normalise a YouTube link into an embeddable player URL.
    Carries the player API flags and the page origin needed for postMessage
    access. Returns None when the link is not a recognised YouTube video.
    """
    video_id = extract_youtube_id(url)
    if video_id is None:
        return None
    return f"{EMBED_BASE}{video_id}?enablejsapi=1&origin={quote(origin or '', safe='')}&rel=0&modestbranding=1"
