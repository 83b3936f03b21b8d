from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from bs4 import BeautifulSoup
from requests.utils import requote_uri


_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&[^;]+;")
_WS_RE = re.compile(r"\s+")
_IMAGE_PATH_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

SUMMARY_TITLE_LIMIT = 100


def sanitize_text(text: Optional[str]) -> str:
    """Drop markup tags and entities, collapse whitespace."""
    if not text:
        return ""
    text = _TAG_RE.sub("", text)
    text = _ENTITY_RE.sub(" ", text)
    return _WS_RE.sub(" ", text).strip()


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """
    Return the canonical form of an http(s) URL, or None for anything else.

    Scheme and host are lowercased, an empty path becomes "/", and characters
    that are not valid in a URL are percent-encoded.
    """
    if not url:
        return None
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    if scheme not in ("http", "https") or not parts.netloc:
        return None
    path = parts.path or "/"
    return requote_uri(urlunsplit((scheme, parts.netloc.lower(), path, parts.query, parts.fragment)))


def is_valid_image_url(url: Optional[str]) -> bool:
    if not url:
        return False
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme.lower() == "https" and bool(parts.netloc) and bool(_IMAGE_PATH_RE.search(parts.path))


def first_img_src(markup: Optional[str]) -> Optional[str]:
    """src of the first <img> element in an HTML fragment."""
    if not markup or "<img" not in markup.lower():
        return None
    soup = BeautifulSoup(markup, "html.parser")
    for img in soup.find_all("img"):
        src = img.get("src")
        if src:
            return src.strip()
    return None


def summarize_title(title: str) -> str:
    if len(title) > SUMMARY_TITLE_LIMIT:
        return title[:SUMMARY_TITLE_LIMIT] + "..."
    return title


def _to_int32(n: int) -> int:
    n &= 0xFFFFFFFF
    return n - 0x100000000 if n & 0x80000000 else n


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_BASE36[r])
    return "".join(reversed(digits))


def article_id(title: str, url: str) -> str:
    """
    Stable article id: the 31-multiplier string hash over lowercase(title + url),
    wrapped to a signed 32-bit integer at every step, base-36 of its absolute value.

    Characters are consumed as UTF-16 code units so that ids match the ones
    computed by browser clients for the same item.
    """
    combined = (title + url).lower()
    data = combined.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32((h << 5) - h + unit)
    return _base36(abs(h))
