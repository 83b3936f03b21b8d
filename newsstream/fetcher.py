from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import requests

from .config import DEFAULT_RELAY_URL, REQUEST_TIMEOUT
from .exceptions import SourceFetchFailed
from .models import ActiveSource

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml, application/xml, text/xml"
USER_AGENT = "newsstream/0.1 (+feed aggregator)"

# Same set left unescaped by encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def relay_url(feed_url: str, relay: str = DEFAULT_RELAY_URL) -> str:
    """Relay endpoint with the feed URL percent-encoded as its query value."""
    return f"{relay}{quote(feed_url, safe=_URI_COMPONENT_SAFE)}"


def create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({
        "Accept": FEED_ACCEPT,
        "User-Agent": USER_AGENT,
    })
    return session


class RelayClient:
    """Retrieves feed documents through the HTTP relay."""

    def __init__(
        self,
        relay: str = DEFAULT_RELAY_URL,
        *,
        timeout: Optional[float] = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.relay = relay
        self.timeout = timeout
        self.session = session or create_session()

    def fetch(self, source: ActiveSource) -> bytes:
        """
        Return the raw feed document for a source.

        Raises SourceFetchFailed on transport errors and non-2xx responses.
        """
        url = relay_url(source.url, self.relay)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise SourceFetchFailed(f"Timeout fetching {source.name} ({source.url})") from e
        except requests.exceptions.RequestException as e:
            raise SourceFetchFailed(f"Error fetching {source.name} ({source.url}): {e}") from e

        if not 200 <= response.status_code < 300:
            raise SourceFetchFailed(f"HTTP {response.status_code} for {source.name} ({source.url})")

        content_type = response.headers.get("content-type", "").lower()
        if content_type and not any(t in content_type for t in ("xml", "rss", "atom")):
            logger.debug("Unexpected content type %r for %s", content_type, source.name)
        return response.content

    def close(self) -> None:
        self.session.close()
