from __future__ import annotations

import re
from typing import Optional, Tuple
from urllib.parse import urljoin

import httpx
from bs4 import Tag
from loguru import logger

from matcha_watch.errors import FetchError

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Collapse runs of whitespace and strip the ends."""
    return _WHITESPACE.sub(" ", text).strip()


def element_text(element: Optional[Tag]) -> Optional[str]:
    if element is None:
        return None
    text = clean_text(element.get_text(" "))
    return text or None


def resolve_detail_url(base_url: str, href: str) -> str:
    """Resolve a listing link against the scheme and host of the listing page."""
    return urljoin(base_url.rstrip("/") + "/", href)


def split_info_pair(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Split ``"Label: value"`` on the first colon.

    Either side is ``None`` when it is missing or blank, so callers can tell a
    malformed line apart from a real value.
    """
    key, sep, value = text.partition(":")
    key = clean_text(key) or None
    value = clean_text(value) if sep else ""
    return key, value or None


class PageFetcher:
    """Fetch pages as text over HTTP.

    Every failure (transport, non-2xx status, undecodable body) surfaces as a
    single FetchError. No retries; the next scheduled run is the retry.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=timeout or None, follow_redirects=True
        )

    def fetch(self, url: str) -> str:
        logger.debug(f"GET {url}")
        try:
            response = self.client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.text
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e
        except UnicodeDecodeError as e:
            raise FetchError(url, f"Conversion of response to text failed: {e}") from e

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
