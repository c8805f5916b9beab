"""Pydantic models for the og-preview service."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class MetaKey(str, Enum):
    """Tag keys the card builder knows about. Other og:/twitter: keys pass through."""

    OG_TITLE = "og:title"
    OG_DESCRIPTION = "og:description"
    OG_IMAGE = "og:image"
    OG_SITE_NAME = "og:site_name"
    TWITTER_TITLE = "twitter:title"
    TWITTER_DESCRIPTION = "twitter:description"
    TWITTER_IMAGE_SRC = "twitter:image:src"
    TWITTER_SITE = "twitter:site"
    TITLE = "title"
    FAVICON = "favicon"


class PreviewOutcome(BaseModel):
    """Result of the fetch pipeline.

    ``reason`` is None for a real extraction; otherwise it names why the
    mapping is empty (invalid_url, self_host, self_service, fetch_failed,
    parse_failed, or cached_failure when an earlier failure is served from
    the cache). ``source`` is where the mapping came from: memory, store,
    fetch, or guard for the URL checks that skip the network. Both kinds
    render the same card.
    """

    metadata: dict[str, str] = {}
    reason: Optional[str] = None
    source: str = "fetch"  # memory | store | fetch | guard

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def degraded(cls, reason: str, source: str = "fetch") -> "PreviewOutcome":
        return cls(metadata={}, reason=reason, source=source)


class Card(BaseModel):
    url: str
    title: str = ""
    description: str = ""
    image: str = ""
    site: str = ""
    favicon: Optional[str] = None
