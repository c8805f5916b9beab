"""Fetch-extract-cache pipeline behind the preview endpoint."""

import logging
from typing import Optional

from cache import MetadataCache
from extractor import extract_metadata
from fetcher import fetch_html
from models import PreviewOutcome
from urls import hostname, origin

log = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "og-preview"


async def get_preview(
    url: str,
    cache: MetadataCache,
    *,
    use_cache: bool = True,
    request_host: Optional[str] = None,
    service_name: str = DEFAULT_SERVICE_NAME,
    timeout: float = 15,
) -> PreviewOutcome:
    """Resolve url to its metadata mapping.

    Never raises: every failure becomes a degraded outcome with an empty
    mapping. With use_cache=False the cache is not read but is still
    refreshed from the new fetch.
    """
    if not origin(url):
        log.info("Rejecting malformed url %r", url)
        return PreviewOutcome.degraded("invalid_url", source="guard")

    host = hostname(url)
    if request_host and host == request_host:
        return PreviewOutcome.degraded("self_host", source="guard")
    if service_name and service_name in host:
        return PreviewOutcome.degraded("self_service", source="guard")

    if use_cache:
        hit = cache.lookup(url)
        if hit is not None:
            metadata, tier = hit
            log.info("Cache hit (%s): %s", tier, url)
            if not metadata:
                return PreviewOutcome.degraded("cached_failure", source=tier)
            return PreviewOutcome(metadata=metadata, source=tier)

    log.info("Fetching %s", url)
    html = await fetch_html(url, timeout=timeout)
    if html is None:
        outcome = PreviewOutcome.degraded("fetch_failed")
    else:
        metadata = extract_metadata(html, url)
        if metadata:
            outcome = PreviewOutcome(metadata=metadata)
        else:
            outcome = PreviewOutcome.degraded("parse_failed")

    # Failures stay in memory only so they are retried after eviction or restart
    cache.store(url, outcome.metadata, persist=outcome.ok)
    if not outcome.ok:
        log.info("Degraded preview for %s: %s", url, outcome.reason)
    return outcome
