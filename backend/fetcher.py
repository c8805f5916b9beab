"""Outbound page fetch via httpx."""

import logging
from typing import Optional

import httpx

log = logging.getLogger(__name__)

_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def is_text_response(resp: httpx.Response) -> bool:
    """True for text/*, *html* and *xml* bodies, or when no content-type is sent."""
    ctype = resp.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if not ctype:
        return True
    return ctype.startswith("text/") or "html" in ctype or "xml" in ctype


async def fetch_html(
    url: str, timeout: float = 15, client: Optional[httpx.AsyncClient] = None
) -> str | None:
    """GET url and return the body as text, or None on failure.

    The status code is not checked: error pages carry meta tags too.
    Non-text bodies such as images count as failures.
    """
    try:
        if client is not None:
            resp = await _get(client, url, timeout)
        else:
            async with httpx.AsyncClient() as own_client:
                resp = await _get(own_client, url, timeout)
        if not is_text_response(resp):
            log.warning("Not a text page %s: %s", url, resp.headers.get("content-type"))
            return None
        return resp.text
    except Exception as e:
        log.warning("Failed to fetch %s: %s", url, e)
        return None


async def _get(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    return await client.get(
        url,
        follow_redirects=True,
        timeout=timeout,
        headers={"User-Agent": _USER_AGENT},
    )
