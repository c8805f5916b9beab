"""Open Graph / Twitter-card extraction from an lxml HTML tree."""

import logging

import lxml.html

from urls import default_favicon, resolve_favicon

log = logging.getLogger(__name__)


def _parse(html: str):
    try:
        return lxml.html.document_fromstring(html)
    except ValueError:
        # lxml refuses str input that carries an XML encoding declaration
        return lxml.html.document_fromstring(html.encode("utf-8"))


def extract_metadata(html: str, url: str) -> dict[str, str]:
    """Parse html and collect og:*, twitter:*, title and favicon.

    Fragments are wrapped in a full document. Returns {} when nothing can be
    parsed. Never raises.
    """
    if not html:
        return {}
    try:
        tree = _parse(html)
    except Exception as e:
        log.info("Could not parse %s: %s", url, e)
        return {}

    metadata: dict[str, str] = {}

    for meta in tree.iter("meta"):
        content = meta.get("content")
        if content is None:
            continue
        # A tag carrying both attributes contributes two entries
        name = meta.get("name")
        if name and name.startswith("twitter:"):
            metadata[name] = content
        prop = meta.get("property")
        if prop and prop.startswith("og:"):
            metadata[prop] = content

    for title in tree.iter("title"):
        metadata["title"] = title.text_content()

    metadata["favicon"] = _find_favicon(tree, url)
    return metadata


def _find_favicon(tree, url: str) -> str:
    href = _first_link_href(tree, "icon")
    if not href:
        href = _first_link_href(tree, "shortcut icon")  # deprecated form
    if not href:
        return default_favicon(url)
    return resolve_favicon(href, url)


def _first_link_href(tree, rel: str) -> str | None:
    for link in tree.iter("link"):
        if link.get("rel") == rel:
            return link.get("href")
    return None
