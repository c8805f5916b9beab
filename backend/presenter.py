"""HTML rendering for preview cards and the help page."""

import html
import re
from pathlib import Path
from urllib.parse import quote

from models import Card, MetaKey
from urls import hostname, resolve_root_relative

TEMPLATE_DIR = Path(__file__).parent / "templates"

_FIELD = re.compile(r"\{\{(\w+)\}\}")
# Characters encodeURI leaves alone, besides the ones quote() always keeps
_URI_SAFE = ";,/?:@&=+$!*'()#"


def _first(metadata: dict[str, str], *keys: MetaKey) -> str:
    for key in keys:
        value = metadata.get(key.value)
        if value:
            return value
    return ""


def build_card(metadata: dict[str, str], url: str) -> Card:
    """Pick display fields from the raw mapping. Missing keys become ""."""
    image = _first(metadata, MetaKey.OG_IMAGE, MetaKey.TWITTER_IMAGE_SRC)
    return Card(
        url=url,
        title=_first(metadata, MetaKey.OG_TITLE, MetaKey.TWITTER_TITLE, MetaKey.TITLE),
        description=_first(metadata, MetaKey.OG_DESCRIPTION, MetaKey.TWITTER_DESCRIPTION),
        image=resolve_root_relative(image, url),
        site=_first(metadata, MetaKey.OG_SITE_NAME, MetaKey.TWITTER_SITE),
        favicon=metadata.get(MetaKey.FAVICON.value),
    )


def _template(name: str) -> str:
    return (TEMPLATE_DIR / name).read_text(encoding="utf-8")


def _fill(template: str, values: dict[str, str]) -> str:
    """Substitute {{name}} fields in one pass. Values must already be escaped."""
    return _FIELD.sub(lambda m: values.get(m.group(1), ""), template)


def _page(body: str, title: str = "") -> str:
    page = _template("page.html")
    page = page.replace("<!--TITLE-->", f"<title>{html.escape(title)}</title>" if title else "")
    return page.replace("<!--BODY-->", body)


def _href(url: str) -> str:
    return html.escape(quote(url, safe=_URI_SAFE))


def render_large(card: Card) -> str:
    image = ""
    if card.image:
        image = (
            f'<img src="{html.escape(card.image)}" class="card-img-top" '
            f'alt="{html.escape(card.site)}" style="max-width: 100%" />'
        )
    title = ""
    if card.title:
        title = (
            '<div class="card-title" style="max-width: 500px; white-space: nowrap; '
            f'overflow: hidden; text-overflow: ellipsis;">{html.escape(card.title)}</div>'
        )
    return _fill(
        _template("card_large.html"),
        {
            "image": image,
            "title": title,
            "href": _href(card.url),
            "host": html.escape(hostname(card.url)),
        },
    )


def render_small(card: Card) -> str:
    return _fill(
        _template("card_small.html"),
        {
            "favicon": html.escape(card.favicon or ""),
            "title": html.escape(card.title),
            "description": html.escape(card.description),
            "href": _href(card.url),
            "host": html.escape(hostname(card.url)),
        },
    )


def render_preview(metadata: dict[str, str], url: str, size: str | None) -> str:
    """Full iframe document for url. size == "small" selects the compact card."""
    card = build_card(metadata, url)
    body = render_small(card) if size == "small" else render_large(card)
    return _page(body)


def render_landing(base_url: str) -> str:
    large_url = base_url + "/?size=large&url=https://github.com"
    small_url = base_url + "/?size=small&url=https://github.com"
    large_iframe = f'<iframe src="{html.escape(large_url)}" height="350" width="500"></iframe>'
    small_iframe = f'<iframe src="{html.escape(small_url)}" height="150" style="width: 100%;"></iframe>'
    body = _fill(
        _template("landing.html"),
        {
            "large_url": html.escape(large_url),
            "small_url": html.escape(small_url),
            "large_iframe_code": html.escape(large_iframe),
            "small_iframe_code": html.escape(small_iframe),
            "large_iframe": large_iframe,
            "small_iframe": small_iframe,
        },
    )
    return _page(body, title="Open Graph Preview")


def render_not_found() -> str:
    return _page("<div><h1>Page not found</h1></div>")
