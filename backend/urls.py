"""Origin helpers for image and favicon references."""

from urllib.parse import urlsplit


def origin(url: str) -> str:
    """Return scheme://host[:port] for url, or "" when either part is missing."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return ""
    if not parts.scheme or not parts.netloc:
        return ""
    host = parts.netloc.rsplit("@", 1)[-1]  # drop userinfo
    return f"{parts.scheme}://{host}"


def hostname(url: str) -> str:
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def resolve_root_relative(path: str, source_url: str) -> str:
    """Put a /-prefixed path onto the source origin. Other paths are returned as-is."""
    if not path.startswith("/"):
        return path
    base = origin(source_url)
    if not base:
        return path
    return base + path


def resolve_favicon(href: str, source_url: str) -> str:
    """Like resolve_root_relative, but keeps path + query and drops the fragment."""
    if not href.startswith("/"):
        return href
    base = origin(source_url)
    if not base:
        return href
    # "//cdn/x.ico" must stay a path here, so split against a dummy origin
    parts = urlsplit("https://example.com" + href)
    resolved = base + parts.path
    if parts.query:
        resolved += "?" + parts.query
    return resolved


def default_favicon(source_url: str) -> str:
    base = origin(source_url)
    return base + "/favicon.ico" if base else ""
