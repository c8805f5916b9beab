"""og-preview FastAPI backend: embeddable link preview cards."""

import json
import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cache import MetadataCache, SqliteStore
from presenter import render_landing, render_not_found, render_preview
from preview import get_preview

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
log = logging.getLogger(__name__)

# Config
ROOT = Path(__file__).parent.parent
CONFIG_PATH = ROOT / "config" / "config.json"
config = json.loads(CONFIG_PATH.read_text())
APP_NAME = config.get("app_name", "Open Graph Preview")
SERVICE_NAME = config["service_name"]
FETCH_TIMEOUT = config.get("fetch_timeout", 15)
PREVIEW_MAX_AGE = 60

app = FastAPI(title=APP_NAME, version="1.0")


def _build_cache() -> MetadataCache:
    """Memory tier always; SQLite tier only when db_path is set."""
    store = None
    if config.get("db_path"):
        db_path = Path(config["db_path"])
        if not db_path.is_absolute():
            db_path = ROOT / db_path
        ttl = config.get("cache_ttl_days", 365) * 24 * 60 * 60
        store = SqliteStore(str(db_path), ttl_seconds=ttl)
    return MetadataCache(capacity=config.get("memory_cache_size", 100), durable=store)


cache = _build_cache()


# ── Preview ──────────────────────────────────────────────────

@app.get("/", response_class=HTMLResponse)
async def preview(request: Request, url: Optional[str] = None, size: Optional[str] = None):
    """Render the card for ?url=, or the embed help page when it is missing."""
    if not url:
        base_url = f"{request.url.scheme}://{request.url.netloc}"
        return HTMLResponse(content=render_landing(base_url))

    # Only an exact "no-cache" opts out, anything else reads the cache
    use_cache = request.headers.get("cache-control") != "no-cache"
    outcome = await get_preview(
        url,
        cache,
        use_cache=use_cache,
        request_host=request.url.hostname,
        service_name=SERVICE_NAME,
        timeout=FETCH_TIMEOUT,
    )
    return HTMLResponse(
        content=render_preview(outcome.metadata, url, size),
        headers={"Cache-Control": f"max-age={PREVIEW_MAX_AGE}"},
    )


@app.get("/health")
def healthcheck() -> dict[str, str]:
    return {"status": "ok", "app": APP_NAME}


@app.exception_handler(StarletteHTTPException)
async def html_not_found(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return HTMLResponse(content=render_not_found(), status_code=404)
    return await http_exception_handler(request, exc)


if __name__ == "__main__":
    log.info("Starting %s on port %d", APP_NAME, config["backend_port"])
    uvicorn.run(app, host=config.get("backend_host", "0.0.0.0"), port=config["backend_port"])
