"""Shared fixtures for og-preview tests."""

import sqlite3
import sys
from pathlib import Path

import pytest

# Add backend to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from cache import MetadataCache, SqliteStore  # noqa: E402


GITHUB_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>GitHub: Let's build from here</title>
  <link rel="icon" class="js-site-favicon" type="image/svg+xml" href="/favicons/favicon.svg?v=2#mark">
  <meta name="twitter:site" content="@github">
  <meta name="twitter:title" content="GitHub: Let's build from here">
  <meta name="twitter:description" content="GitHub is where over 100 million developers shape the future of software.">
  <meta property="og:site_name" content="GitHub">
  <meta property="og:title" content="GitHub">
  <meta property="og:description" content="Join the world's most widely adopted developer platform.">
  <meta property="og:image" content="https://github.githubassets.com/assets/campaign-social.png">
</head>
<body><h1>GitHub</h1></body>
</html>
"""


@pytest.fixture
def github_html():
    return GITHUB_HTML


@pytest.fixture
def db(tmp_path):
    """SQLite DB file initialized with schema.sql."""
    db_path = tmp_path / "cache.db"
    conn = sqlite3.connect(str(db_path))
    schema = (Path(__file__).parent.parent / "schema.sql").read_text()
    conn.executescript(schema)
    conn.commit()
    conn.close()
    return str(db_path)


@pytest.fixture
def store(db):
    return SqliteStore(db)


@pytest.fixture
def cache():
    """Memory-only cache."""
    return MetadataCache(capacity=100)
