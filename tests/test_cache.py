"""Tests for cache.py — LRU eviction and the SQLite tier."""

import sqlite3

import pytest

from cache import CACHE_NAMESPACE, MetadataCache, SqliteStore


class TestMemoryTier:
    def test_miss(self, cache):
        assert cache.lookup("https://example.com") is None

    def test_hit_returns_same_mapping(self, cache):
        cache.store("https://example.com", {"og:title": "Example"})
        metadata, tier = cache.lookup("https://example.com")
        assert metadata == {"og:title": "Example"}
        assert tier == "memory"

    def test_evicts_least_recently_used(self):
        cache = MetadataCache(capacity=2)
        cache.store("https://a.example", {"title": "a"})
        cache.store("https://b.example", {"title": "b"})
        cache.lookup("https://a.example")  # a is now most recent
        cache.store("https://c.example", {"title": "c"})

        assert "https://b.example" not in cache
        assert "https://a.example" in cache
        assert "https://c.example" in cache
        assert len(cache) == 2

    def test_overflow_by_many(self):
        cache = MetadataCache(capacity=3)
        for i in range(10):
            cache.store(f"https://site{i}.example", {"title": str(i)})
        assert len(cache) == 3
        assert cache.lookup("https://site0.example") is None
        assert cache.lookup("https://site9.example")[0] == {"title": "9"}

    def test_replace_is_wholesale(self, cache):
        cache.store("https://example.com", {"og:title": "Old", "og:image": "/old.png"})
        cache.store("https://example.com", {"og:title": "New"})
        assert cache.lookup("https://example.com")[0] == {"og:title": "New"}

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            MetadataCache(capacity=0)


class TestSqliteTier:
    def test_roundtrip_through_new_memory_tier(self, store):
        MetadataCache(durable=store).store("https://example.com", {"og:title": "Ünïcode"})

        fresh = MetadataCache(durable=store)
        metadata, tier = fresh.lookup("https://example.com")
        assert metadata == {"og:title": "Ünïcode"}
        assert tier == "store"
        # repopulated memory tier serves the next hit
        assert fresh.lookup("https://example.com")[1] == "memory"

    def test_rows_keyed_by_namespace(self, store, db):
        store.set("https://example.com", {"title": "x"})
        conn = sqlite3.connect(db)
        row = conn.execute("SELECT namespace, url FROM cache_entries").fetchone()
        conn.close()
        assert row == (CACHE_NAMESPACE, "https://example.com")

    def test_expired_entry_is_deleted(self, db):
        store = SqliteStore(db, ttl_seconds=-1)
        store.set("https://example.com", {"title": "stale"})
        assert store.get("https://example.com") is None

        conn = sqlite3.connect(db)
        count = conn.execute("SELECT COUNT(*) FROM cache_entries").fetchone()[0]
        conn.close()
        assert count == 0

    def test_persist_false_skips_store(self, store):
        cache = MetadataCache(durable=store)
        cache.store("https://down.example", {}, persist=False)
        assert store.get("https://down.example") is None
        assert cache.lookup("https://down.example") == ({}, "memory")

    def test_creates_table_on_fresh_file(self, tmp_path):
        store = SqliteStore(str(tmp_path / "nested" / "fresh.db"))
        store.set("https://example.com", {"title": "t"})
        assert store.get("https://example.com") == {"title": "t"}
