"""Tests for chillhouse.api.result_store — in-memory result storage."""

from __future__ import annotations

import threading

from chillhouse.api.result_store import ResultStore


class TestResultStore:
    def test_get_missing_returns_none(self):
        assert ResultStore().get("nope") is None

    def test_put_then_get(self):
        store = ResultStore()
        store.put("a", b"bytes-a")
        assert store.get("a") == b"bytes-a"
        assert "a" in store
        assert len(store) == 1

    def test_reads_are_repeatable(self):
        """Stored results can be read any number of times."""
        store = ResultStore()
        store.put("a", b"bytes-a")
        assert [store.get("a") for _ in range(3)] == [b"bytes-a"] * 3
        assert len(store) == 1

    def test_entries_are_independent(self):
        store = ResultStore()
        store.put("a", b"one")
        store.put("b", b"two")
        assert store.get("a") == b"one"
        assert store.get("b") == b"two"

    def test_concurrent_inserts(self):
        """Inserts from many threads all land without loss."""
        store = ResultStore()

        def writer(prefix: str) -> None:
            for i in range(200):
                store.put(f"{prefix}-{i}", f"{prefix}{i}".encode())

        threads = [threading.Thread(target=writer, args=(f"t{n}",)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 8 * 200
        assert store.get("t3-150") == b"t3150"
