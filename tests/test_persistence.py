"""
Tests for the SQLite-backed persisted store.
"""

import sqlite3

from posdash.persistence import PersistedStore


class TestPersistedStoreLoad:
    """Tests for loading values with defaults."""

    def test_open_returns_default_when_key_absent(self, store):
        """Should hand back the default for a key never written."""
        handle = store.open("orders-list", [])

        assert handle.value == []

    def test_open_falls_back_to_default_on_corrupt_payload(self, tmp_path):
        """Should treat an unparsable stored value as absent."""
        db_path = tmp_path / "posdash.db"
        store = PersistedStore(db_path)
        conn = sqlite3.connect(db_path)
        with conn:
            conn.execute(
                "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
                ("app-settings", "{not json", "2026-01-01T00:00:00+00:00"),
            )
        conn.close()

        handle = store.open("app-settings", {"vat_percentage": 5})

        assert handle.value == {"vat_percentage": 5}

    def test_value_survives_reopen(self, tmp_path):
        """Should load what a previous store instance wrote."""
        db_path = tmp_path / "posdash.db"
        PersistedStore(db_path).open("loyalty-customers", []).set([{"phone": "017"}])

        reopened = PersistedStore(db_path).open("loyalty-customers", [])

        assert reopened.value == [{"phone": "017"}]

    def test_keys_are_independent(self, store):
        """Should keep each collection under its own key."""
        store.open("orders-list", []).set([1])
        store.open("accounting-records", []).set([2])

        assert store.open("orders-list", []).value == [1]
        assert store.open("accounting-records", []).value == [2]

    def test_open_supports_value_setter_unpacking(self, store):
        """Should unpack into the current value and its setter."""
        value, set_value = store.open("app-categories", ["a"])

        set_value(["a", "b"])

        assert value == ["a"]
        assert store.open("app-categories", []).value == ["a", "b"]

    def test_in_memory_store_round_trips(self):
        """Should keep values for the life of an in-memory store."""
        store = PersistedStore(":memory:")
        store.open("current-user", None).set({"user_id": "admin-1"})

        assert store.open("current-user", None).value == {"user_id": "admin-1"}


class TestPersistedStoreWrite:
    """Tests for best-effort writes."""

    def test_write_failure_is_swallowed_and_memory_wins(self, store, monkeypatch):
        """Should keep the new in-memory value when the database write fails."""
        handle = store.open("orders-list", [])

        def broken_connect():
            raise sqlite3.OperationalError("database or disk is full")

        monkeypatch.setattr(store, "_connect", broken_connect)
        handle.set([{"order_id": "ORD-1"}])

        assert handle.value == [{"order_id": "ORD-1"}]

    def test_write_reports_dropped_write(self, store, monkeypatch):
        """Should return False when the write cannot complete."""

        def broken_connect():
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store, "_connect", broken_connect)

        assert store.write("orders-list", []) is False

    def test_unserializable_value_is_not_persisted(self, store):
        """Should drop values JSON cannot encode and keep the previous stored value."""
        handle = store.open("app-settings", {})
        handle.set({"currency_symbol": "$"})

        handle.set({"bad": object()})

        assert store.open("app-settings", {}).value == {"currency_symbol": "$"}

    def test_read_falls_back_when_database_unreachable(self, store, monkeypatch):
        """Should return the default when the database cannot be opened."""

        def broken_connect():
            raise sqlite3.OperationalError("unable to open database file")

        monkeypatch.setattr(store, "_connect", broken_connect)

        assert store.read("menu-items", ["default"]) == ["default"]
