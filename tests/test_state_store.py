from __future__ import annotations

from meta_ads_mcp.clients import SQLiteStateStore


def test_put_then_get(state_store: SQLiteStateStore) -> None:
    state_store.put("abc", "u1", 600)

    assert state_store.get("abc") == "u1"
    assert state_store.get("missing") is None


def test_entry_expires_after_ttl(state_store: SQLiteStateStore, clock) -> None:
    state_store.put("abc", "u1", 600)

    clock.advance(599)
    assert state_store.get("abc") == "u1"

    clock.advance(1)
    assert state_store.get("abc") is None
    assert state_store.pop("abc") is None


def test_pop_returns_value_exactly_once(state_store: SQLiteStateStore) -> None:
    state_store.put("abc", "u1", 600)

    assert state_store.pop("abc") == "u1"
    assert state_store.pop("abc") is None
    assert state_store.get("abc") is None


def test_delete_removes_entry(state_store: SQLiteStateStore) -> None:
    state_store.put("abc", "u1", 600)

    state_store.delete("abc")
    state_store.delete("abc")

    assert state_store.get("abc") is None


def test_put_prunes_expired_entries(tmp_path, clock) -> None:
    db_path = str(tmp_path / "states.db")
    store = SQLiteStateStore(db_path, clock=clock)
    store.put("old", "u1", 10)
    clock.advance(11)

    store.put("new", "u2", 10)

    with store._connect() as conn:
        keys = [row["state"] for row in conn.execute("SELECT state FROM oauth_states")]
    assert keys == ["new"]


def test_entries_survive_reopening(tmp_path, clock) -> None:
    db_path = str(tmp_path / "states.db")
    SQLiteStateStore(db_path, clock=clock).put("abc", "u1", 600)

    assert SQLiteStateStore(db_path, clock=clock).get("abc") == "u1"
