from __future__ import annotations

from loop_liquidity.wallet.store import SessionStore, logout


def test_round_trip_and_logout(tmp_path):
    store = SessionStore(tmp_path / "nested" / "session.json")
    assert store.load() is None

    store.save("0xabc")
    assert store.load() == "0xabc"

    logout(store)
    assert store.load() is None
    logout(store)


def test_unreadable_file_is_ignored(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert SessionStore(path).load() is None
