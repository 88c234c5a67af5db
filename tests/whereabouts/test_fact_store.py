"""Tests for FactStore."""

from pathlib import Path

from wheredunno.whereabouts import FactStore


class TestFactStoreInit:
    def test_creates_db_directory(self, tmp_path: Path):
        nested_path = tmp_path / "nested" / "dir" / "facts.db"
        store = FactStore(nested_path)
        store.init_db()
        assert nested_path.exists()
        store.close()

    def test_creates_table(self, store: FactStore):
        conn = store._get_connection()
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='user_whereabouts'"
        )
        assert cursor.fetchone() is not None

    def test_init_db_idempotent(self, store: FactStore):
        store.init_db()
        store.init_db()  # Should not raise


class TestUpsert:
    def test_returns_fact_with_timestamp(self, store: FactStore, clock):
        fact = store.upsert("u-1", "Aisyah", "library", "I'm going to the library")
        assert fact.user_name == "Aisyah"
        assert fact.whereabout == "library"
        assert fact.updated_at == clock.now

    def test_last_write_wins(self, store: FactStore, clock):
        store.upsert("u-1", "Aisyah", "library", "I'm going to the library")
        clock.advance(5)
        store.upsert("u-1", "Aisyah", "gym", "I'm heading to gym")

        facts = store.recent()
        assert len(facts) == 1
        found = store.find_by_name("aisyah")
        assert found is not None
        assert found.whereabout == "gym"
        assert found.raw_message == "I'm heading to gym"
        assert found.updated_at == clock.now

    def test_rename_keeps_single_record(self, store: FactStore):
        store.upsert("u-1", "Aisyah", "library", "raw")
        store.upsert("u-1", "Aisyah R", "cafe", "raw")
        facts = store.recent()
        assert len(facts) == 1
        assert facts[0].user_name == "Aisyah R"

    def test_name_only_facts_keyed_by_name(self, store: FactStore):
        store.upsert(None, "Ben", "office", "raw")
        store.upsert(None, "Ben", "home", "raw")
        store.upsert(None, "Chong", "park", "raw")
        assert len(store.recent()) == 2

    def test_id_and_name_keys_do_not_collide(self, store: FactStore):
        store.upsert("Ben", "Someone", "office", "raw")
        store.upsert(None, "Ben", "home", "raw")
        assert len(store.recent()) == 2


class TestFindByName:
    def test_case_insensitive_substring(self, store: FactStore):
        store.upsert("u-1", "Aisyah Rahman", "library", "raw")
        fact = store.find_by_name("RAHMAN")
        assert fact is not None
        assert fact.user_id == "u-1"

    def test_not_found(self, store: FactStore):
        store.upsert("u-1", "Aisyah", "library", "raw")
        assert store.find_by_name("ben") is None

    def test_empty_store(self, store: FactStore):
        assert store.find_by_name("anyone") is None

    def test_most_recent_match_wins(self, store: FactStore, clock):
        store.upsert("u-1", "Ali Hassan", "mosque", "raw")
        clock.advance(1)
        store.upsert("u-2", "Ali Baba", "cave", "raw")
        fact = store.find_by_name("ali")
        assert fact is not None
        assert fact.whereabout == "cave"

    def test_only_recent_window_is_searched(self, tmp_path: Path, clock):
        store = FactStore(tmp_path / "window.db", lookup_window=3, clock=clock)
        store.init_db()
        store.upsert("u-old", "Zainab", "market", "raw")
        for i in range(3):
            clock.advance(1)
            store.upsert(f"u-{i}", f"User {i}", "somewhere", "raw")

        assert store.find_by_name("zainab") is None
        store.close()

    def test_update_brings_fact_back_into_window(self, tmp_path: Path, clock):
        store = FactStore(tmp_path / "window.db", lookup_window=2, clock=clock)
        store.init_db()
        store.upsert("u-old", "Zainab", "market", "raw")
        for i in range(2):
            clock.advance(1)
            store.upsert(f"u-{i}", f"User {i}", "somewhere", "raw")
        clock.advance(1)
        store.upsert("u-old", "Zainab", "school", "raw")

        fact = store.find_by_name("zainab")
        assert fact is not None
        assert fact.whereabout == "school"
        store.close()


class TestLifecycle:
    def test_close_and_reopen(self, tmp_path: Path):
        db_path = tmp_path / "facts.db"

        store1 = FactStore(db_path)
        store1.init_db()
        store1.upsert("u-1", "Aisyah", "library", "raw")
        store1.close()

        store2 = FactStore(db_path)
        store2.init_db()
        fact = store2.find_by_name("aisyah")
        store2.close()

        assert fact is not None
        assert fact.whereabout == "library"

    def test_close_idempotent(self, store: FactStore):
        store.close()
        store.close()  # Should not raise
