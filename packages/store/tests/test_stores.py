"""Tests for runbot-store implementations."""

from __future__ import annotations

from runbot_store.models import DISPATCHED, REPORTED, BuildRecord
from runbot_store.noop import NoOpStore
from runbot_store.sqlite import SQLiteStore


def _make_record(repo="owner/repo", pr_number=1, token="t" * 32, event=DISPATCHED, recorded_at="2026-01-01T00:00:00"):
    return BuildRecord(
        repo=repo,
        pr_number=pr_number,
        token=token,
        event=event,
        build_id="arn:aws:codebuild:us-west-2:1:build/go-mode-tests:u",
        recorded_at=recorded_at,
        comment_id=101,
    )


# ---------------------------------------------------------------------------
# NoOpStore
# ---------------------------------------------------------------------------


class TestNoOpStore:
    def test_save_does_not_raise(self):
        NoOpStore().save(_make_record())

    def test_list_records_returns_empty(self):
        store = NoOpStore()
        store.save(_make_record())
        assert store.list_records("owner/repo") == []

    def test_close_is_safe(self):
        NoOpStore().close()


# ---------------------------------------------------------------------------
# SQLiteStore
# ---------------------------------------------------------------------------


class TestSQLiteStore:
    def test_save_and_list(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(_make_record())

        results = store.list_records("owner/repo")
        assert len(results) == 1
        assert results[0].repo == "owner/repo"
        assert results[0].pr_number == 1
        assert results[0].event == DISPATCHED
        assert results[0].comment_id == 101
        assert results[0].status == ""
        store.close()

    def test_list_by_pr_number(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(_make_record(pr_number=1))
        store.save(_make_record(pr_number=2))

        results = store.list_records("owner/repo", pr_number=1)
        assert len(results) == 1
        assert results[0].pr_number == 1
        store.close()

    def test_list_different_repo_isolated(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(_make_record(repo="owner/a"))
        store.save(_make_record(repo="owner/b"))
        assert [r.repo for r in store.list_records("owner/a")] == ["owner/a"]
        store.close()

    def test_records_ordered_oldest_first(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        store.save(_make_record(event=REPORTED, recorded_at="2026-01-01T00:05:00"))
        store.save(_make_record(event=DISPATCHED, recorded_at="2026-01-01T00:00:00"))

        assert [r.event for r in store.list_records("owner/repo")] == [DISPATCHED, REPORTED]
        store.close()

    def test_persists_across_connections(self, tmp_path):
        path = str(tmp_path / "test.db")
        store = SQLiteStore(db_path=path)
        record = _make_record(event=REPORTED)
        record.status = "Pass/ERROR"
        store.save(record)
        store.close()

        reopened = SQLiteStore(db_path=path)
        results = reopened.list_records("owner/repo")
        assert results[0].status == "Pass/ERROR"
        assert results[0].token == "t" * 32
        reopened.close()

    def test_empty_store(self, tmp_path):
        store = SQLiteStore(db_path=str(tmp_path / "test.db"))
        assert store.list_records("owner/repo") == []
        store.close()
