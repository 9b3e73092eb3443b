"""SQLiteStore: local file-based build history.

Schema:
  builds  one row per dispatched or reported build, keyed for lookup by
          repo/pr_number and by correlation token.
"""

from __future__ import annotations

import logging
import sqlite3

from runbot_store.base import BaseStore
from runbot_store.models import BuildRecord

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS builds (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    repo         TEXT NOT NULL,
    pr_number    INTEGER NOT NULL,
    token        TEXT NOT NULL,
    event        TEXT NOT NULL,
    build_id     TEXT,
    recorded_at  TEXT,
    comment_id   INTEGER,
    status       TEXT DEFAULT ''
);
CREATE INDEX IF NOT EXISTS idx_builds_pr    ON builds (repo, pr_number);
CREATE INDEX IF NOT EXISTS idx_builds_token ON builds (token);
"""


class SQLiteStore(BaseStore):
    """Stores build history in a local SQLite database file.

    The database file path defaults to `.runbot.db` in the current working
    directory. Configure via .runbot.yml: `store_path: /path/to/runbot.db`.
    """

    def __init__(self, db_path: str = ".runbot.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def save(self, record: BuildRecord) -> None:
        self._conn.execute(
            """
            INSERT INTO builds
              (repo, pr_number, token, event, build_id, recorded_at, comment_id, status)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.repo,
                record.pr_number,
                record.token,
                record.event,
                record.build_id,
                record.recorded_at,
                record.comment_id,
                record.status,
            ),
        )
        self._conn.commit()

    def list_records(self, repo: str, pr_number: int | None = None) -> list[BuildRecord]:
        if pr_number is not None:
            rows = self._conn.execute(
                "SELECT * FROM builds WHERE repo=? AND pr_number=? ORDER BY recorded_at, id",
                (repo, pr_number),
            ).fetchall()
        else:
            rows = self._conn.execute(
                "SELECT * FROM builds WHERE repo=? ORDER BY recorded_at, id",
                (repo,),
            ).fetchall()
        return [self._row_to_record(r) for r in rows]

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> BuildRecord:
        return BuildRecord(
            repo=row["repo"],
            pr_number=row["pr_number"],
            token=row["token"],
            event=row["event"],
            build_id=row["build_id"] or "",
            recorded_at=row["recorded_at"] or "",
            comment_id=row["comment_id"],
            status=row["status"] or "",
        )
