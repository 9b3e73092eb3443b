"""No-op store, the default when no store is configured."""

from __future__ import annotations

from typing import TYPE_CHECKING

from runbot_store.base import BaseStore

if TYPE_CHECKING:
    from runbot_store.models import BuildRecord


class NoOpStore(BaseStore):
    """Silently discards all records."""

    def save(self, record: BuildRecord) -> None:
        pass

    def list_records(self, repo: str, pr_number: int | None = None) -> list[BuildRecord]:
        return []
