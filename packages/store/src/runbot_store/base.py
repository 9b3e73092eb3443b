"""Abstract store interface.

The CLI depends on BaseStore, not on a concrete backend, so backends are
swappable without touching CLI code. Stores only keep history: the scanner
never consults them to decide whether a build is needed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from runbot_store.models import BuildRecord


class BaseStore(ABC):
    """Pluggable persistence layer for build history."""

    @abstractmethod
    def save(self, record: BuildRecord) -> None:
        """Persist one build record."""

    @abstractmethod
    def list_records(self, repo: str, pr_number: int | None = None) -> list[BuildRecord]:
        """Return records for a repo, oldest first, optionally filtered by PR number.

        Returns an empty list if no records exist.
        """

    def close(self) -> None:
        """Release any resources held by the store.

        Default is a no-op so callers can always call close() safely.
        """
