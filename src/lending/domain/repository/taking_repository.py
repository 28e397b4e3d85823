"""Abstract repository for TakingRecord audit rows (append-only)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from lending.domain.model.taking import TakingRecord


class TakingRepository(ABC):

    @abstractmethod
    def add(self, record: TakingRecord) -> None:
        """Append a taking record (assigns its ID)."""
