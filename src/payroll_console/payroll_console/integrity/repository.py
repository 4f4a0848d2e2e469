from __future__ import annotations

from decimal import Decimal
from typing import Protocol


class IntegrityRepository(Protocol):
    def fetch_integrity_score(self, employee_id: int) -> Decimal:
        """Score for one employee; DEFAULT_INTEGRITY_SCORE when none is recorded."""

        raise NotImplementedError

    def fetch_all_scores(self) -> dict[int, Decimal]:
        raise NotImplementedError
