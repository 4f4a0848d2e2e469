from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class IntegrityScore:
    """Externally supplied 0-100 behavioural rating; read-only here."""

    employee_id: int
    score: Decimal
