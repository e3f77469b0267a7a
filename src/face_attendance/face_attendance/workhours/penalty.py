from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

DEFAULT_LATE_PENALTY_TIERS = "15:25000,30:50000,60:100000"


@dataclass(frozen=True)
class LatePenaltyPolicy:
    """Tiered fine per late day: the highest tier whose minute threshold is exceeded."""

    tiers: Tuple[Tuple[int, int], ...] = ((15, 25000), (30, 50000), (60, 100000))

    def amount_for(self, late_minutes: int) -> int:
        amount = 0
        for threshold, tier_amount in sorted(self.tiers):
            if late_minutes > threshold:
                amount = tier_amount
        return amount

    @classmethod
    def parse(cls, value: Any) -> "LatePenaltyPolicy":
        """Build from ``"15:25000,30:50000"``; an empty value disables penalties."""
        if not value:
            return cls(tiers=())
        tiers = []
        for part in str(value).split(","):
            part = part.strip()
            if not part:
                continue
            minutes, _, amount = part.partition(":")
            if not amount:
                raise ValueError(f"Invalid penalty tier {part!r}, expected MINUTES:AMOUNT")
            tiers.append((int(minutes), int(amount)))
        return cls(tiers=tuple(sorted(tiers)))
