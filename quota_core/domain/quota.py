"""
Subscription tiers and the tier -> byte ceiling policy.

The ceiling table is validated when a QuotaPolicy is built. DEFAULT_POLICY
is built at import time, so adding a Tier member without a ceiling breaks
the import instead of silently granting zero bytes at request time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Tier(str, Enum):
    """Subscription level stored per caller in the profile store."""

    NONE = "none"
    FREE = "free"
    PREMIUM = "premium"

    @classmethod
    def parse(cls, value: str | Tier | None) -> Tier:
        """Normalise a stored tier value.

        Absent and unrecognised values resolve to Tier.NONE.
        """
        if isinstance(value, Tier):
            return value
        if value is None:
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            return cls.NONE


REFERENCE_CEILINGS: Mapping[Tier, int] = MappingProxyType(
    {
        Tier.NONE: 0,
        Tier.FREE: 100_000,
        Tier.PREMIUM: 500_000,
    }
)


@dataclass(frozen=True)
class QuotaPolicy:
    """Immutable tier -> ceiling lookup."""

    ceilings: Mapping[Tier, int] = field(default_factory=lambda: REFERENCE_CEILINGS)

    def __post_init__(self) -> None:
        missing = [tier.value for tier in Tier if tier not in self.ceilings]
        if missing:
            raise ValueError(f"No quota ceiling configured for tiers: {', '.join(missing)}")

        unknown = [key for key in self.ceilings if not isinstance(key, Tier)]
        if unknown:
            raise ValueError(f"Quota ceilings keyed by non-tier values: {unknown}")

        negative = [tier.value for tier, ceiling in self.ceilings.items() if ceiling < 0]
        if negative:
            raise ValueError(f"Negative quota ceiling for tiers: {', '.join(negative)}")

        object.__setattr__(self, "ceilings", MappingProxyType(dict(self.ceilings)))

    def ceiling_for(self, tier: str | Tier | None) -> int:
        """Return the byte ceiling for a tier (0 for absent/unknown tiers)."""
        return self.ceilings[Tier.parse(tier)]


DEFAULT_POLICY = QuotaPolicy()
