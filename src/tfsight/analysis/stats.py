"""
Derived Player Statistics

Per-user metrics computed from the raw end-of-match counters:
- K/D ratio (kills per death, raw kills when the player never died)
- Headshot percentage (whole percent of kills that were headshots)
- Top class (most played class, lowest class id wins ties)

Every function here is pure. A missing PlayerSummary yields None for the
summary-based metrics so views can show "no data" rather than a zero.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from tfsight.core.constants import KD_PRECISION, PlayerClass
from tfsight.core.models import PlayerSummary, User


@dataclass(frozen=True)
class DerivedStats:
    """Derived metrics for one user."""

    kd: float | None = None
    headshot_pct: int | None = None
    top_class: PlayerClass | None = None

    @property
    def has_summary(self) -> bool:
        return self.kd is not None


def kd_ratio(kills: int, deaths: int, precision: int = KD_PRECISION) -> float:
    """Kills per death. A player with no deaths gets their raw kill count."""
    if deaths <= 0:
        return round(float(kills), precision)
    return round(kills / deaths, precision)


def headshot_percentage(headshots: int, kills: int) -> int:
    """Headshots as a whole percentage of kills, rounded half up and clamped to [0, 100]."""
    if kills <= 0:
        return 0
    pct = math.floor(headshots / kills * 100 + 0.5)
    return min(100, max(0, pct))


def top_class(classes: Sequence[int]) -> PlayerClass | None:
    """
    Most played class.

    Args:
        classes: Counters indexed by PlayerClass

    Returns:
        The class with the highest counter, the lowest class id on ties, or
        None when every counter is zero
    """
    best: int | None = None
    for class_id, count in enumerate(classes):
        # Strict comparison keeps the lowest id on ties
        if count > 0 and (best is None or count > classes[best]):
            best = class_id
    return PlayerClass(best) if best is not None else None


def calculate_derived_stats(
    user: User, summary: PlayerSummary | None, kd_precision: int = KD_PRECISION
) -> DerivedStats:
    """Compute kd, headshot percentage and top class for one user."""
    favourite = top_class(user.classes)
    if summary is None:
        return DerivedStats(top_class=favourite)

    kills = summary.value("kills")
    return DerivedStats(
        kd=kd_ratio(kills, summary.value("deaths"), kd_precision),
        headshot_pct=headshot_percentage(summary.value("headshots"), kills),
        top_class=favourite,
    )
