"""
Scoreboard ordering.

Two orderings are offered:
- sort_users: one key, one direction, ties broken by user id ascending
- group_by_team: Red, then Blue, then Other, each by points descending

Users without a PlayerSummary (or with a missing counter) sort as if the
counter were 0.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum

from tfsight.analysis.stats import headshot_percentage, kd_ratio
from tfsight.core.constants import TEAM_ORDER
from tfsight.core.models import PlayerSummary, User


class SortKey(StrEnum):
    NAME = "name"
    POINTS = "points"
    KILLS = "kills"
    ASSISTS = "assists"
    DEATHS = "deaths"
    KD = "kd"
    HEADSHOT_PCT = "headshotPct"
    DAMAGE_DEALT = "damage_dealt"
    HEALING = "healing"
    UBERCHARGES = "ubercharges"
    BACKSTABS = "backstabs"
    BUILDINGS_DESTROYED = "buildings_destroyed"
    CAPTURES = "captures"
    DEFENSES = "defenses"
    SUPPORT = "support"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortConfig:
    """Sort state owned by the display layer."""

    key: SortKey = SortKey.POINTS
    direction: SortDirection = SortDirection.DESC

    @classmethod
    def parse(cls, key: str, direction: str = "desc") -> "SortConfig":
        """Build a SortConfig from user-facing strings. Raises ValueError on unknown values."""
        return cls(SortKey(key), SortDirection(direction.lower()))

    def toggled(self, key: SortKey | str) -> "SortConfig":
        """State after clicking the ``key`` column header."""
        key = SortKey(key)
        if key is self.key:
            return replace(self, direction=self.direction.flipped())
        default = SortDirection.ASC if key is SortKey.NAME else SortDirection.DESC
        return SortConfig(key, default)


def sort_value(
    user: User, summary: PlayerSummary | None, key: SortKey
) -> str | int | float:
    """The value ``user`` is ordered by for ``key``."""
    if key is SortKey.NAME:
        return user.name.casefold()
    if summary is None:
        return 0
    if key is SortKey.KD:
        return kd_ratio(summary.value("kills"), summary.value("deaths"))
    if key is SortKey.HEADSHOT_PCT:
        return headshot_percentage(summary.value("headshots"), summary.value("kills"))
    return summary.value(key.value)


def sort_users(
    users: Iterable[User],
    summaries: Mapping[int, PlayerSummary],
    key: SortKey | str = SortKey.POINTS,
    direction: SortDirection | str = SortDirection.DESC,
) -> list[User]:
    """
    Order users by one key.

    Args:
        users: Users to order
        summaries: PlayerSummary per user id (may be empty or partial)
        key: Column to order by
        direction: "asc" or "desc"

    Returns:
        A new list holding exactly the input users. Users with equal values
        stay in user id ascending order in either direction.
    """
    key = SortKey(key)
    direction = SortDirection(direction)
    by_id = sorted(users, key=lambda u: u.user_id)
    # list.sort is stable for reverse=True too, so the id order survives ties
    return sorted(
        by_id,
        key=lambda u: sort_value(u, summaries.get(u.user_id), key),
        reverse=direction is SortDirection.DESC,
    )


def group_by_team(users: Iterable[User], summaries: Mapping[int, PlayerSummary]) -> list[User]:
    """Red, Blue, Other; points descending inside each team; then user id."""

    def group_key(user: User) -> tuple[int, int, int]:
        summary = summaries.get(user.user_id)
        points = summary.value("points") if summary is not None else 0
        return (TEAM_ORDER[user.team], -points, user.user_id)

    return sorted(users, key=group_key)


def apply_sort(
    users: Iterable[User], summaries: Mapping[int, PlayerSummary], config: SortConfig
) -> list[User]:
    return sort_users(users, summaries, config.key, config.direction)
