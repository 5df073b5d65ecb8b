"""
TFSight Analysis - pure view derivations over a demo snapshot.

This module contains:
- timing: Tick to clock conversion
- teams: User and team resolution for events
- stats: K/D, headshot percentage, top class
- sorting: Scoreboard orderings
- pagination: Fixed-size paging
- views: Display-ready rows built from the above
- frames: pandas summaries (imported on demand)
"""

from tfsight.analysis.pagination import Page, page_count, paginate
from tfsight.analysis.sorting import (
    SortConfig,
    SortDirection,
    SortKey,
    group_by_team,
    sort_users,
)
from tfsight.analysis.stats import (
    DerivedStats,
    calculate_derived_stats,
    headshot_percentage,
    kd_ratio,
    top_class,
)
from tfsight.analysis.teams import resolve_team_by_name, resolve_user
from tfsight.analysis.timing import format_duration, format_tick

__all__: list[str] = [
    "Page",
    "page_count",
    "paginate",
    "SortConfig",
    "SortDirection",
    "SortKey",
    "group_by_team",
    "sort_users",
    "DerivedStats",
    "calculate_derived_stats",
    "headshot_percentage",
    "kd_ratio",
    "top_class",
    "resolve_team_by_name",
    "resolve_user",
    "format_duration",
    "format_tick",
]
