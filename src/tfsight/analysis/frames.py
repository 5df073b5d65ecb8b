"""
Tabular summaries of a snapshot as pandas objects.

Used for ad-hoc analysis and by the CLI's extra tables. Missing summary
counters become <NA> in nullable integer columns rather than 0.
"""

import pandas as pd

from tfsight.analysis.stats import calculate_derived_stats
from tfsight.analysis.teams import resolve_user
from tfsight.core.models import SUMMARY_FIELDS, DemoData


def scoreboard_frame(data: DemoData) -> pd.DataFrame:
    """One row per user, indexed by user id."""
    records = []
    for user in data.user_list:
        summary = data.summary_for(user.user_id)
        stats = calculate_derived_stats(user, summary)
        record = {
            "user_id": user.user_id,
            "name": user.name,
            "steam_id": user.steam_id,
            "team": user.team.value,
            "top_class": stats.top_class.display_name if stats.top_class is not None else None,
            "kd": stats.kd,
            "headshot_pct": stats.headshot_pct,
        }
        for name in SUMMARY_FIELDS:
            record[name] = getattr(summary, name) if summary is not None else None
        records.append(record)

    columns = ["user_id", "name", "steam_id", "team", "top_class", "kd", "headshot_pct", *SUMMARY_FIELDS]
    df = pd.DataFrame.from_records(records, columns=columns)
    df = df.astype({name: "Int64" for name in (*SUMMARY_FIELDS, "headshot_pct")})
    df["kd"] = df["kd"].astype("Float64")
    return df.set_index("user_id")


def deaths_frame(data: DemoData) -> pd.DataFrame:
    """Deaths in tick order with killer/victim names resolved."""
    rows = []
    for death in data.deaths:
        killer = resolve_user(death.killer, data.users)
        victim = resolve_user(death.victim, data.users)
        rows.append(
            {
                "tick": death.tick,
                "killer": killer.name,
                "killer_team": killer.team.value,
                "victim": victim.name,
                "victim_team": victim.team.value,
                "weapon": death.weapon,
            }
        )
    return pd.DataFrame(
        rows, columns=["tick", "killer", "killer_team", "victim", "victim_team", "weapon"]
    )


def kill_matrix(data: DemoData) -> pd.DataFrame:
    """Kills per (killer, victim) name pair; rows are killers, columns victims."""
    df = deaths_frame(data)
    if df.empty:
        return pd.DataFrame()
    return pd.crosstab(df["killer"], df["victim"])


def weapon_counts(data: DemoData) -> pd.Series:
    """Kills per weapon, most used first."""
    df = deaths_frame(data)
    if df.empty:
        return pd.Series(dtype="int64", name="kills")
    counts = df["weapon"].value_counts()
    counts.name = "kills"
    return counts
