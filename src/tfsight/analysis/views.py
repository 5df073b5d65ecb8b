"""
Display-ready views over a DemoData snapshot.

Each builder is a pure function of the snapshot plus the caller's ViewState
(selected tab, sort, page indexes). Nothing here keeps state between calls.

Views:
- Overview: header facts and round score
- Scoreboard: one row per user with derived stats, sorted or team-grouped
- Killfeed: paged deaths with killer/victim/assister resolved to users
- Chat: paged chat lines with the sender's team looked up by name
- Rounds: one row per round with formatted times
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum

from tfsight.analysis.pagination import Page, paginate
from tfsight.analysis.sorting import SortConfig, SortKey, apply_sort, group_by_team
from tfsight.analysis.stats import DerivedStats, calculate_derived_stats
from tfsight.analysis.teams import resolve_team_by_name, resolve_user
from tfsight.analysis.timing import format_clock, format_duration, format_tick
from tfsight.core.constants import (
    CHAT_KIND_PREFIX,
    KD_PRECISION,
    PAGE_SIZE,
    ChatKind,
    PlayerClass,
    Team,
)
from tfsight.core.models import DemoData, PlayerSummary, User


class ViewTab(StrEnum):
    OVERVIEW = "overview"
    PLAYERS = "players"
    KILLS = "kills"
    CHAT = "chat"
    ROUNDS = "rounds"


@dataclass(frozen=True)
class ViewState:
    """UI state owned by the display layer and passed into every builder."""

    tab: ViewTab = ViewTab.OVERVIEW
    sort: SortConfig = field(default_factory=SortConfig)
    grouped: bool = False
    kills_page: int = 0
    chat_page: int = 0

    def toggle_sort(self, key: SortKey | str) -> "ViewState":
        return replace(self, sort=self.sort.toggled(key), grouped=False)


# =============================================================================
# Row types
# =============================================================================


@dataclass(frozen=True)
class Overview:
    map: str
    duration: str
    ticks: int
    player_count: int
    server: str
    protocol: int
    recorder: str
    game: str
    round_count: int
    red_wins: int
    blue_wins: int

    @property
    def ticks_display(self) -> str:
        return f"{self.ticks:,}"


@dataclass(frozen=True)
class ScoreboardRow:
    user: User
    summary: PlayerSummary | None
    stats: DerivedStats
    classes: tuple[tuple[PlayerClass, int], ...]


@dataclass(frozen=True)
class KillfeedRow:
    tick: int
    time: str
    killer: User
    victim: User
    assister: User | None
    weapon: str


@dataclass(frozen=True)
class ChatRow:
    tick: int
    time: str
    sender: str
    team: Team
    kind: ChatKind
    kind_label: str
    text: str


@dataclass(frozen=True)
class RoundRow:
    number: int  # 1-based
    winner: Team
    length: str
    end_time: str


# =============================================================================
# Builders
# =============================================================================


def build_overview(data: DemoData) -> Overview:
    header = data.header
    return Overview(
        map=header.map,
        duration=format_duration(header.duration),
        ticks=header.ticks,
        player_count=len(data.users),
        server=header.server,
        protocol=header.protocol,
        recorder=header.nick,
        game=header.game,
        round_count=len(data.rounds),
        red_wins=sum(1 for r in data.rounds if r.winner is Team.RED),
        blue_wins=sum(1 for r in data.rounds if r.winner is Team.BLUE),
    )


def build_scoreboard(
    data: DemoData,
    sort: SortConfig | None = None,
    grouped: bool = False,
    kd_precision: int = KD_PRECISION,
) -> list[ScoreboardRow]:
    """Scoreboard rows, team-grouped when ``grouped`` else ordered by ``sort``."""
    if grouped:
        users = group_by_team(data.user_list, data.summaries)
    else:
        users = apply_sort(data.user_list, data.summaries, sort or SortConfig())

    rows = []
    for user in users:
        summary = data.summary_for(user.user_id)
        rows.append(
            ScoreboardRow(
                user=user,
                summary=summary,
                stats=calculate_derived_stats(user, summary, kd_precision),
                classes=tuple(user.played_classes()),
            )
        )
    return rows


def build_killfeed(data: DemoData, page: int = 0, page_size: int = PAGE_SIZE) -> Page[KillfeedRow]:
    """One page of the killfeed in tick order. Unknown ids show as "Unknown"."""
    window = paginate(data.deaths, page, page_size)
    rows = tuple(
        KillfeedRow(
            tick=death.tick,
            time=format_tick(death.tick, data.interval_per_tick),
            killer=resolve_user(death.killer, data.users),
            victim=resolve_user(death.victim, data.users),
            assister=resolve_user(death.assister, data.users) if death.assister is not None else None,
            weapon=death.weapon,
        )
        for death in window.items
    )
    return replace(window, items=rows)


def chat_kind_label(raw_kind: str, kind: ChatKind) -> str:
    if raw_kind:
        return raw_kind.removeprefix(CHAT_KIND_PREFIX)
    return kind.value


def build_chat(data: DemoData, page: int = 0, page_size: int = PAGE_SIZE) -> Page[ChatRow]:
    """One page of chat. The sender's team is a best-effort lookup by display name."""
    window = paginate(data.chat, page, page_size)
    users = data.user_list
    rows = tuple(
        ChatRow(
            tick=msg.tick,
            time=format_tick(msg.tick, data.interval_per_tick),
            sender=msg.sender,
            team=resolve_team_by_name(msg.sender, users),
            kind=msg.kind,
            kind_label=chat_kind_label(msg.raw_kind, msg.kind),
            text=msg.text,
        )
        for msg in window.items
    )
    return replace(window, items=rows)


def build_rounds(data: DemoData) -> list[RoundRow]:
    return [
        RoundRow(
            number=i,
            winner=r.winner,
            length=format_clock(max(0.0, r.length)),
            end_time=format_tick(r.end_tick, data.interval_per_tick),
        )
        for i, r in enumerate(data.rounds, start=1)
    ]
