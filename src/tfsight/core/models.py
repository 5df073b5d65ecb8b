"""
Record Model for Parsed TF2 Demos

Frozen dataclasses describing the one snapshot the parser hands back:
header, users, deaths, chat, rounds and optional end-of-match summaries.
Nothing in TFSight mutates these after a load commits them.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType

from tfsight.core.constants import (
    CLASS_COUNT,
    UNKNOWN_NAME,
    ChatKind,
    PlayerClass,
    Team,
)


@dataclass(frozen=True)
class DemoHeader:
    """Demo file header."""

    demo_type: str = ""
    version: int = 0
    protocol: int = 0
    server: str = ""
    nick: str = ""  # recorder
    map: str = ""
    game: str = ""
    duration: float = 0.0  # seconds
    ticks: int = 0
    frames: int = 0
    signon: int = 0


@dataclass(frozen=True)
class User:
    """A match participant.

    ``classes`` is a fixed-size counter indexed by PlayerClass.
    """

    user_id: int
    name: str
    steam_id: str = ""
    team: Team = Team.OTHER
    classes: tuple[int, ...] = (0,) * CLASS_COUNT

    def __post_init__(self):
        if len(self.classes) != CLASS_COUNT:
            raise ValueError(
                f"classes must have {CLASS_COUNT} slots, got {len(self.classes)}"
            )
        if any(count < 0 for count in self.classes):
            raise ValueError(f"class counters must be non-negative for user {self.user_id}")

    def class_count(self, player_class: PlayerClass) -> int:
        return self.classes[player_class]

    def played_classes(self) -> list[tuple[PlayerClass, int]]:
        """Classes with a non-zero counter, in class id order."""
        return [(PlayerClass(i), count) for i, count in enumerate(self.classes) if count > 0]


# Stand-in for killer/victim/assister ids that are not in the user table
UNKNOWN_USER = User(user_id=-1, name=UNKNOWN_NAME, team=Team.OTHER)


@dataclass(frozen=True)
class DeathEvent:
    """A kill as seen in the killfeed."""

    tick: int
    killer: int
    victim: int
    weapon: str = ""
    assister: int | None = None


@dataclass(frozen=True)
class ChatMessage:
    """A chat line. ``sender`` is a display name, not a user id."""

    tick: int
    sender: str
    text: str
    kind: ChatKind = ChatKind.OTHER
    raw_kind: str = ""


@dataclass(frozen=True)
class Round:
    """Outcome of one round."""

    winner: Team
    length: float  # seconds
    end_tick: int


@dataclass(frozen=True)
class PlayerSummary:
    """End-of-match aggregate counters for one user.

    A counter of None means the parser reported no value for it, which is
    not the same as zero.
    """

    kills: int | None = None
    assists: int | None = None
    deaths: int | None = None
    damage_dealt: int | None = None
    healing: int | None = None
    ubercharges: int | None = None
    headshots: int | None = None
    backstabs: int | None = None
    buildings_destroyed: int | None = None
    captures: int | None = None
    defenses: int | None = None
    support: int | None = None
    points: int | None = None

    def value(self, name: str) -> int:
        """Counter value with missing counters read as 0."""
        return getattr(self, name) or 0


SUMMARY_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(PlayerSummary))


def _frozen_mapping(data: Mapping | None) -> Mapping:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class DemoData:
    """The parsed snapshot of one demo file."""

    header: DemoHeader = field(default_factory=DemoHeader)
    users: Mapping[int, User] = field(default_factory=dict)
    deaths: tuple[DeathEvent, ...] = ()
    chat: tuple[ChatMessage, ...] = ()
    rounds: tuple[Round, ...] = ()
    summaries: Mapping[int, PlayerSummary] = field(default_factory=dict)
    start_tick: int = 0
    interval_per_tick: float | None = None
    pause_count: int = 0

    def __post_init__(self):
        # Freeze containers so a committed snapshot is read-only all the way down
        object.__setattr__(self, "users", _frozen_mapping(self.users))
        object.__setattr__(self, "summaries", _frozen_mapping(self.summaries))
        object.__setattr__(self, "deaths", tuple(self.deaths))
        object.__setattr__(self, "chat", tuple(self.chat))
        object.__setattr__(self, "rounds", tuple(self.rounds))
        for user_id, user in self.users.items():
            if user.user_id != user_id:
                raise ValueError(f"user table key {user_id} does not match user id {user.user_id}")
        if self.interval_per_tick is not None and self.interval_per_tick <= 0:
            raise ValueError(f"interval_per_tick must be positive, got {self.interval_per_tick}")

    @property
    def user_list(self) -> list[User]:
        """Users in table order."""
        return list(self.users.values())

    @property
    def has_summaries(self) -> bool:
        return bool(self.summaries)

    def summary_for(self, user_id: int) -> PlayerSummary | None:
        return self.summaries.get(user_id)
