"""
TFSight - Constants

Defines teams, player classes, chat kinds and display constants shared by
the record model and every view.
"""

from enum import IntEnum, StrEnum


class Team(StrEnum):
    """Team classification used by every view.

    The parser also knows spectator and unassigned teams; both collapse
    into OTHER.
    """

    RED = "red"
    BLUE = "blue"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: object) -> "Team":
        """Map a parser team string ("red", "Blue", "blu", "spectator") to a Team."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "red":
                return cls.RED
            if lowered in ("blue", "blu"):
                return cls.BLUE
        return cls.OTHER


# Display ordering for the grouped scoreboard
TEAM_ORDER: dict[Team, int] = {Team.RED: 0, Team.BLUE: 1, Team.OTHER: 2}


class PlayerClass(IntEnum):
    """TF2 player classes, numbered as the demo parser numbers them.

    OTHER is the unknown slot; counters for ids outside the enumeration are
    folded into it.
    """

    OTHER = 0
    SCOUT = 1
    SNIPER = 2
    SOLDIER = 3
    DEMOMAN = 4
    MEDIC = 5
    HEAVY = 6
    PYRO = 7
    SPY = 8
    ENGINEER = 9

    @property
    def display_name(self) -> str:
        if self is PlayerClass.OTHER:
            return "Unknown"
        return self.name.capitalize()


CLASS_COUNT = len(PlayerClass)


class ChatKind(StrEnum):
    """Chat channel of a message."""

    TEAM = "team"
    ALL = "all"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: object) -> "ChatKind":
        """Map a parser kind ("TF_Chat_Team", "TF_Chat_AllDead", "NameChange") to a ChatKind."""
        if isinstance(value, str):
            if value.startswith(CHAT_KIND_PREFIX + "Team"):
                return cls.TEAM
            if value.startswith(CHAT_KIND_PREFIX + "All"):
                return cls.ALL
        return cls.OTHER


CHAT_KIND_PREFIX = "TF_Chat_"

# Fixed killfeed / chat page size
PAGE_SIZE = 50

# Decimal places for kill/death ratios, applied to both the deaths == 0 and
# deaths > 0 branches
KD_PRECISION = 2

# Placeholder identity for events that reference a user id missing from the table
UNKNOWN_NAME = "Unknown"

# Parser output for a .dem file must come from a file with one of these suffixes
ALLOWED_EXTENSIONS = (".dem",)
