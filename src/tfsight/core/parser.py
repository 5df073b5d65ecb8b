"""
Demo Parser Boundary

TFSight never decodes .dem files itself. A parser backend takes the raw file
bytes and returns the JSON record produced by tf_demo_parser; this module
validates that record and turns it into the frozen DemoData snapshot.

Usage:
    from tfsight.core.parser import ParseDemoBinary, parse_demo_bytes

    data = parse_demo_bytes(Path("match.dem").read_bytes(), ParseDemoBinary())
"""

import logging
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from tfsight.core.constants import ALLOWED_EXTENSIONS, CLASS_COUNT, ChatKind, PlayerClass, Team
from tfsight.core.models import (
    ChatMessage,
    DeathEvent,
    DemoData,
    DemoHeader,
    PlayerSummary,
    Round,
    User,
)

logger = logging.getLogger(__name__)

DemoSource = str | Path | bytes | bytearray | memoryview


class DemoLoadError(Exception):
    """A demo could not be turned into a snapshot.

    ``kind`` is one of "file", "parser" or "record".
    """

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class ParserBackend(Protocol):
    """Anything that turns raw demo bytes into the parser's JSON record."""

    def __call__(self, demo_bytes: bytes) -> str | bytes | Mapping[str, Any]: ...


@dataclass
class ParseDemoBinary:
    """Runs tf_demo_parser's ``parse_demo`` executable and returns its JSON output.

    The output is returned as raw bytes; the parser writes UTF-8 regardless of
    the local locale.
    """

    binary: str = "parse_demo"

    def __call__(self, demo_bytes: bytes) -> bytes:
        executable = shutil.which(self.binary)
        if executable is None:
            raise DemoLoadError("parser", f"Demo parser executable not found: {self.binary}")

        tmp = NamedTemporaryFile(suffix=".dem", delete=False)
        demo_path = Path(tmp.name)
        try:
            try:
                tmp.write(demo_bytes)
                tmp.flush()
            finally:
                tmp.close()

            proc = subprocess.run(
                [executable, str(demo_path)],
                capture_output=True,
                check=False,
            )
            if proc.returncode != 0:
                stderr = proc.stderr.decode("utf-8", errors="replace").strip()
                detail = stderr or f"exit code {proc.returncode}"
                raise DemoLoadError("parser", f"Demo parser failed: {detail}")
            return proc.stdout
        finally:
            demo_path.unlink(missing_ok=True)


# =============================================================================
# Raw record schema (tf_demo_parser JSON layout)
# =============================================================================


class _RawModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RawHeader(_RawModel):
    demo_type: str = ""
    version: int = 0
    protocol: int = 0
    server: str = ""
    nick: str = ""
    map: str = ""
    game: str = ""
    duration: float = 0.0
    ticks: NonNegativeInt = 0
    frames: int = 0
    signon: int = 0


class RawUser(_RawModel):
    classes: dict[str, NonNegativeInt] = Field(default_factory=dict)
    name: str = ""
    user_id: int = Field(alias="userId")
    steam_id: str = Field("", alias="steamId")
    team: str = "other"


class RawDeath(_RawModel):
    weapon: str = ""
    victim: int
    assister: int | None = None
    killer: int
    tick: NonNegativeInt = 0


class RawChat(_RawModel):
    kind: str = ""
    sender: str = Field("", alias="from")
    text: str = ""
    tick: NonNegativeInt = 0


class RawRound(_RawModel):
    winner: str = "other"
    length: float = 0.0
    end_tick: NonNegativeInt = 0


class RawSummary(_RawModel):
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


class RawDemo(_RawModel):
    header: RawHeader = Field(default_factory=RawHeader)
    users: dict[str, RawUser] = Field(default_factory=dict)
    deaths: list[RawDeath] = Field(default_factory=list)
    chat: list[RawChat] = Field(default_factory=list)
    rounds: list[RawRound] = Field(default_factory=list)
    start_tick: int = Field(0, alias="startTick")
    interval_per_tick: float | None = Field(None, alias="intervalPerTick")
    pauses: list[Any] = Field(default_factory=list)
    player_summary: dict[str, Any] | None = Field(None, alias="playerSummary")


# =============================================================================
# Conversion
# =============================================================================


def _class_counters(raw_classes: Mapping[str, int]) -> tuple[int, ...]:
    counters = [0] * CLASS_COUNT
    for key, count in raw_classes.items():
        try:
            class_id = int(key)
        except ValueError:
            class_id = PlayerClass.OTHER
        if not 0 <= class_id < CLASS_COUNT:
            class_id = PlayerClass.OTHER
        counters[class_id] += count
    return tuple(counters)


def _convert_users(raw_users: Mapping[str, RawUser]) -> dict[int, User]:
    users: dict[int, User] = {}
    for raw in raw_users.values():
        if raw.user_id in users:
            raise DemoLoadError("record", f"Duplicate user id in demo record: {raw.user_id}")
        users[raw.user_id] = User(
            user_id=raw.user_id,
            name=raw.name,
            steam_id=raw.steam_id,
            team=Team.from_raw(raw.team),
            classes=_class_counters(raw.classes),
        )
    return users


def _convert_summaries(raw_summary: Mapping[str, Any] | None) -> dict[int, PlayerSummary]:
    if not raw_summary:
        return {}
    # PlayerSummaryState wraps the per-user map in a "player_summaries" field
    entries = raw_summary.get("player_summaries", raw_summary)
    if not isinstance(entries, Mapping):
        raise DemoLoadError("record", "Invalid player summary: expected an object keyed by user id")

    summaries: dict[int, PlayerSummary] = {}
    for key, value in entries.items():
        try:
            user_id = int(key)
        except (TypeError, ValueError):
            logger.warning(f"Dropping player summary with non-numeric user id: {key!r}")
            continue
        try:
            raw = RawSummary.model_validate(value)
        except ValidationError as e:
            raise DemoLoadError("record", f"Invalid player summary for user {user_id}: {e}") from e
        summaries[user_id] = PlayerSummary(**raw.model_dump())
    return summaries


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return (
        f"Invalid demo record: {error.error_count()} validation error(s), "
        f"first at {location}: {first['msg']}"
    )


def record_from_raw(raw: RawDemo) -> DemoData:
    """Build the frozen snapshot from a validated raw record."""
    interval = raw.interval_per_tick
    if interval is not None and interval <= 0:
        logger.debug(f"Ignoring non-positive interval_per_tick {interval}")
        interval = None

    return DemoData(
        header=DemoHeader(**raw.header.model_dump()),
        users=_convert_users(raw.users),
        deaths=tuple(
            DeathEvent(
                tick=d.tick,
                killer=d.killer,
                victim=d.victim,
                weapon=d.weapon,
                assister=d.assister,
            )
            for d in raw.deaths
        ),
        chat=tuple(
            ChatMessage(
                tick=c.tick,
                sender=c.sender,
                text=c.text,
                kind=ChatKind.from_raw(c.kind),
                raw_kind=c.kind,
            )
            for c in raw.chat
        ),
        rounds=tuple(
            Round(winner=Team.from_raw(r.winner), length=r.length, end_tick=r.end_tick)
            for r in raw.rounds
        ),
        summaries=_convert_summaries(raw.player_summary),
        start_tick=raw.start_tick,
        interval_per_tick=interval,
        pause_count=len(raw.pauses),
    )


def parse_record(payload: str | bytes | Mapping[str, Any]) -> DemoData:
    """
    Validate parser output and convert it to a DemoData snapshot.

    Args:
        payload: JSON text/bytes or an already decoded mapping

    Returns:
        The frozen snapshot

    Raises:
        DemoLoadError: kind "record" when the payload is not a valid demo record
    """
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            raw = RawDemo.model_validate_json(payload)
        elif isinstance(payload, Mapping):
            raw = RawDemo.model_validate(dict(payload))
        else:
            raise DemoLoadError(
                "record", f"Unsupported parser output type: {type(payload).__name__}"
            )
    except ValidationError as e:
        raise DemoLoadError("record", _describe_validation_error(e)) from e

    try:
        return record_from_raw(raw)
    except ValueError as e:
        raise DemoLoadError("record", f"Invalid demo record: {e}") from e


def read_demo_bytes(
    source: DemoSource, allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS
) -> bytes:
    """Return the bytes of a demo given as raw bytes or a file path."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    path = Path(source)
    if not path.name.lower().endswith(tuple(ext.lower() for ext in allowed_extensions)):
        raise DemoLoadError(
            "file", f"File must be one of {', '.join(allowed_extensions)}. Got: {path.name}"
        )
    try:
        return path.read_bytes()
    except OSError as e:
        raise DemoLoadError("file", f"Could not read demo file {path.name}: {e.strerror or e}") from e


def parse_demo_bytes(demo_bytes: bytes, backend: ParserBackend) -> DemoData:
    """Run the parser backend on raw bytes and convert its output."""
    try:
        output = backend(demo_bytes)
    except DemoLoadError:
        raise
    except Exception as e:
        raise DemoLoadError("parser", str(e) or f"Demo parser raised {type(e).__name__}") from e
    return parse_record(output)
