"""
TFSight Core - record model, parser boundary and configuration.

This module contains:
- constants: Teams, player classes, chat kinds and display constants
- models: Frozen dataclasses for the parsed demo snapshot
- parser: Parser backend protocol and record validation
- config: Application configuration management
"""

from tfsight.core.constants import (
    KD_PRECISION,
    PAGE_SIZE,
    ChatKind,
    PlayerClass,
    Team,
)
from tfsight.core.models import (
    UNKNOWN_USER,
    ChatMessage,
    DeathEvent,
    DemoData,
    DemoHeader,
    PlayerSummary,
    Round,
    User,
)
from tfsight.core.parser import (
    DemoLoadError,
    ParseDemoBinary,
    ParserBackend,
    parse_demo_bytes,
    parse_record,
)

__all__: list[str] = [
    "KD_PRECISION",
    "PAGE_SIZE",
    "ChatKind",
    "PlayerClass",
    "Team",
    "UNKNOWN_USER",
    "ChatMessage",
    "DeathEvent",
    "DemoData",
    "DemoHeader",
    "PlayerSummary",
    "Round",
    "User",
    "DemoLoadError",
    "ParseDemoBinary",
    "ParserBackend",
    "parse_demo_bytes",
    "parse_record",
]
