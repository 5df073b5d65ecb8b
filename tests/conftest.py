"""Shared test fixtures."""

import copy

import pytest

from tfsight.core.parser import parse_record

# A trimmed record in the layout tf_demo_parser emits
SAMPLE_RECORD: dict = {
    "header": {
        "demo_type": "HL2DEMO",
        "version": 3,
        "protocol": 24,
        "server": "[EU] serveme.tf #1",
        "nick": "SourceTV Demo",
        "map": "cp_process_f12",
        "game": "tf",
        "duration": 1805.7,
        "ticks": 120380,
        "frames": 60000,
        "signon": 420000,
    },
    "users": {
        "2": {"classes": {"1": 10, "7": 2}, "name": "Alpha", "userId": 2, "steamId": "[U:1:1001]", "team": "red"},
        "3": {"classes": {"5": 14}, "name": "medic", "userId": 3, "steamId": "[U:1:1002]", "team": "blue"},
        "4": {"classes": {"3": 4, "0": 4}, "name": "Bravo", "userId": 4, "steamId": "[U:1:1003]", "team": "blue"},
        "5": {"classes": {}, "name": "SourceTV", "userId": 5, "steamId": "BOT", "team": "spectator"},
    },
    "deaths": [
        {"weapon": "scattergun", "victim": 3, "assister": None, "killer": 2, "tick": 1000},
        {"weapon": "tf_projectile_rocket", "victim": 2, "assister": 3, "killer": 4, "tick": 2000},
        {"weapon": "world", "victim": 4, "assister": None, "killer": 99, "tick": 4000},
    ],
    "chat": [
        {"kind": "TF_Chat_All", "from": "Alpha", "text": "gl hf", "tick": 500},
        {"kind": "TF_Chat_Team", "from": "medic", "text": "uber ready", "tick": 3000},
        {"kind": "TF_Chat_AllDead", "from": "Ghost", "text": "[*DEAD*] hi", "tick": 4100},
    ],
    "rounds": [
        {"winner": "red", "length": 312.4, "end_tick": 21000},
        {"winner": "blue", "length": 95.0, "end_tick": 28000},
        {"winner": "red", "length": 4500.0, "end_tick": 330000},
    ],
    "startTick": 0,
    "intervalPerTick": 0.015,
    "pauses": [{"from": 100, "to": 200}],
    "playerSummary": {
        "player_summaries": {
            "2": {"kills": 10, "assists": 2, "deaths": 4, "headshots": 0, "points": 18, "damage_dealt": 3200, "healing": 0},
            "3": {"kills": 1, "assists": 20, "deaths": 3, "points": 25, "healing": 12000, "ubercharges": 6},
            "4": {"kills": 9, "assists": 1, "deaths": 0, "headshots": 0, "points": 18, "damage_dealt": 4100},
        }
    },
}


@pytest.fixture
def sample_payload() -> dict:
    """A fresh, mutable copy of the sample record."""
    return copy.deepcopy(SAMPLE_RECORD)


@pytest.fixture
def sample_data(sample_payload):
    """The sample record converted to a DemoData snapshot."""
    return parse_record(sample_payload)


class FakeBackend:
    """Parser backend that returns canned output or raises."""

    def __init__(self, output=None, error: Exception | None = None):
        self.output = output
        self.error = error
        self.calls: list[bytes] = []

    def __call__(self, demo_bytes: bytes):
        self.calls.append(demo_bytes)
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def fake_backend_cls():
    return FakeBackend
