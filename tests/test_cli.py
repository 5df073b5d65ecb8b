"""Tests for the tfsight command line interface."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

import tfsight.cli as cli
from tfsight import __version__
from tfsight.core.config import ENV_MAPPINGS
from tfsight.store import DemoRecordStore

runner = CliRunner()


@pytest.fixture
def demo_file(tmp_path):
    path = tmp_path / "match.dem"
    path.write_bytes(b"HL2DEMO\x00")
    return path


@pytest.fixture
def use_backend(monkeypatch, tmp_path):
    """Route the CLI's store through a fake parser backend."""
    for name in ENV_MAPPINGS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setattr(cli, "console", Console(width=200))
    monkeypatch.chdir(tmp_path)

    def install(backend):
        def factory(config=None):
            return DemoRecordStore(backend=backend, config=config)

        monkeypatch.setattr(cli, "DemoRecordStore", factory)
        return backend

    return install


def _invoke(*args):
    return runner.invoke(cli.app, list(args))


class TestCommands:
    def test_version(self):
        result = _invoke("--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_overview(self, use_backend, fake_backend_cls, sample_payload, demo_file):
        backend = use_backend(fake_backend_cls(output=sample_payload))
        result = _invoke("overview", str(demo_file))
        assert result.exit_code == 0, result.output
        assert "cp_process_f12" in result.output
        assert "120,380" in result.output
        assert "RED 2 - 1 BLU" in result.output
        assert backend.calls == [b"HL2DEMO\x00"]

    def test_players(self, use_backend, fake_backend_cls, sample_payload, demo_file):
        use_backend(fake_backend_cls(output=sample_payload))
        result = _invoke("players", str(demo_file), "--sort", "kills")
        assert result.exit_code == 0, result.output
        assert result.output.index("Alpha") < result.output.index("Bravo")
        assert "2.50" in result.output

    def test_players_without_summaries(
        self, use_backend, fake_backend_cls, sample_payload, demo_file
    ):
        del sample_payload["playerSummary"]
        use_backend(fake_backend_cls(output=sample_payload))
        result = _invoke("players", str(demo_file))
        assert result.exit_code == 0, result.output
        assert "no end-of-match player summaries" in result.output

    def test_invalid_sort(self, use_backend, fake_backend_cls, demo_file):
        backend = use_backend(fake_backend_cls(output={}))
        result = _invoke("players", str(demo_file), "--sort", "elo")
        assert result.exit_code == 2
        assert "Invalid sort option" in result.output
        assert backend.calls == []

    def test_kills(self, use_backend, fake_backend_cls, sample_payload, demo_file):
        use_backend(fake_backend_cls(output=sample_payload))
        result = _invoke("kills", str(demo_file))
        assert result.exit_code == 0, result.output
        assert "Unknown" in result.output
        assert "Page 1 of 1" in result.output

    def test_chat(self, use_backend, fake_backend_cls, sample_payload, demo_file):
        use_backend(fake_backend_cls(output=sample_payload))
        result = _invoke("chat", str(demo_file))
        assert result.exit_code == 0, result.output
        assert "uber ready" in result.output
        assert "[*DEAD*] hi" in result.output

    def test_rounds(self, use_backend, fake_backend_cls, sample_payload, demo_file):
        use_backend(fake_backend_cls(output=sample_payload))
        result = _invoke("rounds", str(demo_file))
        assert result.exit_code == 0, result.output
        assert "75:00" in result.output

    def test_weapons(self, use_backend, fake_backend_cls, sample_payload, demo_file):
        use_backend(fake_backend_cls(output=sample_payload))
        result = _invoke("weapons", str(demo_file))
        assert result.exit_code == 0, result.output
        assert "scattergun" in result.output


    def test_parser_strings_are_not_markup(
        self, use_backend, fake_backend_cls, sample_payload, demo_file
    ):
        sample_payload["deaths"][0]["weapon"] = "[bold]scattergun"
        sample_payload["chat"][0]["kind"] = "TF_Chat_[red]All"
        use_backend(fake_backend_cls(output=sample_payload))
        for command in ("kills", "weapons"):
            result = _invoke(command, str(demo_file))
            assert result.exit_code == 0, result.output
            assert "[bold]scattergun" in result.output
        result = _invoke("chat", str(demo_file))
        assert "[red]All" in result.output


class TestErrors:
    def test_parser_failure_exits_1(self, use_backend, fake_backend_cls, demo_file):
        use_backend(fake_backend_cls(error=RuntimeError("bad packet")))
        result = _invoke("overview", str(demo_file))
        assert result.exit_code == 1
        assert "bad packet" in result.output

    def test_wrong_extension(self, use_backend, fake_backend_cls, tmp_path):
        backend = use_backend(fake_backend_cls(output={}))
        path = tmp_path / "match.txt"
        path.write_bytes(b"x")
        result = _invoke("overview", str(path))
        assert result.exit_code == 1
        assert backend.calls == []

    def test_missing_file(self, use_backend, fake_backend_cls, tmp_path):
        use_backend(fake_backend_cls(output={}))
        result = _invoke("overview", str(tmp_path / "gone.dem"))
        assert result.exit_code != 0
