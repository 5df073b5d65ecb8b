"""Tests for display-ready view builders."""

from tfsight.analysis.pagination import Page
from tfsight.analysis.sorting import SortConfig, SortDirection, SortKey
from tfsight.analysis.timing import format_tick
from tfsight.analysis.views import (
    ViewState,
    ViewTab,
    build_chat,
    build_killfeed,
    build_overview,
    build_rounds,
    build_scoreboard,
    chat_kind_label,
)
from tfsight.core.constants import ChatKind, PlayerClass, Team
from tfsight.core.models import DeathEvent, DemoData, User


def _make_feed(count: int) -> DemoData:
    users = {1: User(user_id=1, name="soldier", team=Team.RED)}
    deaths = [DeathEvent(tick=i * 10, killer=1, victim=1, weapon="rocket") for i in range(count)]
    return DemoData(users=users, deaths=deaths, interval_per_tick=0.5)


class TestBuildOverview:
    def test_overview(self, sample_data):
        info = build_overview(sample_data)
        assert info.map == "cp_process_f12"
        assert info.duration == "30m 5s"
        assert info.ticks_display == "120,380"
        assert info.player_count == 4
        assert info.server == "[EU] serveme.tf #1"
        assert info.protocol == 24
        assert info.recorder == "SourceTV Demo"
        assert info.game == "tf"
        assert (info.round_count, info.red_wins, info.blue_wins) == (3, 2, 1)

    def test_empty_snapshot(self):
        info = build_overview(DemoData())
        assert info.player_count == 0
        assert info.round_count == 0
        assert info.duration == "0m 0s"


class TestBuildScoreboard:
    def test_default_sort_is_points_descending(self, sample_data):
        rows = build_scoreboard(sample_data)
        # 2 and 4 tie on 18 points; lower id first. 5 has no summary.
        assert [r.user.user_id for r in rows] == [3, 2, 4, 5]

    def test_grouped(self, sample_data):
        rows = build_scoreboard(sample_data, grouped=True)
        assert [r.user.team for r in rows] == [Team.RED, Team.BLUE, Team.BLUE, Team.OTHER]
        assert [r.user.user_id for r in rows] == [2, 3, 4, 5]

    def test_sorted_by_name(self, sample_data):
        rows = build_scoreboard(sample_data, SortConfig(SortKey.NAME, SortDirection.ASC))
        assert [r.user.name for r in rows] == ["Alpha", "Bravo", "medic", "SourceTV"]

    def test_derived_stats(self, sample_data):
        rows = {r.user.user_id: r for r in build_scoreboard(sample_data)}
        assert rows[2].stats.kd == 2.5
        # no deaths: kd is the kill count
        assert rows[4].stats.kd == 9.0
        # soldier and unknown tied at 4: lowest class id
        assert rows[4].stats.top_class is PlayerClass.OTHER
        assert rows[3].stats.top_class is PlayerClass.MEDIC

    def test_user_without_summary(self, sample_data):
        row = {r.user.user_id: r for r in build_scoreboard(sample_data)}[5]
        assert row.summary is None
        assert row.stats.kd is None
        assert row.stats.headshot_pct is None
        assert row.classes == ()

    def test_played_classes(self, sample_data):
        row = {r.user.user_id: r for r in build_scoreboard(sample_data)}[2]
        assert row.classes == ((PlayerClass.SCOUT, 10), (PlayerClass.PYRO, 2))


class TestBuildKillfeed:
    def test_rows_resolve_users(self, sample_data):
        page = build_killfeed(sample_data)
        assert isinstance(page, Page)
        assert len(page) == 3

        first, second, third = page.items
        assert first.killer.name == "Alpha"
        assert first.victim.name == "medic"
        assert first.assister is None
        assert first.time == format_tick(1000, sample_data.interval_per_tick)
        assert second.assister.name == "medic"
        assert second.weapon == "tf_projectile_rocket"

    def test_unknown_killer(self, sample_data):
        third = build_killfeed(sample_data).items[2]
        assert third.killer.name == "Unknown"
        assert third.killer.team is Team.OTHER
        assert third.victim.name == "Bravo"

    def test_pages_of_fifty(self):
        data = _make_feed(120)
        pages = [build_killfeed(data, i) for i in range(3)]
        assert [len(p) for p in pages] == [50, 50, 20]
        ticks = [row.tick for p in pages for row in p.items]
        assert ticks == sorted(ticks)
        assert len(set(ticks)) == 120

    def test_page_index_clamped(self):
        data = _make_feed(120)
        assert build_killfeed(data, 10).page == 2
        assert build_killfeed(data, -1).page == 0

    def test_times_use_interval(self):
        data = _make_feed(30)
        # tick 250 at 0.5s per tick is 125 seconds
        assert build_killfeed(data).items[25].time == "02:05"

    def test_no_interval_shows_ticks(self):
        data = DemoData(deaths=[DeathEvent(tick=77, killer=1, victim=2)])
        assert build_killfeed(data).items[0].time == "77"

    def test_empty_killfeed(self):
        page = build_killfeed(DemoData())
        assert page.items == ()
        assert page.total_pages == 1


class TestBuildChat:
    def test_rows(self, sample_data):
        rows = build_chat(sample_data).items
        assert [r.sender for r in rows] == ["Alpha", "medic", "Ghost"]
        assert [r.team for r in rows] == [Team.RED, Team.BLUE, Team.OTHER]
        assert [r.kind_label for r in rows] == ["All", "Team", "AllDead"]
        assert rows[1].kind is ChatKind.TEAM
        assert rows[0].time == "00:07"

    def test_kind_label_without_raw_kind(self):
        assert chat_kind_label("", ChatKind.TEAM) == "team"
        assert chat_kind_label("NameChange", ChatKind.OTHER) == "NameChange"


class TestBuildRounds:
    def test_rounds(self, sample_data):
        rows = build_rounds(sample_data)
        assert [r.number for r in rows] == [1, 2, 3]
        assert [r.winner for r in rows] == [Team.RED, Team.BLUE, Team.RED]
        assert rows[0].length == "05:12"
        assert rows[1].length == "01:35"

    def test_long_round_has_no_hour_field(self, sample_data):
        assert build_rounds(sample_data)[2].length == "75:00"


class TestViewState:
    def test_defaults(self):
        state = ViewState()
        assert state.tab is ViewTab.OVERVIEW
        assert state.sort == SortConfig()
        assert state.kills_page == 0

    def test_toggle_sort(self):
        state = ViewState(grouped=True).toggle_sort("kills")
        assert state.sort == SortConfig(SortKey.KILLS, SortDirection.DESC)
        assert state.grouped is False
        assert state.toggle_sort("kills").sort.direction is SortDirection.ASC
