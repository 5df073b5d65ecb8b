"""
TFSight CLI - terminal viewer for TF2 demos

Provides commands for:
- Match overview (map, duration, server, round score)
- Scoreboard with sorting or team grouping
- Paged killfeed and chat log
- Round results and weapon usage
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from tfsight import __version__
from tfsight.analysis.frames import weapon_counts
from tfsight.analysis.sorting import SortConfig, SortKey
from tfsight.analysis.views import (
    build_chat,
    build_killfeed,
    build_overview,
    build_rounds,
    build_scoreboard,
)
from tfsight.core.config import TFSightConfig, configure_logging, load_config
from tfsight.core.constants import Team
from tfsight.core.models import DemoData, User
from tfsight.store import DemoRecordStore

app = typer.Typer(
    name="tfsight",
    help="Terminal viewer for Team Fortress 2 demo files",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)

TEAM_STYLES = {Team.RED: "bold red", Team.BLUE: "bold blue", Team.OTHER: "grey50"}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold]TFSight[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file (.yaml, .toml or .json)", dir_okay=False
    ),
    parser_binary: Optional[str] = typer.Option(
        None, "--parser", help="Path or name of tf_demo_parser's parse_demo executable"
    ),
) -> None:
    """TFSight - TF2 demo viewer"""
    config = load_config(config_file)
    if parser_binary:
        config.parser.parse_demo_binary = parser_binary
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config.logging)
    ctx.obj = config


def _config(ctx: typer.Context) -> TFSightConfig:
    return ctx.obj if isinstance(ctx.obj, TFSightConfig) else TFSightConfig()


def _load(ctx: typer.Context, demo_path: Path) -> DemoData:
    """Parse ``demo_path`` through the record store or exit with the load error."""
    config = _config(ctx)
    store = DemoRecordStore(config=config)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Parsing demo file...", total=None)
        result = store.load_demo(demo_path)

    if not result.committed:
        console.print(f"[red]Error loading demo:[/red] {escape(result.error)}")
        raise typer.Exit(1)
    return result.data


def _user_cell(user: User) -> str:
    return f"[{TEAM_STYLES[user.team]}]{escape(user.name)}[/]"


def _page_footer(page) -> None:
    console.print(
        f"[dim]Page {page.page + 1} of {page.total_pages} "
        f"(showing {page.start + 1 if len(page) else 0}-{page.stop} of {page.total_items})[/dim]"
    )


DemoArgument = typer.Argument(
    ..., help="Path to the .dem file", exists=True, dir_okay=False, resolve_path=True
)


@app.command()
def overview(ctx: typer.Context, demo_path: Path = DemoArgument) -> None:
    """Show map, duration, server info and round score."""
    data = _load(ctx, demo_path)
    info = build_overview(data)

    table = Table(title="Demo Information", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Map", escape(info.map))
    table.add_row("Duration", info.duration)
    table.add_row("Ticks", info.ticks_display)
    table.add_row("Players", str(info.player_count))
    table.add_row("Server Name", escape(info.server))
    table.add_row("Protocol", str(info.protocol))
    table.add_row("Recorder", escape(info.recorder))
    table.add_row("Game", escape(info.game))
    table.add_row("Rounds", f"{info.round_count} (RED {info.red_wins} - {info.blue_wins} BLU)")
    console.print(table)


@app.command()
def players(
    ctx: typer.Context,
    demo_path: Path = DemoArgument,
    sort: Optional[str] = typer.Option(
        None, "--sort", "-s", help=f"Sort key: {', '.join(k.value for k in SortKey)}"
    ),
    direction: Optional[str] = typer.Option(None, "--direction", "-d", help="asc or desc"),
    grouped: bool = typer.Option(False, "--grouped", "-g", help="Group by team, then points"),
) -> None:
    """Show the scoreboard."""
    view = _config(ctx).view
    try:
        sort_config = SortConfig.parse(
            sort or view.default_sort_key, direction or view.default_sort_direction
        )
    except ValueError as e:
        console.print(f"[red]Invalid sort option:[/red] {e}")
        raise typer.Exit(2)

    data = _load(ctx, demo_path)
    rows = build_scoreboard(data, sort_config, grouped=grouped, kd_precision=view.kd_precision)

    table = Table(title="Players")
    table.add_column("Player")
    table.add_column("Team")
    table.add_column("Class")
    for column in ("Points", "K", "A", "D", "K/D", "HS%", "Damage", "Healing"):
        table.add_column(column, justify="right")

    for row in rows:
        summary = row.summary
        top = row.stats.top_class.display_name if row.stats.top_class is not None else "-"
        if summary is None:
            counters = ["-"] * 8
        else:
            counters = [
                str(summary.value("points")),
                str(summary.value("kills")),
                str(summary.value("assists")),
                str(summary.value("deaths")),
                f"{row.stats.kd:.{view.kd_precision}f}",
                f"{row.stats.headshot_pct}%",
                str(summary.value("damage_dealt")),
                str(summary.value("healing")),
            ]
        table.add_row(_user_cell(row.user), row.user.team.value, top, *counters)
    console.print(table)
    if not data.has_summaries:
        console.print("[yellow]This demo has no end-of-match player summaries[/yellow]")


@app.command()
def kills(
    ctx: typer.Context,
    demo_path: Path = DemoArgument,
    page: int = typer.Option(1, "--page", "-p", help="1-based page number"),
) -> None:
    """Show the killfeed, one page at a time."""
    data = _load(ctx, demo_path)
    window = build_killfeed(data, page - 1, _config(ctx).view.page_size)

    table = Table(title="Killfeed")
    table.add_column("Time", style="dim")
    table.add_column("Killer", justify="right")
    table.add_column("Victim")
    table.add_column("Assist")
    table.add_column("Weapon", style="cyan")
    for row in window.items:
        table.add_row(
            row.time,
            _user_cell(row.killer),
            _user_cell(row.victim),
            _user_cell(row.assister) if row.assister is not None else "",
            escape(row.weapon),
        )
    console.print(table)
    _page_footer(window)


@app.command()
def chat(
    ctx: typer.Context,
    demo_path: Path = DemoArgument,
    page: int = typer.Option(1, "--page", "-p", help="1-based page number"),
) -> None:
    """Show the chat log, one page at a time."""
    data = _load(ctx, demo_path)
    window = build_chat(data, page - 1, _config(ctx).view.page_size)

    table = Table(title=f"Chat Log ({window.total_items} messages)")
    table.add_column("Time", style="dim")
    table.add_column("From")
    table.add_column("Kind", style="dim")
    table.add_column("Message")
    for row in window.items:
        table.add_row(
            row.time,
            f"[{TEAM_STYLES[row.team]}]{escape(row.sender)}[/]",
            escape(row.kind_label),
            escape(row.text),
        )
    console.print(table)
    _page_footer(window)


@app.command()
def rounds(ctx: typer.Context, demo_path: Path = DemoArgument) -> None:
    """Show round winners and lengths."""
    data = _load(ctx, demo_path)
    rows = build_rounds(data)
    if not rows:
        console.print("[yellow]No rounds recorded[/yellow]")
        return

    table = Table(title="Rounds")
    table.add_column("#", justify="right")
    table.add_column("Winner")
    table.add_column("Length", justify="right")
    table.add_column("Ended At", justify="right", style="dim")
    for row in rows:
        table.add_row(
            str(row.number), f"[{TEAM_STYLES[row.winner]}]{row.winner.value}[/]", row.length, row.end_time
        )
    console.print(table)


@app.command()
def weapons(ctx: typer.Context, demo_path: Path = DemoArgument) -> None:
    """Show kills per weapon."""
    data = _load(ctx, demo_path)
    counts = weapon_counts(data)
    if counts.empty:
        console.print("[yellow]No kills recorded[/yellow]")
        return

    table = Table(title="Weapons")
    table.add_column("Weapon", style="cyan")
    table.add_column("Kills", justify="right")
    for weapon, count in counts.items():
        table.add_row(escape(str(weapon)), str(count))
    console.print(table)
