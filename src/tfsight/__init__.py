"""
TFSight - Team Fortress 2 Demo Viewer

Turns the record produced by an external TF2 demo parser into sortable,
paginated, cross-referenced views: overview, scoreboard, killfeed, chat and
rounds.

Usage:
    from tfsight import DemoRecordStore, build_scoreboard

    store = DemoRecordStore()
    result = store.load_demo("match.dem")
    if result.committed:
        for row in build_scoreboard(store.snapshot):
            print(f"{row.user.name}: {row.stats.kd}")
"""

__version__ = "0.1.0"
__author__ = "TFSight Contributors"


def __getattr__(name):
    """Lazy import so `import tfsight` stays cheap (pandas is only loaded on demand)."""
    if name == "DemoRecordStore":
        from tfsight.store import DemoRecordStore
        return DemoRecordStore
    elif name == "DemoData":
        from tfsight.core.models import DemoData
        return DemoData
    elif name == "DemoLoadError":
        from tfsight.core.parser import DemoLoadError
        return DemoLoadError
    elif name == "parse_record":
        from tfsight.core.parser import parse_record
        return parse_record
    elif name in ("build_overview", "build_scoreboard", "build_killfeed", "build_chat", "build_rounds", "ViewState"):
        from tfsight.analysis import views
        return getattr(views, name)
    raise AttributeError(f"module 'tfsight' has no attribute '{name}'")


__all__ = [
    "__version__",
    "DemoRecordStore",
    "DemoData",
    "DemoLoadError",
    "parse_record",
    "build_overview",
    "build_scoreboard",
    "build_killfeed",
    "build_chat",
    "build_rounds",
    "ViewState",
]
