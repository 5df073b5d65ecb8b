"""
Demo Record Store - holds the currently loaded demo snapshot.

State machine:
    EMPTY --load--> LOADING --ok--> READY
                            --fail--> EMPTY (with error), or READY (with error)
                                      when an earlier snapshot is still held
    READY --load--> LOADING
    any   --reset--> EMPTY

Every load is stamped with a generation number when it is *started*. Only
the newest generation may commit or fail, so a slow earlier load that
finishes after a newer one is discarded instead of overwriting it.

The whole state lives in one frozen StoreState that is swapped under a lock;
readers see either the old state or the new one, never a mix.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from tfsight.core.config import TFSightConfig
from tfsight.core.models import DemoData
from tfsight.core.parser import (
    DemoLoadError,
    DemoSource,
    ParseDemoBinary,
    ParserBackend,
    parse_demo_bytes,
    read_demo_bytes,
)

logger = logging.getLogger(__name__)


class StoreStatus(Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class StoreState:
    """Immutable view of the store at one instant."""

    data: DemoData | None = None
    error: str | None = None
    loading: bool = False
    generation: int = 0

    @property
    def status(self) -> StoreStatus:
        if self.loading:
            return StoreStatus.LOADING
        if self.data is not None:
            return StoreStatus.READY
        return StoreStatus.EMPTY


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one load request."""

    generation: int
    data: DemoData | None = None
    error: str | None = None
    error_kind: str | None = None
    # True when a newer load (or a reset) superseded this one
    stale: bool = False

    @property
    def committed(self) -> bool:
        return self.data is not None and not self.stale

    @property
    def failed(self) -> bool:
        return self.error is not None


def _describe_source(source: DemoSource) -> str:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return f"<{len(source)} bytes>"
    return Path(source).name


class DemoRecordStore:
    """Single-snapshot store for parsed demos."""

    def __init__(
        self,
        backend: ParserBackend | None = None,
        config: TFSightConfig | None = None,
    ) -> None:
        self._config = config or TFSightConfig()
        self._backend = backend or ParseDemoBinary(self._config.parser.parse_demo_binary)
        self._lock = threading.Lock()
        self._state = StoreState()
        self._generation = 0
        self._executor: ThreadPoolExecutor | None = None

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def snapshot(self) -> DemoData | None:
        return self._state.data

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def is_loading(self) -> bool:
        return self._state.loading

    @property
    def status(self) -> StoreStatus:
        return self._state.status

    # ------------------------------------------------------------------
    # Generation primitives
    # ------------------------------------------------------------------

    def begin_load(self) -> int:
        """Start a new load and return its generation number."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._state = replace(self._state, loading=True, error=None, generation=generation)
        logger.info(f"Load {generation} started")
        return generation

    def commit(self, generation: int, data: DemoData) -> bool:
        """Replace the snapshot with ``data`` if ``generation`` is still the newest load."""
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding result of stale load {generation} (current {self._generation})")
                return False
            self._state = StoreState(data=data, generation=generation)
        logger.info(f"Load {generation} committed: map={data.header.map!r}, users={len(data.users)}")
        return True

    def fail(self, generation: int, message: str) -> bool:
        """Record a failed load. The previous snapshot, if any, is kept."""
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding failure of stale load {generation} (current {self._generation})")
                return False
            self._state = replace(self._state, error=message, loading=False)
        logger.warning(f"Load {generation} failed: {message}")
        return True

    def reset(self) -> None:
        """Drop the snapshot and error. Loads still in flight are invalidated."""
        with self._lock:
            self._generation += 1
            self._state = StoreState(generation=self._generation)
        logger.info("Store reset")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _run_load(self, generation: int, source: DemoSource) -> LoadResult:
        label = _describe_source(source)
        try:
            demo_bytes = read_demo_bytes(source, self._config.parser.allowed_extensions)
            data = parse_demo_bytes(demo_bytes, self._backend)
        except DemoLoadError as e:
            current = self.fail(generation, e.message)
            return LoadResult(
                generation=generation, error=e.message, error_kind=e.kind, stale=not current
            )
        except Exception as e:
            logger.exception(f"Unexpected error while loading {label}")
            message = f"Unexpected error while loading demo ({type(e).__name__})"
            current = self.fail(generation, message)
            return LoadResult(
                generation=generation, error=message, error_kind="internal", stale=not current
            )

        current = self.commit(generation, data)
        return LoadResult(generation=generation, data=data, stale=not current)

    def load_demo(self, source: DemoSource) -> LoadResult:
        """
        Load a demo synchronously.

        Args:
            source: Path to a .dem file, or the raw file bytes

        Returns:
            LoadResult; ``committed`` is True when the new snapshot is now current
        """
        return self._run_load(self.begin_load(), source)

    def submit_load(self, source: DemoSource) -> "Future[LoadResult]":
        """Start a load on the store's worker pool.

        The generation is taken here, at submission, so the most recently
        submitted load decides the final state regardless of finishing order.
        """
        generation = self.begin_load()
        try:
            with self._lock:
                if self._executor is None:
                    self._executor = ThreadPoolExecutor(
                        max_workers=self._config.store.max_workers,
                        thread_name_prefix="tfsight-load",
                    )
                executor = self._executor
            return executor.submit(self._run_load, generation, source)
        except Exception as e:
            self.fail(generation, f"Could not start demo load: {e}")
            raise

    def close(self) -> None:
        """Shut down the worker pool, waiting for running loads."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> "DemoRecordStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
