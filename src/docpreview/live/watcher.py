"""File watcher — triggers the live pipeline on project changes.

Monitors the project manifests, the README and the modules of every source
directory.  Each change is categorised to pick the pipeline path:

- ``README.md`` changed -> push README, then diff
- ``elm*.json`` changed -> reload manifest, push manifest, docs and diff
- a module changed -> push docs, then diff
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

type ChangeCategory = Literal["readme", "manifest", "source"]


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: What kind of file changed (determines pipeline path).

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: ChangeCategory


_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}

IGNORED_DIRS = frozenset({"node_modules", "elm-stuff", ".git"})


def _within(path: Path, directory: Path) -> bool:
    try:
        path.relative_to(directory)
    except ValueError:
        return False
    return True


def categorize_change(
    path: Path,
    root: Path,
    source_dirs: Iterable[Path] = (),
) -> ChangeCategory | None:
    """Determine the category of a changed file.

    Returns None if the file doesn't belong to any watched category.

    """
    if IGNORED_DIRS.intersection(path.parts):
        return None

    name = path.name
    source_dirs = tuple(source_dirs)

    if path.parent == root:
        if name.startswith("README") and name.endswith(".md"):
            return "readme"
        if name.startswith("elm") and name.endswith(".json"):
            return "manifest"

    if name == "elm.json" and any(path.parent == src.parent for src in source_dirs):
        return "manifest"

    if path.suffix == ".elm" and any(_within(path, src) for src in source_dirs):
        return "source"

    return None


class ProjectWatcher:
    """Watches a project and yields categorised change events.

    Runs ``watchfiles`` in a background thread and bridges events to an
    asyncio queue.  Source directories outside the project root are
    watched as well.

    Args:
        root: Project directory.
        source_dirs: Absolute source directories from the manifest.

    """

    def __init__(self, root: Path, source_dirs: Iterable[Path] = ()) -> None:
        self._root = root
        self._source_dirs = tuple(source_dirs)
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def source_dirs(self) -> tuple[Path, ...]:
        return self._source_dirs

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def watch_paths(self) -> list[Path]:
        """Directories handed to watchfiles: the root plus outside sources."""
        paths = [self._root]
        for src in self._source_dirs:
            if src.is_dir() and not _within(src, self._root):
                paths.append(src)
        return paths

    def start(self) -> None:
        """Start watching in a background thread (call from the event loop)."""
        if self.is_running:
            return

        self._loop = asyncio.get_running_loop()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            name="docpreview-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Async iterator that yields ChangeEvent objects as they occur."""
        while self.is_running or not self._queue.empty():
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=0.5)
                yield event
            except TimeoutError:
                if not self.is_running:
                    break

    def _watch_loop(self) -> None:
        """Background thread: run watchfiles and push events to the queue."""
        from watchfiles import watch

        for raw_changes in watch(
            *self.watch_paths(),
            stop_event=self._stop_event,
            debounce=300,
            step=100,
        ):
            for change_type, path_str in raw_changes:
                path = Path(path_str)
                category = categorize_change(path, self._root, self._source_dirs)
                if category is None:
                    continue

                kind = _CHANGE_KIND_MAP.get(change_type, "modified")
                event = ChangeEvent(path=path, kind=kind, category=category)
                if self._loop is not None:
                    self._loop.call_soon_threadsafe(self._queue.put_nowait, event)
