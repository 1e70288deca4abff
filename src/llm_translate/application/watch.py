"""
Watch - File change detection for the translated pair.

Provides:
- FileWatcher: Watches one file via watchdog and reports debounced changes
- FileChange / WatchEvent: The change notifications fed to the propagation loop
- WatchStats: Counters for a watch session

watchdog observes directories, so each FileWatcher schedules its file's
parent directory (non-recursive) and filters events down to that file.
Editors that save atomically (write temp file, rename over the original)
show up as moves or creations and are treated as modifications.
"""

import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from llm_translate.core.ports.config_provider import DEFAULT_DEBOUNCE


class WatchEvent(Enum):
    """Kind of filesystem event seen for a watched file."""

    MODIFIED = "modified"
    CREATED = "created"
    MOVED = "moved"


@dataclass
class FileChange:
    """A debounced change notification for one watched file."""

    path: str
    event: WatchEvent = WatchEvent.MODIFIED
    detected_at: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.detected_at.strftime('%H:%M:%S')}] {self.event.value}: {self.path}"


@dataclass
class WatchStats:
    """Statistics for a watch session."""

    started_at: datetime = field(default_factory=datetime.now)
    changes_detected: int = 0
    translations_triggered: int = 0
    translations_successful: int = 0
    translations_failed: int = 0
    notifications_dropped: int = 0
    last_change: datetime | None = None
    last_translation: datetime | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the session started."""
        return (datetime.now() - self.started_at).total_seconds()

    @property
    def uptime_formatted(self) -> str:
        """Uptime as e.g. ``1h 2m 3s``."""
        seconds = int(self.uptime_seconds)
        hours, remainder = divmod(seconds, 3600)
        minutes, secs = divmod(remainder, 60)
        if hours:
            return f"{hours}h {minutes}m {secs}s"
        if minutes:
            return f"{minutes}m {secs}s"
        return f"{secs}s"


class _WatchedFileHandler(FileSystemEventHandler):
    """Forwards events that concern one file to its FileWatcher."""

    def __init__(self, watcher: "FileWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher._handle_event(os.fsdecode(event.src_path), WatchEvent.MODIFIED)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher._handle_event(os.fsdecode(event.src_path), WatchEvent.CREATED)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher._handle_event(os.fsdecode(event.dest_path), WatchEvent.MOVED)


class FileWatcher:
    """
    Watches a single file and reports changes after a quiet period.

    Every raw event restarts the debounce timer; once the file has been
    quiet for ``debounce_seconds`` a single FileChange is passed to the
    registered callbacks (on the timer thread).

    Example:
        >>> watcher = FileWatcher("notes.md", debounce_seconds=0.2)
        >>> watcher.on_change(lambda change: print(change))
        >>> watcher.start()
        >>> ...
        >>> watcher.stop()
    """

    def __init__(
        self,
        path: str | Path,
        debounce_seconds: float = DEFAULT_DEBOUNCE,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        """
        Initialize the watcher.

        Args:
            path: File to watch.
            debounce_seconds: Quiet period before a change is reported.
            observer_factory: Creates the watchdog observer.
        """
        self.path = Path(path)
        self.debounce_seconds = debounce_seconds
        self.logger = logging.getLogger("FileWatcher")

        self._resolved = self.path.resolve()
        self._observer_factory = observer_factory
        self._observer: Observer | None = None
        self._callbacks: list[Callable[[FileChange], None]] = []
        self._timer: threading.Timer | None = None
        self._pending_event = WatchEvent.MODIFIED
        self._lock = threading.Lock()
        self._running = False

    def on_change(self, callback: Callable[[FileChange], None]) -> None:
        """Register a callback invoked for each debounced change."""
        self._callbacks.append(callback)

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """
        Start watching.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if not self.path.is_file():
            raise FileNotFoundError(f"File not found: {self.path}")
        if self._running:
            return

        self._observer = self._observer_factory()
        self._observer.schedule(
            _WatchedFileHandler(self),
            str(self._resolved.parent),
            recursive=False,
        )
        self._observer.start()
        self._running = True
        self.logger.debug(f"Watching {self.path}")

    def stop(self) -> None:
        """Stop watching and release the observer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._running = False

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
        self.logger.debug(f"Stopped watching {self.path}")

    def _is_watched(self, path: str) -> bool:
        return Path(path).resolve() == self._resolved

    def _handle_event(self, path: str, event: WatchEvent) -> None:
        """Called from the observer thread for every raw event."""
        if not self._running or not self._is_watched(path):
            return

        self.logger.debug(f"Raw {event.value} event for {self.path.name}")
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending_event = event
            self._timer = threading.Timer(self.debounce_seconds, self._emit)
            self._timer.daemon = True
            self._timer.start()

    def _emit(self) -> None:
        with self._lock:
            self._timer = None
            if not self._running:
                return
            event = self._pending_event

        change = FileChange(path=str(self.path), event=event)
        self.logger.debug(f"Change detected in {self.path.name} ({event.value})")
        for callback in self._callbacks:
            callback(change)

    def __enter__(self) -> "FileWatcher":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()

