"""
Change Propagation - Keep the pair in sync as either file changes.

The loop owns both snapshots and the processing gate. File watchers never
call the handler directly: they push FileChange events onto the loop's
queue and a single consumer handles them one at a time. For each event:

1. Gate PROCESSING -> drop the event, on arrival or at dequeue
   (never queued for later, never retried)
2. Acquire the gate
3. Re-read the changed file; identical to the snapshot -> stop
   (this absorbs the notification caused by our own previous write)
4. Update the snapshot and translate changed -> other
5. Release the gate; it reopens only after the settle delay

Before any watcher is attached, bootstrap() fills an empty file from a
non-empty one.
"""

import logging
import queue
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from llm_translate.core.domain.entities import FilePair, FileSnapshot
from llm_translate.core.domain.enums import ChangeOutcome
from llm_translate.core.exceptions import SnapshotReadError
from llm_translate.core.ports.config_provider import DEFAULT_DEBOUNCE

from .gate import ProcessingGate
from .transform import TransformationResult, TransformationStep
from .watch import FileChange, FileWatcher, WatchStats


logger = logging.getLogger("ChangePropagationLoop")

# Seconds the consumer waits for an event before re-checking for shutdown
DEFAULT_POLL_INTERVAL = 0.5


class ChangePropagationLoop:
    """
    Orchestrates translation between the two files of a pair.

    Example:
        >>> loop = ChangePropagationLoop(pair, step)
        >>> loop.start()  # bootstrap, attach watchers, block until stop()
    """

    def __init__(
        self,
        pair: FilePair,
        step: TransformationStep,
        gate: ProcessingGate | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        watcher_factory: Callable[..., FileWatcher] = FileWatcher,
        on_change_detected: Callable[[FileChange], None] | None = None,
        on_auto_translate: Callable[[FileSnapshot, FileSnapshot], None] | None = None,
        on_translation_complete: Callable[[TransformationResult], None] | None = None,
    ):
        """
        Initialize the loop.

        Args:
            pair: The two snapshots to keep in sync.
            step: Transformation step used for every translation.
            gate: Processing gate (a fresh one with default settle delay if None).
            debounce_seconds: Quiet period passed to each FileWatcher.
            poll_interval: Consumer wake-up interval while idle.
            watcher_factory: Builds a FileWatcher for a path.
            on_change_detected: Called when a genuine content change is found.
            on_auto_translate: Called before the startup auto-sync runs.
            on_translation_complete: Called with every TransformationResult.
        """
        self.pair = pair
        self.step = step
        self.gate = gate or ProcessingGate()
        self.debounce_seconds = debounce_seconds
        self.poll_interval = poll_interval
        self.stats = WatchStats()

        self._watcher_factory = watcher_factory
        self._watchers: list[FileWatcher] = []
        self._events: queue.Queue[FileChange | None] = queue.Queue()
        self._running = False
        self._thread: threading.Thread | None = None

        self._on_change_detected = on_change_detected
        self._on_auto_translate = on_auto_translate
        self._on_translation_complete = on_translation_complete

    # -------------------------------------------------------------------------
    # Event intake
    # -------------------------------------------------------------------------

    def notify(self, change: FileChange) -> None:
        """
        Accept a change notification. Safe to call from any thread.

        A notification arriving while a transformation is in flight (or
        settling) is dropped on the spot; anything else is queued.
        """
        if self.gate.is_processing:
            self._drop(change)
            return
        logger.debug(f"Notification for {change.path} ({change.event.value})")
        self._events.put(change)

    def _drop(self, change: FileChange) -> None:
        logger.debug(f"Already processing, skipping {Path(change.path).name}")
        self.stats.notifications_dropped += 1

    @property
    def pending(self) -> int:
        """Number of notifications waiting for the consumer."""
        return self._events.qsize()

    # -------------------------------------------------------------------------
    # Startup auto-sync
    # -------------------------------------------------------------------------

    def bootstrap(self) -> TransformationResult | None:
        """
        Fill an empty file from its non-empty counterpart.

        Runs only when exactly one file has content.

        Returns:
            The transformation result, or None if nothing needed doing.
        """
        direction = self.pair.bootstrap_direction()
        if direction is None:
            logger.debug("Both files empty or both non-empty, no auto-sync needed")
            return None

        source, target = direction
        if not self.gate.try_acquire():
            logger.debug("Gate busy, skipping auto-sync")
            return None

        try:
            logger.info(f"{target.name} is empty, auto-translating from {source.name}")
            if self._on_auto_translate:
                self._on_auto_translate(source, target)
            return self._translate(source, target)
        except Exception as e:
            self._record_unexpected(e)
            return None
        finally:
            self.gate.release()

    # -------------------------------------------------------------------------
    # Change handling
    # -------------------------------------------------------------------------

    def handle_change(self, change: FileChange) -> ChangeOutcome:
        """
        Process one change notification.

        Never raises; failures are logged and counted in ``stats``.
        """
        changed = self.pair.snapshot_for(change.path)
        if changed is None:
            logger.debug(f"Ignoring notification for unwatched path {change.path}")
            return ChangeOutcome.IGNORED

        if not self.gate.try_acquire():
            self._drop(change)
            return ChangeOutcome.DROPPED_BUSY

        settle = True
        try:
            outcome = self._propagate(changed, change)
            settle = outcome is not ChangeOutcome.UNCHANGED
            return outcome
        except Exception as e:
            self._record_unexpected(e)
            return ChangeOutcome.FAILED
        finally:
            self.gate.release(settle=settle)

    def _propagate(self, changed: FileSnapshot, change: FileChange) -> ChangeOutcome:
        try:
            new_content = changed.read_disk()
        except SnapshotReadError as e:
            logger.warning(f"Could not re-read {changed.name}: {e}")
            return ChangeOutcome.FAILED

        logger.debug(
            f"Old content length: {len(changed.content)}, New content length: {len(new_content)}"
        )
        if new_content == changed.content:
            logger.debug(f"Content of {changed.name} unchanged, skipping")
            return ChangeOutcome.UNCHANGED

        changed.update(new_content)
        self.stats.changes_detected += 1
        self.stats.last_change = datetime.now()
        logger.info(f"{changed.name} changed, translating...")
        if self._on_change_detected:
            self._on_change_detected(change)

        result = self._translate(changed, self.pair.other(changed))
        return ChangeOutcome.TRANSLATED if result.success else ChangeOutcome.FAILED

    def _translate(self, source: FileSnapshot, target: FileSnapshot) -> TransformationResult:
        self.stats.translations_triggered += 1
        result = self.step.run(source, target)
        self.stats.last_translation = datetime.now()

        if result.success:
            self.stats.translations_successful += 1
        else:
            self.stats.translations_failed += 1
            self.stats.errors.append(result.error or "Unknown error")

        if self._on_translation_complete:
            self._on_translation_complete(result)
        return result

    def _record_unexpected(self, error: Exception) -> None:
        logger.exception(f"Unexpected error while propagating change: {error}")
        self.stats.translations_failed += 1
        self.stats.errors.append(str(error))

    # -------------------------------------------------------------------------
    # Consumer
    # -------------------------------------------------------------------------

    def process_next(self, timeout: float | None = None) -> ChangeOutcome | None:
        """
        Handle the next queued notification.

        Args:
            timeout: Seconds to wait for one (None blocks, 0 does not wait).

        Returns:
            The outcome, or None if nothing arrived (or the loop was stopped).
        """
        try:
            change = self._events.get(block=timeout != 0, timeout=timeout or None)
        except queue.Empty:
            return None
        if change is None:
            return None
        return self.handle_change(change)

    def drain(self) -> list[ChangeOutcome]:
        """Handle every notification already queued, without waiting."""
        outcomes = []
        while True:
            outcome = self.process_next(timeout=0)
            if outcome is None and self._events.empty():
                return outcomes
            if outcome is not None:
                outcomes.append(outcome)

    def run(self) -> None:
        """Consume notifications until stop() is called."""
        self._running = True
        self._consume()

    def _consume(self) -> None:
        while self._running:
            self.process_next(timeout=self.poll_interval)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def attach_watchers(self) -> None:
        """Start one FileWatcher per file, each feeding this loop's queue."""
        for snapshot in self.pair.snapshots:
            watcher = self._watcher_factory(snapshot.path, debounce_seconds=self.debounce_seconds)
            watcher.on_change(self.notify)
            watcher.start()
            self._watchers.append(watcher)
        logger.debug("Watchers set up successfully")

    def close_watchers(self) -> None:
        """Stop both watchers and release their observers."""
        for watcher in self._watchers:
            watcher.stop()
        self._watchers.clear()

    def start(self) -> None:
        """
        Bootstrap, attach watchers and consume events (blocking).

        Watchers are closed when this returns, including on KeyboardInterrupt.
        """
        self.bootstrap()
        self.attach_watchers()
        try:
            self.run()
        finally:
            self._running = False
            self.close_watchers()

    def start_async(self) -> None:
        """Bootstrap, attach watchers and consume events on a daemon thread."""
        self.bootstrap()
        self.attach_watchers()
        self._running = True
        self._thread = threading.Thread(
            target=self._consume, name="change-propagation", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop consuming and close the watchers. An in-flight step is not awaited."""
        self._running = False
        self._events.put(None)
        self.close_watchers()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.poll_interval * 2)
            self._thread = None

    @property
    def is_running(self) -> bool:
        return self._running

    def get_status(self) -> dict[str, Any]:
        """Current loop status for diagnostics."""
        return {
            "running": self._running,
            "pair": str(self.pair),
            "gate": self.gate.state.name,
            "pending": self.pending,
            "uptime": self.stats.uptime_formatted,
            "changes_detected": self.stats.changes_detected,
            "translations_successful": self.stats.translations_successful,
            "translations_failed": self.stats.translations_failed,
            "notifications_dropped": self.stats.notifications_dropped,
        }
