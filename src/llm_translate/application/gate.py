"""
Processing Gate - At most one transformation in flight for the whole pair.

The gate is a drop gate, not a queue: while it is PROCESSING, change
notifications are discarded by the caller. After a transformation the
gate stays PROCESSING for a short settle delay so the notification caused
by the transformation's own write is absorbed instead of starting the
reverse transformation.

The settle delay is a heuristic debounce against self-triggered
notifications, not a correctness guarantee; the content-equality check in
the propagation loop catches the same notification on its own.
"""

import threading
import time
from collections.abc import Callable

from llm_translate.core.domain.enums import GateState
from llm_translate.core.ports.config_provider import DEFAULT_SETTLE_DELAY


class ProcessingGate:
    """
    Single-slot Idle/Processing state machine.

    Transitions:
        IDLE --try_acquire()--> PROCESSING
        PROCESSING --release()--> PROCESSING until settle delay elapses --> IDLE

    The clock is injectable so tests can step through the settle window.
    """

    def __init__(
        self,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ):
        if settle_delay < 0:
            raise ValueError("settle_delay cannot be negative")
        self.settle_delay = settle_delay
        self._clock = clock
        self._lock = threading.Lock()
        self._busy = False
        self._reopens_at: float | None = None

    @property
    def state(self) -> GateState:
        with self._lock:
            return self._state_locked()

    @property
    def is_processing(self) -> bool:
        return self.state is GateState.PROCESSING

    def _state_locked(self) -> GateState:
        if self._busy:
            return GateState.PROCESSING
        if self._reopens_at is not None:
            if self._clock() < self._reopens_at:
                return GateState.PROCESSING
            self._reopens_at = None
        return GateState.IDLE

    def try_acquire(self) -> bool:
        """Move to PROCESSING. Returns False if the gate was not IDLE."""
        with self._lock:
            if self._state_locked() is GateState.PROCESSING:
                return False
            self._busy = True
            return True

    def release(self, settle: bool = True) -> None:
        """
        Finish the current transformation.

        Args:
            settle: Keep the gate closed for the settle delay. Pass False when
                nothing was written, to reopen immediately.
        """
        with self._lock:
            self._busy = False
            self._reopens_at = self._clock() + self.settle_delay if settle else None

