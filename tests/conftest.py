"""
Shared pytest fixtures for the llm-translate test suite.

Fixture Categories:
- Files: A Polish/English file pair on disk
- Clients: Scriptable stand-ins for the transformation client
- Time: A manually advanced clock for the processing gate
- Loop: A fully wired ChangePropagationLoop with no real watchers
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from llm_translate.application import (
    ChangePropagationLoop,
    FileChange,
    ProcessingGate,
    TransformationStep,
)
from llm_translate.core.domain import FilePair, ModelName
from llm_translate.core.exceptions import TransformationError
from llm_translate.core.ports import TransformationClientPort


MODEL = ModelName.default().value


# =============================================================================
# Test Doubles
# =============================================================================


class StubClient(TransformationClientPort):
    """
    Transformation client driven by a plain function.

    ``responder(prompt)`` returns the reply text or raises. Every prompt is
    recorded in ``prompts``; ``before_reply`` runs while the call is "in
    flight", which is how tests inject overlapping notifications.
    """

    def __init__(
        self,
        responder: Callable[[str], str] | None = None,
        before_reply: Callable[[], None] | None = None,
    ):
        self.responder = responder or (lambda prompt: "translated")
        self.before_reply = before_reply
        self.prompts: list[str] = []
        self.models: list[str] = []

    @property
    def name(self) -> str:
        return "Stub"

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def submit(self, model: str, prompt: str, max_tokens: int = 4096) -> str:
        self.prompts.append(prompt)
        self.models.append(model)
        if self.before_reply:
            self.before_reply()
        return self.responder(prompt)


class FailingClient(StubClient):
    """Client whose every call fails like a network error."""

    def __init__(self, message: str = "connection refused"):
        def fail(prompt: str) -> str:
            raise TransformationError(message, model=MODEL)

        super().__init__(responder=fail)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWatcher:
    """Records lifecycle calls instead of touching watchdog."""

    instances: list[FakeWatcher] = []

    def __init__(self, path, debounce_seconds: float = 0.2):
        self.path = Path(path)
        self.debounce_seconds = debounce_seconds
        self.callbacks: list[Callable[[FileChange], None]] = []
        self.started = False
        self.stopped = False
        FakeWatcher.instances.append(self)

    def on_change(self, callback: Callable[[FileChange], None]) -> None:
        self.callbacks.append(callback)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        for callback in self.callbacks:
            callback(FileChange(path=str(self.path)))


# =============================================================================
# Files
# =============================================================================


@pytest.fixture
def polish_file(tmp_path: Path) -> Path:
    """polish.md containing a short greeting."""
    path = tmp_path / "polish.md"
    path.write_text("Witaj świecie!", encoding="utf-8")
    return path


@pytest.fixture
def english_file(tmp_path: Path) -> Path:
    """Empty english.md."""
    path = tmp_path / "english.md"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def file_pair(polish_file: Path, english_file: Path) -> FilePair:
    """Pair read from polish.md (non-empty) and english.md (empty)."""
    return FilePair.read(polish_file, english_file)


@pytest.fixture
def synced_pair(tmp_path: Path) -> FilePair:
    """Pair where both files already have content."""
    first = tmp_path / "polish.md"
    second = tmp_path / "english.md"
    first.write_text("Dzień dobry", encoding="utf-8")
    second.write_text("Good morning", encoding="utf-8")
    return FilePair.read(first, second)


# =============================================================================
# Clients, Clock and Loop
# =============================================================================


@pytest.fixture
def stub_client() -> StubClient:
    return StubClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gate(clock: FakeClock) -> ProcessingGate:
    """Gate with a 0.1s settle delay driven by the fake clock."""
    return ProcessingGate(settle_delay=0.1, clock=clock)


@pytest.fixture
def make_loop(gate: ProcessingGate) -> Callable[..., ChangePropagationLoop]:
    """Factory building a loop around a pair and a client, with fake watchers."""

    def _make(pair: FilePair, client: TransformationClientPort, **kwargs) -> ChangePropagationLoop:
        FakeWatcher.instances = []
        kwargs.setdefault("gate", gate)
        kwargs.setdefault("watcher_factory", FakeWatcher)
        kwargs.setdefault("poll_interval", 0.01)
        return ChangePropagationLoop(pair, TransformationStep(client, model=MODEL), **kwargs)

    return _make


@pytest.fixture
def restore_logging():
    """Restore root logger handlers after a test that calls setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            if isinstance(handler, logging.FileHandler):
                handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
