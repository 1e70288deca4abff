"""
Tests for the change-propagation loop.
"""

import re
import threading
from pathlib import Path

import pytest
from conftest import FailingClient, FakeWatcher, StubClient

from llm_translate.application import FileChange
from llm_translate.core.domain import ChangeOutcome, FilePair, GateState


SOURCE_BLOCK = re.compile(r"Source file \([^)]*\):\n```\n(?P<body>.*?)\n```", re.DOTALL)


def swapcase_responder(prompt: str) -> str:
    """Self-inverse translation: swap the case of the source content."""
    return SOURCE_BLOCK.search(prompt).group("body").swapcase()


def change(path: Path) -> FileChange:
    return FileChange(path=str(path))


# =============================================================================
# Startup auto-sync
# =============================================================================


class TestBootstrap:
    """Tests for the startup auto-sync."""

    def test_fills_empty_target(self, file_pair: FilePair, english_file: Path, make_loop):
        client = StubClient(lambda prompt: "Hello world!")
        seen = []
        loop = make_loop(file_pair, client, on_auto_translate=lambda s, t: seen.append((s, t)))

        result = loop.bootstrap()

        assert result is not None and result.success
        assert client.calls == 1
        assert english_file.read_text(encoding="utf-8") == "Hello world!"
        assert file_pair.second.content == english_file.read_text(encoding="utf-8")
        assert seen == [(file_pair.first, file_pair.second)]
        assert "is currently empty" in client.prompts[0]

    def test_fills_empty_first_file(self, polish_file: Path, english_file: Path, make_loop):
        pair = FilePair.read(english_file, polish_file)
        client = StubClient(lambda prompt: "Hello world!")

        make_loop(pair, client).bootstrap()

        assert english_file.read_text(encoding="utf-8") == "Hello world!"

    def test_both_non_empty_runs_nothing(self, synced_pair: FilePair, make_loop):
        client = StubClient()

        assert make_loop(synced_pair, client).bootstrap() is None
        assert client.calls == 0

    def test_both_empty_runs_nothing(self, tmp_path: Path, make_loop):
        (tmp_path / "a.md").write_text("")
        (tmp_path / "b.md").write_text("")
        client = StubClient()

        make_loop(FilePair.read(tmp_path / "a.md", tmp_path / "b.md"), client).bootstrap()

        assert client.calls == 0

    def test_releases_gate_with_settle(self, file_pair: FilePair, make_loop, gate, clock):
        make_loop(file_pair, StubClient()).bootstrap()

        assert gate.state is GateState.PROCESSING
        clock.advance(0.1)
        assert gate.state is GateState.IDLE

    def test_failure_keeps_target_empty(self, file_pair: FilePair, english_file: Path, make_loop):
        loop = make_loop(file_pair, FailingClient())

        result = loop.bootstrap()

        assert not result.success
        assert english_file.read_text(encoding="utf-8") == ""
        assert loop.stats.translations_failed == 1


# =============================================================================
# Change handling
# =============================================================================


class TestHandleChange:
    """Tests for handling one notification."""

    def test_translates_changed_file(self, synced_pair: FilePair, tmp_path: Path, make_loop):
        client = StubClient(lambda prompt: "Good evening")
        detected = []
        completed = []
        loop = make_loop(
            synced_pair,
            client,
            on_change_detected=detected.append,
            on_translation_complete=completed.append,
        )
        (tmp_path / "polish.md").write_text("Dobry wieczór", encoding="utf-8")

        outcome = loop.handle_change(change(tmp_path / "polish.md"))

        assert outcome is ChangeOutcome.TRANSLATED
        assert (tmp_path / "english.md").read_text(encoding="utf-8") == "Good evening"
        assert synced_pair.first.content == "Dobry wieczór"
        assert synced_pair.second.content == "Good evening"
        assert len(detected) == 1
        assert completed[0].success
        assert "Current target file (english.md)" in client.prompts[0]
        assert loop.stats.changes_detected == 1
        assert loop.stats.translations_successful == 1

    def test_unchanged_content_runs_nothing(
        self, synced_pair: FilePair, tmp_path: Path, make_loop, gate
    ):
        client = StubClient()
        loop = make_loop(synced_pair, client)

        outcome = loop.handle_change(change(tmp_path / "polish.md"))

        assert outcome is ChangeOutcome.UNCHANGED
        assert client.calls == 0
        assert gate.state is GateState.IDLE

    def test_unwatched_path_is_ignored(self, synced_pair: FilePair, tmp_path: Path, make_loop):
        client = StubClient()

        outcome = make_loop(synced_pair, client).handle_change(change(tmp_path / "other.md"))

        assert outcome is ChangeOutcome.IGNORED
        assert client.calls == 0

    def test_busy_gate_drops(self, synced_pair: FilePair, tmp_path: Path, make_loop, gate):
        client = StubClient()
        loop = make_loop(synced_pair, client)
        (tmp_path / "polish.md").write_text("Nowy tekst", encoding="utf-8")
        gate.try_acquire()

        outcome = loop.handle_change(change(tmp_path / "polish.md"))

        assert outcome is ChangeOutcome.DROPPED_BUSY
        assert client.calls == 0
        assert synced_pair.first.content == "Dzień dobry"
        assert loop.stats.notifications_dropped == 1

    def test_unreadable_file_fails_without_raising(
        self, synced_pair: FilePair, tmp_path: Path, make_loop
    ):
        loop = make_loop(synced_pair, StubClient())
        (tmp_path / "polish.md").unlink()

        assert loop.handle_change(change(tmp_path / "polish.md")) is ChangeOutcome.FAILED

    def test_unexpected_exception_is_contained(
        self, synced_pair: FilePair, tmp_path: Path, make_loop, gate, clock
    ):
        def explode(prompt: str) -> str:
            raise RuntimeError("boom")

        loop = make_loop(synced_pair, StubClient(explode))
        (tmp_path / "polish.md").write_text("Nowy tekst", encoding="utf-8")

        outcome = loop.handle_change(change(tmp_path / "polish.md"))

        assert outcome is ChangeOutcome.FAILED
        assert loop.stats.errors == ["boom"]
        clock.advance(0.1)
        assert gate.state is GateState.IDLE


# =============================================================================
# Gate behavior across notifications
# =============================================================================


class TestOverlappingNotifications:
    """At most one transformation in flight; overlapping changes are dropped."""

    def test_notification_during_step_is_dropped(
        self, synced_pair: FilePair, tmp_path: Path, make_loop, clock
    ):
        polish = tmp_path / "polish.md"
        loop = None

        def edit_again():
            polish.write_text("Druga zmiana", encoding="utf-8")
            loop.notify(change(polish))

        client = StubClient(lambda prompt: "First change", before_reply=edit_again)
        loop = make_loop(synced_pair, client)
        polish.write_text("Pierwsza zmiana", encoding="utf-8")
        loop.notify(change(polish))

        assert loop.drain() == [ChangeOutcome.TRANSLATED]
        assert client.calls == 1
        assert loop.stats.notifications_dropped == 1
        assert loop.pending == 0

        # Not retried once the gate reopens
        clock.advance(0.1)
        assert loop.drain() == []
        assert client.calls == 1

        # A later change is processed and picks up the latest content
        client.before_reply = None
        loop.notify(change(polish))
        assert loop.drain() == [ChangeOutcome.TRANSLATED]
        assert client.calls == 2
        assert "Druga zmiana" in client.prompts[1]

    def test_queued_notification_dropped_while_settling(
        self, synced_pair: FilePair, tmp_path: Path, make_loop
    ):
        client = StubClient(lambda prompt: "Translated")
        loop = make_loop(synced_pair, client)
        (tmp_path / "polish.md").write_text("Zmiana", encoding="utf-8")
        loop.notify(change(tmp_path / "polish.md"))
        loop.notify(change(tmp_path / "english.md"))

        assert loop.drain() == [ChangeOutcome.TRANSLATED, ChangeOutcome.DROPPED_BUSY]
        assert client.calls == 1

    def test_failure_then_recovery(self, synced_pair: FilePair, tmp_path: Path, make_loop, clock):
        polish = tmp_path / "polish.md"
        english = tmp_path / "english.md"
        client = FailingClient("network down")
        loop = make_loop(synced_pair, client)
        polish.write_text("Zmiana pierwsza", encoding="utf-8")

        assert loop.handle_change(change(polish)) is ChangeOutcome.FAILED
        assert english.read_text(encoding="utf-8") == "Good morning"
        assert synced_pair.second.content == "Good morning"
        assert loop.stats.translations_failed == 1

        # Gate still settles after a failure
        assert loop.handle_change(change(polish)) is ChangeOutcome.DROPPED_BUSY

        clock.advance(0.1)
        client.responder = lambda prompt: "Second change"
        polish.write_text("Zmiana druga", encoding="utf-8")

        assert loop.handle_change(change(polish)) is ChangeOutcome.TRANSLATED
        assert english.read_text(encoding="utf-8") == "Second change"

    def test_round_trip_with_self_inverse_client(self, tmp_path: Path, make_loop, clock):
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"
        a.write_text("Hello", encoding="utf-8")
        b.write_text("", encoding="utf-8")
        pair = FilePair.read(a, b)
        client = StubClient(swapcase_responder)
        loop = make_loop(pair, client)

        loop.bootstrap()
        assert b.read_text(encoding="utf-8") == "hELLO"

        # The notification caused by our own write never runs the reverse step
        loop.notify(change(b))
        clock.advance(0.1)
        loop.notify(change(b))
        assert loop.drain() == [ChangeOutcome.UNCHANGED]
        assert client.calls == 1

        b.write_text("wORLD", encoding="utf-8")
        loop.notify(change(b))
        assert loop.drain() == [ChangeOutcome.TRANSLATED]
        assert a.read_text(encoding="utf-8") == "World"
        assert client.calls == 2

    def test_both_non_empty_waits_for_notification(self, synced_pair: FilePair, make_loop):
        client = StubClient()
        loop = make_loop(synced_pair, client)

        loop.bootstrap()
        loop.attach_watchers()
        assert loop.drain() == []
        loop.close_watchers()

        assert client.calls == 0


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    """Tests for watcher wiring and the consumer."""

    def test_attach_and_close_watchers(self, synced_pair: FilePair, make_loop):
        loop = make_loop(synced_pair, StubClient(), debounce_seconds=0.3)

        loop.attach_watchers()
        watchers = list(FakeWatcher.instances)

        assert [w.path for w in watchers] == [synced_pair.first.path, synced_pair.second.path]
        assert all(w.started and w.debounce_seconds == 0.3 for w in watchers)

        loop.close_watchers()
        assert all(w.stopped for w in watchers)

    def test_start_async_processes_watcher_events(
        self, synced_pair: FilePair, tmp_path: Path, make_loop
    ):
        done = threading.Event()
        client = StubClient(lambda prompt: "Hi")
        loop = make_loop(synced_pair, client, on_translation_complete=lambda r: done.set())

        loop.start_async()
        try:
            assert loop.is_running
            (tmp_path / "polish.md").write_text("Cześć", encoding="utf-8")
            FakeWatcher.instances[0].fire()

            assert done.wait(timeout=2.0)
            assert (tmp_path / "english.md").read_text(encoding="utf-8") == "Hi"
        finally:
            loop.stop()

        assert not loop.is_running
        assert all(w.stopped for w in FakeWatcher.instances)

    def test_start_blocks_until_stopped(self, synced_pair: FilePair, tmp_path: Path, make_loop):
        loop = None

        def stop_after_first(result):
            loop.stop()

        loop = make_loop(synced_pair, StubClient(), on_translation_complete=stop_after_first)
        (tmp_path / "english.md").write_text("Good night", encoding="utf-8")
        loop.notify(change(tmp_path / "english.md"))

        loop.start()

        assert not loop.is_running
        assert (tmp_path / "polish.md").read_text(encoding="utf-8") == "translated"
        assert all(w.stopped for w in FakeWatcher.instances)

    def test_start_closes_watchers_on_interrupt(self, synced_pair: FilePair, make_loop):
        loop = make_loop(synced_pair, StubClient())

        def interrupt(timeout=None):
            raise KeyboardInterrupt

        loop.process_next = interrupt

        with pytest.raises(KeyboardInterrupt):
            loop.start()

        assert not loop.is_running
        assert all(w.stopped for w in FakeWatcher.instances)

    def test_process_next_times_out(self, synced_pair: FilePair, make_loop):
        assert make_loop(synced_pair, StubClient()).process_next(timeout=0.01) is None

    def test_get_status(self, synced_pair: FilePair, make_loop):
        status = make_loop(synced_pair, StubClient()).get_status()

        assert status["running"] is False
        assert status["pair"] == "polish.md <-> english.md"
        assert status["gate"] == "IDLE"
        assert status["pending"] == 0
        assert status["notifications_dropped"] == 0
