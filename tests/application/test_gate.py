"""
Tests for the processing gate.
"""

import pytest

from llm_translate.application import ProcessingGate
from llm_translate.core.domain import GateState


class TestProcessingGate:
    """Tests for the Idle/Processing state machine."""

    def test_initial_state_is_idle(self, gate: ProcessingGate):
        assert gate.state is GateState.IDLE
        assert not gate.is_processing

    def test_acquire(self, gate: ProcessingGate):
        assert gate.try_acquire()
        assert gate.state is GateState.PROCESSING

    def test_second_acquire_is_refused(self, gate: ProcessingGate):
        gate.try_acquire()

        assert not gate.try_acquire()

    def test_stays_closed_during_settle_delay(self, gate: ProcessingGate, clock):
        gate.try_acquire()
        gate.release()

        clock.advance(0.05)
        assert gate.is_processing
        assert not gate.try_acquire()

    def test_reopens_after_settle_delay(self, gate: ProcessingGate, clock):
        gate.try_acquire()
        gate.release()

        clock.advance(0.1)
        assert gate.state is GateState.IDLE
        assert gate.try_acquire()

    def test_release_without_settle_reopens_immediately(self, gate: ProcessingGate):
        gate.try_acquire()
        gate.release(settle=False)

        assert gate.state is GateState.IDLE

    def test_zero_settle_delay(self, clock):
        gate = ProcessingGate(settle_delay=0, clock=clock)
        gate.try_acquire()
        gate.release()

        assert gate.try_acquire()

    def test_negative_settle_delay(self):
        with pytest.raises(ValueError):
            ProcessingGate(settle_delay=-0.1)

    def test_default_clock(self):
        gate = ProcessingGate(settle_delay=0)

        assert gate.try_acquire()
        gate.release()
        assert gate.state is GateState.IDLE
