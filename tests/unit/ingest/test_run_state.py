"""Unit tests for the import phase state machine."""

from __future__ import annotations

import pytest

from core.constants import (
    PHASE_DONE,
    PHASE_FAILED,
    PHASE_FETCHING,
    PHASE_PARSING,
    PHASE_WRITING_BOOKS,
)
from core.errors import RunStateError
from ingest.run_state import ImportRunState


def test_advance_moves_forward() -> None:
    """Forward transitions should update the current phase."""
    state = ImportRunState()

    state.advance(PHASE_FETCHING)
    state.advance(PHASE_PARSING)

    assert state.phase == PHASE_PARSING


def test_advance_rejects_backtracking() -> None:
    """Returning to an earlier phase should be rejected."""
    state = ImportRunState()
    state.advance(PHASE_WRITING_BOOKS)

    with pytest.raises(RunStateError):
        state.advance(PHASE_FETCHING)

    assert state.phase == PHASE_WRITING_BOOKS


def test_fail_reports_phase_and_becomes_terminal() -> None:
    """Failing should return the failed phase and block further moves."""
    state = ImportRunState()
    state.advance(PHASE_PARSING)

    failed_phase = state.fail()

    with pytest.raises(RunStateError):
        state.advance(PHASE_DONE)
    assert (failed_phase, state.phase) == (PHASE_PARSING, PHASE_FAILED)


def test_done_is_terminal() -> None:
    """A finished run cannot be failed afterwards."""
    state = ImportRunState()
    state.advance(PHASE_DONE)

    with pytest.raises(RunStateError):
        state.fail()

    assert state.is_terminal
