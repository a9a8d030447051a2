"""Import phase state machine.

This module tracks the strictly forward phase sequence of one import
run and the counters reported when the run ends.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import (
    IMPORT_PHASE_ORDER,
    PHASE_DONE,
    PHASE_FAILED,
    PHASE_IDLE,
)
from core.errors import RunStateError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass
class ImportRunState:
    """Mutable phase and counters for one run."""

    phase: str = PHASE_IDLE
    records_read: int = 0
    records_committed: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.phase in (PHASE_DONE, PHASE_FAILED)

    def advance(self, phase: str) -> None:
        """Move forward to ``phase``; skipping ahead is allowed, going back is not.

        Raises:
            RunStateError: If the run is terminal or the move is backwards.
        """
        if self.is_terminal:
            raise RunStateError(
                f"Cannot move import to '{phase}': run already ended in '{self.phase}'."
            )
        if _phase_rank(phase) <= _phase_rank(self.phase):
            raise RunStateError(
                f"Cannot move import from '{self.phase}' back to '{phase}'."
            )
        _LOGGER.debug("import_phase_changed", from_phase=self.phase, to_phase=phase)
        self.phase = phase

    def fail(self) -> str:
        """Mark the run failed and return the phase it failed in."""
        if self.is_terminal:
            raise RunStateError(f"Cannot fail import: run already ended in '{self.phase}'.")
        failed_phase = self.phase
        self.phase = PHASE_FAILED
        return failed_phase


def _phase_rank(phase: str) -> int:
    """Map phase name to ordering rank."""
    try:
        return IMPORT_PHASE_ORDER.index(phase)
    except ValueError as error:
        raise RunStateError(f"Unknown import phase '{phase}'.") from error
