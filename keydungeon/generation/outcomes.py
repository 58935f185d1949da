"""
Phase Outcomes and Generation Errors
====================================

Recoverable failures are returned as PhaseOutcome values and interpreted by
the orchestrator:

    RETRY         -> discard the attempt, start again from a fresh dungeon
                     (consumes one retry)
    OUT_OF_SPACE  -> tree growth ran out of free slots; shrink the per-level
                     room target and regrow (does not consume a retry)

Fatal failures raise GenerationFailureError. Broken internal assumptions
raise InternalGenerationError and are never retried.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class PhaseStatus(Enum):
    """Result kind of a generation phase."""
    OK = "ok"
    RETRY = "retry"
    OUT_OF_SPACE = "out_of_space"


@dataclass(frozen=True)
class PhaseOutcome:
    """Result of executing a single generation phase."""
    status: PhaseStatus
    reason: str = ""

    @classmethod
    def ok(cls) -> 'PhaseOutcome':
        return cls(PhaseStatus.OK)

    @classmethod
    def retry(cls, reason: str) -> 'PhaseOutcome':
        return cls(PhaseStatus.RETRY, reason)

    @classmethod
    def out_of_space(cls, reason: str) -> 'PhaseOutcome':
        return cls(PhaseStatus.OUT_OF_SPACE, reason)

    @property
    def is_ok(self) -> bool:
        return self.status is PhaseStatus.OK


@dataclass
class GenerationReport:
    """Diagnostics of the last DungeonGenerator.generate() call."""
    seed: int = 0
    attempts: int = 0
    out_of_space_count: int = 0
    rooms_per_lock: int = 0
    retry_reasons: List[str] = field(default_factory=list)
    execution_time: float = 0.0
    succeeded: bool = False


class GenerationFailureError(RuntimeError):
    """
    Generation could not produce a dungeon.

    Attributes:
        attempts: Attempts made (including the failing one)
        reason: Last retry reason or the fatal condition
    """

    def __init__(self, message: str, attempts: int, reason: str):
        super().__init__(f"{message} (attempts={attempts}, reason={reason})")
        self.attempts = attempts
        self.reason = reason


class InternalGenerationError(RuntimeError):
    """An internal invariant of the generator was violated."""
