"""
Dungeon Generator: Retry Orchestration
======================================

Sequences the generation phases as an explicit state machine:

    SEED -> GROW -> BOSS_GOAL -> SWITCHES -> INTENSITY -> KEYS
         -> GRAPHIFY -> ACCEPT -> DONE

Transitions:
    - Any phase returning OK moves to the next phase.
    - RETRY (boss/goal, switches, keys, key-count check, acceptance) discards
      the attempt and re-enters SEED with a fresh dungeon. Each retry
      consumes one unit of the retry budget; exhausting it is fatal.
    - OUT_OF_SPACE (grow only) shrinks the per-level room target
      (rooms_per_lock *= max_keys / (max_keys + 1)) and re-enters SEED
      without consuming a retry. A target of zero is fatal.

All randomness comes from one random.Random seeded at construction, so a
given seed and a deterministic constraints provider always reproduce the
same dungeon.

Usage:
    constraints = GridConstraints.rectangle(6, 6, max_rooms=20, max_keys=3)
    generator = DungeonGenerator(constraints, GeneratorConfig(seed=42))
    dungeon = generator.generate()

    print(generator.report.attempts, dungeon.find_boss().id)
"""

import logging
import random
import time
from enum import Enum
from typing import Callable, Optional

from keydungeon.constraints.base import DungeonConstraints
from keydungeon.core.dungeon import Dungeon
from keydungeon.generation.config import GeneratorConfig
from keydungeon.generation.context import GenerationContext
from keydungeon.generation.graphify import graphify
from keydungeon.generation.intensity import compute_intensity
from keydungeon.generation.keys import place_keys
from keydungeon.generation.outcomes import (
    GenerationFailureError,
    GenerationReport,
    PhaseOutcome,
    PhaseStatus,
)
from keydungeon.generation.placement import (
    init_entrance_room,
    place_boss_goal_rooms,
    place_rooms,
    should_add_new_lock,
)
from keydungeon.generation.switches import place_switches

logger = logging.getLogger(__name__)

LogSink = Callable[[str], None]


class GenerationPhase(Enum):
    """States of the generation state machine."""
    SEED = "seed"
    GROW = "grow"
    BOSS_GOAL = "boss_goal"
    SWITCHES = "switches"
    INTENSITY = "intensity"
    KEYS = "keys"
    GRAPHIFY = "graphify"
    ACCEPT = "accept"
    DONE = "done"
    FAILED = "failed"


class DungeonGenerator:
    """
    Generates lock-and-key dungeons within the limits of a constraints
    provider.

    Args:
        constraints: Layout / budget provider
        config: Generator configuration (seed, boss locking, goal, retries)
        log_sink: Optional callable receiving human-readable progress
            messages, in addition to the module logger
    """

    def __init__(
        self,
        constraints: DungeonConstraints,
        config: Optional[GeneratorConfig] = None,
        log_sink: Optional[LogSink] = None,
    ):
        if constraints is None:
            raise ValueError("constraints are required")
        self.constraints = constraints
        self.config = config or GeneratorConfig()
        self.log_sink = log_sink

        self.seed = self.config.seed if self.config.seed is not None else random.randrange(2 ** 32)
        self.rng = random.Random(self.seed)
        self.dungeon: Optional[Dungeon] = None
        self.phase = GenerationPhase.SEED
        self.report = GenerationReport(seed=self.seed)

        self.log(f"Dungeon seed: {self.seed}")

    def log(self, msg: str, level: int = logging.INFO) -> None:
        logger.log(level, msg)
        if self.log_sink is not None:
            self.log_sink(msg)

    def get_dungeon(self) -> Optional[Dungeon]:
        """The dungeon of the last (or current) generation attempt."""
        return self.dungeon

    # ------------------------------------------------------------------
    # Tunables
    # ------------------------------------------------------------------

    def should_add_new_lock(self, key_level: int, num_rooms: int, target_rooms_per_lock: int) -> bool:
        """Whether tree growth should open a new key level now."""
        return should_add_new_lock(
            key_level,
            num_rooms,
            target_rooms_per_lock,
            self.constraints.max_keys,
            self.config.boss_room_locked,
        )

    def initial_rooms_per_lock(self) -> int:
        max_keys = self.constraints.max_keys
        if max_keys > 0:
            return self.constraints.max_rooms // max_keys
        return self.constraints.max_rooms

    def shrink_rooms_per_lock(self, rooms_per_lock: int) -> int:
        """
        Per-level room target after running out of space.

        Slots can run out where the layout predetermines locks (e.g. a river
        whose cells need a key): if too few rooms fit before the barrier to
        reach the key level needed to cross it, tree growth stalls.
        """
        max_keys = self.constraints.max_keys
        return rooms_per_lock * max_keys // (max_keys + 1)

    # ------------------------------------------------------------------
    # Phases wrapped as outcomes
    # ------------------------------------------------------------------

    def compute_intensity(self, ctx: GenerationContext) -> PhaseOutcome:
        compute_intensity(ctx)
        return PhaseOutcome.ok()

    def place_keys(self, ctx: GenerationContext) -> PhaseOutcome:
        outcome = place_keys(ctx)
        if not outcome.is_ok:
            return outcome
        key_levels = ctx.levels.key_count() - 1
        if key_levels != self.constraints.max_keys:
            return PhaseOutcome.retry(
                f"Produced {key_levels} key levels, expected {self.constraints.max_keys}"
            )
        return PhaseOutcome.ok()

    def graphify(self, ctx: GenerationContext) -> PhaseOutcome:
        graphify(ctx)
        return PhaseOutcome.ok()

    def check_acceptable(self, ctx: GenerationContext) -> PhaseOutcome:
        if not self.constraints.is_acceptable(ctx.dungeon):
            return PhaseOutcome.retry("Constraints rejected the dungeon")
        return PhaseOutcome.ok()

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def generate(self) -> Dungeon:
        """
        Run the generation state machine until a dungeon is accepted.

        Returns:
            The generated dungeon (also available via get_dungeon())

        Raises:
            GenerationFailureError: the retry budget was exhausted, or the
                per-level room target shrank to zero
        """
        start_time = time.time()
        report = GenerationReport(seed=self.seed)
        self.report = report

        ctx = GenerationContext(self.constraints, self.rng, self.config)
        steps = {
            GenerationPhase.BOSS_GOAL: (place_boss_goal_rooms, GenerationPhase.SWITCHES),
            GenerationPhase.SWITCHES: (place_switches, GenerationPhase.INTENSITY),
            GenerationPhase.INTENSITY: (self.compute_intensity, GenerationPhase.KEYS),
            GenerationPhase.KEYS: (self.place_keys, GenerationPhase.GRAPHIFY),
            GenerationPhase.GRAPHIFY: (self.graphify, GenerationPhase.ACCEPT),
            GenerationPhase.ACCEPT: (self.check_acceptable, GenerationPhase.DONE),
        }

        attempt = 0
        rooms_per_lock = self.initial_rooms_per_lock()
        phase = GenerationPhase.SEED

        while phase is not GenerationPhase.DONE:
            self.phase = phase
            logger.debug(f"[{phase.value}] attempt {attempt + 1}")

            if phase is GenerationPhase.SEED:
                ctx.reset()
                self.dungeon = ctx.dungeon
                init_entrance_room(ctx)
                phase = GenerationPhase.GROW

            elif phase is GenerationPhase.GROW:
                outcome = place_rooms(ctx, rooms_per_lock, self.should_add_new_lock)
                if outcome.status is PhaseStatus.OUT_OF_SPACE:
                    report.out_of_space_count += 1
                    self.log(f"Ran out of rooms. rooms_per_lock was {rooms_per_lock}", logging.WARNING)
                    rooms_per_lock = self.shrink_rooms_per_lock(rooms_per_lock)
                    self.log(f"rooms_per_lock is now {rooms_per_lock}", logging.WARNING)
                    if rooms_per_lock <= 0:
                        self._fail(
                            report, start_time, attempt + 1, rooms_per_lock,
                            "Failed to place rooms. Have you forgotten to disable boss-locking?",
                            outcome.reason,
                        )
                    phase = GenerationPhase.SEED
                else:
                    logger.debug(f"Key levels after growth: {ctx.levels.as_dict()}")
                    phase = GenerationPhase.BOSS_GOAL

            else:
                step, next_phase = steps[phase]
                outcome = step(ctx)
                if outcome.status is PhaseStatus.RETRY:
                    attempt += 1
                    report.retry_reasons.append(f"{phase.value}: {outcome.reason}")
                    if attempt > self.config.max_retries:
                        self._fail(
                            report, start_time, attempt, rooms_per_lock,
                            "Dungeon generator failed", outcome.reason,
                        )
                    self.log(
                        f"Retrying dungeon generation ({phase.value}: {outcome.reason})",
                        logging.WARNING,
                    )
                    rooms_per_lock = self.initial_rooms_per_lock()
                    phase = GenerationPhase.SEED
                else:
                    phase = next_phase

        self.phase = GenerationPhase.DONE
        report.attempts = attempt + 1
        report.rooms_per_lock = rooms_per_lock
        report.execution_time = time.time() - start_time
        report.succeeded = True
        self.log(
            f"Generated dungeon: {ctx.dungeon.room_count()} rooms, "
            f"{ctx.dungeon.edge_count()} edges, {report.attempts} attempt(s) "
            f"in {report.execution_time:.3f}s"
        )
        return ctx.dungeon

    def _fail(
        self,
        report: GenerationReport,
        start_time: float,
        attempts: int,
        rooms_per_lock: int,
        message: str,
        reason: str,
    ) -> None:
        """Record the failure and raise GenerationFailureError."""
        self.phase = GenerationPhase.FAILED
        report.attempts = attempts
        report.rooms_per_lock = rooms_per_lock
        report.execution_time = time.time() - start_time
        report.succeeded = False
        logger.error(f"{message}: {reason} after {attempts} attempt(s)")
        if self.log_sink is not None:
            self.log_sink(f"{message}: {reason}")
        raise GenerationFailureError(message, attempts, reason)
