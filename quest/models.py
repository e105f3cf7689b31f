"""
Core data models for Eternal Quest.

Goals are immutable values tagged by GoalKind; recording an event produces
an updated copy instead of mutating the goal in place.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class GoalKind(str, Enum):
    SIMPLE = "SIMPLE"            # complete once
    REPEATABLE = "REPEATABLE"    # record forever, optional bonus every N
    PROGRESS = "PROGRESS"        # accumulate units toward a target
    NEGATIVE = "NEGATIVE"        # bad habit, costs points


class GoalStatus(str, Enum):
    INCOMPLETE = "incomplete"
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SimpleGoal:
    """One-time goal."""
    name: str
    points: int
    description: str = ""
    completed: bool = False

    kind = GoalKind.SIMPLE

    @property
    def status(self) -> GoalStatus:
        return GoalStatus.COMPLETED if self.completed else GoalStatus.INCOMPLETE


@dataclass(frozen=True)
class RepeatableGoal:
    """Goal that never completes; bonus_points every bonus_threshold recordings (0 = no bonus)."""
    name: str
    points: int
    description: str = ""
    bonus_points: int = 0
    bonus_threshold: int = 0
    times_completed: int = 0

    kind = GoalKind.REPEATABLE

    @property
    def status(self) -> GoalStatus:
        return GoalStatus.ACTIVE


@dataclass(frozen=True)
class ProgressGoal:
    """Long-running goal measured in units (pages, km, hours...)."""
    name: str
    target: int
    points_per_unit: int
    description: str = ""
    bonus_points: int = 0
    progress: int = 0
    bonus_awarded: bool = False

    kind = GoalKind.PROGRESS

    @property
    def status(self) -> GoalStatus:
        if self.progress >= self.target:
            return GoalStatus.COMPLETED
        return GoalStatus.IN_PROGRESS


@dataclass(frozen=True)
class NegativeGoal:
    """Bad habit; each recording deducts `points` from the score."""
    name: str
    points: int
    description: str = ""
    times_recorded: int = 0

    kind = GoalKind.NEGATIVE

    @property
    def status(self) -> GoalStatus:
        return GoalStatus.ACTIVE


Goal = Union[SimpleGoal, RepeatableGoal, ProgressGoal, NegativeGoal]


@dataclass(frozen=True)
class RecordOutcome:
    """Result of recording one event against a goal."""
    goal: Goal
    delta: int                      # total score change, bonus included
    bonus: int = 0                  # bonus part of delta
    score: int = 0                  # score after the event
    level_before: Optional[str] = None
    level_after: Optional[str] = None
    leveled_up: bool = False

    @property
    def bonus_awarded(self) -> bool:
        return self.bonus > 0
