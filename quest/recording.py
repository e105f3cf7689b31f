"""
Recording engine.

record_event is a pure function: it takes a goal and the current score and
returns the updated goal together with the score change. Dispatch is a
single branch on the goal's kind.
"""
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from quest.config_manager import SystemConfig
from quest.exceptions import InvalidOperationError
from quest.levels import LevelTable, level_for
from quest.logger import get_logger
from quest.models import (
    Goal,
    GoalKind,
    GoalStatus,
    NegativeGoal,
    ProgressGoal,
    RecordOutcome,
    RepeatableGoal,
    SimpleGoal,
)

logger = get_logger("recording")


@dataclass(frozen=True)
class RecordingPolicy:
    """Choices for recording against goals that already reached their end state."""
    simple_recomplete: str = "reject"       # "reject" | "noop"
    progress_allow_overflow: bool = True

    @classmethod
    def from_config(cls, cfg: SystemConfig) -> "RecordingPolicy":
        return cls(
            simple_recomplete=cfg.SIMPLE_GOAL_RECOMPLETE,
            progress_allow_overflow=cfg.PROGRESS_ALLOW_OVERFLOW,
        )


DEFAULT_POLICY = RecordingPolicy()

# (updated goal, total delta, bonus part of delta)
_Step = Tuple[Goal, int, int]


def _record_simple(goal: SimpleGoal, policy: RecordingPolicy) -> _Step:
    if goal.completed:
        if policy.simple_recomplete == "noop":
            return goal, 0, 0
        raise InvalidOperationError(
            f"Goal '{goal.name}' is already complete",
            hint="Simple goals can only be recorded once",
        )
    return replace(goal, completed=True), goal.points, 0


def _record_repeatable(goal: RepeatableGoal) -> _Step:
    count = goal.times_completed + 1
    bonus = 0
    if goal.bonus_threshold > 0 and count % goal.bonus_threshold == 0:
        bonus = goal.bonus_points
    return replace(goal, times_completed=count), goal.points + bonus, bonus


def _record_progress(goal: ProgressGoal, units: int, policy: RecordingPolicy) -> _Step:
    if goal.status == GoalStatus.COMPLETED and not policy.progress_allow_overflow:
        raise InvalidOperationError(
            f"Goal '{goal.name}' already reached its target of {goal.target}",
        )

    progress = max(goal.progress + units, 0)
    if not policy.progress_allow_overflow:
        progress = min(progress, goal.target)

    applied = progress - goal.progress
    delta = applied * goal.points_per_unit

    bonus = 0
    reached = progress >= goal.target
    if reached and not goal.bonus_awarded:
        bonus = goal.bonus_points

    updated = replace(goal, progress=progress, bonus_awarded=goal.bonus_awarded or reached)
    return updated, delta + bonus, bonus


def _record_negative(goal: NegativeGoal) -> _Step:
    return replace(goal, times_recorded=goal.times_recorded + 1), -goal.points, 0


def _check_units(goal: Goal, units: Optional[int]) -> None:
    if goal.kind == GoalKind.PROGRESS:
        if units is None:
            raise InvalidOperationError(
                f"Goal '{goal.name}' needs the number of units to record",
            )
        if isinstance(units, bool) or not isinstance(units, int):
            raise InvalidOperationError(f"Units must be a whole number, got {units!r}")
        if units == 0:
            raise InvalidOperationError("Units must not be zero")
    elif units is not None:
        raise InvalidOperationError(
            f"Goal '{goal.name}' ({goal.kind.value.lower()}) does not take units",
        )


def record_event(
    goal: Goal,
    score: int,
    levels: LevelTable,
    units: Optional[int] = None,
    policy: RecordingPolicy = DEFAULT_POLICY,
) -> RecordOutcome:
    """
    Record one event against a goal.

    Args:
        goal: the goal being recorded
        score: the user's score before the event
        levels: level table used to detect level-ups
        units: progress units, required for progress goals and rejected otherwise
        policy: behaviour for goals already in their end state

    Returns:
        RecordOutcome with the updated goal, delta, bonus and new score

    Raises:
        InvalidOperationError: units do not fit the goal, or the policy rejects the recording
    """
    _check_units(goal, units)

    if goal.kind == GoalKind.SIMPLE:
        updated, delta, bonus = _record_simple(goal, policy)
    elif goal.kind == GoalKind.REPEATABLE:
        updated, delta, bonus = _record_repeatable(goal)
    elif goal.kind == GoalKind.PROGRESS:
        updated, delta, bonus = _record_progress(goal, units, policy)
    elif goal.kind == GoalKind.NEGATIVE:
        updated, delta, bonus = _record_negative(goal)
    else:
        raise InvalidOperationError(f"Unknown goal kind: {goal.kind!r}")

    new_score = score + delta
    leveled_up = levels.index_for(new_score) > levels.index_for(score)
    outcome = RecordOutcome(
        goal=updated,
        delta=delta,
        bonus=bonus,
        score=new_score,
        level_before=level_for(score, levels),
        level_after=level_for(new_score, levels),
        leveled_up=leveled_up,
    )

    logger.info(f"Recorded '{goal.name}': {delta:+d} points (bonus {bonus}), score {new_score}")
    if leveled_up:
        logger.info(f"Level up: {outcome.level_before} -> {outcome.level_after}")
    return outcome
