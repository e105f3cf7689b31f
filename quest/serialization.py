"""
Line codec for goals.

One goal per line, fields separated by "|", variant tag first:

    SIMPLE|name|description|points|completed
    REPEATABLE|name|description|points|bonus_points|bonus_threshold|times_completed
    PROGRESS|name|description|target|points_per_unit|bonus_points|progress|bonus_awarded
    NEGATIVE|name|description|points|times_recorded
"""
from typing import Callable, Dict, List

from quest.exceptions import FormatError
from quest.models import Goal, GoalKind, NegativeGoal, ProgressGoal, RepeatableGoal, SimpleGoal

FIELD_DELIMITER = "|"

FIELD_COUNTS: Dict[GoalKind, int] = {
    GoalKind.SIMPLE: 5,
    GoalKind.REPEATABLE: 7,
    GoalKind.PROGRESS: 8,
    GoalKind.NEGATIVE: 5,
}


def _bool_to_str(value: bool) -> str:
    return "true" if value else "false"


def _check_text(label: str, value: str) -> None:
    if FIELD_DELIMITER in value or "\n" in value or "\r" in value:
        raise ValueError(f"Goal {label} must be one line without '{FIELD_DELIMITER}': {value!r}")


def serialize(goal: Goal) -> str:
    """
    Encode a goal as a single line (no trailing newline).

    Raises:
        ValueError: the name or description would break the line format
    """
    _check_text("name", goal.name)
    _check_text("description", goal.description)

    if goal.kind == GoalKind.SIMPLE:
        fields = [goal.name, goal.description, goal.points, _bool_to_str(goal.completed)]
    elif goal.kind == GoalKind.REPEATABLE:
        fields = [
            goal.name, goal.description, goal.points,
            goal.bonus_points, goal.bonus_threshold, goal.times_completed,
        ]
    elif goal.kind == GoalKind.PROGRESS:
        fields = [
            goal.name, goal.description, goal.target, goal.points_per_unit,
            goal.bonus_points, goal.progress, _bool_to_str(goal.bonus_awarded),
        ]
    elif goal.kind == GoalKind.NEGATIVE:
        fields = [goal.name, goal.description, goal.points, goal.times_recorded]
    else:
        raise ValueError(f"Unknown goal kind: {goal.kind!r}")

    return FIELD_DELIMITER.join([goal.kind.value] + [str(f) for f in fields])


class _FieldReader:
    """Sequential reader over the fields of one line, raising FormatError on bad values."""

    def __init__(self, fields: List[str], raw_line: str):
        self._fields = fields
        self._pos = 0
        self._raw = raw_line

    def _next(self) -> str:
        value = self._fields[self._pos]
        self._pos += 1
        return value

    def text(self, name: str, required: bool = False) -> str:
        value = self._next()
        if required and not value.strip():
            raise FormatError(f"Empty {name}", raw_line=self._raw)
        return value

    def integer(self, name: str, minimum: int = 0) -> int:
        raw = self._next().strip()
        try:
            value = int(raw)
        except ValueError:
            raise FormatError(f"Field '{name}' is not a number: {raw!r}", raw_line=self._raw)
        if value < minimum:
            raise FormatError(f"Field '{name}' must be >= {minimum}, got {value}", raw_line=self._raw)
        return value

    def boolean(self, name: str) -> bool:
        raw = self._next().strip().lower()
        if raw == "true":
            return True
        if raw == "false":
            return False
        raise FormatError(f"Field '{name}' is not true/false: {raw!r}", raw_line=self._raw)


def _read_simple(r: _FieldReader) -> SimpleGoal:
    return SimpleGoal(
        name=r.text("name", required=True),
        description=r.text("description"),
        points=r.integer("points"),
        completed=r.boolean("completed"),
    )


def _read_repeatable(r: _FieldReader) -> RepeatableGoal:
    return RepeatableGoal(
        name=r.text("name", required=True),
        description=r.text("description"),
        points=r.integer("points"),
        bonus_points=r.integer("bonus_points"),
        bonus_threshold=r.integer("bonus_threshold"),
        times_completed=r.integer("times_completed"),
    )


def _read_progress(r: _FieldReader) -> ProgressGoal:
    return ProgressGoal(
        name=r.text("name", required=True),
        description=r.text("description"),
        target=r.integer("target", minimum=1),
        points_per_unit=r.integer("points_per_unit"),
        bonus_points=r.integer("bonus_points"),
        progress=r.integer("progress"),
        bonus_awarded=r.boolean("bonus_awarded"),
    )


def _read_negative(r: _FieldReader) -> NegativeGoal:
    return NegativeGoal(
        name=r.text("name", required=True),
        description=r.text("description"),
        points=r.integer("points", minimum=1),
        times_recorded=r.integer("times_recorded"),
    )


_READERS: Dict[GoalKind, Callable[[_FieldReader], Goal]] = {
    GoalKind.SIMPLE: _read_simple,
    GoalKind.REPEATABLE: _read_repeatable,
    GoalKind.PROGRESS: _read_progress,
    GoalKind.NEGATIVE: _read_negative,
}


def deserialize(line: str) -> Goal:
    """
    Decode a line produced by serialize().

    Raises:
        FormatError: unknown tag, wrong field count, or a bad field value
    """
    raw = line.rstrip("\r\n")
    fields = raw.split(FIELD_DELIMITER)

    tag = fields[0].strip()
    try:
        kind = GoalKind(tag)
    except ValueError:
        raise FormatError(f"Unknown goal tag: {tag!r}", raw_line=raw)

    expected = FIELD_COUNTS[kind]
    if len(fields) != expected:
        raise FormatError(
            f"{kind.value} record needs {expected} fields, found {len(fields)}",
            raw_line=raw,
        )

    return _READERS[kind](_FieldReader(fields[1:], raw))
