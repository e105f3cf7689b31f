"""
Goal creation from raw user input.

Parameters arrive as the strings typed at the menu or passed on the
command line; pydantic models parse and range-check them.
"""
from typing import Any, Dict, Mapping, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from quest.exceptions import ValidationError
from quest.logger import get_logger
from quest.models import Goal, GoalKind, NegativeGoal, ProgressGoal, RepeatableGoal, SimpleGoal
from quest.serialization import FIELD_DELIMITER

logger = get_logger("factory")


class GoalParams(BaseModel):
    """Fields shared by every goal kind."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=120)
    description: str = Field(default="", max_length=500)

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        # Blank answers fall back to the field default (or fail if required)
        if not isinstance(data, Mapping):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if value == "":
                    continue
            if value is None:
                continue
            cleaned[key] = value
        return cleaned

    @field_validator("name", "description")
    @classmethod
    def _single_line_without_delimiter(cls, value: str) -> str:
        if FIELD_DELIMITER in value:
            raise ValueError(f"must not contain '{FIELD_DELIMITER}'")
        if "\n" in value or "\r" in value:
            raise ValueError("must be a single line")
        return value


class SimpleGoalParams(GoalParams):
    points: int = Field(ge=0)


class RepeatableGoalParams(GoalParams):
    points: int = Field(ge=0)
    bonus_points: int = Field(default=0, ge=0)
    bonus_threshold: int = Field(default=0, ge=0, validate_default=True)

    @field_validator("bonus_threshold")
    @classmethod
    def _bonus_needs_threshold(cls, value: int, info: ValidationInfo) -> int:
        if value == 0 and info.data.get("bonus_points", 0) > 0:
            raise ValueError("a threshold is required when bonus_points is set")
        return value


class ProgressGoalParams(GoalParams):
    target: int = Field(gt=0)
    points_per_unit: int = Field(ge=0)
    bonus_points: int = Field(default=0, ge=0)


class NegativeGoalParams(GoalParams):
    points: int = Field(gt=0)


PARAMS_BY_KIND: Dict[GoalKind, Type[GoalParams]] = {
    GoalKind.SIMPLE: SimpleGoalParams,
    GoalKind.REPEATABLE: RepeatableGoalParams,
    GoalKind.PROGRESS: ProgressGoalParams,
    GoalKind.NEGATIVE: NegativeGoalParams,
}


def parse_kind(kind: Union[GoalKind, str]) -> GoalKind:
    """Parse a goal kind case-insensitively."""
    if isinstance(kind, GoalKind):
        return kind
    try:
        return GoalKind(str(kind).strip().upper())
    except ValueError:
        choices = ", ".join(k.value.lower() for k in GoalKind)
        raise ValidationError(f"Unknown goal kind {kind!r} (choose from {choices})", field="kind")


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    msg = first.get("msg", "invalid value")
    if first.get("type") == "missing":
        return ValidationError(f"Missing required value: {loc}", field=loc)
    if loc:
        return ValidationError(f"Invalid {loc}: {msg}", field=loc)
    return ValidationError(msg)


def create_goal(kind: Union[GoalKind, str], params: Mapping[str, Any]) -> Goal:
    """
    Create a new goal of the requested kind.

    Args:
        kind: goal kind (GoalKind or its name in any case)
        params: raw parameter values, typically strings from user input

    Returns:
        a fresh goal with zeroed counters

    Raises:
        ValidationError: unknown kind, missing, non-numeric or out-of-range parameter
    """
    goal_kind = parse_kind(kind)
    try:
        parsed = PARAMS_BY_KIND[goal_kind].model_validate(dict(params))
    except PydanticValidationError as e:
        raise _to_validation_error(e)

    if goal_kind == GoalKind.SIMPLE:
        goal = SimpleGoal(name=parsed.name, description=parsed.description, points=parsed.points)
    elif goal_kind == GoalKind.REPEATABLE:
        goal = RepeatableGoal(
            name=parsed.name,
            description=parsed.description,
            points=parsed.points,
            bonus_points=parsed.bonus_points,
            bonus_threshold=parsed.bonus_threshold,
        )
    elif goal_kind == GoalKind.PROGRESS:
        goal = ProgressGoal(
            name=parsed.name,
            description=parsed.description,
            target=parsed.target,
            points_per_unit=parsed.points_per_unit,
            bonus_points=parsed.bonus_points,
        )
    else:
        goal = NegativeGoal(name=parsed.name, description=parsed.description, points=parsed.points)

    logger.info(f"Created {goal_kind.value} goal '{goal.name}'")
    return goal
