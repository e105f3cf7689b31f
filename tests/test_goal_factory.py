import pytest

from quest.exceptions import ValidationError
from quest.factory import create_goal, parse_kind
from quest.models import GoalKind, GoalStatus, NegativeGoal, ProgressGoal, RepeatableGoal, SimpleGoal


def test_parse_kind_is_case_insensitive():
    assert parse_kind("simple") == GoalKind.SIMPLE
    assert parse_kind(" Progress ") == GoalKind.PROGRESS
    assert parse_kind(GoalKind.NEGATIVE) == GoalKind.NEGATIVE


def test_parse_kind_rejects_unknown():
    with pytest.raises(ValidationError) as exc:
        parse_kind("checklist")
    assert exc.value.field == "kind"


def test_create_simple_goal_from_raw_strings():
    goal = create_goal("simple", {"name": " Read scriptures ", "description": "daily", "points": "100"})

    assert goal == SimpleGoal(name="Read scriptures", description="daily", points=100)
    assert goal.status == GoalStatus.INCOMPLETE


def test_create_repeatable_goal_defaults_to_no_bonus():
    goal = create_goal(GoalKind.REPEATABLE, {"name": "Pray", "points": "10", "bonus_points": ""})

    assert isinstance(goal, RepeatableGoal)
    assert goal.bonus_points == 0
    assert goal.bonus_threshold == 0
    assert goal.times_completed == 0


def test_create_progress_goal():
    goal = create_goal(
        "PROGRESS",
        {"name": "Marathon", "target": "42", "points_per_unit": "10", "bonus_points": "500"},
    )

    assert isinstance(goal, ProgressGoal)
    assert (goal.target, goal.points_per_unit, goal.bonus_points) == (42, 10, 500)
    assert goal.progress == 0
    assert goal.bonus_awarded is False


def test_create_negative_goal():
    goal = create_goal("negative", {"name": "Doomscroll", "points": 20})

    assert goal == NegativeGoal(name="Doomscroll", points=20)


def test_missing_required_number_fails():
    with pytest.raises(ValidationError) as exc:
        create_goal("simple", {"name": "Read"})
    assert exc.value.field == "points"


def test_non_numeric_points_fail():
    with pytest.raises(ValidationError) as exc:
        create_goal("simple", {"name": "Read", "points": "lots"})
    assert exc.value.field == "points"


def test_fractional_points_fail():
    with pytest.raises(ValidationError):
        create_goal("simple", {"name": "Read", "points": "10.5"})


def test_out_of_range_values_fail():
    with pytest.raises(ValidationError) as exc:
        create_goal("progress", {"name": "Run", "target": "-5", "points_per_unit": "1"})
    assert exc.value.field == "target"

    with pytest.raises(ValidationError):
        create_goal("progress", {"name": "Run", "target": "0", "points_per_unit": "1"})

    with pytest.raises(ValidationError):
        create_goal("negative", {"name": "Snack", "points": "0"})

    with pytest.raises(ValidationError):
        create_goal("simple", {"name": "Read", "points": "-1"})


def test_blank_name_fails():
    with pytest.raises(ValidationError) as exc:
        create_goal("simple", {"name": "   ", "points": "10"})
    assert exc.value.field == "name"


def test_delimiter_in_text_fails():
    with pytest.raises(ValidationError) as exc:
        create_goal("simple", {"name": "Read|Write", "points": "10"})
    assert exc.value.field == "name"

    with pytest.raises(ValidationError) as exc:
        create_goal("simple", {"name": "Read", "description": "a|b", "points": "10"})
    assert exc.value.field == "description"


def test_repeatable_bonus_requires_threshold():
    with pytest.raises(ValidationError) as exc:
        create_goal("repeatable", {"name": "Gym", "points": "10", "bonus_points": "50"})
    assert exc.value.field == "bonus_threshold"


def test_validation_error_has_user_message():
    with pytest.raises(ValidationError) as exc:
        create_goal("simple", {"name": "Read", "points": "abc"})
    assert "points" in exc.value.get_user_message()
