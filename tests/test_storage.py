import pytest

from quest.exceptions import InvalidOperationError
from quest.ledger import GoalLedger
from quest.models import NegativeGoal, ProgressGoal, RepeatableGoal, SimpleGoal
from quest.storage import load_all, save_all


def _goals():
    return [
        SimpleGoal(name="Read", points=100, completed=True),
        RepeatableGoal(name="Gym", points=10, times_completed=2),
        ProgressGoal(name="Book", target=300, points_per_unit=1, progress=40),
        NegativeGoal(name="Snack", points=15, times_recorded=1),
    ]


def test_save_writes_one_line_per_goal_and_score_last(tmp_path):
    path = tmp_path / "goals.txt"

    save_all(_goals(), 185, path)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 5
    assert lines[0].startswith("SIMPLE|")
    assert lines[-1] == "185"


def test_save_overwrites_existing_file(tmp_path):
    path = tmp_path / "goals.txt"
    save_all(_goals(), 185, path)

    save_all([SimpleGoal(name="Only", points=1)], 7, path)

    assert path.read_text(encoding="utf-8").splitlines() == ["SIMPLE|Only||1|false", "7"]


def test_save_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "goals.txt"
    save_all([], 0, path)
    assert path.read_text(encoding="utf-8") == "0\n"


def test_load_restores_saved_ledger(tmp_path):
    path = tmp_path / "goals.txt"
    save_all(_goals(), -20, path)

    result = load_all(path)

    assert result.found is True
    assert result.goals == _goals()
    assert result.score == -20
    assert result.skipped_lines == []


def test_load_missing_file_returns_empty_ledger(tmp_path):
    result = load_all(tmp_path / "nope.txt")

    assert result.goals == []
    assert result.score == 0
    assert result.found is False


def test_load_skips_corrupt_line(tmp_path, isolated_logs):
    path = tmp_path / "goals.txt"
    path.write_text(
        "SIMPLE|Read||100|true\n"
        "REPEATABLE|Gym||ten|0|0|2\n"
        "NEGATIVE|Snack||15|1\n"
        "\n"
        "PROGRESS|Book||300|1|0|40|false\n"
        "85\n",
        encoding="utf-8",
    )

    result = load_all(path)

    assert [g.name for g in result.goals] == ["Read", "Snack", "Book"]
    assert result.score == 85
    assert result.skipped_lines == [2]

    dump = (isolated_logs / "corruption_dump.log").read_text(encoding="utf-8")
    assert f"{path}:2" in dump
    assert "REPEATABLE|Gym||ten|0|0|2" in dump


def test_load_skips_line_that_is_not_utf8(tmp_path, isolated_logs):
    path = tmp_path / "goals.txt"
    path.write_bytes(
        b"SIMPLE|Read||100|true\n"
        b"NEGATIVE|Sn\xff\xfeack||15|1\n"
        b"REPEATABLE|Gym||10|0|0|2\n"
        b"120\n"
    )

    result = load_all(path)

    assert [g.name for g in result.goals] == ["Read", "Gym"]
    assert result.score == 120
    assert result.skipped_lines == [2]
    assert "not valid UTF-8" in (isolated_logs / "corruption_dump.log").read_text(encoding="utf-8")


def test_load_with_undecodable_score_line(tmp_path):
    path = tmp_path / "goals.txt"
    path.write_bytes(b"SIMPLE|Read||100|true\n1\xff0\n")

    result = load_all(path)

    assert len(result.goals) == 1
    assert result.score == 0
    assert result.skipped_lines == [2]


def test_load_directory_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        load_all(tmp_path)


def test_load_without_score_line_uses_zero(tmp_path):
    path = tmp_path / "goals.txt"
    path.write_text("SIMPLE|Read||100|true\nNEGATIVE|Snack||15|1\n", encoding="utf-8")

    result = load_all(path)

    assert len(result.goals) == 2
    assert result.score == 0


def test_load_with_corrupt_score_line(tmp_path):
    path = tmp_path / "goals.txt"
    path.write_text("SIMPLE|Read||100|true\nlots\n", encoding="utf-8")

    result = load_all(path)

    assert len(result.goals) == 1
    assert result.score == 0
    assert result.skipped_lines == [2]


def test_ledger_record_save_and_load(tmp_path, levels):
    path = tmp_path / "goals.txt"
    ledger = GoalLedger(levels=levels)
    ledger.create_goal("simple", {"name": "Read scriptures", "points": "100"})
    ledger.create_goal("negative", {"name": "Doomscroll", "points": "30"})

    ledger.record(0)
    ledger.record(1)
    ledger.save(path)

    restored = GoalLedger(levels=levels)
    restored.create_goal("simple", {"name": "Stale", "points": "1"})
    result = restored.load(path)

    assert result.found is True
    assert restored.score == 70
    assert restored.goals == ledger.goals
    assert restored.goals[0].completed is True
    assert restored.level == "Novice"


def test_ledger_load_missing_file_clears_state(tmp_path, levels):
    ledger = GoalLedger(levels=levels, score=300)
    ledger.create_goal("simple", {"name": "Read", "points": "10"})

    ledger.load(tmp_path / "missing.txt")

    assert ledger.goals == []
    assert ledger.score == 0


def _damaged_file(path):
    path.write_text(
        "SIMPLE|Read||100|false\n"
        "REPEATABLE|Gym||ten|0|0|2\n"
        "NEGATIVE|Snack||15|1\n"
        "0\n",
        encoding="utf-8",
    )
    return path.read_text(encoding="utf-8")


def test_ledger_refuses_to_overwrite_file_with_skipped_lines(tmp_path, levels):
    path = tmp_path / "goals.txt"
    before = _damaged_file(path)
    ledger = GoalLedger(levels=levels)
    ledger.load(path)
    ledger.record(0)

    assert ledger.skipped_lines == [2]
    with pytest.raises(InvalidOperationError) as exc:
        ledger.save(path)
    assert "2" in exc.value.message
    assert path.read_text(encoding="utf-8") == before


def test_ledger_saves_elsewhere_or_when_forced(tmp_path, levels):
    path = tmp_path / "goals.txt"
    _damaged_file(path)
    ledger = GoalLedger(levels=levels)
    ledger.load(path)

    ledger.save(tmp_path / "copy.txt")
    assert len(load_all(tmp_path / "copy.txt").goals) == 2

    ledger.save(path, force=True)
    assert load_all(path).skipped_lines == []
    assert ledger.skipped_lines == []
    ledger.save(path)
