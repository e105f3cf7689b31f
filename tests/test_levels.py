import pytest

from quest.config_manager import SystemConfig
from quest.exceptions import ConfigError
from quest.levels import DEFAULT_LEVELS, LevelTable, level_for, load_level_table


def test_level_for_picks_highest_threshold_not_above_score(levels):
    assert level_for(0, levels) == "Novice"
    assert level_for(99, levels) == "Novice"
    assert level_for(100, levels) == "Adept"
    assert level_for(499, levels) == "Adept"
    assert level_for(500, levels) == "Master"
    assert level_for(10_000, levels) == "Master"


def test_score_below_every_threshold_gets_lowest_level():
    table = LevelTable.from_pairs([(50, "Bronze"), (150, "Silver")])

    assert level_for(10, table) == "Bronze"
    assert level_for(-300, table) == "Bronze"


def test_next_level(levels):
    assert levels.next_level(0).name == "Adept"
    assert levels.next_level(250).name == "Master"
    assert levels.next_level(900) is None


def test_table_must_be_strictly_ascending():
    with pytest.raises(ConfigError):
        LevelTable.from_pairs([(0, "A"), (100, "B"), (100, "C")])
    with pytest.raises(ConfigError):
        LevelTable.from_pairs([(100, "B"), (0, "A")])
    with pytest.raises(ConfigError):
        LevelTable.from_pairs([])


def test_load_missing_file_uses_builtin_table(tmp_path):
    table = load_level_table(tmp_path / "levels.yaml")
    assert len(table.levels) == len(DEFAULT_LEVELS)
    assert level_for(0, table) == DEFAULT_LEVELS[0][1]


def test_load_from_yaml(tmp_path):
    path = tmp_path / "levels.yaml"
    path.write_text(
        "levels:\n"
        "  - {threshold: 0, name: Rookie}\n"
        "  - {threshold: 10, name: Veteran}\n",
        encoding="utf-8",
    )

    table = load_level_table(path)

    assert level_for(12, table) == "Veteran"


def test_load_invalid_yaml_raises_config_error(tmp_path):
    path = tmp_path / "levels.yaml"
    path.write_text("levels:\n  - {threshold: ten, name: Rookie}\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_level_table(path)

    path.write_text("levels: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_level_table(path)

    path.write_text("levels:\n  - {name: Rookie}\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_level_table(path)


def test_shipped_level_file_matches_builtin_table():
    table = load_level_table(SystemConfig().levels_path)

    assert [(lvl.threshold, lvl.name) for lvl in table.levels] == list(DEFAULT_LEVELS)
    assert level_for(15000, table) == "Ninja Unicorn!"
