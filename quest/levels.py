"""
Level table: ordered point thresholds mapped to themed level names.

The table is loaded once at startup and handed to whoever needs it;
nothing reads it from module state.
"""
from bisect import bisect_right
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import yaml

from quest.exceptions import ConfigError
from quest.logger import get_logger

logger = get_logger("levels")


@dataclass(frozen=True)
class Level:
    threshold: int
    name: str


DEFAULT_LEVELS: Tuple[Tuple[int, str], ...] = (
    (0, "Wandering Novice"),
    (100, "Acolyte of Aspiration"),
    (300, "Squire of Small Victories"),
    (600, "Journeyman of Habits"),
    (1000, "Keeper of the Flame"),
    (1500, "Knight of Consistency"),
    (2200, "Sage of Steady Steps"),
    (3000, "Champion of Discipline"),
    (4000, "Master of Momentum"),
    (5500, "Paragon of Persistence"),
    (7500, "Legend of the Long Road"),
    (10000, "Eternal Questor"),
    (15000, "Ninja Unicorn!"),
)


@dataclass(frozen=True)
class LevelTable:
    """Immutable, strictly ascending sequence of levels."""
    levels: Tuple[Level, ...]

    def __post_init__(self):
        if not self.levels:
            raise ConfigError("Level table must contain at least one level")
        thresholds = [level.threshold for level in self.levels]
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
            raise ConfigError(f"Level thresholds must be strictly ascending: {thresholds}")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, str]]) -> "LevelTable":
        return cls(tuple(Level(int(threshold), str(name)) for threshold, name in pairs))

    @property
    def thresholds(self) -> List[int]:
        return [level.threshold for level in self.levels]

    def index_for(self, score: int) -> int:
        """Index of the highest level whose threshold is <= score (0 below all thresholds)."""
        return max(bisect_right(self.thresholds, score) - 1, 0)

    def next_level(self, score: int) -> Optional[Level]:
        """The next level to reach, or None at the top of the table."""
        idx = self.index_for(score)
        if idx + 1 < len(self.levels):
            return self.levels[idx + 1]
        return None


def level_for(score: int, table: LevelTable) -> str:
    """Return the name of the level reached with `score`."""
    return table.levels[table.index_for(score)].name


def default_level_table() -> LevelTable:
    return LevelTable.from_pairs(DEFAULT_LEVELS)


def _parse_levels(data: Any, path: Path) -> LevelTable:
    entries = data.get("levels") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ConfigError("'levels' must be a list of {threshold, name} entries", str(path))

    pairs = []
    for entry in entries:
        if not isinstance(entry, dict) or "threshold" not in entry or "name" not in entry:
            raise ConfigError(f"Invalid level entry: {entry!r}", str(path))
        try:
            pairs.append((int(entry["threshold"]), str(entry["name"])))
        except (TypeError, ValueError):
            raise ConfigError(f"Level threshold is not an integer: {entry['threshold']!r}", str(path))
    return LevelTable.from_pairs(pairs)


def load_level_table(path: Optional[Path] = None) -> LevelTable:
    """
    Load the level table from a YAML file.

    Falls back to the built-in table when the file does not exist.

    Raises:
        ConfigError: the file exists but is not a valid level table.
    """
    if path is None or not path.exists():
        return default_level_table()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse level table: {e}", str(path))

    table = _parse_levels(data, path)
    logger.info(f"Loaded {len(table.levels)} levels from {path}")
    return table
