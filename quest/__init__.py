# Eternal Quest: goal ledger with recording, levels and save/load.

from quest.exceptions import ConfigError, FormatError, InvalidOperationError, QuestError, ValidationError
from quest.factory import create_goal
from quest.ledger import GoalLedger
from quest.levels import LevelTable, level_for, load_level_table
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
from quest.recording import RecordingPolicy, record_event
from quest.serialization import deserialize, serialize
from quest.storage import LoadResult, load_all, save_all

__all__ = [
    "ConfigError",
    "FormatError",
    "Goal",
    "GoalKind",
    "GoalLedger",
    "GoalStatus",
    "InvalidOperationError",
    "LevelTable",
    "LoadResult",
    "NegativeGoal",
    "ProgressGoal",
    "QuestError",
    "RecordOutcome",
    "RecordingPolicy",
    "RepeatableGoal",
    "SimpleGoal",
    "ValidationError",
    "create_goal",
    "deserialize",
    "level_for",
    "load_all",
    "load_level_table",
    "record_event",
    "save_all",
    "serialize",
]
