"""
Goal ledger: the user's goals plus the running score.

Stateful facade over the pure factory/recording/storage functions, used by
the console menu and the CLI.
"""
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from quest.exceptions import InvalidOperationError
from quest.factory import create_goal
from quest.levels import Level, LevelTable, default_level_table, level_for
from quest.logger import get_logger
from quest.models import Goal, GoalKind, RecordOutcome
from quest.recording import DEFAULT_POLICY, RecordingPolicy, record_event
from quest.storage import LoadResult, load_all, save_all

logger = get_logger("ledger")


class GoalLedger:
    """Goals, score, level table and recording policy for one user."""

    def __init__(
        self,
        levels: Optional[LevelTable] = None,
        policy: RecordingPolicy = DEFAULT_POLICY,
        goals: Optional[List[Goal]] = None,
        score: int = 0,
    ):
        self.levels = levels or default_level_table()
        self.policy = policy
        self._goals: List[Goal] = list(goals or [])
        self._score = score
        # Save file whose last load skipped lines, and which lines
        self._damaged_source: Optional[Path] = None
        self.skipped_lines: List[int] = []

    @property
    def goals(self) -> List[Goal]:
        return list(self._goals)

    @property
    def score(self) -> int:
        return self._score

    @property
    def level(self) -> str:
        return level_for(self._score, self.levels)

    @property
    def next_level(self) -> Optional[Level]:
        return self.levels.next_level(self._score)

    def __len__(self) -> int:
        return len(self._goals)

    def get(self, index: int) -> Goal:
        """Return the goal at a 0-based index."""
        if not 0 <= index < len(self._goals):
            raise InvalidOperationError(
                f"No goal number {index + 1}",
                hint=f"Choose between 1 and {len(self._goals)}" if self._goals else "Create a goal first",
            )
        return self._goals[index]

    def create_goal(self, kind: Union[GoalKind, str], params: Mapping[str, Any]) -> Goal:
        goal = create_goal(kind, params)
        self._goals.append(goal)
        return goal

    def record(self, index: int, units: Optional[int] = None) -> RecordOutcome:
        """Record an event for the goal at a 0-based index and apply the score change."""
        goal = self.get(index)
        outcome = record_event(goal, self._score, self.levels, units=units, policy=self.policy)
        self._goals[index] = outcome.goal
        self._score = outcome.score
        return outcome

    def would_discard(self, path: Union[str, Path]) -> bool:
        """True when saving to `path` would drop lines the last load skipped."""
        if self._damaged_source is None:
            return False
        return Path(path).resolve() == self._damaged_source

    def save(self, path: Union[str, Path], force: bool = False) -> None:
        """
        Write the ledger to `path`.

        Raises:
            InvalidOperationError: `path` is the file the last load skipped
                lines from and `force` is not set
        """
        if self.would_discard(path) and not force:
            lines = ", ".join(str(n) for n in self.skipped_lines)
            raise InvalidOperationError(
                f"Refusing to overwrite {path}: unreadable lines {lines} would be lost",
                hint="Repair those lines by hand (see corruption_dump.log in the logs directory), or force the save to drop them",
            )
        save_all(self._goals, self._score, path)
        if self.would_discard(path):
            logger.warning(f"Dropped skipped lines {self.skipped_lines} from {path}")
            self._damaged_source = None
            self.skipped_lines = []

    def load(self, path: Union[str, Path]) -> LoadResult:
        """Replace the in-memory goals and score with the contents of `path`."""
        result = load_all(path)
        self._goals = list(result.goals)
        self._score = result.score
        self.skipped_lines = list(result.skipped_lines)
        self._damaged_source = Path(path).resolve() if result.skipped_lines else None
        return result
