import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import quest.logger as quest_logger  # noqa: E402
from quest.levels import LevelTable  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Keep corruption dumps out of the project logs directory."""
    logs_dir = tmp_path / "logs"
    monkeypatch.setattr(quest_logger, "LOGS_DIR", logs_dir)
    return logs_dir


@pytest.fixture
def levels():
    return LevelTable.from_pairs([(0, "Novice"), (100, "Adept"), (500, "Master")])
