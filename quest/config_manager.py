"""
Configuration Manager for Eternal Quest.

Central place for runtime constants and policy switches.
Every tunable value is declared here with its default.

Usage:
    from quest.config_manager import config
    path = config.ledger_path
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from quest.exceptions import ConfigError
from quest.paths import CONFIG_DIR, DATA_DIR


RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

RECOMPLETE_POLICIES = ("reject", "noop")


@dataclass
class SystemConfig:
    """
    Runtime configuration.

    Defaults can be overridden key by key in config/runtime.yaml.
    """

    # === Storage ===

    # Save file name inside the data directory
    LEDGER_FILENAME: str = "goals.txt"

    # Load the save file when the menu starts
    AUTOLOAD: bool = True

    # Save when the user quits the menu
    AUTOSAVE: bool = True

    # === Recording policy ===

    # What recording an already completed simple goal does:
    # "reject" raises InvalidOperationError, "noop" awards nothing
    SIMPLE_GOAL_RECOMPLETE: str = "reject"

    # Whether a progress goal keeps accepting units after reaching its target.
    # The completion bonus is paid once either way.
    PROGRESS_ALLOW_OVERFLOW: bool = True

    # === Interface ===

    # Attempts allowed for a single prompt before giving up
    MAX_INPUT_RETRIES: int = 3

    # Level table file; the built-in table is used when it is missing
    LEVELS_PATH: str = str(CONFIG_DIR / "levels.yaml")

    def __post_init__(self):
        self.validate()

    def validate(self, source: Optional[str] = None) -> None:
        if self.SIMPLE_GOAL_RECOMPLETE not in RECOMPLETE_POLICIES:
            raise ConfigError(
                f"SIMPLE_GOAL_RECOMPLETE must be one of {RECOMPLETE_POLICIES}, "
                f"got {self.SIMPLE_GOAL_RECOMPLETE!r}",
                source,
            )
        if not isinstance(self.PROGRESS_ALLOW_OVERFLOW, bool):
            raise ConfigError("PROGRESS_ALLOW_OVERFLOW must be true or false", source)
        if not isinstance(self.MAX_INPUT_RETRIES, int) or self.MAX_INPUT_RETRIES < 1:
            raise ConfigError("MAX_INPUT_RETRIES must be a positive integer", source)

    @property
    def ledger_path(self) -> Path:
        return DATA_DIR / self.LEDGER_FILENAME

    @property
    def levels_path(self) -> Path:
        return Path(self.LEVELS_PATH).expanduser()


def _load_runtime_config(path: Path) -> dict:
    """Load runtime overrides, if the file exists."""
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def get_config(path: Optional[Path] = None) -> SystemConfig:
    """
    Build the configuration.

    Priority: runtime.yaml > defaults. Unknown keys are ignored.

    Raises:
        ConfigError: an override holds an invalid policy value.
    """
    path = path or RUNTIME_CONFIG_PATH
    base = SystemConfig()
    overrides = _load_runtime_config(path)

    for key, value in overrides.items():
        if hasattr(base, key):
            setattr(base, key, value)

    base.validate(str(path))
    return base


# Process-wide configuration instance
config = get_config()
