"""
Eternal Quest exception definitions.

Hierarchy of all known errors:
- QuestError: base class
- ValidationError: bad goal-creation parameters
- InvalidOperationError: recording arguments do not fit the goal
- FormatError: corrupt line in a saved ledger
- ConfigError: invalid configuration file or value
- InterruptError: user closed input at a prompt
"""
from typing import Optional


class QuestError(Exception):
    """Base class for Eternal Quest errors.

    Catching this handles every expected failure of the ledger.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: error description
            hint: suggestion shown to the user
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """Return a user-friendly error message."""
        if self.hint:
            return f"{self.message}\n💡 Hint: {self.hint}"
        return self.message


class ValidationError(QuestError):
    """Goal-creation parameters are missing, non-numeric or out of range."""

    def __init__(self, message: str, field: Optional[str] = None):
        hint = f"Check the value entered for '{field}'" if field else None
        super().__init__(message, hint)
        self.field = field


class InvalidOperationError(QuestError):
    """A recording request does not fit the goal's kind or state."""


class FormatError(QuestError):
    """A persisted ledger line cannot be parsed.

    Raised by deserialization; the loader catches it and skips the line.
    """

    def __init__(
        self,
        message: str,
        raw_line: Optional[str] = None,
        line_number: Optional[int] = None
    ):
        super().__init__(message, hint="The save file may be corrupted")
        self.raw_line = raw_line
        self.line_number = line_number


class ConfigError(QuestError):
    """Configuration file or value is invalid."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check the configuration file: {config_path}" if config_path else "Check the configuration format"
        super().__init__(message, hint)
        self.config_path = config_path


class InterruptError(QuestError):
    """The user closed input (Ctrl-D / Ctrl-C) at a prompt.

    Expected behaviour, not a crash.
    """

    def __init__(self, message: str = "Input closed by user"):
        super().__init__(message, hint=None)
