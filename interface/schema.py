"""
Input schemas for the Eternal Quest console.

Each prompt declares the kind of answer it accepts; raw input is
checked against the schema before the menu acts on it.
"""
from enum import Enum
from typing import Any, List, Optional
from dataclasses import dataclass


class InputType(Enum):
    """Allowed input types."""
    NUMBER = "number"
    ENUM = "enum"
    TEXT = "text"


@dataclass
class InputSchema:
    """Schema definition for a single prompt."""
    input_type: InputType
    prompt: str
    options: Optional[List[str]] = None  # For ENUM type
    min_value: Optional[int] = None      # For NUMBER type
    max_value: Optional[int] = None      # For NUMBER type
    allow_blank: bool = False            # Blank answer returns None

    def validate(self, user_input: str) -> tuple[bool, Any]:
        """
        Validate user input against this schema.

        Args:
            user_input: Raw string input from user.

        Returns:
            Tuple of (is_valid, parsed_value or error_message)
        """
        user_input = user_input.strip()

        if not user_input and self.allow_blank:
            return True, None

        if self.input_type == InputType.NUMBER:
            return self._validate_number(user_input)
        elif self.input_type == InputType.ENUM:
            return self._validate_enum(user_input)
        elif self.input_type == InputType.TEXT:
            return self._validate_text(user_input)
        else:
            return False, f"Unknown input type: {self.input_type}"

    def _validate_number(self, user_input: str) -> tuple[bool, Any]:
        """Validate whole-number input."""
        try:
            value = int(user_input)
        except ValueError:
            return False, "Please enter a whole number"

        if self.min_value is not None and value < self.min_value:
            return False, f"Value must be >= {self.min_value}"
        if self.max_value is not None and value > self.max_value:
            return False, f"Value must be <= {self.max_value}"

        return True, value

    def _validate_enum(self, user_input: str) -> tuple[bool, Any]:
        if not self.options:
            return False, "No options defined for enum"

        # Allow 1-based index or case-insensitive name
        if user_input.isdigit():
            idx = int(user_input) - 1
            if 0 <= idx < len(self.options):
                return True, self.options[idx]

        for option in self.options:
            if option.lower() == user_input.lower():
                return True, option

        return False, f"Please choose: {', '.join(self.options)}"

    def _validate_text(self, user_input: str) -> tuple[bool, Any]:
        if len(user_input) < 1:
            return False, "Input cannot be empty"
        if len(user_input) > 200:
            return False, "Input too long (max 200 characters)"

        return True, user_input


MENU_OPTIONS = [
    "Create New Goal",
    "List Goals",
    "Save Goals",
    "Load Goals",
    "Record Event",
    "Quit",
]

GOAL_KIND_OPTIONS = ["Simple", "Repeatable", "Progress", "Negative"]

GOAL_KIND_HELP = {
    "Simple": "complete once for points",
    "Repeatable": "earn points every time, with an optional bonus every N times",
    "Progress": "earn points per unit toward a target, bonus on reaching it",
    "Negative": "a bad habit that costs points each time",
}

MENU_SCHEMA = InputSchema(
    input_type=InputType.NUMBER,
    prompt="Select a choice from the menu",
    min_value=1,
    max_value=len(MENU_OPTIONS),
)

GOAL_KIND_SCHEMA = InputSchema(
    input_type=InputType.ENUM,
    prompt="Which type of goal would you like to create?",
    options=GOAL_KIND_OPTIONS,
)

FILENAME_SCHEMA = InputSchema(
    input_type=InputType.TEXT,
    prompt="What is the filename? (blank for the default)",
    allow_blank=True,
)

UNITS_SCHEMA = InputSchema(
    input_type=InputType.NUMBER,
    prompt="How many units of progress? (negative to correct a mistake)",
)


def _goal_number(prompt: str, min_value: int = 0, optional: bool = False) -> InputSchema:
    return InputSchema(
        input_type=InputType.NUMBER,
        prompt=prompt,
        min_value=min_value,
        allow_blank=optional,
    )


GOAL_TEXT_PROMPTS = {
    "name": "What is the name of your goal?",
    "description": "What is a short description of it? (optional)",
}

# Numeric parameters per goal kind, asked in this order
GOAL_FIELD_SCHEMAS = {
    "Simple": {
        "points": _goal_number("What is the amount of points associated with this goal?"),
    },
    "Repeatable": {
        "points": _goal_number("How many points is each completion worth?"),
        "bonus_threshold": _goal_number(
            "Award a bonus every how many completions? (blank for none)", optional=True
        ),
        "bonus_points": _goal_number("How many bonus points? (blank for none)", optional=True),
    },
    "Progress": {
        "target": _goal_number("What is the target amount of progress (units)?", min_value=1),
        "points_per_unit": _goal_number("How many points per unit of progress?"),
        "bonus_points": _goal_number(
            "How many bonus points for reaching the target? (blank for none)", optional=True
        ),
    },
    "Negative": {
        "points": _goal_number("How many points should each occurrence cost?", min_value=1),
    },
}

DISCARD_OPTIONS = ["Save anyway", "Cancel"]

DISCARD_SCHEMA = InputSchema(
    input_type=InputType.ENUM,
    prompt="Saving will drop the unreadable lines from that file. Continue?",
    options=DISCARD_OPTIONS,
)
