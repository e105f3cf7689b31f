"""
Console I/O for Eternal Quest.

Menu driver, prompts validated against input schemas, and goal/score display.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from interface.schema import (
    DISCARD_OPTIONS,
    DISCARD_SCHEMA,
    FILENAME_SCHEMA,
    GOAL_FIELD_SCHEMAS,
    GOAL_KIND_HELP,
    GOAL_KIND_OPTIONS,
    GOAL_KIND_SCHEMA,
    GOAL_TEXT_PROMPTS,
    MENU_OPTIONS,
    MENU_SCHEMA,
    UNITS_SCHEMA,
    InputSchema,
    InputType,
)
from quest.config_manager import SystemConfig, config
from quest.exceptions import InterruptError, QuestError, ValidationError
from quest.ledger import GoalLedger
from quest.logger import get_logger
from quest.models import Goal, GoalKind, GoalStatus, RecordOutcome
from quest.storage import LoadResult

logger = get_logger("user_io")


def ask(schema: InputSchema, max_retries: int = 3) -> Any:
    """
    Prompt until the answer matches the schema.

    Args:
        schema: schema the answer must satisfy
        max_retries: attempts before giving up

    Returns:
        The parsed value, or None when the answer was blank (allow_blank)
        or retries ran out.

    Raises:
        InterruptError: input was closed (EOF / Ctrl-C)
    """
    print(f"  {schema.prompt}")
    if schema.input_type == InputType.ENUM and schema.options:
        for i, opt in enumerate(schema.options, 1):
            print(f"  [{i}] {opt}")

    for attempt in range(max_retries):
        try:
            user_input = input(">> ")
        except (EOFError, KeyboardInterrupt):
            raise InterruptError()

        is_valid, result = schema.validate(user_input)
        if is_valid:
            return result

        remaining = max_retries - attempt - 1
        if remaining > 0:
            print(f"  [Invalid input] {result} (retries left: {remaining})")
        else:
            print(f"  [Invalid input] {result}")

    return None


def ask_raw(prompt: str) -> str:
    """Prompt for a raw answer; validation happens downstream."""
    print(f"  {prompt}")
    try:
        return input(">> ")
    except (EOFError, KeyboardInterrupt):
        raise InterruptError()


def format_goal(goal: Goal) -> str:
    """One-line description of a goal for listings."""
    if goal.kind == GoalKind.NEGATIVE:
        box = "[!]"
    else:
        box = "[X]" if goal.status == GoalStatus.COMPLETED else "[ ]"

    title = f"{box} {goal.name}"
    if goal.description:
        title += f" ({goal.description})"

    if goal.kind == GoalKind.SIMPLE:
        detail = f"{goal.points} points"
    elif goal.kind == GoalKind.REPEATABLE:
        detail = f"{goal.points} points each, completed {goal.times_completed} times"
        if goal.bonus_threshold > 0:
            detail += f", bonus {goal.bonus_points} every {goal.bonus_threshold}"
    elif goal.kind == GoalKind.PROGRESS:
        detail = f"progress {goal.progress}/{goal.target}, {goal.points_per_unit} points per unit"
        if goal.bonus_points > 0:
            detail += f", bonus {goal.bonus_points}" + (" (earned)" if goal.bonus_awarded else "")
    elif goal.kind == GoalKind.NEGATIVE:
        detail = f"costs {goal.points} points, recorded {goal.times_recorded} times"
    else:
        detail = ""

    return f"{title} -- {detail}" if detail else title


def display_goals(ledger: GoalLedger) -> None:
    goals = ledger.goals
    if not goals:
        print("  You have no goals yet. Create one to begin your quest!")
        return

    print("\nThe goals are:")
    for i, goal in enumerate(goals, 1):
        print(f"  {i}. {format_goal(goal)}")


def display_status(ledger: GoalLedger) -> None:
    print(f"\nYou have {ledger.score} points. Level: {ledger.level}")
    upcoming = ledger.next_level
    if upcoming is not None:
        print(f"  {upcoming.threshold - ledger.score} points to reach '{upcoming.name}'")


def display_outcome(outcome: RecordOutcome) -> None:
    if outcome.delta > 0:
        print(f"🎉 Congratulations! You have earned {outcome.delta} points!")
    elif outcome.delta < 0:
        print(f"⚠️ You lost {-outcome.delta} points. Keep fighting!")
    else:
        print("No points changed.")

    if outcome.bonus_awarded:
        print(f"✨ That includes a bonus of {outcome.bonus} points!")
    if outcome.leveled_up:
        print(f"🏆 LEVEL UP! You are now: {outcome.level_after}")
    print(f"You now have {outcome.score} points.")


def display_message(message: str, level: str = "info") -> None:
    """
    Display a system message.

    Args:
        message: Message text.
        level: One of 'info', 'warning', 'error'.
    """
    prefix = {
        "info":    "ℹ️ [INFO ]",
        "warning": "⚠️ [WARN ]",
        "error":   "❌ [ERROR]",
    }.get(level, "[INFO ]")

    print(f"{prefix} {message}")


def _resolve_path(answer: Optional[str], default_path: Path) -> Path:
    return Path(answer).expanduser() if answer else default_path


def create_goal_flow(ledger: GoalLedger, max_retries: int = 3) -> Optional[Goal]:
    """Ask for the kind and parameters of a new goal and add it to the ledger."""
    for option in GOAL_KIND_OPTIONS:
        print(f"  - {option}: {GOAL_KIND_HELP[option]}")
    choice = ask(GOAL_KIND_SCHEMA, max_retries)
    if choice is None:
        return None

    kind = GoalKind(choice.upper())
    schemas = GOAL_FIELD_SCHEMAS[choice]
    params: Dict[str, Any] = {}
    for field_name in [*GOAL_TEXT_PROMPTS, *schemas]:
        answered, params[field_name] = _ask_goal_field(field_name, schemas, max_retries)
        if not answered:
            display_message("Goal not created.", "warning")
            return None

    # Only the field the error names is asked again
    for _ in range(max_retries):
        try:
            goal = ledger.create_goal(kind, params)
        except ValidationError as e:
            display_message(e.get_user_message(), "error")
            if e.field not in params:
                return None
            answered, params[e.field] = _ask_goal_field(e.field, schemas, max_retries)
            if not answered:
                break
            continue

        display_message(f"Goal '{goal.name}' created.")
        return goal

    display_message("Goal not created.", "warning")
    return None


def _ask_goal_field(
    field_name: str,
    schemas: Dict[str, InputSchema],
    max_retries: int,
) -> Tuple[bool, Any]:
    """Ask for one goal parameter; returns (answered, value)."""
    if field_name in GOAL_TEXT_PROMPTS:
        return True, ask_raw(GOAL_TEXT_PROMPTS[field_name])

    schema = schemas[field_name]
    value = ask(schema, max_retries)
    if value is None and not schema.allow_blank:
        return False, None
    return True, value


def record_event_flow(ledger: GoalLedger, max_retries: int = 3) -> Optional[RecordOutcome]:
    """Ask which goal was accomplished and record it."""
    if len(ledger) == 0:
        display_message("There are no goals to record yet.", "warning")
        return None

    display_goals(ledger)
    index_schema = InputSchema(
        input_type=InputType.NUMBER,
        prompt="Which goal did you accomplish?",
        min_value=1,
        max_value=len(ledger),
    )
    number = ask(index_schema, max_retries)
    if number is None:
        return None

    index = number - 1
    units = None
    if ledger.get(index).kind == GoalKind.PROGRESS:
        units = ask(UNITS_SCHEMA, max_retries)
        if units is None:
            return None

    try:
        outcome = ledger.record(index, units=units)
    except QuestError as e:
        display_message(e.get_user_message(), "error")
        return None

    display_outcome(outcome)
    return outcome


def save_flow(ledger: GoalLedger, default_path: Path, max_retries: int = 3) -> Optional[Path]:
    path = _resolve_path(ask(FILENAME_SCHEMA, max_retries), default_path)
    force = False
    if ledger.would_discard(path):
        lines = ", ".join(str(n) for n in ledger.skipped_lines)
        display_message(f"{path} still holds unreadable lines: {lines}", "warning")
        force = ask(DISCARD_SCHEMA, max_retries) == DISCARD_OPTIONS[0]
        if not force:
            display_message("Nothing was saved.")
            return None

    try:
        ledger.save(path, force=force)
    except OSError as e:
        logger.error(f"Saving to {path} failed: {e}")
        display_message(f"Could not save to {path}: {e}", "error")
        return None
    display_message(f"Goals saved to {path}.")
    return path


def load_flow(ledger: GoalLedger, default_path: Path, max_retries: int = 3) -> Optional[Path]:
    path = _resolve_path(ask(FILENAME_SCHEMA, max_retries), default_path)
    return path if _load_into(ledger, path) else None


def _load_into(ledger: GoalLedger, path: Path) -> bool:
    try:
        result = ledger.load(path)
    except OSError as e:
        logger.error(f"Loading {path} failed: {e}")
        display_message(f"Could not load {path}: {e}", "error")
        return False
    report_load(result, path)
    return True


def report_load(result: LoadResult, path: Path) -> None:
    if not result.found:
        display_message(f"No saved goals found at {path}. Starting fresh.", "warning")
        return
    display_message(f"Loaded {len(result.goals)} goals from {path}.")
    if result.skipped_lines:
        lines = ", ".join(str(n) for n in result.skipped_lines)
        display_message(f"Skipped unreadable lines: {lines}", "warning")
        display_message("Goal numbers leave them out. The file keeps them until you save over it.")


def _autosave(ledger: GoalLedger, ledger_path: Path) -> None:
    if ledger.would_discard(ledger_path):
        display_message(
            f"Autosave skipped: {ledger_path} has unreadable lines. Use 'Save Goals' to overwrite it.",
            "warning",
        )
        return
    try:
        ledger.save(ledger_path)
        display_message(f"Progress saved to {ledger_path}.")
    except OSError as e:
        logger.error(f"Autosave to {ledger_path} failed: {e}")
        display_message(f"Could not save progress: {e}", "error")


def _menu_loop(ledger: GoalLedger, ledger_path: Path, retries: int) -> None:
    while True:
        display_status(ledger)
        print("\nMenu Options:")
        for i, option in enumerate(MENU_OPTIONS, 1):
            print(f"  {i}. {option}")

        choice = ask(MENU_SCHEMA, retries)
        if choice is None:
            continue

        option = MENU_OPTIONS[choice - 1]
        if option == "Create New Goal":
            create_goal_flow(ledger, retries)
        elif option == "List Goals":
            display_goals(ledger)
        elif option == "Save Goals":
            save_flow(ledger, ledger_path, retries)
        elif option == "Load Goals":
            load_flow(ledger, ledger_path, retries)
        elif option == "Record Event":
            record_event_flow(ledger, retries)
        elif option == "Quit":
            return


def run_menu(
    ledger: GoalLedger,
    ledger_path: Path,
    cfg: SystemConfig = config,
) -> GoalLedger:
    """
    Run the interactive quest menu until the user quits.

    Loads `ledger_path` first when autoload is enabled and saves to it on
    the way out when autosave is enabled, unless that would drop lines the
    load could not read.
    """
    retries = cfg.MAX_INPUT_RETRIES
    print("\n" + "=" * 60)
    print("⚔️  ETERNAL QUEST")
    print("=" * 60)

    if cfg.AUTOLOAD and ledger_path.exists():
        _load_into(ledger, ledger_path)

    try:
        _menu_loop(ledger, ledger_path, retries)
    except InterruptError:
        print()
        logger.info("Menu interrupted by user")
    finally:
        if cfg.AUTOSAVE:
            _autosave(ledger, ledger_path)

    print(f"\nFarewell, {ledger.level}. Your quest continues another day!")
    return ledger
