"""
CLI command: eternal-quest
Interactive menu plus one-shot goal commands.
"""
import click
import sys
from pathlib import Path
from typing import Optional

# Make the project packages importable when run as a script
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from interface.user_io import (
    display_goals,
    display_outcome,
    display_status,
    format_goal,
    report_load,
    run_menu,
)
from quest.config_manager import config
from quest.exceptions import QuestError
from quest.factory import parse_kind
from quest.ledger import GoalLedger
from quest.levels import load_level_table
from quest.recording import RecordingPolicy


def _fail(ctx: click.Context, error: QuestError) -> None:
    click.echo(f"❌ {error.get_user_message()}", err=True)
    ctx.exit(1)


def _open_ledger(ctx: click.Context, load: bool = True) -> GoalLedger:
    ledger = GoalLedger(levels=ctx.obj["levels"], policy=RecordingPolicy.from_config(config))
    if load:
        try:
            result = ledger.load(ctx.obj["path"])
        except OSError as e:
            click.echo(f"❌ Could not read {ctx.obj['path']}: {e}", err=True)
            ctx.exit(1)
        if result.skipped_lines:
            report_load(result, ctx.obj["path"])
    return ledger


def _save(ctx: click.Context, ledger: GoalLedger, force: bool) -> None:
    try:
        ledger.save(ctx.obj["path"], force=force)
    except QuestError as e:
        click.echo(f"❌ {e.get_user_message()}", err=True)
        click.echo("Nothing was saved. Re-run with --force to drop the unreadable lines.", err=True)
        ctx.exit(1)


force_option = click.option(
    "--force", is_flag=True, default=False,
    help="Save even if unreadable lines in the file would be dropped.",
)


@click.group(invoke_without_command=True)
@click.option(
    "--file", "ledger_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save file (defaults to the configured ledger file).",
)
@click.pass_context
def eternal_quest(ctx: click.Context, ledger_file: Optional[Path]):
    """Eternal Quest: earn points for your goals and level up."""
    ctx.ensure_object(dict)
    ctx.obj["path"] = ledger_file or config.ledger_path
    try:
        ctx.obj["levels"] = load_level_table(config.levels_path)
    except QuestError as e:
        _fail(ctx, e)

    if ctx.invoked_subcommand is None:
        ctx.invoke(play)


@eternal_quest.command()
@click.pass_context
def play(ctx: click.Context):
    """Start the interactive quest menu"""
    ledger = _open_ledger(ctx, load=False)
    run_menu(ledger, ctx.obj["path"], config)


@eternal_quest.command(name="list")
@click.pass_context
def list_goals(ctx: click.Context):
    """List all goals"""
    ledger = _open_ledger(ctx)
    display_goals(ledger)
    display_status(ledger)


@eternal_quest.command()
@click.argument("kind")
@click.argument("name")
@click.option("--description", default=None, help="Short description.")
@click.option("--points", default=None, help="Points per completion (penalty for negative goals).")
@click.option("--bonus", "bonus_points", default=None, help="Bonus points.")
@click.option("--threshold", "bonus_threshold", default=None, help="Repeatable goals: bonus every N completions.")
@click.option("--target", default=None, help="Progress goals: target units.")
@click.option("--per-unit", "points_per_unit", default=None, help="Progress goals: points per unit.")
@force_option
@click.pass_context
def create(ctx: click.Context, kind: str, name: str, force: bool, **options):
    """Create a goal of KIND (simple, repeatable, progress, negative)"""
    ledger = _open_ledger(ctx)
    params = {"name": name, **options}
    try:
        goal = ledger.create_goal(parse_kind(kind), params)
    except QuestError as e:
        _fail(ctx, e)
        return

    _save(ctx, ledger, force)
    click.echo(f"✅ Created goal {len(ledger)}: {format_goal(goal)}")


@eternal_quest.command()
@click.argument("number", type=int)
@click.option("--units", type=int, default=None, help="Progress units (progress goals only).")
@force_option
@click.pass_context
def record(ctx: click.Context, number: int, units: Optional[int], force: bool):
    """Record an event for goal NUMBER (as shown by 'list')"""
    ledger = _open_ledger(ctx)
    try:
        outcome = ledger.record(number - 1, units=units)
    except QuestError as e:
        _fail(ctx, e)
        return

    _save(ctx, ledger, force)
    display_outcome(outcome)


@eternal_quest.command()
@click.pass_context
def status(ctx: click.Context):
    """Show score and level"""
    ledger = _open_ledger(ctx)
    display_status(ledger)


@eternal_quest.command()
@click.pass_context
def levels(ctx: click.Context):
    """Show the level table"""
    ledger = _open_ledger(ctx)
    current = ledger.level
    for level in ledger.levels.levels:
        marker = "➤" if level.name == current else " "
        click.echo(f" {marker} {level.threshold:>6}  {level.name}")


if __name__ == "__main__":
    eternal_quest()
