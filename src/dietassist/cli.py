"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
import shlex
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from dietassist.app_logging import configure_logging
from dietassist.config import get_settings, reload_settings
from dietassist.diary.dates import today, validate_date
from dietassist.diary.models import LogEntry
from dietassist.errors import DietAssistError, NothingToUndoError
from dietassist.foods.models import BasicFood, CompositeFood, Food
from dietassist.profiles.body_calc import (
    ACTIVITY_LABELS,
    METHOD_LABELS,
    ActivityLevel,
    CalorieCalculationMethod,
)
from dietassist.profiles.manager import CalorieSummary
from dietassist.session import DietSession

app = typer.Typer(
    help="Diet assistant: food database, daily food log and calorie targets",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
foods_app = typer.Typer(help="Manage the food database")
log_app = typer.Typer(help="View and edit the daily food log")
profile_app = typer.Typer(help="Manage the user profile and calorie target")

app.add_typer(foods_app, name="foods")
app.add_typer(log_app, name="log")
app.add_typer(profile_app, name="profile")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(command: str, message: str, json_output: bool = False) -> NoReturn:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def open_session(command: str, json_output: bool = False) -> DietSession:
    """Load the food database, food log and profile from disk."""
    try:
        session = DietSession.from_settings(get_settings()).load()
    except DietAssistError as exc:
        fail(command, str(exc), json_output)
    if session.warnings and not json_output:
        for warning in session.warnings:
            console.print(f"[yellow]Warning: {warning}[/yellow]")
    return session


def warning_messages(session: DietSession) -> list[str]:
    """Resolution warnings from loading the food database, for JSON output."""
    return [str(w) for w in session.warnings]


def save_session(session: DietSession, command: str, json_output: bool = False) -> None:
    try:
        session.save()
    except DietAssistError as exc:
        fail(command, str(exc), json_output)


def resolve_date(date_str: Optional[str], command: str, json_output: bool = False) -> str:
    """Return date_str validated, or today's date."""
    if date_str is None:
        return today()
    try:
        return validate_date(date_str)
    except DietAssistError as exc:
        fail(command, str(exc), json_output)


def parse_keywords(raw: str) -> list[str]:
    """Split a comma-separated keyword string, dropping blanks."""
    return [k.strip() for k in raw.split(",") if k.strip()]


def parse_component(raw: str) -> tuple[str, float]:
    """Parse 'Food name:servings' (servings default to 1)."""
    name, sep, servings = raw.rpartition(":")
    if not sep:
        return raw.strip(), 1.0
    try:
        return name.strip(), float(servings)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid servings in component '{raw}'") from exc


def food_to_json(food: Food) -> dict:
    data = food.to_dict()
    data["calories"] = round(food.calories, 2)
    return data


def foods_table(foods: list[Food], title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="dim")
    table.add_column("Calories", justify="right", style="green")
    table.add_column("Keywords", style="blue")
    for idx, food in enumerate(foods, 1):
        table.add_row(
            str(idx),
            food.name,
            food.type_tag,
            f"{food.calories:.1f}",
            ", ".join(food.keywords),
        )
    return table


def print_food(food: Food) -> None:
    console.print(f"\n[bold]{food.name}[/bold]")
    console.print(f"Type: {food.type_tag}")
    console.print(f"Calories: {food.calories:.1f}")
    console.print(f"Keywords: {', '.join(food.keywords)}")
    if isinstance(food, CompositeFood):
        console.print("Components:")
        for component in food.components:
            plural = "s" if component.servings > 1 else ""
            console.print(
                f"  - {component.food.name} ({component.servings:g} serving{plural})"
            )


def log_table(date: str, entries: list[LogEntry]) -> Table:
    table = Table(title=f"Food Log for {date}")
    table.add_column("#", style="dim", width=4)
    table.add_column("Food", style="cyan")
    table.add_column("Servings", justify="right")
    table.add_column("Calories", justify="right", style="green")
    for idx, entry in enumerate(entries, 1):
        table.add_row(str(idx), entry.food_name, f"{entry.servings:g}", f"{entry.calories:.1f}")
    return table


def print_log(session: DietSession, date: str) -> None:
    entries = session.diary.entries(date)
    if not entries:
        console.print(f"No food entries for {date}")
        return
    console.print(log_table(date, entries))
    console.print(f"Total calories: [bold]{session.diary.total_calories(date):.1f}[/bold]")


def print_summary(summary: CalorieSummary) -> None:
    console.print(f"\n[bold]Calorie Summary for {summary.date}[/bold]")
    console.print(f"  Target:   {summary.target:.0f} kcal")
    console.print(f"  Consumed: {summary.consumed:.0f} kcal")
    if summary.over_target:
        console.print(f"  [red]Over target by {summary.difference:.0f} kcal[/red]")
    else:
        console.print(f"  [green]Remaining: {summary.remaining:.0f} kcal[/green]")


def parse_activity(value: Optional[str]) -> Optional[ActivityLevel]:
    if value is None:
        return None
    try:
        return ActivityLevel(value.lower())
    except ValueError as exc:
        choices = ", ".join(level.value for level in ActivityLevel)
        raise typer.BadParameter(f"Activity must be one of: {choices}") from exc


def parse_method(value: Optional[str]) -> Optional[CalorieCalculationMethod]:
    if value is None:
        return None
    try:
        return CalorieCalculationMethod(value.lower())
    except ValueError as exc:
        choices = ", ".join(method.value for method in CalorieCalculationMethod)
        raise typer.BadParameter(f"Method must be one of: {choices}") from exc


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml"
    ),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", help="Directory holding the database, log and profile"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Diet assistant: food database, daily food log and calorie targets."""
    configure_logging(logging.DEBUG if verbose else logging.ERROR)
    settings = reload_settings(config)
    if data_dir is not None:
        settings.storage.data_dir = data_dir.expanduser()


# ============================================================================
# Food Database Commands
# ============================================================================


@foods_app.command("list")
def foods_list(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all foods in the database."""
    session = open_session("foods list", json_output)
    foods = session.catalog.list_foods()

    if json_output:
        output_json({
            "success": True,
            "command": "foods list",
            "warnings": warning_messages(session),
            "data": {"foods": [food_to_json(f) for f in foods]},
            "human_summary": f"{len(foods)} foods in database",
        })
        return

    if not foods:
        console.print("[yellow]Food database is empty[/yellow]")
        return
    console.print(foods_table(foods, f"All Foods in Database ({len(foods)})"))


@foods_app.command("search")
def foods_search(
    terms: list[str] = typer.Argument(..., help="Keywords to search for"),
    match_all: bool = typer.Option(
        False, "--all/--any", help="Require every keyword to match"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Search foods by keyword (case-insensitive substring match)."""
    session = open_session("foods search", json_output)
    results = session.catalog.search_by_keywords(terms, match_all)
    mode = "all" if match_all else "any"

    if json_output:
        output_json({
            "success": True,
            "command": "foods search",
            "warnings": warning_messages(session),
            "data": {
                "terms": terms,
                "match": mode,
                "results": [food_to_json(f) for f in results],
                "total_matches": len(results),
            },
            "human_summary": f"Found {len(results)} foods matching {mode} of {terms}",
        })
        return

    if not results:
        console.print(f"[yellow]No foods found matching {mode} of: {' '.join(terms)}[/yellow]")
        return
    console.print(foods_table(results, f"Foods matching {mode} of: {' '.join(terms)}"))


@foods_app.command("show")
def foods_show(
    name: str = typer.Argument(..., help="Food name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show details for a food."""
    session = open_session("foods show", json_output)
    try:
        food = session.catalog.get(name)
    except DietAssistError as exc:
        fail("foods show", str(exc), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "foods show",
            "warnings": warning_messages(session),
            "data": food_to_json(food),
            "human_summary": f"{food.name}: {food.calories:.1f} calories",
        })
        return
    print_food(food)


@foods_app.command("add-basic")
def foods_add_basic(
    name: str = typer.Argument(..., help="Food name"),
    calories: float = typer.Option(..., "--calories", "-c", help="Calories per serving"),
    keywords: str = typer.Option("", "--keywords", "-k", help="Comma-separated keywords"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a basic food with a fixed calorie value."""
    try:
        food = BasicFood(name, parse_keywords(keywords), calories)
    except ValueError as exc:
        fail("foods add-basic", str(exc), json_output)

    session = open_session("foods add-basic", json_output)
    try:
        session.catalog.add(food)
    except DietAssistError as exc:
        fail("foods add-basic", str(exc), json_output)
    save_session(session, "foods add-basic", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "foods add-basic",
            "warnings": warning_messages(session),
            "data": food_to_json(food),
            "human_summary": f"Added basic food '{name}'",
        })
    else:
        console.print(f"[green]Added basic food '{name}' ({calories:g} calories)[/green]")


@foods_app.command("add-composite")
def foods_add_composite(
    name: str = typer.Argument(..., help="Food name"),
    components: list[str] = typer.Option(
        ..., "--component", "-C", help="Component as 'Food name:servings' (repeatable)"
    ),
    keywords: str = typer.Option("", "--keywords", "-k", help="Comma-separated keywords"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a composite food built from existing foods."""
    parts = [parse_component(raw) for raw in components]
    session = open_session("foods add-composite", json_output)
    try:
        food = session.catalog.create_composite(name, parse_keywords(keywords), parts)
    except (DietAssistError, ValueError) as exc:
        fail("foods add-composite", str(exc), json_output)
    save_session(session, "foods add-composite", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "foods add-composite",
            "warnings": warning_messages(session),
            "data": food_to_json(food),
            "human_summary": f"Added composite food '{name}'",
        })
    else:
        console.print(
            f"[green]Added composite food '{name}' ({food.calories:.1f} calories)[/green]"
        )


@foods_app.command("set-calories")
def foods_set_calories(
    name: str = typer.Argument(..., help="Basic food name"),
    calories: float = typer.Argument(..., help="New calories per serving"),
) -> None:
    """Change the calories of a basic food (composites update, log entries do not)."""
    session = open_session("foods set-calories")
    try:
        session.catalog.set_calories(name, calories)
    except (DietAssistError, ValueError) as exc:
        fail("foods set-calories", str(exc))
    save_session(session, "foods set-calories")
    console.print(f"[green]Updated '{name}' to {calories:g} calories[/green]")


# ============================================================================
# Food Log Commands
# ============================================================================


@log_app.command("show")
def log_show(
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the food log for a date."""
    log_date = resolve_date(date_str, "log show", json_output)
    session = open_session("log show", json_output)

    if json_output:
        entries = session.diary.entries(log_date)
        total = session.diary.total_calories(log_date)
        output_json({
            "success": True,
            "command": "log show",
            "warnings": warning_messages(session),
            "data": {
                "date": log_date,
                "entries": [e.to_dict() for e in entries],
                "total_calories": total,
            },
            "human_summary": f"{len(entries)} entries, {total:.0f} kcal on {log_date}",
        })
        return
    print_log(session, log_date)


@log_app.command("add")
def log_add(
    food: str = typer.Argument(..., help="Food name"),
    servings: float = typer.Argument(1.0, help="Number of servings"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log servings of a food."""
    log_date = resolve_date(date_str, "log add", json_output)
    session = open_session("log add", json_output)
    try:
        command = session.add_entry(log_date, food, servings)
    except (DietAssistError, ValueError) as exc:
        fail("log add", str(exc), json_output)
    save_session(session, "log add", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "log add",
            "warnings": warning_messages(session),
            "data": {
                "date": log_date,
                "food": food,
                "servings": servings,
                "calories": command.calories,
            },
            "human_summary": command.describe(),
        })
    else:
        console.print(f"[green]{command.describe()}[/green]")


@log_app.command("delete")
def log_delete(
    index: int = typer.Argument(..., help="Entry number as shown by 'log show'"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete an entry from the food log."""
    log_date = resolve_date(date_str, "log delete", json_output)
    session = open_session("log delete", json_output)
    try:
        removed = session.delete_entry(log_date, index - 1)
    except DietAssistError as exc:
        fail("log delete", str(exc), json_output)
    save_session(session, "log delete", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "log delete",
            "warnings": warning_messages(session),
            "data": {"date": log_date, "removed": removed.to_dict()},
            "human_summary": f"Deleted {removed.food_name} from {log_date}",
        })
    else:
        console.print(f"[green]Deleted {removed.servings:g} x {removed.food_name} from {log_date}[/green]")


# ============================================================================
# Profile Commands
# ============================================================================


@profile_app.command("show")
def profile_show(
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the user profile and calorie target for a date."""
    day = resolve_date(date_str, "profile show", json_output)
    session = open_session("profile show", json_output)
    profile = session.profiles.profile
    daily = profile.daily_profile(day)
    target = profile.calorie_target(day)

    if json_output:
        data = profile.to_dict()
        data.pop("daily_profiles")
        data.update({"date": day, "daily": daily.to_dict(), "calorie_target": round(target, 1)})
        output_json({
            "success": True,
            "command": "profile show",
            "warnings": warning_messages(session),
            "data": data,
            "human_summary": f"Calorie target for {day}: {target:.0f} kcal",
        })
        return

    console.print(f"[bold]User Profile ({profile.user_id})[/bold]")
    console.print(f"  Gender: {profile.gender.value}")
    console.print(f"  Height: {profile.height_cm:g} cm")
    console.print(f"  Age: {profile.age}")
    console.print(f"  Method: {METHOD_LABELS[profile.calculation_method]}")
    console.print(f"\n[bold]Daily Profile for {day}[/bold]")
    console.print(f"  Weight: {daily.weight_kg:g} kg")
    console.print(f"  Activity: {ACTIVITY_LABELS[daily.activity_level]}")
    console.print(f"  Calorie target: [bold]{target:.0f}[/bold] kcal")


@profile_app.command("update")
def profile_update(
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in kg"),
    activity: Optional[str] = typer.Option(
        None,
        "--activity",
        help="Activity level (sedentary/lightly_active/moderately_active/very_active/extremely_active)",
    ),
    method: Optional[str] = typer.Option(
        None, "--method", help="BMR equation (harris_benedict/mifflin_st_jeor)"
    ),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date for weight/activity (default: today)"
    ),
) -> None:
    """Update age, calculation method, and the weight/activity for a date."""
    day = resolve_date(date_str, "profile update")
    activity_level = parse_activity(activity)
    calc_method = parse_method(method)
    session = open_session("profile update")
    try:
        session.profiles.update_user(
            day,
            age=age,
            weight_kg=weight,
            activity_level=activity_level,
            method=calc_method,
        )
    except ValueError as exc:
        fail("profile update", str(exc))
    save_session(session, "profile update")
    console.print("[green]Profile updated[/green]")


@profile_app.command("daily")
def profile_daily(
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in kg"),
    activity: Optional[str] = typer.Option(None, "--activity", help="Activity level"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
) -> None:
    """Set weight and activity level for a single date."""
    day = resolve_date(date_str, "profile daily")
    activity_level = parse_activity(activity)
    session = open_session("profile daily")
    try:
        daily = session.profiles.update_daily(day, weight_kg=weight, activity_level=activity_level)
    except ValueError as exc:
        fail("profile daily", str(exc))
    save_session(session, "profile daily")
    console.print(
        f"[green]Daily profile for {day}: {daily.weight_kg:g} kg, "
        f"{ACTIVITY_LABELS[daily.activity_level]}[/green]"
    )


@app.command()
def summary(
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Compare calories consumed with the calorie target."""
    day = resolve_date(date_str, "summary", json_output)
    session = open_session("summary", json_output)
    result = session.profiles.summary(day)

    if json_output:
        output_json({
            "success": True,
            "command": "summary",
            "warnings": warning_messages(session),
            "data": result.to_dict(),
            "human_summary": f"{result.consumed:.0f} of {result.target:.0f} kcal on {day}",
        })
        return
    print_summary(result)


# ============================================================================
# Interactive Session
# ============================================================================

SHELL_HELP = """\
  add FOOD [SERVINGS]     log a food (quote names with spaces)
  delete N                delete entry N from the current day
  undo                    undo the last add/delete
  history                 list undoable changes
  show                    show the current day's log
  date YYYY-MM-DD         change the current day
  search [--all] TERMS    search foods by keyword
  foods                   list all foods
  summary                 calorie target vs consumed
  save                    save changes
  quit                    save and exit"""


def _shell_step(session: DietSession, state: dict, words: list[str]) -> bool:
    """Run one shell command. Returns False when the shell should exit."""
    command, args = words[0].lower(), words[1:]
    current = state["date"]

    if command in ("q", "quit", "exit"):
        return False
    if command == "help":
        console.print(SHELL_HELP)
    elif command == "add":
        if not args:
            console.print("[red]Usage: add FOOD [SERVINGS][/red]")
            return True
        servings = float(args[1]) if len(args) > 1 else 1.0
        cmd = session.add_entry(current, args[0], servings)
        console.print(f"[green]{cmd.describe()}[/green]")
    elif command == "delete":
        if len(args) != 1 or not args[0].isdigit():
            console.print("[red]Usage: delete N[/red]")
            return True
        removed = session.delete_entry(current, int(args[0]) - 1)
        console.print(f"[green]Deleted {removed.servings:g} x {removed.food_name}[/green]")
    elif command == "undo":
        console.print(f"[green]Undone: {session.undo()}[/green]")
    elif command == "history":
        descriptions = session.history.descriptions()
        if not descriptions:
            console.print("Undo history is empty")
        for idx, description in enumerate(descriptions, 1):
            console.print(f"  {idx}. {description}")
    elif command == "show":
        print_log(session, current)
    elif command == "date":
        if len(args) != 1:
            console.print("[red]Usage: date YYYY-MM-DD[/red]")
            return True
        state["date"] = validate_date(args[0])
        console.print(f"Current date set to {state['date']}")
    elif command == "search":
        match_all = "--all" in args
        terms = [a for a in args if a not in ("--all", "--any")]
        results = session.catalog.search_by_keywords(terms, match_all)
        if results:
            console.print(foods_table(results, "Search results"))
        else:
            console.print("[yellow]No foods found[/yellow]")
    elif command == "foods":
        console.print(foods_table(session.catalog.list_foods(), "All Foods"))
    elif command == "summary":
        print_summary(session.profiles.summary(current))
    elif command == "save":
        session.save()
        console.print("[green]Saved[/green]")
    else:
        console.print(f"[red]Unknown command '{command}'. Type 'help'.[/red]")
    return True


@app.command()
def shell(
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Starting date (YYYY-MM-DD, default: today)"
    ),
) -> None:
    """Interactive session with undo for food log edits."""
    state = {"date": resolve_date(date_str, "shell")}
    session = open_session("shell")

    console.print("[bold]Diet Assistant[/bold]")
    console.print("Type 'help' for commands, 'quit' to save and exit.\n")

    while True:
        line = Prompt.ask(
            f"[bold green]{state['date']}[/bold green]", default="", show_default=False
        )
        try:
            words = shlex.split(line)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            continue
        if not words:
            continue

        try:
            if not _shell_step(session, state, words):
                break
        except NothingToUndoError:
            console.print("[yellow]Nothing to undo[/yellow]")
        except (DietAssistError, ValueError) as exc:
            console.print(f"[red]{exc}[/red]")

    save_session(session, "shell")
    console.print("Changes saved. Goodbye!")


if __name__ == "__main__":
    app()
