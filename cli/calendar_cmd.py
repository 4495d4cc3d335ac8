"""
CLI: fieldmemo
Text view of the calendar: show days and weeks, edit notes, markers, day
colors and time blocks.

Each invocation loads the calendar fresh, so undo/redo only reach edits made
in the same process. `fieldmemo shell` keeps one session open for that.
"""
import json
import shlex
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

import click

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from fieldmemo.calendar_service import CalendarService
from fieldmemo.dates import (
    WEEKDAYS,
    add_minutes_to_time,
    format_date_string,
    format_hours,
    format_time_range,
    parse_day_reference,
    weekday_index,
)
from fieldmemo.exceptions import FieldMemoError
from fieldmemo.history import HistoryManager
from fieldmemo.logger import setup_logging
from fieldmemo.models import CATEGORY_INFO, Category, Marker
from fieldmemo.persistence import LocalStore
from fieldmemo.sekki import days_until_next, next_transition, sekki_for
from fieldmemo.serialization import block_to_dict
from fieldmemo.store import next_available_time


def _parse_day(ctx, param, value: Optional[str]) -> date:
    if value is None:
        return date.today()
    try:
        return parse_day_reference(value)
    except (ValueError, TypeError):
        raise click.BadParameter(f"not a day: {value!r} (use YYYY-MM-DD, today, tomorrow, ...)")


def _parse_weekdays(ctx, param, value: Optional[str]) -> List[int]:
    if not value:
        return []
    names = [w.lower() for w in WEEKDAYS]
    days = []
    for part in value.split(","):
        part = part.strip().lower()[:3]
        if part.isdigit():
            days.append(int(part))
        elif part in names:
            days.append(names.index(part))
        else:
            raise click.BadParameter(f"unknown weekday: {part!r}")
    return days


def _parse_marker(value: str) -> Marker:
    try:
        return Marker.parse(value)
    except ValueError:
        raise click.BadParameter(f"unknown marker: {value!r} (1-7 or focus/joy/health/rest/social/create/review)")


def _marker_name(code: int) -> str:
    try:
        return Marker(code).name.lower()
    except ValueError:
        return str(code)


def _fail(error: FieldMemoError) -> None:
    click.echo(f"Error: {error.get_user_message()}", err=True)
    sys.exit(1)


def _service(ctx) -> CalendarService:
    return ctx.obj["service"]


def _echo_day(service: CalendarService, value: date, verbose: bool = True) -> None:
    day = service.day(value)
    header = f"{WEEKDAYS[weekday_index(value)]} {format_date_string(value)}"
    if day.day_color:
        header += f"  [{_marker_name(day.day_color)}]"
    if day.dots:
        header += "  " + " ".join(f"*{_marker_name(d)}" for d in day.dots)
    click.echo(header)

    if verbose and day.note:
        click.echo(f"  note: {day.note}")

    for occurrence in service.blocks_for(value):
        block = occurrence.block
        repeat = " (repeats)" if block.is_recurring else ""
        label = CATEGORY_INFO[block.category].label
        click.echo(
            f"  {format_time_range(block.start_time, block.end_time):<14} "
            f"{block.title or '(untitled)'} [{label}]{repeat}  #{occurrence.occurrence_id}"
        )


@click.group()
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="FIELD_MEMO_FILE",
    default=None,
    help="Calendar JSON file (defaults to the data directory).",
)
@click.pass_context
def fieldmemo(ctx, data_file: Optional[Path]):
    """Field Memo calendar journal."""
    ctx.ensure_object(dict)
    if "service" in ctx.obj:
        # Command run inside `fieldmemo shell`
        return
    try:
        ctx.obj["service"] = CalendarService(HistoryManager(LocalStore(path=data_file)))
    except FieldMemoError as e:
        _fail(e)


@fieldmemo.command()
@click.argument("day", required=False, callback=_parse_day)
@click.option("--json", "as_json", is_flag=True, help="Print resolved blocks as JSON.")
@click.pass_context
def show(ctx, day: date, as_json: bool):
    """Show one day with all of its blocks, including repeats."""
    service = _service(ctx)
    if as_json:
        payload = [
            dict(block_to_dict(o.block), occurrenceId=o.occurrence_id, date=format_date_string(o.occurrence_date))
            for o in service.blocks_for(day)
        ]
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    _echo_day(service, day)
    per_category, total = service.day_summary(day)
    if total:
        parts = ", ".join(f"{c.info.label} {format_hours(m)}" for c, m in per_category.items())
        click.echo(f"  scheduled: {format_hours(total)} ({parts})")

    current = sekki_for(day)
    upcoming, _ = next_transition(day)
    click.echo(
        f"  sekki: {current.romaji} {current.kanji} ({current.english}), "
        f"{days_until_next(day)}d to {upcoming.english}"
    )


@fieldmemo.command()
@click.argument("day", required=False, callback=_parse_day)
@click.pass_context
def week(ctx, day: date):
    """Show the Sunday-based week containing DAY."""
    service = _service(ctx)
    for value in service.week(day):
        _echo_day(service, value, verbose=False)


@fieldmemo.command()
@click.argument("day", callback=_parse_day)
@click.argument("text")
@click.pass_context
def note(ctx, day: date, text: str):
    """Set the note of a day (empty text clears it)."""
    _service(ctx).set_note(day, text)
    click.echo(f"Note saved for {format_date_string(day)}")


@fieldmemo.command()
@click.argument("day", callback=_parse_day)
@click.argument("marker")
@click.pass_context
def dot(ctx, day: date, marker: str):
    """Toggle a colored marker on a day."""
    updated = _service(ctx).toggle_dot(day, _parse_marker(marker))
    click.echo(f"Markers on {format_date_string(day)}: {', '.join(_marker_name(d) for d in updated.dots) or 'none'}")


@fieldmemo.command()
@click.argument("day", callback=_parse_day)
@click.argument("marker")
@click.pass_context
def color(ctx, day: date, marker: str):
    """Set the day theme color, or 'none' to clear it."""
    chosen = None if marker.lower() == "none" else _parse_marker(marker)
    _service(ctx).set_day_color(day, chosen)
    click.echo(f"Day color for {format_date_string(day)}: {chosen.name.lower() if chosen else 'none'}")


@fieldmemo.group()
def block():
    """Add, edit or remove time blocks."""
    pass


@block.command("add")
@click.argument("day", callback=_parse_day)
@click.argument("title")
@click.option("--start", help="Start time HH:MM (default: next free slot).")
@click.option("--end", help="End time HH:MM.")
@click.option("--duration", type=int, help="Length in minutes, instead of --end.")
@click.option(
    "--category",
    type=click.Choice([c.value for c in Category if c is not Category.UNKNOWN]),
    default=None,
)
@click.option("--repeat", type=click.Choice(["daily", "weekly", "monthly", "yearly"]), default=None)
@click.option("--every", "interval", type=int, default=1, show_default=True, help="Repeat every N periods.")
@click.option("--on", "days_of_week", callback=_parse_weekdays, help="Weekdays for weekly repeats, e.g. mon,wed,fri.")
@click.option("--until", "end_date", help="Last possible occurrence date, YYYY-MM-DD.")
@click.pass_context
def block_add(ctx, day, title, start, end, duration, category, repeat, interval, days_of_week, end_date):
    """Add a time block on DAY."""
    service = _service(ctx)
    try:
        if duration is not None and end is None:
            start = start or next_available_time(service.day(day).time_blocks)
            end = add_minutes_to_time(start, duration)
        recurrence = None
        if repeat:
            recurrence = service.build_recurrence(
                repeat, interval=interval, days_of_week=days_of_week, end_date=end_date, start_date=day
            )
        created = service.add_block(
            day,
            title,
            start_time=start,
            end_time=end,
            category=Category(category) if category else None,
            recurrence=recurrence,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))
    except FieldMemoError as e:
        _fail(e)

    click.echo(f"Added #{created.id}: {format_time_range(created.start_time, created.end_time)} {created.title}")


@block.command("edit")
@click.argument("day", callback=_parse_day)
@click.argument("block_id")
@click.option("--title")
@click.option("--start")
@click.option("--end")
@click.option(
    "--category",
    type=click.Choice([c.value for c in Category if c is not Category.UNKNOWN]),
    default=None,
)
@click.pass_context
def block_edit(ctx, day, block_id, title, start, end, category):
    """Edit a block stored on DAY."""
    changes = {}
    if title is not None:
        changes["title"] = title
    if start is not None:
        changes["start_time"] = start
    if end is not None:
        changes["end_time"] = end
    if category is not None:
        changes["category"] = Category(category)
    if not changes:
        click.echo("Nothing to change")
        return
    try:
        updated = _service(ctx).update_block(day, block_id, **changes)
    except FieldMemoError as e:
        _fail(e)
    click.echo(f"Updated #{updated.id}: {format_time_range(updated.start_time, updated.end_time)} {updated.title}")


@block.command("rm")
@click.argument("day", callback=_parse_day)
@click.argument("block_id")
@click.pass_context
def block_rm(ctx, day, block_id):
    """Remove a block stored on DAY (removes the whole series if it repeats)."""
    try:
        _service(ctx).delete_block(day, block_id)
    except FieldMemoError as e:
        _fail(e)
    click.echo(f"Removed #{block_id}")


@fieldmemo.command()
@click.pass_context
def undo(ctx):
    """Undo the last edit of this session."""
    if _service(ctx).undo():
        click.echo("Undone")
    else:
        click.echo("Nothing to undo")


@fieldmemo.command()
@click.pass_context
def redo(ctx):
    """Redo the last undone edit of this session."""
    if _service(ctx).redo():
        click.echo("Redone")
    else:
        click.echo("Nothing to redo")


@fieldmemo.command()
@click.pass_context
def shell(ctx):
    """Run several commands against one session, with undo/redo."""
    click.echo("Commands as on the command line (show, note, block add, undo, ...); 'quit' to leave.")
    while True:
        try:
            line = click.prompt("fieldmemo", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            break
        try:
            args = shlex.split(line)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            continue
        if not args:
            continue
        if args[0] in ("quit", "exit"):
            break
        if args[0] == "shell":
            continue

        try:
            fieldmemo.main(args, prog_name="fieldmemo", obj=ctx.obj, standalone_mode=False)
        except click.ClickException as e:
            e.show()
        except SystemExit:
            # Command already reported its error
            continue


def main():
    setup_logging()
    fieldmemo(obj={})


if __name__ == "__main__":
    main()
