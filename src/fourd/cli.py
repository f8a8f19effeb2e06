"""fourd CLI - Do / Defer / Delegate / Drop capture."""

import json
import logging
import sys
from datetime import date

import click

from .config import load_config
from .core.categories import Category
from .core.errors import FourDError, ValidationError
from .core.organizer import filter_tasks, organize
from .core.tasks import Task
from .workflows import TaskCoordinator, get_coordinator


class CategoryType(click.ParamType):
    """Category by name, value or shortcut key (1-4)."""

    name = "category"

    def convert(self, value, param, ctx):
        if isinstance(value, Category):
            return value
        category = Category.parse(value)
        if category is None:
            self.fail(f"{value!r} is not one of do/defer/delegate/drop or 1-4", param, ctx)
        return category


CATEGORY = CategoryType()


def _coordinator(ctx: click.Context) -> TaskCoordinator:
    if ctx.obj is None:
        ctx.obj = get_coordinator(load_config())
    return ctx.obj


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _find(tasks: list[Task], prefix: str) -> Task:
    """Find an active task by id or unique id prefix."""
    matches = [t for t in tasks if t.id.startswith(prefix)]
    if len(matches) != 1:
        reason = "matches no active task" if not matches else "is ambiguous"
        raise ValidationError(f"Task id {prefix!r} {reason}")
    return matches[0]


def _serialize(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "category": task.category.value,
        "priority": task.priority,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "alerts": [a.isoformat() for a in task.alerts],
        "notes": task.notes,
    }


def _format_task(task: Task, today: date) -> str:
    marker = {"high": "!!!", "medium": "!!", "low": "!"}.get(task.priority_band.value, "")
    days = task.days_until_due(today)
    due = ""
    if days is not None:
        if days < 0:
            due = f" (OVERDUE by {-days}d)"
        elif days == 0:
            due = " (due TODAY)"
        else:
            due = f" (due in {days}d)"
    notes = f"  {task.notes}" if task.notes else ""
    return f"  {task.id[:8]} [{marker:3}] {task.title}{due}{notes}"


@click.group()
@click.version_option(package_name="fourd")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """fourd - Do / Defer / Delegate / Drop."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
def auth():
    """Authenticate with TickTick."""
    from .adapters.ticktick_api import authorize

    try:
        authorize(load_config())
    except FourDError as e:
        _fail(e)


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--category", "-c", type=CATEGORY, default="do", show_default=True,
              help="do/defer/delegate/drop or 1-4")
@click.pass_context
def add(ctx, text: tuple[str, ...], category: Category):
    """Capture a task. Prefix with ! / !! / !!! for priority."""
    try:
        task = _coordinator(ctx).create(" ".join(text), category)
    except FourDError as e:
        _fail(e)

    due = f", due {task.due_date}" if task.due_date else ""
    click.echo(f"Added to {category.display_name}: {task.title} ({task.id[:8]}{due})")


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--category", "-c", type=CATEGORY, default=None, help="Only this category")
@click.option("--overdue", is_flag=True, help="Only overdue tasks")
@click.option("--merged", is_flag=True, help="One list, overdue first, instead of buckets")
@click.pass_context
def list_tasks(ctx, as_json: bool, category: Category | None, overdue: bool, merged: bool):
    """List active tasks."""
    try:
        coordinator = _coordinator(ctx)
        tasks = coordinator.fetch_active()
    except FourDError as e:
        _fail(e)

    now = coordinator.clock()
    tasks = filter_tasks(tasks, now, category=category, overdue_only=overdue)

    if as_json:
        click.echo(json.dumps([_serialize(t) for t in tasks], indent=2, ensure_ascii=False))
        return

    if not tasks:
        click.echo("No active tasks.")
        return

    if merged:
        for task in tasks:
            click.echo(_format_task(task, now.date()))
        return

    for i, (label, bucket) in enumerate(organize(tasks, now).items()):
        if i:
            click.echo()
        click.echo(f"{label} ({len(bucket)})")
        for task in bucket:
            click.echo(_format_task(task, now.date()))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, as_json: bool):
    """Show task statistics."""
    try:
        dashboard = _coordinator(ctx).dashboard()
    except FourDError as e:
        _fail(e)

    s = dashboard.stats
    if as_json:
        click.echo(json.dumps(s.as_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(dashboard.summary)
    click.echo(f"\nTotal: {s.total}  Overdue: {s.overdue}  Due today: {s.due_today}  High priority: {s.high_priority}")
    click.echo("\nBy category")
    for label, count in s.by_category.items():
        click.echo(f"  {label:14} {count}")
    click.echo("\nBy priority")
    for label, count in s.as_dict()["by_priority"].items():
        click.echo(f"  {label:14} {count}")
    click.echo("\nBy due date")
    for label, count in s.as_dict()["by_due_date"].items():
        click.echo(f"  {label.replace('_', ' '):14} {count}")


def _run_batch(ctx, ids: tuple[str, ...], action) -> None:
    try:
        coordinator = _coordinator(ctx)
        active = coordinator.fetch_active()
        tasks = [_find(active, i) for i in ids]
    except FourDError as e:
        _fail(e)

    result = action(coordinator, tasks)
    for task in result.succeeded:
        click.echo(f"✓ {task.title}")
    for task, error in result.failed:
        click.echo(f"✗ {task.title}: {error}", err=True)
    if not result.ok:
        sys.exit(1)


@main.command()
@click.argument("ids", nargs=-1, required=True)
@click.pass_context
def done(ctx, ids: tuple[str, ...]):
    """Mark tasks complete."""
    _run_batch(ctx, ids, lambda c, tasks: c.complete_many(tasks))


@main.command("defer")
@click.argument("ids", nargs=-1, required=True)
@click.option("--days", "-d", type=int, default=None, help="Days to defer by (default from config)")
@click.pass_context
def defer_tasks(ctx, ids: tuple[str, ...], days: int | None):
    """Push tasks out by N days."""
    days = days if days is not None else load_config().defer_days
    _run_batch(ctx, ids, lambda c, tasks: c.defer_many(tasks, days))


@main.command()
@click.argument("task_id")
@click.argument("category", type=CATEGORY)
@click.pass_context
def move(ctx, task_id: str, category: Category):
    """Move a task to another category."""
    try:
        coordinator = _coordinator(ctx)
        task = coordinator.recategorize(_find(coordinator.fetch_active(), task_id), category)
    except FourDError as e:
        _fail(e)

    due = f", due {task.due_date}" if task.due_date else ""
    click.echo(f"Moved to {category.display_name}: {task.title}{due}")


@main.command("rm")
@click.argument("task_id")
@click.pass_context
def remove(ctx, task_id: str):
    """Delete a task permanently."""
    try:
        coordinator = _coordinator(ctx)
        task = _find(coordinator.fetch_active(), task_id)
        coordinator.delete(task)
    except FourDError as e:
        _fail(e)

    click.echo(f"Deleted: {task.title}")


@main.command()
@click.pass_context
def lists(ctx):
    """Show the list backing each category, creating missing ones."""
    try:
        handles = _coordinator(ctx).session.handles()
    except FourDError as e:
        _fail(e)

    for category, handle in handles.items():
        click.echo(f"{category.label_with_shortcut:12} {handle.title} ({handle.id})")
