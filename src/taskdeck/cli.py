"""Taskdeck CLI - personal task manager."""

import asyncio
import json
import logging
import sys
from datetime import date, datetime

import click

from .adapters.postgrest import AuthenticationError
from .config import Session, load_config
from .core.models import (
    DEFAULT_CATEGORY_COLOR,
    CategoryInput,
    CategoryUpdate,
    DateRange,
    Priority,
    SortOption,
    Task,
    TaskFilters,
    TaskInput,
    TaskUpdate,
)
from .core.sorting import UrgencyLevel, urgency_label, urgency_level
from .core.stats import compute_stats
from .core.views import format_task_line
from .ports.task_gateway import PersistenceError
from .workflows import (
    apply_suggestions,
    build_advisor,
    build_gateway,
    create_task,
    generate_summary,
    load_task_view,
    resolve_category_ids,
    suggest_for_text,
    update_task,
)

LOCAL_OWNER = "local"
DATE_FORMATS = ["%Y-%m-%d"]
DATETIME_FORMATS = ["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d"]
PRIORITY_CHOICE = click.Choice([p.value for p in Priority], case_sensitive=False)
SORT_CHOICE = click.Choice([s.value for s in SortOption], case_sensitive=False)
URGENCY_COLORS = {UrgencyLevel.ALERT: "red", UrgencyLevel.WARNING: "yellow"}


def _run(coro):
    """Run a workflow coroutine, turning backend failures into a clean exit."""
    try:
        return asyncio.run(coro)
    except (AuthenticationError, PersistenceError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _context(ctx: click.Context):
    """Resolve config, gateway and current owner for a command."""
    config = load_config()
    session = Session.load()
    offline = ctx.obj.get("offline", False) if ctx.obj else False
    gateway = build_gateway(config, session, offline=offline)
    remote = not offline and bool(config.api_url)
    owner = session.user_id if remote else (session.user_id or LOCAL_OWNER)
    if remote and not owner:
        click.echo("Error: No session. Run 'taskdeck login' first.", err=True)
        sys.exit(1)
    return config, gateway, owner


def _parse_optional_date(value: str | None) -> date | None:
    """Parse YYYY-MM-DD; 'none' or '' clears."""
    if value is None or value.strip().lower() in ("", "none"):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a YYYY-MM-DD date")


def _echo_task(task: Task, as_of: date) -> None:
    line = format_task_line(task, as_of)
    color = URGENCY_COLORS.get(urgency_level(task, as_of))
    click.echo(f"  {click.style(line, fg=color) if color else line}  {click.style(task.id, dim=True)}")


@click.group()
@click.version_option(package_name="taskdeck")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--offline", is_flag=True, help="Use the local task store")
@click.pass_context
def main(ctx, debug: bool, offline: bool):
    """Taskdeck - personal task manager."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)
    ctx.obj["offline"] = offline


@main.command()
@click.option("--user-id", required=True, help="Your user id on the task backend")
@click.option("--token", prompt=True, hide_input=True, help="Access token")
def login(user_id: str, token: str):
    """Store the current user's session."""
    Session(user_id=user_id, access_token=token).save()
    click.echo(f"Logged in as {user_id}.")


@main.command("list")
@click.option("--search", "-s", help="Match text in title or description")
@click.option("--priority", "-p", "priorities", multiple=True, type=PRIORITY_CHOICE)
@click.option("--category", "-c", "categories", multiple=True, help="Category id or name")
@click.option("--from", "date_from", type=click.DateTime(DATE_FORMATS), help="Deadline on or after")
@click.option("--to", "date_to", type=click.DateTime(DATE_FORMATS), help="Deadline on or before")
@click.option("--sort", "sort", type=SORT_CHOICE, help="Sort mode (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_tasks(ctx, search, priorities, categories, date_from, date_to, sort, as_json: bool):
    """List tasks, filtered and ranked."""
    config, gateway, owner = _context(ctx)
    today = date.today()

    async def run():
        category_ids = []
        if categories:
            known = await gateway.fetch_categories(owner)
            category_ids = resolve_category_ids(known, list(categories))

        date_range = None
        if date_from or date_to:
            date_range = DateRange(
                start=date_from.date() if date_from else date.min,
                end=date_to.date() if date_to else date.max,
            )
        filters = TaskFilters(
            search=search,
            priorities={Priority(p.lower()) for p in priorities},
            categories=set(category_ids),
            date_range=date_range,
        )
        return await load_task_view(gateway, owner, filters, sort or config.default_sort, today)

    view = _run(run())

    if as_json:
        click.echo(
            json.dumps(
                [{**t.to_api(), "urgency": urgency_label(t, today)} for t in view.tasks],
                indent=2,
            )
        )
        return

    mode = SortOption(view.sort)
    header = f"{mode.label} ({mode.description})"
    if view.active_filter_count:
        header += f" · {view.active_filter_count} filter(s) active"
    click.echo(header)

    if not view.tasks:
        click.echo("No tasks match." if view.active_filter_count else "No tasks yet.")
    else:
        click.echo(f"\nPending ({len(view.pending)})")
        for task in view.pending:
            _echo_task(task, today)
        if view.completed:
            click.echo(f"\nCompleted ({len(view.completed)})")
            for task in view.completed:
                _echo_task(task, today)

    click.echo(f"\n{view.stats.format()}")


@main.command()
@click.argument("title")
@click.option("--description", "-d", help="Longer description")
@click.option("--deadline", type=click.DateTime(DATE_FORMATS), help="Due date (YYYY-MM-DD)")
@click.option("--at", "scheduled_at", type=click.DateTime(DATETIME_FORMATS), help="When it happens")
@click.option("--priority", "-p", type=PRIORITY_CHOICE, help="Priority (default medium)")
@click.option("--category", "-c", "categories", multiple=True, help="Category id or name")
@click.option("--suggest", is_flag=True, help="Let the AI suggest priority and deadline")
@click.pass_context
def add(ctx, title, description, deadline, scheduled_at, priority, categories, suggest: bool):
    """Create a task."""
    config, gateway, owner = _context(ctx)
    if not title.strip():
        raise click.BadParameter("Title cannot be empty", param_hint="TITLE")

    data = TaskInput(
        title=title.strip(),
        description=description,
        scheduled_at=scheduled_at,
        deadline=deadline.date() if deadline else None,
        priority=Priority(priority.lower()) if priority else Priority.MEDIUM,
    )

    async def run():
        nonlocal data
        category_ids = []
        if categories:
            known = await gateway.fetch_categories(owner)
            category_ids = resolve_category_ids(known, list(categories))
        if suggest:
            data = await apply_suggestions(build_advisor(config), data, keep_priority=bool(priority))
        return await create_task(gateway, owner, data, category_ids)

    task = _run(run())
    click.echo(f"Created: {format_task_line(task)}")
    click.echo(f"  id: {task.id}")


@main.command()
@click.argument("task_id")
@click.option("--title", help="New title")
@click.option("--description", "-d", help="New description ('' clears)")
@click.option("--deadline", help="New due date, or 'none' to clear")
@click.option("--at", "scheduled_at", help="New time (YYYY-MM-DD HH:MM), or 'none' to clear")
@click.option("--priority", "-p", type=PRIORITY_CHOICE)
@click.option("--category", "-c", "categories", multiple=True, help="Replace categories")
@click.option("--clear-categories", is_flag=True, help="Remove all categories")
@click.pass_context
def edit(ctx, task_id, title, description, deadline, scheduled_at, priority, categories, clear_categories):
    """Edit a task."""
    config, gateway, owner = _context(ctx)

    changes = TaskUpdate()
    if title is not None:
        if not title.strip():
            raise click.BadParameter("Title cannot be empty", param_hint="--title")
        changes.title = title.strip()
    if description is not None:
        changes.description = description
    if deadline is not None:
        changes.deadline = _parse_optional_date(deadline)
    if scheduled_at is not None:
        if scheduled_at.strip().lower() in ("", "none"):
            changes.scheduled_at = None
        else:
            try:
                changes.scheduled_at = datetime.fromisoformat(scheduled_at.strip())
            except ValueError:
                raise click.BadParameter(f"'{scheduled_at}' is not a date/time", param_hint="--at")
    if priority is not None:
        changes.priority = Priority(priority.lower())

    async def run():
        category_ids = None
        if clear_categories:
            category_ids = []
        elif categories:
            known = await gateway.fetch_categories(owner)
            category_ids = resolve_category_ids(known, list(categories))
        return await update_task(gateway, task_id, changes, category_ids)

    task = _run(run())
    click.echo(f"Updated: {format_task_line(task)}")


@main.command()
@click.argument("task_id")
@click.pass_context
def done(ctx, task_id: str):
    """Mark a task completed."""
    _, gateway, _ = _context(ctx)
    task = _run(gateway.toggle_completion(task_id, True))
    click.echo(f"Completed: {task.title}")


@main.command()
@click.argument("task_id")
@click.pass_context
def undo(ctx, task_id: str):
    """Mark a task as not completed."""
    _, gateway, _ = _context(ctx)
    task = _run(gateway.toggle_completion(task_id, False))
    click.echo(f"Reopened: {task.title}")


@main.command()
@click.argument("task_id")
@click.confirmation_option(prompt="Delete this task?")
@click.pass_context
def rm(ctx, task_id: str):
    """Delete a task."""
    _, gateway, _ = _context(ctx)
    _run(gateway.delete_task(task_id))
    click.echo("Deleted.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def categories(ctx, as_json: bool):
    """List categories."""
    _, gateway, owner = _context(ctx)
    items = _run(gateway.fetch_categories(owner))

    if as_json:
        click.echo(json.dumps([c.to_api() for c in items], indent=2))
        return

    if not items:
        click.echo("No categories yet.")
        return

    for category in items:
        icon = f"{category.icon} " if category.icon else ""
        click.echo(f"• {icon}{category.name} ({category.color})  {click.style(category.id, dim=True)}")


@main.group()
def category():
    """Manage categories."""
    pass


@category.command("add")
@click.argument("name")
@click.option("--color", default=DEFAULT_CATEGORY_COLOR, show_default=True)
@click.option("--icon", help="Emoji or glyph")
@click.pass_context
def category_add(ctx, name: str, color: str, icon: str | None):
    """Create a category."""
    if not name.strip():
        raise click.BadParameter("Name cannot be empty", param_hint="NAME")
    _, gateway, owner = _context(ctx)
    created = _run(gateway.create_category(owner, CategoryInput(name=name.strip(), color=color, icon=icon)))
    click.echo(f"Created category {created.name}  {created.id}")


@category.command("edit")
@click.argument("category_id")
@click.option("--name")
@click.option("--color")
@click.option("--icon", help="Emoji or glyph ('' clears)")
@click.pass_context
def category_edit(ctx, category_id: str, name, color, icon):
    """Edit a category."""
    _, gateway, _ = _context(ctx)
    updated = _run(gateway.update_category(category_id, CategoryUpdate(name=name, color=color, icon=icon)))
    click.echo(f"Updated category {updated.name}")


@category.command("rm")
@click.argument("category_id")
@click.confirmation_option(prompt="Delete this category? Tasks keep existing.")
@click.pass_context
def category_rm(ctx, category_id: str):
    """Delete a category."""
    _, gateway, _ = _context(ctx)
    _run(gateway.delete_category(category_id))
    click.echo("Deleted.")


@main.command()
@click.pass_context
def stats(ctx):
    """Show task statistics."""
    _, gateway, owner = _context(ctx)
    tasks = _run(gateway.fetch_tasks(owner))
    click.echo(compute_stats(tasks).format())


@main.command()
@click.pass_context
def summary(ctx):
    """AI summary of today's open tasks."""
    config, gateway, owner = _context(ctx)
    advisor = build_advisor(config)
    if not advisor.is_configured:
        click.echo("AI is not configured.", err=True)
        sys.exit(1)

    text = _run(generate_summary(gateway, advisor, owner))
    click.echo(text or "No summary available.")


@main.command()
@click.argument("text")
def breakdown(text: str):
    """AI suggestions for a task: priority, deadline and subtasks."""
    advisor = build_advisor(load_config())
    if not advisor.is_configured:
        click.echo("AI is not configured.", err=True)
        sys.exit(1)

    suggestions = _run(suggest_for_text(advisor, text))
    click.echo(f"Priority: {suggestions.priority.value}")
    click.echo(f"Deadline: {suggestions.deadline.isoformat() if suggestions.deadline else 'none'}")
    if suggestions.subtasks:
        click.echo("Subtasks:")
        for item in suggestions.subtasks:
            click.echo(f"  • {item}")
    else:
        click.echo("No subtasks suggested.")
