# src/checklist_app/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..core.checklist import ChecklistApp
from ..core.results import WriteResult
from ..errors import ValidationError
from ..tasks.task_models import ALL_CATEGORY, DeadlineStatus, Task, deadline_status

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[
    [ChecklistApp, list[str], CommandEmitter | None], str | Awaitable[str]
]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /new, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        app: ChecklistApp,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Validation failures come back as an "[ALERT] ..." reply.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            reply = handler(app, args, emit)
            if inspect.isawaitable(reply):
                reply = await reply
        except ValidationError as e:
            return f"[ALERT] {e}"
        return reply

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _task_at(app: ChecklistApp, args: list[str]) -> Task:
    """Resolve a 1-based index in the current view."""
    if not args:
        raise ValidationError("Task number is required (see /list).")
    visible = app.visible_tasks()
    try:
        idx = int(args[0])
    except ValueError:
        raise ValidationError(f"Not a task number: {args[0]!r}") from None
    if idx < 1 or idx > len(visible):
        raise ValidationError(f"No task #{idx} in this view.")
    return visible[idx - 1]


def _describe_write(result: WriteResult, ok_text: str) -> str:
    if result.ok:
        return ok_text
    return f"Store error: {result.error}"


def render_task_line(idx: int, task: Task, selected: bool, now: datetime) -> str:
    mark = "x" if task.done else " "
    sel = "*" if selected else " "
    line = f"{idx:>3}. [{mark}]{sel} {task.name} ({task.category})"

    status = deadline_status(task, now)
    if task.deadline:
        line += f"  Due: {task.deadline}"
        if status == DeadlineStatus.OVERDUE:
            line += " (overdue)"
        elif status == DeadlineStatus.DUE_TODAY:
            line += " (due today)"
    if task.reminders:
        line += f"  Reminders: {len(task.fired_reminders)}/{len(task.reminders)} fired"
    if task.description:
        line += f"\n        {task.description}"
    return line


def cmd_help(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    form = "closed"
    if app.form.is_open:
        form = "editing" if app.form.is_edit else "creating"
    return (
        "Status:\n"
        f"  Tasks: {len(app.state.tasks)}\n"
        f"  Category: {app.state.category}\n"
        f"  Selected: {len(app.state.selected)}\n"
        f"  Form: {form}\n"
        f"  Notifications: {app.notifier.permission()}"
    )


def cmd_list(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    visible = app.visible_tasks()
    header = f"[{app.state.category}] {len(visible)} task(s), {len(app.state.selected)} selected"
    if app.all_selected():
        header += " (all)"
    if not visible:
        return header + "\n  (empty)"

    now = datetime.now()
    lines = [header]
    for i, task in enumerate(visible, start=1):
        lines.append(render_task_line(i, task, task.id in app.state.selected, now))
    return "\n".join(lines)


def cmd_category(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /cat          -> show categories
    /cat <name>   -> switch view (clears the selection)
    """
    names = [ALL_CATEGORY, *app.categories]
    if not args:
        return f"Current: {app.state.category}. Categories: {', '.join(names)}"

    wanted = " ".join(args).strip().lower()
    match = next((n for n in names if n.lower() == wanted), None)
    if match is None:
        raise ValidationError(f"Unknown category: {' '.join(args)!r}")
    app.switch_category(match)
    return cmd_list(app, [], emit)


def cmd_new(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.open_create()
    if args:
        app.form.set_name(" ".join(args))
    return (
        f"New task in {app.state.category}. Set fields with /name, /desc, /deadline, /remind; "
        "then /save or /cancel."
    )


def cmd_edit(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _task_at(app, args)
    app.open_edit(task.id or "")
    return f'Editing "{task.name}".\n' + cmd_form(app, [], emit)


def cmd_name(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.form.set_name(" ".join(args))
    return "Name set."


def cmd_desc(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.form.set_description(" ".join(args))
    return "Description set."


def cmd_deadline(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.form.set_deadline(" ".join(args))
    return "Deadline set."


def cmd_remind(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    value = app.form.add_reminder(" ".join(args))
    return f"Reminder added: {value}"


def cmd_unremind(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.form.remove_reminder(" ".join(args))
    return "Reminder removed."


def cmd_form(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    draft = app.form.draft
    if draft is None:
        return "No task form is open. Use /new or /edit <n>."
    reminders = ", ".join(draft.reminders) or "-"
    return (
        f"  Category: {draft.category}\n"
        f"  Name: {draft.name or '-'}\n"
        f"  Description: {draft.description or '-'}\n"
        f"  Deadline: {draft.deadline or '-'}\n"
        f"  Reminders: {reminders}"
    )


async def cmd_save(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    editing = app.form.is_edit
    result = await app.submit_form()
    return _describe_write(result, "Task updated." if editing else "Task added.")


def cmd_cancel(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    app.close_form()
    return "Form closed."


async def cmd_done(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _task_at(app, args)
    result = await app.toggle_done(task.id or "")
    return _describe_write(result, f'"{task.name}" marked {"open" if task.done else "done"}.')


async def cmd_delete(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _task_at(app, args)
    result = await app.delete_task(task.id or "")
    if result is None:
        return "Cancelled."
    return _describe_write(result, f'"{task.name}" deleted.')


def cmd_select(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _task_at(app, args)
    app.toggle_select(task.id or "")
    state = "selected" if task.id in app.state.selected else "unselected"
    return f'"{task.name}" {state}.'


def cmd_selectall(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /selectall      -> toggle (select all unless everything is already selected)
    /selectall on   -> select every task in this view
    /selectall off  -> unselect every task in this view
    """
    if not args:
        flag = not app.all_selected()
    elif args[0].lower() in ("on", "1", "true", "yes"):
        flag = True
    elif args[0].lower() in ("off", "0", "false", "no"):
        flag = False
    else:
        return "Usage: /selectall [on|off]."
    app.select_all(flag)
    return f"{len(app.state.selected)} task(s) selected."


async def cmd_bulkdelete(app: ChecklistApp, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not app.state.selected:
        return "Nothing selected."
    results = await app.bulk_delete()
    if results is None:
        return "Cancelled."
    failed = [r for r in results if not r.ok]
    if failed:
        return f"Deleted {len(results) - len(failed)} task(s); {len(failed)} failed."
    return f"Deleted {len(results)} task(s)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show counts, view, form and notification state.")
registry.register("list", cmd_list, help_text="List tasks in the current view.", aliases=["ls"])
registry.register("cat", cmd_category, help_text="Switch view: /cat All | /cat <category>.", aliases=["category"])
registry.register("new", cmd_new, help_text="Open the form for a new task: /new [name].", aliases=["add"])
registry.register("edit", cmd_edit, help_text="Open the form for task <n>: /edit <n>.")
registry.register("name", cmd_name, help_text="Form: set name.")
registry.register("desc", cmd_desc, help_text="Form: set description.")
registry.register("deadline", cmd_deadline, help_text="Form: set deadline (YYYY-MM-DD).")
registry.register("remind", cmd_remind, help_text="Form: add reminder (YYYY-MM-DDTHH:MM).")
registry.register("unremind", cmd_unremind, help_text="Form: remove reminder.")
registry.register("form", cmd_form, help_text="Form: show staged fields.")
registry.register("save", cmd_save, help_text="Form: validate and save.")
registry.register("cancel", cmd_cancel, help_text="Form: discard.")
registry.register("done", cmd_done, help_text="Toggle completion of task <n>.")
registry.register("delete", cmd_delete, help_text="Delete task <n> (asks first).", aliases=["rm"])
registry.register("select", cmd_select, help_text="Toggle selection of task <n>.")
registry.register("selectall", cmd_selectall, help_text="Select/unselect this view: /selectall [on|off].")
registry.register("bulkdelete", cmd_bulkdelete, help_text="Delete all selected tasks (asks first).")
