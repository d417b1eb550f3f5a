# src/taskboard/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, cast

from ..admin.summary import (
    attach_owners,
    dashboard_counts,
    priority_breakdown,
    search_owned_tasks,
    summarize_by_user,
    task_overview,
)
from ..core.errors import (
    Forbidden,
    NotFound,
    StoreUnavailable,
    TaskboardError,
    Unauthenticated,
    ValidationError,
)
from ..core.session import Session, require_session
from ..core.state import AppState
from ..profiles.profile_models import Role, display_name
from ..tasks.classifier import partition_by_category, tasks_due_on, today_tasks
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# key=value aliases accepted by /add, /edit and /admin assign
_FIELD_ALIASES = {
    "title": "title",
    "t": "title",
    "desc": "description",
    "description": "description",
    "d": "description",
    "priority": "priority",
    "p": "priority",
    "category": "category",
    "cat": "category",
    "c": "category",
    "due": "due_date",
    "due_date": "due_date",
}
_CLEAR_VALUES = {"", "none", "-"}


class CommandRegistry:
    """Slash-command registry used by connectors (/help, /add, /list, ...)."""

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
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Domain errors are turned into a one-line reply; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                result = cast(CommandHandler3, handler)(state, args, emit)
            else:
                result = cast(CommandHandler2, handler)(state, args)
            if inspect.isawaitable(result):
                result = await result
        except TaskboardError as e:
            return friendly_error_message(e)
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def friendly_error_message(exc: TaskboardError) -> str:
    if isinstance(exc, ValidationError):
        return "Invalid input: " + "; ".join(str(e) for e in exc.errors)
    if isinstance(exc, Unauthenticated):
        return f"Not signed in ({exc}). Use /login <email> or /register <email>."
    if isinstance(exc, Forbidden):
        return "This command needs the admin role."
    if isinstance(exc, NotFound):
        return f"Task not found: {exc.task_id}. Use /list to refresh."
    if isinstance(exc, StoreUnavailable):
        return f"Storage is unavailable right now, try again later. ({exc})"
    return f"Error: {exc}"


# ---- helpers ----


def _now() -> datetime:
    return datetime.now().astimezone()


def _parse_fields(args: list[str], *, allow_clear: bool) -> tuple[list[str], dict[str, Any]]:
    """Split args into free words and key=value fields (keys normalised)."""
    words: list[str] = []
    fields: dict[str, Any] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        field = _FIELD_ALIASES.get(key.lower()) if sep else None
        if field is None:
            words.append(arg)
            continue
        if allow_clear and value.strip().lower() in _CLEAR_VALUES:
            fields[field] = None
        else:
            fields[field] = value
    return words, fields


def _short(task_id: str) -> str:
    return task_id[:8]


def _format_task(task: Task, owner: str | None = None) -> str:
    mark = "x" if task.completed else " "
    prio = task.priority.value if task.priority else "?"
    due = task.due_date.strftime("%Y-%m-%d %H:%M") if task.due_date else "-"
    cat = f" ({task.category.value})" if task.category else ""
    who = f" @{owner}" if owner else ""
    return f"[{mark}] {_short(task.id)}  {prio:<6} {due:<16} {task.title}{cat}{who}"


def _format_list(title: str, tasks: list[Task]) -> str:
    if not tasks:
        return f"{title}: no tasks."
    return "\n".join([f"{title} ({len(tasks)}):", *(f"  {_format_task(t)}" for t in tasks)])


async def _resolve_task_id(state: AppState, session: Session, raw: str) -> str:
    """Expand a unique id prefix among the tasks the caller can see."""
    if len(raw) >= 32:
        return raw
    visible = (
        await state.repository.list_all(session)
        if session.is_admin
        else await state.repository.list(session)
    )
    matches = [t.id for t in visible if t.id.startswith(raw)]
    if len(matches) > 1:
        raise ValidationError.single("id", f"prefix {raw!r} is ambiguous ({len(matches)} tasks)")
    return matches[0] if matches else raw


# ---- session commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_whoami(state: AppState, args: list[str]) -> str:
    session = state.session
    if session is None:
        return "Not signed in."
    profile = state.profiles.get_profile(session.user_id)
    return f"Signed in as {display_name(profile)} <{session.email}> role={session.role.value}"


def cmd_login(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /login <email>"
    session = state.sessions.sign_in(args[0])
    return f"Welcome back, {session.email}."


def cmd_register(state: AppState, args: list[str]) -> str:
    """
    /register <email> [name ...] [--admin]
    """
    if not args:
        return "Usage: /register <email> [name] [--admin]"
    role = Role.ADMIN if "--admin" in args else Role.USER
    rest = [a for a in args[1:] if a != "--admin"]
    name = " ".join(rest) or None
    try:
        session = state.sessions.sign_up(args[0], name=name, role=role)
    except ValueError as e:
        return f"Cannot register: {e}"
    return f"Account created for {session.email} (role={session.role.value})."


def cmd_logout(state: AppState, args: list[str]) -> str:
    if state.session is None:
        return "Not signed in."
    state.sessions.sign_out()
    return "Signed out."


# ---- task commands ----


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [priority=low|medium|high] [category=new|pending|scheduled]
         [due=YYYY-MM-DD[THH:MM]] [desc="..."]
    """
    words, fields = _parse_fields(args, allow_clear=False)
    fields.setdefault("title", " ".join(words))
    task = await state.repository.create(state.session, fields)
    return f"Added task {_short(task.id)}: {task.title}"


async def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list         -> all my tasks
    /list open    -> only pending
    /list done    -> only completed
    """
    tasks = await state.repository.list(state.session)
    sub = args[0].lower() if args else ""
    if sub in ("open", "todo", "pending"):
        return _format_list("Open tasks", [t for t in tasks if not t.completed])
    if sub == "done":
        return _format_list("Completed tasks", [t for t in tasks if t.completed])
    return _format_list("My tasks", tasks)


async def cmd_today(state: AppState, args: list[str]) -> str:
    tasks = today_tasks(await state.repository.list(state.session), _now())
    groups = partition_by_category(tasks)
    lines = [f"Today: {len(tasks)} task(s)"]
    for key, items in groups.items():
        if items:
            lines.append(f" {key}:")
            lines.extend(f"  {_format_task(t)}" for t in items)
    return "\n".join(lines)


async def cmd_day(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /day YYYY-MM-DD"
    try:
        day = datetime.fromisoformat(args[0])
    except ValueError:
        return f"Invalid date: {args[0]!r}. Use YYYY-MM-DD."
    tasks = tasks_due_on(await state.repository.list(state.session), day)
    return _format_list(f"Due on {day.date().isoformat()}", tasks)


async def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    session = require_session(state.session)
    task = await state.repository.get(await _resolve_task_id(state, session, args[0]), session)
    lines = [
        _format_task(task),
        f"  id: {task.id}",
        f"  created: {task.created_at.isoformat(timespec='seconds')}",
    ]
    if task.description:
        lines.append(f"  {task.description}")
    return "\n".join(lines)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> key=value ... (title, desc, priority, category, due; value 'none' clears)"
    session = require_session(state.session)
    task_id = await _resolve_task_id(state, session, args[0])
    words, fields = _parse_fields(args[1:], allow_clear=True)
    if words:
        return f"Unexpected arguments: {' '.join(words)}. Use key=value."
    task = await state.repository.update(task_id, session, fields)
    return f"Updated: {_format_task(task)}"


async def _set_completed(state: AppState, args: list[str], completed: bool) -> str:
    if not args:
        return f"Usage: /{'done' if completed else 'undo'} <id>"
    session = require_session(state.session)
    task_id = await _resolve_task_id(state, session, args[0])
    await state.repository.toggle_completion(task_id, session, completed)
    return f"Task {_short(task_id)} {'completed' if completed else 'reopened'}."


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, True)


async def cmd_undo(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, False)


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    session = require_session(state.session)
    task_id = await _resolve_task_id(state, session, args[0])
    await state.repository.delete(task_id, session)
    return f"Deleted task {_short(task_id)}."


async def cmd_stats(state: AppState, args: list[str]) -> str:
    tasks = await state.repository.list(state.session)
    ov = task_overview(tasks, _now())
    prio = ", ".join(f"{p.value}={n}" for p, n in priority_breakdown(tasks))
    cats = ", ".join(f"{k}={len(v)}" for k, v in partition_by_category(tasks).items())
    return (
        "Stats:\n"
        f"  Total: {ov.total} ({ov.pending} pending)\n"
        f"  Completed: {ov.completed} ({ov.completion_pct}%)\n"
        f"  Due today: {ov.due_today} ({ov.due_today_pending} pending)\n"
        f"  Upcoming: {ov.upcoming}\n"
        f"  Priority: {prio}\n"
        f"  Category: {cats}"
    )


# ---- admin ----


async def cmd_admin(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /admin stats                 -> dashboard counts, priorities, busiest users
    /admin tasks [query]         -> all tasks (optionally filtered)
    /admin users                 -> all profiles
    /admin assign <email> <title> [key=value ...]
    """
    usage = "Usage: /admin stats | /admin tasks [query] | /admin users | /admin assign <email> <title> [key=value ...]"
    if not args:
        return usage

    sub = args[0].lower()
    session = require_session(state.session)
    if not session.is_admin:
        raise Forbidden()

    if sub == "stats":
        if emit:
            emit("[ADMIN] Loading tasks and users...")
        tasks = await state.repository.list_all(session)
        users = await asyncio.to_thread(state.profiles.list_profiles)
        counts = dashboard_counts(tasks, users)
        top_n = int(getattr(state.settings, "summary_top_n", 5))
        lines = [
            "Dashboard:",
            f"  Users: {counts.total_users}",
            f"  Completed: {counts.completed_tasks}",
            f"  Pending: {counts.pending_tasks}",
            f"  Urgent: {counts.urgent_tasks}",
            "  Priority: " + ", ".join(f"{p.value}={n}" for p, n in priority_breakdown(tasks)),
            f"  Top users (max {top_n}):",
        ]
        for row in summarize_by_user(tasks, users, limit=top_n):
            lines.append(
                f"    {row.display_name}: {row.completed_count} done / {row.pending_count} pending"
            )
        return "\n".join(lines)

    if sub == "tasks":
        tasks = await state.repository.list_all(session)
        users = await asyncio.to_thread(state.profiles.list_profiles)
        entries = search_owned_tasks(attach_owners(tasks, users), " ".join(args[1:]))
        if not entries:
            return "No tasks found."
        return "\n".join(
            [f"All tasks ({len(entries)}):", *(f"  {_format_task(e.task, e.owner_name)}" for e in entries)]
        )

    if sub == "users":
        users = await asyncio.to_thread(state.profiles.list_profiles)
        if not users:
            return "No users."
        return "\n".join(
            ["Users:", *(f"  {display_name(u)} <{u.email}> role={u.role.value}" for u in users)]
        )

    if sub == "assign":
        if len(args) < 3:
            return usage
        owner = await asyncio.to_thread(state.profiles.find_by_email, args[1])
        if owner is None:
            return f"No user with email {args[1]!r}."
        words, fields = _parse_fields(args[2:], allow_clear=False)
        fields.setdefault("title", " ".join(words))
        task = await state.repository.assign(session, owner.id, fields)
        return f"Assigned task {_short(task.id)} to {display_name(owner)}: {task.title}"

    return usage


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("whoami", cmd_whoami, help_text="Show the signed-in user.")
registry.register("login", cmd_login, help_text="Sign in: /login <email>.")
registry.register("register", cmd_register, help_text="Create an account: /register <email> [name] [--admin].")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> [priority=] [category=] [due=] [desc=].")
registry.register("list", cmd_list, help_text="List my tasks: /list [open|done].", aliases=["ls"])
registry.register("today", cmd_today, help_text="Tasks for today, grouped by category.")
registry.register("day", cmd_day, help_text="Tasks due on a date: /day YYYY-MM-DD.")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> key=value ...")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id>.")
registry.register("undo", cmd_undo, help_text="Reopen a task: /undo <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task permanently: /rm <id>.", aliases=["delete"])
registry.register("stats", cmd_stats, help_text="Personal dashboard numbers.")
registry.register("admin", cmd_admin, help_text="Admin tools: /admin stats | tasks | users | assign.")
