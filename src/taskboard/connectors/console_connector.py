# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import shlex
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.session import Session, SessionEvent
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def plain_text_to_command(text: str) -> str:
    """
    Plain console input means "add a task". key=value fields still work, but
    text shlex cannot split (a lone apostrophe or quote) becomes the title as-is.
    """
    try:
        shlex.split(text)
    except ValueError:
        return "/add " + shlex.quote(text)
    return "/add " + text


def _prompt(state: AppState) -> str:
    session = state.session
    who = session.email if session is not None and session.email else "guest"
    return f"{who}> "


async def run_console_loop(state: AppState) -> None:
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskboard"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate feedback for slower commands.
        print(f"[{_ts_local()}] {text}", flush=True)

    def on_session(event: SessionEvent, session: Session | None) -> None:
        logger.debug("Session event %s user_id=%s", event, session.user_id if session else None)

    unsubscribe = state.sessions.subscribe(on_session)

    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, _prompt(state))).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not line.startswith("/"):
                line = plain_text_to_command(line)

            try:
                reply = await command_registry.handle(state, line, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                print(f"[{_ts_local()}] {reply}")
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
