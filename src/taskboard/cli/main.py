# src/taskboard/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, signs in the configured user and runs
the console connector on an asyncio loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, sign_in_default_user
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import TaskboardError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # Stores use short-lived sqlite connections per call; close() is a hook only.
    for name in ("task_store", "profiles"):
        store = getattr(state, name, None)
        try:
            if store is not None and hasattr(store, "close"):
                store.close()
        except Exception:
            logger.debug("%s close failed.", name, exc_info=True)


def main() -> int:
    settings = get_settings()

    log_file = setup_logging(settings)

    logger.info("Starting %s... (log file: %s)", settings.app_name, log_file)

    try:
        state = create_initial_state(settings=settings)
        sign_in_default_user(state)
    except TaskboardError as e:
        logger.error("Startup failed: %s", e)
        return 1

    try:
        if settings.console_enabled:
            asyncio.run(run_console_loop(state))
        else:
            logger.info("Console disabled; nothing to run.")
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        _shutdown(state)
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
