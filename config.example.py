# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKBOARD_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Paths (gitignored)
    "TASKBOARD_DATA_DIR": "Local data directory (default: .local/taskboard). Holds the log file.",
    "TASKBOARD_DB_PATH": "SQLite database with tasks and profiles (default: <data_dir>/taskboard.sqlite3).",
    # Default console user
    "TASKBOARD_USER_EMAIL": "Sign this user in at startup; the profile is created if missing (empty => signed out).",
    "TASKBOARD_USER_NAME": "Display name used when the default profile is created.",
    "TASKBOARD_USER_ROLE": "Role for a newly created default profile: user | admin (default: user).",
    # Tuning
    "TASKBOARD_SUMMARY_TOP_N": "How many users /admin stats lists (default: 5).",
}
