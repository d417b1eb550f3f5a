# config_local.example.py
#
# Copy to config_local.py (gitignored) for local, non-secret overrides.
# Only the names below are read; everything else comes from the environment/.env.

CONSOLE_ENABLED = True
LOG_LEVEL = "DEBUG"
