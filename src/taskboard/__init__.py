"""taskboard: personal task manager core (tasks, views, admin summaries)."""

__version__ = "0.3.0"
