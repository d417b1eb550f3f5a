"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, Category) and input variants
- validation.py: input validation (pydantic -> domain ValidationError)
- classifier.py: pure view filters and metrics (today, calendar day, histogram, progress)
- task_store.py: SQLite-backed storage
- repository.py: async, ownership-scoped CRUD used by the rest of the app
"""
