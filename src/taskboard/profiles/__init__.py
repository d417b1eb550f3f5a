"""User profiles (id, name, email, role) and their SQLite store."""
