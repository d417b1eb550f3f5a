"""Core: errors, ports (Protocols), sessions and application state."""
