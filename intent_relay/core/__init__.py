"""Core domain types, configuration, and logging for the intent relay."""
