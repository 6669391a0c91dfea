"""Live log viewer that groups, de-duplicates and categorizes game client log entries."""

__version__ = "0.1.0"
