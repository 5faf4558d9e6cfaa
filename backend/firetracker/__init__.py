"""Fire Department Tracker: personnel, incident and training records service."""

__version__ = "2.0.0"
