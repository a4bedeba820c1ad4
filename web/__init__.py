"""Web UI for audition-match."""

__version__ = "1.0.0"
