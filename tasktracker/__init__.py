"""Personal task tracker: a SQLite-backed REST API with an HTML board."""

__version__ = "1.0.0"
