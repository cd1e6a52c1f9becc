"""Public aggregate statistics served from PostgreSQL behind a short-lived cache."""

__version__ = "1.0.0"
