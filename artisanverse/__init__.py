"""Artisanverse marketplace backend (JSON-file persistence + FastAPI)."""

__version__ = "1.0.0"
