"""Praxis CLI - install and keep Praxis agent templates in sync."""

__version__ = "1.0.0"
