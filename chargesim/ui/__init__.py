"""Command-line interface for the charging simulator."""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
