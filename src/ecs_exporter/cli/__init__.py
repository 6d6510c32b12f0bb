# src/ecs_exporter/cli/__init__.py
"""
ecs-exporter CLI Package

Exposes the top-level Typer `app` for the console entrypoint and tests.
"""

from .main import app

__all__ = ["app"]
