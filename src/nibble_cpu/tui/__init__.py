"""TUI debugger package."""

from .app import run_debugger

__all__ = ["run_debugger"]
