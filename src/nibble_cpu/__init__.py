"""Emulator for a minimal 8-bit register CPU with a memory-mapped console."""

__version__ = "0.1.0"
