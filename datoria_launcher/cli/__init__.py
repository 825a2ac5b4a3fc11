"""
datoria launcher CLI module.

This module provides the command-line entry point for the launcher.
"""

from .main import CLI, main

__all__ = ["CLI", "main"]
