"""
datoria launcher.

Resolves the datoria version for the current project, installs it into the
local cache when needed, and runs it with the caller's arguments.
"""

__version__ = "1.0.0"
