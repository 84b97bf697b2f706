"""
DayZ Mod Sync

Synchronizes workshop mods from a DayZ client into a dedicated server folder,
propagates mod keys, and launches the server with the installed mod list.

Author: DayZ Mod Sync Project
License: MIT
"""

__version__ = "0.1.0"
