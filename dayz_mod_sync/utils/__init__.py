"""
Utility Module

Logging setup and filesystem helpers shared by the synchronizer and launcher.

Author: DayZ Mod Sync Project
License: MIT
"""
