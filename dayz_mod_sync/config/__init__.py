"""
DayZ Mod Sync Configuration Module

This module handles configuration loading, validation, and management. It
supports YAML-based configuration with environment variable overrides.

Author: DayZ Mod Sync Project
License: MIT
"""

from .schema import Config, PathsConfig, SyncConfig, LaunchConfig, AppConfig, StalenessMode
from .config_loader import ConfigLoader, load_config

__all__ = [
    'Config', 'PathsConfig', 'SyncConfig', 'LaunchConfig', 'AppConfig',
    'StalenessMode', 'ConfigLoader', 'load_config'
]
