"""
Configuration Loader

Handles loading, parsing, and merging configuration from YAML files and
environment variables.

Author: DayZ Mod Sync Project
License: MIT
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv

from .schema import Config


class ConfigLoader:
    """
    Configuration loader and manager.
    
    Loads configuration from YAML file, merges with environment variables
    and explicit overrides, then validates the structure.
    """
    
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.
        
        Args:
            config_path: Path to the configuration file. If None, uses
                MODSYNC_CONFIG or config.yaml in the working directory.
        """
        # Load environment variables from .env if present
        load_dotenv()
        
        self.config_path = config_path or os.getenv("MODSYNC_CONFIG", "config.yaml")
        self._config: Optional[Config] = None
    
    def load(self, overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> Config:
        """
        Load and validate configuration.
        
        Args:
            overrides: Section -> key -> value mapping applied last
                (e.g. command line options). None values are ignored.
        
        Returns:
            Validated Config object
            
        Raises:
            ValueError: If YAML parsing or configuration validation fails
        """
        config_data = self._load_yaml()
        config_data = self._merge_env_vars(config_data)
        if overrides:
            config_data = self._merge_overrides(config_data, overrides)
        
        try:
            self._config = Config(**config_data)
        except ValueError as e:
            raise ValueError(f"Invalid configuration: {e}")
        
        return self._config
    
    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.
        
        Returns:
            Dictionary with configuration data
        """
        config_file = Path(self.config_path)
        
        if not config_file.exists():
            return self._create_default_config()
        
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML config: {e}")
        
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_file}")
        # Empty sections (e.g. "paths:" with nothing under it) load as None
        return {key: value for key, value in data.items() if value is not None}
    
    def _create_default_config(self) -> Dict[str, Any]:
        """
        Create default configuration structure.
        
        Paths have no sensible default and must come from the environment
        or command line.
        
        Returns:
            Default configuration dictionary
        """
        return {
            "app": {
                "log_level": "INFO",
                "log_to_file": False
            },
            "paths": {},
            "sync": {
                "exclusion_marker": "!",
                "key_extension": ".bikey",
                "keys_dir_name": "keys",
                "staleness": "directory",
                "max_workers": 1
            },
            "launch": {
                "enabled": True,
                "mod_marker": "@",
                "base_args": ["-config=serverDZ.cfg", "-port=2302"]
            }
        }
    
    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge environment variables into configuration.
        
        Environment variables override config file values.
        Naming convention: MODSYNC_KEY (e.g., MODSYNC_SOURCE_ROOT)
        
        Args:
            config_data: Configuration dictionary from file
            
        Returns:
            Merged configuration dictionary
        """
        # Paths
        if os.getenv("MODSYNC_SOURCE_ROOT"):
            config_data.setdefault("paths", {})["source_root"] = os.getenv("MODSYNC_SOURCE_ROOT")
        if os.getenv("MODSYNC_DEST_ROOT"):
            config_data.setdefault("paths", {})["dest_root"] = os.getenv("MODSYNC_DEST_ROOT")
        if os.getenv("MODSYNC_EXECUTABLE"):
            config_data.setdefault("paths", {})["executable"] = os.getenv("MODSYNC_EXECUTABLE")
        if os.getenv("MODSYNC_KEY_DEST_ROOT"):
            config_data.setdefault("paths", {})["key_dest_root"] = os.getenv("MODSYNC_KEY_DEST_ROOT")
        
        # App settings
        if os.getenv("MODSYNC_LOG_LEVEL"):
            config_data.setdefault("app", {})["log_level"] = os.getenv("MODSYNC_LOG_LEVEL").upper()
        
        # Sync settings
        if os.getenv("MODSYNC_MAX_WORKERS"):
            try:
                workers = int(os.getenv("MODSYNC_MAX_WORKERS"))
            except ValueError:
                raise ValueError(f"MODSYNC_MAX_WORKERS must be an integer: {os.getenv('MODSYNC_MAX_WORKERS')}")
            config_data.setdefault("sync", {})["max_workers"] = workers
        
        # Launch
        if os.getenv("MODSYNC_LAUNCH_ENABLED"):
            config_data.setdefault("launch", {})["enabled"] = os.getenv("MODSYNC_LAUNCH_ENABLED").lower() == "true"
        
        return config_data
    
    def _merge_overrides(
        self,
        config_data: Dict[str, Any],
        overrides: Dict[str, Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Apply explicit overrides on top of file and environment values.
        
        Args:
            config_data: Configuration dictionary
            overrides: Section -> key -> value mapping
            
        Returns:
            Configuration with overrides applied
        """
        for section, values in overrides.items():
            for key, value in values.items():
                if value is not None:
                    config_data.setdefault(section, {})[key] = value
        return config_data
    
    def save(self, config: Config, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.
        
        Args:
            config: Config object to save
            path: Path to save to (uses default if None)
        """
        save_path = Path(path or self.config_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        
        config_dict = config.dict()
        
        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
    
    def reload(self) -> Config:
        """
        Reload configuration from file.
        
        Returns:
            Reloaded Config object
        """
        return self.load()
    
    @property
    def config(self) -> Optional[Config]:
        """Get the current configuration object."""
        return self._config


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None
) -> Config:
    """
    Convenience function to load configuration.
    
    Args:
        config_path: Optional path to config file
        overrides: Optional section -> key -> value overrides
        
    Returns:
        Loaded and validated Config object
    """
    loader = ConfigLoader(config_path)
    return loader.load(overrides)
