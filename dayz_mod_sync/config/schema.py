"""
Configuration Schema and Models

Defines Pydantic models for the configuration schema, providing validation,
default values, and type checking for all configuration options.

Author: DayZ Mod Sync Project
License: MIT
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, validator
from pathlib import Path


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StalenessMode(str, Enum):
    """How a present mod is judged out of date."""
    DIRECTORY = "directory"  # Mod folder timestamp only
    FILE = "file"  # Per-file timestamps and presence


class PathsConfig(BaseModel):
    """Filesystem locations used by the synchronizer and launcher."""
    
    source_root: Optional[str] = Field(
        default=None,
        description="Client workshop folder containing the mod directories (needed to sync)"
    )
    dest_root: str = Field(
        description="Server folder the mods are installed into"
    )
    executable: Optional[str] = Field(
        default=None,
        description="Path to the server executable"
    )
    key_dest_root: Optional[str] = Field(
        default=None,
        description="Shared server key directory (if None, uses dest_root/keys)"
    )
    
    @validator("source_root", "dest_root")
    def validate_not_empty(cls, v):
        """Ensure configured paths are not blank."""
        if v is None:
            return v
        if not v or not str(v).strip():
            raise ValueError("Path must not be empty")
        return str(v)
    
    @property
    def keys_path(self) -> Path:
        """Resolved shared key directory."""
        if self.key_dest_root:
            return Path(self.key_dest_root)
        return Path(self.dest_root) / "keys"


class SyncConfig(BaseModel):
    """Mod synchronization behaviour."""
    
    exclusion_marker: str = Field(
        default="!",
        description="Source folders starting with this prefix are never copied"
    )
    key_extension: str = Field(
        default=".bikey",
        description="Extension of key files propagated to the key directory"
    )
    keys_dir_name: str = Field(
        default="keys",
        description="Name of the key subdirectory inside each mod"
    )
    staleness: StalenessMode = Field(
        default=StalenessMode.DIRECTORY.value,
        description="Staleness comparison (directory or file)"
    )
    max_workers: int = Field(
        default=1,
        description="Number of mods processed concurrently"
    )
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
    
    @validator("exclusion_marker")
    def validate_marker(cls, v):
        """Ensure the marker is a non-empty prefix."""
        if not v:
            raise ValueError("exclusion_marker must not be empty")
        return v
    
    @validator("key_extension")
    def normalize_extension(cls, v):
        """Normalize extension to lowercase with a leading dot."""
        v = v.strip().lower()
        if not v:
            raise ValueError("key_extension must not be empty")
        return v if v.startswith('.') else f".{v}"
    
    @validator("max_workers")
    def validate_workers(cls, v):
        """Ensure at least one worker."""
        if v < 1:
            raise ValueError(f"max_workers must be at least 1: {v}")
        return v


class LaunchConfig(BaseModel):
    """Server launch command configuration."""
    
    enabled: bool = Field(
        default=True,
        description="Launch the server when no mods were updated"
    )
    mod_marker: str = Field(
        default="@",
        description="Installed folders starting with this prefix are loaded as mods"
    )
    base_args: List[str] = Field(
        default=["-config=serverDZ.cfg", "-port=2302"],
        description="Fixed arguments passed before the mod list"
    )
    mod_flag: str = Field(
        default="-mod=",
        description="Prefix of the mod list argument"
    )
    separator: str = Field(
        default=";",
        description="Separator between mod names"
    )
    space_replacement: str = Field(
        default="_",
        description="Replacement for spaces in mod names"
    )


class AppConfig(BaseModel):
    """Application logging configuration."""
    
    log_level: LogLevel = Field(
        default=LogLevel.INFO.value,
        description="Application logging level"
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file"
    )
    log_file_path: str = Field(
        default="logs/dayz_mod_sync.log",
        description="Log file location"
    )
    log_rotation_size: int = Field(
        default=10485760,  # 10MB
        description="Log file size before rotation (bytes)"
    )
    log_retention_count: int = Field(
        default=5,
        description="Number of rotated log files to keep"
    )
    json_logs: bool = Field(
        default=False,
        description="Emit log records as JSON"
    )
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class Config(BaseModel):
    """
    Root configuration model for DayZ Mod Sync.
    
    Loaded from config.yaml and overridden by environment variables or
    command line options before being handed to the synchronizer and launcher.
    """
    
    app: AppConfig = Field(default_factory=AppConfig)
    paths: PathsConfig
    sync: SyncConfig = Field(default_factory=SyncConfig)
    launch: LaunchConfig = Field(default_factory=LaunchConfig)
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_assignment = True
