"""
Server Launcher

Builds the server command line from the mods installed on the server and
starts the server executable.

Author: DayZ Mod Sync Project
License: MIT
"""

import os
import subprocess
import time
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass, field

from ..utils.logger import get_logger
from ..config.schema import Config

logger = get_logger(__name__)


@dataclass
class LaunchResult:
    """Result of a server launch."""
    success: bool
    command: List[str] = field(default_factory=list)
    exit_code: Optional[int] = None
    execution_time: float = 0.0
    error_message: Optional[str] = None


class ServerLauncher:
    """
    Launch the dedicated server with every installed mod loaded.
    
    Installed mods are the direct subdirectories of the server folder whose
    name starts with the mod marker.
    """
    
    def __init__(self, config: Config):
        """
        Initialize server launcher.
        
        Args:
            config: Configuration object
        """
        self.dest_root = Path(config.paths.dest_root)
        self.executable = config.paths.executable
        self.launch_config = config.launch
    
    def list_installed_mods(self) -> List[str]:
        """
        List mods installed in the server folder.
        
        Returns:
            Sorted mod folder names; empty if the folder cannot be read
        """
        mods = []
        marker = self.launch_config.mod_marker
        
        try:
            with os.scandir(self.dest_root) as entries:
                for entry in entries:
                    if not entry.is_dir():
                        continue
                    if entry.name.startswith(marker):
                        logger.info(f"Found mod: {entry.name}")
                        mods.append(entry.name)
                    else:
                        logger.debug(f"Ignoring folder: {entry.name}")
        except OSError as e:
            logger.error(f"Filesystem error while reading mods directory: {e}")
            return []
        
        return sorted(mods)
    
    def build_mod_parameter(self, mods: List[str]) -> str:
        """
        Build the mod list argument.
        
        Args:
            mods: Mod folder names
        
        Returns:
            e.g. "-mod=@CF;@Community_Online_Tools"
        """
        replacement = self.launch_config.space_replacement
        names = [mod.replace(" ", replacement) for mod in mods]
        return self.launch_config.mod_flag + self.launch_config.separator.join(names)
    
    def build_command(self, mods: Optional[List[str]] = None) -> List[str]:
        """
        Build the full server command.
        
        Args:
            mods: Mods to load (installed mods if None)
        
        Returns:
            Command as list of arguments
            
        Raises:
            ValueError: If no executable is configured
        """
        if not self.executable:
            raise ValueError("Server executable is not configured")
        
        if mods is None:
            mods = self.list_installed_mods()
        
        return [str(self.executable), *self.launch_config.base_args, self.build_mod_parameter(mods)]
    
    def launch(self) -> LaunchResult:
        """
        Start the server and wait for it to exit.
        
        Returns:
            LaunchResult
        """
        try:
            command = self.build_command()
        except ValueError as e:
            logger.error(str(e))
            return LaunchResult(success=False, error_message=str(e))
        
        logger.info(f"Starting server with command: {' '.join(command)}")
        start_time = time.time()
        
        try:
            completed = subprocess.run(command, check=False)
        except FileNotFoundError:
            error_msg = f"Server executable not found: {self.executable}"
            logger.error(error_msg)
            return LaunchResult(success=False, command=command, error_message=error_msg)
        except OSError as e:
            error_msg = f"Failed to start server: {e}"
            logger.error(error_msg)
            return LaunchResult(success=False, command=command, error_message=error_msg)
        
        execution_time = time.time() - start_time
        success = completed.returncode == 0
        
        if success:
            logger.info(f"Server exited after {execution_time:.0f}s")
        else:
            logger.error(f"Server exited with code {completed.returncode}")
        
        return LaunchResult(
            success=success,
            command=command,
            exit_code=completed.returncode,
            execution_time=execution_time
        )
