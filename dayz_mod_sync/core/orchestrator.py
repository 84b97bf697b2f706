"""
Orchestrator

Runs the update workflow: synchronize mods from the client, then start the
server if nothing had to be updated.

Author: DayZ Mod Sync Project
License: MIT
"""

from typing import Optional
from dataclasses import dataclass

from ..utils.logger import get_logger
from ..config.schema import Config
from .synchronizer import ModSynchronizer, SyncReport
from .launcher import ServerLauncher, LaunchResult

logger = get_logger(__name__)


@dataclass
class RunResult:
    """Outcome of one orchestrated run."""
    sync_report: Optional[SyncReport] = None
    launch_result: Optional[LaunchResult] = None
    error_message: Optional[str] = None
    
    @property
    def launched(self) -> bool:
        return self.launch_result is not None
    
    @property
    def success(self) -> bool:
        if self.error_message:
            return False
        if self.sync_report is not None and not self.sync_report.success:
            return False
        if self.launch_result is not None and not self.launch_result.success:
            return False
        return True


class Orchestrator:
    """
    Main orchestrator for DayZ Mod Sync.
    
    The server is only launched when the sync run changed nothing. After
    an update the server has to be restarted by hand.
    """
    
    def __init__(
        self,
        config: Config,
        synchronizer: Optional[ModSynchronizer] = None,
        launcher: Optional[ServerLauncher] = None
    ):
        """
        Initialize orchestrator.
        
        Args:
            config: Application configuration
            synchronizer: Mod synchronizer (built from config if None)
            launcher: Server launcher (built from config if None)
        """
        self.config = config
        self.synchronizer = synchronizer or ModSynchronizer(config)
        self.launcher = launcher or ServerLauncher(config)
    
    def run(self, launch: Optional[bool] = None) -> RunResult:
        """
        Synchronize mods and launch the server if everything was current.
        
        Args:
            launch: Override launch.enabled from the configuration
        
        Returns:
            RunResult
        """
        if launch is None:
            launch = self.config.launch.enabled
        
        result = RunResult()
        
        try:
            logger.info("Checking and copying updated mods from client to server...")
            result.sync_report = self.synchronizer.sync()
            
            if result.sync_report.updated:
                logger.info("Mod update process completed. Please restart the server manually if needed.")
            elif launch:
                logger.info("All mods are up to date. Starting server...")
                result.launch_result = self.launcher.launch()
            else:
                logger.info("All mods are up to date. Server launch disabled.")
                
        except Exception as e:
            logger.exception(f"An error occurred: {e}")
            result.error_message = str(e)
        
        return result
