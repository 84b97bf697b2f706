"""
DayZ Mod Sync Core Module

Mod synchronization, key propagation, server launch, and orchestration.

Author: DayZ Mod Sync Project
License: MIT
"""

from .synchronizer import ModSynchronizer, ModEntry, ModAction, ModSyncResult, SyncSession, SyncReport
from .key_propagator import KeyPropagator, KeyCopyResult
from .launcher import ServerLauncher, LaunchResult
from .orchestrator import Orchestrator, RunResult

__all__ = [
    'ModSynchronizer', 'ModEntry', 'ModAction', 'ModSyncResult', 'SyncSession',
    'SyncReport', 'KeyPropagator', 'KeyCopyResult', 'ServerLauncher',
    'LaunchResult', 'Orchestrator', 'RunResult'
]
