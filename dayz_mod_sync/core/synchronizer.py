"""
Mod Synchronizer

Copies new and out-of-date mods from the client workshop folder into the
server folder and propagates their keys, reporting progress as it goes.

Author: DayZ Mod Sync Project
License: MIT
"""

import os
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass, field
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum

from ..utils.logger import get_logger
from ..utils.file_ops import (
    count_files,
    is_newer,
    find_stale_files,
    copy_tree,
    copy_files
)
from ..config.schema import Config, StalenessMode
from .key_propagator import KeyPropagator

logger = get_logger(__name__)


class ModAction(Enum):
    """What happened to a mod during a sync run."""
    COPIED = "copied"
    UPDATED = "updated"
    SKIPPED_UP_TO_DATE = "skipped_up_to_date"
    EXCLUDED = "excluded"
    FAILED = "failed"


@dataclass
class ModEntry:
    """A mod directory discovered in the source root."""
    name: str
    source_path: Path
    destination_path: Path
    source_mtime: float


@dataclass
class ModSyncResult:
    """Result of synchronizing a single mod."""
    mod: ModEntry
    action: ModAction
    files_copied: int = 0
    keys_copied: int = 0
    error_message: Optional[str] = None
    
    @property
    def changed_destination(self) -> bool:
        """Whether the mod folder on the server was written to."""
        if self.action in (ModAction.COPIED, ModAction.UPDATED):
            return True
        return self.action == ModAction.FAILED and self.files_copied > 0
    
    @property
    def progress_files(self) -> int:
        """Files this mod contributes to the progress counter."""
        # Key files are part of any tree that was (partly) written
        if self.changed_destination:
            return self.files_copied
        return self.keys_copied


class SyncSession:
    """
    Per-run progress bookkeeping.
    
    The copied counter is clamped to the precomputed total so the reported
    percentage never exceeds 100.
    """
    
    def __init__(self, total_files: int = 0):
        self.total_files = total_files
        self.copied_files = 0
        self.updated = False
    
    def record(self, result: ModSyncResult):
        """Account for a processed mod."""
        self.copied_files = min(self.total_files, self.copied_files + result.progress_files)
        if result.changed_destination:
            self.updated = True
    
    @property
    def progress(self) -> float:
        """Completion percentage."""
        if not self.total_files:
            return 0.0
        return self.copied_files / self.total_files * 100


@dataclass
class SyncReport:
    """Outcome of a full sync run."""
    updated: bool = False
    results: List[ModSyncResult] = field(default_factory=list)
    total_files: int = 0
    copied_files: int = 0
    error_message: Optional[str] = None
    
    @property
    def keys_copied(self) -> int:
        return sum(r.keys_copied for r in self.results)
    
    @property
    def failed_mods(self) -> List[ModSyncResult]:
        return [r for r in self.results if r.action == ModAction.FAILED]
    
    @property
    def progress(self) -> float:
        if not self.total_files:
            return 0.0
        return self.copied_files / self.total_files * 100
    
    @property
    def success(self) -> bool:
        """True when no fatal error occurred and no mod failed."""
        return self.error_message is None and not self.failed_mods


class ModSynchronizer:
    """
    Incremental mod synchronizer.
    
    For every direct subdirectory of the source root:
    - excluded folders (exclusion marker prefix) are skipped entirely
    - mods missing on the server are copied
    - mods whose source folder is strictly newer are copied over the old one
    - key files are propagated whether or not the mod itself was copied
    """
    
    def __init__(self, config: Config, key_propagator: Optional[KeyPropagator] = None):
        """
        Initialize synchronizer.
        
        Args:
            config: Application configuration
            key_propagator: Key propagator (built from config if None)
        """
        self.source_root = Path(config.paths.source_root) if config.paths.source_root else None
        self.dest_root = Path(config.paths.dest_root)
        self.exclusion_marker = config.sync.exclusion_marker
        self.staleness = StalenessMode(config.sync.staleness)
        self.max_workers = config.sync.max_workers
        
        self.key_propagator = key_propagator or KeyPropagator(
            key_dest_root=config.paths.keys_path,
            key_extension=config.sync.key_extension,
            keys_dir_name=config.sync.keys_dir_name
        )
        
        logger.debug(f"ModSynchronizer initialized ({self.source_root} -> {self.dest_root})")
    
    def is_excluded(self, name: str) -> bool:
        """Check whether a source folder is excluded from copying."""
        return name.startswith(self.exclusion_marker)
    
    def discover_mods(self) -> List[ModEntry]:
        """
        List mod directories in the source root.
        
        Returns:
            ModEntry list sorted by name
            
        Raises:
            OSError: If the source root cannot be listed
        """
        mods = []
        
        with os.scandir(self.source_root) as entries:
            for entry in sorted(entries, key=lambda e: e.name):
                try:
                    if not entry.is_dir():
                        continue
                    mtime = entry.stat().st_mtime
                except OSError as e:
                    logger.error(f"Cannot inspect {entry.path}: {e}")
                    continue
                
                mods.append(ModEntry(
                    name=entry.name,
                    source_path=Path(entry.path),
                    destination_path=self.dest_root / entry.name,
                    source_mtime=mtime
                ))
        
        return mods
    
    def count_total_files(self, mods: List[ModEntry]) -> int:
        """
        Count files under all non-excluded mods.
        
        Args:
            mods: Discovered mods
        
        Returns:
            Total file count used as the progress denominator
        """
        return sum(
            count_files(str(mod.source_path))
            for mod in mods
            if not self.is_excluded(mod.name)
        )
    
    def sync(self) -> SyncReport:
        """
        Run a full synchronization pass.
        
        Returns:
            SyncReport; report.updated is True if any mod was copied or updated
        """
        if self.source_root is None:
            error_msg = "Client mods directory is not configured"
            logger.error(error_msg)
            return SyncReport(error_message=error_msg)
        
        if not self.source_root.is_dir():
            error_msg = f"Client mods directory does not exist: {self.source_root}"
            logger.error(error_msg)
            return SyncReport(error_message=error_msg)
        
        try:
            mods = self.discover_mods()
        except OSError as e:
            error_msg = f"Cannot list client mods directory {self.source_root}: {e}"
            logger.error(error_msg)
            return SyncReport(error_message=error_msg)
        
        for mod in mods:
            logger.debug(f"Found mod folder: {mod.name}")
        
        session = SyncSession(self.count_total_files(mods))
        report = SyncReport(total_files=session.total_files)
        
        if session.total_files == 0:
            logger.info("No files to copy.")
            return report
        
        logger.info(f"Total files to copy: {session.total_files}")
        
        eligible = []
        for mod in mods:
            if self.is_excluded(mod.name):
                logger.info(f"Skipping mod folder: {mod.name}")
                report.results.append(ModSyncResult(mod=mod, action=ModAction.EXCLUDED))
            else:
                eligible.append(mod)
        
        for result in self._process(eligible):
            session.record(result)
            report.results.append(result)
            logger.info(f"Progress: {session.progress:.1f}%")
        
        report.results.sort(key=lambda r: r.mod.name)
        
        report.updated = session.updated
        report.copied_files = session.copied_files
        
        logger.info("Copy process complete.")
        return report
    
    def _process(self, mods: List[ModEntry]):
        """
        Yield per-mod results in completion order.
        
        Worker threads only copy; results are consumed on the calling thread.
        """
        if self.max_workers <= 1 or len(mods) <= 1:
            for mod in mods:
                yield self.sync_mod(mod)
            return
        
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self.sync_mod, mod) for mod in mods]
            for future in as_completed(futures):
                yield future.result()
    
    def sync_mod(self, mod: ModEntry) -> ModSyncResult:
        """
        Synchronize one mod and propagate its keys.
        
        Args:
            mod: Mod to synchronize
        
        Returns:
            ModSyncResult with operation details
        """
        result = self._copy_mod(mod)
        
        key_results = self.key_propagator.propagate(mod.source_path)
        result.keys_copied = sum(1 for k in key_results if k.success)
        
        return result
    
    def _copy_mod(self, mod: ModEntry) -> ModSyncResult:
        """Copy the mod folder if it is missing or stale on the server."""
        dest = mod.destination_path
        
        if not dest.exists():
            logger.info(f"Copying new mod: {mod.source_path} to {dest}")
            return self._run_copy(mod, ModAction.COPIED)
        
        try:
            if self.staleness == StalenessMode.FILE:
                stale_files = find_stale_files(str(mod.source_path), str(dest))
                needs_copy = bool(stale_files)
            else:
                stale_files = None
                needs_copy = is_newer(str(mod.source_path), str(dest))
        except OSError as e:
            logger.error(f"Cannot compare {mod.name} with server copy: {e}")
            return ModSyncResult(mod=mod, action=ModAction.FAILED, error_message=str(e))
        
        if not needs_copy:
            logger.info(f"Skipping up-to-date mod: {mod.name}")
            return ModSyncResult(mod=mod, action=ModAction.SKIPPED_UP_TO_DATE)
        
        logger.info(f"Updating mod: {mod.source_path} to {dest}")
        return self._run_copy(mod, ModAction.UPDATED, stale_files)
    
    def _run_copy(
        self,
        mod: ModEntry,
        action: ModAction,
        relative_paths: Optional[List[Path]] = None
    ) -> ModSyncResult:
        """Perform the copy and wrap its outcome."""
        if relative_paths is None:
            success, copied, error = copy_tree(str(mod.source_path), str(mod.destination_path))
        else:
            success, copied, error = copy_files(
                str(mod.source_path), str(mod.destination_path), relative_paths
            )
        
        if not success:
            logger.error(f"Copy of {mod.name} incomplete: {error}")
            return ModSyncResult(
                mod=mod,
                action=ModAction.FAILED,
                files_copied=copied,
                error_message=error
            )
        
        return ModSyncResult(mod=mod, action=action, files_copied=copied)
