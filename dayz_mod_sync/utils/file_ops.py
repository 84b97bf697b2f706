"""
File Operation Utilities

Provides safe file operations for mod synchronization: counting, timestamp
comparison, recursive tree copies, and single file copies.

Author: DayZ Mod Sync Project
License: MIT
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from .logger import get_logger

logger = get_logger(__name__)


def _log_walk_error(error: OSError) -> None:
    """Report a directory that could not be listed during a walk."""
    logger.error(f"Cannot read directory {error.filename}: {error.strerror or error}")


def count_files(directory: str) -> int:
    """
    Count regular files below a directory.
    
    Subdirectories that cannot be listed are reported and skipped.
    
    Args:
        directory: Directory to walk
        
    Returns:
        Number of regular files found
    """
    file_count = 0
    for root, _dirs, files in os.walk(directory, onerror=_log_walk_error):
        for name in files:
            if os.path.isfile(os.path.join(root, name)):
                file_count += 1
    return file_count


def is_newer(source: str, destination: str) -> bool:
    """
    Check whether source was modified strictly after destination.
    
    Args:
        source: Source path
        destination: Destination path
        
    Returns:
        True if the source modification time is later
        
    Raises:
        OSError: If either path cannot be stat'ed
    """
    return os.stat(source).st_mtime_ns > os.stat(destination).st_mtime_ns


def find_stale_files(source_dir: str, destination_dir: str) -> List[Path]:
    """
    List files that are missing at the destination or older there.
    
    Args:
        source_dir: Source directory
        destination_dir: Destination directory mirroring the source
        
    Returns:
        Paths relative to source_dir, in walk order
    """
    source_root = Path(source_dir)
    dest_root = Path(destination_dir)
    stale = []
    
    for root, _dirs, files in os.walk(source_root, onerror=_log_walk_error):
        for name in files:
            source_file = Path(root) / name
            relative = source_file.relative_to(source_root)
            dest_file = dest_root / relative
            try:
                if not dest_file.exists() or is_newer(str(source_file), str(dest_file)):
                    stale.append(relative)
            except OSError as e:
                logger.warning(f"Cannot compare {source_file}: {e}")
                stale.append(relative)
    
    return stale


def copy_tree(source: str, destination: str) -> Tuple[bool, int, Optional[str]]:
    """
    Recursively copy a directory, overwriting existing destination files.
    
    File and directory timestamps are preserved so a later staleness check
    sees the copy as up to date.
    
    Args:
        source: Source directory
        destination: Destination directory (created if missing)
        
    Returns:
        Tuple of (success: bool, files_copied: int, error_message: str)
    """
    copied = 0
    
    def _copy(src, dst):
        nonlocal copied
        result = shutil.copy2(src, dst)
        copied += 1
        return result
    
    try:
        shutil.copytree(source, destination, copy_function=_copy, dirs_exist_ok=True)
        logger.debug(f"Copied tree: {source} -> {destination} ({copied} files)")
        return True, copied, None
        
    except shutil.Error as e:
        # copytree collects per-file failures and raises them together
        failures = e.args[0] if e.args and isinstance(e.args[0], list) else []
        for failure in failures:
            logger.error(f"Failed to copy {failure[0]}: {failure[2]}")
        return False, copied, f"{len(failures) or 'Some'} file(s) failed to copy"
    except PermissionError as e:
        logger.error(f"Permission error copying tree: {e}")
        return False, copied, f"Permission denied: {e}"
    except OSError as e:
        logger.error(f"OS error copying tree: {e}")
        return False, copied, f"OS error: {e}"


def copy_files(
    source_dir: str,
    destination_dir: str,
    relative_paths: List[Path]
) -> Tuple[bool, int, Optional[str]]:
    """
    Copy selected files from one tree to another.
    
    Args:
        source_dir: Source directory
        destination_dir: Destination directory
        relative_paths: Files to copy, relative to source_dir
        
    Returns:
        Tuple of (success: bool, files_copied: int, error_message: str)
    """
    copied = 0
    errors = []
    
    for relative in relative_paths:
        source_file = Path(source_dir) / relative
        dest_file = Path(destination_dir) / relative
        try:
            dest_file.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source_file, dest_file)
            copied += 1
        except OSError as e:
            logger.error(f"Failed to copy {source_file}: {e}")
            errors.append(str(relative))
    
    if errors:
        return False, copied, f"{len(errors)} file(s) failed to copy"
    return True, copied, None


def safe_copy_file(
    source: str,
    destination_dir: str
) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Copy a single file into a directory, replacing any file of the same name.
    
    Args:
        source: Source file path
        destination_dir: Destination directory path (created if missing)
            
    Returns:
        Tuple of (success: bool, destination_path: str, error_message: str)
    """
    try:
        source_path = Path(source)
        dest_dir = Path(destination_dir)
        
        if not source_path.is_file():
            return False, None, f"Source is not a file: {source}"
        
        dest_dir.mkdir(parents=True, exist_ok=True)
        dest_path = dest_dir / source_path.name
        
        shutil.copy2(str(source_path), str(dest_path))
        logger.debug(f"Copied: {source} -> {dest_path}")
        
        return True, str(dest_path), None
        
    except PermissionError as e:
        logger.error(f"Permission error copying file: {e}")
        return False, None, f"Permission denied: {e}"
    except OSError as e:
        logger.error(f"OS error copying file: {e}")
        return False, None, f"OS error: {e}"


def has_extension(file_path: str, extension: str) -> bool:
    """
    Check a file's extension, ignoring case.
    
    Args:
        file_path: Path to the file
        extension: Extension with or without the leading dot
        
    Returns:
        True if the file carries the extension
    """
    wanted = extension.lower()
    if not wanted.startswith('.'):
        wanted = f".{wanted}"
    return Path(file_path).suffix.lower() == wanted
