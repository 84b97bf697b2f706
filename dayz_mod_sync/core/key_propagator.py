"""
Key Propagator

Copies mod signing keys from each mod's keys folder into the server's
shared key directory.

Author: DayZ Mod Sync Project
License: MIT
"""

from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass

from ..utils.logger import get_logger
from ..utils.file_ops import safe_copy_file, has_extension

logger = get_logger(__name__)


@dataclass
class KeyCopyResult:
    """Result of a key copy operation."""
    success: bool
    source_path: Path
    destination_path: Optional[Path] = None
    error_message: Optional[str] = None


class KeyPropagator:
    """
    Flattens key files from mod folders into one server key directory.
    
    Only files directly inside the mod's keys folder with the configured
    extension are copied. Existing keys of the same name are overwritten.
    """
    
    def __init__(
        self,
        key_dest_root: Path,
        key_extension: str = ".bikey",
        keys_dir_name: str = "keys"
    ):
        """
        Initialize key propagator.
        
        Args:
            key_dest_root: Shared server key directory
            key_extension: Extension recognized as a key file
            keys_dir_name: Name of the keys folder inside a mod
        """
        self.key_dest_root = Path(key_dest_root)
        self.key_extension = key_extension
        self.keys_dir_name = keys_dir_name
    
    def find_keys(self, mod_path: Path) -> List[Path]:
        """
        List key files shipped with a mod.
        
        Args:
            mod_path: Mod directory
        
        Returns:
            Key file paths, sorted by name
        """
        keys_dir = Path(mod_path) / self.keys_dir_name
        if not keys_dir.is_dir():
            return []
        
        try:
            return sorted(
                entry for entry in keys_dir.iterdir()
                if entry.is_file() and has_extension(entry.name, self.key_extension)
            )
        except OSError as e:
            logger.error(f"Cannot read keys folder {keys_dir}: {e}")
            return []
    
    def propagate(self, mod_path: Path) -> List[KeyCopyResult]:
        """
        Copy all keys of a mod into the shared key directory.
        
        Args:
            mod_path: Mod directory
        
        Returns:
            One KeyCopyResult per key file found
        """
        results = []
        
        for key_file in self.find_keys(mod_path):
            logger.info(f"Copying key: {key_file} to {self.key_dest_root / key_file.name}")
            success, dest_path, error = safe_copy_file(
                str(key_file),
                str(self.key_dest_root)
            )
            
            if not success:
                logger.error(f"Failed to copy key {key_file.name}: {error}")
            
            results.append(KeyCopyResult(
                success=success,
                source_path=key_file,
                destination_path=Path(dest_path) if dest_path else None,
                error_message=error
            ))
        
        return results
