"""
Shared fixtures for DayZ Mod Sync tests.

Author: DayZ Mod Sync Project
License: MIT
"""

import os
import logging
import pytest
from pathlib import Path

from dayz_mod_sync.config.schema import Config
from dayz_mod_sync.utils.logger import LOGGER_NAME

OLD = 1_600_000_000
NEW = 1_700_000_000


def set_mtime(path: Path, timestamp: float):
    """Set access and modification time of a path."""
    os.utime(path, (timestamp, timestamp))


def make_mod(root: Path, name: str, files: dict, mtime: float = None) -> Path:
    """
    Create a mod folder with the given relative files.
    
    Args:
        root: Parent directory
        name: Mod folder name
        files: relative path -> text content
        mtime: Timestamp applied to the mod folder after the files are written
    """
    mod = root / name
    mod.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        file_path = mod / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
    if mtime is not None:
        set_mtime(mod, mtime)
    return mod


def tree_files(root: Path) -> dict:
    """Map relative file paths to their content."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob('*')) if p.is_file()
    }


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MODSYNC_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("MODSYNC_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handlers installed by setup_logging."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


@pytest.fixture
def workspace(tmp_path):
    """Client workshop folder and server folder."""
    source = tmp_path / "workshop"
    dest = tmp_path / "server"
    source.mkdir()
    dest.mkdir()
    return source, dest


@pytest.fixture
def make_config(workspace, tmp_path):
    """Factory for configs pointing at the workspace."""
    source, dest = workspace
    
    def _make(**sections):
        data = {
            "paths": {
                "source_root": str(source),
                "dest_root": str(dest),
                "executable": str(tmp_path / "DayZServer_x64.exe"),
            }
        }
        for section, values in sections.items():
            data.setdefault(section, {}).update(values)
        return Config(**data)
    
    return _make
