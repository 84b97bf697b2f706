"""
Unit Tests for File Operations

Tests file counting, timestamp comparison, tree copies, and utility functions.

Author: DayZ Mod Sync Project
License: MIT
"""

import shutil
import pytest
from pathlib import Path
from unittest.mock import patch

from dayz_mod_sync.utils.file_ops import (
    count_files,
    is_newer,
    find_stale_files,
    copy_tree,
    copy_files,
    safe_copy_file,
    has_extension
)
from conftest import make_mod, set_mtime, tree_files, OLD, NEW


class TestCountFiles:
    """Test suite for recursive file counting."""
    
    def test_counts_nested_files(self, tmp_path):
        """Test files in nested folders are all counted."""
        make_mod(tmp_path, "@CF", {
            "mod.cpp": "name",
            "addons/cf.pbo": "data",
            "addons/cf.pbo.cf.bisign": "sig",
            "keys/cf.bikey": "key"
        })
        
        assert count_files(str(tmp_path / "@CF")) == 4
    
    def test_directories_are_not_counted(self, tmp_path):
        """Test empty directories contribute nothing."""
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        
        assert count_files(str(tmp_path / "a")) == 0
    
    def test_missing_directory_counts_zero(self, tmp_path):
        """Test a vanished directory is reported, not raised."""
        assert count_files(str(tmp_path / "gone")) == 0


class TestIsNewer:
    """Test suite for timestamp comparison."""
    
    def test_strictly_newer(self, tmp_path):
        """Test a later timestamp is newer."""
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()
        set_mtime(a, NEW)
        set_mtime(b, OLD)
        
        assert is_newer(str(a), str(b)) is True
        assert is_newer(str(b), str(a)) is False
    
    def test_equal_timestamps_are_not_newer(self, tmp_path):
        """Test equal timestamps do not count as newer."""
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        b.mkdir()
        set_mtime(a, OLD)
        set_mtime(b, OLD)
        
        assert is_newer(str(a), str(b)) is False
    
    def test_missing_path_raises(self, tmp_path):
        """Test stat errors propagate to the caller."""
        with pytest.raises(OSError):
            is_newer(str(tmp_path / "missing"), str(tmp_path))


class TestFindStaleFiles:
    """Test suite for per-file staleness."""
    
    def test_missing_and_newer_files_are_stale(self, tmp_path):
        """Test only missing or newer source files are returned."""
        source = make_mod(tmp_path / "src", "@Mod", {
            "same.txt": "same",
            "changed.txt": "v2",
            "new/added.txt": "new"
        })
        dest = make_mod(tmp_path / "dst", "@Mod", {
            "same.txt": "same",
            "changed.txt": "v1"
        })
        set_mtime(source / "same.txt", OLD)
        set_mtime(dest / "same.txt", OLD)
        set_mtime(source / "changed.txt", NEW)
        set_mtime(dest / "changed.txt", OLD)
        
        stale = find_stale_files(str(source), str(dest))
        
        assert sorted(stale) == [Path("changed.txt"), Path("new/added.txt")]


class TestCopyTree:
    """Test suite for recursive copies."""
    
    def test_fresh_copy_is_identical(self, tmp_path):
        """Test a copy into a new destination reproduces the tree."""
        source = make_mod(tmp_path, "@CF", {
            "mod.cpp": "name",
            "addons/cf.pbo": "data",
            "keys/cf.bikey": "key"
        })
        dest = tmp_path / "server" / "@CF"
        
        success, copied, error = copy_tree(str(source), str(dest))
        
        assert success is True
        assert copied == 3
        assert error is None
        assert tree_files(dest) == tree_files(source)
    
    def test_overwrites_existing_files(self, tmp_path):
        """Test existing destination files are replaced."""
        source = make_mod(tmp_path / "src", "@CF", {"addons/cf.pbo": "new"})
        dest = make_mod(tmp_path / "dst", "@CF", {"addons/cf.pbo": "old", "extra.txt": "kept"})
        
        success, copied, error = copy_tree(str(source), str(dest))
        
        assert success is True
        assert (dest / "addons" / "cf.pbo").read_text() == "new"
        assert (dest / "extra.txt").read_text() == "kept"
    
    def test_preserves_directory_timestamp(self, tmp_path):
        """Test the copied folder carries the source timestamp."""
        source = make_mod(tmp_path, "@CF", {"mod.cpp": "x"}, mtime=OLD)
        dest = tmp_path / "server" / "@CF"
        
        copy_tree(str(source), str(dest))
        
        assert is_newer(str(source), str(dest)) is False
    
    def test_copy_errors_are_returned(self, tmp_path):
        """Test per-file copy failures are reported in the result."""
        source = make_mod(tmp_path, "@CF", {"a.txt": "a"})
        failure = shutil.Error([(str(source / "a.txt"), str(tmp_path / "x"), "disk full")])
        
        with patch("dayz_mod_sync.utils.file_ops.shutil.copytree", side_effect=failure):
            success, copied, error = copy_tree(str(source), str(tmp_path / "out"))
        
        assert success is False
        assert "failed to copy" in error
    
    def test_missing_source_fails(self, tmp_path):
        """Test a missing source directory fails gracefully."""
        success, copied, error = copy_tree(str(tmp_path / "nope"), str(tmp_path / "out"))
        
        assert success is False
        assert copied == 0
        assert error is not None


class TestCopyFiles:
    """Test suite for selective copies."""
    
    def test_copies_only_listed_files(self, tmp_path):
        """Test unlisted files are left alone."""
        source = make_mod(tmp_path / "src", "@Mod", {"a.txt": "a", "sub/b.txt": "b"})
        dest = tmp_path / "dst" / "@Mod"
        
        success, copied, error = copy_files(str(source), str(dest), [Path("sub/b.txt")])
        
        assert success is True
        assert copied == 1
        assert (dest / "sub" / "b.txt").read_text() == "b"
        assert not (dest / "a.txt").exists()


class TestSafeCopyFile:
    """Test suite for single file copies."""
    
    def test_copy_creates_directory(self, tmp_path):
        """Test the destination directory is created."""
        source = tmp_path / "cf.bikey"
        source.write_text("key")
        
        success, dest_path, error = safe_copy_file(str(source), str(tmp_path / "keys"))
        
        assert success is True
        assert Path(dest_path).read_text() == "key"
    
    def test_overwrites_existing_file(self, tmp_path):
        """Test an existing file of the same name is replaced."""
        (tmp_path / "keys").mkdir()
        (tmp_path / "keys" / "cf.bikey").write_text("old")
        source = tmp_path / "cf.bikey"
        source.write_text("new")
        
        success, dest_path, error = safe_copy_file(str(source), str(tmp_path / "keys"))
        
        assert success is True
        assert (tmp_path / "keys" / "cf.bikey").read_text() == "new"
    
    def test_source_must_be_file(self, tmp_path):
        """Test directories are rejected as sources."""
        success, dest_path, error = safe_copy_file(str(tmp_path), str(tmp_path / "keys"))
        
        assert success is False
        assert "not a file" in error


class TestUtilityFunctions:
    """Test suite for utility functions."""
    
    def test_has_extension_ignores_case(self):
        """Test extension matching is case-insensitive."""
        assert has_extension("cf.bikey", ".bikey") is True
        assert has_extension("CF.BIKEY", ".bikey") is True
        assert has_extension("cf.bikey", "bikey") is True
        assert has_extension("cf.bisign", ".bikey") is False
        assert has_extension("bikey", ".bikey") is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
