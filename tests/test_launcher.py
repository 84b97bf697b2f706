"""
Unit Tests for the Server Launcher

Tests mod discovery on the server, mod parameter generation, and process
launch handling.

Author: DayZ Mod Sync Project
License: MIT
"""

import pytest
from unittest.mock import Mock, patch

from dayz_mod_sync.core.launcher import ServerLauncher


class TestModListing:
    """Test suite for installed mod discovery."""
    
    def test_lists_marked_directories(self, workspace, make_config):
        """Test only directories with the mod marker are listed."""
        source, dest = workspace
        for name in ["@CF", "@Community Online Tools", "keys", "battleye", "!Z"]:
            (dest / name).mkdir()
        (dest / "@NotADir").write_text("file")
        
        mods = ServerLauncher(make_config()).list_installed_mods()
        
        assert mods == ["@CF", "@Community Online Tools"]
    
    def test_missing_dest_returns_empty(self, tmp_path, make_config):
        """Test an unreadable server folder yields no mods."""
        config = make_config(paths={"dest_root": str(tmp_path / "missing")})
        
        assert ServerLauncher(config).list_installed_mods() == []


class TestCommandBuilding:
    """Test suite for command construction."""
    
    def test_mod_parameter(self, make_config):
        """Test names are joined and spaces replaced."""
        launcher = ServerLauncher(make_config())
        
        param = launcher.build_mod_parameter(["@CF", "@Community Online Tools", "@Dabs Framework"])
        
        assert param == "-mod=@CF;@Community_Online_Tools;@Dabs_Framework"
    
    def test_empty_mod_parameter(self, make_config):
        """Test no mods gives a bare flag."""
        assert ServerLauncher(make_config()).build_mod_parameter([]) == "-mod="
    
    def test_build_command(self, workspace, make_config, tmp_path):
        """Test the full command line layout."""
        source, dest = workspace
        (dest / "@CF").mkdir()
        (dest / "@VPPAdminTools").mkdir()
        
        command = ServerLauncher(make_config()).build_command()
        
        assert command == [
            str(tmp_path / "DayZServer_x64.exe"),
            "-config=serverDZ.cfg",
            "-port=2302",
            "-mod=@CF;@VPPAdminTools"
        ]
    
    def test_custom_launch_settings(self, make_config):
        """Test configured flags and separators are used."""
        config = make_config(launch={
            "base_args": ["-config=custom.cfg", "-port=2402", "-dologs"],
            "separator": ",",
            "space_replacement": "-"
        })
        
        command = ServerLauncher(config).build_command(["@A B", "@C"])
        
        assert command[1:] == ["-config=custom.cfg", "-port=2402", "-dologs", "-mod=@A-B,@C"]
    
    def test_missing_executable(self, make_config):
        """Test building without an executable fails."""
        config = make_config(paths={"executable": None})
        
        with pytest.raises(ValueError):
            ServerLauncher(config).build_command([])


class TestLaunch:
    """Test suite for starting the server process."""
    
    def test_launch_success(self, workspace, make_config):
        """Test the command is run and its exit code reported."""
        source, dest = workspace
        (dest / "@CF").mkdir()
        launcher = ServerLauncher(make_config())
        
        with patch("dayz_mod_sync.core.launcher.subprocess.run", return_value=Mock(returncode=0)) as run:
            result = launcher.launch()
        
        assert result.success is True
        assert result.exit_code == 0
        run.assert_called_once_with(result.command, check=False)
        assert result.command[-1] == "-mod=@CF"
    
    def test_launch_nonzero_exit(self, make_config):
        """Test a failing server exit code is reported."""
        with patch("dayz_mod_sync.core.launcher.subprocess.run", return_value=Mock(returncode=3)):
            result = ServerLauncher(make_config()).launch()
        
        assert result.success is False
        assert result.exit_code == 3
    
    def test_executable_not_found(self, make_config):
        """Test a missing executable is reported, not raised."""
        with patch("dayz_mod_sync.core.launcher.subprocess.run", side_effect=FileNotFoundError()):
            result = ServerLauncher(make_config()).launch()
        
        assert result.success is False
        assert "not found" in result.error_message
    
    def test_unconfigured_executable(self, make_config):
        """Test launch without executable never spawns a process."""
        config = make_config(paths={"executable": None})
        
        with patch("dayz_mod_sync.core.launcher.subprocess.run") as run:
            result = ServerLauncher(config).launch()
        
        assert result.success is False
        run.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
