# tests/conftest.py
import pytest
from pathlib import Path
from typing import List, Optional, Sequence

from msixbuild.PackagingConfig import ManifestConfig, MsixConfig
from msixbuild.errors import ToolExecutionError


class FakePlatform:
    """Platform probe with a fixed answer."""

    def __init__(self, windows: bool = True):
        self.windows = windows

    def is_target_platform(self) -> bool:
        return self.windows


class RecordingRunner:
    """Tool runner that records commands instead of executing them.

    Mimics makeappx.exe by creating the /p output file on 'pack'. A tool
    name in fail_on makes the matching invocation raise ToolExecutionError.
    """

    def __init__(self, fail_on: Optional[str] = None):
        self.commands: List[List[str]] = []
        self.cwds: List[Optional[Path]] = []
        self.fail_on = fail_on

    def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> None:
        command = [str(arg) for arg in command]
        self.commands.append(command)
        self.cwds.append(cwd)

        tool_name = Path(command[0]).name
        if self.fail_on == tool_name:
            raise ToolExecutionError(f"{tool_name} failed (exit code 1):\nboom", returncode=1, stderr="boom")

        if len(command) > 1 and command[1] == "pack":
            output = Path(command[command.index("/p") + 1])
            output.write_bytes(b"MSIX")

    def tool_names(self) -> List[str]:
        return [Path(command[0]).name for command in self.commands]


def make_file(path: Path, content: bytes = b"") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def kits_root(tmp_path):
    """Windows Kits 10 root with makeappx, signtool and makepri for x64."""
    root = tmp_path / "Windows Kits" / "10"
    for tool in ("makeappx.exe", "signtool.exe", "makepri.exe"):
        make_file(root / "bin" / "10.0.22621.0" / "x64" / tool)
    return root


@pytest.fixture
def manifest_config():
    return ManifestConfig(
        identity_name="StefanOltmann.MinesforWindowsPlus",
        publisher="CN=1A06AF6C-2943-4BE6-BB85-12677BA3F28D",
        version="1.2.3.0",
        display_name="Mines+",
        publisher_display_name="Stefan Oltmann",
        description="Solvable Minesweeper",
        app_executable="Mines.exe",
    )


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "mines"
    project.mkdir()
    return project


@pytest.fixture
def msix_config(project_dir, manifest_config, kits_root):
    """Config for a project whose prebuilt app folder 'Mines' exists."""
    config = MsixConfig(
        project_dir=project_dir,
        manifest=manifest_config,
        package_name="Mines",
        windows_kits_root=kits_root,
    )
    app_dir = config.app_root / "Mines"
    make_file(app_dir / "Mines.exe", b"MZ")
    return config


@pytest.fixture
def runner():
    return RecordingRunner()
