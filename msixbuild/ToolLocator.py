"""
Windows SDK tool discovery.

Locates makeappx.exe, signtool.exe and makepri.exe without a registry lookup.
The Windows Kits layout is scanned for the requested architecture:

    C:\\Program Files (x86)\\Windows Kits\\10\\
    └── bin\\
        ├── x64\\makeappx.exe            # Version-less install (checked first)
        ├── 10.0.19041.0\\x64\\makeappx.exe
        └── 10.0.22621.0\\x64\\makeappx.exe   # Newest version wins
"""
import functools
import logging
import os
import re
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from msixbuild.errors import ToolNotFoundError
from msixbuild.types import ToolSpec, VersionedDirectory

logger = logging.getLogger(__name__)

MAKEAPPX = "makeappx.exe"
SIGNTOOL = "signtool.exe"
MAKEPRI = "makepri.exe"

# 64-bit view first, then the native Program Files
PROGRAM_FILES_VARIABLES = ("ProgramFiles(x86)", "ProgramFiles")
KITS_SUBPATHS = (Path("Windows Kits") / "10", Path("Windows Kits") / "11")

VERSION_PATTERN = re.compile(r"\d+(\.\d+){3}")

WINDOWS_SDK_INSTALL_INSTRUCTIONS = (
    "Download the Windows SDK from https://learn.microsoft.com/windows/apps/windows-sdk/downloads\n"
    "Then run: winsdksetup.exe /features OptionId.DesktopCPPx64 /quiet /norestart\n"
    "Confirm the UAC dialog and wait a minute while the installation takes place; then try again."
)


def parse_version(name: str) -> Tuple[int, ...]:
    """
    Parses a dotted version string into numeric components.

    Non-numeric components are skipped, so "10.0.x.1" parses as (10, 0, 1).

    Args:
        name: Directory name such as "10.0.22621.0"

    Returns:
        Tuple of integer components
    """
    return tuple(int(part) for part in name.split(".") if part.isdigit())


def compare_versions(left: Sequence[int], right: Sequence[int]) -> int:
    """
    Compares two version sequences component by component.

    Absent trailing components are treated as zero, so (10, 0) == (10, 0, 0, 0).

    Returns:
        Negative if left < right, zero if equal, positive if left > right
    """
    for index in range(max(len(left), len(right))):
        left_value = left[index] if index < len(left) else 0
        right_value = right[index] if index < len(right) else 0

        if left_value != right_value:
            return -1 if left_value < right_value else 1

    return 0


def _compare_directories(left: VersionedDirectory, right: VersionedDirectory) -> int:
    result = compare_versions(left.version_components, right.version_components)
    if result != 0:
        return result

    # Equal versions: fall back to the directory name so the choice is stable
    if left.path.name == right.path.name:
        return 0
    return -1 if left.path.name < right.path.name else 1


class ToolLocator:
    """
    Finds Windows SDK binaries for a target architecture.

    Absence is never an exception in locate(); callers that cannot continue
    without the tool use require() instead.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None, kits_root: Optional[Path] = None):
        """
        Args:
            environ: Environment used to find Program Files (defaults to os.environ)
            kits_root: Explicit Windows Kits root, skips the Program Files search
        """
        self._environ = os.environ if environ is None else environ
        self._kits_root = kits_root

    def find_kits_root(self) -> Optional[Path]:
        """Returns the first existing Windows Kits installation folder."""
        if self._kits_root is not None:
            return self._kits_root if self._kits_root.is_dir() else None

        for variable in PROGRAM_FILES_VARIABLES:
            program_files = self._environ.get(variable)
            if not program_files:
                continue

            for subpath in KITS_SUBPATHS:
                candidate = Path(program_files) / subpath
                if candidate.is_dir():
                    return candidate

        return None

    def find_version_directories(self, bin_dir: Path) -> List[VersionedDirectory]:
        """Lists bin subfolders named after a four-part SDK version."""
        if not bin_dir.is_dir():
            return []

        return [
            VersionedDirectory(path=child, version_components=parse_version(child.name))
            for child in bin_dir.iterdir()
            if child.is_dir() and VERSION_PATTERN.fullmatch(child.name)
        ]

    def locate(self, spec: ToolSpec) -> Optional[Path]:
        """
        Locates a tool, preferring the newest installed SDK version.

        Args:
            spec: Tool name and target architecture

        Returns:
            Absolute path to the tool, or None when it is not installed
        """
        kits_root = self.find_kits_root()
        if kits_root is None:
            logger.debug("Windows Kits root not found")
            return None

        bin_dir = kits_root / "bin"

        direct_candidate = bin_dir / spec.architecture / spec.tool_name
        if direct_candidate.is_file():
            return direct_candidate.absolute()

        version_dirs = sorted(
            self.find_version_directories(bin_dir),
            key=functools.cmp_to_key(_compare_directories),
            reverse=True,
        )

        for version_dir in version_dirs:
            candidate = version_dir.path / spec.architecture / spec.tool_name
            if candidate.is_file():
                return candidate.absolute()

        logger.debug(f"{spec.tool_name} not found for {spec.architecture} under {bin_dir}")
        return None

    def require(self, spec: ToolSpec) -> Path:
        """
        Locates a tool or fails with installation instructions.

        Raises:
            ToolNotFoundError: If the tool is not installed
        """
        tool = self.locate(spec)
        if tool is None:
            raise ToolNotFoundError(f"{spec.tool_name} not found.\n{WINDOWS_SDK_INSTALL_INSTRUCTIONS}")
        return tool

