"""Protocol definitions for the collaborators of the packaging pipeline.

This module defines structural interfaces using Python's Protocol for duck typing.
Tests substitute fakes for the runner and the platform probe without
inheriting from anything.
"""

from pathlib import Path
from typing import Optional, Protocol, Sequence


class PackageNameProvider(Protocol):
    """Supplies the name of the prebuilt application folder.

    Implementations return None when they have no opinion, so several
    providers can be chained (explicit config, directory scan, convention).
    """

    def resolve_package_name(self) -> Optional[str]:
        ...


class PlatformProbe(Protocol):
    """Answers whether the native Windows tools can run on this host."""

    def is_target_platform(self) -> bool:
        ...


class ToolRunner(Protocol):
    """Runs an external tool to completion.

    Implementations raise ToolExecutionError on a non-zero exit code.
    """

    def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> None:
        """Run command and block until it exits.

        Args:
            command: Executable path followed by its arguments
            cwd: Working directory for the tool
        """
        ...
