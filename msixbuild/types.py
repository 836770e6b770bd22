"""Type definitions shared by the MSIX packaging steps."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

# Placeholder name -> substitution value
ManifestContext = Dict[str, str]

# Fixed icon sizes; the default manifest template references these files
ICON_SIZES: Tuple[int, ...] = (44, 50, 150)

MANIFEST_PLACEHOLDERS: Tuple[str, ...] = (
    "identityName",
    "publisher",
    "version",
    "processorArchitecture",
    "displayName",
    "publisherDisplayName",
    "description",
    "backgroundColor",
    "appExecutable",
    "appId",
    "targetDeviceFamilyName",
    "targetDeviceFamilyMinVersion",
    "targetDeviceFamilyMaxVersionTested",
)


def icon_file_name(size: int) -> str:
    return f"icon_{size}.png"


@dataclass(frozen=True)
class ToolSpec:
    """A Windows SDK binary requested for one target architecture."""
    tool_name: str
    architecture: str


@dataclass(frozen=True)
class VersionedDirectory:
    """SDK bin subdirectory named after a dotted version, e.g. 10.0.22621.0."""
    path: Path
    version_components: Tuple[int, ...]


@dataclass(frozen=True)
class SigningCredential:
    """
    PFX material handed to signtool.exe.

    The password is excluded from repr so the credential can be logged or
    shown in tracebacks without leaking it. Temporary credentials were
    materialized from an environment secret and must be discarded after use.
    """
    pfx_path: Path
    password: str = field(repr=False)
    is_temporary: bool = False

    def discard(self) -> None:
        """Deletes the PFX file if it was materialized for this run only."""
        if not self.is_temporary:
            return

        try:
            self.pfx_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Unable to delete temporary PFX file at {self.pfx_path}: {e}")


@dataclass(frozen=True)
class AppPackageLayout:
    """Immutable set of filesystem paths used by one packaging run."""
    package_name: str
    app_directory: Path
    resources_directory: Path
    manifest_file: Path
    output_package_file: Path
    pri_file: Path
    pri_config_file: Path
    temp_directory: Path

    @classmethod
    def from_package_name(cls, package_name: str, app_root: Path, build_dir: Path) -> "AppPackageLayout":
        """
        Derives every path of the run from the resolved package name.

        Args:
            package_name: Name of the prebuilt application folder
            app_root: Directory holding the prebuilt application folders
            build_dir: Build output directory

        Returns:
            AppPackageLayout for this package
        """
        app_directory = app_root / package_name
        temp_directory = build_dir / "tmp" / "msix"

        return cls(
            package_name=package_name,
            app_directory=app_directory,
            resources_directory=app_directory / "resources",
            manifest_file=app_directory / "AppxManifest.xml",
            output_package_file=build_dir / f"{package_name}.msix",
            pri_file=app_directory / "resources.pri",
            pri_config_file=temp_directory / "priconfig.xml",
            temp_directory=temp_directory,
        )


@dataclass(frozen=True)
class PackagingResult:
    """Outcome of a packaging run."""
    layout: AppPackageLayout
    packaged: bool
    signed: bool
