# PackageNameResolver.py
"""
Package name resolution.

The package name selects the prebuilt application folder under the app root
and names the output .msix file. Several providers can answer; the first
non-blank answer wins:

- ExplicitPackageName: configured by the user
- DirectoryScanPackageName: the single folder under the app root, or the one
  matching the project name
- ProjectNamePackageName: the project name itself (convention)
"""
import logging
from pathlib import Path
from typing import Optional, Sequence

from msixbuild.errors import ConfigurationError
from msixbuild.protocols import PackageNameProvider

logger = logging.getLogger(__name__)


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


class ExplicitPackageName:
    def __init__(self, package_name: Optional[str]):
        self._package_name = package_name

    def resolve_package_name(self) -> Optional[str]:
        return _non_blank(self._package_name)


class DirectoryScanPackageName:
    """Derives the package name from the folders present under the app root."""

    def __init__(self, app_root: Path, project_name: Optional[str] = None):
        self._app_root = app_root
        self._project_name = project_name

    def resolve_package_name(self) -> Optional[str]:
        if not self._app_root.is_dir():
            return None

        candidates = sorted(child.name for child in self._app_root.iterdir() if child.is_dir())

        if len(candidates) == 1:
            return candidates[0]

        if self._project_name:
            for name in candidates:
                if name.lower() == self._project_name.lower():
                    return name

        return None


class ProjectNamePackageName:
    def __init__(self, project_name: Optional[str]):
        self._project_name = project_name

    def resolve_package_name(self) -> Optional[str]:
        return _non_blank(self._project_name)


class ChainedPackageNameResolver:
    """Asks each provider in order and returns the first answer."""

    def __init__(self, providers: Sequence[PackageNameProvider]):
        self._providers = list(providers)

    def resolve_package_name(self) -> Optional[str]:
        for provider in self._providers:
            name = _non_blank(provider.resolve_package_name())
            if name is not None:
                logger.debug(f"Package name '{name}' from {type(provider).__name__}")
                return name
        return None


def require_package_name(provider: PackageNameProvider) -> str:
    """
    Resolves the package name or fails.

    Args:
        provider: Any package name provider, usually a ChainedPackageNameResolver

    Returns:
        Trimmed package name

    Raises:
        ConfigurationError: If the provider could not determine a name
    """
    name = _non_blank(provider.resolve_package_name())
    if name is None:
        raise ConfigurationError(
            "Unable to determine the package name. Set package_name in the build configuration."
        )
    return name
