# ResourceIndexer.py
"""
resources.pri generation with makepri.exe.

Two invocations are needed: createconfig writes the indexer configuration,
then new indexes the staged app directory into resources.pri.
"""
import logging
from pathlib import Path

from msixbuild.CommandRunner import format_command
from msixbuild.errors import ConfigurationError
from msixbuild.protocols import ToolRunner
from msixbuild.types import AppPackageLayout

logger = logging.getLogger(__name__)

RESOURCE_LANGUAGE = "en-us"


def _remove_stale(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.unlink()


class ResourceIndexer:
    """Builds resources.pri for a staged app directory."""

    def __init__(self, makepri: Path, runner: ToolRunner):
        self._makepri = makepri
        self._runner = runner

    def build(self, layout: AppPackageLayout) -> Path:
        """
        Indexes resources of the app directory.

        Args:
            layout: Paths of the current packaging run

        Returns:
            Path to resources.pri

        Raises:
            ConfigurationError: If the manifest has not been rendered yet
            ToolExecutionError: If makepri.exe fails
        """
        if not layout.manifest_file.is_file():
            raise ConfigurationError(f"AppxManifest.xml not found at {layout.manifest_file}")

        _remove_stale(layout.pri_config_file)

        logger.info(f"Using makepri.exe at {self._makepri}")
        logger.info(f"Generating PRI config at {layout.pri_config_file}")
        self._invoke([
            "createconfig",
            "/cf", str(layout.pri_config_file),
            "/dq", RESOURCE_LANGUAGE,
        ])

        _remove_stale(layout.pri_file)

        logger.info(f"Creating resources.pri at {layout.pri_file}")
        self._invoke([
            "new",
            "/pr", str(layout.app_directory),
            "/cf", str(layout.pri_config_file),
            "/of", str(layout.pri_file),
        ])

        logger.info(f"Generated resources.pri at {layout.pri_file}")
        return layout.pri_file

    def _invoke(self, arguments: list) -> None:
        command = [str(self._makepri), *arguments]
        logger.info(f"Running: {format_command(command)}")
        self._runner.run(command, cwd=self._makepri.parent)
