# PackagingPipeline.py
"""
MSIX packaging pipeline.

Runs the packaging steps in a fixed order against one AppPackageLayout:

    Stage resources → Render manifest → [Index resources] → Pack → [Sign]

Steps that call Windows SDK tools are skipped on other hosts, so the pure
Python steps can still run in cross-platform CI. Every step replaces its
previous output instead of merging with it.
"""
import logging
from pathlib import Path
from typing import Optional

from msixbuild.CommandRunner import SubprocessRunner, format_command
from msixbuild.HostPlatform import HostPlatform
from msixbuild.IconRenderer import render_icons, verify_icons
from msixbuild.PackageNameResolver import (
    ChainedPackageNameResolver,
    DirectoryScanPackageName,
    ExplicitPackageName,
    ProjectNamePackageName,
    require_package_name,
)
from msixbuild.PackagingConfig import MsixConfig
from msixbuild.ResourceIndexer import ResourceIndexer
from msixbuild.SigningCredentialResolver import ENV_SIGN_PFX_BASE64, SigningCredentialResolver
from msixbuild.TemplateRenderer import write_manifest
from msixbuild.ToolLocator import MAKEAPPX, MAKEPRI, SIGNTOOL, ToolLocator
from msixbuild.errors import AppDirectoryNotFoundError, MsixBuildError
from msixbuild.protocols import PackageNameProvider, PlatformProbe, ToolRunner
from msixbuild.types import AppPackageLayout, PackagingResult, SigningCredential, ToolSpec

logger = logging.getLogger(__name__)


def default_package_name_provider(config: MsixConfig) -> ChainedPackageNameResolver:
    """Explicit name first, then the app root folders, then the project name."""
    return ChainedPackageNameResolver([
        ExplicitPackageName(config.package_name),
        DirectoryScanPackageName(config.app_root, config.project_name),
        ProjectNamePackageName(config.project_name),
    ])


class PackagingPipeline:
    """
    Packages a prebuilt application directory into an optionally signed MSIX.

    Collaborators are injected so the pipeline can be exercised without the
    Windows SDK: the platform probe gates native steps, the runner executes
    tools, the locator finds them.
    """

    def __init__(
        self,
        config: MsixConfig,
        package_name_provider: Optional[PackageNameProvider] = None,
        platform: Optional[PlatformProbe] = None,
        runner: Optional[ToolRunner] = None,
        locator: Optional[ToolLocator] = None,
        environ=None,
    ):
        self._config = config
        self._package_name_provider = package_name_provider or default_package_name_provider(config)
        self._platform = platform or HostPlatform()
        self._runner = runner or SubprocessRunner(timeout=config.tool_timeout)
        self._locator = locator or ToolLocator(environ=environ, kits_root=config.windows_kits_root)
        self._environ = environ
        self._layout: Optional[AppPackageLayout] = None

    @property
    def layout(self) -> AppPackageLayout:
        """Paths of this run, derived once from the resolved package name."""
        if self._layout is None:
            package_name = require_package_name(self._package_name_provider)
            self._layout = AppPackageLayout.from_package_name(
                package_name, self._config.app_root, self._config.build_dir
            )
        return self._layout

    def run(self) -> PackagingResult:
        """
        Runs every packaging step.

        Returns:
            PackagingResult describing what was produced

        Raises:
            MsixBuildError: On the first failing step
        """
        layout = self.layout
        logger.info(f"Packaging {layout.package_name} from {layout.app_directory}")

        if not self._platform.is_target_platform() and not layout.app_directory.is_dir():
            logger.warning(
                f"MSIX app directory not found at {layout.app_directory}. "
                f"Skipping MSIX packaging on non-Windows host."
            )
            return PackagingResult(layout=layout, packaged=False, signed=False)

        self.check_app_directory()
        self.stage_resources()
        self.render_manifest()

        if not self._platform.is_target_platform():
            logger.info("Skipping MSIX packaging on non-Windows host.")
            return PackagingResult(layout=layout, packaged=False, signed=False)

        if self._config.resource_index:
            self.index_resources()

        self.pack()
        signed = self.sign()

        return PackagingResult(layout=layout, packaged=True, signed=signed)

    def check_app_directory(self) -> None:
        app_dir = self.layout.app_directory
        if not app_dir.is_dir():
            raise AppDirectoryNotFoundError(f"MSIX app directory not found at {app_dir}")

    def stage_resources(self) -> None:
        """Renders the icon set into the resources directory."""
        if self._config.icon is None:
            logger.info("No icon source configured, keeping existing resources.")
            return

        resources_dir = self.layout.resources_directory
        render_icons(self._config.icon, resources_dir)

        if not verify_icons(resources_dir):
            raise MsixBuildError(f"Rendered icons in {resources_dir} failed verification")

    def render_manifest(self) -> Path:
        manifest = self._config.manifest
        manifest.validate()
        return write_manifest(self.layout.manifest_file, manifest.to_context(), manifest.template_file)

    def index_resources(self) -> Optional[Path]:
        if not self._platform.is_target_platform():
            logger.info("Skipping PRI generation on non-Windows host.")
            return None

        self.check_app_directory()
        makepri = self._locator.require(ToolSpec(MAKEPRI, self._config.architecture))
        return ResourceIndexer(makepri, self._runner).build(self.layout)

    def pack(self) -> Optional[Path]:
        """
        Packs the app directory with makeappx.exe.

        Returns:
            Path to the package, or None when skipped on a non-Windows host
        """
        if not self._platform.is_target_platform():
            logger.info("Skipping MSIX packaging on non-Windows host.")
            return None

        layout = self.layout
        self.check_app_directory()

        makeappx = self._locator.require(ToolSpec(MAKEAPPX, self._config.architecture))
        logger.info(f"Using makeappx.exe at {makeappx}")

        target = layout.output_package_file
        target.parent.mkdir(parents=True, exist_ok=True)

        if target.exists():
            logger.info(f"Removing existing MSIX output before packaging: {target}")
            try:
                target.unlink()
            except OSError as e:
                raise MsixBuildError(f"Unable to delete existing MSIX output at {target}: {e}") from e

        command = [str(makeappx), "pack", "/d", str(layout.app_directory), "/p", str(target), "/o"]

        logger.info(f"Packaging MSIX from {layout.app_directory} into {target}")
        logger.info(f"Running: {format_command(command)}")
        self._runner.run(command, cwd=makeappx.parent)

        logger.info(f"MSIX package created at {target}")
        return target

    def sign(self) -> bool:
        """
        Signs the package if a credential is available.

        Returns:
            True if the package was signed
        """
        if not self._platform.is_target_platform():
            logger.info("Skipping MSIX signing on non-Windows host.")
            return False

        credential = self._credential_resolver().resolve()

        if credential is None:
            logger.info(
                f"Skipping MSIX signing because no PFX file was configured and {ENV_SIGN_PFX_BASE64} is not set."
            )
            return False

        try:
            self._sign_with(credential)
        finally:
            credential.discard()

        return True

    def _credential_resolver(self) -> SigningCredentialResolver:
        return SigningCredentialResolver(
            temp_dir=self.layout.temp_directory,
            pfx_file=self._config.signing.pfx,
            password=self._config.signing.password,
            environ=self._environ,
        )

    def _sign_with(self, credential: SigningCredential) -> None:
        signtool = self._locator.require(ToolSpec(SIGNTOOL, self._config.architecture))
        target = self.layout.output_package_file

        logger.info(f"Using signtool.exe at {signtool}")

        command = [
            str(signtool),
            "sign",
            "/fd", "SHA256",
            "/f", str(credential.pfx_path),
            "/p", credential.password,
            str(target),
        ]

        logger.info(f"Signing MSIX package with {credential.pfx_path}")
        logger.info(f"Running: {format_command(command, secrets=[credential.password])}")
        self._runner.run(command, cwd=signtool.parent)

        logger.info(f"Signed MSIX package at {target}")
