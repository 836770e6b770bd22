# PackagingConfig.py
"""
Build configuration for MSIX packaging.

Loaded from a JSON file (msix_config.json by convention):

    {
        "package_name": "Mines",
        "icon": "packaging/msix/resources/AppIcon.png",
        "signing": {"pfx": "packaging/msix/sign.pfx"},
        "manifest": {
            "identity_name": "StefanOltmann.MinesforWindowsPlus",
            "publisher": "CN=1A06AF6C-2943-4BE6-BB85-12677BA3F28D",
            "version": "1.2.3.0",
            "display_name": "Mines+",
            "publisher_display_name": "Stefan Oltmann",
            "description": "Solvable Minesweeper",
            "app_executable": "Mines.exe"
        }
    }

Relative paths are resolved against project_dir, which defaults to the
directory containing the configuration file.
"""
import json
import re
from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional
from xml.sax.saxutils import escape

from msixbuild.errors import ConfigurationError, ManifestConfigurationError
from msixbuild.types import ManifestContext

DEFAULT_CONFIG_NAME = "msix_config.json"
DEFAULT_BUILD_DIR = "build"
# Compose Desktop release layout
DEFAULT_APP_ROOT = Path("compose") / "binaries" / "main-release" / "app"

MSIX_VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+\.\d+")

# Attribute values are wrapped in double quotes in the template
_XML_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


@dataclass
class ManifestConfig:
    """Metadata rendered into AppxManifest.xml."""
    identity_name: str
    publisher: str
    version: str
    display_name: str
    publisher_display_name: str
    description: str
    app_executable: str
    processor_architecture: str = "x64"
    background_color: str = "transparent"
    app_id: str = "App"
    target_device_family_name: str = "Windows.Desktop"
    target_device_family_min_version: str = "10.0.17763.0"
    target_device_family_max_version_tested: str = "10.0.22621.2861"
    template_file: Optional[Path] = None

    def validate(self) -> None:
        """
        Checks that every field is filled and the version has four parts.

        Raises:
            ManifestConfigurationError: On the first invalid field
        """
        for item in fields(self):
            if item.name == "template_file":
                continue
            value = getattr(self, item.name)
            if not isinstance(value, str) or not value.strip():
                raise ManifestConfigurationError(f"Manifest value '{item.name}' is missing or blank")

        if not MSIX_VERSION_PATTERN.fullmatch(self.version):
            raise ManifestConfigurationError(
                f"Manifest version '{self.version}' must have four numeric parts, e.g. 1.2.3.0"
            )

    def to_context(self) -> ManifestContext:
        """Maps the metadata onto the template placeholder names, XML-escaped."""
        values = {
            "identityName": self.identity_name,
            "publisher": self.publisher,
            "version": self.version,
            "processorArchitecture": self.processor_architecture,
            "displayName": self.display_name,
            "publisherDisplayName": self.publisher_display_name,
            "description": self.description,
            "backgroundColor": self.background_color,
            "appExecutable": self.app_executable,
            "appId": self.app_id,
            "targetDeviceFamilyName": self.target_device_family_name,
            "targetDeviceFamilyMinVersion": self.target_device_family_min_version,
            "targetDeviceFamilyMaxVersionTested": self.target_device_family_max_version_tested,
        }
        return {key: escape(value, _XML_ATTRIBUTE_ENTITIES) for key, value in values.items()}


@dataclass
class SigningSettings:
    """Explicit signing configuration; both values are optional."""
    pfx: Optional[Path] = None
    password: Optional[str] = field(default=None, repr=False)


@dataclass
class MsixConfig:
    """Complete configuration of one packaging run."""
    project_dir: Path
    manifest: ManifestConfig
    project_name: Optional[str] = None
    package_name: Optional[str] = None
    build_dir: Optional[Path] = None
    app_root: Optional[Path] = None
    icon: Optional[Path] = None
    resource_index: bool = False
    windows_kits_root: Optional[Path] = None
    tool_timeout: Optional[float] = None
    signing: SigningSettings = field(default_factory=SigningSettings)

    def __post_init__(self):
        if self.project_name is None:
            self.project_name = self.project_dir.name
        if self.build_dir is None:
            self.build_dir = self.project_dir / DEFAULT_BUILD_DIR
        if self.app_root is None:
            self.app_root = self.build_dir / DEFAULT_APP_ROOT

    @property
    def architecture(self) -> str:
        return self.manifest.processor_architecture


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.pop(key, None)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{key}' setting must be a JSON object")
    return dict(value)


def _optional_string(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigurationError(f"'{key}' setting must be a string")
    return value


def _resolve_path(project_dir: Path, data: Dict[str, Any], key: str) -> Optional[Path]:
    value = _optional_string(data, key)
    if value is None or not value.strip():
        return None
    path = Path(value)
    return path if path.is_absolute() else project_dir / path


def _known_keys(data: Dict[str, Any], cls, section: str) -> Dict[str, Any]:
    known = {item.name for item in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown {section} setting(s): {', '.join(unknown)}")
    return data


def _tool_timeout(data: Dict[str, Any]) -> Optional[float]:
    value = data.get("tool_timeout")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError("'tool_timeout' setting must be a positive number of seconds")
    return float(value)


def config_from_dict(data: Dict[str, Any], project_dir: Path) -> MsixConfig:
    """
    Builds MsixConfig from parsed JSON.

    Args:
        data: Parsed configuration document
        project_dir: Directory relative paths are resolved against

    Returns:
        MsixConfig with conventions applied

    Raises:
        ConfigurationError: On unknown keys, wrongly typed values or missing manifest values
    """
    data = dict(data)
    manifest_data = _section(data, "manifest")
    signing_data = _section(data, "signing")

    if "project_dir" in data:
        project_dir = _resolve_path(project_dir, data, "project_dir") or project_dir
        del data["project_dir"]

    _known_keys(data, MsixConfig, "build")
    _known_keys(manifest_data, ManifestConfig, "manifest")
    _known_keys(signing_data, SigningSettings, "signing")

    for key in manifest_data:
        _optional_string(manifest_data, key)

    manifest_data["template_file"] = _resolve_path(project_dir, manifest_data, "template_file")
    try:
        manifest = ManifestConfig(**manifest_data)
    except TypeError as e:
        required = [
            item.name for item in fields(ManifestConfig)
            if item.default is MISSING and item.name not in manifest_data
        ]
        raise ManifestConfigurationError(
            f"Missing manifest setting(s): {', '.join(required)}"
        ) from e

    signing = SigningSettings(
        pfx=_resolve_path(project_dir, signing_data, "pfx"),
        password=_optional_string(signing_data, "password"),
    )

    resource_index = data.get("resource_index", False)
    if not isinstance(resource_index, bool):
        raise ConfigurationError("'resource_index' setting must be true or false")

    return MsixConfig(
        project_dir=project_dir,
        manifest=manifest,
        project_name=_optional_string(data, "project_name"),
        package_name=_optional_string(data, "package_name"),
        build_dir=_resolve_path(project_dir, data, "build_dir"),
        app_root=_resolve_path(project_dir, data, "app_root"),
        icon=_resolve_path(project_dir, data, "icon"),
        resource_index=resource_index,
        windows_kits_root=_resolve_path(project_dir, data, "windows_kits_root"),
        tool_timeout=_tool_timeout(data),
        signing=signing,
    )


def load_config(config_path: Path) -> MsixConfig:
    """
    Loads the JSON build configuration.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not valid JSON
    """
    if not config_path.is_file():
        raise ConfigurationError(f"Build configuration not found at {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Build configuration {config_path} is not valid JSON: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Build configuration {config_path} could not be read: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Build configuration {config_path} must contain a JSON object")

    return config_from_dict(data, config_path.resolve().parent)
