"""
Tests for PackagingConfig - JSON build configuration loading.
"""
import json
import pytest
from pathlib import Path

from msixbuild.PackagingConfig import DEFAULT_APP_ROOT, config_from_dict, load_config
from msixbuild.errors import ConfigurationError, ManifestConfigurationError

MANIFEST = {
    "identity_name": "StefanOltmann.MinesforWindowsPlus",
    "publisher": "CN=1A06AF6C-2943-4BE6-BB85-12677BA3F28D",
    "version": "1.2.3.0",
    "display_name": "Mines+",
    "publisher_display_name": "Stefan Oltmann",
    "description": "Solvable Minesweeper",
    "app_executable": "Mines.exe",
}


def write_config(directory: Path, data: dict) -> Path:
    path = directory / "msix_config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadConfig:

    def test_minimal_config_applies_conventions(self, tmp_path):
        config = load_config(write_config(tmp_path, {"manifest": MANIFEST}))

        assert config.project_dir == tmp_path.resolve()
        assert config.project_name == tmp_path.resolve().name
        assert config.build_dir == tmp_path.resolve() / "build"
        assert config.app_root == tmp_path.resolve() / "build" / DEFAULT_APP_ROOT
        assert config.architecture == "x64"
        assert config.manifest.app_id == "App"
        assert config.signing.pfx is None
        assert config.icon is None
        assert config.resource_index is False

    def test_relative_paths_resolved_against_config_dir(self, tmp_path):
        data = {
            "package_name": "Mines",
            "build_dir": "out",
            "icon": "packaging/AppIcon.png",
            "signing": {"pfx": "packaging/sign.pfx", "password": "pw"},
            "manifest": dict(MANIFEST, template_file="packaging/AppxManifest.template.xml"),
        }

        config = load_config(write_config(tmp_path, data))

        root = tmp_path.resolve()
        assert config.build_dir == root / "out"
        assert config.app_root == root / "out" / DEFAULT_APP_ROOT
        assert config.icon == root / "packaging" / "AppIcon.png"
        assert config.signing.pfx == root / "packaging" / "sign.pfx"
        assert config.signing.password == "pw"
        assert config.manifest.template_file == root / "packaging" / "AppxManifest.template.xml"

    def test_manifest_overrides(self, tmp_path):
        manifest = dict(MANIFEST, processor_architecture="arm64", background_color="#000000")

        config = load_config(write_config(tmp_path, {"manifest": manifest}))

        assert config.architecture == "arm64"
        assert config.manifest.background_color == "#000000"

    def test_password_not_in_repr(self, tmp_path):
        config = load_config(write_config(tmp_path, {"manifest": MANIFEST, "signing": {"password": "hunter2"}}))

        assert "hunter2" not in repr(config)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "msix_config.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "msix_config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(path)

    def test_non_object_document(self, tmp_path):
        path = tmp_path / "msix_config.json"
        path.write_text("[]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(path)


class TestConfigFromDict:

    def test_missing_manifest_values_named(self, tmp_path):
        manifest = dict(MANIFEST)
        del manifest["publisher"]

        with pytest.raises(ManifestConfigurationError, match="publisher"):
            config_from_dict({"manifest": manifest}, tmp_path)

    def test_unknown_key_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="signing_pfx"):
            config_from_dict({"manifest": MANIFEST, "signing_pfx": "x.pfx"}, tmp_path)

    def test_unknown_manifest_key_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="manifest setting"):
            config_from_dict({"manifest": dict(MANIFEST, logo="x.png")}, tmp_path)

    def test_project_dir_override(self, tmp_path):
        config = config_from_dict({"manifest": MANIFEST, "project_dir": "sub"}, tmp_path)

        assert config.project_dir == tmp_path / "sub"
        assert config.build_dir == tmp_path / "sub" / "build"

    def test_tool_timeout(self, tmp_path):
        config = config_from_dict({"manifest": MANIFEST, "tool_timeout": 300}, tmp_path)

        assert config.tool_timeout == 300.0

    def test_project_dir_override_must_be_string(self, tmp_path):
        with pytest.raises(ConfigurationError, match="'project_dir' setting must be a string"):
            config_from_dict({"manifest": MANIFEST, "project_dir": ["sub"]}, tmp_path)


class TestConfigValueTypes:
    """Wrongly typed values are reported by key instead of crashing."""

    @pytest.mark.parametrize("value", ["abc", True, 0, -5])
    def test_tool_timeout_must_be_positive_number(self, tmp_path, value):
        with pytest.raises(ConfigurationError, match="tool_timeout"):
            config_from_dict({"manifest": MANIFEST, "tool_timeout": value}, tmp_path)

    def test_path_must_be_string(self, tmp_path):
        with pytest.raises(ConfigurationError, match="'pfx' setting must be a string"):
            config_from_dict({"manifest": MANIFEST, "signing": {"pfx": 5}}, tmp_path)

    def test_build_path_must_be_string(self, tmp_path):
        with pytest.raises(ConfigurationError, match="'icon' setting must be a string"):
            config_from_dict({"manifest": MANIFEST, "icon": {"path": "AppIcon.png"}}, tmp_path)

    @pytest.mark.parametrize("section", ["manifest", "signing"])
    def test_section_must_be_object(self, tmp_path, section):
        data = {"manifest": MANIFEST, section: "x"}

        with pytest.raises(ConfigurationError, match=f"'{section}' setting must be a JSON object"):
            config_from_dict(data, tmp_path)

    def test_manifest_value_must_be_string(self, tmp_path):
        with pytest.raises(ConfigurationError, match="'version' setting must be a string"):
            config_from_dict({"manifest": dict(MANIFEST, version=1.2)}, tmp_path)

    def test_package_name_must_be_string(self, tmp_path):
        with pytest.raises(ConfigurationError, match="'package_name' setting must be a string"):
            config_from_dict({"manifest": MANIFEST, "package_name": 7}, tmp_path)

    def test_resource_index_must_be_boolean(self, tmp_path):
        with pytest.raises(ConfigurationError, match="resource_index"):
            config_from_dict({"manifest": MANIFEST, "resource_index": "yes"}, tmp_path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "msix_config.json"
        path.write_bytes(b'{"package_name": "Mines\xff"}')

        with pytest.raises(ConfigurationError, match="could not be read"):
            load_config(path)
