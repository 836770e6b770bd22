"""
Tests for package name providers.
"""
import pytest

from msixbuild.PackageNameResolver import (
    ChainedPackageNameResolver,
    DirectoryScanPackageName,
    ExplicitPackageName,
    ProjectNamePackageName,
    require_package_name,
)
from msixbuild.errors import ConfigurationError


class TestExplicitPackageName:

    def test_returns_trimmed_name(self):
        assert ExplicitPackageName("  Mines ").resolve_package_name() == "Mines"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_absent(self, value):
        assert ExplicitPackageName(value).resolve_package_name() is None


class TestDirectoryScanPackageName:

    def test_single_folder(self, tmp_path):
        (tmp_path / "Mines").mkdir()
        (tmp_path / "notes.txt").write_text("not a folder")

        assert DirectoryScanPackageName(tmp_path).resolve_package_name() == "Mines"

    def test_folder_matching_project_name(self, tmp_path):
        (tmp_path / "Mines").mkdir()
        (tmp_path / "Other").mkdir()

        assert DirectoryScanPackageName(tmp_path, "mines").resolve_package_name() == "Mines"

    def test_ambiguous_folders(self, tmp_path):
        (tmp_path / "A").mkdir()
        (tmp_path / "B").mkdir()

        assert DirectoryScanPackageName(tmp_path, "mines").resolve_package_name() is None

    def test_missing_root(self, tmp_path):
        assert DirectoryScanPackageName(tmp_path / "missing").resolve_package_name() is None


class TestChainedPackageNameResolver:

    def test_first_answer_wins(self, tmp_path):
        (tmp_path / "FromScan").mkdir()
        resolver = ChainedPackageNameResolver([
            ExplicitPackageName(None),
            DirectoryScanPackageName(tmp_path),
            ProjectNamePackageName("project"),
        ])

        assert resolver.resolve_package_name() == "FromScan"

    def test_explicit_beats_scan(self, tmp_path):
        (tmp_path / "FromScan").mkdir()
        resolver = ChainedPackageNameResolver([
            ExplicitPackageName("Explicit"),
            DirectoryScanPackageName(tmp_path),
        ])

        assert resolver.resolve_package_name() == "Explicit"

    def test_falls_back_to_project_name(self, tmp_path):
        resolver = ChainedPackageNameResolver([
            DirectoryScanPackageName(tmp_path / "missing"),
            ProjectNamePackageName("mines"),
        ])

        assert require_package_name(resolver) == "mines"

    def test_require_fails_when_nothing_resolves(self):
        resolver = ChainedPackageNameResolver([ExplicitPackageName(None)])

        with pytest.raises(ConfigurationError, match="package_name"):
            require_package_name(resolver)

    def test_require_trims_custom_provider_answer(self):
        class FixedName:
            def resolve_package_name(self):
                return "  Mines "

        assert require_package_name(FixedName()) == "Mines"

    def test_require_rejects_blank_custom_provider_answer(self):
        class BlankName:
            def resolve_package_name(self):
                return "   "

        with pytest.raises(ConfigurationError, match="package_name"):
            require_package_name(BlankName())
