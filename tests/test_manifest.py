"""Tests for kitebuilder.manifest and the manifest loader.

Tests cover:
- Parsing manifest files (comments, blank lines, exclusions)
- Registry load, get, idempotency, and name conflicts
- File expansion and content digests
"""

import pytest

from kitebuilder.errors import ManifestConflictError
from kitebuilder.loaders import manifests as manifest_loader
from kitebuilder.manifest import Manifest, ManifestRegistry

from conftest import fixture_pipeline_path


def _write_manifest(directory, name, *lines):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.manifest"
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def project(tmp_path):
    (tmp_path / "app" / "vendor").mkdir(parents=True)
    (tmp_path / "app" / "main.py").write_text("print('main')\n")
    (tmp_path / "app" / "util.py").write_text("X = 1\n")
    (tmp_path / "app" / "vendor" / "lib.py").write_text("Y = 2\n")
    (tmp_path / "requirements.txt").write_text("pyyaml\n")
    return tmp_path


class TestManifest:
    """Tests for Manifest parsing and expansion."""

    def test_from_file_skips_comments_and_blanks(self, tmp_path):
        path = _write_manifest(tmp_path, "web", "# web app", "", "app/**/*.py", "  ", "requirements.txt")
        manifest = Manifest.from_file(path)

        assert manifest.name == "web"
        assert manifest.path == path.resolve()
        assert manifest.patterns == ("app/**/*.py", "requirements.txt")

    def test_fixture_manifest(self):
        path = fixture_pipeline_path("basic") / "manifests" / "basic.manifest"
        manifest = Manifest.from_file(path)
        assert manifest.patterns == ("app/**/*.py", "requirements.txt")

    def test_files_are_sorted_relative_paths(self, project):
        manifest = Manifest(name="web", path=project / "web.manifest", patterns=("requirements.txt", "app/**/*.py"))
        assert manifest.files(project) == [
            "app/main.py",
            "app/util.py",
            "app/vendor/lib.py",
            "requirements.txt",
        ]

    def test_exclusion_removes_earlier_matches(self, project):
        manifest = Manifest(name="web", path=project / "web.manifest", patterns=("app/**/*.py", "!app/vendor/**"))
        assert manifest.files(project) == ["app/main.py", "app/util.py"]

    def test_unmatched_pattern_is_empty(self, project):
        manifest = Manifest(name="web", path=project / "web.manifest", patterns=("docs/*.md",))
        assert manifest.files(project) == []

    def test_digest_changes_with_contents(self, project):
        manifest = Manifest(name="web", path=project / "web.manifest", patterns=("app/*.py",))
        before = manifest.digest(project)
        assert manifest.digest(project) == before

        (project / "app" / "util.py").write_text("X = 2\n")
        assert manifest.digest(project) != before

    def test_digest_changes_when_file_added(self, project):
        manifest = Manifest(name="web", path=project / "web.manifest", patterns=("app/*.py",))
        before = manifest.digest(project)
        (project / "app" / "extra.py").write_text("")
        assert manifest.digest(project) != before


class TestManifestRegistry:
    """Tests for ManifestRegistry."""

    def test_empty_registry(self):
        registry = ManifestRegistry()
        assert len(registry) == 0
        assert registry.all() == {}
        assert registry.get("basic") is None

    def test_load_registers_by_name(self, tmp_path):
        registry = ManifestRegistry()
        manifest = registry.load(_write_manifest(tmp_path, "basic", "*.py"))

        assert "basic" in registry
        assert registry.get("basic") is manifest

    def test_load_same_path_is_idempotent(self, tmp_path):
        registry = ManifestRegistry()
        path = _write_manifest(tmp_path, "basic", "*.py")

        first = registry.load(path)
        second = registry.load(str(path))
        assert first is second
        assert len(registry) == 1

    def test_load_different_path_same_name_conflicts(self, tmp_path):
        registry = ManifestRegistry()
        registry.load(_write_manifest(tmp_path / "a", "basic", "*.py"))

        with pytest.raises(ManifestConflictError, match="Manifest 'basic' is already registered"):
            registry.load(_write_manifest(tmp_path / "b", "basic", "*.txt"))
        assert registry.get("basic").patterns == ("*.py",)

    def test_all_returns_a_copy(self, tmp_path):
        registry = ManifestRegistry()
        registry.load(_write_manifest(tmp_path, "basic", "*.py"))

        manifests = registry.all()
        manifests.pop("basic")
        assert "basic" in registry

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ManifestRegistry().load(tmp_path / "missing.manifest")


class TestManifestLoader:
    """Tests for kitebuilder.loaders.manifests.load."""

    def test_loads_sorted_manifests(self, tmp_path):
        manifests_dir = tmp_path / "manifests"
        _write_manifest(manifests_dir, "web", "app/**")
        _write_manifest(manifests_dir, "api", "api/**")
        (manifests_dir / "notes.txt").write_text("not a manifest")

        registry = ManifestRegistry()
        loaded = manifest_loader.load(tmp_path, registry)

        assert [m.name for m in loaded] == ["api", "web"]
        assert list(registry.all()) == ["api", "web"]

    def test_missing_directory_loads_nothing(self, tmp_path):
        registry = ManifestRegistry()
        assert manifest_loader.load(tmp_path, registry) == []
        assert len(registry) == 0
