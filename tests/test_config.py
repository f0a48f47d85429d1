"""Tests for project discovery and settings loading."""

import json

import pytest

from omniprobe_containers.core.config import (
    find_project_root,
    load_project,
    load_settings,
    read_project_version,
)
from omniprobe_containers.core.exceptions import ProjectConfigError


class TestFindProjectRoot:
    """Tests for find_project_root."""

    def test_finds_ancestor(self, project_dir):
        """Test that the nearest ancestor holding VERSION is found."""
        nested = project_dir / "src" / "deep"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == project_dir.resolve()

    def test_no_version_anywhere(self, tmp_path):
        nested = tmp_path / "a"
        nested.mkdir()
        # tmp_path's ancestors are system directories without VERSION
        with pytest.raises(ProjectConfigError):
            find_project_root(nested)


class TestReadProjectVersion:
    """Tests for read_project_version."""

    def test_strips_whitespace(self, project_dir):
        assert read_project_version(project_dir) == "1.2"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectConfigError, match="Cannot read version file"):
            read_project_version(tmp_path)

    def test_empty_file(self, tmp_path):
        (tmp_path / "VERSION").write_text("  \n")
        with pytest.raises(ProjectConfigError, match="empty"):
            read_project_version(tmp_path)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "name: probe\n"
            "supported_rocm_versions: ['6.4', '7.0']\n"
            "default_rocm_version: '6.4'\n"
            "docker:\n"
            "  devices: [/dev/kfd]\n"
        )
        settings = load_settings(path)
        assert settings.name == "probe"
        assert settings.default_rocm_version == "6.4"
        assert settings.docker.devices == ["/dev/kfd"]
        assert settings.docker.group_add == ["video"]

    def test_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"buildkit": False}))
        assert load_settings(path).buildkit is False

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("")
        assert load_settings(path).name == "omniprobe"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectConfigError, match="not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text("name = 'x'")
        with pytest.raises(ProjectConfigError, match="Unsupported settings format"):
            load_settings(path)

    def test_invalid_settings(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("default_rocm_version: '5.0'\n")
        with pytest.raises(ProjectConfigError, match="Invalid settings"):
            load_settings(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(ProjectConfigError, match="Cannot parse settings file"):
            load_settings(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"name": ')
        with pytest.raises(ProjectConfigError, match="Cannot parse settings file"):
            load_settings(path)

    def test_directory_instead_of_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.mkdir()
        with pytest.raises(ProjectConfigError, match="Cannot parse settings file"):
            load_settings(path)


class TestLoadProject:
    """Tests for load_project."""

    def test_defaults(self, project_dir):
        project = load_project(project_dir)
        assert project.version == "1.2"
        assert project.project_dir == project_dir.resolve()
        assert project.settings.name == "omniprobe"

    def test_picks_up_project_settings_file(self, project_dir):
        """Test containers/omniprobe-containers.yaml is used when present."""
        (project_dir / "containers" / "omniprobe-containers.yaml").write_text("name: probe\n")
        project = load_project(project_dir)
        assert project.docker_tag("6.3") == "probe:1.2-rocm6.3"

    def test_explicit_config_wins(self, project_dir, tmp_path_factory):
        (project_dir / "containers" / "omniprobe-containers.yaml").write_text("name: probe\n")
        explicit = tmp_path_factory.mktemp("cfg") / "mine.yaml"
        explicit.write_text("name: other\n")
        assert load_project(project_dir, explicit).settings.name == "other"

    def test_discovers_root_from_cwd(self, project_dir, monkeypatch):
        nested = project_dir / "tools"
        nested.mkdir()
        monkeypatch.chdir(nested)
        assert load_project().project_dir == project_dir.resolve()
