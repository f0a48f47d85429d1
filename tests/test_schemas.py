"""Tests for settings, backend selection and artifact naming."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from omniprobe_containers.core.exceptions import UnsupportedRocmVersionError, UsageError
from omniprobe_containers.core.schemas import (
    Backend,
    ContainerSettings,
    ProjectContext,
    validate_selection,
)


class TestContainerSettings:
    """Tests for ContainerSettings schema."""

    def test_defaults(self):
        """Test defaults reproduce the stock project layout."""
        settings = ContainerSettings()
        assert settings.name == "omniprobe"
        assert settings.supported_rocm_versions == ["6.3", "6.4"]
        assert settings.default_rocm_version == "6.3"
        assert settings.workspace_mount == "/workspace"
        assert settings.buildkit is True
        assert settings.docker.devices == ["/dev/kfd", "/dev/dri"]
        assert settings.apptainer.rcfile == "/etc/bashrc"

    def test_default_version_must_be_supported(self):
        """Test that an unsupported default ROCm version is rejected."""
        with pytest.raises(ValidationError):
            ContainerSettings(supported_rocm_versions=["6.4"], default_rocm_version="6.3")

    def test_name_without_tag(self):
        """Test that names carrying their own tag are rejected."""
        with pytest.raises(ValidationError):
            ContainerSettings(name="omniprobe:latest")

    def test_relative_workspace_mount_rejected(self):
        with pytest.raises(ValidationError):
            ContainerSettings(workspace_mount="workspace")


class TestValidateSelection:
    """Tests for validate_selection."""

    @pytest.mark.parametrize("version", ["6.2", "7.0", "", "6.3.1", "rocm6.3"])
    def test_unsupported_version(self, version):
        """Test that versions outside the supported set are rejected."""
        with pytest.raises(UnsupportedRocmVersionError) as exc_info:
            validate_selection(True, False, version)
        assert exc_info.value.version == version
        assert exc_info.value.supported == ("6.3", "6.4")

    def test_version_checked_before_flags(self):
        """Test that a bad version wins over missing backend flags."""
        with pytest.raises(UnsupportedRocmVersionError):
            validate_selection(False, False, "5.7")

    def test_runner_requires_exactly_one(self):
        """Test runner mode rejects both and neither."""
        with pytest.raises(UsageError, match="Cannot use both"):
            validate_selection(True, True, "6.3")
        with pytest.raises(UsageError, match="Must specify either"):
            validate_selection(False, False, "6.3")

    def test_builder_requires_at_least_one(self):
        with pytest.raises(UsageError, match="At least one"):
            validate_selection(False, False, "6.3", allow_multiple=True)

    def test_builder_accepts_both(self):
        """Test builder mode accepts both backends, Docker first."""
        selection = validate_selection(True, True, "6.4", allow_multiple=True)
        assert selection.backends == [Backend.DOCKER, Backend.APPTAINER]
        assert selection.rocm_version == "6.4"

    def test_single_backend(self):
        selection = validate_selection(False, True, "6.3")
        assert selection.backend is Backend.APPTAINER

    def test_custom_supported_versions(self):
        selection = validate_selection(True, False, "7.0", supported_versions=["6.4", "7.0"])
        assert selection.rocm_version == "7.0"


class TestProjectContext:
    """Tests for artifact naming."""

    def test_docker_tag(self, project):
        """Test tag composition: name:version-rocmX."""
        assert project.docker_tag("6.4") == "omniprobe:1.2-rocm6.4"

    def test_sif_path(self, project, project_dir):
        assert project.sif_path("6.3") == project_dir / "containers" / "omniprobe_1.2-rocm6.3.sif"

    def test_definition_paths(self, project, project_dir):
        assert project.dockerfile_path == project_dir / "containers" / "omniprobe.Dockerfile"
        assert project.definition_path == project_dir / "containers" / "omniprobe.def"

    def test_naming_is_deterministic(self, project_dir):
        """Test identical inputs always give identical names."""
        first = ProjectContext(project_dir=project_dir, version="2.0")
        second = ProjectContext(project_dir=project_dir, version="2.0")
        for backend in Backend:
            assert first.artifact_ref(backend, "6.4") == second.artifact_ref(backend, "6.4")

    def test_artifact_ref_per_backend(self, project):
        assert project.artifact_ref(Backend.DOCKER, "6.3") == "omniprobe:1.2-rocm6.3"
        assert project.artifact_ref(Backend.APPTAINER, "6.3").endswith("omniprobe_1.2-rocm6.3.sif")

    def test_absolute_containers_dir(self, project_dir, tmp_path_factory):
        elsewhere = tmp_path_factory.mktemp("images")
        ctx = ProjectContext(
            project_dir=project_dir,
            version="1.2",
            settings=ContainerSettings(containers_dir=elsewhere, name="probe"),
        )
        assert ctx.sif_path("6.4") == elsewhere / "probe_1.2-rocm6.4.sif"

    def test_empty_version_rejected(self):
        with pytest.raises(ValidationError):
            ProjectContext(project_dir=Path("/tmp"), version="")
