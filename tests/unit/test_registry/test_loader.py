"""Unit tests for the registry loader."""

from pathlib import Path

import pytest

from status_radar.registry.loader import RegistryLoader, RegistryValidationError


FIXTURES_DIR = Path(__file__).parent.parent.parent / "fixtures" / "registry"


class TestRegistryLoader:
    """Tests for RegistryLoader."""

    @pytest.mark.unit
    def test_load_valid_file(self) -> None:
        """Test loading a valid registry."""
        loader = RegistryLoader()

        config = loader.load(FIXTURES_DIR / "valid.yaml")

        assert [s.id for s in config.services] == ["github", "stripe", "figma"]
        assert [r.name for r in config.relays] == ["corsproxy", "origin"]
        assert loader.validation_errors == []
        assert loader.checksum is not None
        assert len(loader.checksum) == 64

    @pytest.mark.unit
    def test_load_default_registry(self) -> None:
        """Test the registry bundled with the package."""
        config = RegistryLoader().load_default()
        descriptors = config.descriptors()

        assert len(descriptors) == 20
        assert descriptors[0].id == "openai"
        assert all(d.mock_profile is not None for d in descriptors)
        assert all(d.status_url.endswith("/api/v2/status.json") for d in descriptors)

    @pytest.mark.unit
    def test_duplicate_ids_reported(self) -> None:
        """Test that schema errors are collected."""
        loader = RegistryLoader()

        with pytest.raises(RegistryValidationError) as exc_info:
            loader.load(FIXTURES_DIR / "duplicate_ids.yaml")

        assert exc_info.value.file_path.endswith("duplicate_ids.yaml")
        assert "Duplicate service IDs" in loader.validation_errors[0]["msg"]

    @pytest.mark.unit
    def test_unknown_profile_reported(self) -> None:
        """Test that profiles for unlisted services are rejected."""
        loader = RegistryLoader()

        with pytest.raises(RegistryValidationError):
            loader.load(FIXTURES_DIR / "unknown_profile.yaml")

        assert "gitlab" in loader.validation_errors[0]["msg"]

    @pytest.mark.unit
    def test_field_location_is_dotted(self) -> None:
        """Test that field errors carry a dotted location."""
        loader = RegistryLoader()

        with pytest.raises(RegistryValidationError):
            loader.load(FIXTURES_DIR / "bad_url.yaml")

        assert loader.validation_errors[0]["loc"] == "services.0.status_url"

    @pytest.mark.unit
    def test_yaml_syntax_error(self) -> None:
        """Test that YAML syntax errors are reported as a single root error."""
        loader = RegistryLoader()

        with pytest.raises(RegistryValidationError):
            loader.load(FIXTURES_DIR / "malformed.yaml")

        errors = loader.validation_errors
        assert len(errors) == 1
        assert errors[0]["type"] == "yaml_parse_error"
        assert errors[0]["loc"] == "(root)"

    @pytest.mark.unit
    def test_non_utf8_file(self, tmp_path: Path) -> None:
        """Test that an undecodable file is reported as an encoding error."""
        path = tmp_path / "latin1.yaml"
        path.write_bytes("name: caf\u00e9\n".encode("latin-1"))
        loader = RegistryLoader()

        with pytest.raises(RegistryValidationError):
            loader.load(path)

        errors = loader.validation_errors
        assert len(errors) == 1
        assert errors[0]["type"] == "encoding_error"
        assert errors[0]["loc"] == "(root)"

    @pytest.mark.unit
    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            RegistryLoader().load(tmp_path / "missing.yaml")
