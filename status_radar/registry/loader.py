"""Registry loader with validation."""

import hashlib
import time
from importlib import resources
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from status_radar.registry.schemas import RegistryConfig


logger = structlog.get_logger()

DEFAULT_REGISTRY_RESOURCE = "services.yaml"


class RegistryValidationError(Exception):
    """Raised when the registry file fails validation."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


class RegistryLoader:
    """Loads and validates the service registry.

    The registry is static configuration: it is read once at startup and the
    resulting models are immutable.
    """

    def __init__(self) -> None:
        """Initialize the loader."""
        self._checksum: str | None = None
        self._validation_errors: list[dict[str, str]] = []
        self._log = logger.bind(component="registry")

    @property
    def checksum(self) -> str | None:
        """SHA-256 checksum of the last loaded file."""
        return self._checksum

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors if any."""
        return self._validation_errors.copy()

    def load(self, path: Path) -> RegistryConfig:
        """Load and validate a registry file.

        Args:
            path: Path to services.yaml.

        Returns:
            Validated RegistryConfig.

        Raises:
            FileNotFoundError: If the file does not exist.
            RegistryValidationError: If YAML parsing or validation fails.
        """
        self._log.info("loading_registry", file_path=str(path))
        return self._parse(path.read_bytes(), str(path))

    def load_default(self) -> RegistryConfig:
        """Load the registry bundled with the package.

        Returns:
            Validated RegistryConfig.
        """
        resource = resources.files("status_radar.registry").joinpath(
            DEFAULT_REGISTRY_RESOURCE
        )
        self._log.info("loading_registry", file_path=DEFAULT_REGISTRY_RESOURCE)
        return self._parse(resource.read_bytes(), DEFAULT_REGISTRY_RESOURCE)

    def _parse(self, content: bytes, file_path: str) -> RegistryConfig:
        start_time = time.perf_counter()
        self._checksum = hashlib.sha256(content).hexdigest()
        self._validation_errors = []

        try:
            data = yaml.safe_load(content.decode("utf-8")) or {}
        except yaml.YAMLError as e:
            self._validation_errors = [
                {"loc": "(root)", "msg": str(e), "type": "yaml_parse_error"}
            ]
            raise RegistryValidationError(self._validation_errors, file_path) from e
        except UnicodeDecodeError as e:
            self._validation_errors = [
                {"loc": "(root)", "msg": str(e), "type": "encoding_error"}
            ]
            raise RegistryValidationError(self._validation_errors, file_path) from e

        try:
            config = RegistryConfig.model_validate(data)
        except ValidationError as e:
            self._validation_errors = [
                {
                    "loc": ".".join(str(part) for part in err["loc"]) or "(root)",
                    "msg": err["msg"],
                    "type": err["type"],
                }
                for err in e.errors()
            ]
            self._log.warning(
                "registry_validation_failed",
                file_path=file_path,
                error_count=len(self._validation_errors),
            )
            raise RegistryValidationError(self._validation_errors, file_path) from e

        self._log.info(
            "registry_loaded",
            file_path=file_path,
            service_count=len(config.services),
            relay_count=len(config.relays),
            checksum=self._checksum,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return config
