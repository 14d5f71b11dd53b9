"""Configuration loading from multiple sources."""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .exceptions import ConfigValidationError
from .models import SettingsFile
from .types import ConfigurationSource, RawConfiguration, SourceType

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "FEIGNIT_CONFIG"
PROJECT_DIR_ENV = "FEIGNIT_PROJECT_DIR"


class ConfigurationLoader:
    """Loads configuration from multiple hierarchical sources."""

    def find_default_config(self) -> ConfigurationSource:
        """Find the default configuration shipped with the package."""
        config_dir = Path(__file__).parent
        default_path = config_dir / "default.yml"

        return ConfigurationSource(
            source_type=SourceType.DEFAULT, path=default_path, exists=default_path.exists()
        )

    def find_user_config(self) -> ConfigurationSource:
        """Find user-level configuration, checking environment variable override."""
        env_config_dir = os.getenv(CONFIG_DIR_ENV)

        if env_config_dir:
            validated_dir = self._validate_config_dir(env_config_dir, CONFIG_DIR_ENV)
            config_path = validated_dir / "config.yml"
        else:
            home = Path.home()
            config_path = home / ".config" / "feignit" / "config.yml"

        return ConfigurationSource(
            source_type=SourceType.USER, path=config_path, exists=config_path.exists()
        )

    def find_project_configs(self) -> tuple[ConfigurationSource, ConfigurationSource]:
        """Find project-level configurations using FEIGNIT_PROJECT_DIR or current directory."""
        project_dir_env = os.getenv(PROJECT_DIR_ENV)
        if project_dir_env:
            project_root = self._validate_project_dir(project_dir_env)
        else:
            project_root = Path.cwd()

        feignit_dir = project_root / ".feignit"
        shared_path = feignit_dir / "config.yml"
        local_path = feignit_dir / "config.local.yml"

        shared_source = ConfigurationSource(
            source_type=SourceType.SHARED, path=shared_path, exists=shared_path.exists()
        )

        local_source = ConfigurationSource(
            source_type=SourceType.LOCAL, path=local_path, exists=local_path.exists()
        )

        return shared_source, local_source

    def discover_all_sources(self) -> list[ConfigurationSource]:
        """Discover all configuration sources in hierarchical order."""

        default = self.find_default_config()
        user = self.find_user_config()
        shared, local = self.find_project_configs()

        return [default, user, shared, local]

    def load_yaml_file(self, source: ConfigurationSource) -> RawConfiguration | None:
        """
        Load, parse and validate a YAML configuration file.

        Returns:
            The validated configuration, or None if the file is missing or empty

        Raises:
            ConfigValidationError: If the file is not valid YAML or not a valid configuration
        """
        if not source.exists:
            logger.debug(f"Configuration file does not exist: {source.path}")
            return None

        try:
            with open(source.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML configuration {source.path}: {e}")
            raise ConfigValidationError(
                f"Invalid YAML syntax: {e}", source_path=str(source.path)
            ) from e
        except FileNotFoundError:
            logger.debug(f"Configuration file not found: {source.path}")
            return None
        except PermissionError:
            logger.error(f"Permission denied reading configuration: {source.path}")
            return None

        if data is None:
            logger.warning(f"Configuration file is empty: {source.path}")
            return None

        if not isinstance(data, dict):
            raise ConfigValidationError(
                "Configuration file must contain a YAML object", source_path=str(source.path)
            )

        try:
            settings_file = SettingsFile.model_validate(data)
        except ValidationError as e:
            error_details = []
            for error in e.errors():
                location = " -> ".join(str(x) for x in error["loc"]) if error["loc"] else "root"
                error_details.append(f"{location}: {error['msg']}")

            raise ConfigValidationError(
                "Configuration validation failed:\n" + "\n".join(error_details),
                source_path=str(source.path),
            ) from e

        logger.debug(f"Successfully loaded configuration from: {source.path}")
        return RawConfiguration(source=source, data=settings_file)

    def load_all_configurations(self) -> list[RawConfiguration]:
        """Load all available configurations in hierarchical order."""
        sources = self.discover_all_sources()
        configurations = []

        for source in sources:
            config = self.load_yaml_file(source)
            if config is not None:
                configurations.append(config)

        return configurations

    def _validate_path(
        self, path_string: str, env_var_name: str, check_exists: bool = False
    ) -> Path:
        """
        Validate a path taken from an environment variable.

        Args:
            path_string: Raw path string from environment variable
            env_var_name: Name of environment variable for error messages
            check_exists: Whether the directory must exist

        Returns:
            Validated Path object

        Raises:
            ConfigValidationError: If path is relative, contains '..' or cannot be resolved
        """
        raw_path = Path(path_string).expanduser()

        if not raw_path.is_absolute():
            logger.error(f"{env_var_name} must be absolute path, got: {path_string}")
            raise ConfigValidationError(f"{env_var_name} must be an absolute path")

        if ".." in raw_path.parts:
            logger.error(f"{env_var_name} contains parent directory references: {path_string}")
            raise ConfigValidationError(f"{env_var_name} cannot contain '..' path components")

        try:
            path = raw_path.resolve()
        except (OSError, RuntimeError, ValueError) as e:
            logger.error(f"Failed to resolve {env_var_name} path '{path_string}': {e}")
            raise ConfigValidationError(f"Invalid {env_var_name} path: {e}") from e

        if check_exists and not path.is_dir():
            raise ConfigValidationError(f"{env_var_name} directory does not exist: {path}")

        logger.debug(f"Validated {env_var_name}: {path}")
        return path

    def _validate_project_dir(self, project_dir_path: str) -> Path:
        return self._validate_path(project_dir_path, PROJECT_DIR_ENV, check_exists=True)

    def _validate_config_dir(self, config_dir_path: str, env_var_name: str) -> Path:
        return self._validate_path(config_dir_path, env_var_name)
