"""Configuration merging logic for hierarchical configuration sources."""

import logging
from typing import Any

from pydantic import ValidationError

from .exceptions import ConfigValidationError
from .models import FeignitSettings
from .types import Configuration, RawConfiguration

logger = logging.getLogger(__name__)


class ConfigurationMerger:
    """Merges multiple configuration sources into a single configuration."""

    def merge_configurations(self, raw_configs: list[RawConfiguration]) -> Configuration:
        """
        Merge multiple raw configurations into a single configuration.

        Configuration hierarchy: default → user → shared → local
        Later configurations override earlier ones setting by setting.

        Args:
            raw_configs: List of raw configurations in hierarchical order

        Returns:
            Merged configuration

        Raises:
            ConfigValidationError: If the merged settings are invalid
        """
        if not raw_configs:
            return Configuration()

        sources = []
        merged: dict[str, Any] = {}

        for raw_config in raw_configs:
            sources.append(raw_config.source)
            overrides = raw_config.data.model_dump(exclude_none=True)
            for key, value in overrides.items():
                if key in merged and merged[key] != value:
                    logger.debug(
                        f"Setting '{key}' overridden by {raw_config.source.display_name} "
                        f"configuration: {merged[key]!r} -> {value!r}"
                    )
                merged[key] = value

        return Configuration(sources=sources, settings=self._validate_merged_settings(merged))

    def _validate_merged_settings(self, merged: dict[str, Any]) -> FeignitSettings:
        try:
            return FeignitSettings.model_validate(merged)
        except ValidationError as e:
            first_error = e.errors()[0]
            setting = str(first_error["loc"][0]) if first_error["loc"] else None
            raise ConfigValidationError(
                f"Merged configuration is invalid: {first_error['msg']}", setting=setting
            ) from e
