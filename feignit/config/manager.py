"""Configuration manager tying loading and merging together."""

import logging
from functools import cache

from .loader import ConfigurationLoader
from .merger import ConfigurationMerger
from .models import FeignitSettings
from .types import Configuration

logger = logging.getLogger(__name__)


class ConfigurationManager:
    """Loads and merges configuration from every source."""

    def __init__(self):
        self.loader = ConfigurationLoader()
        self.merger = ConfigurationMerger()

    def load_configuration(self) -> Configuration:
        sources = self.loader.discover_all_sources()
        logger.debug(f"Discovered {len(sources)} configuration sources")

        raw_configs = []
        for source in sources:
            raw_config = self.loader.load_yaml_file(source)
            if raw_config is not None:
                raw_configs.append(raw_config)

        configuration = self.merger.merge_configurations(raw_configs)
        # Missing sources stay listed so callers can show where configuration may live.
        configuration.sources = sources

        logger.debug(f"Effective settings: {configuration.settings.model_dump()}")
        return configuration


@cache
def get_settings() -> FeignitSettings:
    """Settings from the configuration files, loaded once per process."""
    return ConfigurationManager().load_configuration().settings
