"""Configuration loading and management for feignit."""

from .exceptions import ConfigValidationError
from .loader import ConfigurationLoader
from .manager import ConfigurationManager, get_settings
from .merger import ConfigurationMerger
from .models import FeignitSettings, SettingsFile
from .types import Configuration, ConfigurationSource, RawConfiguration, SourceType

__all__ = [
    "Configuration",
    "ConfigurationLoader",
    "ConfigurationManager",
    "ConfigurationMerger",
    "ConfigurationSource",
    "ConfigValidationError",
    "FeignitSettings",
    "RawConfiguration",
    "SettingsFile",
    "SourceType",
    "get_settings",
]
