"""Core data types for configuration system."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .models import FeignitSettings, SettingsFile


class SourceType(Enum):
    """Configuration source types."""

    DEFAULT = "default"
    USER = "user"
    SHARED = "shared"
    LOCAL = "local"


@dataclass
class ConfigurationSource:
    """Represents a configuration source (file location and metadata)."""

    source_type: SourceType
    path: Path
    exists: bool

    @property
    def display_name(self) -> str:
        """Human-friendly name for this source type."""
        return {
            SourceType.DEFAULT: "Default",
            SourceType.USER: "User",
            SourceType.SHARED: "Shared",
            SourceType.LOCAL: "Local",
        }[self.source_type]


@dataclass
class RawConfiguration:
    """A single configuration file, parsed and validated but not yet merged."""

    source: ConfigurationSource
    data: SettingsFile


@dataclass
class Configuration:
    """Final processed configuration."""

    sources: list[ConfigurationSource] = field(default_factory=list)
    settings: FeignitSettings = field(default_factory=FeignitSettings)

    @property
    def loaded_sources(self) -> list[ConfigurationSource]:
        """Sources that exist on disk."""
        return [source for source in self.sources if source.exists]
