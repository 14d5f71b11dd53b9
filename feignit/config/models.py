"""Pydantic models for configuration validation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LABEL_FORMAT = "Faked {type_name}"


def _validate_label_format(label_format: str) -> None:
    """
    Validate a fake label format string.

    Args:
        label_format: A str.format template

    Raises:
        ValueError: If the template is malformed or does not reference {type_name}
    """
    if "{type_name}" not in label_format:
        raise ValueError("Label format must contain the '{type_name}' placeholder")

    try:
        label_format.format(type_name="module.Type")
    except (IndexError, KeyError, ValueError) as e:
        raise ValueError(f"Invalid label format '{label_format}': {e}") from e


class SettingsFile(BaseModel):
    """Structure of a single configuration file. Every key is optional."""

    model_config = ConfigDict(extra="forbid")

    log_level: LogLevel | None = None
    fake_label_format: str | None = None
    dummy_return_values: bool | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("fake_label_format")
    @classmethod
    def validate_label_format(cls, v: str | None) -> str | None:
        if v is not None:
            _validate_label_format(v)
        return v


class FeignitSettings(BaseModel):
    """Effective settings after all configuration files have been merged."""

    model_config = ConfigDict(frozen=True)

    log_level: LogLevel = "WARNING"
    fake_label_format: str = DEFAULT_LABEL_FORMAT
    dummy_return_values: bool = True

    @field_validator("fake_label_format")
    @classmethod
    def validate_label_format(cls, v: str) -> str:
        _validate_label_format(v)
        return v
