"""Configuration error types."""


class ConfigValidationError(Exception):
    """Raised when configuration content is invalid."""

    def __init__(self, message: str, setting: str | None = None, source_path: str | None = None):
        self.setting = setting
        self.source_path = source_path

        details = []
        if setting:
            details.append(f"setting '{setting}'")
        if source_path:
            details.append(f"in {source_path}")

        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)
