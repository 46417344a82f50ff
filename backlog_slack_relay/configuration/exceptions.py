"""Contains exceptions raised when resolving tenant configuration."""


class ConfigError(Exception):
    """Raised when the tenant configuration is missing or malformed."""

    pass


class TenantConfigFieldError(ConfigError):
    """Raised when a tenant configuration element lacks a required field."""

    def __init__(self, field: str, position: int) -> None:
        """Initializes the exception with the missing field and the element's 1-based position."""
        super().__init__(f"Tenant configuration #{position} is missing required field '{field}'")
        self.field = field
        self.position = position
