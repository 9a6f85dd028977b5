"""Exceptions raised by the rendering package."""


class ConfigurationError(ValueError):
    """Raised when render parameters are rejected before any work starts."""
