"""Configuration loading and validation."""

from .models import SystemConfig, ExtractorConfig, DEFAULT_CARD_KEYWORDS
from .loader import ConfigLoader, ConfigLoadError, ConfigValidationError

__all__ = [
    "SystemConfig",
    "ExtractorConfig",
    "DEFAULT_CARD_KEYWORDS",
    "ConfigLoader",
    "ConfigLoadError",
    "ConfigValidationError",
]
