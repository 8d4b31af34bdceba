"""Configuration management for the report decompiler."""

from .config_manager import ConfigurationManager
from .models import ConfigurationError, DecompilerConfig, ValidationResult

__all__ = [
    "ConfigurationManager",
    "ConfigurationError",
    "DecompilerConfig",
    "ValidationResult",
]
