"""
Configuration Management Package

Provides Pydantic-based configuration models and management for imgbatch.
"""

from imgbatch.core.config.models import AppConfig, ConversionConfig, OutputConfig
from imgbatch.core.config.manager import ConfigManager

__all__ = [
    "AppConfig",
    "ConversionConfig",
    "OutputConfig",
    "ConfigManager",
]
