"""
Configuration package for pulpmd

Provides run settings via CLI overrides, environment variables and an
optional YAML config file using pydantic-settings.
"""

from .settings import AppSettings, settings_load, DEFAULT_CONFIG_FILE

__all__ = ["AppSettings", "settings_load", "DEFAULT_CONFIG_FILE"]
