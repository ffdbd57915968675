"""
Configuration management for the Screenshot API.

Contains the Pydantic settings model and the cached accessor used by the
application factory and the CLI.
"""
from screenshot_api.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
