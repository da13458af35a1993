"""
Configuration Module

JSON settings merged into one key space; environment variables layered over
bound sections through pydantic-settings.
"""

from .configuration import (
    ConfigurationBuilder,
    ConfigurationRoot,
    ConfigurationSection,
    load_json_settings,
    flatten
)

__all__ = [
    "ConfigurationBuilder",
    "ConfigurationRoot",
    "ConfigurationSection",
    "load_json_settings",
    "flatten"
]
