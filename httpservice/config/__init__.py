"""Configuration module for loading and accessing package settings."""

from httpservice.exceptions import ConfigurationError

from .loader import Config, config

__all__ = ["Config", "ConfigurationError", "config"]
