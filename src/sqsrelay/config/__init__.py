"""Configuration management."""

from sqsrelay.config.settings import Settings

__all__ = ["Settings"]
