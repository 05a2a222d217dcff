"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import KeeperSettings, truthy

__all__ = ["ConfigLocator", "ConfigRepository", "KeeperSettings", "truthy"]
