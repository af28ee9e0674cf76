"""Configuration module."""

from .ad_units import DEFAULT_AD_UNITS, TEST_AD_UNITS, AdUnitConfig, AdUnitRegistry
from .settings import Settings, get_settings

__all__ = [
    "AdUnitConfig",
    "AdUnitRegistry",
    "DEFAULT_AD_UNITS",
    "Settings",
    "TEST_AD_UNITS",
    "get_settings",
]
