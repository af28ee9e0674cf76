"""Data models for HabitOwl."""

from .ads import BannerConfig, ImpressionRecord, ImpressionStats, ServiceStatus
from .consent import ConsentHandoff, ConsentPayload, ConsentSelections
from .core import AdFormat, ImpressionType, Platform, TriggerAction

__all__ = [
    "AdFormat",
    "BannerConfig",
    "ConsentHandoff",
    "ConsentPayload",
    "ConsentSelections",
    "ImpressionRecord",
    "ImpressionStats",
    "ImpressionType",
    "Platform",
    "ServiceStatus",
    "TriggerAction",
]
