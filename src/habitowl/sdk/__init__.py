"""Vendor ads SDK capability, loader and simulator."""

from .base import (
    DEFAULT_REQUEST_OPTIONS,
    AdError,
    AdEvent,
    AdHandle,
    AdSdk,
    Available,
    Closed,
    Loaded,
    MobileAdsSdk,
    Reward,
    RewardEarned,
    Unavailable,
)
from .loader import load_ads_sdk
from .simulated import SimulatedAd, SimulatedAdsSdk

__all__ = [
    "AdError",
    "AdEvent",
    "AdHandle",
    "AdSdk",
    "Available",
    "Closed",
    "DEFAULT_REQUEST_OPTIONS",
    "Loaded",
    "MobileAdsSdk",
    "Reward",
    "RewardEarned",
    "SimulatedAd",
    "SimulatedAdsSdk",
    "Unavailable",
    "load_ads_sdk",
]
