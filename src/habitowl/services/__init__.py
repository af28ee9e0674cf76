"""Ad serving services."""

from .ad_service import (
    INTERSTITIAL_COOLDOWN_SECONDS,
    INTERSTITIAL_TRIGGERS,
    MAX_INTERSTITIALS_PER_SESSION,
    AdService,
    PlacementRule,
    ServiceState,
)
from .impressions import MAX_STORED_IMPRESSIONS, ImpressionTracker

__all__ = [
    "AdService",
    "ImpressionTracker",
    "INTERSTITIAL_COOLDOWN_SECONDS",
    "INTERSTITIAL_TRIGGERS",
    "MAX_INTERSTITIALS_PER_SESSION",
    "MAX_STORED_IMPRESSIONS",
    "PlacementRule",
    "ServiceState",
]
