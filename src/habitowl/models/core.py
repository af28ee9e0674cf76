"""Core enums shared across the ad, consent and native layers."""

from enum import Enum


class Platform(str, Enum):
    """Runtime platform the app is running on."""

    IOS = "ios"
    ANDROID = "android"
    WEB = "web"

    @property
    def has_ad_surface(self) -> bool:
        """Whether native ads can be rendered on this platform."""
        return self is not Platform.WEB


class AdFormat(str, Enum):
    """Ad formats with configured ad units."""

    BANNER = "banner"
    INTERSTITIAL = "interstitial"
    REWARDED = "rewarded"


class ImpressionType(str, Enum):
    """Ad formats that record impressions."""

    INTERSTITIAL = "interstitial"
    REWARDED = "rewarded"


class TriggerAction(str, Enum):
    """User actions that may be followed by an interstitial."""

    HABIT_COMPLETED = "habit_completed"
    HABIT_CREATED = "habit_created"
    STATS_VIEW = "stats_view"
    STREAK_MILESTONE = "streak_milestone"
