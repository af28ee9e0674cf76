"""Ad serving models.

Value records passed between the ad service, the impression log and the
presentational components.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .core import ImpressionType, Platform

# Ad request options sent with every banner, interstitial and rewarded request
DEFAULT_REQUEST_OPTIONS: dict[str, Any] = {"request_non_personalized_ads_only": False}


class ImpressionRecord(BaseModel):
    """A single ad impression. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    type: ImpressionType
    context: str = "general"
    timestamp: int  # epoch milliseconds
    platform: Platform


class ImpressionStats(BaseModel):
    """Aggregate view over the persisted impression log."""

    total: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    recent: list[ImpressionRecord] = Field(default_factory=list)


class BannerConfig(BaseModel):
    """Banner placement handed to presentational components."""

    ad_unit_id: str
    size: str = "BANNER"
    request_options: dict[str, Any] = Field(
        default_factory=lambda: dict(DEFAULT_REQUEST_OPTIONS)
    )


class ServiceStatus(BaseModel):
    """Diagnostic snapshot of the ad service."""

    initialized: bool
    premium: bool
    premium_status_loaded: bool
    sdk_available: bool
    sdk_unavailable_reason: Optional[str] = None
    platform: Platform
    should_show_ads: bool
    interstitial_loaded: bool
    session_interstitial_count: int
    seconds_since_last_interstitial: Optional[float] = None
    ad_unit_ids: dict[str, Optional[str]] = Field(default_factory=dict)
    dev_mode: bool = False
