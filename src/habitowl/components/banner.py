"""Banner ad components.

Presentational wrappers around the ad service: they ask the service whether
ads are on and which ad unit to use, decide whether to render, and forward
the SDK's load callbacks to the log.
"""

import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field

from ..services.ad_service import AdService

logger = logging.getLogger(__name__)


class BannerProps(BaseModel):
    """Props for the native banner view."""

    ad_unit_id: str
    size: str
    request_options: dict = Field(default_factory=dict)


class BannerAd:
    """Anchored adaptive banner, checked once when mounted."""

    size = "ANCHORED_ADAPTIVE_BANNER"
    name = "BannerAd"

    def __init__(self, ad_service: AdService) -> None:
        self._ad_service = ad_service
        self.props: Optional[BannerProps] = None

    def mount(self) -> None:
        self.refresh()

    def unmount(self) -> None:
        self.props = None

    def refresh(self) -> Optional[BannerProps]:
        """Re-run the visibility check."""
        self.props = self._resolve()
        return self.props

    def _resolve(self) -> Optional[BannerProps]:
        if not self._ad_service.platform.has_ad_surface:
            return None

        if not self._ad_service.should_show_ads():
            return None

        config = self._ad_service.get_banner_config(size=self.size)
        if config is None:
            logger.debug("[%s] Config not available", self.name)
            return None

        return BannerProps(
            ad_unit_id=config.ad_unit_id,
            size=config.size,
            request_options=config.request_options,
        )

    def render(self) -> Optional[BannerProps]:
        """Props for the banner view, or None to render nothing."""
        return self.props

    def on_ad_loaded(self) -> None:
        logger.info("[%s] Banner ad loaded", self.name)

    def on_ad_failed_to_load(self, error: object) -> None:
        logger.warning("[%s] Banner ad failed to load: %s", self.name, error)


class AdMobBanner(BannerAd):
    """Standard banner that follows premium status changes while mounted."""

    size = "BANNER"
    name = "AdMobBanner"

    def __init__(self, ad_service: AdService) -> None:
        super().__init__(ad_service)
        self._unsubscribe: Optional[Callable[[], None]] = None

    def mount(self) -> None:
        logger.debug("[%s] Mounted", self.name)
        self._unsubscribe = self._ad_service.on_premium_status_change(
            self._on_premium_status_change
        )
        self.refresh()

    def unmount(self) -> None:
        logger.debug("[%s] Unmounted", self.name)
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        super().unmount()

    def _on_premium_status_change(self, is_premium: bool) -> None:
        logger.debug("[%s] Premium status changed: %s", self.name, is_premium)
        self.refresh()
