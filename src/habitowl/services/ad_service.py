"""Ad Service - ad lifecycle state and serving decisions.

Owns the per-process ad state (initialization, premium flag, held ad
handles, cooldown timer and session counter), decides whether an ad may be
shown, and drives the vendor SDK through the `habitowl.sdk` capability.

Serving policy:
- `should_show_ads()` is the single gate for every serving and rendering
  decision: initialized, not premium, and running on a platform with an
  ad surface.
- One interstitial is kept preloaded, watched by a single event task that
  is cancelled when the handle is replaced. When it is closed a new one is
  requested after a short delay.
- Interstitials respect a fixed cooldown between shows and a fixed cap per
  process session. Neither can be overridden.
- Rewarded ads are requested on demand, one outcome per call.

No method raises across this boundary. Failures are logged and reported as
False, None or a silent no-op.

Concurrency: held handles are plain attributes. Overlapping preload/show
calls race on them and the last write wins; callers serialise rewarded ad
requests themselves.
"""

import asyncio
import inspect
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Coroutine, Optional, Union

from ..config.ad_units import AdUnitConfig, AdUnitRegistry
from ..models.ads import BannerConfig, ImpressionStats, ServiceStatus
from ..models.core import AdFormat, ImpressionType, Platform, TriggerAction
from ..sdk.base import (
    DEFAULT_REQUEST_OPTIONS,
    AdError,
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
from ..storage.base import StorageBackend
from .impressions import ImpressionTracker

logger = logging.getLogger(__name__)

INTERSTITIAL_COOLDOWN_SECONDS = 30.0
MAX_INTERSTITIALS_PER_SESSION = 5
INTERSTITIAL_REFILL_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class PlacementRule:
    """Chance of an interstitial after an action, and the quiet period before it."""

    probability: float
    min_interval_seconds: float


INTERSTITIAL_TRIGGERS: dict[str, PlacementRule] = {
    TriggerAction.HABIT_COMPLETED.value: PlacementRule(0.30, 60.0),
    TriggerAction.HABIT_CREATED.value: PlacementRule(0.50, 120.0),
    TriggerAction.STATS_VIEW.value: PlacementRule(0.25, 90.0),
    TriggerAction.STREAK_MILESTONE.value: PlacementRule(0.40, 60.0),
}


@dataclass
class ServiceState:
    """Mutable ad state for the lifetime of the process."""

    initialized: bool = False
    premium: bool = False
    premium_status_loaded: bool = False
    last_interstitial_shown_at: Optional[float] = None
    interstitial_show_count: int = 0  # Never reset within a process
    interstitial: Optional[AdHandle] = None
    rewarded: Optional[AdHandle] = None


SdkSource = Union[Available, Unavailable, Callable[[], AdSdk]]
RewardCallback = Callable[[Reward], Union[None, Awaitable[None]]]
PremiumListener = Callable[[bool], Any]


class AdService:
    """Ad lifecycle and serving decisions for one app process.

    Construct one instance at startup and hand it to the components that
    need it.

    Example:
        service = AdService(storage, load_ads_sdk("simulated"), AdUnitRegistry())
        await service.initialize()
        if service.should_show_interstitial_after_action("habit_completed"):
            await service.show_interstitial("habit_completed")
    """

    def __init__(
        self,
        storage: StorageBackend,
        sdk: SdkSource,
        ad_units: Optional[AdUnitRegistry] = None,
        platform: Platform = Platform.ANDROID,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        impressions: Optional[ImpressionTracker] = None,
        refill_delay: float = INTERSTITIAL_REFILL_DELAY_SECONDS,
    ) -> None:
        """Initialize the ad service.

        Args:
            storage: Connected preference store
            sdk: The SDK capability, or a zero-argument provider of one
            ad_units: Ad unit registry (defaults to production ids)
            platform: Platform the app runs on
            clock: Monotonic clock in seconds, used for cooldowns
            rng: Random source for placement decisions
            impressions: Impression tracker (defaults to one on `storage`)
            refill_delay: Seconds to wait before replacing a closed interstitial
        """
        self._storage = storage
        self._sdk_source = sdk
        self._sdk: AdSdk = Unavailable(reason="not initialized")
        self._ad_units = ad_units or AdUnitRegistry()
        self.platform = platform
        self._clock = clock
        self._rng = rng or random.Random()
        self._impressions = impressions or ImpressionTracker(storage, platform)
        self._refill_delay = refill_delay

        self.state = ServiceState()
        self._premium_listeners: list[PremiumListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._interstitial_watcher: Optional[asyncio.Task] = None
        self._timers: set[asyncio.TimerHandle] = set()

    @property
    def ad_units(self) -> AdUnitRegistry:
        """Get the ad unit registry."""
        return self._ad_units

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    async def initialize(self) -> bool:
        """Initialize ads for this process.

        Returns:
            True when initialized (including platforms without an ad surface)
        """
        if not self.platform.has_ad_surface:
            logger.info("No ad surface on %s, skipping ads SDK", self.platform.value)
            self.state.initialized = True
            return True

        await self.load_premium_status()

        self._sdk = self._acquire_sdk()
        if isinstance(self._sdk, Unavailable):
            logger.info("Ads SDK not available: %s", self._sdk.reason)
            self.state.initialized = False
            return False

        try:
            await self._sdk.sdk.initialize()
        except Exception as e:
            logger.error("Error initializing ads SDK: %s", e)
            self.state.initialized = False
            return False

        self.state.initialized = True
        logger.info(
            "Ads SDK initialized for %s user",
            "premium" if self.state.premium else "free",
        )

        if not self.state.premium:
            self.preload_interstitial()

        return True

    def _acquire_sdk(self) -> AdSdk:
        source = self._sdk_source
        if isinstance(source, (Available, Unavailable)):
            return source
        try:
            return source()
        except Exception as e:
            return Unavailable(reason=str(e))

    def _sdk_for(self, ad_format: AdFormat) -> Optional[MobileAdsSdk]:
        if isinstance(self._sdk, Unavailable):
            return None
        if not self._sdk.sdk.supports(ad_format):
            return None
        return self._sdk.sdk

    # -------------------------------------------------------------------------
    # Premium status
    # -------------------------------------------------------------------------

    async def load_premium_status(self) -> bool:
        """Load the persisted premium flag. Anything but "true" means free."""
        try:
            premium = await self._storage.get_premium_status() == "true"
        except Exception as e:
            logger.warning("Error loading premium status: %s", e)
            premium = False

        self.state.premium = premium
        self.state.premium_status_loaded = True
        logger.debug("Premium status loaded: %s", premium)
        self._notify_premium_listeners()
        return premium

    async def set_premium_status(self, is_premium: bool) -> None:
        """Update and persist the premium flag.

        Upgrading drops held ads; downgrading restarts interstitial preloading.
        """
        changed = is_premium != self.state.premium
        self.state.premium = is_premium
        self.state.premium_status_loaded = True

        try:
            await self._storage.set_premium_status(is_premium)
        except Exception as e:
            logger.error("Error saving premium status: %s", e)

        if not changed:
            return

        self._notify_premium_listeners()
        if is_premium:
            logger.info("User upgraded, ads disabled")
            self.cleanup()
        elif self.state.initialized:
            logger.info("User downgraded, preloading ads")
            self.preload_interstitial()

    def on_premium_status_change(self, listener: PremiumListener) -> Callable[[], None]:
        """Subscribe to premium status changes.

        The listener is called immediately if the status is already known.

        Returns:
            A function that removes the subscription
        """
        self._premium_listeners.append(listener)
        if self.state.premium_status_loaded:
            self._call_listener(listener)

        def unsubscribe() -> None:
            if listener in self._premium_listeners:
                self._premium_listeners.remove(listener)

        return unsubscribe

    def _notify_premium_listeners(self) -> None:
        for listener in list(self._premium_listeners):
            self._call_listener(listener)

    def _call_listener(self, listener: PremiumListener) -> None:
        try:
            listener(self.state.premium)
        except Exception as e:
            logger.error("Error in premium status listener: %s", e)

    # -------------------------------------------------------------------------
    # Gate
    # -------------------------------------------------------------------------

    def should_show_ads(self) -> bool:
        """Whether any ad may be shown or rendered right now."""
        return (
            self.state.initialized
            and not self.state.premium
            and self.platform.has_ad_surface
        )

    # -------------------------------------------------------------------------
    # Interstitials
    # -------------------------------------------------------------------------

    def preload_interstitial(self) -> None:
        """Request a fresh interstitial, replacing any held one."""
        if not self.should_show_ads():
            return

        sdk = self._sdk_for(AdFormat.INTERSTITIAL)
        if sdk is None:
            return

        self._stop_interstitial_watcher()
        ad_unit_id = self._ad_units.get_ad_unit_id(AdFormat.INTERSTITIAL, self.platform)
        try:
            handle = sdk.create_interstitial(ad_unit_id, dict(DEFAULT_REQUEST_OPTIONS))
            self.state.interstitial = handle
            self._interstitial_watcher = self._spawn(self._watch_interstitial(handle))
            handle.load()
        except Exception as e:
            logger.error("Error creating interstitial: %s", e)
            return

        logger.debug("Interstitial loading (%s)", ad_unit_id)

    async def _watch_interstitial(self, handle: AdHandle) -> None:
        async for event in handle.events():
            if isinstance(event, Loaded):
                logger.debug("Interstitial loaded")
            elif isinstance(event, AdError):
                logger.warning("Interstitial error: %s", event.reason)
                return
            elif isinstance(event, Closed):
                logger.debug("Interstitial closed")
                self._schedule_refill()

    def _stop_interstitial_watcher(self) -> None:
        watcher = self._interstitial_watcher
        self._interstitial_watcher = None
        if watcher is not None and not watcher.done():
            watcher.cancel()

    def _schedule_refill(self) -> None:
        loop = asyncio.get_running_loop()

        def refill() -> None:
            self._timers.discard(timer)
            self.preload_interstitial()

        timer = loop.call_later(self._refill_delay, refill)
        self._timers.add(timer)

    async def show_interstitial(self, context: str = "general") -> bool:
        """Show the held interstitial if every serving rule allows it.

        Args:
            context: Placement name recorded with the impression

        Returns:
            True if the ad was shown
        """
        if not self.should_show_ads():
            logger.debug("Ads disabled")
            return False

        handle = self.state.interstitial
        if handle is None:
            logger.debug("No interstitial requested yet")
            return False

        now = self._clock()
        last_shown = self.state.last_interstitial_shown_at
        if last_shown is not None and now - last_shown < INTERSTITIAL_COOLDOWN_SECONDS:
            logger.debug(
                "Interstitial on cooldown (%.0fs left)",
                INTERSTITIAL_COOLDOWN_SECONDS - (now - last_shown),
            )
            return False

        if self.state.interstitial_show_count >= MAX_INTERSTITIALS_PER_SESSION:
            logger.info("Interstitial session limit reached")
            return False

        if not handle.loaded:
            logger.debug("Interstitial not ready, requesting another")
            self.preload_interstitial()
            return False

        try:
            await handle.show()
        except Exception as e:
            logger.error("Error showing interstitial: %s", e)
            return False

        self.state.last_interstitial_shown_at = now
        self.state.interstitial_show_count += 1
        logger.info(
            "Interstitial shown (%s) %d/%d",
            context,
            self.state.interstitial_show_count,
            MAX_INTERSTITIALS_PER_SESSION,
        )
        await self._impressions.track(ImpressionType.INTERSTITIAL, context)
        return True

    def should_show_interstitial_after_action(
        self, action_type: Union[str, TriggerAction]
    ) -> bool:
        """Advise whether an interstitial should follow a user action.

        Does not show anything itself.
        """
        key = action_type.value if isinstance(action_type, TriggerAction) else action_type
        rule = INTERSTITIAL_TRIGGERS.get(key)
        if rule is None:
            return False

        if not self.should_show_ads():
            return False

        last_shown = self.state.last_interstitial_shown_at
        if last_shown is not None and self._clock() - last_shown < rule.min_interval_seconds:
            return False

        return self._rng.random() < rule.probability

    # -------------------------------------------------------------------------
    # Rewarded ads
    # -------------------------------------------------------------------------

    async def show_rewarded_ad(
        self,
        on_rewarded: Optional[RewardCallback] = None,
        context: str = "general",
    ) -> bool:
        """Request, show and settle one rewarded ad.

        Args:
            on_rewarded: Called with the reward once earned (sync or async)
            context: Placement name recorded with the impression

        Returns:
            True if the reward was earned
        """
        if not self.should_show_ads():
            logger.debug("Ads disabled")
            return False

        sdk = self._sdk_for(AdFormat.REWARDED)
        if sdk is None:
            return False

        ad_unit_id = self._ad_units.get_ad_unit_id(AdFormat.REWARDED, self.platform)
        try:
            handle = sdk.create_rewarded(ad_unit_id, dict(DEFAULT_REQUEST_OPTIONS))
            self.state.rewarded = handle
            handle.load()
            return await self._settle_rewarded(handle, on_rewarded, context)
        except Exception as e:
            logger.error("Error showing rewarded ad: %s", e)
            return False

    async def _settle_rewarded(
        self,
        handle: AdHandle,
        on_rewarded: Optional[RewardCallback],
        context: str,
    ) -> bool:
        async for event in handle.events():
            if isinstance(event, Loaded):
                await handle.show()
            elif isinstance(event, RewardEarned):
                logger.info("Reward earned: %s x%d", event.reward.type, event.reward.amount)
                if on_rewarded is not None:
                    await self._invoke_reward_callback(on_rewarded, event.reward)
                await self._impressions.track(ImpressionType.REWARDED, context)
                return True
            elif isinstance(event, AdError):
                logger.warning("Rewarded ad error: %s", event.reason)
                return False
            elif isinstance(event, Closed):
                logger.info("Rewarded ad closed without reward")
                return False
        return False

    async def _invoke_reward_callback(self, callback: RewardCallback, reward: Reward) -> None:
        try:
            result = callback(reward)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error("Error in reward callback: %s", e)

    # -------------------------------------------------------------------------
    # Banners and configuration
    # -------------------------------------------------------------------------

    def get_banner_ad_unit_id(self) -> Optional[str]:
        """Banner ad unit id, or None when ads are off."""
        if not self.should_show_ads():
            return None
        return self._ad_units.get_ad_unit_id(AdFormat.BANNER, self.platform)

    def get_banner_config(self, size: str = "BANNER") -> Optional[BannerConfig]:
        """Banner placement for presentational components, or None when ads are off."""
        ad_unit_id = self.get_banner_ad_unit_id()
        if ad_unit_id is None:
            return None
        return BannerConfig(
            ad_unit_id=ad_unit_id,
            size=size,
            request_options=dict(DEFAULT_REQUEST_OPTIONS),
        )

    def update_ad_config(self, partial: dict[str, dict[str, str]]) -> Optional[AdUnitConfig]:
        """Shallow-merge ad unit ids into the configuration."""
        try:
            return self._ad_units.update_ad_config(partial)
        except ValueError as e:
            logger.error("Rejected ad config update: %s", e)
            return None

    def replace_ad_config(self, config: AdUnitConfig) -> AdUnitConfig:
        """Replace the whole ad unit configuration."""
        return self._ad_units.replace_ad_config(config)

    # -------------------------------------------------------------------------
    # Impressions
    # -------------------------------------------------------------------------

    async def track_ad_impression(
        self, impression_type: ImpressionType, context: str = "general"
    ) -> None:
        """Record an impression in the persisted log."""
        await self._impressions.track(impression_type, context)

    async def get_ad_impression_stats(self) -> ImpressionStats:
        """Summary of the persisted impression log."""
        return await self._impressions.get_stats()

    # -------------------------------------------------------------------------
    # Diagnostics and lifecycle
    # -------------------------------------------------------------------------

    def get_status(self) -> ServiceStatus:
        """Snapshot of the service state."""
        last_shown = self.state.last_interstitial_shown_at
        interstitial = self.state.interstitial
        return ServiceStatus(
            initialized=self.state.initialized,
            premium=self.state.premium,
            premium_status_loaded=self.state.premium_status_loaded,
            sdk_available=isinstance(self._sdk, Available),
            sdk_unavailable_reason=(
                self._sdk.reason if isinstance(self._sdk, Unavailable) else None
            ),
            platform=self.platform,
            should_show_ads=self.should_show_ads(),
            interstitial_loaded=interstitial is not None and interstitial.loaded,
            session_interstitial_count=self.state.interstitial_show_count,
            seconds_since_last_interstitial=(
                None if last_shown is None else self._clock() - last_shown
            ),
            ad_unit_ids={
                ad_format.value: self._ad_units.get_ad_unit_id(ad_format, self.platform)
                for ad_format in AdFormat
            },
            dev_mode=self._ad_units.dev_mode,
        )

    def cleanup(self) -> None:
        """Drop held ad handles."""
        logger.debug("Dropping held ads")
        self._stop_interstitial_watcher()
        self.state.interstitial = None
        self.state.rewarded = None

    async def aclose(self) -> None:
        """Cancel pending refills and event watchers at shutdown."""
        for timer in list(self._timers):
            timer.cancel()
        self._timers.clear()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
