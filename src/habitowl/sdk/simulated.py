"""Simulated ad network.

Stands in for the vendor SDK in development builds, the CLI and the test
suite. Ads load after a configurable latency, fill or fail according to the
configured fill flag, and emit the same typed events the real SDK bridge
produces.
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Optional

from ..models.core import AdFormat
from .base import AdError, AdEvent, Closed, Loaded, Reward, RewardEarned

logger = logging.getLogger(__name__)

DEFAULT_REWARD = Reward(type="streak_freeze", amount=1)


class SimulatedAd:
    """One simulated full-screen ad request."""

    def __init__(
        self,
        ad_format: AdFormat,
        ad_unit_id: str,
        request_options: Optional[dict[str, Any]] = None,
        fill: bool = True,
        load_latency: float = 0.0,
        grant_reward: bool = True,
        fail_show: bool = False,
        reward: Reward = DEFAULT_REWARD,
    ) -> None:
        self.ad_format = ad_format
        self.ad_unit_id = ad_unit_id
        self.request_options = dict(request_options or {})
        self.fill = fill
        self.load_latency = load_latency
        self.grant_reward = grant_reward
        self.fail_show = fail_show
        self.reward = reward

        self.load_calls = 0
        self.show_calls = 0
        self._loaded = False
        self._queue: asyncio.Queue[AdEvent] = asyncio.Queue()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        self.load_calls += 1
        asyncio.get_running_loop().call_later(self.load_latency, self._finish_load)

    def _finish_load(self) -> None:
        if self.fill:
            self._loaded = True
            self._queue.put_nowait(Loaded())
        else:
            self._queue.put_nowait(AdError(reason="no fill"))

    async def show(self) -> None:
        if not self._loaded:
            raise RuntimeError(f"{self.ad_format.value} ad is not loaded")

        self._loaded = False
        if self.fail_show:
            self._queue.put_nowait(AdError(reason="display failed"))
            raise RuntimeError(f"{self.ad_format.value} ad failed to display")

        self.show_calls += 1
        if self.ad_format is AdFormat.REWARDED and self.grant_reward:
            self._queue.put_nowait(RewardEarned(reward=self.reward))
        self._queue.put_nowait(Closed())

    async def events(self) -> AsyncIterator[AdEvent]:
        while True:
            event = await self._queue.get()
            yield event
            if isinstance(event, Closed):
                return


class SimulatedAdsSdk:
    """In-process implementation of the `MobileAdsSdk` protocol.

    Example:
        sdk = SimulatedAdsSdk(fill=True, load_latency=0.2)
        service = AdService(storage, Available(sdk), AdUnitRegistry())
    """

    def __init__(
        self,
        fill: bool = True,
        load_latency: float = 0.0,
        grant_reward: bool = True,
        fail_show: bool = False,
        fail_initialize: bool = False,
        supported_formats: Optional[set[AdFormat]] = None,
    ) -> None:
        self.fill = fill
        self.load_latency = load_latency
        self.grant_reward = grant_reward
        self.fail_show = fail_show
        self.fail_initialize = fail_initialize
        self.supported_formats = (
            set(AdFormat) if supported_formats is None else set(supported_formats)
        )

        self.initialized = False
        self.created: list[SimulatedAd] = []

    async def initialize(self) -> None:
        if self.fail_initialize:
            raise RuntimeError("simulated SDK initialization failure")
        self.initialized = True
        logger.debug("Simulated ads SDK initialized")

    def supports(self, ad_format: AdFormat) -> bool:
        return ad_format in self.supported_formats

    def _create(
        self, ad_format: AdFormat, ad_unit_id: str, request_options: Optional[dict[str, Any]]
    ) -> SimulatedAd:
        ad = SimulatedAd(
            ad_format,
            ad_unit_id,
            request_options,
            fill=self.fill,
            load_latency=self.load_latency,
            grant_reward=self.grant_reward,
            fail_show=self.fail_show,
        )
        self.created.append(ad)
        return ad

    def create_interstitial(
        self, ad_unit_id: str, request_options: Optional[dict[str, Any]] = None
    ) -> SimulatedAd:
        return self._create(AdFormat.INTERSTITIAL, ad_unit_id, request_options)

    def create_rewarded(
        self, ad_unit_id: str, request_options: Optional[dict[str, Any]] = None
    ) -> SimulatedAd:
        return self._create(AdFormat.REWARDED, ad_unit_id, request_options)
