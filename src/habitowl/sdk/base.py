"""Vendor ads SDK capability.

The mobile ads SDK is an external collaborator. This module describes the
slice of it the app consumes:

- `AdSdk` is either `Available(sdk)` or `Unavailable(reason)`. Callers
  branch on the variant instead of probing for SDK attributes.
- Each ad handle publishes a small fixed set of typed events (`Loaded`,
  `AdError`, `Closed`, `RewardEarned`) through an async event stream that
  the ad service consumes.
"""

from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Protocol, Union, runtime_checkable

from ..models.ads import DEFAULT_REQUEST_OPTIONS
from ..models.core import AdFormat


@dataclass(frozen=True)
class Reward:
    """Reward granted for watching a rewarded ad."""

    type: str
    amount: int


@dataclass(frozen=True)
class Loaded:
    """The ad finished loading and can be shown."""


@dataclass(frozen=True)
class AdError:
    """The ad failed to load or show."""

    reason: str


@dataclass(frozen=True)
class Closed:
    """The user dismissed the ad."""


@dataclass(frozen=True)
class RewardEarned:
    """The user earned the reward of a rewarded ad."""

    reward: Reward


AdEvent = Union[Loaded, AdError, Closed, RewardEarned]


@runtime_checkable
class AdHandle(Protocol):
    """A single full-screen ad request."""

    ad_unit_id: str

    @property
    def loaded(self) -> bool:
        """Whether the ad is ready to show."""
        ...

    def load(self) -> None:
        """Start loading. Completion is reported as a `Loaded` or `AdError` event."""
        ...

    async def show(self) -> None:
        """Present the ad. Raises if the SDK refuses to show it."""
        ...

    def events(self) -> AsyncIterator[AdEvent]:
        """Stream of events for this handle. Ends after `Closed`."""
        ...


@runtime_checkable
class MobileAdsSdk(Protocol):
    """Entry point of the vendor ads SDK."""

    async def initialize(self) -> None:
        ...

    def supports(self, ad_format: AdFormat) -> bool:
        ...

    def create_interstitial(
        self, ad_unit_id: str, request_options: Optional[dict[str, Any]] = None
    ) -> AdHandle:
        ...

    def create_rewarded(
        self, ad_unit_id: str, request_options: Optional[dict[str, Any]] = None
    ) -> AdHandle:
        ...


@dataclass(frozen=True)
class Available:
    """The ads SDK is present in this build."""

    sdk: MobileAdsSdk


@dataclass(frozen=True)
class Unavailable:
    """The ads SDK is absent (web build, dev client, failed import)."""

    reason: str


AdSdk = Union[Available, Unavailable]
