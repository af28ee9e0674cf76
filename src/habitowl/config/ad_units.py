"""Ad unit identifiers keyed by ad format and platform."""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ..models.core import AdFormat, Platform


class PlatformAdUnits(BaseModel):
    """Ad unit ids of one format."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ios: str
    android: str


class AdUnitConfig(BaseModel):
    """Ad unit ids for every format and platform."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    banner: PlatformAdUnits
    interstitial: PlatformAdUnits
    rewarded: PlatformAdUnits

    def ad_unit_id(self, ad_format: AdFormat, platform: Platform) -> Optional[str]:
        """Look up one slot. Returns None for platforms without an ad surface."""
        if not platform.has_ad_surface:
            return None
        units: PlatformAdUnits = getattr(self, ad_format.value)
        return getattr(units, platform.value)


DEFAULT_AD_UNITS = AdUnitConfig(
    banner=PlatformAdUnits(
        ios="ca-app-pub-2371616866592450/1677929899",
        android="ca-app-pub-2371616866592450/1677929899",
    ),
    interstitial=PlatformAdUnits(
        ios="ca-app-pub-2371616866592450/8051766556",
        android="ca-app-pub-2371616866592450/8051766556",
    ),
    rewarded=PlatformAdUnits(
        ios="ca-app-pub-2371616866592450/9388898951",
        android="ca-app-pub-2371616866592450/9388898951",
    ),
)

# Google Mobile Ads public test units
TEST_AD_UNITS = AdUnitConfig(
    banner=PlatformAdUnits(
        ios="ca-app-pub-3940256099942544/2934735716",
        android="ca-app-pub-3940256099942544/6300978111",
    ),
    interstitial=PlatformAdUnits(
        ios="ca-app-pub-3940256099942544/4411468910",
        android="ca-app-pub-3940256099942544/1033173712",
    ),
    rewarded=PlatformAdUnits(
        ios="ca-app-pub-3940256099942544/1712485313",
        android="ca-app-pub-3940256099942544/5224354917",
    ),
)


class AdUnitRegistry:
    """Holds the active ad unit configuration.

    The configuration itself is immutable. It only changes through
    `update_ad_config` (shallow merge) or `replace_ad_config`.

    Example:
        registry = AdUnitRegistry(dev_mode=False)
        registry.update_ad_config({"banner": {"ios": "ca-app-pub-1/2"}})
        registry.get_ad_unit_id(AdFormat.BANNER, Platform.IOS)
    """

    def __init__(
        self,
        config: Optional[AdUnitConfig] = None,
        dev_mode: bool = False,
        test_config: AdUnitConfig = TEST_AD_UNITS,
    ) -> None:
        self._config = config or DEFAULT_AD_UNITS
        self._test_config = test_config
        self.dev_mode = dev_mode

    @property
    def config(self) -> AdUnitConfig:
        """Get the active (non-test) configuration."""
        return self._config

    def get_ad_unit_id(self, ad_format: AdFormat, platform: Platform) -> Optional[str]:
        """Resolve the ad unit id for a format on a platform."""
        source = self._test_config if self.dev_mode else self._config
        return source.ad_unit_id(ad_format, platform)

    def update_ad_config(self, partial: dict[str, dict[str, str]]) -> AdUnitConfig:
        """Merge a partial `{format: {platform: id}}` mapping into the config.

        Slots not named in `partial` keep their current id.

        Raises:
            ValueError: If `partial` is not a mapping, a format or platform key is
                unknown, or an id is not a string
        """
        if not isinstance(partial, Mapping):
            raise ValueError(f"Expected a format mapping, got {type(partial).__name__}")

        updates: dict[str, Any] = {}
        for format_key, platform_ids in partial.items():
            if format_key not in AdUnitConfig.model_fields:
                raise ValueError(f"Unknown ad format: {format_key}")
            if not isinstance(platform_ids, Mapping):
                raise ValueError(f"Expected a platform mapping for {format_key}")
            current: PlatformAdUnits = getattr(self._config, format_key)
            merged = {**current.model_dump(), **platform_ids}
            try:
                updates[format_key] = PlatformAdUnits(**merged)
            except ValidationError as e:
                raise ValueError(f"Invalid ad units for {format_key}: {e}") from e

        self._config = self._config.model_copy(update=updates)
        return self._config

    def replace_ad_config(self, config: AdUnitConfig) -> AdUnitConfig:
        """Replace the whole configuration."""
        self._config = config
        return self._config
