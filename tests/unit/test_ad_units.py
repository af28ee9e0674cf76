"""Unit tests for ad unit configuration."""

import pytest
from pydantic import ValidationError

from habitowl.config.ad_units import (
    DEFAULT_AD_UNITS,
    TEST_AD_UNITS,
    AdUnitConfig,
    AdUnitRegistry,
    PlatformAdUnits,
)
from habitowl.models.core import AdFormat, Platform


class TestAdUnitConfig:
    """Tests for the AdUnitConfig model."""

    def test_lookup(self):
        """Test looking up a slot by format and platform."""
        assert DEFAULT_AD_UNITS.ad_unit_id(AdFormat.INTERSTITIAL, Platform.IOS) == (
            "ca-app-pub-2371616866592450/8051766556"
        )

    def test_web_has_no_ad_units(self):
        """Test web resolves to no ad unit."""
        for ad_format in AdFormat:
            assert DEFAULT_AD_UNITS.ad_unit_id(ad_format, Platform.WEB) is None

    def test_frozen(self):
        """Test the configuration cannot be mutated in place."""
        with pytest.raises(ValidationError):
            DEFAULT_AD_UNITS.banner = DEFAULT_AD_UNITS.rewarded

    def test_extra_fields_rejected(self):
        """Test unknown platform keys are rejected."""
        with pytest.raises(ValidationError):
            PlatformAdUnits(ios="a", android="b", web="c")


class TestAdUnitRegistry:
    """Tests for AdUnitRegistry."""

    def test_dev_mode_uses_test_units(self):
        """Test dev mode serves the vendor test ad units."""
        registry = AdUnitRegistry(dev_mode=True)

        assert registry.get_ad_unit_id(AdFormat.BANNER, Platform.ANDROID) == (
            TEST_AD_UNITS.banner.android
        )
        assert registry.get_ad_unit_id(AdFormat.REWARDED, Platform.IOS) == (
            "ca-app-pub-3940256099942544/1712485313"
        )

    def test_update_merges_single_slot(self):
        """Test a partial update leaves every other slot as it was."""
        registry = AdUnitRegistry()

        updated = registry.update_ad_config({"banner": {"ios": "X"}})

        assert updated.banner.ios == "X"
        assert updated.banner.android == DEFAULT_AD_UNITS.banner.android
        assert updated.interstitial == DEFAULT_AD_UNITS.interstitial
        assert updated.rewarded == DEFAULT_AD_UNITS.rewarded
        assert registry.config is updated

    def test_update_multiple_formats(self):
        """Test several formats can be updated at once."""
        registry = AdUnitRegistry()

        registry.update_ad_config({
            "interstitial": {"android": "I"},
            "rewarded": {"ios": "R", "android": "R2"},
        })

        assert registry.get_ad_unit_id(AdFormat.INTERSTITIAL, Platform.ANDROID) == "I"
        assert registry.get_ad_unit_id(AdFormat.INTERSTITIAL, Platform.IOS) == (
            DEFAULT_AD_UNITS.interstitial.ios
        )
        assert registry.get_ad_unit_id(AdFormat.REWARDED, Platform.ANDROID) == "R2"

    @pytest.mark.parametrize(
        "partial",
        [
            {"native": {"ios": "X"}},
            {"banner": "X"},
            {"banner": {"web": "X"}},
            {"banner": {"ios": 42}},
            None,
            ["banner"],
        ],
    )
    def test_update_rejects_invalid(self, partial):
        """Test malformed updates raise ValueError and change nothing."""
        registry = AdUnitRegistry()

        with pytest.raises(ValueError):
            registry.update_ad_config(partial)

        assert registry.config == DEFAULT_AD_UNITS

    def test_replace(self):
        """Test the whole configuration can be replaced."""
        registry = AdUnitRegistry()
        replacement = AdUnitConfig(
            banner=PlatformAdUnits(ios="b-ios", android="b-and"),
            interstitial=PlatformAdUnits(ios="i-ios", android="i-and"),
            rewarded=PlatformAdUnits(ios="r-ios", android="r-and"),
        )

        registry.replace_ad_config(replacement)

        assert registry.get_ad_unit_id(AdFormat.REWARDED, Platform.ANDROID) == "r-and"
