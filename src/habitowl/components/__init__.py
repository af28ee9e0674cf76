"""Presentational ad components."""

from .banner import AdMobBanner, BannerAd, BannerProps

__all__ = ["AdMobBanner", "BannerAd", "BannerProps"]
