"""Acquire the vendor ads SDK for the current build."""

import importlib
import logging

from .base import AdSdk, Available, MobileAdsSdk, Unavailable

logger = logging.getLogger(__name__)


def load_ads_sdk(name: str) -> AdSdk:
    """Resolve an SDK by name.

    Args:
        name: "none", "simulated", or "package.module:factory" where factory
            is a zero-argument callable returning a `MobileAdsSdk`

    Returns:
        Available with the SDK, or Unavailable with the reason. Never raises.
    """
    if name == "none":
        return Unavailable(reason="ads SDK disabled")

    if name == "simulated":
        from .simulated import SimulatedAdsSdk
        return Available(sdk=SimulatedAdsSdk())

    module_name, _, attribute = name.partition(":")
    if not attribute:
        logger.warning("Ads SDK %r is not a module:factory path", name)
        return Unavailable(reason=f"invalid SDK reference: {name}")

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attribute)
        sdk = factory()
    except Exception as e:
        logger.info("Ads SDK %s not available: %s", name, e)
        return Unavailable(reason=str(e))

    if not isinstance(sdk, MobileAdsSdk):
        logger.warning("Ads SDK %s does not implement MobileAdsSdk", name)
        return Unavailable(reason=f"{name} does not implement MobileAdsSdk")

    return Available(sdk=sdk)
