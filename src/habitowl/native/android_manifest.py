"""AndroidManifest.xml fixes for the IronSource mediation activities.

The mediation SDK ships its own theme for two activities, which clashes with
the app theme during manifest merging. Both are forced to a translucent
theme and marked with `tools:replace`.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

ANDROID_NS = "http://schemas.android.com/apk/res/android"
TOOLS_NS = "http://schemas.android.com/tools"

TRANSLUCENT_THEME = "@android:style/Theme.Translucent.NoTitleBar"
TRANSLUCENT_ACTIVITIES = (
    "com.ironsource.sdk.controller.InterstitialActivity",
    "com.ironsource.sdk.controller.OpenUrlActivity",
)

ET.register_namespace("android", ANDROID_NS)
ET.register_namespace("tools", TOOLS_NS)


def _android(attribute: str) -> str:
    return f"{{{ANDROID_NS}}}{attribute}"


def _tools(attribute: str) -> str:
    return f"{{{TOOLS_NS}}}{attribute}"


def patch_manifest(manifest: ET.Element) -> list[str]:
    """Apply the theme override in place.

    Returns:
        Names of the activities that were changed
    """
    application = manifest.find("application")
    if application is None:
        logger.warning("Manifest has no <application> element")
        return []

    patched = []
    for activity in application.findall("activity"):
        name = activity.get(_android("name"))
        if name not in TRANSLUCENT_ACTIVITIES:
            continue
        if (
            activity.get(_android("theme")) == TRANSLUCENT_THEME
            and activity.get(_tools("replace")) == "android:theme"
        ):
            continue
        activity.set(_android("theme"), TRANSLUCENT_THEME)
        activity.set(_tools("replace"), "android:theme")
        patched.append(name)

    return patched


def patch_manifest_file(path: Union[str, Path]) -> list[str]:
    """Patch an AndroidManifest.xml on disk, keeping its comments."""
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    tree = ET.parse(path, parser=parser)
    patched = patch_manifest(tree.getroot())
    if patched:
        tree.write(path, encoding="utf-8", xml_declaration=True)
    return patched
