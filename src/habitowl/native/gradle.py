"""Gradle build script edits for IronSource mediation.

Each edit is guarded by a marker check, so re-running on an already patched
file leaves it unchanged.
"""

import re

IRONSOURCE_MAVEN_URL = "https://android-sdk.is.com/"

PLAY_SERVICES_DEPENDENCIES = (
    "com.google.android.gms:play-services-appset:16.1.0",
    "com.google.android.gms:play-services-ads-identifier:18.1.0",
    "com.google.android.gms:play-services-basement:18.4.0",
)

_DEFAULT_CONFIG = re.compile(r"defaultConfig\s*\{")
_DEPENDENCIES = re.compile(r"dependencies\s*\{")
_ALLPROJECTS_REPOSITORIES = re.compile(r"allprojects\s*\{[\s\S]*?repositories\s*\{")


def _insert_after(contents: str, match: re.Match, text: str) -> str:
    return contents[:match.end()] + text + contents[match.end():]


def patch_app_build_gradle(contents: str) -> str:
    """Enable multidex and add the Google Play services dependencies to app/build.gradle."""
    if "multiDexEnabled true" not in contents:
        match = _DEFAULT_CONFIG.search(contents)
        if match:
            contents = _insert_after(contents, match, "\n        multiDexEnabled true")

    if "play-services-appset" not in contents:
        match = _DEPENDENCIES.search(contents)
        if match:
            lines = "".join(
                f"    implementation '{dependency}'\n" for dependency in PLAY_SERVICES_DEPENDENCIES
            )
            block = f"\n    // Google Play Services (required for IronSource)\n{lines}"
            contents = _insert_after(contents, match, block)

    return contents


def patch_project_build_gradle(contents: str) -> str:
    """Add the IronSource maven repository to allprojects.repositories."""
    if "android-sdk.is.com" in contents:
        return contents

    match = _ALLPROJECTS_REPOSITORIES.search(contents)
    if not match:
        return contents

    return _insert_after(contents, match, f'\n        maven {{ url "{IRONSOURCE_MAVEN_URL}" }}')
