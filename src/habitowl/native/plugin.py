"""Apply the native ad configuration to a generated Expo project."""

import logging
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field

from .android_manifest import patch_manifest_file
from .gradle import patch_app_build_gradle, patch_project_build_gradle
from .info_plist import patch_info_plist_file

logger = logging.getLogger(__name__)

APP_BUILD_GRADLE = Path("android/app/build.gradle")
PROJECT_BUILD_GRADLE = Path("android/build.gradle")
ANDROID_MANIFEST = Path("android/app/src/main/AndroidManifest.xml")


class NativePatchReport(BaseModel):
    """Files touched by `apply_native_config`."""

    changed: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


def _patch_text(path: Path, patch, report: NativePatchReport) -> None:
    original = path.read_text(encoding="utf-8")
    patched = patch(original)
    if patched == original:
        report.unchanged.append(str(path))
        return
    path.write_text(patched, encoding="utf-8")
    report.changed.append(str(path))


def _info_plists(root: Path) -> list[Path]:
    ios = root / "ios"
    if not ios.is_dir():
        return []
    return sorted(
        path for path in ios.glob("*/Info.plist")
        if path.parent.name not in ("Pods", "build") and not path.parent.name.endswith("Tests")
    )


def apply_native_config(project_root: Union[str, Path]) -> NativePatchReport:
    """Patch Gradle scripts, the Android manifest and every app Info.plist.

    Missing files are skipped and reported; every patch is idempotent.
    """
    root = Path(project_root)
    report = NativePatchReport()
    logger.info("Applying IronSource configuration to %s", root)

    for relative, patch in (
        (PROJECT_BUILD_GRADLE, patch_project_build_gradle),
        (APP_BUILD_GRADLE, patch_app_build_gradle),
    ):
        path = root / relative
        if path.is_file():
            _patch_text(path, patch, report)
        else:
            report.missing.append(str(path))

    manifest = root / ANDROID_MANIFEST
    if manifest.is_file():
        if patch_manifest_file(manifest):
            report.changed.append(str(manifest))
        else:
            report.unchanged.append(str(manifest))
    else:
        report.missing.append(str(manifest))

    plists = _info_plists(root)
    if not plists:
        report.missing.append(str(root / "ios" / "*" / "Info.plist"))
    for plist in plists:
        target = report.changed if patch_info_plist_file(plist) else report.unchanged
        target.append(str(plist))

    for path in report.missing:
        logger.warning("Skipped missing native file: %s", path)
    logger.info("IronSource configuration applied (%d files changed)", len(report.changed))
    return report
