"""Native project configuration for the ads mediation SDK."""

from .android_manifest import patch_manifest, patch_manifest_file
from .gradle import patch_app_build_gradle, patch_project_build_gradle
from .info_plist import patch_info_plist, patch_info_plist_file
from .plugin import NativePatchReport, apply_native_config

__all__ = [
    "NativePatchReport",
    "apply_native_config",
    "patch_app_build_gradle",
    "patch_info_plist",
    "patch_info_plist_file",
    "patch_manifest",
    "patch_manifest_file",
    "patch_project_build_gradle",
]
