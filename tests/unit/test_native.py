"""Unit tests for the native build configuration patches."""

import plistlib
import xml.etree.ElementTree as ET

import pytest

from habitowl.native.android_manifest import (
    ANDROID_NS,
    TOOLS_NS,
    TRANSLUCENT_THEME,
    patch_manifest,
    patch_manifest_file,
)
from habitowl.native.gradle import (
    IRONSOURCE_MAVEN_URL,
    PLAY_SERVICES_DEPENDENCIES,
    patch_app_build_gradle,
    patch_project_build_gradle,
)
from habitowl.native.info_plist import (
    SKADNETWORK_IDENTIFIERS,
    TRACKING_USAGE_DESCRIPTION,
    patch_info_plist,
    patch_info_plist_file,
)
from habitowl.native.plugin import apply_native_config

MANIFEST = f"""<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="{ANDROID_NS}" package="com.habitowl.app">
  <application android:name=".MainApplication">
    <activity android:name=".MainActivity" android:theme="@style/AppTheme"/>
    <activity android:name="com.ironsource.sdk.controller.InterstitialActivity"
              android:theme="@style/IronSource"/>
    <activity android:name="com.ironsource.sdk.controller.OpenUrlActivity"/>
  </application>
</manifest>
"""

APP_BUILD_GRADLE = """apply plugin: "com.android.application"

android {
    defaultConfig {
        applicationId "com.habitowl.app"
        minSdkVersion rootProject.ext.minSdkVersion
    }
}

dependencies {
    implementation("com.facebook.react:react-android")
}
"""

PROJECT_BUILD_GRADLE = """buildscript {
    repositories {
        google()
    }
}

allprojects {
    repositories {
        google()
        mavenCentral()
    }
}
"""


def android(attribute):
    return f"{{{ANDROID_NS}}}{attribute}"


class TestAndroidManifest:
    """Tests for the mediation activity theme fix."""

    def test_patches_mediation_activities(self):
        root = ET.fromstring(MANIFEST)

        patched = patch_manifest(root)

        assert patched == [
            "com.ironsource.sdk.controller.InterstitialActivity",
            "com.ironsource.sdk.controller.OpenUrlActivity",
        ]
        for activity in root.find("application").findall("activity")[1:]:
            assert activity.get(android("theme")) == TRANSLUCENT_THEME
            assert activity.get(f"{{{TOOLS_NS}}}replace") == "android:theme"

    def test_leaves_app_activity_alone(self):
        root = ET.fromstring(MANIFEST)
        patch_manifest(root)

        main = root.find("application").findall("activity")[0]
        assert main.get(android("theme")) == "@style/AppTheme"

    def test_no_application(self):
        root = ET.fromstring(f'<manifest xmlns:android="{ANDROID_NS}"/>')

        assert patch_manifest(root) == []

    def test_patch_file(self, tmp_path):
        path = tmp_path / "AndroidManifest.xml"
        path.write_text(MANIFEST, encoding="utf-8")

        assert len(patch_manifest_file(path)) == 2

        contents = path.read_text(encoding="utf-8")
        assert 'xmlns:tools="http://schemas.android.com/tools"' in contents
        assert 'tools:replace="android:theme"' in contents

    def test_patch_file_keeps_comments(self, tmp_path):
        """Test XML comments survive a rewrite of the manifest."""
        path = tmp_path / "AndroidManifest.xml"
        path.write_text(
            MANIFEST.replace("<application", "<!-- keep me -->\n  <application"),
            encoding="utf-8",
        )

        assert len(patch_manifest_file(path)) == 2

        contents = path.read_text(encoding="utf-8")
        assert "<!-- keep me -->" in contents
        assert 'tools:replace="android:theme"' in contents


class TestGradle:
    """Tests for the Gradle script edits."""

    def test_app_build_gradle(self):
        patched = patch_app_build_gradle(APP_BUILD_GRADLE)

        assert "multiDexEnabled true" in patched
        assert patched.index("multiDexEnabled true") > patched.index("defaultConfig {")
        for dependency in PLAY_SERVICES_DEPENDENCIES:
            assert f"implementation '{dependency}'" in patched
        assert 'implementation("com.facebook.react:react-android")' in patched

    def test_app_build_gradle_idempotent(self):
        once = patch_app_build_gradle(APP_BUILD_GRADLE)

        assert patch_app_build_gradle(once) == once

    def test_project_build_gradle(self):
        patched = patch_project_build_gradle(PROJECT_BUILD_GRADLE)

        allprojects = patched[patched.index("allprojects"):]
        assert f'maven {{ url "{IRONSOURCE_MAVEN_URL}" }}' in allprojects
        assert patched.count("android-sdk.is.com") == 1
        assert patch_project_build_gradle(patched) == patched

    def test_project_build_gradle_without_allprojects(self):
        contents = "buildscript {\n}\n"

        assert patch_project_build_gradle(contents) == contents


class TestInfoPlist:
    """Tests for the Info.plist entries."""

    def test_adds_entries(self):
        plist = patch_info_plist({"CFBundleName": "HabitOwl"})

        identifiers = [item["SKAdNetworkIdentifier"] for item in plist["SKAdNetworkItems"]]
        assert identifiers == list(SKADNETWORK_IDENTIFIERS)
        assert plist["NSAppTransportSecurity"]["NSAllowsArbitraryLoads"] is True
        assert plist["NSUserTrackingUsageDescription"] == TRACKING_USAGE_DESCRIPTION
        assert plist["CFBundleName"] == "HabitOwl"

    def test_keeps_existing_entries(self):
        plist = patch_info_plist({
            "SKAdNetworkItems": [{"SKAdNetworkIdentifier": "cstr6suwn9.skadnetwork"}],
            "NSUserTrackingUsageDescription": "Custom text",
        })

        identifiers = [item["SKAdNetworkIdentifier"] for item in plist["SKAdNetworkItems"]]
        assert len(identifiers) == len(SKADNETWORK_IDENTIFIERS)
        assert identifiers.count("cstr6suwn9.skadnetwork") == 1
        assert plist["NSUserTrackingUsageDescription"] == "Custom text"

    def test_identifier_count(self):
        assert len(SKADNETWORK_IDENTIFIERS) == 60
        assert len(set(SKADNETWORK_IDENTIFIERS)) == 60

    @pytest.mark.parametrize("fmt", [plistlib.FMT_XML, plistlib.FMT_BINARY])
    def test_patch_file_keeps_format(self, tmp_path, fmt):
        path = tmp_path / "Info.plist"
        path.write_bytes(plistlib.dumps({"CFBundleName": "HabitOwl"}, fmt=fmt))

        assert patch_info_plist_file(path) is True
        raw = path.read_bytes()
        assert raw.startswith(b"bplist") == (fmt == plistlib.FMT_BINARY)
        assert patch_info_plist_file(path) is False


class TestApplyNativeConfig:
    """Tests for patching a whole project tree."""

    @pytest.fixture
    def project(self, tmp_path):
        (tmp_path / "android" / "app" / "src" / "main").mkdir(parents=True)
        (tmp_path / "android" / "build.gradle").write_text(PROJECT_BUILD_GRADLE)
        (tmp_path / "android" / "app" / "build.gradle").write_text(APP_BUILD_GRADLE)
        (tmp_path / "android" / "app" / "src" / "main" / "AndroidManifest.xml").write_text(
            MANIFEST
        )
        for target in ("HabitOwl", "Pods", "HabitOwlTests"):
            (tmp_path / "ios" / target).mkdir(parents=True)
            (tmp_path / "ios" / target / "Info.plist").write_bytes(
                plistlib.dumps({"CFBundleName": target})
            )
        return tmp_path

    def test_patches_every_file(self, project):
        report = apply_native_config(project)

        assert len(report.changed) == 4
        assert report.unchanged == []
        assert report.missing == []
        assert str(project / "ios" / "HabitOwl" / "Info.plist") in report.changed

        pods = plistlib.loads((project / "ios" / "Pods" / "Info.plist").read_bytes())
        assert "SKAdNetworkItems" not in pods

    def test_second_run_changes_nothing(self, project):
        apply_native_config(project)

        report = apply_native_config(project)

        assert report.changed == []
        assert len(report.unchanged) == 4

    def test_missing_files_are_reported(self, tmp_path):
        report = apply_native_config(tmp_path)

        assert report.changed == []
        assert len(report.missing) == 4
