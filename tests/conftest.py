#!/usr/bin/env python3
"""
APPBRAND TEST FIXTURES
----------------------
Builds a miniature Flutter project on disk so every patcher can be
exercised against realistic artifacts.

Author: AppBrand Team
Date: 2026-10-19
"""

import os
import sys
import subprocess
from pathlib import Path

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from appbrand.core.config import RebrandConfig

CONFIG_YAML = """\
application_name: Acme Shop
flavor: prod
packageName: com.new.app
version: 2.1.0
build: "42"
"""

PUBSPEC_YAML = """\
name: old_app
description: A new Flutter project.
# Keep this comment
publish_to: 'none'
version: 1.0.0+1

environment:
  sdk: '>=3.0.0 <4.0.0'

app_config:
  defaultEnv: dev

dependencies:
  flutter:
    sdk: flutter

flutter_launcher_icons:
  android: true
  ios: true
  image_path: "assets/icons/app_icon_dev.png"
  adaptive_icon_background: "#ffffff"

flutter:
  uses-material-design: true
"""

ENV_DART = """\
enum Env { dev, uat, prod }

const envName = dev;

String get apiBase => envName == prod ? 'https://api.acme.com' : 'https://dev.acme.com';
"""

BUILD_GRADLE = """\
plugins {
    id "com.android.application"
    id "kotlin-android"
}

android {
    namespace 'com.old.app'
    compileSdk flutter.compileSdkVersion

    defaultConfig {
        applicationId "com.old.app"
        minSdk flutter.minSdkVersion
        versionCode flutterVersionCode.toInteger()
    }
}
"""

ANDROID_MANIFEST = """\
<manifest xmlns:android="http://schemas.android.com/apk/res/android"
    package="com.old.app"
    android:versionCode="1">
    <!-- <application android:label="commented out"> -->
    <application
        android:label="Old App"
        android:name="${applicationName}"
        android:icon="@mipmap/ic_launcher">
        <activity android:name=".MainActivity" android:exported="true"/>
    </application>
</manifest>
"""

MAIN_ACTIVITY_KT = """\
package com.old.app

import io.flutter.embedding.android.FlutterActivity

class MainActivity: FlutterActivity() {
}
"""

PBXPROJ = """\
// !$*UTF8*$!
{
\tobjects = {
\t\t97C147061CF9000F007C117D /* Debug */ = {
\t\t\tbuildSettings = {
\t\t\t\tPRODUCT_BUNDLE_IDENTIFIER = com.old.app;
\t\t\t\tPRODUCT_NAME = "$(TARGET_NAME)";
\t\t\t};
\t\t};
\t\t97C147071CF9000F007C117D /* Release */ = {
\t\t\tbuildSettings = {
\t\t\t\tPRODUCT_BUNDLE_IDENTIFIER = "com.old.app";
\t\t\t};
\t\t};
\t\t331C8088294A63A400263BE5 /* Debug */ = {
\t\t\tbuildSettings = {
\t\t\t\tPRODUCT_BUNDLE_IDENTIFIER = com.old.app.RunnerTests;
\t\t\t};
\t\t};
\t};
}
"""

INFO_PLIST = """\
<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
\t<key>CFBundleDisplayName</key>
\t<string>Old App</string>
\t<key>CFBundleName</key>
\t<string>old_app</string>
\t<key>CFBundleIdentifier</key>
\t<string>$(PRODUCT_BUNDLE_IDENTIFIER)</string>
</dict>
</plist>
"""

PROJECT_FILES = {
    "appbrand.yaml": CONFIG_YAML,
    "pubspec.yaml": PUBSPEC_YAML,
    "lib/config/env.dart": ENV_DART,
    "android/app/build.gradle": BUILD_GRADLE,
    "android/app/src/main/AndroidManifest.xml": ANDROID_MANIFEST,
    "android/app/src/main/kotlin/com/old/app/MainActivity.kt": MAIN_ACTIVITY_KT,
    "ios/Runner.xcodeproj/project.pbxproj": PBXPROJ,
    "ios/Runner/Info.plist": INFO_PLIST,
}


def write_files(root: Path, files: dict):
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')


def snapshot(root: Path) -> dict:
    """Every file under root mapped to its bytes."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*")) if p.is_file()
    }


class FakeRunner:
    """Stands in for subprocess.run; records argv and answers with a fixed status."""

    def __init__(self, returncode: int = 0, output: str = ""):
        self.returncode = returncode
        self.output = output
        self.calls = []

    def __call__(self, argv, cwd):
        self.calls.append((list(argv), Path(cwd)))
        return subprocess.CompletedProcess(argv, self.returncode, stdout=self.output)


@pytest.fixture
def project(tmp_path) -> Path:
    root = tmp_path / "acme"
    write_files(root, PROJECT_FILES)
    return root


@pytest.fixture
def config() -> RebrandConfig:
    return RebrandConfig.from_mapping({
        "application_name": "Acme Shop",
        "flavor": "prod",
        "packageName": "com.new.app",
        "version": "2.1.0",
        "build": "42",
    })
