#!/usr/bin/env python3
"""
APPBRAND PATCHER SUITE
----------------------
Each patcher in isolation: what it rewrites, what it must leave alone,
and how it reports a missing file or an unmatched field.

Author: AppBrand Team
Date: 2026-10-19
"""

import pytest

from conftest import (
    ANDROID_MANIFEST, BUILD_GRADLE, ENV_DART, INFO_PLIST, PBXPROJ, PUBSPEC_YAML, write_files,
)
from appbrand.core.config import RebrandConfig
from appbrand.core.models import CREATED, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.android_manifest import AndroidManifestPatcher
from appbrand.patching.changeset import ChangeSet
from appbrand.patching.env import EnvConstantPatcher
from appbrand.patching.gradle import BuildScriptPatcher
from appbrand.patching.pbxproj import BundleDescriptorPatcher, carry_suffix
from appbrand.patching.plist import InfoPlistPatcher
from appbrand.patching.pubspec import PubspecPatcher
from appbrand.patching.strings import StringResourceWriter, STRINGS_FILE, render_table


def _patched(root, patcher, config, rel):
    changes = ChangeSet(root)
    report = patcher.apply(changes, config)
    return report, changes.read(rel), changes


# --- Env constant ---

def test_env_constant_rewritten(tmp_path, config):
    write_files(tmp_path, {"lib/config/env.dart": ENV_DART})
    report, text, _ = _patched(tmp_path, EnvConstantPatcher(), config, "lib/config/env.dart")
    assert report.status == UPDATED
    assert text == ENV_DART.replace("const envName = dev;", "const envName = prod;")


def test_env_constant_qualified_form(tmp_path, config):
    source = "class Config {\n  static const Env envName = Env.uat;\n}\n"
    write_files(tmp_path, {"lib/config/env.dart": source})
    _, text, _ = _patched(tmp_path, EnvConstantPatcher(), config, "lib/config/env.dart")
    assert text == source.replace("Env.uat", "Env.prod")


def test_env_constant_missing_file_is_skipped(tmp_path, config):
    report = EnvConstantPatcher().apply(ChangeSet(tmp_path), config)
    assert report.status == SKIPPED


def test_env_constant_missing_declaration_is_skipped(tmp_path, config):
    write_files(tmp_path, {"lib/config/env.dart": "const apiBase = 'x';\n"})
    report = EnvConstantPatcher().apply(ChangeSet(tmp_path), config)
    assert report.status == SKIPPED
    assert report.messages == ["envName declaration not found"]


# --- Project manifest ---

def test_pubspec_fields_rewritten(tmp_path, config):
    write_files(tmp_path, {"pubspec.yaml": PUBSPEC_YAML})
    report, text, _ = _patched(tmp_path, PubspecPatcher(), config, "pubspec.yaml")

    expected = (PUBSPEC_YAML
                .replace("name: old_app", "name: acme_shop")
                .replace("  defaultEnv: dev", "  defaultEnv: prod")
                .replace("version: 1.0.0+1", "version: 2.1.0+42")
                .replace('image_path: "assets/icons/app_icon_dev.png"', 'image_path: "assets/icons/app_icon.png"'))
    assert report.status == UPDATED
    assert text == expected


def test_pubspec_non_semver_version_left_alone(tmp_path, config):
    source = "name: old_app\nversion: 1.0\n"
    write_files(tmp_path, {"pubspec.yaml": source})
    report, text, _ = _patched(tmp_path, PubspecPatcher(), config, "pubspec.yaml")
    assert "version: 1.0\n" in text
    assert "version: left as-is (unrecognized shape)" in report.messages


def test_pubspec_only_first_icon_entry_replaced(tmp_path, config):
    source = (
        "name: old_app\n"
        "splash:\n"
        "  image_path: splash.png\n"
        "flutter_launcher_icons:\n"
        "  # primary icon\n"
        "\n"
        "  image_path: 'icons/dev.png'\n"
        "flutter_icons:\n"
        "  image_path: icons/legacy.png\n"
    )
    write_files(tmp_path, {"pubspec.yaml": source})
    _, text, _ = _patched(tmp_path, PubspecPatcher(), config, "pubspec.yaml")
    assert "  image_path: splash.png\n" in text
    assert "  image_path: 'assets/icons/app_icon.png'\n" in text
    assert "  image_path: icons/legacy.png\n" in text


def test_pubspec_missing_file_is_skipped(tmp_path, config):
    assert PubspecPatcher().apply(ChangeSet(tmp_path), config).status == SKIPPED


# --- Build script ---

@pytest.mark.parametrize("declaration", [
    "applicationId \"com.old.app\"",
    "applicationId 'com.old.app'",
    "applicationId = \"com.old.app\"",
    "applicationId = 'com.old.app'",
    "applicationId='com.old.app'",
])
def test_application_id_quote_forms_normalize(tmp_path, config, declaration):
    source = f"android {{\n    defaultConfig {{\n        {declaration}\n        applicationIdSuffix \".debug\"\n    }}\n}}\n"
    write_files(tmp_path, {"android/app/build.gradle": source})
    _, text, _ = _patched(tmp_path, BuildScriptPatcher(), config, "android/app/build.gradle")
    assert text == source.replace(declaration, 'applicationId = "com.new.app"')


def test_build_script_both_fields(tmp_path, config):
    write_files(tmp_path, {"android/app/build.gradle": BUILD_GRADLE})
    report, text, _ = _patched(tmp_path, BuildScriptPatcher(), config, "android/app/build.gradle")
    assert '    namespace = "com.new.app"\n' in text
    assert '        applicationId = "com.new.app"\n' in text
    assert "compileSdk flutter.compileSdkVersion" in text
    assert report.status == UPDATED


def test_build_script_partial_match_reported(tmp_path, config):
    source = "android {\n    defaultConfig {\n        applicationId \"com.old.app\"\n    }\n}\n"
    write_files(tmp_path, {"android/app/build.gradle.kts": source})
    report, text, _ = _patched(tmp_path, BuildScriptPatcher(), config, "android/app/build.gradle.kts")
    assert report.path == "android/app/build.gradle.kts"
    assert 'applicationId = "com.new.app"' in text
    assert "namespace: not found" in report.messages

def test_commented_application_id_left_alone(tmp_path, config):
    source = (
        "android {\n"
        "    defaultConfig {\n"
        "        // was: applicationId \"com.legacy\"\n"
        "        applicationId \"com.old.app\"\n"
        "    }\n"
        "}\n"
    )
    write_files(tmp_path, {"android/app/build.gradle": source})
    report, text, _ = _patched(tmp_path, BuildScriptPatcher(), config, "android/app/build.gradle")
    assert text == source.replace('        applicationId "com.old.app"', '        applicationId = "com.new.app"')
    assert "applicationId: com.old.app -> com.new.app" in report.messages



def test_build_script_missing_is_skipped(tmp_path, config):
    assert BuildScriptPatcher().apply(ChangeSet(tmp_path), config).status == SKIPPED


# --- Android manifest ---

def test_manifest_package_and_label(tmp_path, config):
    write_files(tmp_path, {"android/app/src/main/AndroidManifest.xml": ANDROID_MANIFEST})
    _, text, _ = _patched(tmp_path, AndroidManifestPatcher(), config, "android/app/src/main/AndroidManifest.xml")
    expected = (ANDROID_MANIFEST
                .replace('package="com.old.app"', 'package="com.new.app"')
                .replace('android:label="Old App"', 'android:label="@string/app_name"'))
    assert text == expected
    # The commented-out element is not an <application> tag
    assert '<!-- <application android:label="commented out"> -->' in text


def test_manifest_package_attribute_isolation(tmp_path, config):
    source = '<manifest xmlns:android="http://schemas.android.com/apk/res/android" android:sharedUserId="com.old.app" package=\'com.old.app\' android:versionName="1">\n</manifest>\n'
    write_files(tmp_path, {"android/app/src/main/AndroidManifest.xml": source})
    report, text, _ = _patched(tmp_path, AndroidManifestPatcher(), config, "android/app/src/main/AndroidManifest.xml")
    assert text == source.replace("package='com.old.app'", "package='com.new.app'")
    assert "label: <application> element not found" in report.messages


def test_manifest_without_package_attribute(tmp_path, config):
    source = '<manifest xmlns:android="http://schemas.android.com/apk/res/android">\n    <application android:label="x"/>\n</manifest>\n'
    write_files(tmp_path, {"android/app/src/main/AndroidManifest.xml": source})
    report, text, _ = _patched(tmp_path, AndroidManifestPatcher(), config, "android/app/src/main/AndroidManifest.xml")
    assert "package: not declared" in report.messages
    assert 'android:label="@string/app_name"' in text


def test_manifest_missing_is_skipped(tmp_path, config):
    assert AndroidManifestPatcher().apply(ChangeSet(tmp_path), config).status == SKIPPED


# --- String resources ---

def test_strings_created_when_absent(tmp_path, config):
    report, text, _ = _patched(tmp_path, StringResourceWriter(), config, STRINGS_FILE)
    assert report.status == CREATED
    assert text == (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<resources>\n'
        '    <string name="app_name">Acme Shop</string>\n'
        '</resources>\n'
    )


def test_strings_entry_replaced_in_place(tmp_path, config):
    source = '<resources>\n    <string name="app_name">Old App</string>\n    <string name="other">x</string>\n</resources>\n'
    write_files(tmp_path, {STRINGS_FILE: source})
    _, text, _ = _patched(tmp_path, StringResourceWriter(), config, STRINGS_FILE)
    assert text == source.replace("Old App", "Acme Shop")


def test_strings_entry_inserted_before_closing_tag(tmp_path, config):
    source = '<resources>\n    <string name="other">x</string>\n</resources>\n'
    write_files(tmp_path, {STRINGS_FILE: source})
    _, text, _ = _patched(tmp_path, StringResourceWriter(), config, STRINGS_FILE)
    assert text == '<resources>\n    <string name="other">x</string>\n    <string name="app_name">Acme Shop</string>\n</resources>\n'


def test_strings_idempotent_with_latest_value(tmp_path, config):
    write_files(tmp_path, {STRINGS_FILE: '<resources>\n</resources>\n'})
    for name in ("First Name", "Acme Shop", "Acme Shop"):
        changes = ChangeSet(tmp_path)
        StringResourceWriter().apply(changes, RebrandConfig.from_mapping({
            "application_name": name, "flavor": "dev", "packageName": "com.a.b", "version": "1.0.0", "build": "1",
        }))
        changes.commit()
    text = (tmp_path / STRINGS_FILE).read_text(encoding='utf-8')
    assert text.count('name="app_name"') == 1
    assert '<string name="app_name">Acme Shop</string>' in text

    changes = ChangeSet(tmp_path)
    assert StringResourceWriter().apply(changes, config).status == UNCHANGED


def test_strings_value_is_escaped(tmp_path):
    config = RebrandConfig.from_mapping({
        "application_name": "Bob's <Tools> & Co", "flavor": "dev", "packageName": "com.a.b", "version": "1.0.0", "build": "1",
    })
    _, text, _ = _patched(tmp_path, StringResourceWriter(), config, STRINGS_FILE)
    assert "Bob\\'s &lt;Tools&gt; &amp; Co" in text
    assert text == render_table("Bob's <Tools> & Co")


# --- Xcode project ---

def test_carry_suffix():
    assert carry_suffix("com.old.app.RunnerTests", "com.new.app") == "com.new.app.RunnerTests"
    assert carry_suffix("com.old.app", "com.new.app") == "com.new.app"
    assert carry_suffix("com.old.app.OneSignalNotificationServiceExtension", "com.new.app") == \
        "com.new.app.OneSignalNotificationServiceExtension"


def test_pbxproj_every_assignment_rewritten(tmp_path, config):
    write_files(tmp_path, {"ios/Runner.xcodeproj/project.pbxproj": PBXPROJ})
    report, text, _ = _patched(tmp_path, BundleDescriptorPatcher(), config, "ios/Runner.xcodeproj/project.pbxproj")
    expected = (PBXPROJ
                .replace("PRODUCT_BUNDLE_IDENTIFIER = com.old.app;", "PRODUCT_BUNDLE_IDENTIFIER = com.new.app;")
                .replace('PRODUCT_BUNDLE_IDENTIFIER = "com.old.app";', 'PRODUCT_BUNDLE_IDENTIFIER = "com.new.app";')
                .replace("com.old.app.RunnerTests;", "com.new.app.RunnerTests;"))
    assert text == expected
    assert "3 assignment(s) processed" in report.messages


def test_pbxproj_without_assignments_is_skipped(tmp_path, config):
    write_files(tmp_path, {"ios/Runner.xcodeproj/project.pbxproj": "{\n}\n"})
    assert BundleDescriptorPatcher().apply(ChangeSet(tmp_path), config).status == SKIPPED


# --- Info.plist ---

def test_info_plist_display_name(tmp_path, config):
    write_files(tmp_path, {"ios/Runner/Info.plist": INFO_PLIST})
    _, text, _ = _patched(tmp_path, InfoPlistPatcher(), config, "ios/Runner/Info.plist")
    assert "<string>Acme Shop</string>" in text
    assert text.count("Acme Shop") == 2
    assert "<string>$(PRODUCT_BUNDLE_IDENTIFIER)</string>" in text


def test_info_plist_build_variable_name_kept(tmp_path, config):
    source = INFO_PLIST.replace("<string>old_app</string>", "<string>$(PRODUCT_NAME)</string>")
    write_files(tmp_path, {"ios/Runner/Info.plist": source})
    _, text, _ = _patched(tmp_path, InfoPlistPatcher(), config, "ios/Runner/Info.plist")
    assert "<string>$(PRODUCT_NAME)</string>" in text
    assert text.count("Acme Shop") == 1


def test_info_plist_empty_display_name_filled(tmp_path, config):
    source = INFO_PLIST.replace("<string>Old App</string>", "<string/>")
    write_files(tmp_path, {"ios/Runner/Info.plist": source})
    report, text, _ = _patched(tmp_path, InfoPlistPatcher(), config, "ios/Runner/Info.plist")
    assert "<key>CFBundleDisplayName</key>\n\t<string>Acme Shop</string>" in text
    assert "CFBundleDisplayName: Acme Shop" in report.messages
    assert report.status == UPDATED


# --- Line endings ---

def test_crlf_manifest_kept_byte_identical_outside_edits(tmp_path, config):
    path = tmp_path / "android/app/src/main/AndroidManifest.xml"
    path.parent.mkdir(parents=True)
    path.write_bytes(ANDROID_MANIFEST.replace("\n", "\r\n").encode('utf-8'))

    changes = ChangeSet(tmp_path)
    AndroidManifestPatcher().apply(changes, config)
    changes.commit()

    expected = (ANDROID_MANIFEST
                .replace('package="com.old.app"', 'package="com.new.app"')
                .replace('android:label="Old App"', 'android:label="@string/app_name"'))
    assert path.read_bytes() == expected.replace("\n", "\r\n").encode('utf-8')


def test_crlf_strings_entry_inserted_with_crlf(tmp_path, config):
    path = tmp_path / STRINGS_FILE
    path.parent.mkdir(parents=True)
    path.write_bytes(b'<resources>\r\n    <string name="other">x</string>\r\n</resources>\r\n')

    changes = ChangeSet(tmp_path)
    StringResourceWriter().apply(changes, config)
    changes.commit()

    assert path.read_bytes() == (
        b'<resources>\r\n'
        b'    <string name="other">x</string>\r\n'
        b'    <string name="app_name">Acme Shop</string>\r\n'
        b'</resources>\r\n'
    )
