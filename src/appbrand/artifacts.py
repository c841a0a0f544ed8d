#!/usr/bin/env python3
"""
APPBRAND ARTIFACTS - Release APK Naming
---------------------------------------
Gives the Flutter release APK a traceable name built from the pubspec
identity and the moment of renaming:

    build/app/outputs/flutter-apk/app-release.apk
        -> build/app/outputs/flutter-apk/acme_app_v1.4.0_42_20261019_143005.apk

Author: AppBrand Team
Date: 2026-10-19
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from appbrand.core.errors import ArtifactError

logger = logging.getLogger("appbrand.artifacts")

APK_DIR = "build/app/outputs/flutter-apk"
RELEASE_APK = "app-release.apk"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def release_apk_name(app_name: str, version: str, now: datetime) -> str:
    return f"{app_name}_v{version.replace('+', '_')}_{now.strftime(TIMESTAMP_FORMAT)}.apk"


def rename_release_apk(project_root: Path, now: Optional[datetime] = None) -> Path:
    """Renames the release APK in place and returns its new path."""
    project_root = Path(project_root)
    pubspec = project_root / "pubspec.yaml"
    if not pubspec.is_file():
        raise ArtifactError(f"pubspec.yaml not found in {project_root}")

    try:
        doc = YAML(typ='safe').load(pubspec.read_text(encoding='utf-8-sig'))
    except YAMLError as e:
        raise ArtifactError(f"pubspec.yaml is not valid YAML: {e}")
    doc = doc if isinstance(doc, dict) else {}

    app_name = str(doc.get("name") or "").strip()
    version = str(doc.get("version") or "").strip()
    if not app_name:
        raise ArtifactError("App name not found in pubspec.yaml")
    if not version:
        raise ArtifactError("App version not found in pubspec.yaml")

    original = project_root / APK_DIR / RELEASE_APK
    if not original.is_file():
        raise ArtifactError(f"APK not found: {original}")

    target = original.with_name(release_apk_name(app_name, version, now or datetime.now()))
    original.rename(target)
    logger.info(f"APK renamed to: {target}")
    return target
