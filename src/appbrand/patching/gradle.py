#!/usr/bin/env python3
"""
APPBRAND GRADLE PATCHER - Build Script
--------------------------------------
Normalizes the application identifier and namespace declarations of the
Android app module. Groovy and Kotlin DSL spellings are both accepted:

    applicationId "com.old.app"      \
    applicationId 'com.old.app'       |-> applicationId = "com.new.app"
    applicationId = "com.old.app"     |
    applicationId = 'com.old.app'    /

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging
from typing import Optional

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet

logger = logging.getLogger("appbrand.patching.gradle")

BUILD_SCRIPT_CANDIDATES = (
    "android/app/build.gradle",
    "android/app/build.gradle.kts",
)


class BuildScriptPatcher:
    """
    Rewrites applicationId and namespace in one staged update.
    Each field is optional; a miss is reported and the other still applies.
    """

    APPLICATION_ID = re.compile(
        r'^(?P<indent>[ \t]*)applicationId(?:[ \t]*=[ \t]*|[ \t]+)(?P<quote>["\'])(?P<value>[^"\'\n]*)(?P=quote)',
        re.MULTILINE,
    )
    NAMESPACE = re.compile(
        r'^(?P<indent>[ \t]*)namespace(?:[ \t]*=[ \t]*|[ \t]+)(?P<quote>["\'])(?P<value>[^"\'\n]*)(?P=quote)',
        re.MULTILINE,
    )

    def __init__(self, candidates=BUILD_SCRIPT_CANDIDATES):
        self.candidates = tuple(candidates)

    def locate(self, changes: ChangeSet) -> Optional[str]:
        for candidate in self.candidates:
            if changes.exists(candidate):
                return candidate
        return None

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        target = self.locate(changes)
        report = StepReport(artifact="Build script", path=target)
        if target is None:
            logger.warning(f"No app build script found (looked for {', '.join(self.candidates)})")
            report.status = SKIPPED
            report.note("file not found")
            return report

        text = changes.read(target)
        package = config.package_name

        match = self.APPLICATION_ID.search(text)
        if match:
            text = text[:match.start()] + f'{match.group("indent")}applicationId = "{package}"' + text[match.end():]
            report.note(f"applicationId: {match.group('value')} -> {package}")
        else:
            logger.info(f"No applicationId declaration in {target}; skipped")
            report.note("applicationId: not found")

        match = self.NAMESPACE.search(text)
        if match:
            text = text[:match.start()] + f'{match.group("indent")}namespace = "{package}"' + text[match.end():]
            report.note(f"namespace: {match.group('value')} -> {package}")
        else:
            logger.info(f"No namespace declaration in {target}; skipped")
            report.note("namespace: not found")

        report.status = UPDATED if changes.write(target, text) else UNCHANGED
        return report
