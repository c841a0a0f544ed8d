#!/usr/bin/env python3
"""
APPBRAND PBXPROJ PATCHER - Bundle Identifiers
---------------------------------------------
Rewrites every PRODUCT_BUNDLE_IDENTIFIER assignment in the Xcode project
descriptor. There is one per build configuration and target, so a typical
Runner project carries six to nine of them. Auxiliary targets keep their
suffix so they stay distinguishable from the app itself:

    com.old.app              -> com.new.app
    com.old.app.RunnerTests  -> com.new.app.RunnerTests

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging
from typing import Sequence

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet

logger = logging.getLogger("appbrand.patching.pbxproj")

PBXPROJ_FILE = "ios/Runner.xcodeproj/project.pbxproj"

# Checked in order; longer suffixes first so they win over their tails
KNOWN_SUFFIXES = (
    ".OneSignalNotificationServiceExtension",
    ".NotificationServiceExtension",
    ".ShareExtension",
    ".WidgetExtension",
    ".RunnerTests",
)


def carry_suffix(old_value: str, new_identifier: str, suffixes: Sequence[str] = KNOWN_SUFFIXES) -> str:
    """New identifier for an assignment that currently holds `old_value`."""
    for suffix in suffixes:
        if old_value.endswith(suffix):
            return new_identifier + suffix
    return new_identifier


class BundleDescriptorPatcher:
    """Updates all bundle identifiers, preserving per-target suffixes and quoting."""

    ASSIGNMENT = re.compile(
        r'(?P<head>\bPRODUCT_BUNDLE_IDENTIFIER\s*=\s*)(?P<quote>"?)(?P<value>[^";\s]+)(?P=quote)(?P<tail>\s*;)'
    )

    def __init__(self, target: str = PBXPROJ_FILE, suffixes: Sequence[str] = KNOWN_SUFFIXES):
        self.target = target
        self.suffixes = tuple(suffixes)

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        report = StepReport(artifact="Xcode project", path=self.target)

        text = changes.read(self.target)
        if text is None:
            logger.warning(f"{self.target} not found; bundle identifiers not updated")
            report.status = SKIPPED
            report.note("file not found")
            return report

        seen = {}

        def _rewrite(match):
            old_value = match.group('value')
            if old_value.startswith("$"):
                # Build setting reference, not a literal identifier
                return match.group(0)
            new_value = carry_suffix(old_value, config.package_name, self.suffixes)
            seen[old_value] = new_value
            quote = match.group('quote')
            return f"{match.group('head')}{quote}{new_value}{quote}{match.group('tail')}"

        updated, count = self.ASSIGNMENT.subn(_rewrite, text)
        if count == 0:
            logger.warning(f"No PRODUCT_BUNDLE_IDENTIFIER assignments in {self.target}")
            report.status = SKIPPED
            report.note("PRODUCT_BUNDLE_IDENTIFIER not found")
            return report

        for old_value, new_value in seen.items():
            if old_value != new_value:
                report.note(f"{old_value} -> {new_value}")
        report.note(f"{count} assignment(s) processed")
        report.status = UPDATED if changes.write(self.target, updated) else UNCHANGED
        return report
