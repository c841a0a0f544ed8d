#!/usr/bin/env python3
"""
APPBRAND INFO.PLIST PATCHER
---------------------------
Sets the iOS home-screen name. CFBundleDisplayName is always rewritten;
CFBundleName only when it holds a literal rather than a $(...) build
setting reference.

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging
from xml.sax.saxutils import escape

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet

logger = logging.getLogger("appbrand.patching.plist")

INFO_PLIST_FILE = "ios/Runner/Info.plist"


def _key_pattern(key: str) -> "re.Pattern":
    # <string>value</string> or an empty <string/>
    return re.compile(
        r'<key>\s*' + re.escape(key) + r'\s*</key>\s*(?P<element><string>(?P<value>[^<]*)</string>|<string\s*/>)'
    )


class InfoPlistPatcher:

    DISPLAY_NAME = _key_pattern("CFBundleDisplayName")
    BUNDLE_NAME = _key_pattern("CFBundleName")

    def __init__(self, target: str = INFO_PLIST_FILE):
        self.target = target

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        report = StepReport(artifact="Info.plist", path=self.target)

        text = changes.read(self.target)
        if text is None:
            logger.warning(f"{self.target} not found; iOS display name not updated")
            report.status = SKIPPED
            report.note("file not found")
            return report

        element = f"<string>{escape(config.application_name)}</string>"

        match = self.DISPLAY_NAME.search(text)
        if match:
            text = text[:match.start('element')] + element + text[match.end('element'):]
            report.note(f"CFBundleDisplayName: {config.application_name}")
        else:
            logger.info(f"No CFBundleDisplayName in {self.target}; skipped")
            report.note("CFBundleDisplayName: not found")

        match = self.BUNDLE_NAME.search(text)
        if match and not (match.group('value') or "").strip().startswith("$("):
            text = text[:match.start('element')] + element + text[match.end('element'):]
            report.note(f"CFBundleName: {config.application_name}")

        report.status = UPDATED if changes.write(self.target, text) else UNCHANGED
        return report
