#!/usr/bin/env python3
"""
APPBRAND ANDROID MANIFEST PATCHER
---------------------------------
Splices new values into AndroidManifest.xml without re-serializing it.
Only the attribute value is replaced, so attribute order, quoting,
namespaces and comments stay exactly as the developer wrote them.

The application label is pointed at the string resource table rather
than holding a literal; StringResourceWriter owns the actual name.

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging
from typing import Optional, Tuple

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet
from appbrand.patching.strings import APP_NAME_KEY

logger = logging.getLogger("appbrand.patching.android_manifest")

MANIFEST_FILE = "android/app/src/main/AndroidManifest.xml"

LABEL_REFERENCE = f"@string/{APP_NAME_KEY}"


def find_element(text: str, tag: str) -> Optional[Tuple[int, int]]:
    """Span of the first start tag named `tag`, skipping comments."""
    pattern = re.compile(r'<!--.*?-->|<' + re.escape(tag) + r'\b(?:"[^"]*"|\'[^\']*\'|[^>"\'])*>', re.DOTALL)
    for match in pattern.finditer(text):
        if not match.group().startswith('<!--'):
            return match.start(), match.end()
    return None


def replace_attribute(text: str, span: Tuple[int, int], attribute: str, value: str) -> Tuple[str, Optional[str]]:
    """
    Replaces the value of `attribute` inside the element at `span`.
    Returns (new text, old value); old value is None when the attribute is absent.
    """
    start, end = span
    element = text[start:end]
    pattern = re.compile(r'(?<![\w:.\-])' + re.escape(attribute) + r'\s*=\s*(?P<quote>["\'])(?P<value>.*?)(?P=quote)', re.DOTALL)
    match = pattern.search(element)
    if not match:
        return text, None
    value_start = start + match.start('value')
    value_end = start + match.end('value')
    return text[:value_start] + value + text[value_end:], match.group('value')


class AndroidManifestPatcher:
    """Updates the manifest package attribute and the application label."""

    def __init__(self, target: str = MANIFEST_FILE):
        self.target = target

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        report = StepReport(artifact="Android manifest", path=self.target)

        text = changes.read(self.target)
        if text is None:
            logger.error(f"{self.target} not found; manifest package and label not updated")
            report.status = SKIPPED
            report.note("file not found")
            return report

        span = find_element(text, "manifest")
        if span is None:
            logger.warning(f"No <manifest> element in {self.target}")
            report.note("package: <manifest> element not found")
        else:
            text, old = replace_attribute(text, span, "package", config.package_name)
            if old is None:
                logger.info(f"<manifest> in {self.target} declares no package attribute; skipped")
                report.note("package: not declared")
            else:
                report.note(f"package: {old} -> {config.package_name}")

        span = find_element(text, "application")
        if span is None:
            logger.warning(f"No <application> element in {self.target}")
            report.note("label: <application> element not found")
        else:
            text, old = replace_attribute(text, span, "android:label", LABEL_REFERENCE)
            if old is None:
                logger.info(f"<application> in {self.target} has no android:label; skipped")
                report.note("label: not declared")
            else:
                report.note(f"label: {old} -> {LABEL_REFERENCE}")

        report.status = UPDATED if changes.write(self.target, text) else UNCHANGED
        return report
