#!/usr/bin/env python3
"""
APPBRAND PUBSPEC PATCHER - Project Manifest
-------------------------------------------
Rewrites the identity fields of pubspec.yaml in place. Every edit is a
line-anchored splice of a single scalar, so comments, key order and
formatting elsewhere in the file survive byte-for-byte.

Fields handled:
  name        -> Dart package name derived from the display name
  defaultEnv  -> active flavor (indentation preserved)
  version     -> <version>+<build>, only when the current value is semver-shaped
  image_path  -> flavor icon, first entry of the launcher icon block only

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging
from typing import Optional, Tuple

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet

logger = logging.getLogger("appbrand.patching.pubspec")

PUBSPEC_FILE = "pubspec.yaml"

ICON_BLOCK_KEYS = ("flutter_launcher_icons", "flutter_icons")


def _splice(text: str, match: "re.Match", group: str, value: str) -> str:
    return text[:match.start(group)] + value + text[match.end(group):]


class PubspecPatcher:
    """
    Surgeon for the top-level project manifest.
    """

    NAME_PATTERN = re.compile(r'^name:[ \t]*(?P<value>[^\s#]+)', re.MULTILINE)
    ENV_PATTERN = re.compile(r'^(?P<indent>[ \t]*)defaultEnv:[ \t]*(?P<value>[^\s#]*)', re.MULTILINE)
    VERSION_PATTERN = re.compile(r'^version:[ \t]*(?P<value>[^\s#]+)', re.MULTILINE)
    STRICT_VERSION = re.compile(r'^\d+\.\d+\.\d+(\+\d+)?$')

    BLOCK_START = re.compile(r'^(?P<key>[\w\-]+):[ \t]*(#.*)?$')
    IMAGE_PATH = re.compile(r'^(?P<head>[ \t]+image_path:[ \t]*)(?P<value>"[^"]*"|\'[^\']*\'|[^\s#]+)')

    def __init__(self, target: str = PUBSPEC_FILE):
        self.target = target

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        report = StepReport(artifact="Project manifest", path=self.target)

        text = changes.read(self.target)
        if text is None:
            logger.warning(f"{self.target} not found; project manifest not updated")
            report.status = SKIPPED
            report.note("file not found")
            return report

        text = self._patch_name(text, config, report)
        text = self._patch_default_env(text, config, report)
        text = self._patch_version(text, config, report)
        text = self._patch_icon(text, config, report)

        report.status = UPDATED if changes.write(self.target, text) else UNCHANGED
        return report

    def _patch_name(self, text: str, config: RebrandConfig, report: StepReport) -> str:
        match = self.NAME_PATTERN.search(text)
        if not match:
            logger.warning(f"No top-level 'name' field in {self.target}")
            report.note("name: not found")
            return text
        report.note(f"name: {config.dart_package_name}")
        return _splice(text, match, 'value', config.dart_package_name)

    def _patch_default_env(self, text: str, config: RebrandConfig, report: StepReport) -> str:
        match = self.ENV_PATTERN.search(text)
        if not match:
            logger.info(f"No 'defaultEnv' field in {self.target}")
            report.note("defaultEnv: not found")
            return text
        report.note(f"defaultEnv: {config.flavor.value}")
        return _splice(text, match, 'value', config.flavor.value)

    def _patch_version(self, text: str, config: RebrandConfig, report: StepReport) -> str:
        match = self.VERSION_PATTERN.search(text)
        if not match:
            logger.info(f"No top-level 'version' field in {self.target}")
            report.note("version: not found")
            return text
        if not self.STRICT_VERSION.match(match.group('value')):
            # Non-semver values are left for the developer to fix by hand
            logger.debug(f"Version '{match.group('value')}' is not major.minor.patch[+build]; left as-is")
            report.note("version: left as-is (unrecognized shape)")
            return text
        report.note(f"version: {config.version_string}")
        return _splice(text, match, 'value', config.version_string)

    def _patch_icon(self, text: str, config: RebrandConfig, report: StepReport) -> str:
        located = self.find_icon_entry(text)
        if located is None:
            logger.info(f"No launcher icon image_path in {self.target}")
            report.note("image_path: not found")
            return text

        start, end, old_value = located
        quote = old_value[0] if old_value[:1] in ('"', "'") else ""
        report.note(f"image_path: {config.icon_path}")
        return text[:start] + f"{quote}{config.icon_path}{quote}" + text[end:]

    def find_icon_entry(self, text: str) -> Optional[Tuple[int, int, str]]:
        """
        Locates the first image_path value inside the launcher icon block.
        Returns (start offset, end offset, raw value) or None.
        """
        in_block = False
        offset = 0
        for line in text.splitlines(keepends=True):
            body = line.rstrip('\r\n')
            stripped = body.strip()

            if not in_block:
                start = self.BLOCK_START.match(body)
                if start and start.group('key') in ICON_BLOCK_KEYS:
                    in_block = True
            elif stripped and not stripped.startswith('#') and not body[:1].isspace():
                # Dedent back to column zero closes the block
                in_block = False
                start = self.BLOCK_START.match(body)
                if start and start.group('key') in ICON_BLOCK_KEYS:
                    in_block = True
            else:
                match = self.IMAGE_PATH.match(body)
                if match:
                    return offset + match.start('value'), offset + match.end('value'), match.group('value')

            offset += len(line)
        return None
