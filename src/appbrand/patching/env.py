#!/usr/bin/env python3
"""
APPBRAND ENV PATCHER
--------------------
Rewrites the compile-time flavor selector in lib/config/env.dart:

    const envName = dev;            ->  const envName = prod;
    const Env envName = Env.uat;    ->  const Env envName = Env.prod;

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging

from appbrand.core.config import ENV_SUFFIXES, RebrandConfig, env_suffix
from appbrand.core.models import StepReport, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet

logger = logging.getLogger("appbrand.patching.env")

ENV_FILE = "lib/config/env.dart"

_IDENTIFIERS = "|".join(sorted(set(ENV_SUFFIXES.values())))


class EnvConstantPatcher:
    """Selects the active flavor constant at compile time."""

    DECLARATION = re.compile(
        r'^(?P<head>\s*(?:static\s+)?const\s+(?:\w+\s+)?envName\s*=\s*(?:\w+\.)?)'
        r'(?P<value>' + _IDENTIFIERS + r')'
        r'(?P<tail>\s*;)',
        re.MULTILINE,
    )

    def __init__(self, target: str = ENV_FILE):
        self.target = target

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        report = StepReport(artifact="Env constant", path=self.target)

        suffix = env_suffix(config.flavor)
        text = changes.read(self.target)
        if text is None:
            logger.warning(f"{self.target} not found; flavor constant left as-is")
            report.status = SKIPPED
            report.note("file not found")
            return report

        match = self.DECLARATION.search(text)
        if not match:
            logger.warning(f"No envName declaration found in {self.target}")
            report.status = SKIPPED
            report.note("envName declaration not found")
            return report

        updated = text[:match.start('value')] + suffix + text[match.end('value'):]
        if changes.write(self.target, updated):
            report.status = UPDATED
            report.note(f"envName: {match.group('value')} -> {suffix}")
        else:
            report.status = UNCHANGED
        return report
