#!/usr/bin/env python3
"""
APPBRAND REBRAND PIPELINE - The Assembly Line
---------------------------------------------
Runs every patcher against a shared ChangeSet in a fixed order. Later
steps read what earlier ones staged, so the display name written by the
manifest patcher and the string table always agree.

Nothing in here touches the disk; committing is the engine's job.

Author: AppBrand Team
Date: 2026-10-19
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport
from appbrand.patching.android_manifest import AndroidManifestPatcher
from appbrand.patching.changeset import ChangeSet
from appbrand.patching.context import RebrandContext
from appbrand.patching.entrypoint import EntryPointRelocator
from appbrand.patching.env import EnvConstantPatcher
from appbrand.patching.gradle import BuildScriptPatcher
from appbrand.patching.pbxproj import BundleDescriptorPatcher
from appbrand.patching.plist import InfoPlistPatcher
from appbrand.patching.pubspec import PubspecPatcher
from appbrand.patching.strings import StringResourceWriter

logger = logging.getLogger("appbrand.pipeline")


class RebrandPipeline:
    """
    The Orchestrator: Ensures that every artifact is patched in a
    strictly defined order against one staged view of the project.
    """

    def __init__(self, steps: Optional[List] = None):
        self.steps = steps if steps is not None else [
            EnvConstantPatcher(),
            PubspecPatcher(),
            AndroidManifestPatcher(),
            BuildScriptPatcher(),
            EntryPointRelocator(),
            StringResourceWriter(),
            BundleDescriptorPatcher(),
            InfoPlistPatcher(),
        ]

    def run(self, project_root: Path, config: RebrandConfig,
            on_step: Optional[Callable[[StepReport], None]] = None) -> RebrandContext:
        """Stages the full rebrand and returns the populated context."""
        context = RebrandContext(config=config, changes=ChangeSet(project_root))

        for step in self.steps:
            report = step.apply(context.changes, config)
            context.reports.append(report)
            logger.info(f"{report.artifact}: {report.status}")
            if on_step:
                on_step(report)

        return context
