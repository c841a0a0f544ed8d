#!/usr/bin/env python3
"""
APPBRAND ENGINE - The High Orchestrator
---------------------------------------
The RebrandEngine manages one identity change from configuration to
disk: load and validate the configuration, stage every patch, verify the
staged artifacts, commit them in one pass, then hand over to the
external icon and dependency tools.

Nothing is written unless the whole change set was computed and passed
validation. The external tools run after the commit; a tool failure is
fatal but does not undo the committed identity.

Author: AppBrand Team
Date: 2026-10-19
"""

import time
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from appbrand.core.config import RebrandConfig, find_config, load_config
from appbrand.core.errors import ConfigError, ValidationError
from appbrand.core.models import StepReport, SKIPPED, UNCHANGED
from appbrand.core.tools import ToolRunner
from appbrand.patching.context import RebrandContext
from appbrand.patching.pipeline import RebrandPipeline
from appbrand.validator.validator import BrandValidator

# Setup standardized logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger("appbrand.engine")


class RebrandEngine:
    """
    Principal Orchestrator for project rebranding.
    Coordinates configuration, the patch pipeline, validation, commit
    and the post-commit build tools.
    """

    def __init__(self, workspace_path: str, config_path: Optional[str] = None,
                 tool_runner: Optional[ToolRunner] = None):
        self.workspace = Path(workspace_path).resolve()
        if not self.workspace.is_dir():
            raise ConfigError(f"Project root not found: {self.workspace}")

        self.config_path = find_config(self.workspace, Path(config_path) if config_path else None)
        self.pipeline = RebrandPipeline()
        self.validator = BrandValidator()
        self.tools = tool_runner or ToolRunner(self.workspace)

    def load_config(self) -> RebrandConfig:
        return load_config(self.config_path)

    def run(self, dry_run: bool = False, run_tools: bool = True,
            on_step: Optional[Callable[[StepReport], None]] = None,
            on_tool: Optional[Callable[[str], None]] = None) -> RebrandContext:
        """
        Performs the full rebrand cycle. Raises AppBrandError subclasses on
        any fatal condition.
        """
        # Phase 1: Identity (fatal before any project file is read)
        config = self.load_config()

        # Phase 2: Staging
        context = self.pipeline.run(self.workspace, config, on_step=on_step)

        # Phase 3: Pre-flight validation of every staged artifact
        valid, failures = self.validator.validate_changeset(context.changes)
        if not valid:
            raise ValidationError("Aborting, nothing written:\n" + "\n".join(failures))

        if dry_run:
            return context

        # Phase 4: Commit
        touched = context.changes.commit()
        context.committed = True
        logger.info(f"Committed {len(touched)} file operation(s) under {self.workspace}")

        # Phase 5: External tools, in order, fail-fast
        if run_tools and config.run_tools:
            for command in (config.icon_command, config.pub_get_command):
                if on_tool:
                    on_tool(command)
                self.tools.run(command)
                context.tools_run.append(command)

        return context

    def generate_summary(self, context: RebrandContext) -> Dict[str, Any]:
        """Condensed numbers for the final report panel."""
        reports = context.reports
        return {
            "total_steps": len(reports),
            "changed": sum(1 for r in reports if r.status not in (SKIPPED, UNCHANGED)),
            "skipped": sum(1 for r in reports if r.status == SKIPPED),
            "files_staged": len(context.changes.edits) + len(context.changes.deletions),
            "committed": context.committed,
            "tools_run": list(context.tools_run),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }
