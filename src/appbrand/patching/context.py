#!/usr/bin/env python3
"""
APPBRAND REBRAND CONTEXT
------------------------
A state-management object that acts as the 'Work Order' for one run.
It carries the configuration, the staged change set and the report of
every patcher that has looked at the project.

Author: AppBrand Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from typing import List

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport
from appbrand.patching.changeset import ChangeSet


@dataclass
class RebrandContext:
    """
    Maintains the state of a single rebrand session.

    Initialized by the RebrandPipeline and enriched by each patcher in turn.
    """
    config: RebrandConfig                  # Identity being applied
    changes: ChangeSet                     # Staged edits, moves and prunes
    reports: List[StepReport] = field(default_factory=list)  # One per patcher, in run order
    committed: bool = False                # Flag set once the change set hit the disk
    tools_run: List[str] = field(default_factory=list)       # External commands that succeeded

    @property
    def skipped(self) -> List[StepReport]:
        return [r for r in self.reports if not r.success]
