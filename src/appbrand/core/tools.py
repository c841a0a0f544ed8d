#!/usr/bin/env python3
"""
APPBRAND TOOLS - External Build Steps
-------------------------------------
Runs the icon generator and the dependency resolver after the new
identity has been committed. Only the exit status matters; output is
captured so it can be surfaced when a tool fails.

Author: AppBrand Team
Date: 2026-10-19
"""

import shlex
import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from appbrand.core.errors import ToolError

logger = logging.getLogger("appbrand.tools")

# (argv, cwd) -> CompletedProcess carrying returncode and merged stdout/stderr
Runner = Callable[[List[str], Path], "subprocess.CompletedProcess"]


def _default_runner(argv: List[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        argv,
        cwd=str(cwd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )


class ToolRunner:
    """Invokes external commands non-interactively inside the project root."""

    def __init__(self, project_root: Path, runner: Optional[Runner] = None):
        self.project_root = Path(project_root)
        self.runner = runner or _default_runner

    def run(self, command: str) -> str:
        argv = shlex.split(command)
        if not argv:
            raise ToolError(command, -1, "Empty command")

        logger.info(f"Running: {command}")
        try:
            result = self.runner(argv, self.project_root)
        except FileNotFoundError as e:
            raise ToolError(command, 127, str(e))

        output = result.stdout or ""
        if result.returncode != 0:
            raise ToolError(command, result.returncode, output)
        return output
