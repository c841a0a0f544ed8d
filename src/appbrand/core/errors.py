#!/usr/bin/env python3
"""
APPBRAND ERRORS - Fatal Conditions
----------------------------------
Everything that must stop a rebrand run derives from AppBrandError.
Missing targets and unmatched patterns are NOT errors: patchers report
them as SKIPPED steps and the run continues.

Author: AppBrand Team
Date: 2026-10-19
"""

from typing import Optional


class AppBrandError(RuntimeError):
    """Base class for every fatal rebrand condition."""


class ConfigError(AppBrandError):
    """Configuration document missing, malformed, or holding an empty field."""


class FlavorError(ConfigError):
    """Flavor token outside the closed set of deployment flavors."""


class IdentifierError(ConfigError):
    """Package identifier that cannot be mapped onto a package path."""


class ValidationError(AppBrandError):
    """A staged artifact is no longer well-formed; nothing was written."""


class ArtifactError(AppBrandError):
    """Release artifact renaming could not proceed."""


class ToolError(AppBrandError):
    """An external build tool exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, output: Optional[str] = None):
        self.command = command
        self.returncode = returncode
        self.output = output or ""
        message = f"'{command}' failed with exit status {returncode}"
        if self.output.strip():
            message += f"\n{self.output.strip()}"
        super().__init__(message)
