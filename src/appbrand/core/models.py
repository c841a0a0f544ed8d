#!/usr/bin/env python3
"""
APPBRAND CORE MODELS
--------------------
Defines the fundamental data structures used across the AppBrand engine:
the package path bijection and the per-artifact step report.

Author: AppBrand Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import List, Optional

# Step statuses surfaced in the final report
UPDATED = "UPDATED"
UNCHANGED = "UNCHANGED"
SKIPPED = "SKIPPED"
CREATED = "CREATED"
MOVED = "MOVED"


@dataclass(frozen=True)
class PackagePath:
    """
    A reverse-DNS identifier and the directory hierarchy it implies.

    'com.acme.app' <-> 'com/acme/app'. Construction rejects empty
    segments so the mapping stays lossless in both directions.
    """
    identifier: str

    def __post_init__(self):
        segments = self.identifier.split(".")
        if not self.identifier or any(not s for s in segments):
            raise ValueError(f"Invalid package identifier '{self.identifier}': empty segment")
        if any("/" in s or "\\" in s for s in segments):
            raise ValueError(f"Invalid package identifier '{self.identifier}': path separator in segment")

    @property
    def segments(self) -> List[str]:
        return self.identifier.split(".")

    def to_path(self) -> PurePosixPath:
        return PurePosixPath(*self.segments)

    @classmethod
    def from_path(cls, path) -> "PackagePath":
        parts = PurePosixPath(path).parts
        if not parts or any(p in ("", ".", "..", "/") for p in parts):
            raise ValueError(f"Path '{path}' does not map onto a package identifier")
        return cls(".".join(parts))


@dataclass
class StepReport:
    """
    Outcome of one patcher against one artifact.

    Collected by the pipeline and rendered by the CLI formatter.
    """
    artifact: str                  # Human label, e.g. 'Build script'
    path: Optional[str] = None     # Project-relative path of the artifact
    status: str = UNCHANGED        # One of the module-level status constants
    messages: List[str] = field(default_factory=list)  # Per-field notes

    def note(self, message: str):
        self.messages.append(message)

    @property
    def success(self) -> bool:
        return self.status != SKIPPED
