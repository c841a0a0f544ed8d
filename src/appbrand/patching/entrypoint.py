#!/usr/bin/env python3
"""
APPBRAND ENTRY POINT RELOCATOR - The Mover
------------------------------------------
Android requires MainActivity to live in the directory its package
declaration names. When the package identifier changes, the file has to
follow it:

    kotlin/com/old/app/MainActivity.kt  ->  kotlin/com/new/app/MainActivity.kt

The relocator rewrites the package line, stages the file at its new home,
stages removal of the old copy and asks the ChangeSet to prune the
directories that the move leaves empty. Pruning never climbs above the
language root.

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging
from pathlib import PurePosixPath
from typing import List, Optional, Tuple

from appbrand.core.config import RebrandConfig
from appbrand.core.models import PackagePath, StepReport, MOVED, SKIPPED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet

logger = logging.getLogger("appbrand.patching.entrypoint")

# Searched in order; the first one present on disk wins
LANGUAGE_ROOTS = (
    "android/app/src/main/kotlin",
    "android/app/src/main/java",
)

ENTRY_POINT_NAME = re.compile(r'^MainActivity\.(kt|java)$')


class EntryPointRelocator:
    """
    Moves the Android entry point so its path mirrors its package.
    """

    PACKAGE_LINE = re.compile(r'^(?P<head>[ \t]*package[ \t]+)(?P<value>[\w.]+)', re.MULTILINE)

    def __init__(self, roots=LANGUAGE_ROOTS):
        self.roots = tuple(roots)

    def find_root(self, changes: ChangeSet) -> Optional[str]:
        for root in self.roots:
            if changes.resolve(root).is_dir():
                return root
        return None

    def find_candidates(self, changes: ChangeSet, root: str) -> List[PurePosixPath]:
        """Entry point files below `root`, as project-relative paths in sorted order."""
        base = changes.resolve(root)
        found = []
        for path in base.rglob("*"):
            if path.is_file() and not path.is_symlink() and ENTRY_POINT_NAME.match(path.name):
                found.append(PurePosixPath(path.relative_to(changes.root).as_posix()))
        return sorted(found)

    def select(self, changes: ChangeSet, root: str, candidates: List[PurePosixPath]) -> Tuple[PurePosixPath, str, "re.Match"]:
        """
        Picks the candidate whose location already agrees with its declared
        package; falls back to the first candidate in sorted order.
        """
        parsed = []
        for candidate in candidates:
            text = changes.read(candidate)
            match = self.PACKAGE_LINE.search(text) if text is not None else None
            parsed.append((candidate, text, match))

        for candidate, text, match in parsed:
            if match is None:
                continue
            try:
                expected = PurePosixPath(root) / PackagePath(match.group('value')).to_path()
            except ValueError:
                continue
            if candidate.parent == expected:
                return candidate, text, match
        return parsed[0]

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        report = StepReport(artifact="Entry point")

        root = self.find_root(changes)
        if root is None:
            logger.warning(f"No Android source root found (looked for {', '.join(self.roots)})")
            report.status = SKIPPED
            report.note("source root not found")
            return report

        candidates = self.find_candidates(changes, root)
        if not candidates:
            logger.warning(f"No MainActivity.kt or MainActivity.java under {root}")
            report.status = SKIPPED
            report.note("entry point not found")
            return report
        if len(candidates) > 1:
            logger.warning(f"Multiple entry points under {root}: {', '.join(str(c) for c in candidates)}")

        source, text, match = self.select(changes, root, candidates)
        report.path = str(source)
        if match is None:
            logger.warning(f"No package declaration in {source}; entry point left untouched")
            report.status = SKIPPED
            report.note("package declaration not found")
            return report

        old_package = match.group('value')
        try:
            PackagePath(old_package)
        except ValueError as e:
            logger.warning(f"{source}: {e}; entry point left untouched")
            report.status = SKIPPED
            report.note("package declaration unreadable")
            return report

        new_package = config.package_path
        destination = PurePosixPath(root) / new_package.to_path() / source.name
        patched = text[:match.start('value')] + new_package.identifier + text[match.end('value'):]

        if destination == source:
            report.status = UPDATED if changes.write(source, patched) else UNCHANGED
            if report.status == UPDATED:
                report.note(f"package: {old_package} -> {new_package.identifier}")
            return report

        if changes.exists(destination):
            existing = changes.read(destination)
            if existing != patched:
                logger.error(f"{destination} already exists with different content; entry point not moved")
                report.status = SKIPPED
                report.note(f"destination occupied: {destination}")
                return report

        changes.write(destination, patched)
        changes.delete(source)
        changes.prune(source.parent, root)

        report.path = str(destination)
        report.status = MOVED
        report.note(f"package: {old_package} -> {new_package.identifier}")
        report.note(f"moved: {source} -> {destination}")
        return report
