#!/usr/bin/env python3
"""
APPBRAND CHANGESET - The Staging Area
-------------------------------------
Patchers never touch the disk. They read through the ChangeSet (which
serves staged content before disk content, so later steps see earlier
edits) and stage writes, deletions and directory pruning. The engine
commits everything in one pass once the whole run has been computed.

Author: AppBrand Team
Date: 2026-10-19
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger("appbrand.changeset")

TMP_SUFFIX = ".appbrand.tmp"


@dataclass
class FileEdit:
    """A full-content replacement of one file."""
    path: str                   # Project-relative POSIX path
    original: Optional[str]     # None when the file is being created
    updated: str


@dataclass
class PruneRequest:
    """Remove emptied directories from `start` upward, staying below `stop`."""
    start: str
    stop: str


def read_text(path: Path) -> str:
    # newline='' keeps CRLF files byte-identical outside patched regions
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


class ChangeSet:
    """
    Ordered record of planned edits for a single project root.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.edits: Dict[str, FileEdit] = {}
        self.deletions: List[str] = []
        self.prunes: List[PruneRequest] = []

    def _key(self, rel_path) -> str:
        return Path(rel_path).as_posix()

    def resolve(self, rel_path) -> Path:
        return self.root / self._key(rel_path)

    def exists(self, rel_path) -> bool:
        key = self._key(rel_path)
        if key in self.deletions:
            return False
        return key in self.edits or self.resolve(key).is_file()

    def read(self, rel_path) -> Optional[str]:
        """Staged content if any, disk content otherwise, None if absent."""
        key = self._key(rel_path)
        if key in self.deletions:
            return None
        if key in self.edits:
            return self.edits[key].updated
        full_path = self.resolve(key)
        if not full_path.is_file():
            return None
        return read_text(full_path)

    def write(self, rel_path, content: str) -> bool:
        """Stages `content` for `rel_path`. Returns False when nothing changes."""
        key = self._key(rel_path)
        current = self.read(key)
        if current == content:
            return False
        if key in self.deletions:
            self.deletions.remove(key)
        if key in self.edits:
            self.edits[key].updated = content
        else:
            self.edits[key] = FileEdit(path=key, original=current, updated=content)
        return True

    def delete(self, rel_path):
        key = self._key(rel_path)
        self.edits.pop(key, None)
        if key not in self.deletions:
            self.deletions.append(key)

    def prune(self, start, stop):
        self.prunes.append(PruneRequest(start=self._key(start), stop=self._key(stop)))

    @property
    def is_empty(self) -> bool:
        return not (self.edits or self.deletions)

    def diffs(self) -> List[Tuple[str, str, str]]:
        """(path, old, new) triples for every staged content change."""
        results = []
        for edit in self.edits.values():
            results.append((edit.path, edit.original or "", edit.updated))
        for key in self.deletions:
            full_path = self.resolve(key)
            old = read_text(full_path) if full_path.is_file() else ""
            results.append((key, old, ""))
        return results

    def commit(self) -> List[str]:
        """
        Applies staged operations: writes, then deletions, then pruning.
        Returns the project-relative paths touched.
        """
        touched = []
        for edit in self.edits.values():
            self._atomic_write(self.resolve(edit.path), edit.updated)
            touched.append(edit.path)

        for key in self.deletions:
            full_path = self.resolve(key)
            if full_path.is_file():
                full_path.unlink()
                touched.append(key)

        for request in self.prunes:
            for removed in prune_empty_dirs(self.resolve(request.start), self.resolve(request.stop)):
                logger.info(f"Removed empty directory {removed.relative_to(self.root).as_posix()}")

        return touched

    def _atomic_write(self, target_path: Path, content: str):
        target_path.parent.mkdir(parents=True, exist_ok=True)
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_name(target_path.name + TMP_SUFFIX)
        try:
            with open(temp_file, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists(): temp_file.unlink()
            raise IOError(f"Atomic write failed for {target_path}: {str(e)}")


def prune_empty_dirs(start: Path, stop: Path) -> List[Path]:
    """
    Deletes `start` and its ancestors while they are empty.
    Never removes `stop` or anything outside it.
    """
    removed = []
    stop = stop.resolve()
    current = start.resolve()
    while current != stop and stop in current.parents:
        if not current.is_dir() or any(current.iterdir()):
            break
        current.rmdir()
        removed.append(current)
        current = current.parent
    return removed
