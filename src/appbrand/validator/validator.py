#!/usr/bin/env python3
"""
APPBRAND VALIDATOR - The Judge
------------------------------
The Validator is the final safety gate before commit. It performs a
"Pre-Flight" check on every staged artifact whose format has a real
parser (XML resources and manifests, the YAML project manifest) and
refuses the whole change set if any of them no longer parses.

Author: AppBrand Team
Date: 2026-10-19
"""

import logging
import xml.etree.ElementTree as ET
from typing import List, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from appbrand.patching.changeset import ChangeSet

# Standardized logging for audit trails
logger = logging.getLogger("appbrand.validator")


class BrandValidator:
    """
    Enforces well-formedness on staged artifacts.
    Provides the 'Self-Abort' signal the engine uses to skip the commit.
    """

    XML_SUFFIXES = (".xml", ".plist")
    YAML_SUFFIXES = (".yaml", ".yml")

    def __init__(self):
        self.yaml = YAML(typ='safe')

    def validate_artifact(self, path: str, content: str) -> Tuple[bool, str]:
        """Checks a single staged document."""
        lowered = path.lower()

        if lowered.endswith(self.XML_SUFFIXES):
            try:
                ET.fromstring(content.lstrip('\ufeff').encode('utf-8'))
            except ET.ParseError as e:
                return False, f"Validation Failed: {path} is not well-formed XML ({e})."
            return True, f"{path} is well-formed XML."

        if lowered.endswith(self.YAML_SUFFIXES):
            try:
                doc = self.yaml.load(content)
            except YAMLError as e:
                return False, f"Validation Failed: {path} is not valid YAML ({e})."
            if not isinstance(doc, dict):
                return False, f"Validation Failed: {path} must hold a top-level mapping."
            return True, f"{path} is valid YAML."

        return True, f"{path}: no structural check for this format."

    def validate_changeset(self, changes: ChangeSet) -> Tuple[bool, List[str]]:
        """Validates every staged edit. Returns (all valid, failure messages)."""
        failures = []
        for edit in changes.edits.values():
            valid, message = self.validate_artifact(edit.path, edit.updated)
            if not valid:
                logger.error(message)
                failures.append(message)
            else:
                logger.debug(message)
        return not failures, failures
