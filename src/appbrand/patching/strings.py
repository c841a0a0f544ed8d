#!/usr/bin/env python3
"""
APPBRAND STRING RESOURCES
-------------------------
Guarantees res/values/strings.xml carries an up-to-date app_name entry.
Creates the table when missing, replaces the entry in place when present,
or inserts it just before </resources>. Re-running never duplicates.

Author: AppBrand Team
Date: 2026-10-19
"""

import re
import logging

from appbrand.core.config import RebrandConfig
from appbrand.core.models import StepReport, CREATED, UNCHANGED, UPDATED
from appbrand.patching.changeset import ChangeSet

logger = logging.getLogger("appbrand.patching.strings")

STRINGS_FILE = "android/app/src/main/res/values/strings.xml"
APP_NAME_KEY = "app_name"

ENTRY_INDENT = "    "


def escape_android_string(value: str) -> str:
    """Escapes a literal for use as <string> content in an Android resource table."""
    value = value.replace("\\", "\\\\")
    value = value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return value.replace("'", "\\'").replace('"', '\\"')


def render_table(name: str) -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<resources>\n"
        f'{ENTRY_INDENT}<string name="{APP_NAME_KEY}">{escape_android_string(name)}</string>\n'
        "</resources>\n"
    )


class StringResourceWriter:
    """Owner of the display name on Android."""

    ENTRY = re.compile(
        r'(?P<open><string\s+name\s*=\s*(["\'])' + APP_NAME_KEY + r'\2[^>]*(?<!/)>)(?P<value>.*?)(?P<close></string>)',
        re.DOTALL,
    )
    SELF_CLOSED = re.compile(r'<string\s+name\s*=\s*(["\'])' + APP_NAME_KEY + r'\1[^>]*/>')
    CLOSING = re.compile(r'(?P<indent>[ \t]*)</resources>')

    def __init__(self, target: str = STRINGS_FILE):
        self.target = target

    def apply(self, changes: ChangeSet, config: RebrandConfig) -> StepReport:
        report = StepReport(artifact="String resources", path=self.target)
        value = escape_android_string(config.application_name)

        text = changes.read(self.target)
        if text is None:
            changes.write(self.target, render_table(config.application_name))
            logger.info(f"Created {self.target}")
            report.status = CREATED
            report.note(f"{APP_NAME_KEY}: {config.application_name}")
            return report

        match = self.ENTRY.search(text)
        if match:
            text = text[:match.start('value')] + value + text[match.end('value'):]
        else:
            entry = f'<string name="{APP_NAME_KEY}">{value}</string>'
            empty = self.SELF_CLOSED.search(text)
            if empty:
                text = text[:empty.start()] + entry + text[empty.end():]
            else:
                closing = None
                for closing in self.CLOSING.finditer(text):
                    pass
                if closing is None:
                    # Not a resource table we can extend; rebuild from scratch
                    logger.warning(f"{self.target} has no </resources> tag; rewriting it")
                    text = render_table(config.application_name)
                else:
                    line_start = text.rfind("\n", 0, closing.start()) + 1
                    if text[line_start:closing.start()].strip():
                        # </resources> shares its line with other content
                        text = text[:closing.start()] + entry + text[closing.start():]
                    else:
                        newline = "\r\n" if "\r\n" in text else "\n"
                        text = text[:line_start] + ENTRY_INDENT + entry + newline + text[line_start:]

        report.note(f"{APP_NAME_KEY}: {config.application_name}")
        report.status = UPDATED if changes.write(self.target, text) else UNCHANGED
        return report
