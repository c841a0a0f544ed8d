#!/usr/bin/env python3
"""
APPBRAND CLI - Single Entry Point
---------------------------------
Runs with no arguments: reads appbrand.yaml from the current directory
and rebrands the Flutter project around it. The optional flags only
change where things are read from and whether anything is written.

Exit status: 0 on success, 1 on any fatal error.

Author: AppBrand Team
Date: 2026-10-19
"""

import sys
import argparse
from typing import List, Optional

from appbrand.artifacts import rename_release_apk
from appbrand.cli.formatter import BrandFormatter, console
from appbrand.core.engine import RebrandEngine
from appbrand.core.errors import AppBrandError

VERSION = "1.0.0"


class AppBrandCLI:
    """
    CLI wrapper that translates the invocation into Engine actions.
    Provides per-step feedback, optional diffs and the final report.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="appbrand",
            description="AppBrand - propagate app name, flavor, package id and version across a Flutter project",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = BrandFormatter()
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=f"appbrand v{VERSION}")
        self.parser.add_argument("--project-root", default=".", help="Flutter project root (default: current directory)")
        self.parser.add_argument("--config", default=None, help="Configuration document (default: <project-root>/appbrand.yaml)")
        self.parser.add_argument("--dry-run", action="store_true", help="Stage and report changes without writing")
        self.parser.add_argument("--diff", action="store_true", help="Show a unified diff of every staged file")
        self.parser.add_argument("--skip-tools", action="store_true", help="Do not run the icon and dependency tools")
        self.parser.add_argument("--rename-apk", action="store_true", help="Only rename the release APK with a timestamp")

    def _rename_apk(self, args: argparse.Namespace) -> int:
        self.formatter.print_header("Release Artifact", VERSION)
        target = rename_release_apk(args.project_root)
        console.print(f"[bold green]APK renamed to:[/bold green] {target}")
        return 0

    def _rebrand(self, args: argparse.Namespace) -> int:
        self.formatter.print_header("Project Rebrand", VERSION)

        engine = RebrandEngine(args.project_root, args.config)
        context = engine.run(
            dry_run=args.dry_run,
            run_tools=not args.skip_tools,
            on_step=self.formatter.show_step,
            on_tool=self.formatter.show_tool,
        )

        if args.diff:
            for path, old, new in context.changes.diffs():
                self.formatter.display_diff(path, old, new)

        self.formatter.print_final_table(context.reports)
        self.formatter.print_summary(engine.generate_summary(context), args.dry_run)
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        try:
            if args.rename_apk:
                return self._rename_apk(args)
            return self._rebrand(args)
        except (AppBrandError, OSError) as e:
            self.formatter.print_error(str(e))
            return 1


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(AppBrandCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
