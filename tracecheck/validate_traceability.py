#!/usr/bin/env python3
"""Traceability gate: validate the Spec -> Plan -> Task chain.

Checks:
  1. Every document header is well formed (id, type, issue, parentId rules)
  2. Every plan's parentId names an existing spec
  3. Every task's parentId names an existing plan
  4. Every issue with plans/tasks has exactly one spec

All problems are collected and reported together. The exit code is the CI
verdict.

Usage:
  python -m tracecheck.validate_traceability \\
    [--root .] [--specs-dir specs] [--plans-dir plans] [--tasks-dir tasks] \\
    [--report traceability_report.json] [--verbose] [--log-file trace.log]

Exit codes:
  0  all traceability chains are valid
  1  validation errors found
  2  fatal error (unreadable directory, unexpected failure)
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from tracecheck import log
from tracecheck.graph_loader import TierLayout, TraceabilityGraph, load_graph
from tracecheck.grouping import check_issue_grouping
from tracecheck.integrity import check_parent_references
from tracecheck.validation_result import ValidationResult

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_FATAL = 2


@dataclass
class TraceabilityReport:
    graph: TraceabilityGraph
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    fatal: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.fatal is None and not self.errors

    @property
    def total_issues(self) -> int:
        return len({s.issue for s in self.graph.specs.values()})

    @property
    def exit_code(self) -> int:
        if self.fatal is not None:
            return EXIT_FATAL
        return EXIT_VALID if self.valid else EXIT_INVALID


def validate_traceability(root: Optional[Path] = None, layout: TierLayout = TierLayout()) -> TraceabilityReport:
    """Load the graph, run both checkers, and collect every error in order."""
    try:
        loaded = load_graph(root, layout)
        result = ValidationResult()
        result.merge(loaded.result)
        result.extend(check_parent_references(loaded.graph))
        result.extend(check_issue_grouping(loaded.graph))
    except Exception as e:
        message = f"Validation failed: {e}"
        if log.VERBOSE:
            log.log(message, "ERROR")
        return TraceabilityReport(graph=TraceabilityGraph(), errors=[message], fatal=message)
    return TraceabilityReport(graph=loaded.graph, errors=result.errors, warnings=result.warnings)


def render_summary(report: TraceabilityReport) -> str:
    if report.fatal is not None:
        return f"FATAL: {report.fatal}"

    counts = report.graph.counts()
    lines = [
        "Traceability Validation Summary",
        "",
        f"  Specs: {counts['specs']}",
        f"  Plans: {counts['plans']}",
        f"  Tasks: {counts['tasks']}",
        f"  Total Issues: {report.total_issues}",
        "",
    ]
    result = ValidationResult()
    result.extend(report.errors, report.warnings)
    lines.append(result.summary(success_line="✓ All traceability chains are valid"))
    if not result.ok:
        lines.append("✗ Traceability validation failed")
    return "\n".join(lines)


def report_to_dict(report: TraceabilityReport) -> dict:
    return {
        "valid": report.valid,
        "errors": list(report.errors),
        "warnings": list(report.warnings),
        "fatal": report.fatal,
        "counts": report.graph.counts(),
        "total_issues": report.total_issues,
    }


@dataclass
class DoctorCheck:
    """One line of a repository health check."""
    name: str
    status: str  # pass | fail | warn
    message: str
    fix: Optional[str] = None


def doctor_check(root: Optional[Path] = None, layout: TierLayout = TierLayout()) -> DoctorCheck:
    name = "Traceability Validation"
    report = validate_traceability(root, layout)
    if report.fatal is not None:
        return DoctorCheck(
            name=name,
            status="warn",
            message=f"Could not validate traceability: {report.fatal}",
            fix=f"Check that {layout.specs_dir}/, {layout.plans_dir}/, {layout.tasks_dir}/ are readable directories",
        )
    if not report.valid:
        return DoctorCheck(
            name=name,
            status="fail",
            message=f"{len(report.errors)} traceability errors found",
            fix="Run: python -m tracecheck.validate_traceability to see details",
        )
    return DoctorCheck(name=name, status="pass", message="All traceability chains are valid")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate Spec -> Plan -> Task traceability.")
    parser.add_argument("--root", default=".", help="Directory containing the tier directories (default: cwd)")
    parser.add_argument("--specs-dir", default=TierLayout.specs_dir, help="Spec directory, relative to --root")
    parser.add_argument("--plans-dir", default=TierLayout.plans_dir, help="Plan directory, relative to --root")
    parser.add_argument("--tasks-dir", default=TierLayout.tasks_dir, help="Task directory, relative to --root")
    parser.add_argument("--report", help="Write validation report JSON to this path")
    parser.add_argument("--verbose", action="store_true", help="Log each tier and document as it is loaded")
    parser.add_argument("--log-file", help="Append log lines to this file")
    args = parser.parse_args(argv)

    log.configure(verbose=args.verbose, log_file=args.log_file)
    layout = TierLayout(specs_dir=args.specs_dir, plans_dir=args.plans_dir, tasks_dir=args.tasks_dir)

    try:
        report = validate_traceability(Path(args.root), layout)
        print(render_summary(report))

        if args.report:
            with open(args.report, "w", encoding="utf-8") as f:
                json.dump(report_to_dict(report), f, ensure_ascii=False, indent=2)
            print(f"\nReport written to {args.report}")
    except Exception as e:
        print(f"FATAL: {e}")
        return EXIT_FATAL

    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
