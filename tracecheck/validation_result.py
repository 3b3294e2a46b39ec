"""Error/warning accumulator shared by every traceability phase.

Errors make a run invalid; warnings are reported but never change the verdict.
Nothing here raises: checks append and keep going so a single run reports the
complete set of problems.
"""

from __future__ import annotations


class ValidationResult:
    def __init__(self):
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def error(self, msg: str):
        self.errors.append(msg)

    def warn(self, msg: str):
        self.warnings.append(msg)

    def extend(self, errors=(), warnings=()):
        self.errors.extend(errors)
        self.warnings.extend(warnings)

    def merge(self, other: "ValidationResult"):
        self.extend(other.errors, other.warnings)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    def summary(self, success_line: str = "✓ All checks passed") -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not self.errors and not self.warnings:
            lines.append(success_line)
        elif not self.errors:
            lines.append(f"{success_line} ({len(self.warnings)} warnings)")
        return "\n".join(lines)
