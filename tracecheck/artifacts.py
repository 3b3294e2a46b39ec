"""Artifact records and per-document header validation.

Every spec, plan and task document carries a header with at least ``id``,
``type`` and ``issue``. ``validate_header`` turns one decoded header into
either an immutable ArtifactRecord or the full list of problems found in it.

Rules (all evaluated, none short-circuit the others):
  1. id, type, issue present and non-blank
  2. type equals the tier of the directory the file was found in
  3. id is the tier prefix (SPEC-, PLAN-, TASK-) followed by a discriminator
  4. specs have an empty parentId; plans and tasks have a non-empty one
  5. issue coerces losslessly to an integer

A rule whose input field is missing is skipped, since rule 1 already reported it.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

REQUIRED_FIELDS = ("id", "type", "issue")

_INT_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)$")


class Tier(Enum):
    SPEC = "spec"
    PLAN = "plan"
    TASK = "task"

    @property
    def prefix(self) -> str:
        return self.value.upper() + "-"

    @property
    def directory(self) -> str:
        return self.value + "s"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class ArtifactRecord:
    """A validated spec, plan or task. parent_id is "" for specs."""
    id: str
    tier: Tier
    issue: int
    parent_id: str
    links: tuple[str, ...] = ()
    source: str = ""


@dataclass
class HeaderValidation:
    """Outcome of validating one header: a record, or the reasons there is none."""
    record: Optional[ArtifactRecord] = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.record is not None


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def coerce_issue(value: Any) -> Optional[int]:
    """Return ``value`` as an int when that loses nothing, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        s = value.strip()
        if _INT_RE.match(s):
            return int(s)
        if _DECIMAL_RE.match(s):
            d = Decimal(s)
            if d == d.to_integral_value():
                return int(d)
    return None


def normalize_links(value: Any) -> Optional[tuple[str, ...]]:
    """Normalize the optional ``links`` field; None means the shape is unusable."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        out = []
        for item in value:
            if isinstance(item, (dict, list, tuple)) or item is None:
                return None
            text = str(item).strip()
            if text:
                out.append(text)
        return tuple(out)
    return None


def validate_header(header: dict[str, Any], filename: str, expected_tier: Tier) -> HeaderValidation:
    """Check one decoded header against the rules for ``expected_tier``."""
    result = HeaderValidation()

    missing = [f for f in REQUIRED_FIELDS if is_missing(header.get(f))]
    if missing:
        result.errors.append(f"{filename}: Missing required fields: {', '.join(missing)}")

    declared_type = header.get("type")
    if "type" not in missing and _as_text(declared_type) != expected_tier.value:
        result.errors.append(
            f"{filename}: Expected type '{expected_tier.value}', got '{_as_text(declared_type)}'"
        )

    artifact_id = _as_text(header.get("id"))
    if "id" not in missing and not artifact_id.startswith(expected_tier.prefix):
        result.errors.append(
            f"{filename}: ID must start with '{expected_tier.prefix}', got '{artifact_id}'"
        )
    elif "id" not in missing and artifact_id == expected_tier.prefix:
        result.errors.append(f"{filename}: ID '{artifact_id}' has nothing after the '{expected_tier.prefix}' prefix")

    parent_id = _as_text(header.get("parentId"))
    if expected_tier is Tier.SPEC:
        if parent_id:
            result.errors.append(f"{filename}: Specs should have empty parentId, got '{parent_id}'")
        parent_id = ""
    elif not parent_id:
        result.errors.append(f"{filename}: {expected_tier.value} must have parentId")

    issue = None
    if "issue" not in missing:
        issue = coerce_issue(header.get("issue"))
        if issue is None:
            result.errors.append(f"{filename}: issue must be an integer, got '{_as_text(header.get('issue'))}'")

    links = normalize_links(header.get("links"))
    if links is None:
        result.warnings.append(f"{filename}: links should be a list of artifact ids; ignoring it")
        links = ()

    if not result.errors:
        result.record = ArtifactRecord(
            id=artifact_id,
            tier=expected_tier,
            issue=issue,
            parent_id=parent_id,
            links=links,
            source=filename,
        )
    return result
