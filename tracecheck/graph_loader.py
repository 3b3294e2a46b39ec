"""Load spec/plan/task documents into an immutable traceability graph.

Each tier lives in its own directory (``specs/``, ``plans/``, ``tasks/`` by
default). A directory that does not exist contributes nothing, so a repo can
adopt the convention one tier at a time. Every document is extracted and
validated on its own; a bad file is recorded and skipped, never fatal.

Cross-record checks (dangling parents, issue grouping) live in integrity.py and
grouping.py and run over the finished graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from tracecheck.artifacts import ArtifactRecord, Tier, validate_header
from tracecheck.frontmatter import HeaderParseError, read_document
from tracecheck.log import debug
from tracecheck.validation_result import ValidationResult

DOCUMENT_SUFFIX = ".md"
SKIPPED_FILENAMES = {"readme.md", "index.md"}


class DirectoryState(Enum):
    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class TierLayout:
    """Directory names for each tier, relative to the scan root."""
    specs_dir: str = Tier.SPEC.directory
    plans_dir: str = Tier.PLAN.directory
    tasks_dir: str = Tier.TASK.directory

    def directory_for(self, tier: Tier) -> str:
        return {
            Tier.SPEC: self.specs_dir,
            Tier.PLAN: self.plans_dir,
            Tier.TASK: self.tasks_dir,
        }[tier]


@dataclass(frozen=True)
class TierListing:
    tier: Tier
    path: Path
    state: DirectoryState
    files: tuple[Path, ...] = ()


@dataclass(frozen=True)
class TraceabilityGraph:
    """The three id-keyed collections. Built once per run, never mutated."""
    specs: Mapping[str, ArtifactRecord] = field(default_factory=lambda: MappingProxyType({}))
    plans: Mapping[str, ArtifactRecord] = field(default_factory=lambda: MappingProxyType({}))
    tasks: Mapping[str, ArtifactRecord] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_records(cls, records) -> "TraceabilityGraph":
        """Build a graph from an iterable of records; later ids overwrite earlier ones."""
        buckets: dict[Tier, dict[str, ArtifactRecord]] = {t: {} for t in Tier}
        for rec in records:
            buckets[rec.tier][rec.id] = rec
        return cls(
            specs=MappingProxyType(buckets[Tier.SPEC]),
            plans=MappingProxyType(buckets[Tier.PLAN]),
            tasks=MappingProxyType(buckets[Tier.TASK]),
        )

    def collection(self, tier: Tier) -> Mapping[str, ArtifactRecord]:
        return {Tier.SPEC: self.specs, Tier.PLAN: self.plans, Tier.TASK: self.tasks}[tier]

    def counts(self) -> dict[str, int]:
        return {"specs": len(self.specs), "plans": len(self.plans), "tasks": len(self.tasks)}

    def __len__(self) -> int:
        return len(self.specs) + len(self.plans) + len(self.tasks)


@dataclass
class GraphLoad:
    graph: TraceabilityGraph
    result: ValidationResult
    listings: list[TierListing]


def is_artifact_file(path: Path) -> bool:
    name = path.name.lower()
    if not name.endswith(DOCUMENT_SUFFIX):
        return False
    if name in SKIPPED_FILENAMES or name.startswith("_") or "template" in name:
        return False
    return path.is_file()


def list_tier_directory(path: Path, tier: Tier) -> TierListing:
    """List the candidate documents of one tier directory.

    A missing directory is ABSENT, not an error. A path that exists but is not a
    directory, or cannot be listed, raises (fatal for the run).
    """
    if not path.exists():
        return TierListing(tier=tier, path=path, state=DirectoryState.ABSENT)
    if not path.is_dir():
        raise NotADirectoryError(f"{path} exists but is not a directory")
    files = tuple(sorted((p for p in path.iterdir() if is_artifact_file(p)), key=lambda p: p.name))
    return TierListing(tier=tier, path=path, state=DirectoryState.PRESENT, files=files)


def load_listing(listing: TierListing, result: ValidationResult) -> dict[str, ArtifactRecord]:
    """Extract and validate every file of one tier listing."""
    records: dict[str, ArtifactRecord] = {}
    if listing.state is DirectoryState.ABSENT:
        debug(f"{listing.tier.label}s: directory {listing.path} not found, skipping")
        return records

    debug(f"{listing.tier.label}s: {len(listing.files)} document(s) in {listing.path}")
    for path in listing.files:
        try:
            header, _body = read_document(path)
        except HeaderParseError as e:
            result.error(f"Failed to parse {path.name}: {e}")
            continue

        outcome = validate_header(header, path.name, listing.tier)
        result.extend(outcome.errors, outcome.warnings)
        if not outcome.ok:
            debug(f"  {path.name}: rejected ({len(outcome.errors)} problem(s))")
            continue

        rec = outcome.record
        previous = records.get(rec.id)
        if previous is not None:
            result.warn(
                f"Duplicate {listing.tier.value} id {rec.id} in {path.name} "
                f"(previously defined in {previous.source})"
            )
        records[rec.id] = rec
        debug(f"  {path.name}: {rec.id} (issue #{rec.issue})")
    return records


def load_graph(root: Optional[Path] = None, layout: TierLayout = TierLayout()) -> GraphLoad:
    """Scan the three tier directories under ``root`` (default: cwd)."""
    root = Path.cwd() if root is None else Path(root)
    result = ValidationResult()
    listings = []
    collections: dict[Tier, dict[str, ArtifactRecord]] = {}
    for tier in Tier:
        listing = list_tier_directory(root / layout.directory_for(tier), tier)
        listings.append(listing)
        collections[tier] = load_listing(listing, result)

    graph = TraceabilityGraph(
        specs=MappingProxyType(collections[Tier.SPEC]),
        plans=MappingProxyType(collections[Tier.PLAN]),
        tasks=MappingProxyType(collections[Tier.TASK]),
    )
    return GraphLoad(graph=graph, result=result, listings=listings)
