"""Issue grouping: each issue with plans or tasks has exactly one spec.

Issues are the external tracking numbers shared by a spec and its descendants.
A spec written ahead of any planning is fine on its own; two specs claiming the
same issue never are.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tracecheck.artifacts import Tier
from tracecheck.graph_loader import TraceabilityGraph


@dataclass
class IssueGroup:
    specs: list[str] = field(default_factory=list)
    plans: list[str] = field(default_factory=list)
    tasks: list[str] = field(default_factory=list)

    @property
    def has_descendants(self) -> bool:
        return bool(self.plans or self.tasks)

    def ids_for(self, tier: Tier) -> list[str]:
        return {Tier.SPEC: self.specs, Tier.PLAN: self.plans, Tier.TASK: self.tasks}[tier]


def build_issue_groups(graph: TraceabilityGraph) -> dict[int, IssueGroup]:
    """Bucket every artifact id under its issue, in first-seen order."""
    groups: dict[int, IssueGroup] = {}
    for tier in Tier:
        for artifact_id, rec in graph.collection(tier).items():
            group = groups.setdefault(rec.issue, IssueGroup())
            group.ids_for(tier).append(artifact_id)
    return groups


def check_issue_grouping(graph: TraceabilityGraph) -> list[str]:
    errors: list[str] = []
    for issue, group in build_issue_groups(graph).items():
        if not group.specs and group.has_descendants:
            errors.append(f"Issue #{issue} has plans/tasks but no spec")
        if len(group.specs) > 1:
            errors.append(f"Issue #{issue} has multiple specs: {', '.join(group.specs)}")
    return errors
