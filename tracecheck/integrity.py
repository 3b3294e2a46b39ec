"""Referential integrity: every plan points at a spec, every task at a plan."""

from __future__ import annotations

from tracecheck.graph_loader import TraceabilityGraph


def check_parent_references(graph: TraceabilityGraph) -> list[str]:
    """Return one error per dangling parentId. The graph is not modified."""
    errors: list[str] = []
    for plan_id, plan in graph.plans.items():
        if plan.parent_id not in graph.specs:
            errors.append(f"Plan {plan_id} references non-existent spec: {plan.parent_id}")
    for task_id, task in graph.tasks.items():
        if task.parent_id not in graph.plans:
            errors.append(f"Task {task_id} references non-existent plan: {task.parent_id}")
    return errors
