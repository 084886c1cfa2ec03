"""Consistency checks for a virus genealogy.

Pure functions that read the genealogy through its public API and report
structural problems. They never modify the genealogy.

Checks:
- Stem virus has no parents
- Parent and child sets are mutually consistent, endpoints registered
- Non-stem viruses without parents (orphans left behind by remove())
- Acyclicity (connect() does not enforce it)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from virus_genealogy.graph.genealogy import VirusGenealogy

__all__ = [
    "ValidationCheck",
    "ValidationReport",
    "check_acyclic",
    "check_edge_symmetry",
    "check_orphans",
    "check_stem_is_parentless",
    "validate_genealogy",
]


@dataclass
class ValidationCheck:
    """Result of a single validation check.

    Attributes:
        name: Identifier for the check.
        severity: "pass", "warn", or "fail".
        message: Human-readable description of the result.
        details: Individual violation messages, if any.
    """

    name: str
    severity: Literal["pass", "warn", "fail"]
    message: str = ""
    details: list[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    """Aggregated results of validation checks.

    Attributes:
        checks: List of individual validation check results.
    """

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        """True if any check has severity 'fail'."""
        return any(c.severity == "fail" for c in self.checks)

    @property
    def has_warnings(self) -> bool:
        """True if any check has severity 'warn'."""
        return any(c.severity == "warn" for c in self.checks)

    @property
    def violations(self) -> list[str]:
        """Detail messages of every failed check."""
        return [d for c in self.checks if c.severity == "fail" for d in c.details]

    @property
    def summary(self) -> str:
        """Human-readable summary of all checks."""
        fails = [c for c in self.checks if c.severity == "fail"]
        warns = [c for c in self.checks if c.severity == "warn"]
        passes = [c for c in self.checks if c.severity == "pass"]

        parts: list[str] = []
        if fails:
            parts.append(f"{len(fails)} failed")
        if warns:
            parts.append(f"{len(warns)} warnings")
        if passes:
            parts.append(f"{len(passes)} passed")
        return ", ".join(parts)


def check_stem_is_parentless(genealogy: VirusGenealogy[Any]) -> ValidationCheck:
    """Verify the stem virus has no ancestors."""
    stem_id = genealogy.get_stem_id()
    parents = genealogy.get_parents(stem_id)
    if not parents:
        return ValidationCheck(
            name="stem_is_parentless",
            severity="pass",
            message=f"Stem virus '{stem_id}' has no parents",
        )
    return ValidationCheck(
        name="stem_is_parentless",
        severity="fail",
        message=f"Stem virus '{stem_id}' has {len(parents)} parent(s)",
        details=[f"Stem virus '{stem_id}' has parent '{p}'" for p in parents],
    )


def check_edge_symmetry(genealogy: VirusGenealogy[Any]) -> ValidationCheck:
    """Verify every child edge has a matching parent edge and vice versa.

    Also catches edges pointing at viruses that are no longer registered.
    """
    details: list[str] = []

    for virus_id in genealogy.virus_ids():
        for child_id in genealogy.get_children(virus_id):
            if not genealogy.exists(child_id):
                details.append(f"'{virus_id}' has unregistered child '{child_id}'")
            elif virus_id not in genealogy.get_parents(child_id):
                details.append(f"'{child_id}' is a child of '{virus_id}' but does not list it as parent")
        for parent_id in genealogy.get_parents(virus_id):
            if not genealogy.exists(parent_id):
                details.append(f"'{virus_id}' has unregistered parent '{parent_id}'")
            elif virus_id not in genealogy.get_children(parent_id):
                details.append(f"'{parent_id}' is a parent of '{virus_id}' but does not list it as child")

    if not details:
        return ValidationCheck(
            name="edge_symmetry",
            severity="pass",
            message=f"All {genealogy.edge_count()} edges are consistent",
        )
    return ValidationCheck(
        name="edge_symmetry",
        severity="fail",
        message=f"{len(details)} inconsistent edge(s)",
        details=details,
    )


def check_orphans(genealogy: VirusGenealogy[Any]) -> ValidationCheck:
    """Report non-stem viruses that have lost all of their parents.

    remove() does not cascade, so removing the only parent of a virus
    leaves it registered without ancestors. This is reported as a warning.
    """
    stem_id = genealogy.get_stem_id()
    orphans = [
        virus_id
        for virus_id in genealogy.virus_ids()
        if virus_id != stem_id and not genealogy.get_parents(virus_id)
    ]
    if not orphans:
        return ValidationCheck(
            name="orphans",
            severity="pass",
            message="Every non-stem virus has a parent",
        )
    return ValidationCheck(
        name="orphans",
        severity="warn",
        message=f"{len(orphans)} virus(es) without parents: {', '.join(str(o) for o in orphans[:5])}",
        details=[f"'{o}' has no parents" for o in orphans],
    )


def check_acyclic(genealogy: VirusGenealogy[Any]) -> ValidationCheck:
    """Verify child edges form a DAG using Kahn's algorithm."""
    virus_ids = genealogy.virus_ids()
    in_degree: dict[Any, int] = dict.fromkeys(virus_ids, 0)
    successors: dict[Any, list[Any]] = {}

    for virus_id in virus_ids:
        children = [c for c in genealogy.get_children(virus_id) if c in in_degree]
        successors[virus_id] = children
        for child_id in children:
            in_degree[child_id] += 1

    queue = deque(virus_id for virus_id, deg in in_degree.items() if deg == 0)
    processed = 0

    while queue:
        node = queue.popleft()
        processed += 1
        for successor in successors[node]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                queue.append(successor)

    if processed == len(virus_ids):
        return ValidationCheck(
            name="acyclic",
            severity="pass",
            message=f"Genealogy is acyclic ({len(virus_ids)} viruses)",
        )

    cycle_nodes = [virus_id for virus_id, deg in in_degree.items() if deg > 0]
    return ValidationCheck(
        name="acyclic",
        severity="fail",
        message=(
            f"Cycle detected involving {len(cycle_nodes)} viruses: "
            f"{', '.join(str(v) for v in cycle_nodes[:5])}"
        ),
        details=[f"'{v}' is on or behind a cycle" for v in cycle_nodes],
    )


def validate_genealogy(genealogy: VirusGenealogy[Any]) -> ValidationReport:
    """Run every consistency check and aggregate the results."""
    return ValidationReport(
        checks=[
            check_stem_is_parentless(genealogy),
            check_edge_symmetry(genealogy),
            check_orphans(genealogy),
            check_acyclic(genealogy),
        ]
    )
