"""Genealogy error types with human-readable feedback.

These errors are raised when an operation references viruses that do not
exist, re-creates an existing virus, or tries to remove the stem virus.
Every error is fatal to the call only: the genealogy is left exactly as it
was before the call.

Each error type carries the offending identifiers and can format itself as
a longer explanation via ``to_feedback()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches
from typing import Any


class GenealogyError(Exception):
    """Base class for genealogy operation failures.

    Subclasses must implement to_feedback() to explain what went wrong
    and how to fix the call.
    """

    def to_feedback(self) -> str:
        """Format error as an actionable explanation.

        Returns:
            Human-readable message explaining what's wrong and how to fix it.
        """
        raise NotImplementedError


@dataclass
class VirusNotFound(GenealogyError):
    """Raised when referencing a virus that is not registered.

    Also raised by create() when it receives an empty parent list, since
    only the stem virus may exist without ancestors.

    Attributes:
        virus_id: The identifier that was referenced but doesn't exist.
        available: Registered identifiers that could be used instead.
        context: Description of where the reference occurred.
    """

    virus_id: Any
    available: list[Any] = field(default_factory=list)
    context: str = ""

    def __post_init__(self) -> None:
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Virus '{self.virus_id}' not found"
        if self.context:
            msg += f" ({self.context})"
        return msg

    def _get_suggestions(self) -> list[str]:
        """Find similar identifiers that might be typos (string ids only)."""
        if not isinstance(self.virus_id, str):
            return []
        candidates = [a for a in self.available if isinstance(a, str)]
        return get_close_matches(self.virus_id, candidates, n=3, cutoff=0.6)

    def to_feedback(self) -> str:
        suggestions = self._get_suggestions()

        lines = [
            "## Reference Error: Virus Not Found",
            "",
            f"**You referenced**: `{self.virus_id}`",
        ]

        if self.context:
            lines.append(f"**Context**: {self.context}")

        lines.extend(
            [
                "",
                "**Problem**: This virus is not registered in the genealogy.",
                "",
            ]
        )

        if suggestions:
            lines.append("**Did you mean one of these?**")
            for s in suggestions:
                lines.append(f"  - `{s}`")
            lines.append("")

        if self.available:
            lines.append("**Registered ids**:")
            for a in self.available[:20]:
                lines.append(f"  - `{a}`")
            if len(self.available) > 20:
                lines.append(f"  - ... and {len(self.available) - 20} more")

        return "\n".join(lines)


@dataclass
class VirusAlreadyCreated(GenealogyError):
    """Raised when creating a virus whose identifier is already registered.

    Attributes:
        virus_id: The identifier that already exists.
    """

    virus_id: Any

    def __post_init__(self) -> None:
        super().__init__(f"Virus '{self.virus_id}' already created")

    def to_feedback(self) -> str:
        return f"""## Error: Virus Already Created

**You tried to create**: `{self.virus_id}`

**Problem**: A virus with this identifier is already registered.

**Solutions**:
1. Use a different identifier for the new virus
2. To add another parent to the existing virus, use connect() instead
"""


@dataclass
class TriedToRemoveStemVirus(GenealogyError):
    """Raised when remove() targets the stem virus.

    Attributes:
        virus_id: The stem virus identifier.
    """

    virus_id: Any

    def __post_init__(self) -> None:
        super().__init__(f"Virus '{self.virus_id}' is the stem virus and cannot be removed")

    def to_feedback(self) -> str:
        return f"""## Error: Tried To Remove Stem Virus

**You tried to remove**: `{self.virus_id}`

**Problem**: The stem virus is the root of the genealogy and lives as long as
the genealogy itself.

**Solution**: Remove descendants of the stem instead.
"""


@dataclass
class GenealogyCorruptionError(Exception):
    """Raised when consistency checks detect a corrupted genealogy.

    Unlike GenealogyError, this indicates a code bug (or a caller breaking
    the acyclicity contract through connect()) rather than a rejected call.

    Attributes:
        violations: List of consistency violations found.
        operation: Operation after which corruption was detected.
    """

    violations: list[str]
    operation: str = ""

    def __post_init__(self) -> None:
        msg = f"Genealogy corruption detected after {self.operation or 'unknown'} operation"
        if self.violations:
            msg += f": {len(self.violations)} violation(s)"
        super().__init__(msg)

    def __str__(self) -> str:
        lines = [f"Genealogy corruption detected after {self.operation or 'unknown'} operation:"]
        for v in self.violations[:5]:
            lines.append(f"  - {v}")
        if len(self.violations) > 5:
            lines.append(f"  - ... and {len(self.violations) - 5} more")
        return "\n".join(lines)
