"""Virus genealogy: a rooted DAG of viruses.

The genealogy is the single authority over its viruses. It owns the stem
virus, indexes every virus by identifier and performs all structural
mutation. Node ownership runs from parents to children; parents are only
weakly referenced, so a virus with several parents survives the removal of
any one of them.

Every operation either succeeds or raises leaving the genealogy exactly as
it was before the call:
- All identifiers are validated before anything is mutated
- The payload is constructed before the virus is registered
- Linking that fails partway is rolled back before re-raising

Acyclicity is a caller contract: connect() does not check whether the new
edge closes a cycle. Use validate_invariants() to detect one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from virus_genealogy.config import GenealogyConfig
from virus_genealogy.graph.errors import (
    GenealogyCorruptionError,
    TriedToRemoveStemVirus,
    VirusAlreadyCreated,
    VirusNotFound,
)
from virus_genealogy.graph.node import GenealogyNode, VirusLike
from virus_genealogy.graph.validation import validate_genealogy
from virus_genealogy.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

log = get_logger(__name__)

V = TypeVar("V", bound=VirusLike)


class VirusGenealogy(Generic[V]):
    """Registry and mutation engine for a genealogy of viruses.

    Attributes:
        _virus_type: Callable building a payload from an identifier.
        _stem: The stem (root) node; never removable.
        _nodes: Identifier to node index, in sync with the live node set.
        _config: Genealogy configuration.
    """

    def __init__(
        self,
        virus_type: Callable[[Any], V],
        stem_id: Hashable,
        *,
        config: GenealogyConfig | None = None,
    ) -> None:
        """Create a genealogy holding only the stem virus.

        Args:
            virus_type: Payload type (or factory) called with an identifier.
            stem_id: Identifier of the stem virus.
            config: Optional configuration; only check_invariants is read
                here. Apply its logging fields with config.configure_logging().

        Raises:
            Exception: Whatever *virus_type* raises for *stem_id*.
        """
        self._virus_type = virus_type
        self._config = config or GenealogyConfig()
        self._stem = GenealogyNode(stem_id, virus_type)
        self._nodes: dict[Any, GenealogyNode] = {stem_id: self._stem}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_stem_id(self) -> Any:
        """Return the identifier of the stem virus."""
        return self._stem.virus_id

    def exists(self, virus_id: Hashable) -> bool:
        """Check whether a virus is registered.

        Args:
            virus_id: Virus identifier.

        Returns:
            True if the virus exists, False otherwise.
        """
        return virus_id in self._nodes

    def get_virus(self, virus_id: Hashable) -> V:
        """Get the payload stored for a virus.

        The payload is returned by reference: mutating it in place changes
        the stored virus but never the genealogy structure.

        Args:
            virus_id: Virus identifier.

        Returns:
            The stored virus.

        Raises:
            VirusNotFound: If the virus doesn't exist.
        """
        return self._get_node(virus_id, context="get_virus").virus  # type: ignore[no-any-return]

    def get_children(self, virus_id: Hashable) -> list[Any]:
        """Get identifiers of the direct descendants of a virus.

        Args:
            virus_id: Virus identifier.

        Returns:
            Child identifiers, sorted, without duplicates.

        Raises:
            VirusNotFound: If the virus doesn't exist.
        """
        return self._get_node(virus_id, context="get_children").child_ids()

    def get_parents(self, virus_id: Hashable) -> list[Any]:
        """Get identifiers of the direct ancestors of a virus.

        Args:
            virus_id: Virus identifier.

        Returns:
            Parent identifiers, sorted, without duplicates.

        Raises:
            VirusNotFound: If the virus doesn't exist.
        """
        return self._get_node(virus_id, context="get_parents").parent_ids()

    def virus_ids(self) -> list[Any]:
        """Return all registered identifiers, sorted."""
        return sorted(self._nodes)

    def edge_count(self) -> int:
        """Return the number of parent-to-child edges."""
        return sum(len(node.children) for node in self._nodes.values())

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, virus_id: Hashable, parent_ids: Any) -> None:
        """Create a virus descending from one or more registered viruses.

        A ``list`` is taken as the full set of parents; any other value is
        taken as the identifier of a single parent.

        Args:
            virus_id: Identifier of the new virus.
            parent_ids: Parent identifier, or list of parent identifiers.

        Raises:
            VirusNotFound: If the parent list is empty or names an
                unregistered virus.
            VirusAlreadyCreated: If *virus_id* is already registered.
        """
        if not isinstance(parent_ids, list):
            parent_ids = [parent_ids]

        if not parent_ids:
            raise VirusNotFound(
                virus_id,
                context="create - a virus needs at least one parent",
            )
        if virus_id in self._nodes:
            raise VirusAlreadyCreated(virus_id)

        # Resolve every parent before touching anything
        parents = [
            self._get_node(parent_id, context=f"create - parent of '{virus_id}'")
            for parent_id in parent_ids
        ]

        node = GenealogyNode(virus_id, self._virus_type)

        try:
            self._nodes[virus_id] = node
            for parent in parents:
                node.parents.add(parent)
                parent.children.add(node)
        except Exception:
            for parent in parents:
                parent.children.discard(node)
            self._nodes.pop(virus_id, None)
            raise

        log.debug("virus_created", virus_id=virus_id, parents=node.parent_ids())
        self._after_mutation("create")

    def connect(self, child_id: Hashable, parent_id: Hashable) -> None:
        """Add a parent-to-child edge between two registered viruses.

        Connecting an already connected pair is a no-op. The caller must not
        make a virus its own ancestor; this is not checked.

        Args:
            child_id: Identifier of the descendant.
            parent_id: Identifier of the new ancestor.

        Raises:
            VirusNotFound: If either virus doesn't exist.
        """
        child = self._get_node(child_id, context="connect - child must exist")
        parent = self._get_node(parent_id, context="connect - parent must exist")

        if child in parent.children:
            return

        child.parents.add(parent)
        try:
            parent.children.add(child)
        except Exception:
            child.parents.discard(parent)
            raise

        log.debug("viruses_connected", child_id=child_id, parent_id=parent_id)
        self._after_mutation("connect")

    def remove(self, virus_id: Hashable) -> None:
        """Remove a virus and every edge naming it.

        Parents drop their reference to the virus and children forget it as
        a parent. Children are not removed, even when the virus was their
        only parent; they stay registered without ancestors.

        Args:
            virus_id: Identifier of the virus to remove.

        Raises:
            TriedToRemoveStemVirus: If *virus_id* is the stem virus.
            VirusNotFound: If the virus doesn't exist.
        """
        if virus_id == self._stem.virus_id:
            raise TriedToRemoveStemVirus(virus_id)

        node = self._get_node(virus_id, context="remove")

        for parent in list(node.parents):
            parent.children.discard(node)
        for child in node.children:
            child.parents.discard(node)
        del self._nodes[virus_id]

        orphans = sorted(child.virus_id for child in node.children if not child.parents)
        log.debug("virus_removed", virus_id=virus_id, children=len(node.children))
        if orphans:
            log.warning("virus_orphaned", removed=virus_id, orphans=orphans)
        self._after_mutation("remove")

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_invariants(self) -> list[str]:
        """Check genealogy invariants and return any violations.

        Invariants checked:
        1. The stem virus has no parents
        2. Parent and child sets are mutually consistent
        3. Child edges are acyclic

        Viruses orphaned by remove() are reported by validate_genealogy()
        as a warning, not a violation.

        Returns:
            List of violation messages (empty if valid).
        """
        return validate_genealogy(self).violations

    def assert_invariants(self, operation: str = "") -> None:
        """Raise if validate_invariants() finds any violation.

        Raises:
            GenealogyCorruptionError: If the genealogy is inconsistent.
        """
        violations = self.validate_invariants()
        if violations:
            raise GenealogyCorruptionError(violations, operation=operation)

    def _after_mutation(self, operation: str) -> None:
        if not self._config.check_invariants:
            return
        violations = self.validate_invariants()
        if violations:
            log.warning(
                "genealogy_invariant_violation",
                operation=operation,
                violations=violations[:5],
                total=len(violations),
            )

    def _get_node(self, virus_id: Hashable, *, context: str) -> GenealogyNode:
        node = self._nodes.get(virus_id)
        if node is None:
            raise VirusNotFound(virus_id, available=self.virus_ids(), context=context)
        return node

    # -------------------------------------------------------------------------
    # Utility
    # -------------------------------------------------------------------------

    def __getitem__(self, virus_id: Hashable) -> V:
        return self.get_virus(virus_id)

    def __contains__(self, virus_id: object) -> bool:
        return virus_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        """Return string representation of the genealogy."""
        return (
            f"VirusGenealogy(viruses={len(self._nodes)}, "
            f"edges={self.edge_count()}, stem={self._stem.virus_id!r})"
        )
