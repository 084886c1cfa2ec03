"""Genealogy node: one virus and its adjacency.

Ownership runs downward only. A node holds strong references to its
children and weak references to its parents, so a node stays alive exactly
as long as some parent (or the registry) still references it, and linked
nodes never form a reference cycle.
"""

from __future__ import annotations

import copy
import weakref
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable


@runtime_checkable
class VirusLike(Protocol):
    """Payload contract for viruses stored in a genealogy.

    The genealogy constructs a virus from its identifier and copies it with
    ``copy.copy``. It never inspects any other field.
    """

    def __init__(self, virus_id: Any) -> None: ...

    def get_id(self) -> Any: ...


class GenealogyNode:
    """A single virus in the genealogy.

    Attributes:
        virus_id: Immutable identifier of the virus.
        virus: The payload built by the genealogy's virus type.
        children: Strong references to direct descendants.
        parents: Weak references to direct ancestors.
    """

    def __init__(self, virus_id: Hashable, virus_type: Callable[[Any], Any]) -> None:
        """Build the payload for *virus_id*.

        Raises whatever *virus_type* raises; no node exists in that case.
        """
        self.virus = virus_type(virus_id)
        self.virus_id = virus_id
        self.children: set[GenealogyNode] = set()
        self.parents: weakref.WeakSet[GenealogyNode] = weakref.WeakSet()

    def __copy__(self) -> GenealogyNode:
        """Copy the payload and both adjacency sets.

        The copy is detached: none of the referenced nodes know about it.
        """
        duplicate = GenealogyNode.__new__(GenealogyNode)
        duplicate.virus = copy.copy(self.virus)
        duplicate.virus_id = self.virus_id
        duplicate.children = set(self.children)
        duplicate.parents = weakref.WeakSet(self.parents)
        return duplicate

    def child_ids(self) -> list[Any]:
        return sorted(child.virus_id for child in self.children)

    def parent_ids(self) -> list[Any]:
        return sorted(parent.virus_id for parent in self.parents)

    def __repr__(self) -> str:
        return (
            f"GenealogyNode(id={self.virus_id!r}, "
            f"children={len(self.children)}, parents={len(self.parents)})"
        )
