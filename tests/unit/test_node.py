"""Tests for GenealogyNode ownership and copying."""

from __future__ import annotations

import copy
import gc
import weakref

import pytest

from tests.fixtures.viruses import FragileVirus, UncopyableVirus, Virus
from virus_genealogy.graph.node import GenealogyNode, VirusLike


def _link(parent: GenealogyNode, child: GenealogyNode) -> None:
    parent.children.add(child)
    child.parents.add(parent)


class TestNodeConstruction:
    """Test node construction."""

    def test_builds_payload_from_id(self) -> None:
        node = GenealogyNode("W1", Virus)

        assert node.virus_id == "W1"
        assert isinstance(node.virus, Virus)
        assert node.virus.get_id() == "W1"
        assert isinstance(node.virus, VirusLike)
        assert node.children == set()
        assert len(node.parents) == 0

    def test_payload_failure_propagates(self) -> None:
        with pytest.raises(RuntimeError, match="cannot culture"):
            GenealogyNode("bad-W1", FragileVirus)

    def test_repr(self) -> None:
        parent = GenealogyNode("W1", Virus)
        child = GenealogyNode("W2", Virus)
        _link(parent, child)

        assert repr(parent) == "GenealogyNode(id='W1', children=1, parents=0)"
        assert repr(child) == "GenealogyNode(id='W2', children=0, parents=1)"


class TestNodeOwnership:
    """Test that ownership runs from parents to children only."""

    def test_parent_keeps_child_alive(self) -> None:
        parent = GenealogyNode("W1", Virus)
        child = GenealogyNode("W2", Virus)
        _link(parent, child)
        child_ref = weakref.ref(child)

        del child

        assert child_ref() is not None
        assert parent.child_ids() == ["W2"]

    def test_child_does_not_keep_parent_alive(self) -> None:
        """Dropping the last strong reference frees the parent without gc."""
        parent = GenealogyNode("W1", Virus)
        child = GenealogyNode("W2", Virus)
        _link(parent, child)
        parent_ref = weakref.ref(parent)

        gc.disable()
        try:
            del parent
            assert parent_ref() is None
        finally:
            gc.enable()

        assert child.parent_ids() == []

    def test_adjacency_ids_sorted(self) -> None:
        parent = GenealogyNode("W1", Virus)
        for vid in ("W4", "W2", "W3"):
            _link(parent, GenealogyNode(vid, Virus))

        assert parent.child_ids() == ["W2", "W3", "W4"]


class TestNodeCopy:
    """Test detached node copies."""

    def test_copy_duplicates_payload_and_adjacency(self) -> None:
        parent = GenealogyNode("W1", Virus)
        node = GenealogyNode("W2", Virus)
        child = GenealogyNode("W3", Virus)
        _link(parent, node)
        _link(node, child)
        node.virus.mutations.append("N501Y")

        duplicate = copy.copy(node)

        assert duplicate.virus_id == "W2"
        assert duplicate.virus is not node.virus
        assert duplicate.virus.get_id() == "W2"
        assert duplicate.child_ids() == ["W3"]
        assert duplicate.parent_ids() == ["W1"]
        assert duplicate.children is not node.children
        assert duplicate.parents is not node.parents

    def test_copy_is_detached(self) -> None:
        """Neighbours of the original do not learn about the copy."""
        parent = GenealogyNode("W1", Virus)
        node = GenealogyNode("W2", Virus)
        _link(parent, node)

        duplicate = copy.copy(node)

        assert duplicate not in parent.children
        assert parent.children == {node}

    def test_copy_failure_propagates(self) -> None:
        node = GenealogyNode("W1", UncopyableVirus)

        with pytest.raises(RuntimeError, match="copy refused"):
            copy.copy(node)


class TestVirusLike:
    """Test the payload protocol."""

    def test_genealogy_payloads_are_bound_to_protocol(self) -> None:
        from virus_genealogy.graph import genealogy

        assert genealogy.V.__bound__ is VirusLike

    def test_object_without_get_id_is_not_virus_like(self) -> None:
        assert not isinstance(object(), VirusLike)
