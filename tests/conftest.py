"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from tests.fixtures.viruses import Virus
from virus_genealogy.graph import VirusGenealogy


@pytest.fixture
def genealogy() -> VirusGenealogy[Virus]:
    """Genealogy with only the stem virus W1."""
    return VirusGenealogy(Virus, "W1")


@pytest.fixture
def diamond() -> VirusGenealogy[Virus]:
    """W1 -> W2, W1 -> W3, W2 -> W3 (W3 has two parents)."""
    g = VirusGenealogy(Virus, "W1")
    g.create("W2", "W1")
    g.create("W3", ["W1", "W2"])
    return g
