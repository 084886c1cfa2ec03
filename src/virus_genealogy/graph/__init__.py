"""Graph package - virus genealogy storage.

This package provides the in-memory genealogy: a rooted DAG whose nodes
own their children and weakly reference their parents, with exception-safe
create/connect/remove operations and consistency checks.
"""

from virus_genealogy.graph.errors import (
    GenealogyCorruptionError,
    GenealogyError,
    TriedToRemoveStemVirus,
    VirusAlreadyCreated,
    VirusNotFound,
)
from virus_genealogy.graph.genealogy import VirusGenealogy
from virus_genealogy.graph.node import GenealogyNode, VirusLike
from virus_genealogy.graph.validation import (
    ValidationCheck,
    ValidationReport,
    validate_genealogy,
)

__all__ = [
    "GenealogyCorruptionError",
    "GenealogyError",
    "GenealogyNode",
    "TriedToRemoveStemVirus",
    "ValidationCheck",
    "ValidationReport",
    "VirusAlreadyCreated",
    "VirusGenealogy",
    "VirusLike",
    "VirusNotFound",
    "validate_genealogy",
]
