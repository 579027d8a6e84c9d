"""
Graph Store interface

Opaque adapter boundary between the query core and graph storage. Stores
answer pattern queries (lookup by identifier, edge traversal, optional
native closure) and return raw Term records; ordering, paging and cycle
handling are left to the traversal engine.

Arc orientation follows the OBO/OLS convention: a subclass assertion is
stored as child -[SUBCLASSOF]-> parent and a named relation as
subject -[label]-> object. Direction.OUT follows a stored arc forward,
Direction.IN walks it backwards.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from src.terms.model import Term

DEFAULT_HIERARCHICAL_TYPES = ("SUBCLASSOF",)

LOOKUP_FIELDS = ("iri", "short_form", "obo_id")


class Direction(str, Enum):
    """Which way a stored arc is followed from the current term"""
    OUT = "out"  # term is the arc's source
    IN = "in"    # term is the arc's target


class GraphStore(ABC):
    """
    Read-only query interface over a term graph.

    All methods take an already lowercased ontology id. Implementations may
    block on I/O and must release any acquired resources before returning.
    """

    hierarchical_types: Tuple[str, ...] = DEFAULT_HIERARCHICAL_TYPES

    @abstractmethod
    def find_term(self, ontology: str, field: str, value: str) -> Optional[Term]:
        """Return the term whose `field` ('iri', 'short_form' or 'obo_id') equals value"""

    @abstractmethod
    def find_terms(self, ontology: str) -> List[Term]:
        """Return every term of the ontology, unordered"""

    @abstractmethod
    def find_roots(self, ontology: str) -> List[Term]:
        """Return terms without any hierarchical parent in the ontology"""

    @abstractmethod
    def neighbors(
        self,
        ontology: str,
        iri: str,
        direction: Direction,
        relation_labels: Optional[Iterable[str]] = None
    ) -> List[Term]:
        """
        Return direct neighbors of a term.

        Args:
            ontology: Lowercased ontology id
            iri: IRI of the term
            direction: Follow stored arcs forward (OUT) or backwards (IN)
            relation_labels: None for hierarchical arcs, otherwise the
                accepted labels of a named relation

        Returns:
            Neighbor terms in store order, possibly with duplicates
        """

    def closure(self, ontology: str, iri: str, direction: Direction) -> Optional[List[Term]]:
        """
        Transitive closure over hierarchical arcs, pushed down to the store.

        Returns None when the store has no native closure; the engine then
        walks the graph itself.
        """
        return None

    @abstractmethod
    def has_ontology(self, ontology: str) -> bool:
        """Whether the store holds any term for the ontology"""

    def close(self):
        """Release store resources"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
