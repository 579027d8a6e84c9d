"""
Term Graph Traversal Engine

Computes roots, direct hierarchical neighbors, named-relation neighbors and
ancestor/descendant closures for a term. Closures are pushed down to the
store when it supports them natively, otherwise computed here with a BFS
whose visited set is keyed by IRI, which keeps them finite and
duplicate-free on cyclic data.

Every returned sequence is sorted by IRI before pagination.
"""

import logging
from collections import deque
from typing import Iterable, List, Optional, Set, Union

from src.graph.store import Direction, GraphStore
from src.terms.model import Term, normalize_ontology_id
from .pagination import Page, PageRequest, paginate, sort_terms
from .taxonomy import RelationTaxonomy

logger = logging.getLogger(__name__)

TermRef = Union[Term, str]

# Hierarchy steps only. Stored is-a arcs run child -> parent, so going "up"
# follows them forward.
UP = Direction.OUT
DOWN = Direction.IN


def _iri(term: TermRef) -> str:
    return term.iri if isinstance(term, Term) else term


class TraversalEngine:
    """
    Neighborhood and closure queries over a term graph.

    Terms are passed already resolved (a Term or its IRI); the engine never
    reports a missing term itself, an unknown IRI simply has no neighbors.
    """

    def __init__(self, store: GraphStore, taxonomy: Optional[RelationTaxonomy] = None):
        """
        Initialize traversal engine.

        Args:
            store: Graph store adapter to query
            taxonomy: Relation taxonomy; loads the default configuration if None
        """
        self.store = store
        self.taxonomy = taxonomy or RelationTaxonomy()

    # ---- Whole-ontology queries ----

    def roots(self, ontology_id: str, page: PageRequest = None) -> Page[Term]:
        """Terms with no hierarchical parent in the ontology"""
        ontology = normalize_ontology_id(ontology_id)
        return paginate(sort_terms(self.store.find_roots(ontology)), page)

    def terms(self, ontology_id: str, page: PageRequest = None) -> Page[Term]:
        """Every term of the ontology"""
        ontology = normalize_ontology_id(ontology_id)
        return paginate(sort_terms(self.store.find_terms(ontology)), page)

    # ---- Direct neighbors ----

    def parent_terms(self, ontology_id: str, term: TermRef) -> List[Term]:
        """Direct hierarchical parents, unpaged"""
        return self._direct(ontology_id, term, UP)

    def child_terms(self, ontology_id: str, term: TermRef) -> List[Term]:
        """Direct hierarchical children, unpaged"""
        return self._direct(ontology_id, term, DOWN)

    def parents(self, ontology_id: str, term: TermRef, page: PageRequest = None) -> Page[Term]:
        return paginate(self.parent_terms(ontology_id, term), page)

    def children(self, ontology_id: str, term: TermRef, page: PageRequest = None) -> Page[Term]:
        return paginate(self.child_terms(ontology_id, term), page)

    def related(
        self,
        ontology_id: str,
        term: TermRef,
        relation_label: str,
        page: PageRequest = None
    ) -> Page[Term]:
        """
        Direct neighbors over a named relation, following it from the term.

        Hierarchical spellings ('is_a', 'subClassOf', ...) are served as
        parents. Unknown labels match no edges and give an empty page.
        """
        if self.taxonomy.is_hierarchical(relation_label):
            return self.parents(ontology_id, term, page)

        ontology = normalize_ontology_id(ontology_id)
        forms = self.taxonomy.stored_forms(relation_label)
        found = self.store.neighbors(ontology, _iri(term), Direction.OUT, relation_labels=forms)
        logger.debug("%s -[%s]-> %d terms", _iri(term), relation_label, len(found))
        return paginate(sort_terms(found), page)

    def siblings(self, ontology_id: str, term: TermRef) -> List[Term]:
        """Terms sharing at least one parent with the term, excluding itself"""
        ontology = normalize_ontology_id(ontology_id)
        iri = _iri(term)
        found: List[Term] = []
        for parent in self.parent_terms(ontology, iri):
            found.extend(t for t in self.store.neighbors(ontology, parent.iri, DOWN) if t.iri != iri)
        return sort_terms(found)

    # ---- Closures ----

    def ancestors(self, ontology_id: str, term: TermRef, page: PageRequest = None) -> Page[Term]:
        return paginate(self._closure(ontology_id, term, UP), page)

    def descendants(self, ontology_id: str, term: TermRef, page: PageRequest = None) -> Page[Term]:
        return paginate(self._closure(ontology_id, term, DOWN), page)

    # ---- Internals ----

    def _direct(self, ontology_id: str, term: TermRef, direction: Direction) -> List[Term]:
        ontology = normalize_ontology_id(ontology_id)
        iri = _iri(term)
        return sort_terms(self.store.neighbors(ontology, iri, direction))

    def _closure(self, ontology_id: str, term: TermRef, direction: Direction) -> List[Term]:
        ontology = normalize_ontology_id(ontology_id)
        origin = _iri(term)

        found = self.store.closure(ontology, origin, direction)
        if found is None:
            found = self.walk(ontology, [origin], direction, visited={origin})

        result = sort_terms(t for t in found if t.iri != origin)
        logger.debug("Closure %s of %s: %d terms", direction.value, origin, len(result))
        return result

    def walk(
        self,
        ontology: str,
        start: Iterable[str],
        direction: Direction,
        visited: Optional[Set[str]] = None
    ) -> List[Term]:
        """
        Breadth-first walk over hierarchical arcs.

        Args:
            ontology: Lowercased ontology id
            start: IRIs to expand first
            direction: UP for ancestors, DOWN for descendants
            visited: IRIs already seen; updated in place and never returned.
                Callers seed it with the origin to exclude it from the result.

        Returns:
            Every newly reached term, once each, in BFS order
        """
        if visited is None:
            visited = set()
        visited.update(start)

        reached: List[Term] = []
        queue = deque(start)
        while queue:
            current = queue.popleft()
            for neighbor in self.store.neighbors(ontology, current, direction):
                if neighbor.iri in visited:
                    continue
                visited.add(neighbor.iri)
                reached.append(neighbor)
                queue.append(neighbor.iri)
        return reached
