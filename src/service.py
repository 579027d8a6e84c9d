"""
Term Query Service

The small query interface a transport layer (HTTP or otherwise) calls into.
Each operation takes an ontology id and returns a Term, a Page of terms or
a TreeNode. `None` means "no such term": an unknown ontology and an unknown
term inside a known ontology are deliberately not told apart. An empty Page
means the term exists but has no matching neighbors.

Term ids are expected already percent-decoded. Store faults propagate
unchanged; nothing here retries.
"""

import logging
from pathlib import Path
from typing import Optional

from src.graph.neo4j_store import Neo4jGraphStore
from src.graph.store import GraphStore
from src.terms.model import Term, normalize_ontology_id
from src.terms.resolver import TermResolver
from src.traversal.engine import TraversalEngine
from src.traversal.pagination import Page, PageRequest, paginate
from src.traversal.taxonomy import RelationTaxonomy
from src.traversal.tree import TreeNode, TreeProjector
from src.utils import Config

logger = logging.getLogger(__name__)


class TermQueryService:
    """Resolver, traversal engine and tree projector behind one interface"""

    def __init__(self, store: GraphStore, taxonomy: Optional[RelationTaxonomy] = None):
        """
        Initialize the service.

        Args:
            store: Graph store adapter; closed when the service is closed
            taxonomy: Relation taxonomy (defaults to Config.RELATION_TAXONOMY)
        """
        self.store = store
        self.taxonomy = taxonomy or RelationTaxonomy(Path(Config.RELATION_TAXONOMY))
        self.resolver = TermResolver(store)
        self.engine = TraversalEngine(store, self.taxonomy)
        self.projector = TreeProjector(self.engine)

    @classmethod
    def from_config(cls, taxonomy: Optional[RelationTaxonomy] = None) -> "TermQueryService":
        """Build a service over Neo4j using the environment configuration"""
        taxonomy = taxonomy or RelationTaxonomy(Path(Config.RELATION_TAXONOMY))
        store = Neo4jGraphStore(
            Config.NEO4J_URI,
            Config.NEO4J_USER,
            Config.NEO4J_PASSWORD,
            database=Config.NEO4J_DATABASE,
            hierarchical_types=taxonomy.hierarchical_types,
            related_type=taxonomy.related_type
        )
        return cls(store, taxonomy)

    def close(self):
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _resolve_iri(self, ontology_id: str, term_id: str) -> Optional[Term]:
        term = self.resolver.resolve(ontology_id, iri=term_id)
        if term is None:
            logger.info("Term not found: %s in %s", term_id, normalize_ontology_id(ontology_id))
        return term

    # ---- Lookup ----

    def lookup_term(
        self,
        ontology_id: str,
        iri: Optional[str] = None,
        short_form: Optional[str] = None,
        obo_id: Optional[str] = None
    ) -> Optional[Term]:
        """Resolve a term by IRI, short form or OBO id (in that precedence)"""
        return self.resolver.resolve(ontology_id, iri=iri, short_form=short_form, obo_id=obo_id)

    def list_terms(
        self,
        ontology_id: str,
        page: PageRequest = None,
        iri: Optional[str] = None,
        short_form: Optional[str] = None,
        obo_id: Optional[str] = None
    ) -> Optional[Page[Term]]:
        """
        Terms of an ontology.

        With an identifier this is a lookup returning a single-item page (or
        None on a miss); without one it pages through every term.
        """
        if iri or short_form or obo_id:
            term = self.lookup_term(ontology_id, iri=iri, short_form=short_form, obo_id=obo_id)
            if term is None:
                return None
            return paginate([term], PageRequest(page=0, size=1))
        return self.engine.terms(ontology_id, page)

    def ontology_exists(self, ontology_id: str) -> bool:
        """Existence check for transport layers that want to tell 'no ontology' apart"""
        return self.store.has_ontology(normalize_ontology_id(ontology_id))

    # ---- Navigation ----

    def list_roots(self, ontology_id: str, page: PageRequest = None) -> Page[Term]:
        return self.engine.roots(ontology_id, page)

    def list_parents(self, ontology_id: str, term_id: str, page: PageRequest = None) -> Optional[Page[Term]]:
        term = self._resolve_iri(ontology_id, term_id)
        return None if term is None else self.engine.parents(ontology_id, term, page)

    def list_children(self, ontology_id: str, term_id: str, page: PageRequest = None) -> Optional[Page[Term]]:
        term = self._resolve_iri(ontology_id, term_id)
        return None if term is None else self.engine.children(ontology_id, term, page)

    def list_ancestors(self, ontology_id: str, term_id: str, page: PageRequest = None) -> Optional[Page[Term]]:
        term = self._resolve_iri(ontology_id, term_id)
        return None if term is None else self.engine.ancestors(ontology_id, term, page)

    def list_descendants(self, ontology_id: str, term_id: str, page: PageRequest = None) -> Optional[Page[Term]]:
        term = self._resolve_iri(ontology_id, term_id)
        return None if term is None else self.engine.descendants(ontology_id, term, page)

    def list_related(
        self,
        ontology_id: str,
        term_id: str,
        relation_label: str,
        page: PageRequest = None
    ) -> Optional[Page[Term]]:
        term = self._resolve_iri(ontology_id, term_id)
        return None if term is None else self.engine.related(ontology_id, term, relation_label, page)

    # ---- Tree view ----

    def build_tree_view(
        self,
        ontology_id: str,
        term_id: str,
        include_siblings: bool = False
    ) -> Optional[TreeNode]:
        term = self._resolve_iri(ontology_id, term_id)
        return None if term is None else self.projector.build_tree(ontology_id, term, include_siblings)
