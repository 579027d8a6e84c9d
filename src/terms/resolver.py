"""
Term Resolver

Resolves one of {IRI, short form, OBO id} to a single term within an
ontology. A miss is an ordinary outcome and comes back as None.
"""

import logging
from typing import Optional

from src.graph.store import GraphStore
from .model import Selector, Term, normalize_ontology_id

logger = logging.getLogger(__name__)


class TermResolver:
    """Ontology-scoped term lookup with IRI > short form > OBO id precedence"""

    def __init__(self, store: GraphStore):
        self.store = store

    def resolve(
        self,
        ontology_id: str,
        selector: Optional[Selector] = None,
        *,
        iri: Optional[str] = None,
        short_form: Optional[str] = None,
        obo_id: Optional[str] = None
    ) -> Optional[Term]:
        """
        Resolve a selector to a term.

        Either pass a Selector, or the identifier keywords; with keywords the
        first non-empty one in precedence order wins and the others are not
        consulted, even when it misses.

        Args:
            ontology_id: Ontology key, matched case-insensitively
            selector: Explicit tagged selector
            iri: Term IRI, already percent-decoded
            short_form: Ontology-local short form
            obo_id: OBO-style PREFIX:NNNNNNN identifier

        Returns:
            The matching term, or None when no term (or no ontology) matches
            or no identifier was supplied
        """
        if selector is None:
            selector = Selector.from_params(iri=iri, short_form=short_form, obo_id=obo_id)
        if selector is None:
            return None

        ontology = normalize_ontology_id(ontology_id)
        term = self.store.find_term(ontology, selector.field, selector.value)
        if term is None:
            logger.debug("No term in %s with %s=%s", ontology, selector.field, selector.value)
        return term
