"""Term model. Resolution lives in src.terms.resolver."""

from .model import Selector, SelectorKind, Term, normalize_ontology_id

__all__ = ['Selector', 'SelectorKind', 'Term', 'normalize_ontology_id']
