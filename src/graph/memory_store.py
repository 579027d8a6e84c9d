"""
In-memory Graph Store

NetworkX-backed store holding one MultiDiGraph per ontology. Used for
fixtures, tests and small deployments where running Neo4j is not worth it.
Has no native closure, so the traversal engine walks it breadth-first.

Seed data layout (YAML or mapping):

    ontologies:
      go:
        terms:
          - {iri: ..., short_form: GO_0008150, obo_id: "GO:0008150", label: ...}
        edges:
          - {source: <child iri>, target: <parent iri>, relation: SUBCLASSOF}
          - {source: <subject iri>, target: <object iri>, relation: part_of, uri: ...}
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import networkx as nx
import yaml

from src.errors import GraphStoreError
from src.terms.model import Term, normalize_ontology_id
from .store import DEFAULT_HIERARCHICAL_TYPES, LOOKUP_FIELDS, Direction, GraphStore

logger = logging.getLogger(__name__)

_TERM_FIELDS = ("short_form", "obo_id", "label")


class NetworkXGraphStore(GraphStore):
    """Graph store over in-process NetworkX graphs"""

    def __init__(self, hierarchical_types: Sequence[str] = DEFAULT_HIERARCHICAL_TYPES):
        self.hierarchical_types = tuple(t.upper() for t in hierarchical_types)
        self.graphs: Dict[str, nx.MultiDiGraph] = {}

    @classmethod
    def from_mapping(
        cls,
        data: Dict[str, Any],
        hierarchical_types: Sequence[str] = DEFAULT_HIERARCHICAL_TYPES
    ) -> "NetworkXGraphStore":
        """Build a store from seed data (see module docstring)"""
        store = cls(hierarchical_types)
        ontologies = data.get('ontologies') or {}
        if not isinstance(ontologies, dict):
            raise GraphStoreError("Seed data must contain 'ontologies' as a mapping of id -> graph.")

        for ontology_id, graph_def in ontologies.items():
            graph_def = graph_def or {}
            for term_def in graph_def.get('terms') or []:
                store.add_term(ontology_id, **term_def)
            for edge_def in graph_def.get('edges') or []:
                edge_def = dict(edge_def)
                try:
                    source = edge_def.pop('source')
                    target = edge_def.pop('target')
                    relation = edge_def.pop('relation')
                except KeyError as e:
                    raise GraphStoreError(f"Edge in {ontology_id} missing {e.args[0]!r}: {edge_def}") from e
                store.add_edge(ontology_id, source, target, relation, **edge_def)

        logger.info(
            "Loaded %d ontologies into memory (%d terms)",
            len(store.graphs),
            sum(g.number_of_nodes() for g in store.graphs.values())
        )
        return store

    @classmethod
    def from_yaml(
        cls,
        path: Path,
        hierarchical_types: Sequence[str] = DEFAULT_HIERARCHICAL_TYPES
    ) -> "NetworkXGraphStore":
        """Build a store from a YAML seed file"""
        with open(path, 'r') as f:
            return cls.from_mapping(yaml.safe_load(f) or {}, hierarchical_types)

    # ---- Building ----

    def _graph(self, ontology: str) -> nx.MultiDiGraph:
        return self.graphs.setdefault(normalize_ontology_id(ontology), nx.MultiDiGraph())

    def add_term(self, ontology: str, iri: str = None, **properties):
        """Add (or replace) a term node"""
        if not iri:
            raise GraphStoreError(f"Term in {ontology} without iri: {properties!r}")
        ontology = normalize_ontology_id(ontology)
        properties.pop('ontology_name', None)
        self._graph(ontology).add_node(iri, **properties)

    def add_edge(self, ontology: str, source: str, target: str, relation: str, **properties):
        """Add a stored arc source -[relation]-> target"""
        graph = self._graph(ontology)
        for iri in (source, target):
            if iri not in graph:
                raise GraphStoreError(f"Edge {source} -[{relation}]-> {target} references unknown term {iri}")
        hierarchical = relation.upper() in self.hierarchical_types
        graph.add_edge(
            source,
            target,
            key=relation.upper() if hierarchical else relation,
            relation=relation.upper() if hierarchical else relation,
            hierarchical=hierarchical,
            **properties
        )

    # ---- Helpers ----

    def _hier_arcs(self, graph: nx.MultiDiGraph, iri: str, direction: Direction):
        arcs = graph.out_edges(iri, data=True) if direction is Direction.OUT else graph.in_edges(iri, data=True)
        for source, target, data in arcs:
            if data.get('hierarchical'):
                yield target if direction is Direction.OUT else source

    def _to_term(self, ontology: str, graph: nx.MultiDiGraph, iri: str) -> Term:
        props = dict(graph.nodes[iri])
        values = {name: props.pop(name, None) for name in _TERM_FIELDS}
        props.pop('is_root', None)
        props.pop('has_children', None)
        return Term(
            iri=iri,
            ontology_name=ontology,
            short_form=values['short_form'],
            obo_id=values['obo_id'],
            label=values['label'],
            is_root=next(self._hier_arcs(graph, iri, Direction.OUT), None) is None,
            has_children=next(self._hier_arcs(graph, iri, Direction.IN), None) is not None,
            annotations=props
        )

    # ---- GraphStore ----

    def find_term(self, ontology: str, field: str, value: str) -> Optional[Term]:
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Unknown lookup field {field!r}")
        graph = self.graphs.get(ontology)
        if graph is None:
            return None
        if field == 'iri':
            return self._to_term(ontology, graph, value) if value in graph else None
        for iri, props in graph.nodes(data=True):
            if props.get(field) == value:
                return self._to_term(ontology, graph, iri)
        return None

    def find_terms(self, ontology: str) -> List[Term]:
        graph = self.graphs.get(ontology)
        if graph is None:
            return []
        return [self._to_term(ontology, graph, iri) for iri in graph.nodes]

    def find_roots(self, ontology: str) -> List[Term]:
        return [term for term in self.find_terms(ontology) if term.is_root]

    def neighbors(
        self,
        ontology: str,
        iri: str,
        direction: Direction,
        relation_labels: Optional[Iterable[str]] = None
    ) -> List[Term]:
        graph = self.graphs.get(ontology)
        if graph is None or iri not in graph:
            return []

        if relation_labels is None:
            found = list(self._hier_arcs(graph, iri, direction))
        else:
            labels = set(relation_labels)
            arcs = graph.out_edges(iri, data=True) if direction is Direction.OUT else graph.in_edges(iri, data=True)
            found = [
                target if direction is Direction.OUT else source
                for source, target, data in arcs
                if not data.get('hierarchical')
                and (data.get('relation') in labels or data.get('uri') in labels)
            ]
        return [self._to_term(ontology, graph, n) for n in found]

    def has_ontology(self, ontology: str) -> bool:
        graph = self.graphs.get(ontology)
        return graph is not None and graph.number_of_nodes() > 0
