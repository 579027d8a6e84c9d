"""
Neo4j Graph Store

Answers term graph pattern queries against an OLS-style Neo4j schema:

    (:Class {iri, short_form, obo_id, ontology_name, label, ...})
    (:Class)-[:SUBCLASSOF]->(:Class)                      child -> parent
    (:Class)-[:Related {label, uri}]->(:Class)            subject -> object

Hierarchical closures are pushed down as variable-length patterns; Cypher's
relationship uniqueness per path plus DISTINCT keeps them finite and
duplicate-free on cyclic data.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from neo4j import GraphDatabase

from src.errors import GraphStoreError, UnsafeIdentifierError
from src.terms.model import Term
from .store import DEFAULT_HIERARCHICAL_TYPES, LOOKUP_FIELDS, Direction, GraphStore

logger = logging.getLogger(__name__)

# Node properties mapped onto Term fields; everything else is an annotation
_TERM_FIELDS = ("iri", "ontology_name", "short_form", "obo_id", "label")
_DERIVED_FLAGS = ("is_root", "has_children")


def _safe_ident(name: str) -> str:
    """
    Allow only simple Neo4j identifiers for labels/relationship types.
    Prevents Cypher injection when we interpolate labels/types.
    """
    if not name or not all(c.isalnum() or c == "_" for c in name):
        raise UnsafeIdentifierError(name)
    return name


class Neo4jGraphStore(GraphStore):
    """Graph store backed by a Neo4j database"""

    def __init__(
        self,
        uri: str,
        user: str,
        password: str,
        database: Optional[str] = None,
        hierarchical_types: Sequence[str] = DEFAULT_HIERARCHICAL_TYPES,
        node_label: str = "Class",
        related_type: str = "Related",
        driver=None
    ):
        """
        Initialize the store.

        Args:
            uri: Neo4j connection URI
            user: Neo4j username
            password: Neo4j password
            database: Optional database name (server default when None)
            hierarchical_types: Relationship types treated as is-a
            node_label: Label carried by term nodes
            related_type: Relationship type carrying named relations
            driver: Pre-built driver (tests, shared pools); owned by the store
        """
        self.hierarchical_types = tuple(_safe_ident(t) for t in hierarchical_types)
        if not self.hierarchical_types:
            raise ValueError("At least one hierarchical relationship type is required")
        self.node_label = _safe_ident(node_label)
        self.related_type = _safe_ident(related_type)
        self.database = database
        self.driver = driver or GraphDatabase.driver(uri, auth=(user, password))
        logger.info("Neo4j graph store ready (%s)", uri)

    def close(self):
        """Close Neo4j driver"""
        self.driver.close()
        logger.info("Neo4j graph store closed")

    # ---- Cypher fragments ----

    @property
    def _hier(self) -> str:
        return "|".join(self.hierarchical_types)

    def _projection(self, var: str) -> str:
        """RETURN clause for a term node with its structural flags"""
        label = self.node_label
        return (
            f"RETURN {var} AS term, "
            f"NOT EXISTS {{ MATCH ({var})-[:{self._hier}]->(p:{label}) "
            f"WHERE p.ontology_name = {var}.ontology_name }} AS is_root, "
            f"EXISTS {{ MATCH (c:{label})-[:{self._hier}]->({var}) "
            f"WHERE c.ontology_name = {var}.ontology_name }} AS has_children"
        )

    def _arc(self, rel: str, direction: Direction) -> str:
        if direction is Direction.OUT:
            return f"-[{rel}]->"
        return f"<-[{rel}]-"

    # ---- Execution ----

    def _run(self, query: str, **params) -> List[Term]:
        """Run a read query inside a scoped session and materialise the terms"""
        logger.debug("Cypher: %s params=%s", " ".join(query.split()), params)
        with self.driver.session(database=self.database) as session:
            records = list(session.run(query, **params))
        return [self._record_to_term(record) for record in records]

    def _record_to_term(self, record) -> Term:
        props: Dict = dict(record['term'])
        iri = props.pop('iri', None)
        if not iri:
            raise GraphStoreError(f"Term node without iri: {props!r}")
        values = {name: props.pop(name, None) for name in _TERM_FIELDS[1:]}
        for flag in _DERIVED_FLAGS:
            props.pop(flag, None)
        return Term(
            iri=iri,
            ontology_name=values['ontology_name'],
            short_form=values['short_form'],
            obo_id=values['obo_id'],
            label=values['label'],
            is_root=bool(record['is_root']),
            has_children=bool(record['has_children']),
            annotations=props
        )

    # ---- GraphStore ----

    def find_term(self, ontology: str, field: str, value: str) -> Optional[Term]:
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Unknown lookup field {field!r}")
        terms = self._run(
            f"""
            MATCH (n:{self.node_label} {{ontology_name: $ontology}})
            WHERE n.{field} = $value
            {self._projection('n')}
            LIMIT 1
            """,
            ontology=ontology,
            value=value
        )
        return terms[0] if terms else None

    def find_terms(self, ontology: str) -> List[Term]:
        return self._run(
            f"""
            MATCH (n:{self.node_label} {{ontology_name: $ontology}})
            {self._projection('n')}
            """,
            ontology=ontology
        )

    def find_roots(self, ontology: str) -> List[Term]:
        return self._run(
            f"""
            MATCH (n:{self.node_label} {{ontology_name: $ontology}})
            WHERE NOT EXISTS {{
                MATCH (n)-[:{self._hier}]->(p:{self.node_label})
                WHERE p.ontology_name = $ontology
            }}
            {self._projection('n')}
            """,
            ontology=ontology
        )

    def neighbors(
        self,
        ontology: str,
        iri: str,
        direction: Direction,
        relation_labels: Optional[Iterable[str]] = None
    ) -> List[Term]:
        label = self.node_label
        if relation_labels is None:
            return self._run(
                f"""
                MATCH (n:{label} {{ontology_name: $ontology, iri: $iri}})
                      {self._arc(':' + self._hier, direction)}(m:{label} {{ontology_name: $ontology}})
                {self._projection('m')}
                """,
                ontology=ontology,
                iri=iri
            )

        labels = list(relation_labels)
        if not labels:
            return []
        return self._run(
            f"""
            MATCH (n:{label} {{ontology_name: $ontology, iri: $iri}})
                  {self._arc('r:' + self.related_type, direction)}(m:{label} {{ontology_name: $ontology}})
            WHERE r.label IN $labels OR r.uri IN $labels
            {self._projection('m')}
            """,
            ontology=ontology,
            iri=iri,
            labels=labels
        )

    def closure(self, ontology: str, iri: str, direction: Direction) -> Optional[List[Term]]:
        label = self.node_label
        return self._run(
            f"""
            MATCH p = (n:{label} {{ontology_name: $ontology, iri: $iri}})
                  {self._arc(':' + self._hier + '*1..', direction)}(m:{label} {{ontology_name: $ontology}})
            WHERE m <> n AND all(x IN nodes(p) WHERE x.ontology_name = $ontology)
            WITH DISTINCT m
            {self._projection('m')}
            """,
            ontology=ontology,
            iri=iri
        )

    def has_ontology(self, ontology: str) -> bool:
        logger.debug("Checking ontology %s", ontology)
        with self.driver.session(database=self.database) as session:
            record = session.run(
                f"MATCH (n:{self.node_label} {{ontology_name: $ontology}}) RETURN n LIMIT 1",
                ontology=ontology
            ).single()
        return record is not None
