"""
Tests for the Neo4j graph store against a mocked driver.

These check the Cypher the store issues, record mapping and session
handling; they do not need a running database.
"""

from unittest.mock import MagicMock

import pytest
from neo4j.exceptions import ServiceUnavailable

from src.errors import GraphStoreError, UnsafeIdentifierError
from src.graph.neo4j_store import Neo4jGraphStore
from src.graph.store import Direction

OBO = "http://purl.obolibrary.org/obo/"
BP = OBO + "GO_0008150"


def _record(iri, is_root=False, has_children=False, **props):
    return {
        'term': {'iri': iri, 'ontology_name': 'go', **props},
        'is_root': is_root,
        'has_children': has_children,
    }


@pytest.fixture
def driver():
    driver = MagicMock()
    session = MagicMock()
    driver.session.return_value.__enter__.return_value = session
    driver.session.return_value.__exit__.return_value = False
    return driver


@pytest.fixture
def session(driver):
    return driver.session.return_value.__enter__.return_value


@pytest.fixture
def neo4j_store(driver):
    return Neo4jGraphStore("bolt://test", "neo4j", "secret", database="ontologies", driver=driver)


def _query(session):
    args, kwargs = session.run.call_args
    return " ".join(args[0].split()), kwargs


class TestRecordMapping:

    def test_find_term_maps_record(self, neo4j_store, session):
        session.run.return_value = [_record(
            BP, is_root=True, has_children=True,
            short_form="GO_0008150", obo_id="GO:0008150", label="biological_process",
            description="execution of a biological program", is_root_stored=True
        )]
        term = neo4j_store.find_term("go", "short_form", "GO_0008150")

        assert term.iri == BP
        assert term.obo_id == "GO:0008150"
        assert term.is_root and term.has_children
        assert term.annotations == {"description": "execution of a biological program", "is_root_stored": True}

        query, params = _query(session)
        assert "WHERE n.short_form = $value" in query
        assert "LIMIT 1" in query
        assert params == {"ontology": "go", "value": "GO_0008150"}

    def test_find_term_miss(self, neo4j_store, session):
        session.run.return_value = []
        assert neo4j_store.find_term("go", "iri", BP) is None

    def test_find_term_rejects_unknown_field(self, neo4j_store):
        with pytest.raises(ValueError):
            neo4j_store.find_term("go", "label", "x")

    def test_stored_flags_are_not_trusted(self, neo4j_store, session):
        session.run.return_value = [_record(BP, is_root=False, has_children=False)]
        session.run.return_value[0]['term']['is_root'] = True
        term = neo4j_store.find_terms("go")[0]
        assert term.is_root is False
        assert "is_root" not in term.annotations

    def test_node_without_iri(self, neo4j_store, session):
        session.run.return_value = [{'term': {'label': 'orphan'}, 'is_root': True, 'has_children': False}]
        with pytest.raises(GraphStoreError):
            neo4j_store.find_terms("go")


class TestCypher:

    def test_session_uses_database(self, neo4j_store, driver, session):
        session.run.return_value = []
        neo4j_store.find_terms("go")
        driver.session.assert_called_once_with(database="ontologies")

    def test_roots_query(self, neo4j_store, session):
        session.run.return_value = [_record(BP, is_root=True)]
        roots = neo4j_store.find_roots("go")
        query, params = _query(session)
        assert "WHERE NOT EXISTS" in query
        assert "(n)-[:SUBCLASSOF]->(p:Class)" in query
        assert params == {"ontology": "go"}
        assert roots[0].is_root

    def test_parents_follow_arc_forward(self, neo4j_store, session):
        session.run.return_value = []
        neo4j_store.neighbors("go", BP, Direction.OUT)
        query, params = _query(session)
        assert "-[:SUBCLASSOF]->(m:Class" in query
        assert params == {"ontology": "go", "iri": BP}

    def test_children_walk_arc_backwards(self, neo4j_store, session):
        session.run.return_value = []
        neo4j_store.neighbors("go", BP, Direction.IN)
        query, _ = _query(session)
        assert "<-[:SUBCLASSOF]-(m:Class" in query

    def test_named_relation_matches_label_or_uri(self, neo4j_store, session):
        session.run.return_value = [_record(OBO + "GO_0005575")]
        found = neo4j_store.neighbors("go", OBO + "GO_0005634", Direction.OUT, relation_labels=["part of", "BFO_0000050"])
        query, params = _query(session)
        assert "-[r:Related]->" in query
        assert "r.label IN $labels OR r.uri IN $labels" in query
        assert params["labels"] == ["part of", "BFO_0000050"]
        assert [t.iri for t in found] == [OBO + "GO_0005575"]

    def test_empty_relation_labels_skip_query(self, neo4j_store, session):
        assert neo4j_store.neighbors("go", BP, Direction.OUT, relation_labels=[]) == []
        session.run.assert_not_called()

    def test_closure_pushed_down(self, neo4j_store, session):
        session.run.return_value = [_record(OBO + "GO_0008152")]
        found = neo4j_store.closure("go", BP, Direction.IN)
        query, _ = _query(session)
        assert "<-[:SUBCLASSOF*1..]-" in query
        assert "WITH DISTINCT m" in query
        assert "WHERE m <> n" in query
        assert [t.iri for t in found] == [OBO + "GO_0008152"]

    def test_closure_path_stays_in_ontology(self, neo4j_store, session):
        """Intermediate hops must belong to the queried ontology, not only the endpoints"""
        session.run.return_value = []
        neo4j_store.closure("go", BP, Direction.OUT)
        query, params = _query(session)
        assert "MATCH p = (n:Class" in query
        assert "all(x IN nodes(p) WHERE x.ontology_name = $ontology)" in query
        assert params == {"ontology": "go", "iri": BP}

    def test_multiple_hierarchical_types(self, driver, session):
        store = Neo4jGraphStore("bolt://test", "u", "p", hierarchical_types=["SUBCLASSOF", "IS_A"], driver=driver)
        session.run.return_value = []
        store.closure("go", BP, Direction.OUT)
        query, _ = _query(session)
        assert "-[:SUBCLASSOF|IS_A*1..]->" in query

    def test_has_ontology(self, neo4j_store, session):
        session.run.return_value.single.return_value = {'n': {'iri': BP}}
        assert neo4j_store.has_ontology("go")
        session.run.return_value.single.return_value = None
        assert not neo4j_store.has_ontology("nope")


class TestSafety:

    @pytest.mark.parametrize("kwargs", [
        {"hierarchical_types": ["SUBCLASSOF]->() DETACH DELETE n //"]},
        {"node_label": "Class {x: 1}"},
        {"related_type": ""},
    ])
    def test_unsafe_identifiers_rejected(self, driver, kwargs):
        with pytest.raises(UnsafeIdentifierError):
            Neo4jGraphStore("bolt://test", "u", "p", driver=driver, **kwargs)

    def test_requires_hierarchical_type(self, driver):
        with pytest.raises(ValueError):
            Neo4jGraphStore("bolt://test", "u", "p", hierarchical_types=[], driver=driver)

    def test_driver_errors_propagate_and_session_released(self, neo4j_store, driver, session):
        session.run.side_effect = ServiceUnavailable("database unavailable")
        with pytest.raises(ServiceUnavailable):
            neo4j_store.neighbors("go", BP, Direction.OUT)
        driver.session.return_value.__exit__.assert_called_once()

    def test_close_closes_driver(self, neo4j_store, driver):
        with neo4j_store:
            pass
        driver.close.assert_called_once_with()
