"""
Tests for the in-memory NetworkX graph store.
"""

import pytest

from src.errors import GraphStoreError
from src.graph.memory_store import NetworkXGraphStore
from src.graph.store import Direction

OBO = "http://purl.obolibrary.org/obo/"


@pytest.fixture
def seed():
    return {
        "ontologies": {
            "Uberon": {
                "terms": [
                    {"iri": OBO + "UBERON_0000061", "short_form": "UBERON_0000061", "label": "anatomical structure"},
                    {"iri": OBO + "UBERON_0000062", "short_form": "UBERON_0000062", "label": "organ", "synonyms": ["viscus"]},
                    {"iri": OBO + "UBERON_0002107", "short_form": "UBERON_0002107", "label": "liver"},
                ],
                "edges": [
                    {"source": OBO + "UBERON_0000062", "target": OBO + "UBERON_0000061", "relation": "subclassof"},
                    {"source": OBO + "UBERON_0002107", "target": OBO + "UBERON_0000062", "relation": "SUBCLASSOF"},
                    {"source": OBO + "UBERON_0002107", "target": OBO + "UBERON_0000062", "relation": "part_of"},
                ],
            }
        }
    }


class TestLoading:

    def test_ontology_keys_lowercased(self, seed):
        store = NetworkXGraphStore.from_mapping(seed)
        assert store.has_ontology("uberon")
        assert not store.has_ontology("Uberon")

    def test_terms_and_flags(self, seed):
        store = NetworkXGraphStore.from_mapping(seed)
        organ = store.find_term("uberon", "iri", OBO + "UBERON_0000062")
        assert organ.label == "organ"
        assert organ.ontology_name == "uberon"
        assert organ.annotations == {"synonyms": ["viscus"]}
        assert not organ.is_root and organ.has_children

        root = store.find_term("uberon", "short_form", "UBERON_0000061")
        assert root.is_root and root.has_children

    def test_hierarchical_and_named_arcs_kept_apart(self, seed):
        store = NetworkXGraphStore.from_mapping(seed)
        liver = OBO + "UBERON_0002107"
        assert [t.label for t in store.neighbors("uberon", liver, Direction.OUT)] == ["organ"]
        assert [t.label for t in store.neighbors("uberon", liver, Direction.OUT, ["part_of"])] == ["organ"]
        assert store.neighbors("uberon", liver, Direction.IN) == []
        assert store.neighbors("uberon", liver, Direction.OUT, []) == []

    def test_no_native_closure(self, seed):
        store = NetworkXGraphStore.from_mapping(seed)
        assert store.closure("uberon", OBO + "UBERON_0002107", Direction.OUT) is None

    def test_unknown_ontology_and_term(self, seed):
        store = NetworkXGraphStore.from_mapping(seed)
        assert store.find_terms("fma") == []
        assert store.find_term("fma", "iri", OBO + "UBERON_0000062") is None
        assert store.neighbors("uberon", OBO + "UBERON_9999999", Direction.IN) == []

    def test_edge_to_unknown_term(self, seed):
        seed["ontologies"]["Uberon"]["edges"].append(
            {"source": OBO + "UBERON_0002107", "target": OBO + "UBERON_0000000", "relation": "SUBCLASSOF"}
        )
        with pytest.raises(GraphStoreError):
            NetworkXGraphStore.from_mapping(seed)

    def test_edge_missing_field(self, seed):
        seed["ontologies"]["Uberon"]["edges"].append({"source": OBO + "UBERON_0002107", "relation": "part_of"})
        with pytest.raises(GraphStoreError, match="target"):
            NetworkXGraphStore.from_mapping(seed)

    def test_term_without_iri(self, seed):
        seed["ontologies"]["Uberon"]["terms"].append({"label": "nameless"})
        with pytest.raises(GraphStoreError):
            NetworkXGraphStore.from_mapping(seed)

    def test_ontologies_must_be_mapping(self):
        with pytest.raises(GraphStoreError):
            NetworkXGraphStore.from_mapping({"ontologies": ["go"]})

    def test_from_yaml(self, store):
        assert store.has_ontology("go")
        assert store.has_ontology("efo")
        assert len(store.find_terms("loop")) == 4
