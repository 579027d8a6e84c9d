"""
Exception hierarchy for the ontology term query core.

Missing terms and empty neighbor sets are ordinary return values, not
exceptions. These classes cover configuration problems and malformed
store data only; driver faults from the graph database propagate as-is.
"""


class OntologyQueryError(Exception):
    """Base exception for the query core."""


class GraphStoreError(OntologyQueryError):
    """A graph store returned data the core cannot interpret."""


class UnsafeIdentifierError(GraphStoreError, ValueError):
    """A relationship type that cannot be safely interpolated into Cypher."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unsafe identifier: {name!r}")


class TaxonomyError(OntologyQueryError, ValueError):
    """The relation taxonomy configuration is missing or malformed."""
