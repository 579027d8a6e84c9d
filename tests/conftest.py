"""
Pytest configuration and fixtures for the term graph query tests.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.graph.memory_store import NetworkXGraphStore
from src.service import TermQueryService
from src.traversal.engine import TraversalEngine
from src.traversal.taxonomy import RelationTaxonomy
from src.traversal.tree import TreeProjector

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def taxonomy():
    """Load the default relation taxonomy configuration"""
    return RelationTaxonomy()


@pytest.fixture(scope="function")
def store(taxonomy):
    """Fresh in-memory store over the GO sample for each test"""
    return NetworkXGraphStore.from_yaml(FIXTURES / "go_sample.yaml", taxonomy.hierarchical_types)


@pytest.fixture(scope="function")
def engine(store, taxonomy):
    return TraversalEngine(store, taxonomy)


@pytest.fixture(scope="function")
def projector(engine):
    return TreeProjector(engine)


@pytest.fixture(scope="function")
def service(store, taxonomy):
    """Query service over the in-memory store"""
    service = TermQueryService(store, taxonomy)
    yield service
    service.close()
