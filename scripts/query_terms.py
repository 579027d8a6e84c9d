#!/usr/bin/env python3
"""Run ontology term graph queries and print the result as JSON."""
import sys
import json
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.graph.memory_store import NetworkXGraphStore
from src.service import TermQueryService
from src.traversal.pagination import PageRequest
from src.traversal.taxonomy import RelationTaxonomy
from src.traversal.tree import jstree_rows
from src.utils import Config, setup_logging

OPERATIONS = [
    "lookup", "terms", "roots", "parents", "children",
    "ancestors", "descendants", "related", "tree", "jstree",
]


def build_service(args) -> TermQueryService:
    """Neo4j-backed service, or an in-memory one over a YAML fixture"""
    taxonomy = RelationTaxonomy(Path(args.taxonomy))
    if args.fixture:
        store = NetworkXGraphStore.from_yaml(Path(args.fixture), taxonomy.hierarchical_types)
        return TermQueryService(store, taxonomy)
    return TermQueryService.from_config(taxonomy)


def run(service: TermQueryService, args):
    """Dispatch one operation; returns a JSON-serialisable value or None"""
    page = PageRequest(page=args.page, size=args.size)
    ontology = args.ontology

    if args.operation == "lookup":
        term = service.lookup_term(ontology, iri=args.iri, short_form=args.short_form, obo_id=args.obo_id)
        return term.to_dict() if term else None
    if args.operation == "terms":
        result = service.list_terms(ontology, page, iri=args.iri, short_form=args.short_form, obo_id=args.obo_id)
        return result.to_dict() if result else None
    if args.operation == "roots":
        return service.list_roots(ontology, page).to_dict()

    if not args.iri:
        raise SystemExit(f"--iri is required for '{args.operation}'")

    if args.operation in ("tree", "jstree"):
        tree = service.build_tree_view(ontology, args.iri, include_siblings=args.siblings)
        if tree is None:
            return None
        return tree.to_dict() if args.operation == "tree" else jstree_rows(tree)

    if args.operation == "related":
        if not args.relation:
            raise SystemExit("--relation is required for 'related'")
        result = service.list_related(ontology, args.iri, args.relation, page)
    else:
        result = getattr(service, f"list_{args.operation}")(ontology, args.iri, page)
    return result.to_dict() if result else None


def main():
    """Run a term graph query."""
    parser = argparse.ArgumentParser(
        description="Query an ontology term graph (lookup, navigation, tree views)."
    )
    parser.add_argument("operation", choices=OPERATIONS, help="Query to run")
    parser.add_argument("ontology", help="Ontology id (case-insensitive), e.g. 'go'")
    parser.add_argument("--iri", help="Term IRI (already decoded)")
    parser.add_argument("--short-form", help="Term short form, e.g. GO_0008150")
    parser.add_argument("--obo-id", help="Term OBO id, e.g. GO:0008150")
    parser.add_argument("--relation", help="Relation label for 'related', e.g. part_of")
    parser.add_argument("--siblings", action="store_true", help="Include siblings in tree views")
    parser.add_argument("--page", type=int, default=0, help="Zero-based page number (default: 0)")
    parser.add_argument(
        "--size",
        type=int,
        default=Config.DEFAULT_PAGE_SIZE,
        help=f"Page size (default: {Config.DEFAULT_PAGE_SIZE})"
    )
    parser.add_argument(
        "--fixture",
        help="Query a YAML seed file in memory instead of Neo4j"
    )
    parser.add_argument(
        "--taxonomy",
        default=Config.RELATION_TAXONOMY,
        help="Relation taxonomy YAML (default: the packaged src/metamodel/relation_taxonomy.yaml)"
    )
    parser.add_argument("--log-level", default=Config.LOG_LEVEL, help="Logging level")
    args = parser.parse_args()

    setup_logging(args.log_level)

    with build_service(args) as service:
        result = run(service, args)
        if result is None:
            reason = "no such term" if service.ontology_exists(args.ontology) else "no such ontology"
            print(json.dumps({"error": "not found", "reason": reason}, indent=2))
            sys.exit(1)

    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
