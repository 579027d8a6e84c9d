"""
Tree Projection

Builds one-level expandable tree views for collapsible UI tree widgets.
A call expands exactly one level below the focused term; deeper levels are
only flagged (has_children) for the widget to request on demand.
"""

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.terms.model import Term, normalize_ontology_id
from .engine import TraversalEngine

JSTREE_TOP = "#"


@dataclass
class TreeNode:
    """A term in a tree view with its expansion state"""
    term: Term
    children: List["TreeNode"] = field(default_factory=list)
    has_children: bool = False
    expanded: bool = False
    siblings: List["TreeNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'term': self.term.to_dict(),
            'has_children': self.has_children,
            'expanded': self.expanded,
            'children': [child.to_dict() for child in self.children],
        }
        if self.siblings:
            data['siblings'] = [sibling.to_dict() for sibling in self.siblings]
        return data


def _leaf(term: Term) -> TreeNode:
    """Unexpanded node; its children stay with the store until requested"""
    return TreeNode(term=term, has_children=term.has_children)


class TreeProjector:
    """Wraps the traversal engine's neighbor calls into nested tree nodes"""

    def __init__(self, engine: TraversalEngine):
        self.engine = engine

    def build_tree(self, ontology_id: str, term: Term, include_siblings: bool = False) -> TreeNode:
        """
        Project a term and its direct children as an expanded tree node.

        Args:
            ontology_id: Ontology key, matched case-insensitively
            term: Resolved focus term
            include_siblings: Also attach terms sharing a parent with the
                focus term, unexpanded, as peers

        Returns:
            Expanded TreeNode for the term
        """
        ontology = normalize_ontology_id(ontology_id)
        children = self.engine.child_terms(ontology, term)
        node = TreeNode(
            term=term,
            children=[_leaf(child) for child in children],
            has_children=bool(children),
            expanded=True
        )
        if include_siblings:
            node.siblings = [_leaf(sibling) for sibling in self.engine.siblings(ontology, term)]
        return node


def jstree_rows(tree: TreeNode) -> List[Dict[str, Any]]:
    """
    Flatten a tree view into jsTree's parent-reference JSON format.

    The focus term and its siblings are top-level rows (parent '#') in IRI
    order, followed directly by the focus term's children. `children` is
    True when a row can be expanded lazily.
    """
    ids = (str(n) for n in itertools.count(1))
    rows: List[Dict[str, Any]] = []

    def row(node: TreeNode, parent: str) -> str:
        row_id = next(ids)
        term = node.term
        rows.append({
            'id': row_id,
            'parent': parent,
            'iri': term.iri,
            'ontology_name': term.ontology_name,
            'text': term.label or term.short_form or term.iri,
            'state': {'opened': node.expanded},
            'children': node.has_children and not node.expanded,
        })
        return row_id

    for peer in sorted([tree, *tree.siblings], key=lambda n: n.term.iri):
        peer_id = row(peer, JSTREE_TOP)
        if peer is tree:
            for child in tree.children:
                row(child, peer_id)
    return rows
