"""
Term graph traversal package.

This package provides:
- Relation taxonomy classification
- Hierarchical closure and neighbor traversal
- Stable pagination
- One-level tree projection for UI tree widgets
"""

from .taxonomy import RelationTaxonomy
from .engine import TraversalEngine
from .pagination import Page, PageRequest, paginate
from .tree import TreeNode, TreeProjector, jstree_rows

__all__ = [
    'RelationTaxonomy', 'TraversalEngine', 'Page', 'PageRequest', 'paginate',
    'TreeNode', 'TreeProjector', 'jstree_rows',
]
