"""
Pagination and ordering

Turns an in-memory candidate set into a stable page. Every sequence the
engine returns is ordered by ascending IRI before slicing, so page
boundaries do not move between identical queries even when the store's
natural order does.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, List, Sequence, TypeVar

from src.terms.model import Term
from src.utils import Config

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number and page size supplied by the caller"""
    page: int = 0
    size: int = field(default_factory=lambda: Config.DEFAULT_PAGE_SIZE)

    def __post_init__(self):
        if self.page < 0:
            raise ValueError(f"Page number must be non-negative, got {self.page}")
        if self.size < 0:
            raise ValueError(f"Page size must be non-negative, got {self.size}")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    """One slice of an ordered result set"""
    items: List[T]
    total_count: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        if self.size == 0:
            return 0
        return -(-self.total_count // self.size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [item.to_dict() if hasattr(item, 'to_dict') else item for item in self.items],
            'total_count': self.total_count,
            'page': self.page,
            'size': self.size,
            'total_pages': self.total_pages,
        }


def sort_terms(terms: Iterable[Term]) -> List[Term]:
    """Order terms by IRI, keeping the first occurrence of each IRI"""
    unique: Dict[str, Term] = {}
    for term in terms:
        unique.setdefault(term.iri, term)
    return [unique[iri] for iri in sorted(unique)]


def paginate(sequence: Sequence[T], request: PageRequest = None) -> Page[T]:
    """
    Slice an ordered sequence into a page.

    Args:
        sequence: Fully ordered candidate set
        request: Page number and size (defaults to the first page)

    Returns:
        Page whose total_count is the size of the whole sequence; a page
        past the end has no items
    """
    request = request or PageRequest()
    start = request.offset
    return Page(
        items=list(sequence[start:start + request.size]),
        total_count=len(sequence),
        page=request.page,
        size=request.size
    )
