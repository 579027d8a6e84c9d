"""
Term data model

Immutable per-query representations of ontology terms and the selectors
used to look a term up.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


def normalize_ontology_id(ontology_id: str) -> str:
    """Ontology ids are case-insensitive; every lookup uses the lowercase key."""
    return ontology_id.strip().lower()


@dataclass(frozen=True)
class Term:
    """A single ontology term as read from the graph store"""
    iri: str
    ontology_name: str
    short_form: Optional[str] = None
    obo_id: Optional[str] = None
    label: Optional[str] = None
    is_root: bool = False
    has_children: bool = False
    annotations: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'iri': self.iri,
            'ontology_name': self.ontology_name,
            'short_form': self.short_form,
            'obo_id': self.obo_id,
            'label': self.label,
            'is_root': self.is_root,
            'has_children': self.has_children,
            'annotations': dict(self.annotations),
        }


class SelectorKind(str, Enum):
    """Alternate term identifiers, in resolution precedence order"""
    IRI = "iri"
    SHORT_FORM = "short_form"
    OBO_ID = "obo_id"


SELECTOR_PRECEDENCE = (SelectorKind.IRI, SelectorKind.SHORT_FORM, SelectorKind.OBO_ID)


@dataclass(frozen=True)
class Selector:
    """Tagged term selector: exactly one identifier kind and its value"""
    kind: SelectorKind
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError(f"Selector {self.kind.value} requires a non-empty value")

    @property
    def field(self) -> str:
        """Store property name matched by this selector"""
        return self.kind.value

    @classmethod
    def from_params(
        cls,
        iri: Optional[str] = None,
        short_form: Optional[str] = None,
        obo_id: Optional[str] = None
    ) -> Optional["Selector"]:
        """
        Build a selector from optional identifier parameters.

        Precedence is IRI > short form > OBO id. Empty strings count as
        "not supplied". Returns None when no identifier was given.
        """
        supplied = {
            SelectorKind.IRI: iri,
            SelectorKind.SHORT_FORM: short_form,
            SelectorKind.OBO_ID: obo_id,
        }
        for kind in SELECTOR_PRECEDENCE:
            value = supplied[kind]
            if value:
                return cls(kind=kind, value=value)
        return None
