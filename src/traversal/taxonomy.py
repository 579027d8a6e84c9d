"""
Relation Taxonomy Configuration Loader

Loads relation_taxonomy.yaml to tell hierarchical (is-a) relationship types
apart from named relations, and to map the many spellings of a named
relation (label, short form, IRI) onto the set of stored forms the graph
store should match.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple

import yaml

from src.errors import TaxonomyError
from src.graph.store import DEFAULT_HIERARCHICAL_TYPES
from src.utils import get_metamodel_path

logger = logging.getLogger(__name__)

_FOLD = re.compile(r"[\s_\-]+")


def _fold(label: str) -> str:
    """Case- and separator-insensitive key: 'Part Of' == 'part_of' == 'PART-OF'"""
    return _FOLD.sub("_", label.strip()).lower()


@dataclass
class RelationDefinition:
    """A named relation and every spelling it may be stored or requested under"""
    name: str
    aliases: List[str] = field(default_factory=list)
    description: str = ""

    @property
    def stored_forms(self) -> FrozenSet[str]:
        return frozenset([self.name, *self.aliases])


class RelationTaxonomy:
    """
    Loads and provides access to relation taxonomy configuration.

    This is the single source of truth for which relationship types form
    the class hierarchy and how relation labels are normalized.
    """

    def __init__(self, config_path: Optional[Path] = None, config: Optional[Dict] = None):
        """
        Initialize taxonomy from a config file or an already parsed mapping.

        Args:
            config_path: Path to relation_taxonomy.yaml. If None (and no config
                is given), uses the default metamodel location.
            config: Parsed configuration; takes precedence over config_path.
        """
        if config is None:
            if config_path is None:
                config_path = get_metamodel_path("relation_taxonomy.yaml")
            self.config_path = Path(config_path)
            config = self._load_config()
        else:
            self.config_path = None

        if not isinstance(config, dict):
            raise TaxonomyError("Relation taxonomy must be a mapping")
        self.config = config

        self.hierarchical_types: Tuple[str, ...] = self._parse_hierarchical()
        self.hierarchical_aliases: FrozenSet[str] = frozenset(
            _fold(a) for a in [*self.hierarchical_types, *config.get('hierarchical_aliases', [])]
        )
        self.related_type: str = config.get('related_type', 'Related')
        self.relations: Dict[str, RelationDefinition] = self._parse_relations()

        # Folded spelling -> canonical relation name
        self._alias_index: Dict[str, str] = {}
        for relation in self.relations.values():
            for form in relation.stored_forms:
                self._alias_index[_fold(form)] = relation.name

        logger.info(
            "Relation taxonomy loaded: hierarchical=%s, %d named relations",
            ",".join(self.hierarchical_types),
            len(self.relations)
        )

    def _load_config(self) -> dict:
        """Load YAML configuration file"""
        try:
            with open(self.config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except OSError as e:
            raise TaxonomyError(f"Cannot read relation taxonomy {self.config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise TaxonomyError(f"Invalid YAML in relation taxonomy {self.config_path}: {e}") from e

    def _parse_hierarchical(self) -> Tuple[str, ...]:
        types = self.config.get('hierarchical', list(DEFAULT_HIERARCHICAL_TYPES))
        if isinstance(types, str):
            types = [types]
        if not isinstance(types, list) or not types:
            raise TaxonomyError("'hierarchical' must list at least one relationship type")
        return tuple(str(t).upper() for t in types)

    def _parse_relations(self) -> Dict[str, RelationDefinition]:
        relations = {}
        for name, relation_def in (self.config.get('relations') or {}).items():
            if relation_def is None:
                relation_def = {}
            elif isinstance(relation_def, list):
                relation_def = {'aliases': relation_def}
            elif not isinstance(relation_def, dict):
                raise TaxonomyError(f"Relation {name!r} must map to a list of aliases or a mapping")
            relations[name] = RelationDefinition(
                name=name,
                aliases=[str(a) for a in relation_def.get('aliases', [])],
                description=relation_def.get('description', '')
            )
        return relations

    def is_hierarchical(self, label: str) -> bool:
        """Whether a requested relation label names the is-a hierarchy"""
        return _fold(label) in self.hierarchical_aliases

    def normalize_relation(self, label: str) -> str:
        """
        Map any known spelling of a relation to its canonical name.

        Unknown labels pass through unchanged: they simply match no edges.
        """
        return self._alias_index.get(_fold(label), label)

    def stored_forms(self, label: str) -> FrozenSet[str]:
        """
        All labels/IRIs an edge of the requested relation may be stored under.

        Args:
            label: Relation label as requested by the caller

        Returns:
            The canonical name and its aliases, or just the label itself when
            the relation is not in the taxonomy
        """
        relation = self.relations.get(self.normalize_relation(label))
        if relation is None:
            return frozenset([label])
        return relation.stored_forms
