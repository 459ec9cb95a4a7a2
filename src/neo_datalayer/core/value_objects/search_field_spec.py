"""Search field specification value object.

ONLY search field parsing - splits configured search fields into fields
on the record itself and fields resolved from parent entities.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .parent_config import ParentConfig

logger = logging.getLogger(__name__)

SEPARATOR = "."


@dataclass(frozen=True)
class SearchFieldSpec:
    """Parsed search field configuration.

    ``own_fields`` are matched directly on the record. ``parent_fields``
    maps a parent relation key to the parent attributes searched through
    the search index, e.g. ``{"book": ["title"]}`` for ``"book.title"``.
    """

    own_fields: List[str] = field(default_factory=list)
    parent_fields: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def parse(
        cls,
        search_fields: Optional[Iterable[str]],
        parents: Mapping[str, ParentConfig],
        entity: str = "",
    ) -> "SearchFieldSpec":
        """Parse a search field list against the declared parent relations.

        Fields naming an undeclared parent are logged and skipped.
        """
        own_fields: List[str] = []
        parent_fields: Dict[str, List[str]] = {}

        for name in search_fields or []:
            if SEPARATOR not in name:
                own_fields.append(name)
                continue

            parent_key, _, field_name = name.partition(SEPARATOR)
            if not parent_key or not field_name:
                continue

            if parent_key not in parents:
                logger.warning(
                    f"[EntityManager:{entity}] Unknown parent '{parent_key}' "
                    f"in search_fields '{name}', skipping"
                )
                continue

            parent_fields.setdefault(parent_key, []).append(field_name)

        return cls(own_fields=own_fields, parent_fields=parent_fields)

    @property
    def has_parent_fields(self) -> bool:
        """Check if any field needs parent resolution."""
        return bool(self.parent_fields)

    def index_keys(self) -> List[str]:
        """Search index keys, e.g. ``["book.title"]``."""
        return [
            f"{parent_key}{SEPARATOR}{field_name}"
            for parent_key, fields in self.parent_fields.items()
            for field_name in fields
        ]
