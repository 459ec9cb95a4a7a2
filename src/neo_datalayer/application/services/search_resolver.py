"""Search field resolver.

ONLY parent field resolution - batch-resolves parent entity attributes
(e.g. ``book.title`` on loans) once per cache load and builds the search
index used by local search.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ...core.protocols import Orchestrator
from ...core.value_objects import ParentConfig, SearchFieldSpec
from ..queries import MISSING, get_nested_value

logger = logging.getLogger(__name__)


class SearchFieldResolver:
    """Builds ``{str(record id): {"parent.field": value}}`` for cached records.

    Parent records are fetched through the parent entity's own manager,
    looked up by name on the orchestrator, with one ``get_many`` per
    parent relation.
    """

    def __init__(
        self,
        name: str,
        id_field: str,
        parents: Mapping[str, ParentConfig],
        orchestrator: Callable[[], Optional[Orchestrator]],
    ):
        self.name = name
        self.id_field = id_field
        self.parents = parents
        self._orchestrator = orchestrator

    async def resolve(
        self,
        items: List[Dict[str, Any]],
        spec: SearchFieldSpec,
    ) -> Dict[str, Dict[str, str]]:
        """Resolve ``spec.parent_fields`` for ``items``.

        Missing parents resolve to ``""``. Parent manager errors propagate.
        """
        index: Dict[str, Dict[str, str]] = {}
        if not spec.has_parent_fields or not items:
            return index

        orchestrator = self._orchestrator()
        if orchestrator is None:
            logger.warning(f"[EntityManager:{self.name}] No orchestrator, cannot resolve parent fields")
            return index

        for parent_key, fields in spec.parent_fields.items():
            config = self.parents.get(parent_key)
            if config is None:
                logger.warning(f"[EntityManager:{self.name}] Missing parent config for '{parent_key}'")
                continue

            parent_ids = list(dict.fromkeys(
                item.get(config.foreign_key)
                for item in items
                if item.get(config.foreign_key) is not None
            ))
            if not parent_ids:
                continue

            manager = orchestrator.get(config.entity)
            if manager is None:
                logger.warning(f"[EntityManager:{self.name}] Manager not found for '{config.entity}'")
                continue

            parent_id_field = getattr(manager, "id_field", "id")
            parent_items = await manager.get_many(parent_ids)
            by_id = {str(parent.get(parent_id_field)): parent for parent in parent_items}

            for item in items:
                parent = by_id.get(str(item.get(config.foreign_key)), {})
                resolved = index.setdefault(str(item.get(self.id_field)), {})
                for field_name in fields:
                    value = get_nested_value(field_name, parent)
                    resolved[f"{parent_key}.{field_name}"] = "" if value is None or value is MISSING else str(value)

        return index
