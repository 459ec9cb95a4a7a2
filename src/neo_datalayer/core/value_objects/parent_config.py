"""Parent relation value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParentConfig:
    """Foreign relation from an entity to its parent entity.

    ``entity`` is the parent manager's name as registered with the
    orchestrator; ``foreign_key`` is the field on the child record that
    holds the parent identifier.
    """

    entity: str
    foreign_key: str
