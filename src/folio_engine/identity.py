"""Canonical asset identity shared by positions and targets.

Every comparison between a position and a target goes through
:func:`identify`; never compare raw symbols or names elsewhere.
"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional, Protocol

from .exceptions import DuplicateIdentifierError


class Identifiable(Protocol):
    symbol: Optional[str]
    name: str


def canonical_identifier(symbol: Optional[str], name: Optional[str]) -> str:
    """Upper-cased ticker when present, otherwise the trimmed display name."""
    if symbol and symbol.strip():
        return symbol.strip().upper()
    return (name or "").strip()


def identify(entity: Identifiable | Mapping[str, Any]) -> str:
    """Resolve a position, target or plain mapping to its join key.

    Mappings may carry the ticker under ``symbol`` or ``ticker``.
    """
    if isinstance(entity, Mapping):
        symbol = entity.get("symbol") or entity.get("ticker")
        return canonical_identifier(symbol, entity.get("name"))
    return canonical_identifier(entity.symbol, entity.name)


def index_by_identifier(entities: Iterable[Identifiable]) -> dict[str, list]:
    """Group entities by identifier, preserving input order within each group."""
    index: dict[str, list] = {}
    for entity in entities:
        index.setdefault(identify(entity), []).append(entity)
    return index


def ensure_unique(existing: Iterable[Identifiable], candidate: Identifiable,
                  exclude: Optional[Identifiable] = None) -> None:
    """
    Reject a candidate whose identifier or display name is already taken.

    Args:
        existing: Entities already stored
        candidate: Entity about to be inserted or written back
        exclude: The stored entity being replaced by ``candidate``, if any

    Raises:
        DuplicateIdentifierError: On an identifier or name collision
    """
    identifier = identify(candidate)
    name = candidate.name.strip()

    for entity in existing:
        if exclude is not None and entity is exclude:
            continue
        if entity.name.strip() == name:
            raise DuplicateIdentifierError(identifier, f'Name "{name}" already exists')
        if identify(entity) == identifier:
            raise DuplicateIdentifierError(identifier, f'Identifier "{identifier}" already exists')
