from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .store import coerce_identifier
from .store import coerce_position

logger = logging.getLogger(__name__)


class MutationKind(StrEnum):
    POSITION_FOUND = "position-found"
    ITEM_SORTED = "item-sorted"
    MARKER_REVEALED = "marker-revealed"
    TREASURE_UNLOCK = "treasure-unlock"


@dataclass(frozen=True)
class PositionFound:
    position: int

    kind = MutationKind.POSITION_FOUND


@dataclass(frozen=True)
class ItemSorted:
    item_id: str

    kind = MutationKind.ITEM_SORTED


@dataclass(frozen=True)
class MarkerRevealed:
    marker_id: str

    kind = MutationKind.MARKER_REVEALED


@dataclass(frozen=True)
class TreasureUnlock:
    kind = MutationKind.TREASURE_UNLOCK


Mutation = PositionFound | ItemSorted | MarkerRevealed | TreasureUnlock


def parse_mutation(kind: Any, payload: Any = None) -> Mutation | None:
    """Coerce an untrusted (kind, payload) pair into a typed mutation.

    Returns None for unknown kinds and invalid payloads; clients may send
    anything and the caller treats None as "ignore".
    """

    try:
        kind = MutationKind(kind)
    except (TypeError, ValueError):
        logger.debug("Ignoring unknown mutation kind %r", kind)
        return None

    if kind is MutationKind.TREASURE_UNLOCK:
        # The unlock carries no payload; whatever the client sent is dropped.
        return TreasureUnlock()

    if kind is MutationKind.POSITION_FOUND:
        position = coerce_position(payload)
        if position is None:
            logger.debug("Rejected position payload %r", payload)
            return None
        return PositionFound(position)

    identifier = coerce_identifier(payload)
    if identifier is None:
        logger.debug("Rejected %s payload %r", kind, payload)
        return None
    if kind is MutationKind.ITEM_SORTED:
        return ItemSorted(identifier)
    return MarkerRevealed(identifier)
