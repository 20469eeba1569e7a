"""Translates drag-and-drop move intents into store reorders."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from core.store import AppStore


@dataclass(frozen=True)
class MoveIntent:
    """Move `source_id` to the position currently held by `target_id`.

    Both ids refer to the order displayed when the drag started.
    """

    source_id: str
    target_id: Optional[str] = None


class ReorderEngine:
    def __init__(self, store: AppStore):
        self._store = store

    def handle_move(self, intent: MoveIntent) -> bool:
        """Apply `intent`; returns True when a reorder was dispatched."""
        if intent.target_id is None or intent.source_id == intent.target_id:
            return False

        state = self._store.state
        old_index = state.index_of(intent.source_id)
        new_index = state.index_of(intent.target_id)
        if old_index is None or new_index is None:
            logger.debug("Ignoring move {} -> {}: item no longer listed", intent.source_id, intent.target_id)
            return False

        self._store.reorder_images(old_index, new_index)
        return True
