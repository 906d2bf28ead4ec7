"""Zoom overlay for the annotated result image."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from capturex.core.state import SessionStore

logger = logging.getLogger(__name__)


class ModalController:
    """Open/closed flag that only holds while there is an annotated image to show."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._open = False

    def open(self) -> bool:
        """Open the overlay; returns False (and stays closed) without an annotated image."""
        if self._store.annotated_image_ref() is None:
            logger.debug("No annotated image; modal stays closed")
            self._open = False
            return False
        self._open = True
        return True

    def close(self) -> None:
        self._open = False

    @property
    def is_open(self) -> bool:
        if self._open and self._store.annotated_image_ref() is None:
            self._open = False
        return self._open
