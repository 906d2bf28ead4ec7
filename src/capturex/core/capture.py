"""Capture source selection.

Asks the platform picker for a single file in camera-biased or
library-biased mode. Drops and pastes skip the picker but are otherwise
handled like a library pick.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from capturex.core.state import PickedFile

logger = logging.getLogger(__name__)


class CaptureMode(StrEnum):
    CAMERA = "camera"
    LIBRARY = "library"


class NativePicker(Protocol):
    """Protocol for the platform file/camera picker."""

    async def pick(self, mode: CaptureMode) -> PickedFile | None:
        """Open the picker and wait for the user.

        Args:
            mode: ``CAMERA`` to prefer live capture, ``LIBRARY`` to prefer
                existing files.

        Returns:
            The single chosen file, or None if the user cancelled.
        """
        ...


class CaptureSourceSelector:
    """Requests files from the picker and normalizes drop/paste input."""

    def __init__(self, picker: NativePicker) -> None:
        self._picker = picker

    async def request_capture(self, mode: CaptureMode) -> PickedFile | None:
        file = await self._picker.pick(CaptureMode(mode))
        if file is None:
            logger.debug("Picker cancelled (mode=%s)", mode)
        else:
            logger.info("Picked %s via %s", file.name, mode)
        return file

    def accept_dropped(self, file: PickedFile | None) -> PickedFile | None:
        """Treat a dropped or pasted file as a library pick."""
        if file is not None:
            logger.info("Picked %s via %s (drop)", file.name, CaptureMode.LIBRARY)
        return file
