"""Preview management: turns a validated image into the session's selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from capturex.core.state import Idle, PreviewArtifact, Selected

if TYPE_CHECKING:
    from capturex.core.lifecycle import ArtifactStore, ResourceLifecycle
    from capturex.core.state import SelectedImage, SessionStore

logger = logging.getLogger(__name__)


class PreviewManager:
    """Allocates preview artifacts and moves the session to ``Selected``."""

    def __init__(self, store: SessionStore, artifacts: ArtifactStore, lifecycle: ResourceLifecycle) -> None:
        self._store = store
        self._artifacts = artifacts
        self._lifecycle = lifecycle

    def on_valid_file(self, image: SelectedImage) -> PreviewArtifact:
        """Install a new selection from any state, discarding previous results.

        The prior artifact is released as the new one is installed.
        """
        handle = self._lifecycle.supersede(self._artifacts.create(image))
        artifact = PreviewArtifact(handle=handle)
        generation = self._store.advance()
        self._store.transition(Selected(image=image, artifact=artifact, generation=generation))
        logger.info("Selected %s (%s, %d bytes)", image.name, image.mime_type, len(image.data))
        return artifact

    def discard(self) -> None:
        """Release the current artifact and return the session to ``Idle``."""
        self._lifecycle.clear()
        generation = self._store.advance()
        self._store.transition(Idle(generation=generation))
