"""Preview artifact lifecycle: create, supersede, and release local handles.

Every handle installed through ``ResourceLifecycle.supersede`` is revoked
exactly once, when a newer selection replaces it, on reset, or on session
teardown.
"""

from __future__ import annotations

import logging
import mimetypes
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from capturex.core.state import SelectedImage

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol (kept for test mocking)
# ---------------------------------------------------------------------------


class ArtifactStore(Protocol):
    """Allocates and frees locally renderable preview handles."""

    def create(self, image: SelectedImage) -> str:
        """Allocate a handle for the image and return it."""
        ...

    def revoke(self, handle: str) -> None:
        """Free a handle previously returned by ``create``."""
        ...


# ---------------------------------------------------------------------------
# Concrete implementation
# ---------------------------------------------------------------------------


class TempFileArtifactStore:
    """Writes each preview to its own temporary file; the handle is the file path."""

    def __init__(self, directory: str | None = None) -> None:
        self._directory = directory
        if directory is not None:
            Path(directory).mkdir(parents=True, exist_ok=True)

    def create(self, image: SelectedImage) -> str:
        suffix = mimetypes.guess_extension(image.mime_type) or Path(image.name).suffix
        with tempfile.NamedTemporaryFile(
            prefix="capturex-preview-",
            suffix=suffix,
            dir=self._directory,
            delete=False,
        ) as fh:
            fh.write(image.data)
        logger.debug("Created preview %s for %s", fh.name, image.name)
        return fh.name

    def revoke(self, handle: str) -> None:
        Path(handle).unlink(missing_ok=True)
        logger.debug("Removed preview %s", handle)


class ResourceLifecycle:
    """Tracks the one outstanding preview handle of a session."""

    def __init__(self, store: ArtifactStore) -> None:
        self._store = store
        self._current: str | None = None
        self._created: int = 0
        self._released: int = 0

    # -- Public API ---------------------------------------------------------

    def supersede(self, new_handle: str) -> str:
        """Install ``new_handle`` as the current handle, releasing the previous one."""
        previous = self._current
        self._current = new_handle
        self._created += 1
        if previous is not None and previous != new_handle:
            self._revoke(previous)
        return new_handle

    def release(self, handle: str) -> None:
        """Release ``handle`` if it is the outstanding one; otherwise do nothing."""
        if handle != self._current:
            logger.warning("Ignoring release of stale preview handle %s", handle)
            return
        self._current = None
        self._revoke(handle)

    def clear(self) -> None:
        """Release the outstanding handle, if any."""
        if self._current is not None:
            self.release(self._current)

    @property
    def current(self) -> str | None:
        return self._current

    @property
    def created(self) -> int:
        """Number of handles installed so far."""
        return self._created

    @property
    def released(self) -> int:
        """Number of handles revoked so far."""
        return self._released

    # -- Internal -----------------------------------------------------------

    def _revoke(self, handle: str) -> None:
        self._released += 1
        try:
            self._store.revoke(handle)
        except OSError:
            logger.warning("Failed to remove preview %s", handle, exc_info=True)
