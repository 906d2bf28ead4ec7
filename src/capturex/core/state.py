"""Session data model.

The session is always exactly one of ``Idle``, ``Selected``, ``Uploading`` or
``Resolved``. Every state that refers to an image also owns its preview
artifact, so "uploading without an image" cannot be constructed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from capturex.exceptions import ProcessingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickedFile:
    """A raw file as handed over by the picker, a drop or a paste."""

    data: bytes
    mime_type: str | None
    name: str


@dataclass(frozen=True)
class SelectedImage:
    """A file that passed validation."""

    data: bytes
    mime_type: str
    name: str

    def __repr__(self) -> str:
        return f"SelectedImage(name={self.name!r}, mime_type={self.mime_type!r}, size={len(self.data)})"


@dataclass(frozen=True)
class PreviewArtifact:
    """Locally renderable handle derived from a selected image."""

    handle: str


@dataclass(frozen=True)
class Prediction:
    """A single class prediction, confidence in percent as sent by the service."""

    label: str
    confidence: float


@dataclass(frozen=True)
class UploadSuccess:
    """The service answered with a parseable result."""

    predictions: tuple[Prediction, ...] = ()
    annotated_image_ref: str | None = None
    filename: str = ""
    processing_success: bool = True
    processing_error: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def processing_failure(self) -> ProcessingError | None:
        """Describe a processing_success=false answer, or None when processing succeeded."""
        if self.processing_success:
            return None
        return ProcessingError(self.processing_error or "Image processing failed")


@dataclass(frozen=True)
class UploadFailure:
    """The upload attempt did not produce a usable result."""

    message: str


UploadOutcome: TypeAlias = UploadSuccess | UploadFailure


@dataclass(frozen=True)
class Idle:
    generation: int = 0


@dataclass(frozen=True)
class Selected:
    image: SelectedImage
    artifact: PreviewArtifact
    generation: int = 0


@dataclass(frozen=True)
class Uploading:
    image: SelectedImage
    artifact: PreviewArtifact
    generation: int = 0


@dataclass(frozen=True)
class Resolved:
    image: SelectedImage
    artifact: PreviewArtifact
    outcome: UploadOutcome
    generation: int = 0


SessionState: TypeAlias = Idle | Selected | Uploading | Resolved


class SessionStore:
    """Holds the single mutable session state and its generation counter.

    The generation increases on every transition that invalidates in-flight
    work (new selection, reset, new upload). Responses tagged with an older
    generation must not be applied.
    """

    def __init__(self) -> None:
        self._state: SessionState = Idle()
        self._generation: int = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def advance(self) -> int:
        """Start a new generation and return it."""
        self._generation += 1
        return self._generation

    def transition(self, state: SessionState) -> None:
        logger.debug(
            "Session %s -> %s (generation=%s)",
            type(self._state).__name__,
            type(state).__name__,
            state.generation,
        )
        self._state = state

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def annotated_image_ref(self) -> str | None:
        """Return the annotated image reference of the current result, if any."""
        state = self._state
        if isinstance(state, Resolved) and isinstance(state.outcome, UploadSuccess):
            return state.outcome.annotated_image_ref or None
        return None
