"""Upload coordination.

Architecture:
    user trigger -> UploadController.submit -> AnalysisClient.analyze (one POST)

The ``Uploading`` state is the only mutual exclusion: it is entered before
the first suspension point, so a second trigger arriving while the request
is in flight sees it and is ignored. Each request is tagged with the session
generation it was issued under; a response for an older generation is
dropped instead of overwriting newer state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from capturex.core.state import (
    Prediction,
    Resolved,
    Selected,
    UploadFailure,
    UploadSuccess,
    Uploading,
)
from capturex.exceptions import CaptureError

if TYPE_CHECKING:
    from typing import Any

    from capturex.client.schemas import AnalysisResponse
    from capturex.client.transport import AnalysisClient
    from capturex.core.state import SelectedImage, SessionStore, UploadOutcome

logger = logging.getLogger(__name__)


class UploadController:
    """Owns the session's single in-flight upload."""

    def __init__(self, store: SessionStore, client: AnalysisClient) -> None:
        self._store = store
        self._client = client
        self._requests_sent: int = 0
        self._stale_responses: int = 0

    async def submit(self, image: SelectedImage) -> UploadOutcome | None:
        """Upload ``image`` once and resolve the session with the outcome.

        Returns None without touching the network when the session has no
        selection or an upload is already running. Otherwise returns the
        outcome, which is applied to the session only if no newer selection,
        reset or upload happened in the meantime.
        """
        state = self._store.state
        if isinstance(state, Uploading):
            logger.info("Upload already in progress; ignoring submit")
            return None
        if not isinstance(state, (Selected, Resolved)) or state.image != image:
            logger.info("No matching selection to upload; ignoring submit")
            return None

        generation = self._store.advance()
        artifact = state.artifact
        self._store.transition(Uploading(image=image, artifact=artifact, generation=generation))
        self._requests_sent += 1

        outcome = await self._attempt(image)

        if not self._store.is_current(generation):
            self._stale_responses += 1
            logger.info(
                "Discarding stale response for %s (generation %s, current %s)",
                image.name,
                generation,
                self._store.generation,
            )
            return outcome

        self._store.transition(Resolved(image=image, artifact=artifact, outcome=outcome, generation=generation))
        return outcome

    @property
    def requests_sent(self) -> int:
        """Number of network requests issued so far."""
        return self._requests_sent

    @property
    def stale_responses(self) -> int:
        """Number of responses dropped because the session moved on."""
        return self._stale_responses

    async def _attempt(self, image: SelectedImage) -> UploadOutcome:
        try:
            response, raw = await self._client.analyze(image)
        except CaptureError as exc:
            return UploadFailure(message=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while uploading %s", image.name)
            return UploadFailure(message=str(exc) or type(exc).__name__)
        return _to_success(response, raw)


def _to_success(response: AnalysisResponse, raw: dict[str, Any]) -> UploadSuccess:
    predictions = tuple(Prediction(label=p.label, confidence=p.confidence) for p in response.predictions or [])
    if not response.processing_success:
        logger.info("Service reported a processing error: %s", response.processing_error)
    return UploadSuccess(
        predictions=predictions,
        annotated_image_ref=response.output_image_url or None,
        filename=response.filename,
        processing_success=response.processing_success,
        processing_error=response.processing_error,
        raw=raw,
    )
