"""HTTP transport to the remote analysis service.

One call to ``AnalysisClient.analyze`` sends exactly one multipart POST. No
retries happen here or anywhere above.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from capturex.client.schemas import AnalysisResponse
from capturex.exceptions import MalformedResponseError, ResponseStatusError, TransportError

if TYPE_CHECKING:
    from capturex.config import Settings
    from capturex.core.state import SelectedImage

logger = logging.getLogger(__name__)


class AnalysisClient:
    """Posts images to the configured endpoint and parses the answer."""

    def __init__(self, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    async def analyze(self, image: SelectedImage) -> tuple[AnalysisResponse, dict[str, Any]]:
        """Upload ``image`` and return the parsed response plus the raw JSON object.

        Raises:
            TransportError: If no response was received.
            ResponseStatusError: If the service answered with a non-2xx status.
            MalformedResponseError: If the body is not a JSON object of the expected shape.
        """
        files = {self._settings.upload_field: (image.name, image.data, image.mime_type)}
        url = self._settings.endpoint_url

        logger.info("Uploading %s (%d bytes) to %s", image.name, len(image.data), url)
        try:
            response = await self._http.post(url, files=files, timeout=self._settings.request_timeout)
        except httpx.HTTPError as exc:
            logger.warning("Upload of %s failed: %s", image.name, exc)
            raise TransportError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.warning("Upload of %s rejected with HTTP %s", image.name, response.status_code)
            raise ResponseStatusError(response.status_code, response.reason_phrase)

        try:
            raw = response.json()
        except ValueError as exc:
            raise MalformedResponseError() from exc
        if not isinstance(raw, dict):
            raise MalformedResponseError()

        try:
            parsed = AnalysisResponse.model_validate(raw)
        except PydanticValidationError as exc:
            raise MalformedResponseError() from exc

        logger.info(
            "Analysis of %s returned %d prediction(s) (processing_success=%s)",
            image.name,
            len(parsed.predictions or []),
            parsed.processing_success,
        )
        return parsed, raw
