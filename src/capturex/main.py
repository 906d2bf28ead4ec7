"""Session entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from capturex.core.capture import NativePicker
    from capturex.core.lifecycle import ArtifactStore

import httpx

from capturex.client.transport import AnalysisClient
from capturex.config import Settings, get_settings
from capturex.core.controller import CaptureSession
from capturex.core.lifecycle import TempFileArtifactStore

logger = logging.getLogger(__name__)


def create_session(
    settings: Settings,
    picker: NativePicker,
    http: httpx.AsyncClient,
    artifacts: ArtifactStore | None = None,
) -> CaptureSession:
    """Create a capture session from settings and its collaborators."""
    if artifacts is None:
        artifacts = TempFileArtifactStore(settings.preview_dir)
    return CaptureSession(
        settings=settings,
        picker=picker,
        client=AnalysisClient(settings, http),
        artifacts=artifacts,
    )


@asynccontextmanager
async def session_scope(
    picker: NativePicker,
    settings: Settings | None = None,
    http: httpx.AsyncClient | None = None,
    artifacts: ArtifactStore | None = None,
) -> AsyncIterator[CaptureSession]:
    """Session lifespan: set up on entry, release previews and close the client on exit.

    An ``http`` client passed in is left open for its owner to close.
    """
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Starting CaptureX session (endpoint=%s, field=%s, timeout=%ss)",
        settings.endpoint_url,
        settings.upload_field,
        settings.request_timeout,
    )

    owns_client = http is None
    if http is None:
        http = httpx.AsyncClient(timeout=settings.request_timeout)

    session = create_session(settings, picker, http, artifacts)
    try:
        yield session
    finally:
        logger.info("Shutting down CaptureX session")
        session.teardown()
        if owns_client:
            await http.aclose()
        logger.info("CaptureX session shutdown complete")
