"""Session event handling.

``CaptureSession`` is the one object a front end talks to. Each public
method is a discrete user or system event; all of them leave the session in
a valid state and none of them raise for expected failures.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from capturex.core.capture import CaptureMode, CaptureSourceSelector
from capturex.core.lifecycle import ResourceLifecycle
from capturex.core.modal import ModalController
from capturex.core.preview import PreviewManager
from capturex.core.render import render
from capturex.core.state import Idle, SessionStore
from capturex.core.upload import UploadController
from capturex.core.validation import FileValidator, Rejected
from capturex.exceptions import CaptureError, PickerError, PreviewError

if TYPE_CHECKING:
    from capturex.client.transport import AnalysisClient
    from capturex.config import Settings
    from capturex.core.capture import NativePicker
    from capturex.core.lifecycle import ArtifactStore
    from capturex.core.render import DisplayModel
    from capturex.core.state import PickedFile, SessionState, UploadOutcome

logger = logging.getLogger(__name__)


class CaptureSession:
    """Wires capture, validation, preview, upload, rendering and the modal together."""

    def __init__(
        self,
        settings: Settings,
        picker: NativePicker,
        client: AnalysisClient,
        artifacts: ArtifactStore,
    ) -> None:
        self._settings = settings
        self._store = SessionStore()
        self._lifecycle = ResourceLifecycle(artifacts)
        self._selector = CaptureSourceSelector(picker)
        self._validator = FileValidator()
        self._preview = PreviewManager(self._store, artifacts, self._lifecycle)
        self._uploader = UploadController(self._store, client)
        self._modal = ModalController(self._store)
        self._rejection: CaptureError | None = None

    # -- Events -------------------------------------------------------------

    async def capture(self, mode: CaptureMode = CaptureMode.CAMERA) -> SessionState:
        """Open the picker in ``mode`` and select whatever it returns."""
        try:
            file = await self._selector.request_capture(mode)
        except OSError as exc:
            self._rejection = PickerError(f"Could not open picker: {exc}")
            logger.warning("Picker failed (mode=%s): %s", mode, exc)
            return self._store.state
        return self._select(file)

    def drop(self, file: PickedFile | None) -> SessionState:
        """Select a dragged-and-dropped or pasted file."""
        return self._select(self._selector.accept_dropped(file))

    async def submit(self) -> UploadOutcome | None:
        """Upload the current selection, if there is one and nothing is in flight."""
        state = self._store.state
        if isinstance(state, Idle):
            logger.info("Nothing to upload; no image selected")
            return None
        self._modal.close()
        return await self._uploader.submit(state.image)

    def reset(self) -> None:
        """Drop the selection and any result, releasing the preview."""
        self._modal.close()
        self._rejection = None
        self._preview.discard()
        logger.info("Session reset")

    def teardown(self) -> None:
        """Release everything the session owns."""
        self._modal.close()
        self._rejection = None
        self._preview.discard()
        logger.info(
            "Session closed (previews created=%s released=%s, uploads=%s)",
            self._lifecycle.created,
            self._lifecycle.released,
            self._uploader.requests_sent,
        )

    def open_modal(self) -> bool:
        return self._modal.open()

    def close_modal(self) -> None:
        self._modal.close()

    # -- Views --------------------------------------------------------------

    def display(self) -> DisplayModel:
        return render(self._store.state, self._settings.asset_base_url, rejection=self.rejection)

    @property
    def state(self) -> SessionState:
        return self._store.state

    @property
    def rejection(self) -> str | None:
        """Message for the last rejected or failed pick, until the next valid pick or reset."""
        return str(self._rejection) if self._rejection is not None else None

    @property
    def modal_open(self) -> bool:
        return self._modal.is_open

    @property
    def lifecycle(self) -> ResourceLifecycle:
        return self._lifecycle

    @property
    def uploader(self) -> UploadController:
        return self._uploader

    # -- Internal -----------------------------------------------------------

    def _select(self, file: PickedFile | None) -> SessionState:
        if file is None:
            return self._store.state

        result = self._validator.validate(file)
        if isinstance(result, Rejected):
            self._rejection = result.as_error()
            logger.info("Rejected %s (%s): %s", file.name, file.mime_type, result.reason)
            return self._store.state

        try:
            self._preview.on_valid_file(result)
        except OSError as exc:
            self._rejection = PreviewError(f"Could not create preview: {exc}")
            logger.warning("Preview for %s failed: %s", result.name, exc)
            return self._store.state

        self._rejection = None
        self._modal.close()
        return self._store.state
