"""Projection of session state into a display model.

``render`` is a pure function: it never mutates anything, and equal inputs
give equal models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit

from capturex.core.state import (
    Idle,
    Resolved,
    Selected,
    SessionState,
    UploadFailure,
    Uploading,
)

UPLOAD_LABEL = "Upload Image"
UPLOADING_LABEL = "Uploading..."
SUCCESS_BANNER = "Upload successful!"
AWAITING_MESSAGE = "Results will appear here after upload"
NO_PREDICTIONS_MESSAGE = "No predictions available"


class DisplayKind(StrEnum):
    AWAITING = "awaiting"
    IN_PROGRESS = "in_progress"
    RESULTS = "results"
    NO_PREDICTIONS = "no_predictions"
    ERROR = "error"


@dataclass(frozen=True)
class PredictionRow:
    label: str
    confidence: float
    bar_width: float
    primary: bool


@dataclass(frozen=True)
class DisplayModel:
    kind: DisplayKind
    message: str | None = None
    preview_handle: str | None = None
    filename: str | None = None
    can_upload: bool = False
    upload_label: str = UPLOAD_LABEL
    banner: str | None = None
    notice: str | None = None
    rejection: str | None = None
    predictions: tuple[PredictionRow, ...] = ()
    annotated_image_url: str | None = None


def resolve_image_ref(ref: str, base_url: str) -> str:
    """Turn a service image reference into a fully qualified URL.

    References that already carry a scheme or host are returned unchanged;
    anything else (e.g. ``/static/out.png``) is appended to ``base_url``.
    """
    parts = urlsplit(ref)
    if parts.scheme or parts.netloc:
        return ref
    return f"{base_url.rstrip('/')}/{ref.lstrip('/')}"


def render(state: SessionState, base_url: str, rejection: str | None = None) -> DisplayModel:
    """Build the display model for ``state``."""
    if isinstance(state, Idle):
        return DisplayModel(kind=DisplayKind.AWAITING, message=AWAITING_MESSAGE, rejection=rejection)

    common = {
        "preview_handle": state.artifact.handle,
        "filename": state.image.name,
        "rejection": rejection,
    }

    if isinstance(state, Selected):
        return DisplayModel(kind=DisplayKind.AWAITING, message=AWAITING_MESSAGE, can_upload=True, **common)

    if isinstance(state, Uploading):
        return DisplayModel(kind=DisplayKind.IN_PROGRESS, upload_label=UPLOADING_LABEL, **common)

    if not isinstance(state, Resolved):
        raise TypeError(f"Unknown session state: {state!r}")

    outcome = state.outcome
    if isinstance(outcome, UploadFailure):
        return DisplayModel(kind=DisplayKind.ERROR, message=outcome.message, can_upload=True, **common)

    failure = outcome.processing_failure()
    annotated = resolve_image_ref(outcome.annotated_image_ref, base_url) if outcome.annotated_image_ref else None
    rows = tuple(
        PredictionRow(
            label=p.label,
            confidence=p.confidence,
            bar_width=min(max(p.confidence, 0.0), 100.0),
            primary=index == 0,
        )
        for index, p in enumerate(outcome.predictions)
    )
    return DisplayModel(
        kind=DisplayKind.RESULTS if rows else DisplayKind.NO_PREDICTIONS,
        message=None if rows else NO_PREDICTIONS_MESSAGE,
        can_upload=True,
        banner=SUCCESS_BANNER if failure is None else None,
        notice=str(failure) if failure is not None else None,
        predictions=rows,
        annotated_image_url=annotated,
        **common,
    )
