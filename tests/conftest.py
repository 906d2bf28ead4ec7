"""Shared fixtures: an in-process fake analysis service and recording collaborators."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
import pytest
from fastapi import FastAPI, Response, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse

from capturex.config import Settings
from capturex.core.state import PickedFile
from capturex.main import create_session

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from capturex.core.capture import CaptureMode
    from capturex.core.controller import CaptureSession
    from capturex.core.state import SelectedImage

BASE_URL = "http://testserver"


def image_file(name: str = "photo.jpg", mime_type: str | None = "image/jpeg", data: bytes = b"\xff\xd8\xff") -> PickedFile:
    return PickedFile(data=data, mime_type=mime_type, name=name)


def success_body(filename: str, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "processing_success": True,
        "predictions": [{"class": "cat", "confidence": 97.2}],
        "filename": filename,
    }
    body.update(extra)
    return body


@dataclass
class UploadRecord:
    filename: str | None
    content_type: str | None
    data: bytes


class FakeAnalysisService:
    """FastAPI stand-in for the remote analysis endpoint.

    ``replies`` maps an uploaded filename to ``(status, body)``; a ``str`` body is
    sent as plain text. ``gates`` holds back the reply for a filename until set.
    """

    def __init__(self) -> None:
        self.app = FastAPI()
        self.requests: list[UploadRecord] = []
        self.replies: dict[str, tuple[int, dict[str, Any] | str]] = {}
        self.gates: dict[str, asyncio.Event] = {}

        @self.app.post("/upload", response_model=None)
        async def upload(image: UploadFile) -> Response:
            filename = image.filename or ""
            self.requests.append(UploadRecord(filename, image.content_type, await image.read()))
            gate = self.gates.get(filename)
            if gate is not None:
                await gate.wait()
            status_code, body = self.replies.get(filename, (200, success_body(filename)))
            if isinstance(body, str):
                return PlainTextResponse(body, status_code=status_code)
            return JSONResponse(body, status_code=status_code)


class RecordingArtifactStore:
    """Artifact store that only records what was created and revoked."""

    def __init__(self) -> None:
        self.created: list[str] = []
        self.revoked: list[str] = []

    def create(self, image: SelectedImage) -> str:
        handle = f"preview://{len(self.created)}/{image.name}"
        self.created.append(handle)
        return handle

    def revoke(self, handle: str) -> None:
        self.revoked.append(handle)

    @property
    def outstanding(self) -> list[str]:
        return [h for h in self.created if h not in self.revoked]


class QueuedPicker:
    """Picker that hands out queued results and records the requested modes."""

    def __init__(self, *results: PickedFile | None) -> None:
        self.results: list[PickedFile | None] = list(results)
        self.modes: list[CaptureMode] = []

    async def pick(self, mode: CaptureMode) -> PickedFile | None:
        self.modes.append(mode)
        return self.results.pop(0) if self.results else None


@pytest.fixture()
def service() -> FakeAnalysisService:
    return FakeAnalysisService()


@pytest.fixture()
def settings() -> Settings:
    return Settings(endpoint_url=f"{BASE_URL}/upload", asset_base_url=BASE_URL)


@pytest.fixture()
def artifacts() -> RecordingArtifactStore:
    return RecordingArtifactStore()


@pytest.fixture()
def picker() -> QueuedPicker:
    return QueuedPicker()


@pytest.fixture()
async def http(service: FakeAnalysisService) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=service.app),
        base_url=BASE_URL,
    ) as client:
        yield client


@pytest.fixture()
def session(
    settings: Settings,
    picker: QueuedPicker,
    http: httpx.AsyncClient,
    artifacts: RecordingArtifactStore,
) -> CaptureSession:
    return create_session(settings, picker, http, artifacts)
