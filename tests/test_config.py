"""Tests for settings and the session lifespan."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import httpx
import pydantic
import pytest
from conftest import FakeAnalysisService, QueuedPicker, RecordingArtifactStore, image_file

from capturex.config import Settings, get_settings
from capturex.core.state import Idle, Resolved, UploadSuccess
from capturex.main import session_scope


class TestSettings:
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()
        assert settings.endpoint_url == "http://localhost:3000/upload"
        assert settings.asset_base_url == "http://localhost:3000"
        assert settings.upload_field == "image"
        assert settings.request_timeout == 60.0
        assert settings.preview_dir is None

    def test_environment_overrides(self) -> None:
        env = {
            "CAPTUREX_ENDPOINT_URL": "https://vision.example.com/analyze",
            "CAPTUREX_REQUEST_TIMEOUT": "5",
            "CAPTUREX_LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = get_settings()
        assert settings.endpoint_url == "https://vision.example.com/analyze"
        assert settings.request_timeout == 5.0
        assert settings.log_level == "DEBUG"

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Settings(request_timeout=0)


class TestSessionScope:
    async def test_scope_releases_previews_on_exit(
        self, settings: Settings, http: httpx.AsyncClient, service: FakeAnalysisService
    ) -> None:
        artifacts = RecordingArtifactStore()
        async with session_scope(QueuedPicker(), settings=settings, http=http, artifacts=artifacts) as session:
            session.drop(image_file())
            outcome = await session.submit()
            assert isinstance(outcome, UploadSuccess)
            assert isinstance(session.state, Resolved)

        assert artifacts.outstanding == []
        assert isinstance(session.state, Idle)
        assert not http.is_closed
        assert len(service.requests) == 1

    async def test_scope_uses_temp_files_by_default(self, tmp_path: Path) -> None:
        settings = Settings(preview_dir=str(tmp_path))
        async with session_scope(QueuedPicker(image_file()), settings=settings) as session:
            await session.capture()
            handle = session.display().preview_handle
            assert handle is not None
            assert Path(handle).exists()

        assert not Path(handle).exists()
