"""Pydantic schemas for the analysis service's JSON response."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class PredictionPayload(BaseModel):
    """A single class prediction as sent on the wire."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    label: str = Field(alias="class")
    confidence: float = Field(description="Confidence in percent; not range-checked")


class AnalysisResponse(BaseModel):
    """Upload response body. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    predictions: list[PredictionPayload] | None = None
    processing_success: bool = True
    processing_error: str | None = None
    output_image_url: str | None = None
    filename: str = ""

    @field_validator("processing_success", "filename", mode="before")
    @classmethod
    def _null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        # An explicit null is the same as the field being absent.
        if value is None:
            return cls.model_fields[info.field_name].default
        return value
