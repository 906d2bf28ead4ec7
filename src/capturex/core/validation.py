"""Declared-type gate for picked files.

This only looks at the MIME type the picker reported. It is a fast syntactic
check, not a security boundary: no content sniffing happens here.
"""

from __future__ import annotations

from dataclasses import dataclass

from capturex.core.state import PickedFile, SelectedImage
from capturex.exceptions import ValidationError

IMAGE_TYPE_PREFIX = "image/"
NOT_AN_IMAGE = "not an image"


@dataclass(frozen=True)
class Rejected:
    """A picked file that did not pass validation."""

    reason: str

    def as_error(self) -> ValidationError:
        return ValidationError(self.reason)


class FileValidator:
    """Accepts files whose declared MIME type is ``image/*``."""

    def validate(self, file: PickedFile | None) -> SelectedImage | Rejected:
        if file is None or not file.mime_type:
            return Rejected(NOT_AN_IMAGE)

        mime_type = file.mime_type.strip().lower()
        if not mime_type.startswith(IMAGE_TYPE_PREFIX):
            return Rejected(NOT_AN_IMAGE)

        return SelectedImage(data=file.data, mime_type=mime_type, name=file.name)
