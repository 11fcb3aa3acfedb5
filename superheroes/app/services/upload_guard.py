"""
Upload batch validation.
Every check here runs before the first upload or metadata write of a batch.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.core.exceptions import FileTooLargeException, ValidationException

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ImagePayload:
    """An uploaded file held in memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def assert_within_limit(files: Sequence[ImagePayload], max_bytes: int) -> None:
    """Reject the whole batch if any file is larger than max_bytes."""
    too_large = [f.filename for f in files if f.size > max_bytes]
    if too_large:
        raise FileTooLargeException(max_bytes // (1024 * 1024), too_large)


def assert_batch_size(files: Sequence[ImagePayload], max_files: int) -> None:
    if len(files) > max_files:
        raise ValidationException(
            f"At most {max_files} files may be uploaded per request, got {len(files)}"
        )
