"""
Upload batch validation tests.
"""
from __future__ import annotations

import pytest

from app.core.exceptions import FileTooLargeException, ValidationException
from app.services.upload_guard import ImagePayload, assert_batch_size, assert_within_limit

MIB = 1024 * 1024


def _payload(name: str, size: int) -> ImagePayload:
    return ImagePayload(filename=name, content_type="image/png", data=b"x" * size)


class TestSizeGuard:
    def test_file_at_the_limit_is_accepted(self) -> None:
        assert_within_limit([_payload("a.png", 2 * MIB)], 2 * MIB)

    def test_one_oversized_file_rejects_the_whole_batch(self) -> None:
        files = [_payload("ok.png", 10), _payload("huge.png", 2 * MIB + 1), _payload("big.png", 3 * MIB)]
        with pytest.raises(FileTooLargeException) as exc_info:
            assert_within_limit(files, 2 * MIB)
        assert "huge.png" in exc_info.value.detail
        assert "big.png" in exc_info.value.detail
        assert "ok.png" not in exc_info.value.detail
        assert isinstance(exc_info.value, ValidationException)

    def test_too_many_files(self) -> None:
        with pytest.raises(ValidationException):
            assert_batch_size([_payload(f"{i}.png", 1) for i in range(11)], 10)
        assert_batch_size([_payload(f"{i}.png", 1) for i in range(10)], 10)
