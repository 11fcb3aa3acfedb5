"""
Storage key and public URL helpers for superhero images.

Keys look like ``heroes/<superhero_id>/<millis>-<filename>``. The public URL
of an object is the configured public base joined to its key, and
key_from_public_url() inverts that exactly so every stored image row can be
mapped back to a deletable key.
"""
from __future__ import annotations

import re
import threading
import time
from collections.abc import Callable
from pathlib import PurePosixPath

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class UploadClock:
    """
    Millisecond clock that never hands out the same instant twice.

    Uniqueness holds per process only. Separate workers can still derive the
    same key for one superhero and filename in the same millisecond; the
    later upload then replaces the object and its row insert is rejected by
    the unique url constraint.
    """

    def __init__(self, time_source: Callable[[], float] = time.time) -> None:
        self._time_source = time_source
        self._last = 0
        self._lock = threading.Lock()

    def next_instant(self) -> int:
        with self._lock:
            now = int(self._time_source() * 1000)
            self._last = max(now, self._last + 1)
            return self._last


upload_clock = UploadClock()


def safe_filename(filename: str | None) -> str:
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "file"


def derive_key(
    superhero_id: int,
    filename: str | None,
    uploaded_at_ms: int,
    *,
    prefix: str = "heroes",
) -> str:
    return f"{prefix.strip('/')}/{superhero_id}/{uploaded_at_ms}-{safe_filename(filename)}"


def _normalise_base(public_base_url: str) -> str:
    return (public_base_url or "").strip().rstrip("/")


def build_public_url(public_base_url: str, key: str) -> str:
    base = _normalise_base(public_base_url)
    if not base:
        # A URL without a base could never be mapped back to its key.
        raise ValueError("public base URL is empty")
    return f"{base}/{key}"


def key_from_public_url(public_base_url: str, url: str) -> str | None:
    """Return the storage key behind url, or None if url is not under the base."""
    base = _normalise_base(public_base_url)
    if not base:
        return None
    prefix = f"{base}/"
    if not url.startswith(prefix):
        return None
    return url[len(prefix):] or None
