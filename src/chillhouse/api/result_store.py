"""In-memory result storage for the Chillhouse API.

Transformed images are held in process memory only.  The store is created
once per application (see :func:`chillhouse.api.main.lifespan`) and shared by
the transform route and the retrieval route.

The store is deliberately small:

- entries are keyed by an opaque identifier generated by the caller
- entries are never updated, evicted, or persisted
- every entry lives until the process exits

Request handlers may run on the event loop and in the threadpool at the same
time, so every access goes through a single lock.
"""

from __future__ import annotations

import threading


class ResultStore:
    """Insert-only mapping of image identifiers to raw image bytes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._images: dict[str, bytes] = {}

    def put(self, image_id: str, data: bytes) -> None:
        """Store *data* under *image_id*.

        Identifiers are expected to be fresh; an existing entry with the same
        identifier is replaced.

        Args:
            image_id: Opaque identifier for the result.
            data: Raw image bytes.
        """
        with self._lock:
            self._images[image_id] = data

    def get(self, image_id: str) -> bytes | None:
        """Return the bytes stored under *image_id*, or ``None`` if absent."""
        with self._lock:
            return self._images.get(image_id)

    def __contains__(self, image_id: object) -> bool:
        with self._lock:
            return image_id in self._images

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)
