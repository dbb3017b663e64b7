"""Scratch-file staging for uploaded images.

An inbound upload is copied to a uniquely named file in the configured
uploads directory for the duration of a single transform.  The copy is
removed when the transform finishes, whether it succeeded or failed.
Removal is best-effort: a file that cannot be deleted is logged and left
behind, never reported to the caller.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from chillhouse.api.errors import UploadStagingError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "image.png"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StagedUpload:
    """An uploaded image staged on disk for one transform.

    Attributes:
        content: Raw uploaded bytes.
        filename: Original client filename (``image.png`` if none was sent).
        content_type: Declared MIME type (``application/octet-stream`` if none).
        path: Location of the scratch copy.
    """

    content: bytes
    filename: str
    content_type: str
    path: Path


def _scratch_name(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    # Only keep short alphanumeric suffixes; anything else is client noise.
    if not (suffix[1:].isalnum() and len(suffix) <= 6):
        suffix = ""
    return f"upload-{uuid.uuid4().hex}{suffix}"


def discard_upload(path: Path) -> None:
    """Delete a scratch file, logging instead of raising on failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove staged upload {path}: {e}")


@contextmanager
def staged_upload(
    content: bytes,
    filename: str | None,
    content_type: str | None,
    uploads_dir: Path,
) -> Iterator[StagedUpload]:
    """Stage *content* in *uploads_dir* and remove it when the block exits.

    Args:
        content: Raw uploaded bytes.
        filename: Client-supplied filename, if any.
        content_type: Client-declared MIME type, if any.
        uploads_dir: Directory to hold the scratch copy.

    Yields:
        The :class:`StagedUpload` describing the scratch copy.

    Raises:
        UploadStagingError: If the scratch copy cannot be written.
    """
    filename = filename or DEFAULT_FILENAME
    content_type = content_type or DEFAULT_CONTENT_TYPE

    path = uploads_dir / _scratch_name(filename)
    try:
        uploads_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as e:
        discard_upload(path)
        raise UploadStagingError(f"Could not stage upload: {e}") from e
    logger.debug(f"Staged upload {filename!r} ({len(content)} bytes) at {path}")

    try:
        yield StagedUpload(
            content=content,
            filename=filename,
            content_type=content_type,
            path=path,
        )
    finally:
        discard_upload(path)
