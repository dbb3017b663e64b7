"""Error taxonomy for the Chillhouse API.

Every failure the service reports to a caller is a :class:`ChillhouseError`
subclass carrying the HTTP status it maps to.  Route handlers raise them and
the exception handlers registered in :mod:`chillhouse.api.main` turn them into
responses.

==============================  ======  ============================================
Error                           Status  Raised when
==============================  ======  ============================================
:class:`MissingInput`           400     the ``image`` upload is absent
:class:`Misconfiguration`       500     no upstream credential is configured
:class:`UpstreamError`          500     upstream returned non-2xx or was unreachable
:class:`UpstreamProtocolError`  500     upstream returned 2xx without an image
:class:`UploadStagingError`     500     the upload could not be staged to disk
:class:`NotFound`               404     an unknown result identifier is requested
==============================  ======  ============================================
"""

from __future__ import annotations


class ChillhouseError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500


class MissingInput(ChillhouseError):
    """A required request input was not supplied."""

    status_code = 400


class Misconfiguration(ChillhouseError):
    """The deployment is missing required configuration."""

    status_code = 500


class UpstreamError(ChillhouseError):
    """The image-edit service returned a non-success response or was unreachable.

    Attributes:
        status: Upstream HTTP status, or ``None`` for transport failures.
        body: Upstream response text, or the transport error text.
    """

    status_code = 500

    def __init__(self, status: int | None, body: str) -> None:
        self.status = status
        self.body = body
        if status is None:
            message = f"OpenAI request failed: {body}"
        else:
            message = f"OpenAI error {status}: {body}"
        super().__init__(message)


class UpstreamProtocolError(ChillhouseError):
    """The image-edit service answered successfully but without a usable image."""

    status_code = 500


class UploadStagingError(ChillhouseError):
    """The uploaded image could not be written to the scratch directory."""

    status_code = 500


class NotFound(ChillhouseError):
    """No stored result exists for the requested identifier."""

    status_code = 404
