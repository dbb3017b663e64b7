"""Upload-to-result orchestration for the Chillhouse API.

:class:`TransformService` runs one transform end to end:

1. Compile the style prompt (:func:`~chillhouse.api.prompt_builder.build_prompt`).
2. Send the staged image to the upstream ``images/edits`` endpoint.
3. Decode the ``b64_json`` payload of the first returned image.
4. Store the bytes under a fresh identifier and return it.

Nothing is written to the :class:`~chillhouse.api.result_store.ResultStore`
unless every step succeeds.  Failures raise a
:class:`~chillhouse.api.errors.ChillhouseError` subclass and are never
retried; the caller is expected to resubmit.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import uuid

import httpx

from chillhouse.api.errors import Misconfiguration, UpstreamError, UpstreamProtocolError
from chillhouse.api.prompt_builder import build_prompt
from chillhouse.api.result_store import ResultStore
from chillhouse.api.uploads import StagedUpload
from chillhouse.core.config import ChillhouseConfig

logger = logging.getLogger(__name__)

EDITS_PATH = "/images/edits"


def extract_image_b64(payload: object) -> str:
    """Return ``data[0].b64_json`` from an upstream response body.

    Args:
        payload: Decoded JSON body of a successful edit response.

    Returns:
        The base64-encoded image string.

    Raises:
        UpstreamProtocolError: If the body does not have that shape or the
            value is empty.
    """
    image_b64 = None
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list) and data and isinstance(data[0], dict):
            image_b64 = data[0].get("b64_json")

    if not image_b64 or not isinstance(image_b64, str):
        raise UpstreamProtocolError(f"No image returned from OpenAI: {json.dumps(payload)}")
    return image_b64


def decode_image(image_b64: str) -> bytes:
    """Decode a base64 image payload, rejecting malformed input."""
    try:
        return base64.b64decode(image_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UpstreamProtocolError(f"OpenAI returned an undecodable image payload: {e}") from e


class TransformService:
    """Relay uploads to the image-edit API and keep the results.

    Args:
        settings: Service configuration (credential, model, size, prompt override).
        client: Shared async HTTP client used for the upstream call.
        store: Result store receiving successful transforms.
    """

    def __init__(
        self,
        settings: ChillhouseConfig,
        client: httpx.AsyncClient,
        store: ResultStore,
    ) -> None:
        self.settings = settings
        self.client = client
        self.store = store

    def ensure_configured(self) -> None:
        """Raise :class:`Misconfiguration` if no upstream credential is set."""
        if not self.settings.has_credentials:
            raise Misconfiguration("OPENAI_API_KEY not configured")

    @property
    def edits_url(self) -> str:
        return self.settings.upstream_base_url.rstrip("/") + EDITS_PATH

    async def request_edit(self, upload: StagedUpload, prompt: str) -> bytes:
        """Send one edit request upstream and return the decoded image bytes.

        Raises:
            UpstreamError: On a non-2xx status or a transport failure.
            UpstreamProtocolError: On a 2xx response without an image.
        """
        headers = {"Authorization": f"Bearer {self.settings.openai_api_key}"}
        data = {
            "model": self.settings.image_model,
            "prompt": prompt,
            "size": self.settings.image_size,
        }
        files = {"image": (upload.filename, upload.content, upload.content_type)}

        try:
            response = await self.client.post(
                self.edits_url,
                headers=headers,
                data=data,
                files=files,
            )
        except httpx.HTTPError as e:
            raise UpstreamError(None, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise UpstreamError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamProtocolError(
                f"OpenAI returned a non-JSON body: {response.text[:200]}"
            ) from e

        return decode_image(extract_image_b64(payload))

    async def transform(self, upload: StagedUpload, style: str | None) -> str:
        """Transform a staged upload and store the result.

        Args:
            upload: The staged image to send upstream.
            style: Optional style selector for the prompt.

        Returns:
            The identifier under which the result was stored.

        Raises:
            Misconfiguration: If no upstream credential is configured.
            UpstreamError: If the upstream call fails.
            UpstreamProtocolError: If the upstream response carries no image.
        """
        self.ensure_configured()

        prompt = build_prompt(style, base_prompt=self.settings.system_prompt)
        logger.info(
            f"Requesting edit for {upload.filename!r} "
            f"(style={style!r}, model={self.settings.image_model})"
        )

        image = await self.request_edit(upload, prompt)

        image_id = str(uuid.uuid4())
        self.store.put(image_id, image)
        logger.info(f"Stored transform result {image_id} ({len(image)} bytes)")
        return image_id
