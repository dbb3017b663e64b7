"""Pydantic response models for the Chillhouse API.

``POST /transform`` takes multipart form data rather than JSON, so there is
no request body model; these models describe the JSON the API sends back and
feed the OpenAPI documentation.

Models
------
TransformResponse
    Success body for ``POST /transform``.
ErrorResponse
    Failure body for ``POST /transform``.
StylesResponse
    Body for ``GET /styles``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class TransformResponse(BaseModel):
    """Response body for a successful ``POST /transform``.

    Attributes:
        success: Always ``True``.
        image_id: Opaque identifier to pass to ``GET /result/{image_id}``.
    """

    success: Literal[True] = True
    image_id: str = Field(
        ...,
        min_length=1,
        description="Identifier of the stored result image.",
    )


class ErrorResponse(BaseModel):
    """Response body for a failed ``POST /transform``.

    Attributes:
        success: Always ``False``.
        error: Human-readable failure message.
    """

    success: Literal[False] = False
    error: str = Field(
        ...,
        description="Why the transform failed.",
    )


class StylesResponse(BaseModel):
    """Response body for ``GET /styles``."""

    styles: list[str] = Field(
        ...,
        description="Recognised style keys for the 'style' form field.",
    )
    default: str = Field(
        default="generic",
        description="Label of the fallback used for unknown or missing styles.",
    )
