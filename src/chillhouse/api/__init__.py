"""Chillhouse — FastAPI REST API layer.

This package contains the FastAPI application, the transform pipeline, and
the in-memory result store.

Modules
-------
main
    FastAPI application factory, route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API responses.
prompt_builder
    Style-keyed prompt compilation.
transform
    Upstream image-edit orchestration.
uploads
    Scratch-file staging for uploaded images.
result_store
    Thread-safe in-memory result storage.
errors
    Error taxonomy and HTTP status mapping.
"""
