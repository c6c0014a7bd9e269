"""Lookalike Portrait: FastAPI HTTP layer.

This package contains the FastAPI application, request body validation and
static file serving.

Modules
-------
main
    FastAPI application factory, route handlers and the ``main()`` CLI
    entry point.
validation
    Raw request body parsing into ``LookalikeRequest``.
static_files
    Static front-end file resolution and content types.
"""
