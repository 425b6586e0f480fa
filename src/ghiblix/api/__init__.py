"""GhibliX: FastAPI host layer.

This package contains the FastAPI application that serves the bundled
showcase data and static assets and mounts the Gradio page.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic response models.
"""
