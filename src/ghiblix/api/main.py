"""GhibliX: FastAPI Application.

This module is the single entry point for the web application.  It builds
the FastAPI ``app`` instance, registers the data routes, mounts the Gradio
page, and provides the ``main()`` CLI function that launches the uvicorn
server.

Architecture
------------
- **Generation** never happens here: the page calls the third-party image
  service through :class:`~ghiblix.core.client.StyleTransferClient` with the
  visitor's own key.
- **Showcase data** is the bundled ``case.json``, served as-is (after
  validation) so the page and external tools read the same list.
- **Static assets** (the slider binding script) are served by FastAPI's
  ``StaticFiles`` under ``/ghiblix-static``; ``/static`` belongs to Gradio.
- **The page** is the Gradio Blocks app from :func:`ghiblix.ui.app.create_ui`,
  mounted at ``/``.  It must be mounted last because it claims every path
  not matched by an earlier route.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/data/case.json``           Showcase before/after pairs
GET       ``/api/config``               Version, modes, sizes, asset host
GET       ``/ghiblix-static/...``       Project static assets
GET       ``/``                         The Gradio page
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    ghiblix

Direct invocation::

    python -m ghiblix.api.main
"""

from __future__ import annotations

import logging

import gradio as gr
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ghiblix import __version__
from ghiblix.api.models import ConfigResponse, SizeOption
from ghiblix.core.config import STATIC_MOUNT_PATH, GhiblixConfig, config
from ghiblix.core.showcase import ShowcaseEntry, load_showcase
from ghiblix.ui.app import create_ui
from ghiblix.ui.models import MODES

logger = logging.getLogger(__name__)


def create_app(settings: GhiblixConfig | None = None) -> FastAPI:
    """Build the FastAPI application with the Gradio page mounted at ``/``.

    Args:
        settings: Configuration to use (default: global config).

    Returns:
        The configured FastAPI application.
    """
    settings = settings or config

    app = FastAPI(
        title="GhibliX",
        description="Studio Ghibli style image generation front-end.",
        version=__version__,
    )

    # The showcase list and config are public, read-only data.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.mount(
        STATIC_MOUNT_PATH,
        StaticFiles(directory=str(settings.static_dir)),
        name="ghiblix-static",
    )

    @app.get("/data/case.json", response_model=list[ShowcaseEntry])
    async def get_showcase() -> list[ShowcaseEntry]:
        """Return the showcase before/after pairs in display order.

        A missing or malformed data file yields an empty list.
        """
        return load_showcase(settings.data_dir)

    @app.get("/api/config", response_model=ConfigResponse)
    async def get_config() -> ConfigResponse:
        """Return the static page configuration.

        Returns:
            :class:`ConfigResponse` with version, modes, sizes, default size
            and asset host.
        """
        return ConfigResponse(
            version=__version__,
            modes=list(MODES.values()),
            sizes=[
                SizeOption(label=label, value=value)
                for label, value in settings.size_options.items()
            ],
            default_size=settings.default_size,
            asset_host=settings.asset_host,
        )

    blocks = create_ui(settings)
    app = gr.mount_gradio_app(app, blocks, path="/")
    logger.info("Gradio UI mounted at /")
    return app


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~ghiblix.core.config.config` (which
    loads from ``GHIBLIX_SERVER_HOST`` and ``GHIBLIX_SERVER_PORT``
    environment variables).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``ghiblix`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting GhibliX {__version__} on {config.server_host}:{config.server_port}")
    logger.info(f"Image API: {config.api_host}")

    uvicorn.run(
        "ghiblix.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
