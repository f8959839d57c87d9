"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn mmr_api.app:app --reload

    # Or run directly
    python -m mmr_api.app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mmr_api.deps import get_config
from mmr_api.routes import health, tree, proofs
from mmr_api.errors import (
    APIError,
    api_error_handler,
    engine_error_handler,
    generic_error_handler,
)
from mmr_core.schemas.errors import MMRException


# Log level comes from RuntimeConfig (mmr.json, then MMR_LOG_LEVEL)
logging.basicConfig(
    level=getattr(logging, get_config().log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Mountain Range API",
        description="""
HTTP API over a single append-only Merkle Mountain Range.

## Endpoints

- **POST /append** - Append a 32-byte value digest
- **GET /root** - Current root, width and size
- **GET /peaks** - Current peak hashes
- **GET /nodes/{index}** - Stored hash at a flat node index
- **GET /proofs/{leaf_index}** - Inclusion proof for a leaf
- **POST /verify** - Verify an inclusion proof against any root
- **GET /health** - Health check

All hashes travel as `0x`-prefixed 32-byte hex strings.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(MMRException, engine_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(tree.router)
    app.include_router(proofs.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    api_config = get_config().api
    uvicorn.run(app, host=api_config.host, port=api_config.port)
