"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly (host/port from blockproof.json or BLOCKPROOF_HOST/PORT)
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import files, health, proofs
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    merkle_error_handler,
)
from core.config.runtime import get_default_config
from core.schemas.errors import MerkleException


# Configure logging: BLOCKPROOF_LOG_LEVEL env var, then blockproof.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or config file, defaulting to INFO."""
    raw = os.getenv("BLOCKPROOF_LOG_LEVEL") or get_default_config().log_level
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="BlockProof File Holder API",
        description="""
HTTP API for a file holder that proves what it serves.

## Endpoints

- **POST /upload** - Store files; returns the root over all held files
- **GET /files** - List held files with both tree roots
- **GET /download/{name}** - Raw file content
- **GET /proof/{name}** - Single inclusion proof (padded tree)
- **POST /multiproof** - Compact multiproof for several files (ragged tree)
- **POST /verify** - Check a single proof against a root
- **POST /verify/multiproof** - Check a multiproof against a root
- **GET /health** - Health check

Digests are 0x-prefixed lowercase hex.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(MerkleException, merkle_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(files.router)
    app.include_router(proofs.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    server = get_default_config().server
    uvicorn.run(app, host=server.host, port=server.port)
