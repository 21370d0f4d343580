"""
Hybrid Retrieval Engine - Server Entry Point

``hybrid-retrieval`` (or ``python -m hybrid_retrieval.main``) serves the
HTTP API with uvicorn using the host, port and worker settings.
"""

import uvicorn

from hybrid_retrieval.app import create_app
from hybrid_retrieval.core.config import settings

app = create_app()


def run() -> None:
    # Reload and multiple workers both need an import string, not an app object
    workers = 1 if settings.DEBUG else max(1, settings.WORKERS)
    uvicorn.run(
        "hybrid_retrieval.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=workers,
        log_config=None,
    )


if __name__ == "__main__":
    run()
