"""
Static frontend routes for Eventgate.

Serves the built single-page frontend. Unknown paths fall back to
index.html so client-side routing keeps working; /api paths never do.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

logger = logging.getLogger(__name__)


def create_static_router(static_dir: str) -> APIRouter:
    """
    Create the SPA router for a static directory.

    Args:
        static_dir: Directory holding index.html and built assets

    Returns:
        FastAPI router with a catch-all GET route
    """
    router = APIRouter(tags=["static"])
    root = Path(static_dir).resolve()
    index_file = root / "index.html"

    @router.get("/{request_path:path}", include_in_schema=False)
    async def serve_static(request_path: str) -> FileResponse:
        """Serve a file from the static directory, or index.html."""
        logger.debug(f"Static request: /{request_path}")

        if request_path == "api" or request_path.startswith("api/"):
            raise HTTPException(404, "Not Found")

        if request_path:
            candidate = (root / request_path).resolve()
            # Never serve anything outside the static root
            if candidate.is_relative_to(root) and candidate.is_file():
                return FileResponse(candidate)

        if not index_file.is_file():
            raise HTTPException(404, "Not Found")
        return FileResponse(index_file)

    return router
