"""Stremio addon API endpoints (manifest, stream)."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from discussio.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_ADDON_ID = "com.discussio"
_ADDON_VERSION = "1.0.0"

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}


def _build_manifest() -> dict[str, Any]:
    """Build the Stremio addon manifest."""
    return {
        "id": _ADDON_ID,
        "version": _ADDON_VERSION,
        "name": "Discussio",
        "description": (
            "Opens a Google search for discussions of a TV episode or movie "
            "with one click. Select an episode or movie to search for its "
            "discussions online."
        ),
        "types": ["series", "movie"],
        "catalogs": [],
        "resources": ["stream"],
        "idPrefixes": ["tt"],
        "behaviorHints": {
            "adult": False,
            "configurable": False,
        },
    }


@router.get("/manifest.json")
async def stremio_manifest() -> JSONResponse:
    """Serve the Stremio addon manifest."""
    return JSONResponse(content=_build_manifest(), headers=_CORS_HEADERS)


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """Return the discussion search link for a movie or episode.

    Always answers 200: unsupported types, malformed IDs, timeouts and
    internal errors all produce ``{"streams": []}``.
    """
    state = cast(AppState, request.app.state)

    uc = getattr(state, "stremio_stream_uc", None)
    if uc is None:
        log.warning("stremio_stream_uc_missing")
        return JSONResponse(content={"streams": []}, headers=_CORS_HEADERS)

    streams = await uc.execute(content_type, stream_id)

    return JSONResponse(
        content={"streams": [s.to_stremio() for s in streams]},
        headers=_CORS_HEADERS,
    )
