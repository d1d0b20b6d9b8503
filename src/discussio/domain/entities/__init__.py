from .stremio import (
    EXTERNAL_OPEN_BEHAVIOR,
    SUPPORTED_CONTENT_TYPES,
    DiscussionStream,
    ResolvedTitle,
    StremioContentType,
    StremioStreamRequest,
)

__all__ = [
    "EXTERNAL_OPEN_BEHAVIOR",
    "SUPPORTED_CONTENT_TYPES",
    "DiscussionStream",
    "ResolvedTitle",
    "StremioContentType",
    "StremioStreamRequest",
]
