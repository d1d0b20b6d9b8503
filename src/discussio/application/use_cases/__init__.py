from .stremio_stream import DiscussionStreamUseCase, parse_stream_id

__all__ = ["DiscussionStreamUseCase", "parse_stream_id"]
