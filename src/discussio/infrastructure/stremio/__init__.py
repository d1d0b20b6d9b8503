from .publisher import CentralPublishError, publish_to_central
from .query_builder import build_search_phrase, build_search_query, build_search_url

__all__ = [
    "CentralPublishError",
    "build_search_phrase",
    "build_search_query",
    "build_search_url",
    "publish_to_central",
]
