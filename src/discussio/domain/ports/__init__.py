from .title_cache import TitleCachePort
from .title_resolver import TitleResolverPort

__all__ = [
    "TitleCachePort",
    "TitleResolverPort",
]
