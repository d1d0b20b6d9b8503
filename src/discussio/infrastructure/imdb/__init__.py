"""IMDb title lookups (page scraping behind TitleResolverPort)."""

from .title_resolver import ImdbTitleResolver

__all__ = ["ImdbTitleResolver"]
