"""Pattern-based extraction of title and year from an IMDb title page."""

from __future__ import annotations

import html
import re

from discussio.domain.entities.stremio import ResolvedTitle

# <title>The Shawshank Redemption (1994) - IMDb</title>
_TITLE_RE = re.compile(r"<title>(.*?) - IMDb</title>")
# Trailing annotation such as "(1994)" or "(TV Series 2011–2019)".
_TRAILING_PAREN_RE = re.compile(r"\s*\([^)]*\)\s*$")
_YEAR_RE = re.compile(r"\((\d{4})\)")


def extract_title(page: str) -> str | None:
    """Return the page title without its trailing parenthetical, or None."""
    m = _TITLE_RE.search(page)
    if not m:
        return None
    title = _TRAILING_PAREN_RE.sub("", html.unescape(m.group(1))).strip()
    return title or None


def extract_year(page: str) -> str | None:
    """Return the first ``(YYYY)`` found anywhere in the page, or None."""
    m = _YEAR_RE.search(page)
    return m.group(1) if m else None


def parse_title_page(page: str, *, fallback: str) -> ResolvedTitle:
    """Parse an IMDb title page, using *fallback* when no title is found."""
    return ResolvedTitle(
        title=extract_title(page) or fallback,
        year=extract_year(page),
    )
