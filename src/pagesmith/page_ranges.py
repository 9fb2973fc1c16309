"""Page-selection expression parsing."""

from __future__ import annotations

from pagesmith.exceptions import ParseError
from pagesmith.typing.models import PageRange

ALL_PAGES = "all"


def _parse_int(token: str) -> int | None:
    """Parse a decimal integer token.

    Args:
        token (str): Raw token.

    Returns:
        int | None: Parsed value, or None when the token is not an integer.
    """
    try:
        return int(token.strip())
    except ValueError:
        return None


def _token_pages(token: str, total_pages: int) -> range:
    """Return the pages contributed by one token, clipped to the document.

    Args:
        token (str): Single page ``p`` or span ``a-b``.
        total_pages (int): Number of pages in the document.

    Returns:
        range: Contributed page numbers, empty for malformed or out-of-range tokens.
    """
    if "-" in token:
        raw_start, _, raw_end = token.partition("-")
        start = _parse_int(raw_start)
        end = _parse_int(raw_end)
        if start is None or end is None:
            return range(0)
        return range(max(1, start), min(total_pages, end) + 1)

    page = _parse_int(token)
    if page is None or not 1 <= page <= total_pages:
        return range(0)
    return range(page, page + 1)


def select_pages(expression: str, total_pages: int) -> list[int]:
    """Return the ascending, unique pages selected by ``expression``.

    Malformed tokens are skipped and out-of-range pages are clipped, so the
    result may be empty.

    Args:
        expression (str): ``all`` or a comma-separated list of ``p`` / ``a-b`` tokens.
        total_pages (int): Number of pages in the document.

    Returns:
        list[int]: Selected page numbers (1-based).
    """
    if total_pages <= 0:
        return []
    if expression.strip().lower() == ALL_PAGES:
        return list(range(1, total_pages + 1))

    selected: set[int] = set()
    for token in expression.split(","):
        if token.strip():
            selected.update(_token_pages(token, total_pages))
    return sorted(selected)


def parse_page_range(expression: str, total_pages: int) -> PageRange:
    """Parse a page-selection expression into a validated page range.

    Args:
        expression (str): ``all`` or tokens such as ``1,3,5-7``.
        total_pages (int): Number of pages in the document.

    Raises:
        ParseError: If the expression selects no page.

    Returns:
        PageRange: Ascending, deduplicated selection.
    """
    pages = select_pages(expression, total_pages)
    if not pages:
        raise ParseError(expression=expression)
    return PageRange(pages=tuple(pages), total_pages=total_pages)
