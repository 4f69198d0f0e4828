"""Shared BeautifulSoup helpers for the tournament page parsers."""

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from padelcat.exceptions import ParseError


def load_markup(html: str) -> BeautifulSoup:
    """Parse ``html`` with lxml, mapping parser failures to ParseError."""
    if not isinstance(html, str):
        raise ParseError(f"Expected markup text, got {type(html).__name__}")
    try:
        return BeautifulSoup(html, "lxml")
    except ParserRejectedMarkup as exc:
        raise ParseError(f"Markup rejected by parser: {exc}") from exc


def joined_text(root: Tag, selector: str) -> str:
    """Concatenated text of every element matching ``selector`` under root.

    Returns "" when nothing matches.
    """
    return "".join(el.get_text() for el in root.select(selector))


def first_attr(root: Tag, selector: str, attr: str) -> str:
    """``attr`` of the first element matching ``selector``, or ""."""
    el = root.select_one(selector)
    if el is None:
        return ""
    value = el.get(attr)
    return value if isinstance(value, str) else ""
