"""Team roster page parser.

Provides:
- ScrapedPlayerScore: one roster entry (player link, image, score text)
- parse_roster_page: pure function extracting roster entries from HTML
- parse_score: converts scraped score text to a number
"""

import logging
import math
from dataclasses import dataclass

from padelcat.exceptions import ParseError
from padelcat.markup import first_attr, joined_text, load_markup

logger = logging.getLogger(__name__)

ROSTER_ENTRY_SELECTOR = ".list-equipos li"


@dataclass
class ScrapedPlayerScore:
    """A player entry extracted from the team roster page."""

    link: str  # Player URL as the site renders it; matches Player.link
    image_url: str
    score: str  # Raw text, see parse_score()


def parse_roster_page(html: str) -> list[ScrapedPlayerScore]:
    """Parse a team roster page into per-player score records.

    Extraction is best effort per entry: a missing anchor, image or score
    span yields an empty string for that field. An empty roster returns an
    empty list.

    Raises:
        ParseError: If ``html`` cannot be parsed as markup at all.
    """
    soup = load_markup(html)

    results: list[ScrapedPlayerScore] = []
    for i, entry in enumerate(soup.select(ROSTER_ENTRY_SELECTOR)):
        link = first_attr(entry, "a", "href")
        if not link:
            logger.debug("Roster entry %d has no player link", i)

        results.append(
            ScrapedPlayerScore(
                link=link,
                image_url=first_attr(entry, "img", "src"),
                score=joined_text(entry, "span"),
            )
        )

    return results


def parse_score(text: str) -> float | None:
    """Convert scraped score text to a float.

    Blank text means the site shows no score yet and returns None. A decimal
    comma ("12,5") is accepted.

    Raises:
        ParseError: If the text is not blank and not a finite number.
    """
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        score = float(cleaned)
    except ValueError as exc:
        raise ParseError(f"Score {text!r} is not a number") from exc
    if not math.isfinite(score):
        raise ParseError(f"Score {text!r} is not a finite number")
    return score
