"""Team schedule page parser.

Provides:
- ScrapedMatch: one match card from the schedule (teams, date, result...)
- match_id_from_href: derives the stable match id from a match href
- parse_schedule_page: pure function extracting match cards from HTML

Selectors follow the site's match card layout: each ``.partido`` element
holds a ``.datos`` metadata block and an ``.equipos`` block with a left
(``jugador1-izquierda``) and right (``jugador1-derecha``) team slot.
"""

import logging
from dataclasses import dataclass

from padelcat.exceptions import ParseError
from padelcat.markup import first_attr, joined_text, load_markup

logger = logging.getLogger(__name__)

MATCH_SELECTOR = ".partido"

# The site's match hrefs look like
#   https://www.setteo.com/partido/4581234567890/...
# and the 13 characters starting at offset 31 are the match key.
MATCH_ID_OFFSET = 31
MATCH_ID_LENGTH = 13

_TEAM_SLOT = ".equipos .equipo.individual .jugador.{side}"
_LEFT = _TEAM_SLOT.format(side="jugador1-izquierda")
_RIGHT = _TEAM_SLOT.format(side="jugador1-derecha")


@dataclass
class ScrapedMatch:
    """A match card extracted from the schedule page."""

    match_id: str
    date: str
    team1: str
    image_team1: str
    team2: str
    image_team2: str
    result: str
    location: str


def match_id_from_href(href: str) -> str:
    """Return the match key embedded in a match-detail href.

    The key is ``href[MATCH_ID_OFFSET:MATCH_ID_OFFSET + MATCH_ID_LENGTH]``.
    This is purely positional: it depends on the site keeping the same URL
    prefix length.

    Raises:
        ParseError: If ``href`` is too short to contain the full key.
    """
    end = MATCH_ID_OFFSET + MATCH_ID_LENGTH
    if len(href) < end:
        raise ParseError(
            f"Match href {href!r} is shorter than {end} characters; "
            "cannot derive match id",
            url=href,
        )
    return href[MATCH_ID_OFFSET:end]


def parse_schedule_page(html: str) -> list[ScrapedMatch]:
    """Parse a team schedule page into per-match records, in page order.

    Team names, images, date, result and location degrade to "" when the
    card lacks them. The match id does not degrade: without it the card
    cannot be reconciled with stored matches.

    Raises:
        ParseError: If ``html`` cannot be parsed, or a card has no anchor
            href or an href too short for the match id window.
    """
    soup = load_markup(html)

    results: list[ScrapedMatch] = []
    for i, card in enumerate(soup.select(MATCH_SELECTOR)):
        href = first_attr(card, "a", "href")
        if not href:
            raise ParseError(f"Match card {i} has no match link")
        match_id = match_id_from_href(href)

        match = ScrapedMatch(
            match_id=match_id,
            date=joined_text(card, ".datos small").strip(),
            team1=joined_text(card, f"{_LEFT} a"),
            image_team1=first_attr(card, f"{_LEFT} img", "data-src"),
            team2=joined_text(card, f"{_RIGHT} a"),
            image_team2=first_attr(card, f"{_RIGHT} img", "data-src"),
            result=joined_text(card, ".datos .resultado_eliminatoria span").strip(),
            location=joined_text(card, ".datos p"),
        )
        if not match.team1 or not match.team2:
            logger.warning("Match %s: team slot missing on schedule card", match_id)

        results.append(match)

    return results
