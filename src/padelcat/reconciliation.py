"""Reconciliation between the tournament site and stored players/matches.

ReconciliationEngine composes the fetcher, the two page parsers and the
player/match repositories:

- sync_player_score: roster page -> one player's score
- list_matches_with_availability: schedule page + stored player lists
  (read-only)
- sync_matches: schedule page -> stored match details (creates on first
  sight)
- add_availability / remove_availability / set_chosen_players: local
  player-list writes, creating the match lazily where allowed

Nothing here retries. Transport and parse failures propagate as raised.

Availability writes touch two records (player, then match) with no
transaction spanning both. If the match write fails the player keeps the
new entry; the error is logged with both ids and re-raised, and calling
the operation's inverse repairs the pair. Writes for one match id are
serialized per engine instance; separate processes sharing a database can
still lose an update on the same list.
"""

import asyncio
import logging
import weakref

from padelcat.config import SyncConfig
from padelcat.exceptions import (
    IncorrectLinkError,
    MatchNotFoundError,
    PlayerNotFoundError,
)
from padelcat.models import MatchModel, MatchView, PlayerModel
from padelcat.roster_parser import ScrapedPlayerScore, parse_roster_page, parse_score
from padelcat.schedule_parser import ScrapedMatch, parse_schedule_page
from padelcat.validation import require_string, require_string_list

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """Merges scraped tournament pages with stored players and matches.

    Usage::

        async with HtmlFetcher(config) as fetcher:
            engine = ReconciliationEngine(fetcher, player_repo, match_repo, config)
            views = await engine.list_matches_with_availability()
    """

    def __init__(
        self,
        fetcher,                # HtmlFetcher, or anything with async fetch(url)
        player_repo,            # PlayerRepository
        match_repo,             # MatchRepository
        config: SyncConfig | None = None,
        archive=None,           # HtmlArchive; None disables page snapshots
    ) -> None:
        self.fetcher = fetcher
        self.player_repo = player_repo
        self.match_repo = match_repo
        self.config = config or SyncConfig()
        self.archive = archive
        # An entry lives only while some coroutine holds or awaits its lock
        self._match_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, match_id: str) -> asyncio.Lock:
        return self._match_locks.setdefault(match_id, asyncio.Lock())

    # ------------------------------------------------------------------
    # Fetch + parse
    # ------------------------------------------------------------------

    async def _fetch(self, url: str, page_type: str) -> str:
        html = await self.fetcher.fetch(url)
        if self.archive is not None:
            path = self.archive.save(html, page_type=page_type)
            logger.debug("Archived %s page to %s", page_type, path)
        return html

    async def fetch_roster(self) -> list[ScrapedPlayerScore]:
        """Fetch and parse the team roster page."""
        html = await self._fetch(self.config.roster_url, "roster")
        entries = parse_roster_page(html)
        logger.info("Roster page: %d entries", len(entries))
        return entries

    async def fetch_schedule(self) -> list[ScrapedMatch]:
        """Fetch and parse the team schedule page."""
        html = await self._fetch(self.config.schedule_url, "schedule")
        matches = parse_schedule_page(html)
        logger.info("Schedule page: %d matches", len(matches))
        return matches

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    async def sync_player_score(self, link: str) -> PlayerModel:
        """Copy the roster score for ``link`` onto the player with that link.

        Raises:
            ValidationError: If ``link`` is not a non-empty string.
            IncorrectLinkError: If zero or several roster entries carry
                ``link``. Nothing is written in that case.
            PlayerNotFoundError: If no stored player has ``link``.
            TransportError, ParseError: From fetching/parsing the roster.

        Returns:
            The player record with its new score.
        """
        require_string(link, "link")

        entries = await self.fetch_roster()
        matching = [entry for entry in entries if entry.link == link]
        if len(matching) != 1:
            raise IncorrectLinkError(
                f"Incorrect link {link!r}: {len(matching)} roster entries match",
                url=self.config.roster_url,
            )
        score = parse_score(matching[0].score)

        player = self.player_repo.find_by_link(link)
        if player is None:
            raise PlayerNotFoundError(f"No player with link {link!r}")

        self.player_repo.update_score(player.id, score)
        logger.info("Player %s score: %s -> %s", player.id, player.score, score)
        return player.model_copy(update={"score": score})

    # ------------------------------------------------------------------
    # Schedule
    # ------------------------------------------------------------------

    async def list_matches_with_availability(self) -> list[MatchView]:
        """Scraped schedule merged with stored player lists, in page order.

        Matches with no stored record get empty lists. Nothing is written.
        """
        scraped = await self.fetch_schedule()

        views: list[MatchView] = []
        for card in scraped:
            stored = self.match_repo.find_by_match_id(card.match_id)
            available: list[PlayerModel] = []
            chosen: list[PlayerModel] = []
            if stored is not None:
                available = self._resolve(stored.players_available, card.match_id)
                chosen = self._resolve(stored.players_chosen, card.match_id)
            views.append(
                MatchView(
                    match_id=card.match_id,
                    date=card.date,
                    team1=card.team1,
                    image_team1=card.image_team1,
                    team2=card.team2,
                    image_team2=card.image_team2,
                    result=card.result,
                    location=card.location,
                    players_available=available,
                    players_chosen=chosen,
                )
            )
        return views

    def _resolve(self, player_ids: list[str], match_id: str) -> list[PlayerModel]:
        players = self.player_repo.find_many(player_ids)
        if len(players) != len(player_ids):
            logger.warning(
                "Match %s: %d of %d listed players are not registered",
                match_id, len(player_ids) - len(players), len(player_ids),
            )
        return players

    async def sync_matches(self) -> dict:
        """Store the details of every scheduled match, creating new ones.

        Player lists of existing matches are preserved.

        Returns:
            Dict with counts: scraped, created, updated.
        """
        scraped = await self.fetch_schedule()
        stats = {"scraped": len(scraped), "created": 0, "updated": 0}

        for card in scraped:
            async with self._lock_for(card.match_id):
                created = self.match_repo.upsert_details(vars(card))
            stats["created" if created else "updated"] += 1

        logger.info(
            "Match sync: %d scraped, %d created, %d updated",
            stats["scraped"], stats["created"], stats["updated"],
        )
        return stats

    # ------------------------------------------------------------------
    # Availability and selection
    # ------------------------------------------------------------------

    async def add_availability(self, player_id: str, match_id: str) -> MatchModel:
        """Mark a player available for a match.

        Appends ``match_id`` to the player's availability, then appends the
        player to the match's available list, creating the match with this
        player as its only available player if it does not exist yet.

        Raises:
            ValidationError: On a bad argument.
            PlayerNotFoundError: If the player does not exist (nothing written).
        """
        require_string(player_id, "playerId")
        require_string(match_id, "matchId")

        async with self._lock_for(match_id):
            if self.player_repo.update_availability(player_id, add=match_id) is None:
                raise PlayerNotFoundError(f"Player {player_id} not found")

            try:
                match = self.match_repo.find_by_match_id(match_id)
                if match is None:
                    match = self.match_repo.create(match_id, players_available=[player_id])
                    logger.info("Match %s created by availability of %s", match_id, player_id)
                else:
                    available = match.players_available + [player_id]
                    self.match_repo.update_available_list(match_id, available)
                    match = match.model_copy(update={"players_available": available})
            except Exception as exc:
                logger.error(
                    "Player %s marked available for %s but match update failed: %s",
                    player_id, match_id, exc,
                )
                raise

        logger.info("Player %s available for match %s", player_id, match_id)
        return match

    async def remove_availability(self, player_id: str, match_id: str) -> MatchModel:
        """Undo add_availability for one (player, match) pair.

        Removes the first occurrence on each side; absent entries are
        no-ops.

        Raises:
            ValidationError: On a bad argument.
            MatchNotFoundError: If the match has no stored record. Checked
                before anything is written.
            PlayerNotFoundError: If the player does not exist.
        """
        require_string(player_id, "playerId")
        require_string(match_id, "matchId")

        async with self._lock_for(match_id):
            match = self.match_repo.find_by_match_id(match_id)
            if match is None:
                raise MatchNotFoundError(f"Match {match_id} does not exist")

            if self.player_repo.update_availability(player_id, remove=match_id) is None:
                raise PlayerNotFoundError(f"Player {player_id} not found")

            available = list(match.players_available)
            if player_id in available:
                available.remove(player_id)
                try:
                    self.match_repo.update_available_list(match_id, available)
                except Exception as exc:
                    logger.error(
                        "Player %s unmarked for %s but match update failed: %s",
                        player_id, match_id, exc,
                    )
                    raise

        logger.info("Player %s no longer available for match %s", player_id, match_id)
        return match.model_copy(update={"players_available": available})

    async def set_chosen_players(self, players: list[str], match_id: str) -> MatchModel:
        """Replace the chosen players of a match, creating the match if needed.

        ``players`` are player ids taken as given; they are not checked
        against the player store.
        """
        chosen = require_string_list(players, "players")
        require_string(match_id, "matchId")

        async with self._lock_for(match_id):
            match = self.match_repo.find_by_match_id(match_id)
            if match is None:
                match = self.match_repo.create(match_id, players_chosen=chosen)
            else:
                self.match_repo.update_chosen_list(match_id, chosen)
                match = match.model_copy(update={"players_chosen": chosen})

        logger.info("Match %s chosen players: %s", match_id, ", ".join(chosen) or "none")
        return match
