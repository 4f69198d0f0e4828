"""Data access layer for players and matches.

PlayerRepository and MatchRepository are the stores the reconciliation
engine reads and mutates. Both receive a raw ``sqlite3.Connection`` so
tests can pass any connection, use module-level SQL constants, and wrap
mutations in ``with self.conn:`` for automatic commit/rollback.

Records are stored document-style: list fields are JSON arrays in TEXT
columns. Reads return validated Pydantic models. "Not found" is never an
exception here; lookups return ``None`` and updates return ``False``.
"""

import json
import sqlite3
import uuid
from datetime import datetime, timezone

from padelcat.exceptions import DuplicateEmailError
from padelcat.models import MatchModel, PlayerModel
from padelcat.validation import validate_record

# ---------------------------------------------------------------------------
# SQL constants
# ---------------------------------------------------------------------------

INSERT_PLAYER = """
    INSERT INTO players (
        id, name, surname, email, password_hash, preferred_position,
        player_image, score, link, availability, admin, matches_played,
        created_at
    ) VALUES (
        :id, :name, :surname, :email, :password_hash, :preferred_position,
        :player_image, :score, :link, :availability, :admin, :matches_played,
        :created_at
    )
"""

SELECT_PLAYERS = "SELECT * FROM players"

INSERT_MATCH = """
    INSERT INTO matches (
        match_id, date, team1, image_team1, team2, image_team2,
        result, location, players_available, players_chosen,
        created_at, updated_at
    ) VALUES (
        :match_id, :date, :team1, :image_team1, :team2, :image_team2,
        :result, :location, :players_available, :players_chosen,
        :created_at, :updated_at
    )
"""

# Scraped details only. The player lists belong to local state and are
# never overwritten by a schedule sync.
UPSERT_MATCH_DETAILS = """
    INSERT INTO matches (
        match_id, date, team1, image_team1, team2, image_team2,
        result, location, created_at, updated_at
    ) VALUES (
        :match_id, :date, :team1, :image_team1, :team2, :image_team2,
        :result, :location, :now, :now
    )
    ON CONFLICT(match_id) DO UPDATE SET
        date        = excluded.date,
        team1       = excluded.team1,
        image_team1 = excluded.image_team1,
        team2       = excluded.team2,
        image_team2 = excluded.image_team2,
        result      = excluded.result,
        location    = excluded.location,
        updated_at  = excluded.updated_at
"""

MATCH_DETAIL_FIELDS = (
    "date", "team1", "image_team1", "team2", "image_team2", "result", "location",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

class PlayerRepository:
    """Store for registered players.

    Player ids are assigned here (uuid4 hex) when a player is created.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    @staticmethod
    def _to_model(row: sqlite3.Row) -> PlayerModel:
        data = dict(row)
        data["availability"] = json.loads(data["availability"])
        data["admin"] = bool(data["admin"])
        return PlayerModel.model_validate(data)

    def create(self, fields: dict) -> str:
        """Validate and insert a new player, returning its id.

        ``fields`` holds every PlayerModel field except ``id`` and
        ``created_at``.

        Raises:
            ValidationError: If the fields do not form a valid player.
            DuplicateEmailError: If the email is already taken.
        """
        data = dict(fields)
        data["id"] = uuid.uuid4().hex
        data["created_at"] = _now()
        player = validate_record(data, PlayerModel)

        row = player.model_dump()
        row["availability"] = json.dumps(row["availability"])
        row["admin"] = int(row["admin"])
        try:
            with self.conn:
                self.conn.execute(INSERT_PLAYER, row)
        except sqlite3.IntegrityError as exc:
            if "players.email" in str(exc):
                raise DuplicateEmailError(
                    f"Player with email {player.email} already exists"
                ) from exc
            raise
        return player.id

    def find_by_id(self, player_id: str) -> PlayerModel | None:
        row = self.conn.execute(
            SELECT_PLAYERS + " WHERE id = ?", (player_id,)
        ).fetchone()
        return self._to_model(row) if row else None

    def find_by_email(self, email: str) -> PlayerModel | None:
        row = self.conn.execute(
            SELECT_PLAYERS + " WHERE email = ?", (email,)
        ).fetchone()
        return self._to_model(row) if row else None

    def find_by_link(self, link: str) -> PlayerModel | None:
        """Return the earliest-registered player with this site link."""
        row = self.conn.execute(
            SELECT_PLAYERS + " WHERE link = ? ORDER BY created_at, rowid LIMIT 1",
            (link,),
        ).fetchone()
        return self._to_model(row) if row else None

    def find_many(self, player_ids: list[str]) -> list[PlayerModel]:
        """Resolve ids to players, keeping input order and duplicates.

        Ids with no stored player are skipped.
        """
        if not player_ids:
            return []
        unique = list(dict.fromkeys(player_ids))
        placeholders = ", ".join("?" for _ in unique)
        rows = self.conn.execute(
            SELECT_PLAYERS + f" WHERE id IN ({placeholders})", unique
        ).fetchall()
        by_id = {row["id"]: self._to_model(row) for row in rows}
        return [by_id[pid] for pid in player_ids if pid in by_id]

    def list_all(self) -> list[PlayerModel]:
        rows = self.conn.execute(
            SELECT_PLAYERS + " ORDER BY created_at, rowid"
        ).fetchall()
        return [self._to_model(r) for r in rows]

    def update_availability(
        self,
        player_id: str,
        *,
        add: str | None = None,
        remove: str | None = None,
    ) -> list[str] | None:
        """Append or remove one match id on a player's availability list.

        ``add`` appends (duplicates allowed, like a list push). ``remove``
        drops the first occurrence and is a no-op if the id is absent.
        Exactly one of the two must be given.

        Returns:
            The new availability list, or None if the player does not exist.
        """
        if (add is None) == (remove is None):
            raise ValueError("Pass exactly one of add= or remove=")

        with self.conn:
            row = self.conn.execute(
                "SELECT availability FROM players WHERE id = ?", (player_id,)
            ).fetchone()
            if row is None:
                return None
            availability = json.loads(row["availability"])
            if add is not None:
                availability.append(add)
            elif remove in availability:
                availability.remove(remove)
            self.conn.execute(
                "UPDATE players SET availability = ? WHERE id = ?",
                (json.dumps(availability), player_id),
            )
        return availability

    def update_score(self, player_id: str, score: float | None) -> bool:
        """Set a player's score. Returns False if the player does not exist."""
        with self.conn:
            cur = self.conn.execute(
                "UPDATE players SET score = ? WHERE id = ?", (score, player_id)
            )
        return cur.rowcount == 1


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------

class MatchRepository:
    """Store for matches, keyed by the site-derived match id."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    @staticmethod
    def _to_model(row: sqlite3.Row) -> MatchModel:
        data = dict(row)
        data["players_available"] = json.loads(data["players_available"])
        data["players_chosen"] = json.loads(data["players_chosen"])
        return MatchModel.model_validate(data)

    def find_by_match_id(self, match_id: str) -> MatchModel | None:
        row = self.conn.execute(
            "SELECT * FROM matches WHERE match_id = ?", (match_id,)
        ).fetchone()
        return self._to_model(row) if row else None

    def list_all(self) -> list[MatchModel]:
        rows = self.conn.execute(
            "SELECT * FROM matches ORDER BY created_at, rowid"
        ).fetchall()
        return [self._to_model(r) for r in rows]

    def create(
        self,
        match_id: str,
        players_available: list[str] | None = None,
        players_chosen: list[str] | None = None,
        **details: str,
    ) -> MatchModel:
        """Insert a new match. ``details`` may set any scraped detail field.

        Raises:
            ValidationError: If the resulting record is invalid.
            sqlite3.IntegrityError: If the match id already exists.
        """
        now = _now()
        data = {
            "match_id": match_id,
            "players_available": list(players_available or []),
            "players_chosen": list(players_chosen or []),
            "created_at": now,
            "updated_at": now,
            **details,
        }
        match = validate_record(data, MatchModel)

        row = match.model_dump()
        row["players_available"] = json.dumps(row["players_available"])
        row["players_chosen"] = json.dumps(row["players_chosen"])
        with self.conn:
            self.conn.execute(INSERT_MATCH, row)
        return match

    def update_available_list(self, match_id: str, players: list[str]) -> bool:
        """Replace the available-players list. False if no such match."""
        return self._replace_list(match_id, "players_available", players)

    def update_chosen_list(self, match_id: str, players: list[str]) -> bool:
        """Replace the chosen-players list. False if no such match."""
        return self._replace_list(match_id, "players_chosen", players)

    def _replace_list(self, match_id: str, column: str, players: list[str]) -> bool:
        with self.conn:
            cur = self.conn.execute(
                f"UPDATE matches SET {column} = ?, updated_at = ? WHERE match_id = ?",
                (json.dumps(list(players)), _now(), match_id),
            )
        return cur.rowcount == 1

    def upsert_details(self, details: dict) -> bool:
        """Insert or refresh a match's scraped details.

        ``details`` must contain ``match_id`` and the MATCH_DETAIL_FIELDS.
        Player lists of an existing match are left untouched.

        Returns:
            True if the match was created, False if it already existed.
        """
        params = {"match_id": details["match_id"], "now": _now()}
        params.update({field: details.get(field) or "" for field in MATCH_DETAIL_FIELDS})
        with self.conn:
            existed = self.conn.execute(
                "SELECT 1 FROM matches WHERE match_id = ?", (params["match_id"],)
            ).fetchone()
            self.conn.execute(UPSERT_MATCH_DETAILS, params)
        return existed is None
