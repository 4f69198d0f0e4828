"""Player registration, login and lookup.

Registration seeds the new player's score straight from the roster page
through the reconciliation engine, so a player whose site link does not
appear exactly once on the roster is stored but the call still fails with
IncorrectLinkError.
"""

import asyncio
import logging

from padelcat.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    NotFoundError,
    PlayerNotFoundError,
    ValidationError,
)
from padelcat.models import EMAIL_PATTERN, POSITIONS, PlayerModel
from padelcat.validation import require_string

logger = logging.getLogger(__name__)


class PlayerService:
    """Upward-facing player operations."""

    def __init__(
        self,
        player_repo,    # PlayerRepository
        engine,         # ReconciliationEngine
        hasher,         # PasswordHasher
    ) -> None:
        self.player_repo = player_repo
        self.engine = engine
        self.hasher = hasher

    async def register_player(
        self,
        name: str,
        surname: str,
        email: str,
        password: str,
        link: str,
        preferred_position: str = "both",
        admin: bool = False,
    ) -> str:
        """Create a player and sync their score. Returns the new player id.

        Raises:
            ValidationError: On a missing/blank argument, an unknown
                position, or an email that does not look like an address.
            DuplicateEmailError: If the email is already registered.
            IncorrectLinkError, TransportError, ParseError: From the score
                sync that follows creation; the player stays registered.
        """
        for value, field in (
            (name, "name"),
            (surname, "surname"),
            (email, "email"),
            (password, "password"),
            (link, "link"),
        ):
            require_string(value, field)
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValidationError(f"{email!r} is not a valid email")
        if preferred_position not in POSITIONS:
            raise ValidationError(
                f"preferred position must be one of {', '.join(POSITIONS)}"
            )
        if not isinstance(admin, bool):
            raise ValidationError(f"{admin} is not boolean")

        if self.player_repo.find_by_email(email) is not None:
            raise DuplicateEmailError(f"Player with email {email} already exists")

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        player_id = self.player_repo.create(
            {
                "name": name,
                "surname": surname,
                "email": email,
                "password_hash": password_hash,
                "link": link,
                "preferred_position": preferred_position,
                "admin": admin,
            }
        )
        logger.info("Registered player %s (%s)", player_id, email)

        await self.engine.sync_player_score(link)
        return player_id

    async def authenticate_player(self, email: str, password: str) -> PlayerModel:
        """Return the player whose credentials match.

        Raises:
            PlayerNotFoundError: If no player has this email.
            AuthenticationError: If the password does not match.
        """
        require_string(email, "email")
        require_string(password, "password")

        player = self.player_repo.find_by_email(email)
        if player is None:
            raise PlayerNotFoundError(f"Player with email {email} not found")

        matches = await asyncio.to_thread(
            self.hasher.compare, password, player.password_hash
        )
        if not matches:
            logger.info("Failed login for %s", email)
            raise AuthenticationError("Wrong credentials")
        return player

    async def retrieve_players(self) -> list[PlayerModel]:
        players = self.player_repo.list_all()
        if not players:
            raise NotFoundError("There are no players in data")
        return players

    async def get_player_by_id(self, player_id: str) -> PlayerModel:
        require_string(player_id, "playerId")
        player = self.player_repo.find_by_id(player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player {player_id} doesn't exist")
        return player
