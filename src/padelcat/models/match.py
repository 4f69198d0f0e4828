"""Pydantic v2 models for stored matches and the merged schedule view.

MatchModel is the stored record: scraped details plus the availability
and chosen-player lists, both holding player ids.
MatchView is what the schedule listing returns: the scraped card with
both lists resolved to full player records.
"""

from pydantic import BaseModel, Field

from .player import PlayerModel


class MatchModel(BaseModel):
    """Validation model for a stored match."""

    match_id: str = Field(min_length=1)
    date: str = ""
    team1: str = ""
    image_team1: str = ""
    team2: str = ""
    image_team2: str = ""
    result: str = ""
    location: str = ""
    players_available: list[str] = Field(default_factory=list)
    players_chosen: list[str] = Field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


class MatchView(BaseModel):
    """A scraped match merged with its stored player lists."""

    match_id: str
    date: str
    team1: str
    image_team1: str
    team2: str
    image_team2: str
    result: str
    location: str
    players_available: list[PlayerModel] = Field(default_factory=list)
    players_chosen: list[PlayerModel] = Field(default_factory=list)

    def public_dict(self) -> dict:
        """Dump the view with player password hashes removed."""
        data = self.model_dump(exclude={"players_available", "players_chosen"})
        data["players_available"] = [p.public_dict() for p in self.players_available]
        data["players_chosen"] = [p.public_dict() for p in self.players_chosen]
        return data
