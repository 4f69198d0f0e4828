"""Pydantic v2 validation model for player records."""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

# Word-ish local part, dotted domain, 2+ char TLD.
EMAIL_PATTERN = re.compile(r"[\w.+-]+@\w[\w.-]*\.[A-Za-z0-9]{2,}")

POSITIONS = ("right", "left", "both")

Position = Literal["right", "left", "both"]


class PlayerModel(BaseModel):
    """Validation model for a stored player."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    surname: str = Field(min_length=1)
    email: str
    password_hash: str = Field(min_length=1)
    preferred_position: Position = "both"
    player_image: str | None = None
    score: float | None = None
    link: str | None = None  # Player URL on the tournament site
    availability: list[str] = Field(default_factory=list)  # match ids, in order added
    admin: bool = False
    matches_played: int | None = Field(default=None, ge=0)
    created_at: str = ""

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError(f"{value} is not a valid email")
        return value

    def public_dict(self) -> dict:
        """Dump the record without the password hash."""
        return self.model_dump(exclude={"password_hash"})
