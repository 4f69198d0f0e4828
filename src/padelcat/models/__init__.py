"""Pydantic v2 models for padelcat entities.

Re-exports all model classes for convenient import::

    from padelcat.models import PlayerModel, MatchModel, MatchView
"""

from .match import MatchModel, MatchView
from .player import EMAIL_PATTERN, POSITIONS, PlayerModel

__all__ = [
    "PlayerModel",
    "MatchModel",
    "MatchView",
    "EMAIL_PATTERN",
    "POSITIONS",
]
