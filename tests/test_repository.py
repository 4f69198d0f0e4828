"""Tests for PlayerRepository and MatchRepository.

Exercises create/find/update on both stores, JSON list round-tripping,
the not-found contract (None / False, never an exception), and the
detail upsert that must never touch player lists.
"""

import sqlite3

import pytest

from padelcat.db import Database
from padelcat.exceptions import DuplicateEmailError, ValidationError
from padelcat.repository import MatchRepository, PlayerRepository


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def players(db):
    return PlayerRepository(db.conn)


@pytest.fixture
def matches(db):
    return MatchRepository(db.conn)


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------

def make_player_fields(email="ana@x.com", **overrides):
    """Return a complete set of player creation fields."""
    data = {
        "name": "Ana",
        "surname": "Gil",
        "email": email,
        "password_hash": "$2b$10$abcdefghijklmnopqrstuv",
        "preferred_position": "right",
        "link": "https://www.setteo.com/jugador/ana-gil/",
        "admin": False,
    }
    data.update(overrides)
    return data


def make_details(match_id="4581234567890", **overrides):
    data = {
        "match_id": match_id,
        "date": "12/01/2019 19:30",
        "team1": "Padel Girona A",
        "image_team1": "left.png",
        "team2": "Club Tennis Olot",
        "image_team2": "right.png",
        "result": "",
        "location": "Club Padel Girona",
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# PlayerRepository
# ---------------------------------------------------------------------------

class TestPlayerCreate:
    def test_create_returns_id_and_persists(self, players):
        player_id = players.create(make_player_fields())
        player = players.find_by_id(player_id)
        assert player is not None
        assert player.email == "ana@x.com"
        assert player.availability == []
        assert player.score is None
        assert player.admin is False
        assert player.created_at

    def test_ids_are_unique(self, players):
        a = players.create(make_player_fields("a@x.com"))
        b = players.create(make_player_fields("b@x.com"))
        assert a != b

    def test_duplicate_email_raises(self, players):
        players.create(make_player_fields())
        with pytest.raises(DuplicateEmailError):
            players.create(make_player_fields(name="Other"))

    def test_invalid_email_raises_validation_error(self, players):
        with pytest.raises(ValidationError, match="email"):
            players.create(make_player_fields("not-an-email"))

    def test_trailing_newline_email_not_stored_as_second_account(self, players):
        players.create(make_player_fields())
        with pytest.raises(ValidationError, match="email"):
            players.create(make_player_fields("ana@x.com\n"))
        assert len(players.list_all()) == 1

    def test_invalid_position_raises_validation_error(self, players):
        with pytest.raises(ValidationError):
            players.create(make_player_fields(preferred_position="center"))

    def test_admin_flag_round_trips(self, players):
        player_id = players.create(make_player_fields(admin=True))
        assert players.find_by_id(player_id).admin is True


class TestPlayerFind:
    def test_find_by_email(self, players):
        player_id = players.create(make_player_fields())
        assert players.find_by_email("ana@x.com").id == player_id

    def test_find_missing_returns_none(self, players):
        assert players.find_by_id("nope") is None
        assert players.find_by_email("nobody@x.com") is None
        assert players.find_by_link("https://nowhere/") is None

    def test_find_by_link_returns_first_registered(self, players):
        first = players.create(make_player_fields("a@x.com", link="L1"))
        players.create(make_player_fields("b@x.com", link="L1"))
        assert players.find_by_link("L1").id == first

    def test_find_many_keeps_order_and_skips_unknown(self, players):
        a = players.create(make_player_fields("a@x.com"))
        b = players.create(make_player_fields("b@x.com"))
        result = players.find_many([b, "ghost", a, b])
        assert [p.id for p in result] == [b, a, b]

    def test_find_many_empty(self, players):
        assert players.find_many([]) == []

    def test_list_all_in_creation_order(self, players):
        ids = [players.create(make_player_fields(f"p{i}@x.com")) for i in range(3)]
        assert [p.id for p in players.list_all()] == ids


class TestPlayerUpdates:
    def test_add_availability_appends_in_order(self, players):
        player_id = players.create(make_player_fields())
        players.update_availability(player_id, add="m1")
        assert players.update_availability(player_id, add="m2") == ["m1", "m2"]
        assert players.find_by_id(player_id).availability == ["m1", "m2"]

    def test_remove_availability_removes_first_occurrence(self, players):
        player_id = players.create(make_player_fields())
        for match_id in ("m1", "m2", "m1"):
            players.update_availability(player_id, add=match_id)
        assert players.update_availability(player_id, remove="m1") == ["m2", "m1"]

    def test_remove_absent_is_noop(self, players):
        player_id = players.create(make_player_fields())
        players.update_availability(player_id, add="m1")
        assert players.update_availability(player_id, remove="m9") == ["m1"]

    def test_update_availability_missing_player_returns_none(self, players):
        assert players.update_availability("ghost", add="m1") is None

    def test_update_availability_requires_exactly_one_action(self, players):
        player_id = players.create(make_player_fields())
        with pytest.raises(ValueError):
            players.update_availability(player_id)
        with pytest.raises(ValueError):
            players.update_availability(player_id, add="a", remove="b")

    def test_update_score(self, players):
        player_id = players.create(make_player_fields())
        assert players.update_score(player_id, 12.5) is True
        assert players.find_by_id(player_id).score == 12.5

    def test_update_score_missing_player(self, players):
        assert players.update_score("ghost", 1.0) is False


# ---------------------------------------------------------------------------
# MatchRepository
# ---------------------------------------------------------------------------

class TestMatchCreate:
    def test_create_with_available_players(self, matches):
        matches.create("m1", players_available=["p1"])
        match = matches.find_by_match_id("m1")
        assert match.players_available == ["p1"]
        assert match.players_chosen == []
        assert match.team1 == ""

    def test_create_with_details(self, matches):
        details = make_details()
        match_id = details.pop("match_id")
        matches.create(match_id, **details)
        assert matches.find_by_match_id(match_id).team2 == "Club Tennis Olot"

    def test_duplicate_match_id_rejected(self, matches):
        matches.create("m1")
        with pytest.raises(sqlite3.IntegrityError):
            matches.create("m1")

    def test_blank_match_id_rejected(self, matches):
        with pytest.raises(ValidationError):
            matches.create("")

    def test_find_missing_returns_none(self, matches):
        assert matches.find_by_match_id("nope") is None


class TestMatchListUpdates:
    def test_update_available_list_replaces(self, matches):
        matches.create("m1", players_available=["p1"])
        assert matches.update_available_list("m1", ["p1", "p2"]) is True
        assert matches.find_by_match_id("m1").players_available == ["p1", "p2"]

    def test_update_chosen_list_replaces(self, matches):
        matches.create("m1", players_chosen=["a", "b"])
        matches.update_chosen_list("m1", ["c"])
        assert matches.find_by_match_id("m1").players_chosen == ["c"]

    def test_update_missing_match_returns_false(self, matches):
        assert matches.update_available_list("ghost", ["p1"]) is False
        assert matches.update_chosen_list("ghost", ["p1"]) is False


class TestMatchUpsertDetails:
    def test_upsert_creates_new_match(self, matches):
        assert matches.upsert_details(make_details()) is True
        match = matches.find_by_match_id("4581234567890")
        assert match.location == "Club Padel Girona"
        assert match.players_available == []

    def test_upsert_updates_details_and_keeps_lists(self, matches):
        matches.create("4581234567890", players_available=["p1"], players_chosen=["p1"])
        created = matches.upsert_details(make_details(result="6-4 6-3"))
        assert created is False
        match = matches.find_by_match_id("4581234567890")
        assert match.result == "6-4 6-3"
        assert match.players_available == ["p1"]
        assert match.players_chosen == ["p1"]

    def test_list_all(self, matches):
        matches.upsert_details(make_details("m1"))
        matches.upsert_details(make_details("m2"))
        assert [m.match_id for m in matches.list_all()] == ["m1", "m2"]
