"""Unit tests for the JSON game store."""

import json
from datetime import date

import pytest

from club_ratings.services.game_store import GameStore, GameStoreError


def test_missing_file_loads_empty(tmp_path):
    store = GameStore(tmp_path / "data" / "games.json")
    assert store.load() == []


def test_save_then_load_keeps_order_and_fields(game_store, sample_games):
    loaded = game_store.load()

    assert [g.id for g in loaded] == ["abcDef", "xyzUvw", "ghiJkl"]
    assert loaded[0] == sample_games[0]
    assert loaded[1].players == []
    assert loaded[1].has_ratings is False


def test_file_uses_camel_case_keys(game_store):
    raw = json.loads(game_store.path.read_text(encoding="utf-8"))
    game = raw[0]

    assert game["homeTeam"] == "NK Maribor"
    assert game["awayTeam"] == "NK Celje"
    assert game["hasRatings"] is True
    assert game["date"] == "2025-08-10"
    assert "scrapedAt" in game
    assert game["players"][0] == {
        "name": "Ažbe Jug",
        "rating": 7.0,
        "position": "Goalkeeper",
        "minutesPlayed": 90,
        "isStartingXI": True,
    }


def test_save_replaces_previous_collection(game_store, sample_games):
    game_store.save(sample_games[1:2])

    assert [g.id for g in game_store.load()] == ["xyzUvw"]


def test_save_empty_collection(game_store):
    game_store.save([])

    assert game_store.load() == []
    assert json.loads(game_store.path.read_text(encoding="utf-8")) == []


def test_save_leaves_no_temp_files(game_store):
    assert [p.name for p in game_store.path.parent.iterdir()] == ["games.json"]


def test_get_by_id(game_store):
    assert game_store.get("ghiJkl").away_team == "NK Koper"
    assert game_store.get("nope") is None


def test_corrupt_file_raises(tmp_path):
    path = tmp_path / "games.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(GameStoreError):
        GameStore(path).load()


def test_invalid_rating_in_file_raises(tmp_path):
    path = tmp_path / "games.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "abcDef",
                    "url": "https://www.sofascore.com/football/match/x/abcDef",
                    "date": "2025-08-10",
                    "players": [{"name": "Ažbe Jug", "rating": 11.5}],
                }
            ]
        ),
        encoding="utf-8",
    )

    with pytest.raises(GameStoreError):
        GameStore(path).load()


def test_reads_files_written_by_earlier_versions(tmp_path):
    """The earlier scraper wrote locale dates such as 8/10/2025."""
    path = tmp_path / "games.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "abcDef",
                    "url": "https://www.sofascore.com/football/match/x/abcDef",
                    "date": "8/10/2025",
                    "homeTeam": "NK Maribor",
                    "awayTeam": "NK Celje",
                    "score": "2 - 1",
                    "players": [
                        {
                            "name": "Martin Milec",
                            "rating": 8.3,
                            "position": "Defender",
                            "minutesPlayed": 90,
                            "isStartingXI": True,
                        }
                    ],
                    "hasRatings": True,
                    "scrapedAt": "2025-08-11T09:30:00.000Z",
                }
            ]
        ),
        encoding="utf-8",
    )

    store = GameStore(path)
    game = store.load()[0]

    assert game.date == date(2025, 8, 10)
    assert game.players[0].name == "Martin Milec"
    assert game.players[0].is_starting_xi is True
    assert game.scraped_at.year == 2025

    store.save([game])
    assert json.loads(path.read_text(encoding="utf-8"))[0]["date"] == "2025-08-10"


def test_unparseable_locale_date_raises(tmp_path):
    path = tmp_path / "games.json"
    path.write_text(
        json.dumps([{"id": "abcDef", "url": "https://x/abcDef", "date": "13/45/2025"}]),
        encoding="utf-8",
    )

    with pytest.raises(GameStoreError):
        GameStore(path).load()
