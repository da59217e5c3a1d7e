import random

import pytest

from spherewars.player import Player
from spherewars.types import Quat, Vec3


def make_player(seed=1):
    return Player.create("id-1", "alice", random.Random(seed))


def test_create_defaults():
    player = make_player()
    assert player.id == "id-1"
    assert player.name == "alice"
    assert player.position == Vec3(48.0, 2.5, 48.0)
    assert player.rotation == Quat()
    assert player.health == 100.0 and player.max_health == 100.0
    assert player.kills == 0 and player.deaths == 0
    assert player.is_alive is True
    assert player.death_time is None and player.last_damage_by is None


@pytest.mark.parametrize("seed", range(20))
def test_create_color_in_range(seed):
    player = make_player(seed)
    assert len(player.color) == 3
    assert all(0.3 <= c < 1.0 for c in player.color)


def test_create_is_deterministic_for_seeded_rng():
    first = list(make_player(7).color)
    other = list(Player.create("id-2", "bob", random.Random(7)).color)
    assert len(first) == 3
    assert all(0.3 <= c < 1.0 for c in first)
    assert len(set(first)) == 3
    assert other == first


def test_take_damage_survives():
    player = make_player()
    assert player.take_damage(30.0) is False
    assert player.health == pytest.approx(70.0)
    assert player.is_alive is True
    assert player.deaths == 0


def test_take_damage_kills_and_clamps():
    player = make_player()
    assert player.take_damage(50.0) is False
    assert player.take_damage(80.0) is True
    assert player.health == 0.0
    assert player.is_alive is False
    assert player.deaths == 1


def test_take_damage_on_dead_player_does_nothing():
    player = make_player()
    player.take_damage(100.0)
    assert player.take_damage(50.0) is False
    assert player.deaths == 1
    assert player.health == 0.0


def test_respawn_restores_state():
    player = make_player()
    player.take_damage(100.0)
    player.death_time = 5.0
    player.last_damage_time = 4.0
    player.last_damage_by = 3
    player.respawn()
    assert player.is_alive is True
    assert player.health == player.max_health
    assert player.position == Vec3(96.0, 2.5, 96.0)
    assert (player.death_time, player.last_damage_time, player.last_damage_by) == (None, None, None)
    assert player.deaths == 1


def test_json_round_trip():
    player = make_player()
    player.kills = 4
    player.death_time = 12.5
    player.last_damage_by = 2
    player.position = Vec3(1.0, 2.0, 3.0)
    data = player.to_json()
    assert list(data)[:2] == ["id", "name"]
    assert Player.from_json(data) == player


def test_from_json_missing_optionals_are_none():
    data = make_player().to_json()
    for key in ("death_time", "last_damage_time", "last_damage_by"):
        del data[key]
    player = Player.from_json(data)
    assert player.death_time is None and player.last_damage_by is None


def test_from_json_rejects_bad_input():
    data = make_player().to_json()
    del data["health"]
    with pytest.raises(KeyError):
        Player.from_json(data)
    bad = make_player().to_json()
    bad["kills"] = -1
    with pytest.raises(ValueError):
        Player.from_json(bad)
    with pytest.raises(TypeError):
        Player.from_json([])