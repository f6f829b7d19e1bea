import math

import pytest


def place(player, x, y):
    player.set_position(x, y)


def swing(engine, attacker, target, kind="bat", correlation_id="c1"):
    return engine.perform_action(attacker.player_id, kind, target, correlation_id)


@pytest.fixture
def duel(engine, join):
    attacker = join("attacker")
    victim = join("victim")
    engine.equip(attacker.player_id, "bat")
    place(attacker, 500.0, 500.0)
    place(victim, 540.0, 500.0)
    return attacker, victim


def test_direct_swing_hits_and_knocks_back(engine, duel):
    attacker, victim = duel
    event, hits = swing(engine, attacker, (600.0, 500.0))

    assert event.kind == "bat"
    assert event.origin == (500.0, 500.0)
    assert event.correlation_id == "c1"
    assert [h.victim_id for h in hits] == [victim.player_id]
    assert hits[0].attacker_id == attacker.player_id
    assert hits[0].direction == pytest.approx((1.0, 0.0))
    kx, ky = victim.campus_knockback
    assert kx == pytest.approx(engine.physics.knockback_speed)
    assert ky == pytest.approx(0.0)


def test_candidate_behind_attacker_is_never_hit(engine, duel):
    attacker, victim = duel
    _, hits = swing(engine, attacker, (400.0, 500.0))
    assert hits == []
    assert victim.campus_knockback == (0.0, 0.0)


def test_candidate_out_of_range_is_not_hit(engine, duel):
    attacker, victim = duel
    place(victim, 500.0 + engine.physics.bat_range + 1, 500.0)
    _, hits = swing(engine, attacker, (700.0, 500.0))
    assert hits == []


def test_cone_edge(engine, duel):
    attacker, victim = duel
    half_arc = engine.physics.bat_arc / 2
    inside = half_arc - 0.05
    outside = half_arc + 0.05

    place(victim, 500 + 50 * math.cos(inside), 500 + 50 * math.sin(inside))
    _, hits = swing(engine, attacker, (600.0, 500.0))
    assert len(hits) == 1

    engine.clock.advance(engine.physics.hit_cooldown)
    place(victim, 500 + 50 * math.cos(outside), 500 + 50 * math.sin(outside))
    _, hits = swing(engine, attacker, (600.0, 500.0))
    assert hits == []


def test_cooldown_allows_one_hit_per_window(engine, duel):
    attacker, victim = duel
    _, first = swing(engine, attacker, (600.0, 500.0))
    engine.clock.advance(engine.physics.hit_cooldown / 2)
    _, second = swing(engine, attacker, (600.0, 500.0))
    assert len(first) == 1
    assert second == []

    engine.clock.advance(engine.physics.hit_cooldown)
    _, third = swing(engine, attacker, (600.0, 500.0))
    assert len(third) == 1


def test_overlapping_victim_is_pushed_along_swing(engine, duel):
    attacker, victim = duel
    place(victim, 500.0, 500.0)
    _, hits = swing(engine, attacker, (500.0, 600.0))
    assert hits[0].direction == pytest.approx((0.0, 1.0))


def test_room_isolation(engine, join):
    attacker = join("attacker")
    same_sub = join("samesub")
    other_sub = join("othersub")
    lobby = join("lobby")
    campus = join("campus")
    engine.enter_subroom(attacker.player_id, "gym", "court")
    engine.enter_subroom(same_sub.player_id, "gym", "court")
    engine.enter_subroom(other_sub.player_id, "gym", "locker")
    engine.enter_room(lobby.player_id, "gym")
    engine.equip(attacker.player_id, "bat")

    for player in (attacker, same_sub, other_sub, lobby, campus):
        place(player, 100.0, 100.0)
    place(attacker, 80.0, 100.0)

    _, hits = swing(engine, attacker, (200.0, 100.0))
    assert [h.victim_id for h in hits] == [same_sub.player_id]
    assert hits[0].space == attacker.space
    assert other_sub.interior_knockback == (0.0, 0.0)
    assert lobby.interior_knockback == (0.0, 0.0)
    assert campus.campus_knockback == (0.0, 0.0)


def test_action_requires_matching_equipped_toy(engine, join):
    player = join("thrower")
    assert swing(engine, player, (10.0, 10.0), kind="ball") is None

    assert engine.equip(player.player_id, "ball")
    assert swing(engine, player, (10.0, 10.0), kind="bat") is None
    event, hits = swing(engine, player, (10.0, 10.0), kind="ball")
    assert event.kind == "ball"
    assert hits == []

    engine.clear_equip(player.player_id)
    assert swing(engine, player, (10.0, 10.0), kind="ball") is None


def test_unknown_toy_cannot_be_equipped(engine, join):
    player = join("thrower")
    assert not engine.equip(player.player_id, "rocket")
    assert player.equipped is None


def test_action_target_is_clamped_to_space(engine, join):
    player = join("thrower")
    engine.equip(player.player_id, "frisbee")
    engine.enter_room(player.player_id, "library")
    event, _ = swing(engine, player, (5000.0, -40.0), kind="frisbee")
    assert event.target == (600.0, 0.0)
    assert event.space.room_id == "library"
    payload = event.to_payload()
    assert payload["space"] == {"roomId": "library", "subroomId": None}
    assert payload["target"] == {"x": 600.0, "y": 0.0}
