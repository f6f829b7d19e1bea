import pytest

from campus.services.identity import normalize_name, sanitize_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Ada  ", "Ada"),
        ("<script>Bob</script>", "scriptBobscript"),
        ("O'Neil-Jr. 2", "O'Neil-Jr. 2"),
        ("under_score", "underscore"),
        ("a\tb", "a b"),
        ("", "Student"),
        ("!!!", "Student"),
        (None, "Student"),
        (42, "Student"),
        ("abcdefghijklmnopqrstuvwxyz", "abcdefghijklmnop"),
    ],
)
def test_sanitize_name(raw, expected):
    assert sanitize_name(raw) == expected


def test_normalize_ignores_case_and_whitespace():
    assert normalize_name("Ada Lovelace") == normalize_name("adalovelace")
    assert normalize_name("ADA") == normalize_name("ada")


def test_first_holder_keeps_name_and_duplicate_is_evicted(game):
    game.connect("s1")
    game.connect("s2")
    first = game.join("s1", "Ada")
    second = game.join("s2", " ada ")

    assert first.accepted and first.name == "Ada"
    assert not second.accepted
    assert second.evicted == ["s2"]
    assert game.get_player("s1").name == "Ada"
    assert game.get_player("s2") is None


def test_name_is_freed_only_when_owner_disconnects(game):
    game.connect("s1")
    game.join("s1", "Ada")
    game.connect("s2")
    game.join("s2", "Ada")

    game.connect("s3")
    assert not game.join("s3", "ADA").accepted

    game.disconnect("s1")
    game.connect("s4")
    result = game.join("s4", "ada")
    assert result.accepted


def test_join_evicts_residual_duplicates(game, store):
    game.connect("s1")
    game.connect("s2")
    game.join("s1", "Ada")
    # Simulate a race that slipped past the join check.
    racer = store.get_session("s2")
    racer.name = "ada"
    racer.joined_seq = store.next_sequence()

    game.connect("s3")
    result = game.join("s3", "Ada")
    assert result.evicted == ["s2", "s3"]
    assert store.get_session("s1") is not None
    assert store.get_session("s2") is None


def test_sweep_evicts_everyone_but_the_earliest_holder(game, store):
    for sid in ("s1", "s2", "s3", "s4"):
        game.connect(sid)
    game.join("s1", "Bob")
    game.join("s4", "Cy")
    for sid in ("s2", "s3"):
        player = store.get_session(sid)
        player.name = "BOB"
        player.joined_seq = store.next_sequence()

    assert game.sweep_duplicates() == ["s2", "s3"]
    assert [p.player_id for p in store.active_players()] == ["s1", "s4"]
    assert game.sweep_duplicates() == []


def test_second_join_from_same_session_is_ignored(game):
    game.connect("s1")
    game.join("s1", "Ada")
    assert game.join("s1", "Grace") is None
    assert game.get_player("s1").name == "Ada"


def test_join_places_player_on_campus_spawn(game, engine):
    game.connect("s1")
    game.join("s1", "Ada")
    player = game.get_player("s1")
    assert player.space.is_campus
    assert player.position() == engine.config.spawn
