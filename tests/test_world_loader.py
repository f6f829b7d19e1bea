import pytest

from campus.models import CAMPUS, SpaceLocator
from campus.world import WorldConfigError, WorldLoader, build_world
from campus.world.loader import hash_hue, strip_comments

from conftest import TEST_LAYOUT


def test_strip_comments_handles_line_and_block_comments():
    raw = '{\n  // campus size\n  "width": 10, /* inline */ "height": 20\n}'
    assert strip_comments(raw).split() == ["{", '"width":', "10,", '"height":', "20", "}"]


def test_loads_commented_file(tmp_path):
    path = tmp_path / "campus.json"
    path.write_text(
        """
        {
          // a tiny campus
          "width": 500, "height": 400,
          /* rooms come from the obstacle list */
          "obstacles": [{"x": 10, "y": 10, "w": 50, "h": 50, "label": "Shed"}]
        }
        """,
        encoding="utf-8",
    )
    config = WorldLoader(path).load()
    assert (config.width, config.height) == (500, 400)
    assert list(config.rooms) == ["auto_0"]
    room = config.rooms["auto_0"]
    assert room.name == "Shed"
    assert (room.interior.width, room.interior.height) == (1100, 700)
    assert room.interior.background == f"hsl({hash_hue('Shed')} 35% 20%)"


def test_missing_file_uses_default_layout(tmp_path):
    config = WorldLoader(tmp_path / "nope.json").load()
    assert "gym" in config.rooms
    assert "locker" in config.rooms["gym"].subrooms


def test_unparseable_file_uses_default_layout(tmp_path):
    path = tmp_path / "campus.json"
    path.write_text("{ this is not json", encoding="utf-8")
    config = WorldLoader(path).load()
    assert "library" in config.rooms


def test_duplicate_room_ids_are_rejected():
    data = {"rooms": [{"id": "a"}, {"id": "a"}]}
    with pytest.raises(WorldConfigError):
        build_world(data)


def test_duplicate_subroom_ids_are_rejected():
    data = {"rooms": [{"id": "a", "subrooms": [{"id": "x"}, {"id": "x"}]}]}
    with pytest.raises(WorldConfigError):
        build_world(data)


def test_non_positive_interior_is_rejected():
    data = {"rooms": [{"id": "a", "interior": {"w": 0, "h": 100}}]}
    with pytest.raises(WorldConfigError):
        build_world(data)


def test_interior_narrower_than_an_avatar_is_rejected():
    data = {"rooms": [{"id": "a", "interior": {"w": 20, "h": 100, "spawn": {"x": 10, "y": 50}}}]}
    with pytest.raises(WorldConfigError, match="interior width"):
        build_world(data)
    with pytest.raises(WorldConfigError):
        build_world({"width": 30, "height": 400, "spawn": {"x": 15, "y": 200}})

    config = build_world(data, player_radius=10)
    assert config.get_room("a").interior.width == 20


def test_invalid_file_contents_are_fatal(tmp_path):
    path = tmp_path / "campus.json"
    path.write_text('{"width": -5}', encoding="utf-8")
    with pytest.raises(WorldConfigError):
        WorldLoader(path).load()


def test_lookups_and_spawns():
    config = build_world(TEST_LAYOUT)
    gym = SpaceLocator(room_id="gym")
    locker = SpaceLocator(room_id="gym", subroom_id="locker")

    assert config.bounds_for(CAMPUS) == (2000, 1200)
    assert config.spawn_for(CAMPUS) == (1000, 600)
    assert config.bounds_for(gym) == (800, 500)
    assert config.spawn_for(gym) == (400, 450)
    assert config.bounds_for(locker) == (300, 200)
    assert config.spawn_for(locker) == (150, 100)

    assert config.resolves(locker)
    assert not config.resolves(SpaceLocator(room_id="gym", subroom_id="pool"))
    assert config.get_room("pool") is None
    assert config.get_subroom("library", "locker") is None


def test_interior_size_aliases():
    config = build_world({"rooms": [{"id": "a", "interior": {"width": 300, "height": 200}}]})
    assert config.bounds_for(SpaceLocator(room_id="a")) == (300, 200)


def test_descriptor_lists_rooms_and_subrooms():
    descriptor = build_world(TEST_LAYOUT).to_descriptor()
    gym = next(r for r in descriptor["rooms"] if r["id"] == "gym")
    assert [s["id"] for s in gym["subrooms"]] == ["locker", "court"]
    assert gym["interior"]["spawn"] == {"x": 400, "y": 450}
