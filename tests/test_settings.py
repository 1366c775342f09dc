import pytest

from engine.settings import Settings
from graph.errors import InvalidSetting, NotFound


def test_defaults_are_valid():
    s = Settings()
    s.validate()
    assert s.density_fraction == 0.3


def test_parses_strings_from_forms():
    s = Settings.from_mapping({
        "algorithm": "Kruskal", "node_count": "12", "density": "45",
        "topology": "CYCLE", "speed": "7", "seed": "99", "start_node": " c ",
    })
    assert (s.algorithm, s.node_count, s.density, s.topology, s.speed, s.seed) == (
        "kruskal", 12, 45, "cycle", 7, 99,
    )
    assert s.start_node == "c"


def test_missing_keys_fall_back_to_base():
    base = Settings(algorithm="kruskal", node_count=5)
    s = Settings.from_mapping({"speed": 3}, base)
    assert (s.algorithm, s.node_count, s.speed) == ("kruskal", 5, 3)
    assert base.speed != 3


def test_blank_optional_values_become_none():
    s = Settings.from_mapping({"seed": "", "start_node": ""}, Settings(seed=4, start_node="B"))
    assert s.seed is None
    assert s.start_node is None


@pytest.mark.parametrize("data", [
    {"algorithm": "boruvka"},
    {"node_count": 1},
    {"node_count": 27},
    {"node_count": "many"},
    {"node_count": 4.5},
    {"density": 101},
    {"density": -1},
    {"topology": "star"},
    {"speed": 0},
    {"speed": 11},
    {"speed": True},
    {"seed": "x"},
])
def test_bad_values_raise(data):
    with pytest.raises(InvalidSetting):
        Settings.from_mapping(data)


def test_invalid_setting_is_a_value_error():
    with pytest.raises(ValueError):
        Settings.from_mapping({"speed": 99})


def test_resolve_start(triangle):
    assert Settings().resolve_start(triangle) is None
    assert Settings(start_node="b").resolve_start(triangle) == 1
    assert Settings(start_node="2").resolve_start(triangle) == 2
    with pytest.raises(NotFound):
        Settings(start_node="Q").resolve_start(triangle)
    with pytest.raises(NotFound):
        Settings(start_node="9").resolve_start(triangle)


def test_to_dict_round_trip():
    s = Settings(algorithm="kruskal", seed=3)
    assert Settings.from_mapping(s.to_dict()) == s
