import pytest

from cavemesh.dungeon import ConfigError, DungeonConfig


def test_defaults_are_valid():
    cfg = DungeonConfig().validate()
    assert (cfg.width, cfg.height) == (100, 100)
    assert cfg.fill_percent == 45
    assert (cfg.min_room_size, cfg.max_room_size) == (8, 20)
    assert cfg.tunnel_radius == (2, 3)
    assert cfg.wall_height == 15.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"width": 0},
        {"height": -4},
        {"width": 2, "height": 2, "room_attempts": 0},
        {"fill_percent": 101},
        {"fill_percent": -1},
        {"min_room_size": 0},
        {"min_room_size": 10, "max_room_size": 5},
        {"width": 20, "height": 20, "min_room_size": 4, "max_room_size": 18},
        {"smooth_passes": -1},
        {"tunnel_radius": (3, 2)},
        {"square_size": 0},
        {"border_size": -1},
        {"border_size": 0},
    ],
)
def test_invalid_configs_fail_fast(overrides):
    with pytest.raises(ConfigError):
        DungeonConfig(**overrides).validate()


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        DungeonConfig(fill_percent=500).validate()


def test_large_rooms_allowed_when_no_attempts():
    DungeonConfig(width=10, height=10, room_attempts=0).validate()


def test_from_mapping_coerces_strings():
    cfg = DungeonConfig.from_mapping(
        {
            "width": "30",
            "fill_percent": "40",
            "connect_regions": "true",
            "is_2d": "0",
            "tunnel_radius": "1,2",
            "square_size": "2",
            "seed": "abc",
            "not_a_field": "ignored",
        }
    )
    assert cfg.width == 30
    assert cfg.fill_percent == 40
    assert cfg.connect_regions is True
    assert cfg.is_2d is False
    assert cfg.tunnel_radius == (1, 2)
    assert cfg.square_size == 2.0
    assert cfg.seed == "abc"


def test_from_mapping_uses_base():
    base = DungeonConfig(width=50, height=40)
    cfg = DungeonConfig.from_mapping({"fill_percent": 10}, base=base)
    assert (cfg.width, cfg.height, cfg.fill_percent) == (50, 40, 10)


def test_from_mapping_rejects_garbage():
    with pytest.raises(ConfigError):
        DungeonConfig.from_mapping({"width": "wide"})
    with pytest.raises(ConfigError):
        DungeonConfig.from_mapping({"seed": 1.5})


def test_to_dict_is_json_friendly():
    d = DungeonConfig().to_dict()
    assert d["tunnel_radius"] == [2, 3]
    assert DungeonConfig.from_mapping(d) == DungeonConfig()
