import pytest

from goap_world.config import CONFIG, load_config


def test_repo_config_defaults():
    assert CONFIG.planner.max_visited_states == 1000
    assert CONFIG.planner.time_slice_seconds == pytest.approx(0.1)
    assert CONFIG.planner.trace_dir is None
    assert CONFIG.movement.arrive_distance == 1.0
    assert CONFIG.movement.max_stalled_ticks == 10


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.yaml")
    assert cfg.world.size == (32, 32)
    assert cfg.actions.travel_speed == 0.5
    assert cfg.logging.global_level == "INFO"
    assert cfg.logging.module_levels == {}


def test_partial_file_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "world:\n"
        "  size: [8, 6]\n"
        "planner:\n"
        "  max_visited_states: 50\n"
        "  trace_dir: traces\n"
        "logging:\n"
        "  global_level: debug\n"
        "  module_levels:\n"
        "    goap_world.systems: WARNING\n"
    )

    cfg = load_config(path)

    assert cfg.world.size == (8, 6)
    assert cfg.world.tick_rate == 10.0
    assert cfg.planner.max_visited_states == 50
    assert cfg.planner.time_slice_seconds == pytest.approx(0.1)
    assert cfg.planner.trace_dir == "traces"
    assert cfg.logging.global_level == "DEBUG"
    assert cfg.logging.module_levels == {"goap_world.systems": "WARNING"}


@pytest.mark.parametrize(
    "body",
    [
        "planner:\n  max_visited_states: 0\n",
        "planner:\n  time_slice_seconds: -1\n",
        "actions:\n  travel_speed: 0\n",
        "movement:\n  arrive_distance: 0\n",
        "movement:\n  arrive_distance: 0.5\n",
        "movement:\n  speed: 0\n",
        "movement:\n  max_stalled_ticks: 0\n",
    ],
)
def test_invalid_values_raise(tmp_path, body):
    path = tmp_path / "config.yaml"
    path.write_text(body)
    with pytest.raises(ValueError):
        load_config(path)
