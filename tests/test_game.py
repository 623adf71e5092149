import numpy as np
import pytest

from fieldsteer.basis import Axis, Operator, make_catalog
from fieldsteer.game import GameEnv
from fieldsteer.levels import Level


def _levels(count=2):
    return tuple(
        Level(
            number=i,
            start=(0.0, 0.0),
            end=(2.5, 0.0),
            x_functions=make_catalog([("1", lambda x, y: 1.0), ("x", lambda x, y: x)]),
            y_functions=make_catalog([("1", lambda x, y: 1.0)]),
            tick_time=0.1,
        )
        for i in range(count)
    )


@pytest.fixture
def env():
    env = GameEnv()
    yield env
    env.close()


def test_reset_returns_rgb_observation(env):
    obs, info = env.reset()
    assert obs.shape == (env.SCREEN_HEIGHT, env.SCREEN_WIDTH, 3)
    assert obs.dtype == np.uint8
    assert info["level"] == 0
    assert info["x_text"] == "0"
    assert info["y_text"] == "0"


def test_validate_implementation(env):
    env.validate_implementation()


def test_term_presses_are_edge_triggered(env):
    env.reset()
    env.step([1, 0, 0])
    env.step([1, 0, 0])
    assert env.session.field.is_active(Axis.X, 0)

    env.step([5, 0, 0])
    assert env.session.field.is_active(Axis.Y, 0)
    _, _, _, _, info = env.step([0, 0, 0])
    assert info["x_text"] == "x^2"
    assert info["y_text"] == "-100"


def test_shift_cycles_operator(env):
    env.reset()
    env.step([0, 0, 1])
    env.step([0, 0, 1])
    assert env.session.operator is Operator.MULTIPLY
    env.step([0, 0, 0])
    _, _, _, _, info = env.step([0, 0, 1])
    assert info["operator"] == "Add"


def test_space_toggles_simulation(env):
    env.reset()
    env.step([0, 1, 0])
    assert env.session.simulating
    env.step([0, 1, 0])
    assert env.session.simulating
    env.step([0, 0, 0])
    env.step([0, 1, 0])
    assert not env.session.simulating


def test_missing_catalog_buttons_are_ignored():
    env = GameEnv(levels=_levels())
    env.step([4, 0, 0])
    env.step([8, 0, 0])
    assert env.session.field.terms(Axis.X) == ()
    assert env.session.field.terms(Axis.Y) == ()
    env.close()


def test_completing_every_level_terminates():
    env = GameEnv(levels=_levels(2))
    for level_number in range(2):
        assert env.session.level.number == level_number
        env.step([1, 0, 0])
        env.step([0, 1, 0])
        _, reward, terminated, truncated, info = env.step([0, 0, 0])
        assert reward == pytest.approx(env.REWARD_LEVEL + env.PENALTY_STEP)
        assert info["completed_levels"] == level_number + 1

    assert terminated
    assert not truncated
    assert env.score == 2 * env.REWARD_LEVEL

    _, reward, terminated, _, _ = env.step([0, 0, 0])
    assert terminated and reward == 0
    env.close()


def test_clear_action_removes_every_term(env):
    env.step([1, 0, 0])
    env.step([6, 0, 0])
    env.step([0, 1, 0])
    assert env.session.simulating

    _, _, _, _, info = env.step([env.CLEAR_ACTION, 0, 0])
    assert info["x_text"] == "0"
    assert info["y_text"] == "0"
    assert not info["simulating"]
    assert env.session.player == env.session.level.start
