from fieldsteer.basis import make_catalog
from fieldsteer.game import GameEnv
from fieldsteer.levels import Level
from fieldsteer.policies import policy


def test_greedy_policy_clears_a_simple_level():
    level = Level(
        number=0,
        start=(0.0, 0.0),
        end=(4.0, 4.0),
        x_functions=make_catalog([
            ("x^2", lambda x, y: x ** 2),
            ("1", lambda x, y: 1.0),
            ("-1", lambda x, y: -1.0),
        ]),
        y_functions=make_catalog([("1", lambda x, y: 1.0), ("-1", lambda x, y: -1.0)]),
        tick_time=0.1,
    )
    env = GameEnv(levels=(level,))

    terminated = False
    for _ in range(50):
        _, _, terminated, _, info = env.step(policy(env))
        if terminated:
            break

    assert terminated
    assert info["completed_levels"] == 1
    env.close()


def test_policy_waits_while_simulating():
    env = GameEnv()
    env.session.toggle_simulation()
    assert policy(env) == [0, 0, 0]
    env.close()
