import pytest

from fieldsteer.basis import Axis, Operator, make_catalog
from fieldsteer.levels import Level
from fieldsteer.session import LevelSession


def _level(number=0, start=(0.0, 0.0), end=(2.0, 0.0), gas=(), tick_time=0.1):
    return Level(
        number=number,
        start=start,
        end=end,
        x_functions=make_catalog([
            ("1", lambda x, y: 1.0),
            ("-1", lambda x, y: -1.0),
            ("1000", lambda x, y: 1000.0),
        ]),
        y_functions=make_catalog([("1", lambda x, y: 1.0), ("y", lambda x, y: y)]),
        gas_locations=gas,
        tick_time=tick_time,
    )


def _run(session, max_ticks=1000):
    for _ in range(max_ticks):
        result = session.tick()
        if result.level_completed or result.run_lost:
            return result
    return result


def test_new_session_starts_on_first_level():
    session = LevelSession((_level(start=(1.0, -1.0)),))
    assert session.level.number == 0
    assert session.player == (1.0, -1.0)
    assert not session.simulating
    assert session.operator is Operator.ADD
    assert session.field.evaluate(Axis.X, 0, 0) == 0.0


def test_toggle_term_adds_then_removes():
    session = LevelSession((_level(),))
    session.toggle_term(Axis.X, 0)
    assert session.field.is_active(Axis.X, 0)
    assert session.field.render_text(Axis.X) == "1"

    session.toggle_term(Axis.X, 0)
    assert not session.field.is_active(Axis.X, 0)
    assert session.field.render_text(Axis.X) == "0"


def test_toggle_uses_current_operator():
    session = LevelSession((_level(),))
    session.toggle_term(Axis.Y, 1)
    assert session.cycle_operator() is Operator.MULTIPLY
    session.toggle_term(Axis.Y, 0)

    assert [term.operator for term in session.field.terms(Axis.Y)] == [Operator.ADD, Operator.MULTIPLY]
    assert session.field.render_text(Axis.Y) == "(y) * 1"

    session.set_operator(Operator.ADD)
    assert session.operator is Operator.ADD


def test_toggle_out_of_catalog_is_programmer_error():
    session = LevelSession((_level(),))
    with pytest.raises(AssertionError):
        session.toggle_term(Axis.Y, 2)
    with pytest.raises(AssertionError):
        session.toggle_term(Axis.X, -1)


def test_tick_does_nothing_when_not_simulating():
    session = LevelSession((_level(),))
    session.toggle_term(Axis.X, 0)
    result = session.tick()
    assert session.player == (0.0, 0.0)
    assert not result.level_completed


def test_simulation_moves_player_along_field():
    session = LevelSession((_level(end=(50.0, 50.0)),), substeps=1)
    session.toggle_term(Axis.X, 0)
    session.toggle_term(Axis.Y, 0)
    assert session.toggle_simulation()

    session.tick()
    session.tick()
    assert session.player == pytest.approx((0.2, 0.2))


def test_stopping_simulation_resets_run():
    session = LevelSession((_level(end=(50.0, 0.0)),), substeps=1)
    session.toggle_term(Axis.X, 0)
    session.toggle_simulation()
    session.tick()
    assert session.player != (0.0, 0.0)

    assert not session.toggle_simulation()
    assert session.player == (0.0, 0.0)


def test_toggling_a_term_stops_the_run():
    session = LevelSession((_level(end=(50.0, 0.0)),), substeps=1)
    session.toggle_term(Axis.X, 0)
    session.toggle_simulation()
    session.tick()

    session.toggle_term(Axis.Y, 0)
    assert not session.simulating
    assert session.player == (0.0, 0.0)
    assert session.field.is_active(Axis.X, 0)


def test_reaching_the_end_loads_next_level():
    levels = (_level(number=0), _level(number=1, start=(5.0, 5.0)))
    session = LevelSession(levels, substeps=1)
    session.toggle_term(Axis.X, 0)
    session.toggle_simulation()

    result = _run(session)
    assert result.level_completed
    assert not result.game_completed
    assert session.level.number == 1
    assert session.completed_levels == 1
    assert session.player == (5.0, 5.0)
    assert not session.simulating
    assert session.field.terms(Axis.X) == ()


def test_last_level_wraps_to_first():
    session = LevelSession((_level(),), substeps=1)
    session.toggle_term(Axis.X, 0)
    session.toggle_simulation()

    result = _run(session)
    assert result.game_completed
    assert session.level_index == 0
    assert session.field.render_text(Axis.X) == "0"


def test_gas_must_be_collected_before_finishing():
    session = LevelSession((_level(gas=((0.0, 5.0),)),), substeps=20)
    session.toggle_term(Axis.X, 0)
    session.toggle_simulation()

    result = _run(session)
    # passes the end without the gas can and leaves the world
    assert result.run_lost
    assert not result.level_completed
    assert session.gas_collected == [0]


def test_gas_on_the_path_is_collected():
    session = LevelSession((_level(gas=((1.0, 0.0),)),), substeps=1)
    session.toggle_term(Axis.X, 0)
    session.toggle_simulation()

    collected = 0
    for _ in range(100):
        result = session.tick()
        collected += result.gas_collected
        if result.level_completed:
            break
    assert collected == 1
    assert result.level_completed


def test_diverging_run_is_lost_and_reset():
    session = LevelSession((_level(),), substeps=1)
    session.toggle_term(Axis.X, 2)
    session.toggle_simulation()

    result = session.tick()
    assert result.run_lost
    assert not session.simulating
    assert session.player == (0.0, 0.0)


def test_load_level_clears_field():
    session = LevelSession((_level(), _level(number=1)))
    session.toggle_term(Axis.X, 0)
    session.toggle_term(Axis.Y, 1)
    field = session.field

    session.load_level(1)
    assert session.field is field
    assert session.field.terms(Axis.X) == ()
    assert session.field.terms(Axis.Y) == ()


def test_clear_terms_mid_run_empties_field_and_resets_player():
    session = LevelSession((_level(end=(50.0, 0.0), gas=((0.3, 0.0),)),), substeps=1)
    session.toggle_term(Axis.X, 0)
    session.toggle_term(Axis.Y, 1)
    session.toggle_simulation()
    for _ in range(5):
        session.tick()
    assert session.gas_collected == [1]

    session.clear_terms()
    assert session.field.terms(Axis.X) == ()
    assert session.field.terms(Axis.Y) == ()
    assert not session.simulating
    assert session.player == (0.0, 0.0)
    assert session.gas_collected == [0]
    assert session.level.number == 0
