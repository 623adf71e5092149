from fieldsteer.basis import Axis
from fieldsteer.constants import MAX_COMPONENTS_PER_DIMENSION


def _pick_term(catalog, position, delta):
    # Smallest-magnitude term pointing along delta; steep terms tend to overshoot.
    x, y = position
    best = None
    for basis in catalog:
        value = basis(x, y)
        if value * delta <= 0:
            continue
        if best is None or abs(value) < abs(best[1]):
            best = (basis.id, value)
    return None if best is None else best[0]


def policy(env):
    # Strategy: for each axis pick one catalog term whose value at the player's position
    # points toward the goal, switch off everything else, then start the run.
    # Greedy and open loop: it never corrects the field once the particle moves.
    session = env.session
    if session.simulating:
        return [0, 0, 0]

    px, py = session.player
    ex, ey = session.level.end
    wanted = {
        Axis.X: _pick_term(session.catalog(Axis.X), session.player, ex - px),
        Axis.Y: _pick_term(session.catalog(Axis.Y), session.player, ey - py),
    }

    for axis, offset in ((Axis.X, 1), (Axis.Y, 1 + MAX_COMPONENTS_PER_DIMENSION)):
        for basis in session.catalog(axis):
            active = session.field.is_active(axis, basis.id)
            if active != (basis.id == wanted[axis]):
                press = offset + basis.id
                # presses are edge triggered, release first when repeating a button
                if press == env.prev_term_action:
                    return [0, 0, 0]
                return [press, 0, 0]

    if env.prev_space_held:
        return [0, 0, 0]
    return [0, 1, 0]
