import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from fieldsteer.basis import BasisFunction, make_catalog


@dataclass(frozen=True)
class Level:
    number: int
    start: Tuple[float, float]
    end: Tuple[float, float]
    x_functions: Tuple[BasisFunction, ...]
    y_functions: Tuple[BasisFunction, ...]
    gas_locations: Tuple[Tuple[float, float], ...] = ()
    tick_time: float = 0.001  # "time" per velocity step, controls player speed


def _const(value):
    return lambda x, y: value


X = ("x", lambda x, y: x)
Y = ("y", lambda x, y: y)
X_SQUARED = ("x^2", lambda x, y: x ** 2)
Y_SQUARED = ("y^2", lambda x, y: y ** 2)
X_HALF = ("x/2", lambda x, y: x / 2)
Y_HALF = ("y/2", lambda x, y: y / 2)
XY = ("xy", lambda x, y: x * y)
COS_X = ("cosx", lambda x, y: math.cos(x))
CBRT_X = ("cbrt(x)", lambda x, y: float(np.cbrt(x)))
CBRT_Y = ("cbrt(y)", lambda x, y: float(np.cbrt(y)))
ONE = ("1", _const(1.0))
MINUS_ONE = ("-1", _const(-1.0))
HALF = ("1/2", _const(0.5))


LEVELS = (
    # Linear
    Level(
        number=0,
        start=(-15.0, -15.0),
        end=(0.0, 0.0),
        x_functions=make_catalog([X_SQUARED, ONE, MINUS_ONE, Y]),
        y_functions=make_catalog([("-100", _const(-100.0)), ONE, X, Y]),
        tick_time=0.012,
    ),
    Level(
        number=1,
        start=(15.0, -5.0),
        end=(0.0, 9.0),
        x_functions=make_catalog([X_SQUARED, ("-3", _const(-3.0)), X_HALF, Y]),
        y_functions=make_catalog([("10", _const(10.0)), HALF, COS_X, Y]),
        tick_time=0.01,
    ),
    Level(
        number=2,
        start=(-11.7, -14.8),
        end=(14.5, 12.0),
        x_functions=make_catalog([Y_SQUARED, ("-3", _const(-3.0)), X_HALF, Y]),
        y_functions=make_catalog([("10", _const(10.0)), HALF, COS_X, X_SQUARED]),
        tick_time=0.0001,
    ),
    Level(
        number=3,
        start=(0.0, 0.0),
        end=(3.0, 9.0),
        x_functions=make_catalog([Y_SQUARED, ONE, X_HALF, Y]),
        y_functions=make_catalog([X_SQUARED, Y, ONE, MINUS_ONE]),
        tick_time=0.005,
    ),
    # Spiral
    Level(
        number=4,
        start=(-15.0, -15.0),
        end=(0.0, 0.0),
        x_functions=make_catalog([X, Y, ONE, MINUS_ONE]),
        y_functions=make_catalog([X, Y, ONE, MINUS_ONE]),
        gas_locations=((-14.0, -7.5), (-10.0, 0.0), (0.0, 2.1)),
    ),
    Level(
        number=5,
        start=(-15.0, 15.0),
        end=(-1.0, -18.5),
        x_functions=make_catalog([CBRT_X, ("300", _const(300.0)), X_HALF, Y]),
        y_functions=make_catalog([X_HALF, Y, CBRT_Y, MINUS_ONE]),
        gas_locations=((-14.0, -16.0), (-25.0, 5.0), (-25.0, -5.0)),
    ),
    Level(
        number=6,
        start=(-15.0, 15.0),
        end=(-15.0, -15.0),
        x_functions=make_catalog([CBRT_X, ("300", _const(300.0)), X_HALF, Y]),
        y_functions=make_catalog([X_HALF, Y, CBRT_Y, MINUS_ONE]),
        gas_locations=((26.0, 0.0), (0.0, 18.0)),
    ),
    # Circle
    Level(
        number=7,
        start=(-10.0, 5.0),
        end=(10.0, 4.3),
        x_functions=make_catalog([X_SQUARED, Y, ONE, MINUS_ONE]),
        y_functions=make_catalog([X, Y_HALF, ONE, MINUS_ONE]),
        gas_locations=((0.0, 15.0),),
    ),
    Level(
        number=8,
        start=(-10.0, 0.0),
        end=(10.0, 0.0),
        x_functions=make_catalog([X_SQUARED, Y, ONE, MINUS_ONE]),
        y_functions=make_catalog([X, Y_HALF, ONE, MINUS_ONE]),
        gas_locations=((0.0, 10.0), (0.0, -10.0)),
    ),
    Level(
        number=9,
        start=(2.0, 0.3),
        end=(0.0, -10.0),
        x_functions=make_catalog([X, Y, XY, MINUS_ONE]),
        y_functions=make_catalog([X, Y, ONE, MINUS_ONE]),
        gas_locations=((2.0, 4.0), (17.0, 0.0)),
    ),
)
