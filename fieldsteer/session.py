import logging
import math
from dataclasses import dataclass

from fieldsteer.basis import Axis, Operator
from fieldsteer.constants import (
    ENDING_LOCATION_ERROR,
    GAS_PICKUP_RADIUS,
    SIMULATION_SUBSTEPS,
    WORLD_LIMIT,
)
from fieldsteer.gradient import GradientField
from fieldsteer.levels import LEVELS

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    gas_collected: int = 0
    level_completed: bool = False
    game_completed: bool = False  # last level done, wrapped to the first
    run_lost: bool = False


class LevelSession:
    """State of one play-through: current level, its field and the player.

    The session is the handle physics, UI and visualizer code receive; the
    field is only ever cleared here, through ``load_level`` or ``clear_terms``.
    """

    def __init__(self, levels=LEVELS, substeps=SIMULATION_SUBSTEPS):
        self.levels = levels
        self.substeps = substeps
        self.field = GradientField()
        self.operator = Operator.ADD
        self.completed_levels = 0
        self.level_index = 0
        self.simulating = False
        self.player = (0.0, 0.0)
        self.gas_collected = []
        self.load_level(0)

    @property
    def level(self):
        return self.levels[self.level_index]

    def catalog(self, axis):
        return self.level.x_functions if axis is Axis.X else self.level.y_functions

    def load_level(self, index):
        self.field.clear_field()
        self.level_index = index
        self.simulating = False
        self.reset_run()
        logger.info("loaded level %d", self.level.number)

    def reset_run(self):
        self.player = self.level.start
        self.gas_collected = [0] * len(self.level.gas_locations)

    # --- UI commands ---

    def toggle_term(self, axis, term_id):
        catalog = self.catalog(axis)
        assert 0 <= term_id < len(catalog), f"no {axis.value} term {term_id} in level {self.level.number}"
        if not 0 <= term_id < len(catalog):
            return

        self.stop_simulation()
        if self.field.is_active(axis, term_id):
            self.field.remove_term(axis, term_id)
        else:
            self.field.add_basis(axis, catalog[term_id], self.operator)

    def clear_terms(self):
        self.stop_simulation()
        self.field.clear_field()
        self.reset_run()

    def set_operator(self, operator):
        self.operator = operator

    def cycle_operator(self):
        self.operator = self.operator.toggled()
        return self.operator

    def toggle_simulation(self):
        if self.simulating:
            self.stop_simulation()
        else:
            self.simulating = True
        return self.simulating

    def stop_simulation(self):
        if self.simulating:
            self.simulating = False
            self.reset_run()

    # --- Physics ---

    def tick(self):
        result = TickResult()
        if not self.simulating:
            return result

        level = self.level
        x, y = self.player
        for _ in range(self.substeps):
            vx, vy = self.field.velocity(x, y)
            x += level.tick_time * vx
            y += level.tick_time * vy

            if not (math.isfinite(x) and math.isfinite(y)) or max(abs(x), abs(y)) > WORLD_LIMIT:
                logger.warning("run left the world on level %d", level.number)
                self.stop_simulation()
                result.run_lost = True
                return result

            self.player = (x, y)
            result.gas_collected += self._collect_gas()

            if self._at_end():
                self._complete_level(result)
                return result
        return result

    def _collect_gas(self):
        x, y = self.player
        picked = 0
        for i, (gx, gy) in enumerate(self.level.gas_locations):
            if not self.gas_collected[i] and math.hypot(gx - x, gy - y) < GAS_PICKUP_RADIUS:
                self.gas_collected[i] = 1
                picked += 1
        return picked

    def _at_end(self):
        ex, ey = self.level.end
        x, y = self.player
        return math.hypot(ex - x, ey - y) < ENDING_LOCATION_ERROR and all(self.gas_collected)

    def _complete_level(self, result):
        result.level_completed = True
        self.completed_levels += 1
        next_index = self.level_index + 1
        if next_index == len(self.levels):
            result.game_completed = True
            next_index = 0
        self.load_level(next_index)
