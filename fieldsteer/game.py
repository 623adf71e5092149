import math
import os

import gymnasium as gym
import numpy as np
import pygame
import pygame.gfxdraw
from gymnasium.spaces import MultiDiscrete

from fieldsteer.basis import Axis
from fieldsteer.constants import (
    ARROW_GLYPH_ANGLE,
    ARROW_TEXTURE_SIZE,
    MAX_COMPONENTS_PER_DIMENSION,
    NEW_LEVEL_TEXT_FADE_IN_SPEED,
    VERTICAL_WINDOW_HEIGHT,
)
from fieldsteer.levels import LEVELS
from fieldsteer.sampler import arrow_glyphs, sample_field, viewport_extent
from fieldsteer.session import LevelSession

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"]}

    user_guide = (
        "Controls: 1-4 toggle x terms, Q/W/E/R toggle y terms, C clears both. "
        "Space starts/stops the run. Shift switches between Add and Multiply."
    )

    game_description = (
        "Build a velocity field from a handful of formulas and let it carry your particle "
        "from the start to the goal, picking up every gas can on the way."
    )

    auto_advance = True

    def __init__(self, render_mode="rgb_array", levels=LEVELS):
        super().__init__()

        self.SCREEN_WIDTH, self.SCREEN_HEIGHT = 640, 400
        self.PIXELS_PER_UNIT = self.SCREEN_HEIGHT / VERTICAL_WINDOW_HEIGHT

        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        # 0 no-op, 1-4 toggle x terms, 5-8 toggle y terms, 9 clear both axes
        self.CLEAR_ACTION = 1 + 2 * MAX_COMPONENTS_PER_DIMENSION
        self.action_space = MultiDiscrete([self.CLEAR_ACTION + 1, 2, 2])

        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()
        self.font_main = pygame.font.Font(None, 26)
        self.font_small = pygame.font.Font(None, 20)
        self.font_banner = pygame.font.Font(None, 64)

        # Colors
        self.COLOR_BG = (48, 48, 48)
        self.COLOR_AXES = (70, 70, 70)
        self.COLOR_PLAYER = (230, 230, 230)
        self.COLOR_END = (100, 230, 120)
        self.COLOR_START = (120, 120, 140)
        self.COLOR_GAS = (240, 170, 60)
        self.COLOR_TEXT = (230, 230, 230)
        self.COLOR_BUTTON = (38, 38, 38)
        self.COLOR_BUTTON_ACTIVE = (90, 140, 220)
        self.COLOR_SIM_ON = (60, 160, 80)
        self.COLOR_SIM_OFF = (160, 60, 60)
        self.COLOR_BANNER = (240, 240, 120)

        # Game constants
        self.MAX_STEPS = 10000
        self.BUTTON_WIDTH, self.BUTTON_HEIGHT = 70, 24
        self.BUTTON_SPACING = 6
        self.REWARD_LEVEL = 100
        self.REWARD_GAS = 5
        self.PENALTY_LOST = -1
        self.PENALTY_STEP = -0.01

        self.levels = levels
        self.session = None
        self.steps = 0
        self.score = 0
        self.game_over = False
        self.prev_term_action = 0
        self.prev_space_held = False
        self.prev_shift_held = False
        self.banner_alpha = 0.0
        self.banner_fade_in = False
        self.banner_fade_out = False
        self.banner_level = 0

        self.reset()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.session = LevelSession(self.levels)
        self.steps = 0
        self.score = 0
        self.game_over = False
        self.prev_term_action = 0
        self.prev_space_held = False
        self.prev_shift_held = False
        self._start_banner(self.session.level.number)

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0, True, False, self._get_info()

        self.steps += 1
        reward = self.PENALTY_STEP

        self._handle_input(action)

        result = self.session.tick()
        reward += self.REWARD_GAS * result.gas_collected
        if result.run_lost:
            reward += self.PENALTY_LOST
        if result.level_completed:
            reward += self.REWARD_LEVEL
            self.score += self.REWARD_LEVEL
            self._start_banner(self.session.level.number)
            # sfx: level_complete.wav
        self.score += self.REWARD_GAS * result.gas_collected

        self._update_banner()

        terminated = False
        if result.game_completed or self.steps >= self.MAX_STEPS:
            terminated = True
            self.game_over = True

        return self._get_observation(), reward, terminated, False, self._get_info()

    def _handle_input(self, action):
        term_action, space_held, shift_held = int(action[0]), action[1] == 1, action[2] == 1

        if term_action != 0 and term_action != self.prev_term_action:
            if term_action == self.CLEAR_ACTION:
                self.session.clear_terms()
            else:
                self._toggle_term(term_action)
        self.prev_term_action = term_action

        if shift_held and not self.prev_shift_held:
            self.session.cycle_operator()
        self.prev_shift_held = shift_held

        if space_held and not self.prev_space_held:
            self.session.toggle_simulation()
        self.prev_space_held = space_held

    def _toggle_term(self, term_action):
        if term_action <= MAX_COMPONENTS_PER_DIMENSION:
            axis, term_id = Axis.X, term_action - 1
        else:
            axis, term_id = Axis.Y, term_action - 1 - MAX_COMPONENTS_PER_DIMENSION
        # levels may offer fewer terms than there are buttons
        if term_id < len(self.session.catalog(axis)):
            self.session.toggle_term(axis, term_id)

    def _start_banner(self, level_number):
        self.banner_level = level_number
        self.banner_alpha = 0.0
        self.banner_fade_in = True
        self.banner_fade_out = False

    def _update_banner(self):
        if self.banner_fade_in:
            self.banner_alpha = min(1.0, self.banner_alpha + NEW_LEVEL_TEXT_FADE_IN_SPEED)
            if self.banner_alpha >= 1.0:
                self.banner_fade_in = False
                self.banner_fade_out = True
        elif self.banner_fade_out:
            self.banner_alpha = max(0.0, self.banner_alpha - NEW_LEVEL_TEXT_FADE_IN_SPEED)
            if self.banner_alpha <= 0.0:
                self.banner_fade_out = False

    def _to_screen(self, x, y):
        return (
            int(self.SCREEN_WIDTH / 2 + x * self.PIXELS_PER_UNIT),
            int(self.SCREEN_HEIGHT / 2 - y * self.PIXELS_PER_UNIT),
        )

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        self._render_game()
        self._render_ui()
        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _render_game(self):
        # Axes
        cx, cy = self._to_screen(0, 0)
        pygame.draw.line(self.screen, self.COLOR_AXES, (0, cy), (self.SCREEN_WIDTH, cy))
        pygame.draw.line(self.screen, self.COLOR_AXES, (cx, 0), (cx, self.SCREEN_HEIGHT))

        self._render_arrows()

        level = self.session.level
        pygame.draw.circle(self.screen, self.COLOR_START, self._to_screen(*level.start), 6, 1)
        ex, ey = self._to_screen(*level.end)
        radius = max(3, int(self.PIXELS_PER_UNIT))
        pygame.gfxdraw.aacircle(self.screen, ex, ey, radius, self.COLOR_END)
        pygame.gfxdraw.filled_circle(self.screen, ex, ey, radius, self.COLOR_END)

        for i, location in enumerate(level.gas_locations):
            if self.session.gas_collected[i]:
                continue
            gx, gy = self._to_screen(*location)
            pygame.draw.rect(self.screen, self.COLOR_GAS, (gx - 5, gy - 7, 10, 14), border_radius=2)

        px, py = self._to_screen(*self.session.player)
        pygame.gfxdraw.filled_circle(self.screen, px, py, 5, self.COLOR_PLAYER)

    def _render_arrows(self):
        width, height = viewport_extent(self.SCREEN_WIDTH, self.SCREEN_HEIGHT)
        points = sample_field(self.session.field, width, height)
        for glyph in arrow_glyphs(points):
            sx, sy = self._to_screen(*glyph.position)
            length = glyph.size * ARROW_TEXTURE_SIZE
            if length < 1:
                self.screen.set_at((sx, sy), glyph.color)
                continue
            direction = glyph.rotation + ARROW_GLYPH_ANGLE
            dx, dy = math.cos(direction), -math.sin(direction)
            tail = (sx - dx * length / 2, sy - dy * length / 2)
            tip = (sx + dx * length / 2, sy + dy * length / 2)
            pygame.draw.line(self.screen, glyph.color, tail, tip, 2)
            head = length / 3
            left = (tip[0] - head * (dx - dy * 0.5), tip[1] - head * (dy + dx * 0.5))
            right = (tip[0] - head * (dx + dy * 0.5), tip[1] - head * (dy - dx * 0.5))
            pygame.draw.polygon(self.screen, glyph.color, [tip, left, right])

    def _render_ui(self):
        field = self.session.field
        x_text = self.font_main.render(f"x = {field.render_text(Axis.X)}", True, self.COLOR_TEXT)
        y_text = self.font_main.render(f"y = {field.render_text(Axis.Y)}", True, self.COLOR_TEXT)
        self.screen.blit(x_text, (10, 8))
        self.screen.blit(y_text, (10, 30))

        level_text = self.font_main.render(f"Level: {self.session.level.number + 1}", True, self.COLOR_TEXT)
        self.screen.blit(level_text, (self.SCREEN_WIDTH - level_text.get_width() - 10, 8))

        gas_total = len(self.session.level.gas_locations)
        if gas_total:
            gas_text = self.font_small.render(
                f"Gas Collected: {sum(self.session.gas_collected)}/{gas_total}", True, self.COLOR_GAS
            )
            self.screen.blit(gas_text, (self.SCREEN_WIDTH - gas_text.get_width() - 10, 32))

        sim_color = self.COLOR_SIM_ON if self.session.simulating else self.COLOR_SIM_OFF
        sim_rect = pygame.Rect(10, 54, self.BUTTON_WIDTH, self.BUTTON_HEIGHT)
        pygame.draw.rect(self.screen, sim_color, sim_rect, border_radius=4)
        label = "Stop" if self.session.simulating else "Simulate"
        self._blit_centered(self.font_small.render(label, True, self.COLOR_TEXT), sim_rect)

        op_rect = pygame.Rect(20 + self.BUTTON_WIDTH, 54, self.BUTTON_WIDTH, self.BUTTON_HEIGHT)
        pygame.draw.rect(self.screen, self.COLOR_BUTTON, op_rect, border_radius=4)
        self._blit_centered(self.font_small.render(self.session.operator.value, True, self.COLOR_TEXT), op_rect)

        self._render_term_buttons(Axis.X, self.SCREEN_HEIGHT - 2 * (self.BUTTON_HEIGHT + self.BUTTON_SPACING))
        self._render_term_buttons(Axis.Y, self.SCREEN_HEIGHT - (self.BUTTON_HEIGHT + self.BUTTON_SPACING))

        if self.banner_alpha > 0:
            banner = self.font_banner.render(f"Level {self.banner_level + 1}", True, self.COLOR_BANNER)
            banner.set_alpha(int(255 * self.banner_alpha))
            self.screen.blit(banner, banner.get_rect(center=(self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 3)))

    def _render_term_buttons(self, axis, top):
        axis_label = self.font_small.render(f"{axis.value}:", True, self.COLOR_TEXT)
        self.screen.blit(axis_label, (10, top + 5))
        for basis in self.session.catalog(axis):
            left = 30 + basis.id * (self.BUTTON_WIDTH + self.BUTTON_SPACING)
            rect = pygame.Rect(left, top, self.BUTTON_WIDTH, self.BUTTON_HEIGHT)
            active = self.session.field.is_active(axis, basis.id)
            color = self.COLOR_BUTTON_ACTIVE if active else self.COLOR_BUTTON
            pygame.draw.rect(self.screen, color, rect, border_radius=4)
            self._blit_centered(self.font_small.render(basis.label, True, self.COLOR_TEXT), rect)

    def _blit_centered(self, surface, rect):
        self.screen.blit(surface, surface.get_rect(center=rect.center))

    def _get_info(self):
        field = self.session.field
        return {
            "score": self.score,
            "steps": self.steps,
            "level": self.session.level.number,
            "completed_levels": self.session.completed_levels,
            "simulating": self.session.simulating,
            "operator": self.session.operator.value,
            "x_text": field.render_text(Axis.X),
            "y_text": field.render_text(Axis.Y),
            "gas_collected": sum(self.session.gas_collected),
        }

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [10, 2, 2]

        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        # Toggling the same button twice removes the term again
        self.reset()
        self.step([1, 0, 0])
        assert self.session.field.is_active(Axis.X, 0)
        self.step([0, 0, 0])
        self.step([1, 0, 0])
        assert not self.session.field.is_active(Axis.X, 0)

        self.reset()
        print("✓ Implementation validated successfully")


if __name__ == '__main__':
    env = GameEnv()
    env.validate_implementation()
    obs, info = env.reset()

    running = True
    action = env.action_space.sample()
    action.fill(0)

    term_keys = {
        pygame.K_1: 1, pygame.K_2: 2, pygame.K_3: 3, pygame.K_4: 4,
        pygame.K_q: 5, pygame.K_w: 6, pygame.K_e: 7, pygame.K_r: 8,
        pygame.K_c: 9,
    }

    render_screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))
    pygame.display.set_caption(env.game_description)

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        keys = pygame.key.get_pressed()

        action.fill(0)
        for key, value in term_keys.items():
            if keys[key]:
                action[0] = value
        if keys[pygame.K_SPACE]:
            action[1] = 1
        if keys[pygame.K_LSHIFT] or keys[pygame.K_RSHIFT]:
            action[2] = 1

        obs, reward, terminated, truncated, info = env.step(action)

        frame = np.transpose(obs, (1, 0, 2))
        surf = pygame.surfarray.make_surface(frame)
        render_screen.blit(surf, (0, 0))
        pygame.display.flip()

        if terminated or truncated:
            print(f"Game Over! Final Score: {info['score']}")
            pygame.time.wait(2000)
            obs, info = env.reset()

        env.clock.tick(30)

    env.close()
