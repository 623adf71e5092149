"""
Sampling of the gradient field on a regular grid for the arrow overlay.

Every refresh recomputes the whole grid from the current field. The largest
arrow of a frame always gets the same target scale, so gentle and steep fields
stay equally readable; color encodes relative strength as a hue.
"""
import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pygame

from fieldsteer.basis import Axis
from fieldsteer.constants import (
    ARROW_GLYPH_ANGLE,
    ARROW_HUE_SPAN,
    ARROW_LIGHTNESS,
    ARROW_SATURATION,
    BASE_ARROW_SCALE,
    EXPECTED_MAX_ARROW_SCALE,
    MIN_FIELD_MAGNITUDE,
    NUM_ARROWS_X,
    NUM_ARROWS_Y,
    SOFT_CAP_LIMIT,
    VERTICAL_WINDOW_HEIGHT,
)


@dataclass(frozen=True)
class SampledPoint:
    x: float
    y: float
    magnitude: float  # raw field magnitude
    scale: float  # normalized so the frame's largest arrow hits the target
    angle: float  # radians, glyph orientation already subtracted
    color: pygame.Color


@dataclass(frozen=True)
class ArrowGlyph:
    position: Tuple[float, float]
    rotation: float
    size: float
    color: pygame.Color


def target_scale():
    return EXPECTED_MAX_ARROW_SCALE * BASE_ARROW_SCALE


def viewport_extent(pixel_width, pixel_height, world_height=VERTICAL_WINDOW_HEIGHT):
    """World-unit (width, height) of a window; the height is fixed."""
    pixels_per_unit = pixel_height / world_height
    return pixel_width / pixels_per_unit, world_height


def grid_positions(extent, count):
    # first and last samples sit on the visible edges
    return [i * extent / (count - 1) - extent / 2 for i in range(count)]


def magnitude_color(scale):
    fraction = scale / target_scale()
    hue = min(max(fraction, 0.0), 1.0) * ARROW_HUE_SPAN
    color = pygame.Color(0)
    color.hsla = (hue, ARROW_SATURATION, ARROW_LIGHTNESS, 100)
    return color


def sample_field(field, width, height, num_x=NUM_ARROWS_X, num_y=NUM_ARROWS_Y) -> List[SampledPoint]:
    xs = grid_positions(width, num_x)
    ys = grid_positions(height, num_y)
    positions = [(x, y) for x in xs for y in ys]

    magnitudes = np.array([field.magnitude(x, y) for x, y in positions], dtype=float)
    finite = np.isfinite(magnitudes)
    max_magnitude = MIN_FIELD_MAGNITUDE
    if finite.any():
        max_magnitude = max(MIN_FIELD_MAGNITUDE, float(magnitudes[finite].max()))
    ratio = target_scale() / max_magnitude

    points = []
    for (x, y), magnitude, is_finite in zip(positions, magnitudes, finite):
        # diverging samples are drawn at full size
        scale = float(magnitude) * ratio if is_finite else target_scale()
        angle = math.atan2(field.evaluate(Axis.Y, x, y), field.evaluate(Axis.X, x, y)) - ARROW_GLYPH_ANGLE
        if not math.isfinite(angle):
            angle = 0.0
        points.append(SampledPoint(x, y, float(magnitude), scale, angle, magnitude_color(scale)))
    return points


def soft_cap(scale, limit=SOFT_CAP_LIMIT):
    """Compress large scales smoothly towards ``limit``; near-linear for small ones."""
    return limit * (2 / math.pi) * math.atan(math.pi * scale / (2 * limit))


def arrow_glyphs(points, use_soft_cap=True) -> List[ArrowGlyph]:
    glyphs = []
    for point in points:
        size = soft_cap(point.scale) if use_soft_cap else point.scale
        glyphs.append(ArrowGlyph((point.x, point.y), point.angle, size, point.color))
    return glyphs
