import math

# World
VERTICAL_WINDOW_HEIGHT = 40.0  # world units visible vertically
WORLD_LIMIT = 60.0  # runs leaving this box (in world units) are lost

# Arrow grid
NUM_ARROWS_X = 11
NUM_ARROWS_Y = 11
BASE_ARROW_SCALE = 0.0005  # base scaling factor for the arrow glyph
EXPECTED_MAX_ARROW_SCALE = 30.0  # largest arrow of a frame, in units of BASE_ARROW_SCALE
ARROW_TEXTURE_SIZE = 2000.0  # authored glyph length in pixels at scale 1
ARROW_GLYPH_ANGLE = math.pi / 4  # glyph is authored pointing up-right
ARROW_HUE_SPAN = 360.0
ARROW_SATURATION = 100
ARROW_LIGHTNESS = 80
MIN_FIELD_MAGNITUDE = 1e-6  # floor for the observed max magnitude
SOFT_CAP_LIMIT = 4.0 * BASE_ARROW_SCALE * EXPECTED_MAX_ARROW_SCALE

# Gameplay
MAX_COMPONENTS_PER_DIMENSION = 4
SIMULATION_SUBSTEPS = 10
ENDING_LOCATION_ERROR = 1.0
GAS_PICKUP_RADIUS = 1.0
NEW_LEVEL_TEXT_FADE_IN_SPEED = 0.04
