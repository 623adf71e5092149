from fieldsteer.basis import Axis, BasisFunction, Operator, make_catalog
from fieldsteer.gradient import GradientField, Term
from fieldsteer.levels import LEVELS, Level
from fieldsteer.sampler import ArrowGlyph, SampledPoint, arrow_glyphs, sample_field, soft_cap, viewport_extent
from fieldsteer.session import LevelSession, TickResult
