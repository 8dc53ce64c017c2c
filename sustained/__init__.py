# sustained/__init__.py

"""
Core module containing the speed/coefficient transforms, curve generation,
dataset loading and frame interpolation for the Sustained Speed Chart.
"""

from .constants import (
    DEBUG_LOG,
    DEFAULT_RHO,
    DEFAULT_S,
    DEFAULT_M,
    SPEED_RANGE,
    COEFF_RANGE,
    EXTENDED_RANGE,
    ANIMATION_DURATION_MS,
    FRAME_INTERVAL_MS,
    COLORS,
    VISIBILITY,
)

from .calculations import (
    # Physical constants
    g, MPS_TO_MPH, MPH_TO_MPS,
    # Point types
    SpeedPoint,
    CoefficientPoint,
    # Transforms
    compute_k,
    coefficients_to_speeds,
    speeds_to_coefficients,
    # Units / coefficient modes
    mps_to_mph,
    mph_to_mps,
    k_scale,
)

from .easing import ease_in_out_expo, ease_zoom

from .axis_mapping import AXIS_PRESETS, AxisMapping

from .grid import (
    Curve,
    OuterSpeedLine,
    InnerSpeedLine,
    OuterCoefficientLine,
    ExtendedCoefficientLine,
    GlideRay,
    GridSet,
    generate_grid,
)

from .datasets import (
    Dataset,
    DatasetManager,
    DatasetParseError,
    parse_stallpoint_data,
    convert_to_speed_data,
    dprint,
)

from .state import ParameterState, ColorState, VisibilityState, validate_parameter

from .animation import AnimationState, start_transition, advance, reset_animation

from .render import Viewport, ZoomTransform, Frame, render_frame

from .chart import SustainedSpeedChart
