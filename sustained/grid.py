# sustained/grid.py

"""
Reference curve generation.

Every curve is built in both coordinate systems at once: one space is
sampled on a regular step and each sample is pushed through the transform,
so speed_points[i] is always the physical co-image of coefficient_points[i].
That pairing is what lets the renderer morph one chart into the other.

Curve categories are a closed set of dataclasses:

    OuterSpeedLine            constant VXS / VYS every 30 across ±150
    InnerSpeedLine            constant VXS / VYS close to the origin
    OuterCoefficientLine      constant CL / CD across ±1 (plus ±0.95..±10 extensions)
    ExtendedCoefficientLine   constant CL / CD at 1..10 (quadrant segments + bridges)
    GlideRay                  1:1, 2:1, 3:1 rays, one per sign quadrant
"""

import math
from dataclasses import dataclass
from typing import Tuple

from .calculations import (
    CoefficientPoint,
    SpeedPoint,
    coefficients_to_speeds,
    from_display_speed,
    speeds_to_coefficients,
    to_display_speed,
)
from .constants import (
    COEFF_GRID_STEP,
    COEFF_RANGE,
    COEFF_SAMPLE_STEP,
    EXTENDED_LABEL_CHECKPOINTS,
    EXTENDED_RANGE,
    EXTENDED_SAMPLE_STEP,
    GLIDE_RATIOS,
    INNER_SPEED_LINES,
    OUTER_EXTENSION_START,
    SPEED_GRID_STEP,
    SPEED_RANGE,
    SPEED_SAMPLE_STEP,
)
from .datasets import dprint


# =============================================================================
# CURVE VARIANTS
# =============================================================================

@dataclass(frozen=True)
class Curve:
    value: float                  # the constant value (or glide ratio)
    color: str
    speed_points: Tuple[SpeedPoint, ...]
    coefficient_points: Tuple[CoefficientPoint, ...]
    labeled: bool

    def __len__(self):
        return len(self.speed_points)


@dataclass(frozen=True)
class OuterSpeedLine(Curve):
    constant: str                 # "vxs" or "vys"


@dataclass(frozen=True)
class InnerSpeedLine(Curve):
    constant: str


@dataclass(frozen=True)
class OuterCoefficientLine(Curve):
    constant: str                 # "cl" or "cd"
    segment: str                  # "main" or "extension"


@dataclass(frozen=True)
class ExtendedCoefficientLine(Curve):
    constant: str
    segment: str                  # "quadrant" or "bridge"


@dataclass(frozen=True)
class GlideRay(Curve):
    quadrant: Tuple[int, int]     # (sign of vxs, sign of vys)


SPEED_LINE_TYPES = (OuterSpeedLine, InnerSpeedLine)
COEFFICIENT_LINE_TYPES = (OuterCoefficientLine, ExtendedCoefficientLine)


@dataclass(frozen=True)
class GridSet:
    """All curves for one (rho, S, m, coefficient mode, speed unit) combination."""
    rho: float
    s: float
    m: float
    coeff_type: str
    speed_unit: str
    curves: Tuple[Curve, ...]

    def of_type(self, curve_type):
        return [c for c in self.curves if isinstance(c, curve_type)]


# =============================================================================
# SAMPLING HELPERS
# =============================================================================

def sample_range(start, stop, step):
    """
    Samples start, start + step, ... never passing stop; stop itself is
    included when it lies on the step grid. Computed from an integer count
    so float steps do not drift.
    """
    count = int(math.floor((stop - start) / step + 1e-9))
    return [round(start + i * step, 10) for i in range(count + 1)]


def _speed_pairs(points, params, speed_unit):
    """Pair display-unit speed samples with their coefficients."""
    rho, s, m = params
    speed_points = []
    coefficient_points = []
    for vxs, vys in points:
        cl, cd = speeds_to_coefficients(
            from_display_speed(vxs, speed_unit), from_display_speed(vys, speed_unit), s, m, rho
        )
        speed_points.append(SpeedPoint(vxs, vys))
        coefficient_points.append(CoefficientPoint(cl, cd))
    return tuple(speed_points), tuple(coefficient_points)


def _coefficient_pairs(points, params, speed_unit):
    """Pair coefficient samples with their display-unit speeds."""
    rho, s, m = params
    speed_points = []
    coefficient_points = []
    for cl, cd in points:
        vxs, vys = coefficients_to_speeds(cl, cd, s, m, rho)
        coefficient_points.append(CoefficientPoint(cl, cd))
        speed_points.append(SpeedPoint(to_display_speed(vxs, speed_unit), to_display_speed(vys, speed_unit)))
    return tuple(speed_points), tuple(coefficient_points)


def _constant_coefficient_points(constant, value, companions):
    if constant == "cl":
        return [(value, c) for c in companions]
    return [(c, value) for c in companions]


# =============================================================================
# GENERATORS PER CATEGORY
# =============================================================================

def generate_speed_lines(params, colors, speed_unit="mph"):
    """Outer speed grid: constant VYS and constant VXS every 30 across ±150."""
    curves = []
    samples = sample_range(-SPEED_RANGE, SPEED_RANGE, SPEED_SAMPLE_STEP)

    for vys in sample_range(-SPEED_RANGE, SPEED_RANGE, SPEED_GRID_STEP):
        sp, cp = _speed_pairs([(vxs, vys) for vxs in samples], params, speed_unit)
        curves.append(OuterSpeedLine(vys, colors["vertical"], sp, cp, True, "vys"))

    for vxs in sample_range(-SPEED_RANGE, SPEED_RANGE, SPEED_GRID_STEP):
        sp, cp = _speed_pairs([(vxs, vys) for vys in samples], params, speed_unit)
        curves.append(OuterSpeedLine(vxs, colors["horizontal"], sp, cp, True, "vxs"))

    return curves


def generate_inner_speed_lines(params, colors, speed_unit="mph"):
    """Inner speed grid: the sparser lines close to the origin."""
    curves = []
    samples = sample_range(-SPEED_RANGE, SPEED_RANGE, SPEED_SAMPLE_STEP)

    for value in INNER_SPEED_LINES:
        sp, cp = _speed_pairs([(vxs, value) for vxs in samples], params, speed_unit)
        curves.append(InnerSpeedLine(value, colors["inner_speed"], sp, cp, True, "vys"))
        sp, cp = _speed_pairs([(value, vys) for vys in samples], params, speed_unit)
        curves.append(InnerSpeedLine(value, colors["inner_speed"], sp, cp, True, "vxs"))

    return curves


def generate_coefficient_lines(params, colors, speed_unit="mph"):
    """
    Outer coefficient grid: constant CL and constant CD every 0.2 across ±1,
    each continued out to ±10 along the other coefficient when non-zero.
    Only the main segment carries a label, and not at ±1 where the
    extended grid labels the same line.
    """
    curves = []
    main = sample_range(-COEFF_RANGE, COEFF_RANGE, COEFF_SAMPLE_STEP)
    positive_ext = sample_range(OUTER_EXTENSION_START, EXTENDED_RANGE, EXTENDED_SAMPLE_STEP)
    negative_ext = [-c for c in reversed(positive_ext)]

    for constant, color_key in (("cl", "lift"), ("cd", "drag")):
        color = colors[color_key]
        for value in sample_range(-COEFF_RANGE, COEFF_RANGE, COEFF_GRID_STEP):
            pts = _constant_coefficient_points(constant, value, main)
            sp, cp = _coefficient_pairs(pts, params, speed_unit)
            # ±1 is labeled on the extended grid instead
            labeled = abs(value) < COEFF_RANGE
            curves.append(OuterCoefficientLine(value, color, sp, cp, labeled, constant, "main"))

            if value == 0:
                continue
            for companions in (positive_ext, negative_ext):
                pts = _constant_coefficient_points(constant, value, companions)
                sp, cp = _coefficient_pairs(pts, params, speed_unit)
                curves.append(OuterCoefficientLine(value, color, sp, cp, False, constant, "extension"))

    return curves


def generate_extended_lines(params, colors, speed_unit="mph"):
    """
    Extended coefficient grid (canopy flight): |CL|, |CD| = 1..10.

    Each value gets four quadrant segments with the other coefficient in
    ±1..±10, plus bridge segments through -1..1 so the line reads as one.
    Labels only at the checkpoint magnitudes, and only on the segment whose
    companion coefficient is positive beyond 1.
    """
    curves = []
    positive = sample_range(1, EXTENDED_RANGE, EXTENDED_SAMPLE_STEP)
    negative = sample_range(-EXTENDED_RANGE, -1, EXTENDED_SAMPLE_STEP)
    bridge = sample_range(-COEFF_RANGE, COEFF_RANGE, COEFF_SAMPLE_STEP)

    for constant, color_key in (("cl", "lift"), ("cd", "drag")):
        color = colors[color_key]
        for magnitude in range(1, EXTENDED_RANGE + 1):
            checkpoint = magnitude in EXTENDED_LABEL_CHECKPOINTS
            for value in (magnitude, -magnitude):
                for companions, labeled in ((positive, checkpoint), (negative, False)):
                    pts = _constant_coefficient_points(constant, value, companions)
                    sp, cp = _coefficient_pairs(pts, params, speed_unit)
                    curves.append(
                        ExtendedCoefficientLine(float(value), color, sp, cp, labeled, constant, "quadrant")
                    )

        for magnitude in range(1, EXTENDED_RANGE + 1):
            for value in (magnitude, -magnitude):
                pts = _constant_coefficient_points(constant, value, bridge)
                sp, cp = _coefficient_pairs(pts, params, speed_unit)
                curves.append(
                    ExtendedCoefficientLine(float(value), color, sp, cp, False, constant, "bridge")
                )

    return curves


def generate_glide_rays(params, colors, speed_unit="mph"):
    """
    Glide-ratio rays from the origin, one per sign quadrant so each ray only
    runs one way. The first sample of every ray is the origin itself.
    """
    curves = []
    steps = sample_range(0, SPEED_RANGE, SPEED_SAMPLE_STEP)

    for index, ratio in enumerate(GLIDE_RATIOS, start=1):
        color = colors[f"glide{index}"]
        for quadrant in ((1, 1), (-1, 1), (-1, -1), (1, -1)):
            sx, sy = quadrant
            pts = [(sx * v, sy * v / ratio) for v in steps]
            sp, cp = _speed_pairs(pts, params, speed_unit)
            curves.append(GlideRay(float(ratio), color, sp, cp, True, quadrant))

    return curves


def generate_grid(params, colors, coeff_type="c", speed_unit="mph"):
    """
    Full rebuild of every reference curve.

    Args:
        params: (rho, s, m) tuple or ParameterState
        colors: mapping with the COLORS keys
        coeff_type: "c" or "k"
        speed_unit: "mph" or "mps"

    Returns:
        GridSet
    """
    if hasattr(params, "as_tuple"):
        params = params.as_tuple()
    rho, s, m = params

    curves = []
    curves += generate_speed_lines(params, colors, speed_unit)
    curves += generate_inner_speed_lines(params, colors, speed_unit)
    curves += generate_coefficient_lines(params, colors, speed_unit)
    curves += generate_extended_lines(params, colors, speed_unit)
    curves += generate_glide_rays(params, colors, speed_unit)

    dprint(f"[GRID] Generated {len(curves)} curves for rho={rho}, S={s}, m={m}, mode={coeff_type}")
    return GridSet(rho, s, m, coeff_type, speed_unit, tuple(curves))
