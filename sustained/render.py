# sustained/render.py

"""
Per-frame interpolation between the speed chart and the coefficient chart.

For every curve and dataset point the screen position is computed twice,
once in speed space and once in coefficient space, and the two pixel
positions are blended by the animation progress. Points that land far
outside the viewport break the polyline instead of being clipped.

Nothing here draws: render_frame() returns a Frame that figure.py turns
into a plotly figure.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .calculations import (
    CoefficientPoint,
    SpeedPoint,
    coefficient_axis_range,
    k_scale,
)
from .constants import (
    COEFF_RANGE,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_ZOOM_BOUNDS,
    LABEL_OFFSET_PX,
    SPEED_RANGE,
    TANGENT_STEP,
    VIEWPORT_MARGIN,
    ZOOM_MAX_SCALE,
    ZOOM_PADDING,
)
from .easing import ease_zoom
from .grid import (
    ExtendedCoefficientLine,
    GlideRay,
    InnerSpeedLine,
    OuterCoefficientLine,
    OuterSpeedLine,
)


# =============================================================================
# FRAME TYPES
# =============================================================================

@dataclass(frozen=True)
class Viewport:
    width: float = DEFAULT_CANVAS_WIDTH
    height: float = DEFAULT_CANVAS_HEIGHT

    @property
    def cx(self):
        return self.width / 2

    @property
    def cy(self):
        return self.height / 2

    def contains(self, x, y, margin):
        """Vectorised in-bounds test with a margin around the canvas."""
        return (x > -margin) & (x < self.width + margin) & (y > -margin) & (y < self.height + margin)


@dataclass
class RenderedCurve:
    xs: list          # None entries break the line
    ys: list
    color: str
    kind: str


@dataclass
class RenderedLabel:
    x: float
    y: float
    text: str
    color: str
    kind: str


@dataclass
class RenderedDataset:
    id: str
    name: str
    color: str
    line_xs: list
    line_ys: list
    marker_xs: list
    marker_ys: list


@dataclass
class Frame:
    width: float
    height: float
    progress: float
    view: str
    origin: tuple
    background: str
    legend_color: str
    legend: List[str] = field(default_factory=list)
    curves: List[RenderedCurve] = field(default_factory=list)
    labels: List[RenderedLabel] = field(default_factory=list)
    datasets: List[RenderedDataset] = field(default_factory=list)
    zoom: Optional["ZoomTransform"] = None


# =============================================================================
# INTERPOLATION POLICIES
# =============================================================================

def interpolate_linear(x1, y1, x2, y2, cx, cy, progress):
    """Straight-line blend of the two pixel positions."""
    return x1 + (x2 - x1) * progress, y1 + (y2 - y1) * progress


def interpolate_polar(x1, y1, x2, y2, cx, cy, progress):
    """
    Blend radius and angle around the chart centre.
    Points swapping quadrants swing around the origin instead of cutting
    through it; the angle takes the short way round.
    """
    r1 = np.hypot(x1 - cx, y1 - cy)
    r2 = np.hypot(x2 - cx, y2 - cy)
    a1 = np.arctan2(y1 - cy, x1 - cx)
    a2 = np.arctan2(y2 - cy, x2 - cx)
    delta = (a2 - a1 + np.pi) % (2 * np.pi) - np.pi
    r = r1 + (r2 - r1) * progress
    a = a1 + delta * progress
    return cx + r * np.cos(a), cy + r * np.sin(a)


INTERPOLATION_POLICIES = {
    "linear": interpolate_linear,
    "polar": interpolate_polar,
}


def get_interpolator(name):
    try:
        return INTERPOLATION_POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown interpolation policy: {name}") from None


# =============================================================================
# PROJECTION
# =============================================================================

class Projector:
    """
    Projects paired speed/coefficient samples to both screen layouts.

    Holds everything a frame needs that does not change per curve: the axis
    mapping, viewport, coefficient mode scaling and the interpolation policy.
    """

    def __init__(self, mapping, viewport, params, coeff_type="c", interpolation="linear"):
        self.mapping = mapping
        self.viewport = viewport
        self.coeff_type = coeff_type
        self.interpolate = get_interpolator(interpolation)
        rho, s, m = params
        self.coeff_scale = k_scale(rho, s, m) if coeff_type == "k" else 1.0
        self.coeff_range = coefficient_axis_range(coeff_type, rho, s, m, COEFF_RANGE)

    def speed_xy(self, speed_points):
        vp = self.viewport
        arr = np.asarray(speed_points, dtype=float).reshape(-1, 2)
        sp = SpeedPoint(arr[:, 0], arr[:, 1])
        x = self.mapping.calc_speed_x(sp, vp.cx, vp.width / 2, SPEED_RANGE)
        y = self.mapping.calc_speed_y(sp, vp.cy, vp.height / 2, SPEED_RANGE)
        return x, y

    def coeff_xy(self, coefficient_points):
        vp = self.viewport
        arr = np.asarray(coefficient_points, dtype=float).reshape(-1, 2) * self.coeff_scale
        cp = CoefficientPoint(arr[:, 0], arr[:, 1])
        x = self.mapping.calc_coeff_x(cp, vp.cx, vp.width / 2, self.coeff_range)
        y = self.mapping.calc_coeff_y(cp, vp.cy, vp.height / 2, self.coeff_range)
        return x, y

    def blend(self, speed_points, coefficient_points, progress):
        x1, y1 = self.speed_xy(speed_points)
        x2, y2 = self.coeff_xy(coefficient_points)
        return self.interpolate(x1, y1, x2, y2, self.viewport.cx, self.viewport.cy, progress)


# =============================================================================
# CURVE POLICIES
# =============================================================================

def curve_kind(curve):
    """Stable category name for a curve variant."""
    if isinstance(curve, OuterSpeedLine):
        return "outer-speed-grid"
    if isinstance(curve, InnerSpeedLine):
        return "inner-speed-grid"
    if isinstance(curve, OuterCoefficientLine):
        return "outer-coefficient-grid"
    if isinstance(curve, ExtendedCoefficientLine):
        return "extended-coefficient-grid"
    if isinstance(curve, GlideRay):
        return "glide-ray"
    raise TypeError(f"Unknown curve type: {type(curve).__name__}")


def is_curve_visible(curve, visibility):
    if isinstance(curve, OuterSpeedLine):
        return visibility["show_vertical"] if curve.constant == "vys" else visibility["show_horizontal"]
    if isinstance(curve, InnerSpeedLine):
        return visibility["show_inner_speed_grid"]
    if isinstance(curve, (OuterCoefficientLine, ExtendedCoefficientLine)):
        return visibility["show_lift"] if curve.constant == "cl" else visibility["show_drag"]
    if isinstance(curve, GlideRay):
        return visibility["show_glide"]
    raise TypeError(f"Unknown curve type: {type(curve).__name__}")


def is_label_visible(curve, visibility):
    if not curve.labeled:
        return False
    if isinstance(curve, (OuterSpeedLine, InnerSpeedLine)):
        return visibility["show_speed_labels"]
    if isinstance(curve, OuterCoefficientLine):
        return visibility["show_outer_coeff_labels"]
    if isinstance(curve, ExtendedCoefficientLine):
        return visibility["show_inner_coeff_labels"]
    if isinstance(curve, GlideRay):
        return visibility["show_glide_labels"]
    raise TypeError(f"Unknown curve type: {type(curve).__name__}")


def label_anchor_index(curve, progress):
    """
    Sample index the label hangs off.

    Speed lines sit a third of the way along; glide rays move from far out
    (speed view) to a third along (coefficient view) so labels do not pile
    up during the morph; extended coefficient lines use the sample where the
    other coefficient is closest to zero; outer coefficient lines use 0.85.
    """
    n = len(curve)
    if n == 0:
        return 0
    if isinstance(curve, (OuterSpeedLine, InnerSpeedLine)):
        fraction = 0.33
    elif isinstance(curve, GlideRay):
        fraction = 0.33 if progress > 0.5 else 0.85
    elif isinstance(curve, ExtendedCoefficientLine):
        companion = "cd" if curve.constant == "cl" else "cl"
        distances = [abs(getattr(cp, companion)) for cp in curve.coefficient_points]
        return int(np.argmin(distances))
    elif isinstance(curve, OuterCoefficientLine):
        fraction = 0.85
    else:
        raise TypeError(f"Unknown curve type: {type(curve).__name__}")
    return min(n - 1, int(math.floor(n * fraction)))


def label_offset_distance(curve):
    """Speed lines push labels to one side of the tangent, everything else the other."""
    if isinstance(curve, (OuterSpeedLine, InnerSpeedLine)):
        return LABEL_OFFSET_PX
    return -LABEL_OFFSET_PX


def label_text(curve, mapping, coeff_type="c", scale=None):
    if isinstance(curve, (OuterSpeedLine, InnerSpeedLine)):
        return mapping.grid_line_label("speed", curve.constant, curve.value)
    if isinstance(curve, (OuterCoefficientLine, ExtendedCoefficientLine)):
        return mapping.grid_line_label("coeff", curve.constant, curve.value, coeff_type, scale)
    if isinstance(curve, GlideRay):
        return f"{curve.value:g}:1 glide"
    raise TypeError(f"Unknown curve type: {type(curve).__name__}")


def label_position(x, y, index, offset):
    """
    Offset the anchor perpendicular to the local tangent, estimated from
    samples TANGENT_STEP back and forward. At either end of the line the
    estimate is one-sided.
    """
    n = len(x)
    ax, ay = float(x[index]), float(y[index])
    if n < 2:
        return ax, ay

    prev_i = max(0, index - TANGENT_STEP)
    next_i = min(n - 1, index + TANGENT_STEP)
    dx = float(x[next_i] - x[prev_i])
    dy = float(y[next_i] - y[prev_i])
    length = math.hypot(dx, dy)
    if length == 0 or not math.isfinite(length):
        return ax, ay
    return ax + (-dy / length) * offset, ay + (dx / length) * offset


def break_polyline(x, y, keep):
    """Lists for plotly with None wherever keep is False."""
    xs = [float(a) if k else None for a, k in zip(x, keep)]
    ys = [float(b) if k else None for b, k in zip(y, keep)]
    return xs, ys


# =============================================================================
# ZOOM
# =============================================================================

@dataclass(frozen=True)
class ZoomTransform:
    """
    translate(cx, cy) -> scale(scale) -> translate(-focus_x, -focus_y)

    Moves the focus point to the canvas centre and magnifies around it.
    """
    focus_x: float
    focus_y: float
    scale: float
    cx: float
    cy: float

    def apply(self, x, y):
        return self.cx + self.scale * (x - self.focus_x), self.cy + self.scale * (y - self.focus_y)

    def invert(self, x, y):
        return self.focus_x + (x - self.cx) / self.scale, self.focus_y + (y - self.cy) / self.scale

    @classmethod
    def identity(cls, viewport):
        return cls(viewport.cx, viewport.cy, 1.0, viewport.cx, viewport.cy)


def _fit(xs, ys, viewport):
    """Focus and scale framing a set of screen points."""
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    ok = np.isfinite(xs) & np.isfinite(ys)
    if not ok.any():
        return viewport.cx, viewport.cy, 1.0
    xs, ys = xs[ok], ys[ok]
    x0, x1 = xs.min(), xs.max()
    y0, y1 = ys.min(), ys.max()
    pad = 1 + 2 * ZOOM_PADDING
    scales = []
    if x1 > x0:
        scales.append(viewport.width / ((x1 - x0) * pad))
    if y1 > y0:
        scales.append(viewport.height / ((y1 - y0) * pad))
    scale = min(scales) if scales else ZOOM_MAX_SCALE
    scale = max(1.0, min(ZOOM_MAX_SCALE, scale))
    return (x0 + x1) / 2, (y0 + y1) / 2, scale


def compute_zoom(projector, datasets, progress):
    """
    Pan/zoom framing the visible datasets (or the default quadrant).

    The speed-space framing and the coefficient-space framing are blended
    with ease_zoom(progress), so the zoom moves quickly near both ends of
    the morph and holds steady through the middle.
    """
    speed_x, speed_y, coeff_x, coeff_y = [], [], [], []
    for ds in datasets:
        if not ds.coefficient_points:
            continue
        x, y = projector.speed_xy(ds.speed_points)
        speed_x.extend(x)
        speed_y.extend(y)
        x, y = projector.coeff_xy(ds.coefficient_points)
        coeff_x.extend(x)
        coeff_y.extend(y)

    if not speed_x:
        vx0, vy0, vx1, vy1 = DEFAULT_ZOOM_BOUNDS["speed"]
        speed_x, speed_y = projector.speed_xy([(vx0, vy0), (vx1, vy1)])
        cd0, cl0, cd1, cl1 = DEFAULT_ZOOM_BOUNDS["coeff"]
        coeff_x, coeff_y = projector.coeff_xy([(cl0, cd0), (cl1, cd1)])

    vp = projector.viewport
    sfx, sfy, ss = _fit(speed_x, speed_y, vp)
    cfx, cfy, cs = _fit(coeff_x, coeff_y, vp)
    w = ease_zoom(progress)
    return ZoomTransform(
        sfx + (cfx - sfx) * w,
        sfy + (cfy - sfy) * w,
        ss + (cs - ss) * w,
        vp.cx,
        vp.cy,
    )


# =============================================================================
# FRAME
# =============================================================================

def render_curve(curve, projector, progress, visibility, coeff_type="c", zoom=None):
    """
    Interpolated polyline and optional label for one curve.

    Culling and label placement happen in final screen coordinates, after
    the zoom transform. Returns (RenderedCurve or None, RenderedLabel or None);
    the curve is None when no sample survives culling.
    """
    vp = projector.viewport
    x, y = projector.blend(curve.speed_points, curve.coefficient_points, progress)
    if zoom is not None:
        x, y = zoom.apply(x, y)
    finite = np.isfinite(x) & np.isfinite(y)
    keep = finite & vp.contains(x, y, vp.width * VIEWPORT_MARGIN)
    if not keep.any():
        return None, None

    kind = curve_kind(curve)
    xs, ys = break_polyline(x, y, keep)
    rendered = RenderedCurve(xs, ys, curve.color, kind)

    label = None
    if is_label_visible(curve, visibility):
        index = label_anchor_index(curve, progress)
        if keep[index]:
            lx, ly = label_position(x, y, index, label_offset_distance(curve))
            scale = projector.coeff_scale if coeff_type == "k" else None
            text = label_text(curve, projector.mapping, coeff_type, scale)
            label = RenderedLabel(lx, ly, text, curve.color, kind)

    return rendered, label


def render_dataset(dataset, projector, progress, zoom=None):
    """
    Dataset polyline and markers. Non-finite samples and samples beyond the
    viewport margin break the line and get no marker.
    """
    x, y = projector.blend(dataset.speed_points, dataset.coefficient_points, progress)
    if zoom is not None:
        x, y = zoom.apply(x, y)
    vp = projector.viewport
    keep = np.isfinite(x) & np.isfinite(y) & vp.contains(x, y, vp.width * VIEWPORT_MARGIN)
    xs, ys = break_polyline(x, y, keep)
    return RenderedDataset(
        dataset.id, dataset.name, dataset.color, xs, ys,
        [v for v in xs if v is not None],
        [v for v in ys if v is not None],
    )


def legend_lines(mapping, progress, coeff_type="c", speed_unit="mph"):
    """View title plus axis descriptions; flips at the half-way point."""
    if progress > 0.5:
        return [
            "COEFFICIENT VIEW",
            f"X-axis: {mapping.axis_legend_text('coeff', 'x', coeff_type)}",
            f"Y-axis: {mapping.axis_legend_text('coeff', 'y', coeff_type)}",
            "Speed grid lines are curved in this view",
        ]
    return [
        "SPEED VIEW",
        f"X-axis: {mapping.axis_legend_text('speed', 'x', speed_unit=speed_unit)}",
        f"Y-axis: {mapping.axis_legend_text('speed', 'y', speed_unit=speed_unit)}",
        "Coefficient grid lines are curved in this view",
    ]


def render_frame(grid, datasets, mapping, params, visibility, colors, progress,
                 viewport=None, coeff_type="c", speed_unit="mph", interpolation="linear"):
    """
    Build one animation frame.

    Args:
        grid: GridSet from generate_grid()
        datasets: visible Dataset objects
        mapping: AxisMapping
        params: (rho, s, m)
        visibility: VisibilityState
        colors: mapping with the COLORS keys
        progress: 0 (speed view) .. 1 (coefficient view)

    Returns:
        Frame
    """
    viewport = viewport or Viewport()
    projector = Projector(mapping, viewport, params, coeff_type, interpolation)

    zoom = compute_zoom(projector, datasets, progress) if visibility.zoom_enabled else None
    origin = zoom.apply(viewport.cx, viewport.cy) if zoom else (viewport.cx, viewport.cy)
    frame = Frame(
        width=viewport.width,
        height=viewport.height,
        progress=progress,
        view="coeff" if progress > 0.5 else "speed",
        origin=(float(origin[0]), float(origin[1])),
        background=colors["background"],
        legend_color=colors["legend"],
        legend=legend_lines(mapping, progress, coeff_type, speed_unit),
        zoom=zoom,
    )

    if visibility.show_grid:
        for curve in grid.curves:
            if not is_curve_visible(curve, visibility):
                continue
            rendered, label = render_curve(curve, projector, progress, visibility, coeff_type, zoom)
            if rendered is None:
                continue
            frame.curves.append(rendered)
            if label is not None:
                frame.labels.append(label)

    for ds in datasets:
        frame.datasets.append(render_dataset(ds, projector, progress, zoom))

    return frame
