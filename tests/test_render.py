# tests/test_render.py
import sys
import os
import math

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import pytest

from sustained.axis_mapping import AxisMapping
from sustained.calculations import CoefficientPoint, SpeedPoint, coefficients_to_speeds, mps_to_mph
from sustained.constants import COLORS
from sustained.datasets import DatasetManager
from sustained.grid import ExtendedCoefficientLine, GlideRay, GridSet, OuterCoefficientLine, OuterSpeedLine, generate_grid
from sustained.render import (
    Projector,
    Viewport,
    ZoomTransform,
    compute_zoom,
    interpolate_linear,
    interpolate_polar,
    label_anchor_index,
    label_position,
    legend_lines,
    render_frame,
)
from sustained.state import VisibilityState

PARAMS = (1.0, 2.0, 70.0)
VIEWPORT = Viewport(1000, 700)


@pytest.fixture(scope="module")
def grid():
    return generate_grid(PARAMS, COLORS)


@pytest.fixture
def projector():
    return Projector(AxisMapping(), VIEWPORT, PARAMS)


def make_line(speed_points, constant="vxs", value=0):
    coefficient_points = tuple(CoefficientPoint(0.0, 0.0) for _ in speed_points)
    return OuterSpeedLine(value, "#ffffff", tuple(speed_points), coefficient_points, True, constant)


def test_progress_endpoints_match_pure_projections(grid, projector):
    for curve in grid.curves[:40]:
        sx, sy = projector.speed_xy(curve.speed_points)
        cx, cy = projector.coeff_xy(curve.coefficient_points)
        x0, y0 = projector.blend(curve.speed_points, curve.coefficient_points, 0.0)
        x1, y1 = projector.blend(curve.speed_points, curve.coefficient_points, 1.0)
        assert np.allclose(x0, sx) and np.allclose(y0, sy)
        assert np.allclose(x1, cx) and np.allclose(y1, cy)


def test_polar_policy_endpoints():
    x1, y1 = np.array([800.0, 100.0]), np.array([350.0, 600.0])
    x2, y2 = np.array([200.0, 500.0]), np.array([100.0, 50.0])
    sx, sy = interpolate_polar(x1, y1, x2, y2, 500, 350, 0.0)
    ex, ey = interpolate_polar(x1, y1, x2, y2, 500, 350, 1.0)
    assert np.allclose(sx, x1) and np.allclose(sy, y1)
    assert np.allclose(ex, x2) and np.allclose(ey, y2)


def test_polar_policy_keeps_radius_for_equal_radii():
    # Quarter turn at constant radius stays on the circle
    x, y = interpolate_polar(np.array([600.0]), np.array([350.0]),
                             np.array([500.0]), np.array([250.0]), 500, 350, 0.5)
    assert abs(np.hypot(x[0] - 500, y[0] - 350) - 100) < 1e-9
    lx, ly = interpolate_linear(600.0, 350.0, 500.0, 250.0, 500, 350, 0.5)
    assert (lx, ly) == (550.0, 300.0)


def test_scenario_point_positions(projector):
    vxs, vys = coefficients_to_speeds(0.486, 0.485, 2.0, 70.0, 1.0)
    sp = [SpeedPoint(mps_to_mph(vxs), mps_to_mph(vys))]
    cp = [CoefficientPoint(0.486, 0.485)]
    sx, sy = projector.speed_xy(sp)
    cx, cy = projector.coeff_xy(cp)
    # About 50 mph each way: right of and below centre in speed view
    assert 500 < sx[0] < 750 and 350 < sy[0] < 550
    # Default preset draws CD reversed on X and CL upwards
    assert abs(cx[0] - (500 - 0.485 * 500)) < 1e-9
    assert abs(cy[0] - (350 - 0.486 * 350)) < 1e-9


def test_far_points_break_the_line():
    # 150 mph maps to the canvas edge, 2000 mph is far beyond the margin
    line = make_line([SpeedPoint(0, 0), SpeedPoint(100, 0), SpeedPoint(2000, 0), SpeedPoint(120, 10)])
    visibility = VisibilityState()
    frame = render_frame(
        GridSet(*PARAMS, "c", "mph", (line,)), [], AxisMapping(), PARAMS,
        visibility, COLORS, 0.0, viewport=VIEWPORT,
    )
    assert len(frame.curves) == 1
    xs = frame.curves[0].xs
    assert xs[0] == 500.0
    assert xs[2] is None
    assert xs[3] is not None


def test_fully_culled_curve_is_dropped():
    line = make_line([SpeedPoint(5000, 0), SpeedPoint(6000, 0)])
    frame = render_frame(
        GridSet(*PARAMS, "c", "mph", (line,)), [], AxisMapping(), PARAMS,
        VisibilityState(), COLORS, 0.0, viewport=VIEWPORT,
    )
    assert frame.curves == []
    assert frame.labels == []


def test_label_anchor_rules(grid):
    speed_line = grid.of_type(OuterSpeedLine)[0]
    assert label_anchor_index(speed_line, 0.0) == int(len(speed_line) * 0.33)

    ray = grid.of_type(GlideRay)[0]
    assert label_anchor_index(ray, 0.0) == int(len(ray) * 0.85)
    assert label_anchor_index(ray, 1.0) == int(len(ray) * 0.33)

    coeff_line = grid.of_type(OuterCoefficientLine)[0]
    assert label_anchor_index(coeff_line, 0.5) == int(len(coeff_line) * 0.85)


def test_label_offset_is_perpendicular():
    x = np.arange(10, dtype=float) * 10
    y = np.zeros(10)
    lx, ly = label_position(x, y, 5, 15)
    assert (lx, ly) == (50.0, 15.0)
    # End points use a one-sided tangent
    assert label_position(x, y, 0, 15) == (0.0, 15.0)
    assert label_position(x, y, 9, -15) == (90.0, -15.0)


def test_extended_labels_anchor_near_axis_and_are_offset(grid, projector):
    labeled = [c for c in grid.of_type(ExtendedCoefficientLine) if c.labeled]
    assert labeled
    for curve in labeled:
        companions = [cp.cd if curve.constant == "cl" else cp.cl for cp in curve.coefficient_points]
        index = label_anchor_index(curve, 1.0)
        assert companions[index] == min(abs(v) for v in companions) == 1.0

        x, y = projector.blend(curve.speed_points, curve.coefficient_points, 1.0)
        lx, ly = label_position(x, y, index, -15)
        assert abs(math.hypot(lx - x[index], ly - y[index]) - 15) < 1e-9


def test_hidden_categories_and_grid_toggle(grid):
    mapping = AxisMapping()
    visibility = VisibilityState().updated({"show_glide": False})
    frame = render_frame(grid, [], mapping, PARAMS, visibility, COLORS, 0.0, viewport=VIEWPORT)
    assert frame.curves
    assert not any(c.kind == "glide-ray" for c in frame.curves)
    assert not any(c.kind == "inner-speed-grid" for c in frame.curves)

    hidden = render_frame(grid, [], mapping, PARAMS, visibility.with_grid(False), COLORS, 0.0, viewport=VIEWPORT)
    assert hidden.curves == [] and hidden.labels == []


def test_datasets_drawn_with_grid_hidden(grid):
    manager = DatasetManager()
    manager.add_dataset("a.js", 'stallpoint: [{"cl": 0.5, "cd": 0.3}, {"cl": 0.3, "cd": 0.5}]', *PARAMS)
    visibility = VisibilityState().with_grid(False)
    frame = render_frame(grid, manager.get_visible_datasets(), AxisMapping(), PARAMS,
                         visibility, COLORS, 1.0, viewport=VIEWPORT)
    assert len(frame.datasets) == 1
    ds = frame.datasets[0]
    assert len(ds.marker_xs) == 2
    assert abs(ds.marker_xs[0] - (500 - 0.3 * 500)) < 1e-9


def test_far_dataset_points_are_culled():
    manager = DatasetManager()
    # CD=5 lands 2500 px left of centre in the coefficient view
    manager.add_dataset("a.js", 'stallpoint: [{"cl": 0.5, "cd": 0.3}, {"cl": 0.5, "cd": 5}, {"cl": 0.3, "cd": 0.5}]', *PARAMS)
    frame = render_frame(GridSet(*PARAMS, "c", "mph", ()), manager.get_visible_datasets(), AxisMapping(), PARAMS,
                         VisibilityState(), COLORS, 1.0, viewport=VIEWPORT)
    ds = frame.datasets[0]
    assert ds.line_xs[1] is None
    assert ds.line_xs[0] is not None and ds.line_xs[2] is not None
    assert len(ds.marker_xs) == 2


def test_zoom_round_trip():
    zoom = ZoomTransform(focus_x=620.0, focus_y=410.0, scale=2.5, cx=500.0, cy=350.0)
    x, y = zoom.apply(620.0, 410.0)
    assert (x, y) == (500.0, 350.0)
    for px, py in [(0.0, 0.0), (123.4, 567.8), (1000.0, 700.0)]:
        bx, by = zoom.invert(*zoom.apply(px, py))
        assert abs(bx - px) < 1e-9 and abs(by - py) < 1e-9
    identity = ZoomTransform.identity(VIEWPORT)
    assert identity.apply(42.0, 24.0) == (42.0, 24.0)


def test_compute_zoom_frames_datasets(projector):
    manager = DatasetManager()
    manager.add_dataset("a.js", 'stallpoint: [{"cl": 0.5, "cd": 0.3}, {"cl": 0.3, "cd": 0.5}]', *PARAMS)
    zoom = compute_zoom(projector, manager.get_visible_datasets(), 1.0)
    assert 1.0 <= zoom.scale <= 3.0
    cx, cy = projector.coeff_xy(manager.get_dataset("dataset-1").coefficient_points)
    assert abs(zoom.focus_x - (cx.min() + cx.max()) / 2) < 1e-9
    assert abs(zoom.focus_y - (cy.min() + cy.max()) / 2) < 1e-9


def test_legend_flips_at_half_way():
    mapping = AxisMapping()
    assert legend_lines(mapping, 0.5)[0] == "SPEED VIEW"
    assert legend_lines(mapping, 0.51)[0] == "COEFFICIENT VIEW"
    assert "mph" in legend_lines(mapping, 0.0)[1]


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
