# tests/test_grid.py
import sys
import os
import math

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from sustained.calculations import (
    coefficients_to_speeds,
    mph_to_mps,
    mps_to_mph,
    speeds_to_coefficients,
)
from sustained.constants import COLORS
from sustained.grid import (
    COEFFICIENT_LINE_TYPES,
    SPEED_LINE_TYPES,
    ExtendedCoefficientLine,
    GlideRay,
    InnerSpeedLine,
    OuterCoefficientLine,
    OuterSpeedLine,
    generate_grid,
    sample_range,
)

PARAMS = (1.0, 2.0, 70.0)


@pytest.fixture(scope="module")
def grid():
    return generate_grid(PARAMS, COLORS)


def test_sample_range_hits_both_ends():
    samples = sample_range(-1.0, 1.0, 0.05)
    assert len(samples) == 41
    assert samples[0] == -1.0 and samples[-1] == 1.0
    assert 0.0 in samples
    assert sample_range(-150, 150, 30) == [-150, -120, -90, -60, -30, 0, 30, 60, 90, 120, 150]


def test_every_category_present(grid):
    for curve_type in (OuterSpeedLine, InnerSpeedLine, OuterCoefficientLine, ExtendedCoefficientLine, GlideRay):
        assert grid.of_type(curve_type), curve_type.__name__
    assert (grid.rho, grid.s, grid.m, grid.coeff_type, grid.speed_unit) == (1.0, 2.0, 70.0, "c", "mph")


def test_curve_pairing_invariant(grid):
    rho, s, m = PARAMS
    for curve in grid.curves:
        assert len(curve.speed_points) == len(curve.coefficient_points)
        assert len(curve) > 1
        for sp, cp in zip(curve.speed_points, curve.coefficient_points):
            if isinstance(curve, SPEED_LINE_TYPES + (GlideRay,)):
                cl, cd = speeds_to_coefficients(mph_to_mps(sp.vxs), mph_to_mps(sp.vys), s, m, rho)
                assert cl == cp.cl and cd == cp.cd
            else:
                vxs, vys = coefficients_to_speeds(cp.cl, cp.cd, s, m, rho)
                assert mps_to_mph(vxs) == sp.vxs and mps_to_mph(vys) == sp.vys


def test_no_nan_anywhere(grid):
    for curve in grid.curves:
        for sp, cp in zip(curve.speed_points, curve.coefficient_points):
            assert all(math.isfinite(v) for v in (sp.vxs, sp.vys, cp.cl, cp.cd))


def test_outer_speed_grid(grid):
    lines = grid.of_type(OuterSpeedLine)
    assert len(lines) == 22
    vys_lines = [c for c in lines if c.constant == "vys"]
    assert sorted(c.value for c in vys_lines) == list(range(-150, 151, 30))
    line = vys_lines[0]
    assert len(line) == 61
    assert all(sp.vys == line.value for sp in line.speed_points)
    assert line.color == COLORS["vertical"]


def test_inner_speed_grid(grid):
    lines = grid.of_type(InnerSpeedLine)
    assert len(lines) == 8
    assert all(abs(c.value) < 30 for c in lines)


def test_outer_coefficient_grid_labels_only_main_segment(grid):
    lines = grid.of_type(OuterCoefficientLine)
    main = [c for c in lines if c.segment == "main"]
    extensions = [c for c in lines if c.segment == "extension"]
    assert len(main) == 22
    # Two extensions per non-zero value, CL and CD
    assert len(extensions) == 2 * 2 * 10
    # ±1 main lines leave their label to the extended grid
    assert all(c.labeled == (abs(c.value) < 1) for c in main)
    assert sum(c.labeled for c in main) == 18
    assert not any(c.labeled for c in extensions)
    for c in extensions:
        companions = [cp.cd if c.constant == "cl" else cp.cl for cp in c.coefficient_points]
        assert min(abs(v) for v in companions) >= 0.95 - 1e-9


def test_extended_grid_label_policy(grid):
    lines = grid.of_type(ExtendedCoefficientLine)
    labeled = [c for c in lines if c.labeled]
    # |value| in {1, 5, 10}, both signs, CL and CD, positive companion segment only
    assert len(labeled) == 3 * 2 * 2
    for c in labeled:
        assert abs(c.value) in (1, 5, 10)
        assert c.segment == "quadrant"
        companions = [cp.cd if c.constant == "cl" else cp.cl for cp in c.coefficient_points]
        assert min(companions) >= 1
    bridges = [c for c in lines if c.segment == "bridge"]
    assert len(bridges) == 2 * 2 * 10
    assert not any(c.labeled for c in bridges)


def test_glide_rays_start_at_origin_and_run_one_way(grid):
    rays = grid.of_type(GlideRay)
    assert len(rays) == 3 * 4
    for ray in rays:
        sx, sy = ray.quadrant
        assert ray.speed_points[0] == (0, 0)
        assert ray.coefficient_points[0] == (0.0, 0.0)
        for sp in ray.speed_points[1:]:
            assert sp.vxs * sx > 0 and sp.vys * sy > 0
            assert abs(abs(sp.vxs) / abs(sp.vys) - ray.value) < 1e-9


def test_colour_and_unit_change_regenerates(grid):
    colors = dict(COLORS, lift="#123456")
    regenerated = generate_grid(PARAMS, colors, speed_unit="mps")
    cl_lines = [c for c in regenerated.of_type(COEFFICIENT_LINE_TYPES) if c.constant == "cl"]
    assert all(c.color == "#123456" for c in cl_lines)
    # Same coefficient sample, speeds now in m/s
    before = grid.of_type(OuterCoefficientLine)[0].speed_points[3]
    after = regenerated.of_type(OuterCoefficientLine)[0].speed_points[3]
    assert abs(mps_to_mph(after.vxs) - before.vxs) < 1e-9


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
