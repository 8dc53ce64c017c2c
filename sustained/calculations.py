# sustained/calculations.py

"""
Centralized sustained-speed <-> coefficient math.
Both transforms, the k factor, K-coefficient scaling and unit conversion
live here so the grid, datasets and renderer all share one definition.
"""

from collections import namedtuple

g = 9.8  # m/s²
MPS_TO_MPH = 2.23694
MPH_TO_MPS = 1 / MPS_TO_MPH


def compute_k(rho, s, m):
    """k = 0.5 * rho * S / m"""
    return 0.5 * rho * s / m


def coefficients_to_speeds(cl, cd, s, m, rho):
    """
    Convert coefficients (CL, CD) to sustained speeds (VXS, VYS) in m/s.

        kl = CL * k / g,  kd = CD * k / g
        VXS = kl / (kl² + kd²)^0.75,  VYS = kd / (kl² + kd²)^0.75

    Returns (0, 0) at the origin instead of dividing by zero.
    S, m, rho > 0 is the caller's responsibility.
    """
    k = compute_k(rho, s, m)
    kl = cl * k / g
    kd = cd * k / g
    denom = (kl * kl + kd * kd) ** 0.75

    if denom == 0:
        return 0.0, 0.0

    return kl / denom, kd / denom


def speeds_to_coefficients(vxs, vys, s, m, rho):
    """
    Convert sustained speeds (VXS, VYS) in m/s to coefficients (CL, CD).

        kl = VXS / (VXS² + VYS²)^1.5,  kd = VYS / (VXS² + VYS²)^1.5
        CL = kl / k * g,  CD = kd / k * g

    Returns (0, 0) at the origin instead of dividing by zero.
    """
    k = compute_k(rho, s, m)
    denom = (vxs * vxs + vys * vys) ** 1.5

    if denom == 0:
        return 0.0, 0.0

    kl = vxs / denom
    kd = vys / denom
    return kl / k * g, kd / k * g


def mps_to_mph(mps):
    return mps * MPS_TO_MPH


def mph_to_mps(mph):
    return mph * MPH_TO_MPS


def to_display_speed(mps, unit="mph"):
    """m/s -> display unit ("mph" or "mps")."""
    return mps_to_mph(mps) if unit == "mph" else mps


def from_display_speed(value, unit="mph"):
    """Display unit ("mph" or "mps") -> m/s."""
    return mph_to_mps(value) if unit == "mph" else value


def k_scale(rho, s, m):
    """Scale factor k / g turning a C-coefficient into its K counterpart."""
    return compute_k(rho, s, m) / g


def coefficient_axis_range(coeff_type, rho, s, m, c_range=1.0):
    """Half-extent of the coefficient axes: c_range for C, c_range * k / g for K."""
    if coeff_type == "k":
        return c_range * k_scale(rho, s, m)
    return c_range


# =============================================================================
# POINT TYPES
# =============================================================================
# Fields may hold scalars or numpy arrays; the projection code only reads them.

SpeedPoint = namedtuple("SpeedPoint", ["vxs", "vys"])
CoefficientPoint = namedtuple("CoefficientPoint", ["cl", "cd"])
