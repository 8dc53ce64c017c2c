# sustained/axis_mapping.py

"""
Axis mapping configuration.

Decides which physical quantity drives each screen axis of the speed chart
and of the coefficient chart, and whether that axis is reversed. "Reversed"
is relative to screen coordinates (x grows right, y grows down), so a
reversed axis uses a -1 multiplier.

Swapping presets only changes projection and labelling; curve data is
never regenerated for it.
"""

import copy

from .constants import SPEED_RANGE
from .datasets import dprint


def _axis(value, reversed_, label, description):
    return {"value": value, "reversed": reversed_, "label": label, "description": description}


_VXS = ("vxs", "VXS", "horizontal speed")
_VYS = ("vys", "VYS", "vertical speed")
_CD = ("cd", "CD", "drag coefficient")
_CL = ("cl", "CL", "lift coefficient")


def _preset(name, description, speed_x, speed_y, coeff_x, coeff_y):
    return {
        "name": name,
        "description": description,
        "speed_chart": {
            "x": _axis(speed_x[0][0], speed_x[1], speed_x[0][1], speed_x[0][2]),
            "y": _axis(speed_y[0][0], speed_y[1], speed_y[0][1], speed_y[0][2]),
        },
        "coeff_chart": {
            "x": _axis(coeff_x[0][0], coeff_x[1], coeff_x[0][1], coeff_x[0][2]),
            "y": _axis(coeff_y[0][0], coeff_y[1], coeff_y[0][1], coeff_y[0][2]),
        },
    }


# =============================================================================
# PRESETS
# =============================================================================
AXIS_PRESETS = {
    "default": _preset(
        "Default (Standard)", "VXS→X, VYS→Y | CD→X(rev), CL→Y(rev)",
        (_VXS, False), (_VYS, False), (_CD, True), (_CL, True),
    ),
    "speedSwapped": _preset(
        "Speed Axes Swapped", "VYS→X, VXS→Y | CD→X(rev), CL→Y(rev)",
        (_VYS, False), (_VXS, False), (_CD, True), (_CL, True),
    ),
    "coeffSwapped": _preset(
        "Coefficient Axes Swapped", "VXS→X, VYS→Y | CL→X(rev), CD→Y(rev)",
        (_VXS, False), (_VYS, False), (_CL, True), (_CD, True),
    ),
    "bothSwapped": _preset(
        "Both Axes Swapped", "VYS→X, VXS→Y | CL→X(rev), CD→Y(rev)",
        (_VYS, False), (_VXS, False), (_CL, True), (_CD, True),
    ),
    "standard": _preset(
        "Standard Orientation", "VXS→X, VYS→Y | CD→X, CL→Y (no reversals)",
        (_VXS, False), (_VYS, False), (_CD, False), (_CL, False),
    ),
    "polar": _preset(
        "Polar Style", "VXS→X, VYS→Y(rev) | CD→X, CL→Y(rev)",
        (_VXS, False), (_VYS, True), (_CD, False), (_CL, True),
    ),
}


def preset_options():
    """Dropdown options for the preset selector."""
    return [{"label": p["name"], "value": key} for key, p in AXIS_PRESETS.items()]


class AxisMapping:
    """
    Resolves axis roles for a named preset and projects points to pixels.

    Points are read by attribute (``vxs``/``vys`` and ``cl``/``cd``), so the
    same calculators accept scalar points and points holding numpy arrays.
    """

    def __init__(self, preset_name="default"):
        self.set_preset(preset_name)

    def set_preset(self, preset_name):
        preset = AXIS_PRESETS.get(preset_name)
        if preset is None:
            dprint(f"[AXIS] Unknown preset: {preset_name}, using default")
            preset_name = "default"
            preset = AXIS_PRESETS["default"]
        self.config = copy.deepcopy(preset)
        self.current_preset = preset_name

    # ========== Speed chart ==========

    def speed_value_name(self, axis):
        return self.config["speed_chart"][axis]["value"]

    def speed_value(self, point, axis):
        return getattr(point, self.speed_value_name(axis))

    def speed_sign(self, axis):
        return -1 if self.config["speed_chart"][axis]["reversed"] else 1

    def speed_label(self, axis):
        return self.config["speed_chart"][axis]["label"]

    def is_speed_reversed(self, axis):
        return self.config["speed_chart"][axis]["reversed"]

    # ========== Coefficient chart ==========

    def coeff_value_name(self, axis):
        return self.config["coeff_chart"][axis]["value"]

    def coeff_value(self, point, axis):
        return getattr(point, self.coeff_value_name(axis))

    def coeff_sign(self, axis):
        return -1 if self.config["coeff_chart"][axis]["reversed"] else 1

    def coeff_label(self, axis, coeff_type="c"):
        """'CD'/'CL', or 'KD'/'KL' in K mode."""
        label = self.config["coeff_chart"][axis]["label"]
        if coeff_type == "k":
            return "K" + label[1:]
        return label

    def is_coeff_reversed(self, axis):
        return self.config["coeff_chart"][axis]["reversed"]

    # ========== Screen coordinates ==========
    # center + sign * (value / range) * half_extent

    def calc_speed_x(self, point, cx, half_width, value_range=SPEED_RANGE):
        return cx + self.speed_sign("x") * (self.speed_value(point, "x") / value_range) * half_width

    def calc_speed_y(self, point, cy, half_height, value_range=SPEED_RANGE):
        return cy + self.speed_sign("y") * (self.speed_value(point, "y") / value_range) * half_height

    def calc_coeff_x(self, point, cx, half_width, value_range):
        return cx + self.coeff_sign("x") * (self.coeff_value(point, "x") / value_range) * half_width

    def calc_coeff_y(self, point, cy, half_height, value_range):
        return cy + self.coeff_sign("y") * (self.coeff_value(point, "y") / value_range) * half_height

    # ========== Legend / label text ==========

    def axis_legend_text(self, chart, axis, coeff_type="c", speed_unit="mph"):
        """
        Full axis description for the view legend, e.g.
        "VXS (horizontal speed, -150 to +150 mph)".
        """
        key = "speed_chart" if chart == "speed" else "coeff_chart"
        entry = self.config[key][axis]
        if chart == "speed":
            label = self.speed_label(axis)
            reversed_ = self.is_speed_reversed(axis)
            lo_hi = f"{SPEED_RANGE}"
            unit = " mph" if speed_unit == "mph" else " m/s"
        else:
            label = self.coeff_label(axis, coeff_type)
            reversed_ = self.is_coeff_reversed(axis)
            lo_hi = "1"
            unit = ""

        if reversed_:
            if axis == "x":
                direction = f"+{lo_hi} LEFT to -{lo_hi} RIGHT"
            else:
                direction = f"+{lo_hi} TOP to -{lo_hi} BOTTOM"
        else:
            direction = f"-{lo_hi} to +{lo_hi}{unit}"
        return f"{label} ({entry['description']}, {direction})"

    def grid_line_label(self, chart, value_name, value, coeff_type="c", scale=None):
        """
        Grid line label such as "VYS=30" or "CL=0.5".
        value_name is the physical quantity held constant along the line.
        In K mode with a k / g scale the value is shown in milli units
        ("KL=1.23m"), or micro units when that would read below 0.1.
        """
        if chart == "speed":
            return f"{value_name.upper()}={value:g}"

        label = value_name.upper()
        if coeff_type == "k":
            label = "K" + label[1:]
            if scale is not None:
                milli = value * scale * 1000
                if milli != 0 and abs(milli) < 0.1:
                    return f"{label}={milli * 1000:.1f}μ"
                return f"{label}={milli:.2f}m"
        if abs(value) >= 1:
            return f"{label}={value:.0f}"
        return f"{label}={value:.1f}"
