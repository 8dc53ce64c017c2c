# sustained/chart.py

"""
Chart session.

Holds the current snapshots (parameters, colours, visibility, animation),
the cached grid and the loaded datasets, and exposes the operations the UI
calls. Rendering itself is delegated to the pure render_frame().
"""

import time
from dataclasses import replace

from .animation import AnimationState, advance, reset_animation, start_transition
from .axis_mapping import AxisMapping
from .constants import (
    ANIMATION_DURATION_MS,
    COEFF_TYPES,
    DEFAULT_AXIS_PRESET,
    DEFAULT_COEFF_TYPE,
    DEFAULT_INTERPOLATION,
    DEFAULT_SPEED_UNIT,
    SPEED_UNITS,
)
from .datasets import DatasetManager, dprint
from .figure import build_figure
from .grid import generate_grid
from .render import INTERPOLATION_POLICIES, Viewport, render_frame
from .state import ColorState, ParameterState, VisibilityState


class SustainedSpeedChart:
    def __init__(self, viewport=None, duration_ms=ANIMATION_DURATION_MS, clock=time.perf_counter):
        self.params = ParameterState()
        self.colors = ColorState()
        self.visibility = VisibilityState()
        self.animation = AnimationState(duration_ms=duration_ms)
        self.coeff_type = DEFAULT_COEFF_TYPE
        self.speed_unit = DEFAULT_SPEED_UNIT
        self.interpolation = DEFAULT_INTERPOLATION
        self.axis_mapping = AxisMapping(DEFAULT_AXIS_PRESET)
        self.viewport = viewport or Viewport()
        self.datasets = DatasetManager()
        self.clock = clock
        self.grid = None
        self.generate_grid()

    # =========================================================================
    # GRID
    # =========================================================================

    def generate_grid(self):
        """Full rebuild of the cached curves."""
        self.grid = generate_grid(self.params, self.colors.colors, self.coeff_type, self.speed_unit)
        return self.grid

    def _regenerate(self):
        self.generate_grid()
        rho, s, m = self.params.as_tuple()
        self.datasets.regenerate_all_speed_data(rho, s, m, self.speed_unit)

    # =========================================================================
    # RENDER
    # =========================================================================

    def frame(self):
        return render_frame(
            self.grid,
            self.datasets.get_visible_datasets(),
            self.axis_mapping,
            self.params.as_tuple(),
            self.visibility,
            self.colors.colors,
            self.animation.progress,
            viewport=self.viewport,
            coeff_type=self.coeff_type,
            speed_unit=self.speed_unit,
            interpolation=self.interpolation,
        )

    def render(self):
        """Plotly figure for the current state."""
        return build_figure(self.frame())

    def tick(self, now=None):
        """Advance a running transition. Returns True while still animating."""
        self.animation = advance(self.animation, self.clock() if now is None else now)
        return self.animation.running

    # =========================================================================
    # VIEW CONTROL
    # =========================================================================

    def switch_view(self, now=None):
        """Start a morph to the other view. Ignored while one is running."""
        self.animation = start_transition(self.animation, self.clock() if now is None else now)
        return self.animation.running

    def reset(self):
        """Speed view, grid on. Ignored while a transition is running."""
        if self.animation.running:
            return False
        self.animation = reset_animation(self.animation)
        self.visibility = self.visibility.with_grid(True)
        return True

    def toggle_grid(self):
        self.visibility = self.visibility.with_grid(not self.visibility.show_grid)
        return self.visibility.show_grid

    def toggle_zoom(self, enabled=None):
        if enabled is None:
            enabled = not self.visibility.zoom_enabled
        self.visibility = self.visibility.with_zoom(enabled)
        return self.visibility.zoom_enabled

    @property
    def is_animating(self):
        return self.animation.running

    @property
    def progress(self):
        return self.animation.progress

    @property
    def current_view(self):
        return self.animation.view

    def view_label(self):
        return "COEFFICIENT VIEW" if self.animation.view == "coeff" else "SPEED VIEW"

    def toggle_button_label(self):
        """Text for the toggle button: the view it will switch to."""
        if self.animation.running:
            target = self.animation.target_view
            return "Switch to Speed View" if target == "coeff" else "Switch to Coefficients View"
        if self.animation.view == "coeff":
            return "Switch to Speed View"
        return "Switch to Coefficients View"

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def set_parameters(self, rho=None, s=None, m=None):
        """
        Apply validated physical parameters.
        Returns False if any supplied value was rejected (those keep their
        previous setting); the grid is rebuilt when anything changed.
        """
        new_params, rejected = self.params.updated(rho=rho, s=s, m=m)
        if rejected:
            dprint(f"[PARAMS] Rejected invalid values for: {', '.join(rejected)}")
        if new_params != self.params:
            self.params = new_params
            self._regenerate()
            dprint(f"[PARAMS] rho={new_params.rho}, S={new_params.s}, m={new_params.m}")
        return not rejected

    def set_coefficient_mode(self, coeff_type):
        if coeff_type not in COEFF_TYPES:
            raise ValueError(f"Unknown coefficient mode: {coeff_type}")
        if coeff_type != self.coeff_type:
            self.coeff_type = coeff_type
            self.generate_grid()

    def set_speed_unit(self, speed_unit):
        if speed_unit not in SPEED_UNITS:
            raise ValueError(f"Unknown speed unit: {speed_unit}")
        if speed_unit != self.speed_unit:
            self.speed_unit = speed_unit
            self._regenerate()

    def set_axis_preset(self, preset_name):
        """Projection/labelling only; curve data is left as is."""
        self.axis_mapping.set_preset(preset_name)
        return self.axis_mapping.current_preset

    def set_interpolation(self, name):
        if name not in INTERPOLATION_POLICIES:
            raise ValueError(f"Unknown interpolation policy: {name}")
        self.interpolation = name

    def set_viewport(self, width, height):
        self.viewport = replace(self.viewport, width=float(width), height=float(height))

    def update_colors(self, partial):
        """Merge colour changes; curves carry their colour so the grid is rebuilt."""
        self.colors = self.colors.updated(partial)
        self.generate_grid()

    def update_visibility(self, partial):
        self.visibility = self.visibility.updated(partial)

    # =========================================================================
    # DATASETS
    # =========================================================================

    def add_dataset(self, file_name, file_content, color=None):
        """Raises DatasetParseError without touching existing datasets."""
        rho, s, m = self.params.as_tuple()
        return self.datasets.add_dataset(file_name, file_content, rho, s, m, color, self.speed_unit)

    def remove_dataset(self, dataset_id):
        self.datasets.remove_dataset(dataset_id)

    def update_dataset_color(self, dataset_id, color):
        self.datasets.update_color(dataset_id, color)

    def update_dataset_visibility(self, dataset_id, visible):
        self.datasets.update_visibility(dataset_id, visible)
