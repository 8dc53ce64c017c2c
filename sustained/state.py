# sustained/state.py

"""
Chart state value objects.

The chart keeps parameters, colours and visibility as separate immutable
snapshots. Updates return a new snapshot; nothing here is mutated in place.
"""

import math
from dataclasses import dataclass, field, replace

from .constants import (
    COLORS,
    DEFAULT_M,
    DEFAULT_RHO,
    DEFAULT_S,
    VISIBILITY,
)


def validate_parameter(value):
    """
    Coerce a user-supplied physical parameter.

    Returns a positive finite float, or None when the value is non-numeric,
    non-finite or not strictly positive.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


@dataclass(frozen=True)
class ParameterState:
    """Air density rho [kg/m³], reference area s [m²], mass m [kg]."""
    rho: float = DEFAULT_RHO
    s: float = DEFAULT_S
    m: float = DEFAULT_M

    def as_tuple(self):
        return self.rho, self.s, self.m

    def updated(self, rho=None, s=None, m=None):
        """
        Apply a partial update.

        Returns (new_state, rejected) where rejected lists the names of
        supplied values that failed validation. Rejected values keep their
        previous setting; accepted ones are applied.
        """
        changes = {}
        rejected = []
        for name, raw in (("rho", rho), ("s", s), ("m", m)):
            if raw is None:
                continue
            value = validate_parameter(raw)
            if value is None:
                rejected.append(name)
            else:
                changes[name] = value
        return replace(self, **changes), rejected


@dataclass(frozen=True)
class ColorState:
    colors: dict = field(default_factory=lambda: dict(COLORS))

    def __getitem__(self, key):
        return self.colors[key]

    def updated(self, partial):
        unknown = set(partial) - set(self.colors)
        if unknown:
            raise KeyError(f"Unknown colour keys: {sorted(unknown)}")
        merged = dict(self.colors)
        merged.update(partial)
        return ColorState(merged)


@dataclass(frozen=True)
class VisibilityState:
    flags: dict = field(default_factory=lambda: dict(VISIBILITY))
    show_grid: bool = True
    zoom_enabled: bool = False

    def __getitem__(self, key):
        return self.flags[key]

    def updated(self, partial):
        unknown = set(partial) - set(self.flags)
        if unknown:
            raise KeyError(f"Unknown visibility keys: {sorted(unknown)}")
        merged = dict(self.flags)
        merged.update({k: bool(v) for k, v in partial.items()})
        return replace(self, flags=merged)

    def with_grid(self, show_grid):
        return replace(self, show_grid=bool(show_grid))

    def with_zoom(self, zoom_enabled):
        return replace(self, zoom_enabled=bool(zoom_enabled))
