# sustained/datasets.py

"""
Dataset loading and management.
Parses stallpoint CL/CD samples out of user-supplied text files and keeps
their sustained-speed counterparts in sync with the physical parameters.
"""

import json
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from . import constants
from .calculations import (
    CoefficientPoint,
    SpeedPoint,
    coefficients_to_speeds,
    to_display_speed,
)


def dprint(*args, **kwargs):
    """Debug print that can be globally toggled."""
    if constants.DEBUG_LOG:
        print(*args, **kwargs)


class DatasetParseError(ValueError):
    """Raised when a file does not hold a usable stallpoint array."""


STALLPOINT_PATTERN = re.compile(r"stallpoint:\s*\[(.*?)\]", re.DOTALL)


def _is_number(value):
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers too large for a float
        return False


def parse_stallpoint_data(file_content):
    """
    Extract the ``stallpoint: [...]`` array from a text file.

    Structural problems (no marker, invalid JSON, empty or non-list array,
    nothing usable left) abort the whole file. Individual entries without
    finite numeric ``cl`` and ``cd`` are skipped with a debug warning.

    Args:
        file_content: Text content of the file

    Returns:
        List of CoefficientPoint

    Raises:
        DatasetParseError
    """
    match = STALLPOINT_PATTERN.search(file_content or "")
    if not match:
        raise DatasetParseError("Failed to parse file: No stallpoint data found in file")

    try:
        data = json.loads("[" + match.group(1) + "]")
    except json.JSONDecodeError as e:
        raise DatasetParseError(f"Failed to parse file: Invalid stallpoint JSON ({e.msg})") from e

    if not isinstance(data, list) or len(data) == 0:
        raise DatasetParseError("Failed to parse file: Invalid stallpoint data format")

    points = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise DatasetParseError(f"Failed to parse file: stallpoint entry {index} is not an object")
        cl = entry.get("cl")
        cd = entry.get("cd")
        if not (_is_number(cl) and _is_number(cd)):
            dprint(f"[DATASET] Skipping point {index}: invalid CL/CD values ({cl!r}, {cd!r})")
            continue
        points.append(CoefficientPoint(float(cl), float(cd)))

    if not points:
        raise DatasetParseError("Failed to parse file: Invalid CL/CD values in data")

    return points


def convert_to_speed_data(coefficient_points, rho, s, m, speed_unit="mph"):
    """
    Convert coefficient samples to sustained speeds in the display unit.

    The result has one entry per input point. A point whose conversion is
    not finite becomes SpeedPoint(nan, nan), which the renderer skips.
    """
    speed_points = []
    for point in coefficient_points:
        vxs, vys = coefficients_to_speeds(point.cl, point.cd, s, m, rho)
        vxs = to_display_speed(vxs, speed_unit)
        vys = to_display_speed(vys, speed_unit)
        if not (math.isfinite(vxs) and math.isfinite(vys)):
            dprint(f"[DATASET] Failed to convert point (CL={point.cl}, CD={point.cd})")
            vxs = vys = float("nan")
        speed_points.append(SpeedPoint(vxs, vys))
    return speed_points


@dataclass
class Dataset:
    id: str
    name: str
    color: str
    coefficient_points: Tuple[CoefficientPoint, ...]
    speed_points: List[SpeedPoint] = field(default_factory=list)
    visible: bool = True
    params: Optional[Tuple[float, float, float]] = None   # (rho, s, m) of the last conversion
    speed_unit: str = "mph"


class DatasetManager:
    """
    Ordered collection of loaded datasets keyed by id.
    """
    def __init__(self):
        self._datasets = {}
        self._next_id = 1

    def __len__(self):
        return len(self._datasets)

    def __contains__(self, dataset_id):
        return dataset_id in self._datasets

    def next_color(self):
        return constants.DATASET_COLORS[(self._next_id - 1) % len(constants.DATASET_COLORS)]

    def add_dataset(self, file_name, file_content, rho, s, m, color=None, speed_unit="mph"):
        """
        Parse and convert a file, then register it.

        Returns:
            The new dataset id

        Raises:
            DatasetParseError; the collection is left untouched.
        """
        coefficient_points = parse_stallpoint_data(file_content)
        speed_points = convert_to_speed_data(coefficient_points, rho, s, m, speed_unit)

        dataset_id = f"dataset-{self._next_id}"
        dataset = Dataset(
            id=dataset_id,
            name=file_name,
            color=color or self.next_color(),
            coefficient_points=tuple(coefficient_points),
            speed_points=speed_points,
            params=(rho, s, m),
            speed_unit=speed_unit,
        )
        self._next_id += 1
        self._datasets[dataset_id] = dataset

        dprint(f"[DATASET] Added {dataset_id} ({file_name}) with {len(coefficient_points)} points")
        return dataset_id

    def update_color(self, dataset_id, color):
        dataset = self._datasets.get(dataset_id)
        if dataset:
            dataset.color = color

    def update_visibility(self, dataset_id, visible):
        dataset = self._datasets.get(dataset_id)
        if dataset:
            dataset.visible = bool(visible)

    def remove_dataset(self, dataset_id):
        self._datasets.pop(dataset_id, None)

    def get_dataset(self, dataset_id):
        return self._datasets.get(dataset_id)

    def get_all_datasets(self):
        return list(self._datasets.values())

    def get_visible_datasets(self):
        return [ds for ds in self._datasets.values() if ds.visible]

    def regenerate_all_speed_data(self, rho, s, m, speed_unit="mph"):
        """Re-derive every dataset's speeds for new parameters or display unit."""
        for dataset in self._datasets.values():
            self.regenerate_dataset_speed_data(dataset.id, rho, s, m, speed_unit)

    def regenerate_dataset_speed_data(self, dataset_id, rho, s, m, speed_unit="mph"):
        dataset = self._datasets.get(dataset_id)
        if dataset:
            dataset.speed_points = convert_to_speed_data(dataset.coefficient_points, rho, s, m, speed_unit)
            dataset.params = (rho, s, m)
            dataset.speed_unit = speed_unit
