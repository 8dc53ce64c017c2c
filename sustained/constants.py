# sustained/constants.py

"""
Application-wide constants for the Sustained Speed Chart.
Physics constants are in calculations.py - this file is for app config constants.
"""

# =============================================================================
# DEBUG SETTINGS
# =============================================================================
DEBUG_LOG = False  # app.py flips this on from SSCHART_DEBUG

# =============================================================================
# DEFAULT VALUES
# =============================================================================
DEFAULT_RHO = 1.0     # kg/m^3
DEFAULT_S = 2.0       # m^2
DEFAULT_M = 70.0      # kg
DEFAULT_COEFF_TYPE = "c"       # "c" = CL/CD, "k" = KL/KD
DEFAULT_SPEED_UNIT = "mph"     # "mph" or "mps"
DEFAULT_AXIS_PRESET = "default"
DEFAULT_INTERPOLATION = "linear"

COEFF_TYPES = ("c", "k")
SPEED_UNITS = ("mph", "mps")

# =============================================================================
# CHART RANGES (display units)
# =============================================================================
SPEED_RANGE = 150     # speed axes run -150..+150
COEFF_RANGE = 1.0     # C-coefficient axes run -1..+1
EXTENDED_RANGE = 10   # canopy-flight coefficient envelope

# =============================================================================
# GRID SETTINGS
# =============================================================================
SPEED_GRID_STEP = 30
SPEED_SAMPLE_STEP = 5
INNER_SPEED_LINES = [-20, -10, 10, 20]

COEFF_GRID_STEP = 0.2
COEFF_SAMPLE_STEP = 0.05
OUTER_EXTENSION_START = 0.95
EXTENDED_SAMPLE_STEP = 0.1
EXTENDED_LABEL_CHECKPOINTS = (1, 5, 10)

GLIDE_RATIOS = [1, 2, 3]

# =============================================================================
# RENDER SETTINGS
# =============================================================================
DEFAULT_CANVAS_WIDTH = 1000   # pixels
DEFAULT_CANVAS_HEIGHT = 700   # pixels
VIEWPORT_MARGIN = 0.5         # fraction of canvas width kept around the viewport
LABEL_OFFSET_PX = 15
TANGENT_STEP = 3              # samples back/forward for tangent estimation
DATASET_MARKER_SIZE = 8
LINE_OPACITY = 0.6
DATASET_LINE_OPACITY = 0.8

# =============================================================================
# ANIMATION SETTINGS
# =============================================================================
ANIMATION_DURATION_MS = 6000
FRAME_INTERVAL_MS = 50

ZOOM_MAX_SCALE = 3.0
ZOOM_PADDING = 0.15
# Quadrant of interest (descending forward flight) when no dataset is loaded
DEFAULT_ZOOM_BOUNDS = {
    "speed": (0, 0, 150, 150),   # vxs_min, vys_min, vxs_max, vys_max
    "coeff": (0, 0, 1, 1),       # cd_min, cl_min, cd_max, cl_max
}

# =============================================================================
# STYLING CONSTANTS
# =============================================================================
COLORS = {
    "lift": "#9b59b6",
    "drag": "#27ae60",
    "horizontal": "#3498db",
    "vertical": "#e74c3c",
    "inner_speed": "#95a5a6",
    "glide1": "#e74c3c",
    "glide2": "#f39c12",
    "glide3": "#27ae60",
    "background": "#ffffff",
    "legend": "#000000",
}

AXIS_COLOR = "#666666"

VISIBILITY = {
    "show_lift": True,
    "show_drag": True,
    "show_horizontal": True,
    "show_vertical": True,
    "show_inner_speed_grid": False,
    "show_glide": True,
    "show_inner_coeff_labels": True,
    "show_outer_coeff_labels": True,
    "show_speed_labels": True,
    "show_glide_labels": True,
}

DATASET_COLORS = ["#ff0000", "#0000ff", "#ff8c00", "#008b8b", "#8b008b", "#556b2f"]
