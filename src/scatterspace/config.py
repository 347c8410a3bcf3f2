"""
Configuration & Global Constants
================================
This module serves as the central registry for the defaults shared by the
table, the instance builder and the spatial queries.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (probe radius, default glyph size)
   scattered throughout the code.
2. Consistency: Plots, the probe and the selection dispatch must agree on the
   same slot name and the same defaults.

Exports:
    DEFAULT_COLOR (tuple): RGB used when a plot has no color data.
    DEFAULT_SCALE (tuple): Per-axis glyph scale used when a plot has no scale data.
    PROBE_CUTOFF (float): Maximum render-space distance for a probe hit.
    BRUSH_SLOT (str): Selection slot written by spatial selections.
"""
import numpy as np

# Instance defaults
DEFAULT_COLOR: tuple[float, float, float] = (1.0, 1.0, 1.0)
DEFAULT_SCALE: tuple[float, float, float] = (0.05, 0.05, 0.05)

# Domain defaults (data space and render space both span a unit cube)
DEFAULT_INPUT_MIN: tuple[float, float, float] = (-0.5, -0.5, -0.5)
DEFAULT_INPUT_MAX: tuple[float, float, float] = (0.5, 0.5, 0.5)
DEFAULT_OUTPUT_MIN: tuple[float, float, float] = (-0.5, -0.5, -0.5)
DEFAULT_OUTPUT_MAX: tuple[float, float, float] = (0.5, 0.5, 0.5)
DEFAULT_AXIS_TITLES: tuple[str, str, str] = ("x", "y", "z")

# Input bounds closer than this are treated as unchanged
BOUNDS_EPSILON: float = float(np.finfo(np.float32).eps)

# Spatial queries
PROBE_CUTOFF: float = 0.15
BRUSH_SLOT: str = "brushed"
HULL_RAY_LENGTH: float = 1e6
