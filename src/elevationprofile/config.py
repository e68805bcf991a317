"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers scattered
   throughout the picking and sampling code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (models, icons) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    MODELS_PATH (str): Bundled sample models, the default "Open Model" folder.
    Sampling, elevation and curve constants used by the controllers.
"""
import sys
import os
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/elevationprofile/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
MODELS_PATH: str = os.path.join(ASSETS_PATH, "models")

# --- Line sampling ---
# Pick pairs closer than this are rejected as accidental double clicks.
MIN_PICK_DISTANCE: float = 0.1
# Lines at least this long are sampled with the coarse step.
LONG_LINE_THRESHOLD: float = 1.0
COARSE_STEP: float = 0.5
FINE_STEP: float = 0.2
COORDINATE_DECIMALS: int = 2
# Absorbs accumulated float error when comparing against half a step.
SAMPLING_TOLERANCE: float = 1e-9

# --- Elevation resolution ---
# Delay between finishing a line and probing elevations (0 = synchronous).
ELEVATION_RESOLVE_DELAY_MS: int = 500
# Vertical probes start on this plane.
PROBE_PLANE_Z: float = 0.0

# --- Scene tags ---
ELEVATION_CURVE_TAG: str = "elevation_curve"
PICK_LINE_TAG: str = "pick_line"
MODEL_TAG: str = "model"

# --- Curve rendering ---
CURVE_DIVISIONS_PER_SEGMENT: int = 16
CURVE_ALPHA: float = 0.5  # 0.5 = centripetal parameterization
CURVE_COLOR: str = "#d62728"
PICK_LINE_COLOR: str = "white"
