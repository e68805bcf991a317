"""
Elevation Profile: pick two points on a 3D surface, get the terrain profile between them.
"""
__version__ = "0.1.0"
