"""
Picking & Profiling Engine
==========================
Turns two clicks on a surface into an elevation profile.

Why is this package needed?
---------------------------
1. Picking: It maps screen clicks to world-space points on the surface.
2. Sampling: It marches along the picked line at an adaptive step.
3. Probing: It drops vertical rays to find the surface elevation under each
   sample and hands the result to the curve and chart builders.

Note: Apart from the Qt scheduling glue in `profile` and `workers`, these
modules only need PyVista/VTK and can run without a window.
"""
