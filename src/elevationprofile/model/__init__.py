"""
The MODEL layer contains pure data structures: points, rays and pick state.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
"""
