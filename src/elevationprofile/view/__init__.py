"""
The VIEW layer: Qt windows and widgets (PySide6, pyvistaqt, pyqtgraph).
"""
