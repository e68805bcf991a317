"""Panel that stacks one elevation chart per completed profile."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import pyqtgraph as pg
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QScrollArea, QVBoxLayout, QWidget

from elevationprofile.controller.profile import profile_series
from elevationprofile.model.points import ElevationSample

logger = logging.getLogger(__name__)


class ProfilePanel(QScrollArea):
    """
    Chart sink for the profile pipeline.

    Every call to `show_profile` appends a new chart; earlier charts are kept until
    `clear` is called explicitly.
    """

    # Color cycle for successive profiles
    COLORS = [
        '#1f77b4',  # Blue
        '#ff7f0e',  # Orange
        '#2ca02c',  # Green
        '#d62728',  # Red
        '#9467bd',  # Purple
    ]

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        self._content = QWidget()
        self._layout = QVBoxLayout(self._content)
        self._layout.addStretch()
        self.setWidget(self._content)

        self._charts: list[pg.PlotWidget] = []

    def chart_count(self) -> int:
        return len(self._charts)

    def show_profile(self, samples: Sequence[ElevationSample]) -> pg.PlotWidget:
        """Create a new chart of distance vs. elevation for `samples`."""
        distance, elevation = profile_series(samples)

        plot_widget = pg.PlotWidget()
        plot_widget.setMinimumHeight(220)
        plot_widget.setBackground('w')
        plot_widget.showGrid(x=True, y=True, alpha=0.3)
        plot_widget.setLabel('bottom', 'Distance', color='black')
        plot_widget.setLabel('left', 'Elevation', color='black')
        plot_widget.setTitle(f'Elevation Profile #{len(self._charts) + 1}', color='black', size='12pt')
        for axis in ('bottom', 'left'):
            plot_widget.getAxis(axis).setPen('k')
            plot_widget.getAxis(axis).setTextPen('k')

        color = self.COLORS[len(self._charts) % len(self.COLORS)]
        plot_widget.plot(
            distance, elevation,
            pen=pg.mkPen(color=color, width=2),
            symbol='o',
            symbolSize=6,
            symbolBrush=color,
            symbolPen=None,
        )
        plot_widget.autoRange()

        # Keep the trailing stretch last
        self._layout.insertWidget(self._layout.count() - 1, plot_widget)
        self._charts.append(plot_widget)
        logger.info(f"Profile chart #{len(self._charts)} added ({len(samples)} samples).")
        return plot_widget

    def clear(self) -> None:
        for chart in self._charts:
            self._layout.removeWidget(chart)
            chart.deleteLater()
        self._charts.clear()
