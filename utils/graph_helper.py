from typing import List, Sequence, Tuple

import pyqtgraph as pg

from app.state import TelemetrySample


def telemetry_series(samples: Sequence[TelemetrySample]) -> Tuple[List[int], List[int], List[int]]:
    secs = [s.sec for s in samples]
    return secs, [s.wpm for s in samples], [s.raw for s in samples]


def setup_telemetry_plot(plot_widget: pg.PlotWidget, wpm_color: str, raw_color: str):
    """Static per-second chart with raw WPM drawn under net WPM; returns (wpm_curve, raw_curve)."""
    plot_widget.setBackground(None)
    plot_widget.setMenuEnabled(False)
    plot_widget.setMouseEnabled(x=False, y=False)
    plot_widget.hideButtons()
    plot_widget.showGrid(x=True, y=True, alpha=0.1)
    plot_widget.setLabel('left', 'WPM')
    plot_widget.setLabel('bottom', 'second')
    plot_widget.enableAutoRange(axis='y')
    raw_curve = plot_widget.plot(
        [], [], pen=pg.mkPen(raw_color, width=1.5, style=pg.QtCore.Qt.PenStyle.DashLine), name='raw'
    )
    wpm_curve = plot_widget.plot(
        [], [], pen=pg.mkPen(wpm_color, width=2.5), symbol='o', symbolSize=4, name='wpm'
    )
    return wpm_curve, raw_curve


def update_curves(wpm_curve, raw_curve, samples: Sequence[TelemetrySample]):
    secs, wpm, raw = telemetry_series(samples)
    wpm_curve.setData(secs, wpm)
    raw_curve.setData(secs, raw)
