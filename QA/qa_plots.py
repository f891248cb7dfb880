# qa_plots.py
# chart state for one histogram type: fresh plot for the first series, overlay for the rest
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.lines as mlines
import mplhep as hep

from histograms import Histogram

DEFAULT_STYLE = "CMS"
hep.style.use(DEFAULT_STYLE)

EMPTY = "Empty"
HAS_SERIES = "HasSeries"


def use_style(name: str):
    """Switch the mplhep style (CMS, ATLAS, ALICE, LHCb2, ROOT, ...)."""
    hep.style.use(name)


@dataclass(frozen=True)
class SeriesStyle:
    color: str
    linewidth: float = 1.0
    marker: Optional[str] = None
    markersize: float = 3.0


class PlotSession:
    """
    One chart being built up series by series.

    State Empty -> HasSeries on the first draw (new figure and axes);
    HasSeries -> HasSeries on every later draw (composited on the same axes).
    Each draw registers one legend entry, in call order.
    """

    def __init__(self, title: str, xlabel: str, ylabel: str, *, logy: bool = True,
                 grid: bool = False, annotation: Optional[str] = None,
                 figsize: Tuple[float, float] = (8, 6)):
        self.title = title
        self.xlabel = xlabel
        self.ylabel = ylabel
        self.logy = logy
        self.grid = grid
        self.annotation = annotation
        self.figsize = figsize
        self.fig = None
        self.ax = None
        self.state = EMPTY
        self.legend_labels: List[str] = []
        self._handles: List[mlines.Line2D] = []

    def _fresh(self):
        self.fig, self.ax = plt.subplots(figsize=self.figsize)
        if self.logy:
            self.ax.set_yscale("log")
        if self.grid:
            self.ax.grid(True, linestyle="--", alpha=0.6)
        self.state = HAS_SERIES

    def draw(self, hist: Histogram, label: str, style: SeriesStyle):
        if self.state == EMPTY:
            self._fresh()

        hep.histplot(hist.values, hist.edges, ax=self.ax, histtype="step", yerr=False,
                     color=style.color, linewidth=style.linewidth)
        if style.marker:
            self.ax.plot(hist.centers, hist.values, linestyle="none", marker=style.marker,
                         markersize=style.markersize, color=style.color)

        self._handles.append(mlines.Line2D([], [], color=style.color, linewidth=style.linewidth,
                                           marker=style.marker, markersize=style.markersize))
        self.legend_labels.append(label)

    def finalize(self, path) -> Optional[Path]:
        """Draw legend, annotation and titles, save to `path`, then reset to Empty."""
        if self.state == EMPTY:
            print(f"[WARN] Nothing drawn for '{self.title}', skipping {path}")
            return None

        ax = self.ax
        ax.legend(self._handles, self.legend_labels, ncol=2, loc="upper right",
                  frameon=True, framealpha=0.2, fontsize=10, handlelength=1.5,
                  columnspacing=1.0)
        if self.annotation:
            ax.text(0.67, 0.575, self.annotation, transform=ax.transAxes, fontsize=12)
        ax.set_title(self.title, fontsize=16)
        ax.set_xlabel(self.xlabel, loc="center")
        ax.set_ylabel(self.ylabel, loc="center")

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(path, bbox_inches="tight")
        self.reset()
        return path

    def reset(self):
        if self.fig is not None:
            plt.close(self.fig)
        self.fig = None
        self.ax = None
        self.state = EMPTY
        self.legend_labels = []
        self._handles = []
