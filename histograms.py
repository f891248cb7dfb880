"""Histogram container plus the normalization and cut helpers."""
from __future__ import annotations
from typing import Iterable
import numpy as np


class Histogram:
    """
    A 1D binned distribution (no under/overflow bins).

    edges   : (nbins + 1,) bin edges
    values  : (nbins,) bin contents
    entries : total number of fills, as stored with the histogram
    """

    def __init__(self, name: str, edges: Iterable[float], values: Iterable[float],
                 entries: float = 0.0, title: str = ""):
        self.name = name
        self.title = title
        self.edges = np.array(edges, dtype=np.float64)
        self.values = np.array(values, dtype=np.float64)
        self.entries = float(entries)
        self.normalized = False
        if self.edges.ndim != 1 or self.values.ndim != 1:
            raise ValueError(f"{name}: edges and values must be 1D")
        if len(self.edges) != len(self.values) + 1:
            raise ValueError(
                f"{name}: {len(self.edges)} edges do not match {len(self.values)} bins")

    def __repr__(self):
        return f"Histogram({self.name!r}, nbins={self.nbins}, entries={self.entries:g})"

    @property
    def nbins(self) -> int:
        return len(self.values)

    @property
    def centers(self) -> np.ndarray:
        return 0.5 * (self.edges[:-1] + self.edges[1:])

    def bin_center(self, i: int) -> float:
        return float(0.5 * (self.edges[i] + self.edges[i + 1]))

    def bin_content(self, i: int) -> float:
        return float(self.values[i])

    def set_bin_content(self, i: int, value: float):
        self.values[i] = value

    def scale(self, factor: float):
        """Multiply every bin by `factor`. Repeated calls compound."""
        self.values *= factor

    def copy(self) -> "Histogram":
        h = Histogram(self.name, self.edges, self.values, self.entries, self.title)
        h.normalized = self.normalized
        return h


def normalize(hist: Histogram, n_events: float, weight: float) -> bool:
    """
    Scale `hist` by 1 / (n_events * weight).

    Only done when both inputs are > 0 and the histogram has not been
    normalized yet; otherwise the contents are left as they are.
    Returns True when the histogram was scaled.
    """
    if hist.normalized:
        return False
    if n_events > 0 and weight > 0:
        hist.scale(1.0 / (n_events * weight))
        hist.normalized = True
        return True
    return False


def apply_cut(hist: Histogram, cut_value: float) -> int:
    """Zero every bin whose center is below `cut_value`. Returns the number of zeroed bins."""
    below = hist.centers < cut_value
    hist.values[below] = 0.0
    return int(np.count_nonzero(below))
