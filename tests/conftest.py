from contextlib import contextmanager

import numpy as np
import pytest

from histograms import Histogram
from qa_config import EVENT_COUNT_HIST, RunConfig
from QA.qa_io import HistogramMissing, StoreUnavailable


class _MemRunFile:
    def __init__(self, run, hists):
        self.run = run
        self._hists = hists

    def get(self, name):
        if name not in self._hists:
            raise HistogramMissing(self.run, name, f"mem://{self.run}")
        return self._hists[name].copy()


class MemoryStore:
    """In-memory stand-in for RootStore/H5Store; runs not in `data` are unavailable."""

    def __init__(self, data):
        self.data = data
        self.opened = []
        self.closed = []

    @contextmanager
    def open(self, run):
        if run not in self.data:
            raise StoreUnavailable(run, f"mem://{run}", "no such run")
        self.opened.append(run)
        try:
            yield _MemRunFile(run, self.data[run])
        finally:
            self.closed.append(run)


def make_hist(name, values, edges=None, entries=None):
    values = np.asarray(values, dtype=float)
    if edges is None:
        edges = np.arange(len(values) + 1, dtype=float)
    if entries is None:
        entries = float(values.sum())
    return Histogram(name, edges, values, entries=entries)


def run_content(values, n_events, name="hClusterPt"):
    return {
        name: make_hist(name, values),
        EVENT_COUNT_HIST: make_hist(EVENT_COUNT_HIST, [n_events], entries=n_events),
    }


@pytest.fixture
def three_runs():
    return [
        RunConfig("A", "blue", 4),
        RunConfig("B", "red", 8),
        RunConfig("C", "black", 5),
    ]


@pytest.fixture
def memory_store():
    return MemoryStore({
        "A": run_content([8.0, 16.0, 32.0, 64.0], n_events=2),
        "B": run_content([1.0, 2.0, 3.0, 4.0], n_events=10),
        "C": run_content([5.0, 5.0, 5.0, 5.0], n_events=0),
    })
