# qa_io.py
# per-run histogram stores (ROOT / HDF5) and HDF5 export of the plotted series
from __future__ import annotations
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Tuple

import h5py
import hdf5plugin  # noqa: F401  (enables common HDF5 compressions)
import numpy as np
import uproot

from histograms import Histogram
from qa_config import RunConfig


class QAStoreError(Exception):
    """Base class for per-run lookup failures."""


class StoreUnavailable(QAStoreError):
    """The run's result file is missing or cannot be read."""

    def __init__(self, run: str, path, reason: str = ""):
        self.run = run
        self.path = str(path)
        self.reason = reason
        msg = f"run {run}: cannot open {self.path}"
        super().__init__(f"{msg} ({reason})" if reason else msg)


class HistogramMissing(QAStoreError, KeyError):
    """A named histogram is absent from an otherwise readable run file."""

    def __init__(self, run: str, name: str, path):
        self.run = run
        self.name = name
        self.path = str(path)
        super().__init__(f"run {run}: histogram '{name}' not found in {self.path}")

    def __str__(self):
        return Exception.__str__(self)


# ----------------------------------------------------------------------
# ROOT files (qa.root written by the QA module), read with uproot
# ----------------------------------------------------------------------
class _RootRunFile:
    def __init__(self, run: str, path: Path, f):
        self.run = run
        self.path = path
        self._f = f

    def get(self, name: str) -> Histogram:
        try:
            obj = self._f[name]
        except KeyError:
            raise HistogramMissing(self.run, name, self.path) from None
        except uproot.DeserializationError as e:
            raise StoreUnavailable(self.run, self.path, f"corrupt object '{name}': {e}") from e
        if not obj.classname.startswith("TH1"):
            raise HistogramMissing(self.run, name, self.path)
        try:
            values, edges = obj.to_numpy(flow=False)
            entries = obj.member("fEntries")
            return Histogram(name, edges, values, entries=entries, title=obj.member("fTitle"))
        except (ValueError, OSError, uproot.DeserializationError) as e:
            raise StoreUnavailable(self.run, self.path, f"corrupt histogram '{name}': {e}") from e


class RootStore:
    """Per-run ROOT files laid out as <base_dir>/<run>/<filename>."""

    def __init__(self, base_dir, filename: str = "qa.root"):
        self.base_dir = Path(base_dir)
        self.filename = filename

    def path_for(self, run: str) -> Path:
        return self.base_dir / run / self.filename

    @contextmanager
    def open(self, run: str):
        path = self.path_for(run)
        try:
            f = uproot.open(path)
        except (OSError, ValueError, uproot.DeserializationError) as e:
            raise StoreUnavailable(run, path, str(e)) from e
        try:
            yield _RootRunFile(run, path, f)
        finally:
            f.close()


# ----------------------------------------------------------------------
# HDF5 files: one group per histogram with 'values', 'edges', attr 'entries'
# ----------------------------------------------------------------------
class _H5RunFile:
    def __init__(self, run: str, path: Path, f: h5py.File):
        self.run = run
        self.path = path
        self._f = f

    def get(self, name: str) -> Histogram:
        if name not in self._f:
            raise HistogramMissing(self.run, name, self.path)
        g = self._f[name]
        if not isinstance(g, h5py.Group) or "values" not in g or "edges" not in g:
            raise HistogramMissing(self.run, name, self.path)
        try:
            values = g["values"][:]
            edges = g["edges"][:]
            entries = g.attrs.get("entries", float(np.sum(values)))
            title = g.attrs.get("title", "")
            if isinstance(title, bytes):
                title = title.decode()
            return Histogram(name, edges, values, entries=entries, title=str(title))
        except (ValueError, OSError) as e:
            raise StoreUnavailable(self.run, self.path, f"corrupt histogram '{name}': {e}") from e


class H5Store:
    """Per-run HDF5 files laid out as <base_dir>/<run>/<filename>."""

    def __init__(self, base_dir, filename: str = "qa.h5"):
        self.base_dir = Path(base_dir)
        self.filename = filename

    def path_for(self, run: str) -> Path:
        return self.base_dir / run / self.filename

    @contextmanager
    def open(self, run: str):
        path = self.path_for(run)
        try:
            f = h5py.File(path, "r")
        except OSError as e:
            raise StoreUnavailable(run, path, str(e)) from e
        try:
            yield _H5RunFile(run, path, f)
        finally:
            f.close()


def make_store(fmt: str, base_dir):
    if fmt == "root":
        return RootStore(base_dir)
    if fmt == "h5":
        return H5Store(base_dir)
    raise ValueError(f"Unknown store format '{fmt}' (expected 'root' or 'h5')")


def write_histogram_h5(path, hist: Histogram, mode: str = "a") -> None:
    """Write one histogram into an HDF5 run file (group layout read by H5Store); used by the tests."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with h5py.File(path, mode) as f:
        if hist.name in f:
            del f[hist.name]
        g = f.create_group(hist.name)
        g.create_dataset("values", data=hist.values)
        g.create_dataset("edges", data=hist.edges)
        g.attrs["entries"] = hist.entries
        g.attrs["title"] = hist.title


def write_overlay_h5(out_path, series: Dict[str, List[Tuple[RunConfig, Histogram]]]) -> None:
    """Write the plotted (normalized/cut) series as /<histogram>/<run>/{values,edges}."""
    os.makedirs(os.path.dirname(os.path.abspath(out_path)), exist_ok=True)
    with h5py.File(out_path, "w") as f:
        for hist_name, rows in series.items():
            grp = f.create_group(hist_name)
            for run_cfg, h in rows:
                g = grp.create_group(run_cfg.run)
                g.create_dataset("values", data=h.values)
                g.create_dataset("edges", data=h.edges)
                g.attrs["entries"] = h.entries
                g.attrs["weight"] = run_cfg.weight
                g.attrs["normalized"] = h.normalized
    print(f"[OK] Series saved to {out_path}")
