#!/usr/bin/env python3
"""
overlay_plots.py

Overlay the EMCal QA histograms of several runs on one chart per histogram.

Each run is read from <input-dir>/<run>/qa.root (or qa.h5 with --format h5),
scaled by 1 / (nEvents * SEB count) where nEvents is the number of entries of
hNClusters, and drawn with the run's color. Outputs (in --output-dir):
  - Overlayed_<histogram>_QA[_<tag>].png
  - optionally an HDF5 file with the plotted series (--export-h5)

Usage:
  python -m QA.overlay_plots --input-dir rootOutput --tag October
"""
from __future__ import annotations
import argparse
from typing import List

from qa_config import DEFAULT_RUNS, RunConfig, load_run_table, select_histograms
from .composer import RunComposer, overlay_output_path
from .qa_io import make_store, write_overlay_h5
from .qa_plots import DEFAULT_STYLE, use_style


def add_common_args(ap: argparse.ArgumentParser):
    ap.add_argument("--input-dir", default="rootOutput",
                    help="Folder with one sub-folder per run holding the QA output file")
    ap.add_argument("--format", default="root", choices=["root", "h5"],
                    help="root: <run>/qa.root read with uproot; h5: <run>/qa.h5")
    ap.add_argument("--runs-file", default=None,
                    help="JSON list of {run, color, weight}; default is the built-in run table")
    ap.add_argument("--hist", action="append", default=None,
                    help="Histogram to plot (repeatable); default: all QA histograms")
    ap.add_argument("--no-normalize", action="store_true",
                    help="Plot raw counts instead of 1/(nEvents*SEB) scaled counts")
    ap.add_argument("--style", default=DEFAULT_STYLE,
                    help="mplhep style name")


def load_runs(runs_file) -> List[RunConfig]:
    if runs_file is None:
        return list(DEFAULT_RUNS)
    try:
        return load_run_table(runs_file)
    except (OSError, ValueError) as e:
        raise SystemExit(f"Invalid --runs-file: {e}")


def resolve_histograms(names):
    try:
        return select_histograms(names)
    except ValueError as e:
        raise SystemExit(str(e))


def main(argv=None):
    ap = argparse.ArgumentParser(description="Overlay QA histograms from several runs")
    add_common_args(ap)
    ap.add_argument("--output-dir", default="outputs/OverlayedPlotOutput")
    ap.add_argument("--tag", default="", help="Suffix for output names, e.g. October")
    ap.add_argument("--export-h5", default=None,
                    help="Also write the plotted series to this HDF5 file")
    args = ap.parse_args(argv)

    use_style(args.style)
    runs = load_runs(args.runs_file)
    specs = resolve_histograms(args.hist)
    store = make_store(args.format, args.input_dir)
    composer = RunComposer(runs, store, normalize=not args.no_normalize)

    print(f"[INFO] {len(runs)} runs, {len(specs)} histograms, input={args.input_dir} ({args.format})")
    series = {}
    for spec in specs:
        res = composer.overlay(spec, overlay_output_path(args.output_dir, spec.name, args.tag))
        series[spec.name] = res.series

    if args.export_h5:
        write_overlay_h5(args.export_h5, series)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
