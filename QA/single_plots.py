#!/usr/bin/env python3
"""
single_plots.py

One plot per run and histogram, with an optional minimum-value cut.

Without --cut (and without --no-prompt) the cut is asked for on the console:
yes/no, which histograms, then the value in GeV.
Outputs: <output-dir>/<subdir>/<histogram>_Run_<run>.png

Usage:
  python -m QA.single_plots --input-dir rootOutput --cut 0.5 --cut-hists hClusterECore hTotalCaloE
"""
from __future__ import annotations
import argparse

from qa_config import CUT_OPTIONS
from .composer import RunComposer
from .overlay_plots import add_common_args, load_runs, resolve_histograms
from .prompts import cut_config_from_args, interactive_cut_config
from .qa_io import make_store
from .qa_plots import use_style


def main(argv=None, input_fn=input):
    ap = argparse.ArgumentParser(description="Per-run QA histogram plots")
    add_common_args(ap)
    ap.add_argument("--output-dir", default="outputs/Individual_Plot_Output")
    ap.add_argument("--cut", type=float, default=None,
                    help="Zero bins centred below this value (GeV)")
    ap.add_argument("--cut-hists", nargs="+", default=None, choices=list(CUT_OPTIONS),
                    help="Histograms the cut applies to")
    ap.add_argument("--no-prompt", action="store_true",
                    help="Never ask on the console; no cut unless --cut is given")
    args = ap.parse_args(argv)

    if args.cut is not None and not args.cut_hists:
        ap.error("--cut needs --cut-hists")
    if args.cut_hists and args.cut is None:
        ap.error("--cut-hists needs --cut")

    runs = load_runs(args.runs_file)
    specs = resolve_histograms(args.hist)

    if args.cut is not None or args.no_prompt:
        cut = cut_config_from_args(args)
    else:
        cut = interactive_cut_config(CUT_OPTIONS, input_fn)
    if cut.enabled:
        print(f"[INFO] Cut at {cut.value:g} GeV for {', '.join(cut.histograms)}")
    else:
        print("[INFO] No energy cut")

    use_style(args.style)
    store = make_store(args.format, args.input_dir)
    composer = RunComposer(runs, store, normalize=not args.no_normalize, cut=cut)

    n_saved = 0
    for spec in specs:
        n_saved += len(composer.plot_each(spec, args.output_dir))
    print(f"[OK] {n_saved} plots written under {args.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
