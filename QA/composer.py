# composer.py
# per-run loading, normalization and cut, then overlay / per-run rendering
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from histograms import Histogram, apply_cut, normalize
from qa_config import EVENT_COUNT_HIST, HistogramSpec, RunConfig
from .qa_io import QAStoreError
from .qa_plots import PlotSession, SeriesStyle

ANNOTATION = "sPHENIX EMCal QA"


@dataclass(frozen=True)
class CutConfig:
    """Minimum-value cut: bins centred below `value` are zeroed for the listed histograms."""
    enabled: bool = False
    value: float = 0.0
    histograms: Tuple[str, ...] = ()

    def applies_to(self, hist_name: str) -> bool:
        return self.enabled and hist_name in self.histograms


@dataclass
class OverlayResult:
    path: Optional[Path]
    labels: List[str] = field(default_factory=list)
    series: List[Tuple[RunConfig, Histogram]] = field(default_factory=list)


def overlay_output_path(out_dir, hist_name: str, tag: str = "") -> Path:
    suffix = f"_{tag}" if tag else ""
    return Path(out_dir) / f"Overlayed_{hist_name}_QA{suffix}.png"


def single_output_path(out_dir, spec: HistogramSpec, run: str) -> Path:
    return Path(out_dir) / spec.subdir / f"{spec.name}_Run_{run}.png"


class RunComposer:
    """
    Loads one histogram per run from `store`, normalizes it by
    1 / (nEvents * weight) and applies the optional cut, then draws the runs
    either overlaid on one chart or one chart per run.

    `runs` is the ordered run table; it fixes processing and legend order.
    """

    def __init__(self, runs: Sequence[RunConfig], store, normalize: bool = True,
                 cut: Optional[CutConfig] = None, event_count_hist: str = EVENT_COUNT_HIST):
        self.runs = list(runs)
        self.store = store
        self.normalize = normalize
        self.cut = cut or CutConfig()
        self.event_count_hist = event_count_hist

    def load_run(self, run_cfg: RunConfig, hist_name: str) -> Optional[Histogram]:
        """Histogram for one run, ready to draw; None when the run has to be skipped."""
        run = run_cfg.run
        try:
            with self.store.open(run) as f:
                hist = f.get(hist_name)
                h_events = f.get(self.event_count_hist)
        except QAStoreError as e:
            print(f"[WARN] Skipping run {run}: {e}")
            return None

        if self.normalize:
            n_events = h_events.entries
            if normalize(hist, n_events, run_cfg.weight):
                print(f"[run {run}] normalized using nEvents={n_events:g} and SEB count={run_cfg.weight}")
            else:
                print(f"[run {run}] not normalized (nEvents={n_events:g}, SEB count={run_cfg.weight})")
        else:
            print(f"[run {run}] no normalization applied")

        if self.cut.applies_to(hist_name):
            n_zeroed = apply_cut(hist, self.cut.value)
            print(f"[run {run}] cut applied: {n_zeroed} bins below {self.cut.value:g} zeroed")
        return hist

    def overlay(self, spec: HistogramSpec, out_path, annotation: Optional[str] = ANNOTATION) -> OverlayResult:
        """All runs on one chart; the first run that loads is drawn fresh, the rest on top."""
        print(f"[INFO] Overlaying {spec.name} for {len(self.runs)} runs")
        session = PlotSession(spec.title, spec.xlabel, spec.ylabel, logy=True, grid=True,
                              annotation=annotation)
        result = OverlayResult(path=None)
        for run_cfg in self.runs:
            hist = self.load_run(run_cfg, spec.name)
            if hist is None:
                continue
            session.draw(hist, f"Run: {run_cfg.run}", SeriesStyle(color=run_cfg.color, linewidth=1.0))
            result.series.append((run_cfg, hist))

        result.labels = list(session.legend_labels)
        result.path = session.finalize(out_path)
        if result.path is not None:
            print(f"[OK] {spec.name}: {len(result.series)}/{len(self.runs)} runs -> {result.path}")
        return result

    def plot_each(self, spec: HistogramSpec, out_dir) -> List[Path]:
        """One chart per run, written to <out_dir>/<subdir>/<name>_Run_<run>.png."""
        print(f"[INFO] Start plotting for histogram: {spec.name}")
        saved: List[Path] = []
        for run_cfg in self.runs:
            print(f"[run {run_cfg.run}] processing (SEB count {run_cfg.weight})")
            hist = self.load_run(run_cfg, spec.name)
            if hist is None:
                continue
            session = PlotSession(f"{spec.title} (Run: {run_cfg.run})", spec.xlabel, spec.ylabel,
                                  logy=True)
            session.draw(hist, f"Run: {run_cfg.run}", SeriesStyle(color=run_cfg.color, linewidth=2.0))
            path = session.finalize(single_output_path(out_dir, spec, run_cfg.run))
            print(f"[OK] Saved {spec.name} for run {run_cfg.run} at {path}")
            saved.append(path)
        print(f"[INFO] Completed plotting for histogram: {spec.name} ({len(saved)} plots)")
        return saved
