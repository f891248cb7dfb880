"""Run table and histogram catalog for the EMCal QA plots."""
from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class RunConfig:
    run: str
    color: str     # matplotlib color name
    weight: int    # SEB (sub event buffer) count used as divisor


@dataclass(frozen=True)
class HistogramSpec:
    name: str
    title: str
    xlabel: str
    ylabel: str = "Counts"
    subdir: str = ""     # per-run output folder


# (Run Number, Color, SEB Count)
DEFAULT_RUNS: Tuple[RunConfig, ...] = (
    RunConfig("21813", "blue", 7),
    RunConfig("21796", "orangered", 8),
    RunConfig("21615", "black", 8),
    RunConfig("21599", "navy", 8),
    RunConfig("21598", "red", 8),
    RunConfig("21891", "teal", 7),
    RunConfig("22979", "magenta", 5),
    RunConfig("22950", "blueviolet", 5),
    RunConfig("22949", "darkmagenta", 5),
    RunConfig("22951", "steelblue", 5),
    RunConfig("22982", "dodgerblue", 5),
    RunConfig("21518", "palevioletred", 8),
    RunConfig("21520", "orange", 8),
    RunConfig("21889", "gray", 7),
)

DEFAULT_HISTOGRAMS: Tuple[HistogramSpec, ...] = (
    HistogramSpec("hClusterChi", r"Cluster $\chi^{2}$ Distribution",
                  r"Cluster $\chi^{2}$", subdir="Cluster_Chi"),
    HistogramSpec("hTotalMBD", "MBD Charge Distribution",
                  "MBD Charge", subdir="MBD_charge"),
    HistogramSpec("hClusterPt", r"Cluster $p_{T}$ Good Runs Distribution",
                  r"Cluster $p_{T}$ (GeV)", subdir="Cluster_pt"),
    HistogramSpec("hTotalCaloE", "Total Calorimeter Energy Distribution",
                  "Cluster Energy (GeV)", subdir="Total_Calo_Energy"),
    HistogramSpec("hClusterECore", "Cluster ECore Distribution",
                  "Cluster ECore (GeV)", subdir="ECore"),
)

# menu order shown when asking which histograms get the energy cut
CUT_OPTIONS: Tuple[str, ...] = (
    "hClusterChi", "hClusterPt", "hClusterECore", "hTotalCaloE", "hTotalMBD",
)

# filled once per event, so its entries are the event count
EVENT_COUNT_HIST = "hNClusters"


def load_run_table(path) -> List[RunConfig]:
    """
    Read a run table from JSON.

    The file holds a list of objects with keys "run", "color" and "weight";
    order in the file is the plotting (and legend) order.
    """
    with open(path, "r") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a list of run entries")

    runs: List[RunConfig] = []
    seen = set()
    for i, row in enumerate(rows):
        for k in ("run", "color", "weight"):
            if k not in row:
                raise ValueError(f"{path}: entry {i} missing key '{k}'")
        run = str(row["run"])
        weight = row["weight"]
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise ValueError(f"{path}: run {run} weight must be an integer, got {weight!r}")
        if run in seen:
            raise ValueError(f"{path}: duplicate run {run}")
        if weight <= 0:
            print(f"[WARN] run {run} has weight {weight}; it will not be normalized")
        seen.add(run)
        runs.append(RunConfig(run, str(row["color"]), weight))
    return runs


def select_histograms(names: Iterable[str] | None) -> List[HistogramSpec]:
    """Catalog entries for `names` (catalog order); all of them when names is empty."""
    if not names:
        return list(DEFAULT_HISTOGRAMS)
    wanted = set(names)
    known = {h.name for h in DEFAULT_HISTOGRAMS}
    unknown = sorted(wanted - known)
    if unknown:
        raise ValueError(f"Unknown histogram(s) {unknown}. Known: {sorted(known)}")
    return [h for h in DEFAULT_HISTOGRAMS if h.name in wanted]
