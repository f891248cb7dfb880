import json

import h5py
import numpy as np
import pytest

from QA import overlay_plots, single_plots
from QA.qa_io import write_histogram_h5
from conftest import make_hist


@pytest.fixture
def qa_dir(tmp_path):
    """Two runs on disk in HDF5 layout; run 22979 has no file."""
    base = tmp_path / "rootOutput"
    for run, n_events in (("21813", 4), ("21796", 2)):
        path = base / run / "qa.h5"
        write_histogram_h5(path, make_hist("hClusterECore", [8.0, 8.0, 8.0, 8.0]))
        write_histogram_h5(path, make_hist("hNClusters", [1.0], entries=n_events))
    runs = tmp_path / "runs.json"
    runs.write_text(json.dumps([
        {"run": "21813", "color": "blue", "weight": 2},
        {"run": "22979", "color": "magenta", "weight": 5},
        {"run": "21796", "color": "orangered", "weight": 8},
    ]))
    return base, runs


def test_overlay_main(qa_dir, tmp_path):
    base, runs = qa_dir
    out = tmp_path / "out"
    export = tmp_path / "series.h5"
    rc = overlay_plots.main([
        "--input-dir", str(base), "--format", "h5", "--runs-file", str(runs),
        "--hist", "hClusterECore", "--output-dir", str(out), "--tag", "October",
        "--export-h5", str(export),
    ])
    assert rc == 0
    assert (out / "Overlayed_hClusterECore_QA_October.png").exists()
    with h5py.File(export, "r") as f:
        assert sorted(f["hClusterECore"].keys()) == ["21796", "21813"]
        np.testing.assert_array_equal(f["hClusterECore/21813/values"][:], [1.0] * 4)
        np.testing.assert_array_equal(f["hClusterECore/21796/values"][:], [0.5] * 4)


def test_overlay_main_bad_runs_file(tmp_path):
    bad = tmp_path / "runs.json"
    bad.write_text("{}")
    with pytest.raises(SystemExit):
        overlay_plots.main(["--runs-file", str(bad)])


def test_overlay_main_unknown_histogram(tmp_path):
    with pytest.raises(SystemExit):
        overlay_plots.main(["--hist", "hNope", "--input-dir", str(tmp_path)])


def test_single_main_with_cut_args(qa_dir, tmp_path):
    base, runs = qa_dir
    out = tmp_path / "single"
    rc = single_plots.main([
        "--input-dir", str(base), "--format", "h5", "--runs-file", str(runs),
        "--hist", "hClusterECore", "--output-dir", str(out),
        "--cut", "2.0", "--cut-hists", "hClusterECore",
    ])
    assert rc == 0
    assert sorted(p.name for p in (out / "ECore").iterdir()) == [
        "hClusterECore_Run_21796.png", "hClusterECore_Run_21813.png",
    ]


def test_single_main_prompts_when_no_cut_given(qa_dir, tmp_path, capsys):
    base, runs = qa_dir
    answers = iter(["yes", "3", "1.0"])
    rc = single_plots.main(
        ["--input-dir", str(base), "--format", "h5", "--runs-file", str(runs),
         "--hist", "hClusterECore", "--output-dir", str(tmp_path / "s")],
        input_fn=lambda prompt="": next(answers),
    )
    assert rc == 0
    assert "Cut at 1 GeV for hClusterECore" in capsys.readouterr().out


def test_single_main_no_prompt(qa_dir, tmp_path):
    base, runs = qa_dir

    def _fail(prompt=""):
        raise AssertionError("should not prompt")

    rc = single_plots.main(
        ["--input-dir", str(base), "--format", "h5", "--runs-file", str(runs),
         "--hist", "hClusterECore", "--output-dir", str(tmp_path / "s"), "--no-prompt"],
        input_fn=_fail,
    )
    assert rc == 0


def test_single_main_cut_needs_histograms(tmp_path):
    with pytest.raises(SystemExit) as exc:
        single_plots.main(["--cut", "1.0", "--input-dir", str(tmp_path)])
    assert exc.value.code == 2


def test_single_main_cut_hists_need_cut(tmp_path):
    with pytest.raises(SystemExit) as exc:
        single_plots.main(["--cut-hists", "hClusterPt", "--input-dir", str(tmp_path)])
    assert exc.value.code == 2


def test_single_main_checks_arguments_before_prompting(tmp_path):
    def _fail(prompt=""):
        raise AssertionError("should not prompt")

    with pytest.raises(SystemExit):
        single_plots.main(["--hist", "hNope", "--input-dir", str(tmp_path)], input_fn=_fail)
