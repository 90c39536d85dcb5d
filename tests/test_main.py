"""End-to-end tests for the command-line runner."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import matplotlib.image as mpimg
import pandas as pd
import pytest

from hare_analysis.analysis import two_sample_test
from hare_analysis.config import cfg
from hare_analysis.main import main, run_pipeline, save_json
from hare_analysis.results import CorrelationResult
from hare_analysis.viz import create_weight_hindft_plot


def test_main_writes_tables_and_results(hares_csv: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    code = main(["--input_file", str(hares_csv), "--output_dir", str(out_dir), "--skip_plots"])

    assert code == 0
    data_dir = out_dir / "data"
    counts = pd.read_csv(data_dir / "juvenile_annual_counts.csv")
    assert counts["year"].tolist() == [1998, 1999, 2002]
    assert counts["count"].tolist() == [4, 2, 2]

    by_sex = pd.read_csv(data_dir / "juvenile_weight_by_sex.csv")
    assert by_sex["sex"].tolist() == ["Female", "Male", "Undetermined"]

    test = json.loads((data_dir / "juvenile_weight_welch_test.json").read_text(encoding="utf-8"))
    assert test["n_a"] == 4
    assert test["n_b"] == 3
    assert "significant" in test

    fit = json.loads((data_dir / "juvenile_weight_hindft_fit.json").read_text(encoding="utf-8"))
    assert fit["n"] == 7
    assert not (out_dir / "figures").exists()


def test_main_alpha_flag_sets_significance_level(hares_csv: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    code = main(["--input_file", str(hares_csv), "--output_dir", str(out_dir),
                 "--alpha", "0.5", "--skip_plots"])

    assert code == 0
    test = json.loads((out_dir / "data" / "juvenile_weight_welch_test.json").read_text(encoding="utf-8"))
    assert test["alpha"] == 0.5


def test_main_returns_error_code_for_missing_input(tmp_path: Path) -> None:
    code = main(["--input_file", str(tmp_path / "missing.csv"), "--output_dir", str(tmp_path / "out")])
    assert code == 1


def test_run_pipeline_renders_figures(hares_csv: Path, tmp_path: Path) -> None:
    results = run_pipeline(hares_csv, tmp_path / "report")

    figures = results["figures"]
    assert set(figures) == {"annual_counts", "weight_by_sex_site", "weight_hindft"}
    for path in figures.values():
        assert path is not None
        assert Path(path).exists()


def test_run_pipeline_renders_figures_with_given_config(hares_csv: Path, tmp_path: Path) -> None:
    config = replace(cfg, plot_dpi=20)
    results = run_pipeline(hares_csv, tmp_path / "report", config)

    for path in results["figures"].values():
        height, width = mpimg.imread(path).shape[:2]
        assert width < 400
        assert height < 400


def test_regression_plot_uses_configured_columns(tmp_path: Path) -> None:
    df = pd.DataFrame({"weight": [900.0, 1000.0, 1100.0], "hindft": [115.0, 120.0, 125.0]})

    assert create_weight_hindft_plot(df, None, tmp_path / "default.png") is not None
    config = replace(cfg, regression_predictor="l_ear")
    assert create_weight_hindft_plot(df, None, tmp_path / "ear.png", config) is None
    assert not (tmp_path / "ear.png").exists()


def test_save_json_writes_null_for_undefined_numbers(tmp_path: Path) -> None:
    result = two_sample_test([3.0, 3.0], [3.0, 3.0, 3.0])
    path = save_json(result, "constant", tmp_path)

    text = Path(path).read_text(encoding="utf-8")
    assert "NaN" not in text
    payload = json.loads(text)
    assert payload["df"] is None
    assert payload["p_value"] == 1.0


def test_save_json_skips_undefined_result(tmp_path: Path) -> None:
    assert save_json(None, "nothing", tmp_path) is None
    assert list(tmp_path.iterdir()) == []


def test_save_json_serializes_result_record(tmp_path: Path) -> None:
    path = save_json(CorrelationResult(r=0.5, p_value=0.01, n=12), "corr", tmp_path)
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    assert payload == {"r": 0.5, "p_value": 0.01, "n": 12}


@pytest.mark.parametrize("flag", ["--help"])
def test_cli_help_exits_cleanly(flag: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([flag])
    assert excinfo.value.code == 0
