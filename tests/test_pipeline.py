import os

import numpy as np
import pytest

import main
from gdpcycles.config import SERIES_NAMES
from gdpcycles.data_loader import QuarterlyGDPLoader
from gdpcycles.synthetic import write_synthetic_csv


@pytest.fixture
def synthetic_file(tmp_path):
    fp = tmp_path / "gdp_quarterly.csv"
    write_synthetic_csv(fp, missing_periods=("1995-Q2",), n_quarters=124)
    return fp


def test_synthetic_file_round_trips_through_loader(synthetic_file) -> None:
    text = synthetic_file.read_text(encoding="utf-8").splitlines()
    assert text[0] == "period;Japan;South_Africa"
    assert "," in text[1].split(";")[1]

    df = QuarterlyGDPLoader(synthetic_file).load()
    assert len(df) == 123
    assert "1995-Q2" not in df["period"].tolist()
    assert df["period"].iloc[0] == "1994-Q1"


def test_run_pipeline_end_to_end(tmp_path, synthetic_file) -> None:
    out_dir = str(tmp_path / "out")
    result = main.run_pipeline(synthetic_file, out_dir=out_dir)

    assert len(result["data"]) == 123
    decomposed = result["decomposed"]
    for name in SERIES_NAMES:
        np.testing.assert_allclose(decomposed[f"{name}_trend"] + decomposed[f"{name}_cycle"],
                                   decomposed[f"{name}_log"], rtol=1e-9)

    summary = result["summary"]
    assert len(summary["rolling"][5]) == 119
    assert len(summary["rolling"][20]) == 104
    assert -1.0 <= summary["correlation"] <= 1.0
    assert summary["volatility"]["South_Africa"] > 0

    assert any(line.startswith("Contemporaneous correlation : ") for line in result["report"])
    assert len(result["stationarity"]) == 2
    for fp in result["files"]:
        assert os.path.exists(fp)
    assert os.path.exists(os.path.join(out_dir, "Rolling_Correlation_w5.png"))


def test_run_pipeline_lambda_zero_gives_zero_cycles(tmp_path, synthetic_file) -> None:
    # with no penalty the cycle vanishes and correlations are undefined
    from gdpcycles.errors import ZeroVariance
    with pytest.raises(ZeroVariance):
        main.run_pipeline(synthetic_file, lamb=0, out_dir=str(tmp_path / "out"), make_plots=False)


def test_main_cli_success(tmp_path, synthetic_file, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert main.main([str(synthetic_file), "--lambda", "1600"]) == 0
    assert (tmp_path / "outputs" / "Cycle_Summary.txt").exists()


def test_main_cli_reports_failures(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert main.main([str(tmp_path / "missing.csv")]) == 1

    bad = tmp_path / "bad.csv"
    bad.write_text("period;Japan;South_Africa\n2001Q1;1,0;2,0\n", encoding="utf-8")
    assert main.main([str(bad)]) == 1


def test_main_cli_rejects_invalid_lambda(tmp_path, synthetic_file, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert main.main([str(synthetic_file), "--lambda", "-5"]) == 1
    assert main.main([str(synthetic_file), "--lambda", "nan"]) == 1
    assert not (tmp_path / "outputs" / "Cycle_Summary.txt").exists()


def test_run_pipeline_four_quarters_halts_on_short_window(tmp_path) -> None:
    from gdpcycles.errors import WindowTooLarge
    fp = tmp_path / "four.csv"
    fp.write_text(
        "period;Japan;South_Africa\n"
        "2000-Q1;100,0;50,0\n"
        "2000-Q2;102,0;50,5\n"
        "2000-Q3;101,0;52,0\n"
        "2000-Q4;103,0;51,0\n",
        encoding="utf-8",
    )
    with pytest.raises(WindowTooLarge):
        main.run_pipeline(fp, out_dir=str(tmp_path / "out"), make_plots=False)
    assert main.main([str(fp)]) == 1
