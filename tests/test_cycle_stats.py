import numpy as np
import pandas as pd
import pytest

from gdpcycles.cycle_stats import (
    contemporaneous_correlation, cross_correlation_table, lag1_autocorrelation,
    pearson_correlation, relative_volatility, rolling_correlation, summarize_cycles,
    volatility,
)
from gdpcycles.errors import InsufficientData, InvalidWindow, WindowTooLarge, ZeroVariance
from gdpcycles.filters import hp_filter


def _cycles(n=123, seed=7):
    rng = np.random.default_rng(seed)
    return rng.standard_normal(n) * 0.01, rng.standard_normal(n) * 0.02


def test_volatility_is_sample_std_times_100() -> None:
    c = np.array([1.0, 2.0, 3.0, 4.0])
    assert volatility(c) == pytest.approx(np.std(c, ddof=1) * 100)
    assert volatility(c) == pytest.approx(129.0994449, rel=1e-9)


@pytest.mark.parametrize("level", [0.5, 1.1, 0.7, 2.3, -0.013])
def test_volatility_of_constant_series_is_zero(level) -> None:
    assert volatility(np.full(7, level)) == 0.0


def test_volatility_needs_two_points() -> None:
    with pytest.raises(InsufficientData):
        volatility([1.0])


def test_self_correlation_is_one() -> None:
    c1, _ = _cycles()
    assert contemporaneous_correlation(c1, c1) == pytest.approx(1.0, abs=1e-12)


def test_correlation_matches_numpy_and_sign() -> None:
    c1, c2 = _cycles()
    assert pearson_correlation(c1, c2) == pytest.approx(np.corrcoef(c1, c2)[0, 1], abs=1e-12)
    assert pearson_correlation(c1, -2 * c1 + 3) == pytest.approx(-1.0, abs=1e-12)


@pytest.mark.parametrize("level", [1.5, 1.1, 0.7, 2.3])
def test_correlation_of_constant_series_raises_zero_variance(level) -> None:
    c1, _ = _cycles(20)
    with pytest.raises(ZeroVariance):
        contemporaneous_correlation(c1, np.full(20, level))
    with pytest.raises(ZeroVariance):
        contemporaneous_correlation([1.0, 2.0, 4.0], np.full(3, level))
    with pytest.raises(ZeroVariance):
        lag1_autocorrelation(np.full(7, level))
    with pytest.raises(ZeroVariance):
        relative_volatility(c1, np.full(20, level))


def test_correlation_length_mismatch() -> None:
    with pytest.raises(ValueError):
        pearson_correlation([1.0, 2.0, 3.0], [1.0, 2.0])


def test_lag1_autocorrelation_of_alternating_series() -> None:
    c = np.array([1.0, -1.0, 1.0, -1.0, 1.0, -1.0])
    assert lag1_autocorrelation(c) == pytest.approx(-1.0, abs=1e-12)


def test_lag1_autocorrelation_is_shifted_pearson() -> None:
    c1, _ = _cycles(50)
    assert lag1_autocorrelation(c1) == pytest.approx(np.corrcoef(c1[1:], c1[:-1])[0, 1], abs=1e-12)


def test_lag1_autocorrelation_needs_two_points() -> None:
    with pytest.raises(InsufficientData):
        lag1_autocorrelation([0.3])


def test_four_quarter_end_to_end() -> None:
    y = np.array([100.0, 102.0, 101.0, 103.0])
    cycle, trend = hp_filter(y, lamb=1600)
    np.testing.assert_allclose(trend + cycle, y, rtol=1e-9)
    rho = lag1_autocorrelation(cycle)
    assert -1.0 <= rho <= 1.0


@pytest.mark.parametrize("window, expected", [(5, 119), (20, 104), (123, 1), (2, 122)])
def test_rolling_correlation_length(window, expected) -> None:
    c1, c2 = _cycles(123)
    assert len(rolling_correlation(c1, c2, window)) == expected


def test_rolling_correlation_indexed_by_window_end() -> None:
    c1, c2 = _cycles(30)
    idx = pd.date_range("2000-02-01", periods=30, freq="3MS")
    s1, s2 = pd.Series(c1, index=idx), pd.Series(c2, index=idx)
    rolling = rolling_correlation(s1, s2, 5)

    assert rolling.index[0] == idx[4]
    assert rolling.index[-1] == idx[-1]
    assert rolling.iloc[0] == pytest.approx(pearson_correlation(c1[:5], c2[:5]))
    assert rolling.iloc[-1] == pytest.approx(pearson_correlation(c1[-5:], c2[-5:]))
    assert rolling.name == "rolling_corr_w5"


def test_rolling_correlation_positional_index_without_series() -> None:
    c1, c2 = _cycles(12)
    rolling = rolling_correlation(c1, c2, 4)
    assert list(rolling.index) == list(range(3, 12))


def test_rolling_correlation_matches_pandas() -> None:
    c1, c2 = _cycles(60)
    expected = pd.Series(c1).rolling(8).corr(pd.Series(c2)).dropna()
    np.testing.assert_allclose(rolling_correlation(c1, c2, 8).to_numpy(), expected.to_numpy(),
                               atol=1e-8)


def test_rolling_window_validation() -> None:
    c1, c2 = _cycles(10)
    with pytest.raises(WindowTooLarge):
        rolling_correlation(c1, c2, 11)
    with pytest.raises(InvalidWindow):
        rolling_correlation(c1, c2, 1)
    assert issubclass(WindowTooLarge, InvalidWindow)
    with pytest.raises(ValueError):
        rolling_correlation(c1, c2, 3, on_zero_variance="skip")


def test_rolling_zero_variance_window() -> None:
    c1, c2 = _cycles(12)
    c2[3:7] = 0.25
    with pytest.raises(ZeroVariance):
        rolling_correlation(c1, c2, 4)

    rolling = rolling_correlation(c1, c2, 4, on_zero_variance="nan")
    assert len(rolling) == 9
    # only the window covering rows 3..6 is constant
    assert rolling.isna().sum() == 1
    assert np.isnan(rolling.loc[6])


def test_relative_volatility() -> None:
    c1, _ = _cycles(40)
    assert relative_volatility(3 * c1, c1) == pytest.approx(3.0)
    with pytest.raises(ZeroVariance):
        relative_volatility(c1, np.zeros(40))


def test_cross_correlation_finds_lead() -> None:
    rng = np.random.default_rng(11)
    a = rng.standard_normal(80)
    b = np.concatenate([rng.standard_normal(3), a[:-3]])  # b[t+3] = a[t]
    table = cross_correlation_table(a, b, max_lead=6)

    assert table["Lead"].tolist() == list(range(-6, 7))
    peak = table.loc[table["Peak"]]
    assert len(peak) == 1
    assert int(peak["Lead"].iloc[0]) == 3
    assert peak["Correlation"].iloc[0] == pytest.approx(1.0, abs=1e-12)
    assert table.loc[table["Lead"] == 0, "N"].iloc[0] == 80
    assert table.loc[table["Lead"] == -6, "N"].iloc[0] == 74


def test_cross_correlation_validation() -> None:
    with pytest.raises(InsufficientData):
        cross_correlation_table([1.0, 2.0, 3.0], [3.0, 1.0, 2.0], max_lead=2)
    with pytest.raises(ValueError):
        cross_correlation_table([1.0, 2.0, 3.0], [3.0, 1.0, 2.0], max_lead=-1)


def _decomposed(n=40):
    c1, c2 = _cycles(n, seed=3)
    idx = pd.date_range("2000-02-01", periods=n, freq="3MS")
    return pd.DataFrame({
        "period": [f"{2000 + i // 4}-Q{i % 4 + 1}" for i in range(n)],
        "A_cycle": c1, "B_cycle": c2,
    }, index=idx)


def test_summarize_cycles() -> None:
    decomposed = _decomposed()
    summary = summarize_cycles(decomposed, ("A", "B"), windows=(5,), max_lead=4,
                               optional_windows=(20, 60))

    assert summary["volatility"]["A"] == pytest.approx(volatility(decomposed["A_cycle"]))
    assert summary["correlation"] == pytest.approx(
        pearson_correlation(decomposed["A_cycle"], decomposed["B_cycle"]))
    assert summary["relative_volatility"] == pytest.approx(
        summary["volatility"]["B"] / summary["volatility"]["A"])
    assert set(summary["lag1_autocorrelation"]) == {"A", "B"}
    # optional window longer than the sample is skipped
    assert sorted(summary["rolling"]) == [5, 20]
    assert len(summary["rolling"][5]) == 36
    assert len(summary["cross_correlation"]) == 9


def test_summarize_cycles_required_window_longer_than_sample_halts() -> None:
    decomposed = _decomposed(4)
    with pytest.raises(WindowTooLarge):
        summarize_cycles(decomposed, ("A", "B"), windows=(5,), max_lead=1)
