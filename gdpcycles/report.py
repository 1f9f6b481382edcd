"""
report.py
---------
Text summary and CSV exports of the cycle statistics.

Precision convention of the text summary: volatilities to 2 decimals,
correlations to 3 decimals.
"""

import logging
import os
import pandas as pd

from gdpcycles.config import (
    SERIES_LABELS, SUMMARY_CORRELATION_DECIMALS, SUMMARY_VOLATILITY_DECIMALS,
)

logger = logging.getLogger(__name__)


def format_summary(summary: dict, series_names) -> list:
    """Formats the headline statistics as report lines."""
    vd, cd = SUMMARY_VOLATILITY_DECIMALS, SUMMARY_CORRELATION_DECIMALS
    labels = {name: SERIES_LABELS.get(name, name) for name in series_names}
    width = max(len(label) for label in labels.values())
    first, second = series_names

    lines = ["Volatility (std. dev. of cycle x 100)"]
    for name in series_names:
        lines.append(f"  {labels[name]:<{width}} : {summary['volatility'][name]:.{vd}f}")
    lines.append(f"  Relative ({labels[second]} / {labels[first]}) : "
                 f"{summary['relative_volatility']:.{vd}f}")
    lines.append(f"Contemporaneous correlation : {summary['correlation']:.{cd}f}")
    lines.append("Lag-1 autocorrelation")
    for name in series_names:
        lines.append(f"  {labels[name]:<{width}} : {summary['lag1_autocorrelation'][name]:.{cd}f}")
    for window, series in summary["rolling"].items():
        lines.append(
            f"Rolling correlation (w={window}, n={len(series)}) : "
            f"mean {series.mean():.{cd}f}, min {series.min():.{cd}f}, max {series.max():.{cd}f}"
        )
    xcorr = summary.get("cross_correlation")
    if xcorr is not None and not xcorr.empty:
        peak = xcorr.loc[xcorr["Peak"]].iloc[0]
        lines.append(f"Peak cross-correlation : {peak['Correlation']:.{cd}f} at lead {int(peak['Lead'])}")
    return lines


def statistics_table(summary: dict, series_names) -> pd.DataFrame:
    """Per-series statistics as one tidy table."""
    first = series_names[0]
    rows = []
    for name in series_names:
        rows.append({
            "Series": name,
            "Volatility": summary["volatility"][name],
            "Relative_Volatility": summary["volatility"][name] / summary["volatility"][first],
            "Lag1_Autocorrelation": summary["lag1_autocorrelation"][name],
            "Correlation_with_" + first: summary["correlation"] if name != first else 1.0,
        })
    return pd.DataFrame(rows)


def export_results(decomposed, summary, stationarity, series_names, out_dir) -> list:
    """Writes all tables of the run to CSV. Returns the written paths."""
    os.makedirs(out_dir, exist_ok=True)
    written = []

    def _write(df, filename, index=False):
        fp = os.path.join(out_dir, filename)
        df.to_csv(fp, index=index)
        written.append(fp)

    _write(decomposed, "Decomposition.csv", index=True)
    _write(statistics_table(summary, series_names), "Cycle_Statistics.csv")
    periods = decomposed["period"]
    for window, series in summary["rolling"].items():
        rolling = pd.DataFrame({
            "start_period": periods.iloc[:len(series)].to_numpy(),
            "end_period": periods.iloc[window - 1:].to_numpy(),
            "correlation": series.to_numpy(),
        }, index=series.index)
        _write(rolling, f"Rolling_Correlation_w{window}.csv", index=True)
    if summary.get("cross_correlation") is not None:
        _write(summary["cross_correlation"], "Cross_Correlation.csv")
    if stationarity is not None:
        _write(stationarity, "Stationarity.csv")

    fp = os.path.join(out_dir, "Cycle_Summary.txt")
    with open(fp, "w", encoding="utf-8") as fh:
        fh.write("\n".join(format_summary(summary, series_names)) + "\n")
    written.append(fp)

    logger.info("Exported %d files to %s", len(written), out_dir)
    return written
