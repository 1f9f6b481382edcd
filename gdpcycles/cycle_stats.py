"""
cycle_stats.py
--------------
Second-moment statistics of HP cycle components.

Contains:
    - volatility: sample standard deviation x 100 (percent of trend).
    - pearson_correlation and its uses: contemporaneous correlation,
      lag-1 autocorrelation (persistence), rolling-window correlation.
    - relative_volatility and a lead/lag cross-correlation table.
    - summarize_cycles: the full set of statistics for a series pair.

ZERO VARIANCE POLICY:
    Pearson correlation is undefined when either input is constant.
    numpy would return NaN with a RuntimeWarning, which then propagates
    silently into tables and charts. Every correlation here checks for
    constant input first and raises ZeroVariance instead. rolling_correlation
    accepts on_zero_variance="nan" to keep degenerate windows as NaN;
    the count is logged.

ROLLING WINDOW ALIGNMENT:
    The rolling series has T - w + 1 values and is indexed by the END of
    each window (the last observation it includes). It is not 1:1 with
    the source rows; align through the index, never by position.

References:
    - Backus, D. & Kehoe, P. (1992). International Evidence on the
      Historical Properties of Business Cycles. AER, 82(4), 864-888.
    - Stock, J. & Watson, M. (1999). Business Cycle Fluctuations in US
      Macroeconomic Time Series. Handbook of Macroeconomics, 1, 3-64.
"""

import logging
import numpy as np
import pandas as pd

from gdpcycles.config import (
    MAX_LEAD_QUARTERS, ROLLING_WINDOWS, SUPPLEMENTARY_ROLLING_WINDOWS, VOLATILITY_SCALE,
)
from gdpcycles.errors import InsufficientData, InvalidWindow, WindowTooLarge, ZeroVariance

logger = logging.getLogger(__name__)


def _as_array(values) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError("Expected a one-dimensional sequence.")
    return arr


def _check_same_length(a: np.ndarray, b: np.ndarray):
    if len(a) != len(b):
        raise ValueError(f"Sequences differ in length: {len(a)} vs {len(b)}.")


def volatility(cycle, scale: float = VOLATILITY_SCALE) -> float:
    """Sample standard deviation (ddof=1) times 100. Zero for a constant series."""
    c = _as_array(cycle)
    if len(c) < 2:
        raise InsufficientData(f"Volatility needs at least 2 observations, got {len(c)}.")
    if np.all(c == c[0]):
        return 0.0
    return float(np.std(c, ddof=1) * scale)


def relative_volatility(cycle_num, cycle_den) -> float:
    """Ratio of two volatilities, e.g. emerging vs advanced economy."""
    den = volatility(cycle_den)
    if den == 0:
        raise ZeroVariance("Reference series is constant; relative volatility undefined.")
    return volatility(cycle_num) / den


def pearson_correlation(x, y) -> float:
    """Pearson correlation of two paired sequences."""
    a, b = _as_array(x), _as_array(y)
    _check_same_length(a, b)
    if len(a) < 2:
        raise InsufficientData(f"Correlation needs at least 2 pairs, got {len(a)}.")
    # constancy is judged on the raw values; centring leaves ~1e-16 residue
    if np.all(a == a[0]) or np.all(b == b[0]):
        raise ZeroVariance("Correlation undefined: at least one sequence is constant.")
    da, db = a - a.mean(), b - b.mean()
    ss_a, ss_b = np.dot(da, da), np.dot(db, db)
    r = np.dot(da, db) / np.sqrt(ss_a * ss_b)
    return float(np.clip(r, -1.0, 1.0))


def contemporaneous_correlation(c1, c2) -> float:
    """Same-quarter correlation of two cycles over all T points."""
    return pearson_correlation(c1, c2)


def lag1_autocorrelation(cycle) -> float:
    """Correlation of c[t] with c[t-1]: the persistence of the cycle."""
    c = _as_array(cycle)
    if len(c) < 2:
        raise InsufficientData(f"Lag-1 autocorrelation needs at least 2 observations, got {len(c)}.")
    return pearson_correlation(c[1:], c[:-1])


def rolling_correlation(c1, c2, window: int, on_zero_variance: str = "raise") -> pd.Series:
    """
    Pearson correlation over a sliding window of fixed size.

    Parameters
    ----------
    c1, c2 : array-like or pd.Series
        Equal-length cycle sequences. If c1 is a Series its index labels
        the window ends; otherwise integer end positions are used.
    window : int
        Window length w, 2 <= w <= T.
    on_zero_variance : str
        'raise' (default) or 'nan'.

    Returns
    -------
    pd.Series
        T - w + 1 correlations indexed by the end of each window.
    """
    if on_zero_variance not in ("raise", "nan"):
        raise ValueError("on_zero_variance must be 'raise' or 'nan'.")
    a, b = _as_array(c1), _as_array(c2)
    _check_same_length(a, b)
    n = len(a)
    if window < 2:
        raise InvalidWindow(f"Rolling window must be at least 2, got {window}.")
    if window > n:
        raise WindowTooLarge(f"Rolling window {window} exceeds series length {n}.")

    labels = c1.index if isinstance(c1, pd.Series) else pd.RangeIndex(n)
    values = []
    n_degenerate = 0
    for i in range(n - window + 1):
        try:
            values.append(pearson_correlation(a[i:i + window], b[i:i + window]))
        except ZeroVariance:
            if on_zero_variance == "raise":
                raise ZeroVariance(
                    f"Zero variance in rolling window ending at {labels[i + window - 1]}."
                ) from None
            values.append(np.nan)
            n_degenerate += 1

    if n_degenerate:
        logger.warning("Rolling correlation (w=%d): %d constant window(s) set to NaN.",
                       window, n_degenerate)
    return pd.Series(values, index=labels[window - 1:], name=f"rolling_corr_w{window}")


def cross_correlation_table(c1, c2, max_lead: int = MAX_LEAD_QUARTERS) -> pd.DataFrame:
    """
    Correlation of c1[t] with c2[t+k] for k = -max_lead, ..., max_lead.

    Positive k: c1 leads c2 by k quarters. The lag with the largest
    absolute correlation is flagged in the 'Peak' column.
    """
    a, b = _as_array(c1), _as_array(c2)
    _check_same_length(a, b)
    if max_lead < 0:
        raise ValueError("max_lead must be non-negative.")
    if len(a) - max_lead < 2:
        raise InsufficientData(
            f"Cross-correlation at lead {max_lead} needs more than {max_lead + 1} observations."
        )

    records = []
    for k in range(-max_lead, max_lead + 1):
        if k >= 0:
            x, y = a[:len(a) - k], b[k:]
        else:
            x, y = a[-k:], b[:len(b) + k]
        records.append({"Lead": k, "Correlation": pearson_correlation(x, y), "N": len(x)})

    table = pd.DataFrame(records)
    table["Peak"] = False
    table.loc[table["Correlation"].abs().idxmax(), "Peak"] = True
    return table


def summarize_cycles(decomposed: pd.DataFrame, series_names, windows=ROLLING_WINDOWS,
                     max_lead: int = MAX_LEAD_QUARTERS,
                     optional_windows=SUPPLEMENTARY_ROLLING_WINDOWS) -> dict:
    """
    Computes the full statistics set for a pair of decomposed series.

    Every window in 'windows' must fit the sample (WindowTooLarge
    otherwise). Windows in 'optional_windows' longer than the sample are
    skipped with a warning.

    Returns a dict with:
        'volatility'           : {name: float}
        'lag1_autocorrelation' : {name: float}
        'correlation'          : float (contemporaneous)
        'relative_volatility'  : float (second / first)
        'rolling'              : {window: pd.Series}
        'cross_correlation'    : pd.DataFrame
    """
    first, second = series_names
    c1 = decomposed[f"{first}_cycle"]
    c2 = decomposed[f"{second}_cycle"]

    summary = {
        "volatility": {name: volatility(decomposed[f"{name}_cycle"]) for name in series_names},
        "lag1_autocorrelation": {
            name: lag1_autocorrelation(decomposed[f"{name}_cycle"]) for name in series_names
        },
        "correlation": contemporaneous_correlation(c1, c2),
        "relative_volatility": relative_volatility(c2, c1),
        "rolling": {},
        "cross_correlation": None,
    }

    for w in windows:
        summary["rolling"][w] = rolling_correlation(c1, c2, w)
    for w in optional_windows:
        if w in summary["rolling"]:
            continue
        if w > len(c1):
            logger.warning("Skipping optional rolling window %d: only %d quarters available.",
                           w, len(c1))
            continue
        summary["rolling"][w] = rolling_correlation(c1, c2, w)

    lead = min(max_lead, len(c1) - 2)
    summary["cross_correlation"] = cross_correlation_table(c1, c2, lead)

    logger.info(
        "Cycle statistics: corr=%.3f, vol %s=%.2f / %s=%.2f, windows=%s",
        summary["correlation"], first, summary["volatility"][first],
        second, summary["volatility"][second], list(summary["rolling"]),
    )
    return summary
