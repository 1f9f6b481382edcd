"""
filters.py
----------
Time-series decomposition utilities.

Implements the Hodrick-Prescott (1997) filter to separate cyclical
fluctuations from the underlying trend component of log GDP.

ALGORITHM:
    The trend tau solves the penalized least-squares problem

        min_tau  sum_t (y_t - tau_t)^2
                 + lambda * sum_t ((tau_{t+1} - tau_t) - (tau_t - tau_{t-1}))^2

    whose first-order conditions are the linear system

        (I + lambda * D'D) tau = y

    with D the (T-2) x T second-difference operator. D'D is symmetric,
    positive semi-definite and pentadiagonal, so I + lambda * D'D is
    symmetric positive definite with bandwidth 2. The default solver
    stores only the upper three bands and factorizes them with a banded
    Cholesky (scipy.linalg.solveh_banded): O(T) memory and time.

    Two alternative solvers are kept for cross-checking:
        - "sparse": statsmodels' hpfilter (sparse LU on the same system).
        - "dense":  numpy.linalg.solve on the full T x T matrix.

KNOWN LIMITATION: TWO-SIDED FILTER
    The HP filter is a two-sided (symmetric) smoother: the trend at t
    uses observations both before AND after t, and the last few cycle
    values are revised as new quarters arrive (endpoint problem). This
    analysis is descriptive and ex post, so the two-sided estimate is the
    appropriate one; it must not be read as a real-time output gap.
    Ref: Hamilton, J.D. (2018). Why You Should Never Use the
         Hodrick-Prescott Filter. Review of Economics and Statistics,
         100(5), 831-843. DOI:10.1162/rest_a_00706

References:
    - Hodrick, R. & Prescott, E. (1997). Postwar US Business Cycles:
      An Empirical Investigation. Journal of Money, Credit and Banking,
      29(1), 1-16. DOI:10.2307/2953682
    - Ravn, M. & Uhlig, H. (2002). On Adjusting the Hodrick-Prescott
      Filter for the Frequency of Observations. Review of Economics and
      Statistics, 84(2), 371-376. DOI:10.1162/003465302317411604
"""

import logging
import numpy as np
import pandas as pd
import statsmodels.api as sm
from scipy.linalg import solveh_banded

from gdpcycles.config import (
    HP_DEFAULT_METHOD, HP_LAMBDA_BY_FREQUENCY, HP_LAMBDA_QUARTERLY,
    HP_METHODS, HP_MIN_OBSERVATIONS,
)
from gdpcycles.errors import InsufficientData, NonPositiveSeries

logger = logging.getLogger(__name__)


def lambda_for_frequency(frequency: str) -> float:
    """Conventional smoothing weight for 'quarterly', 'monthly' or 'annual' data."""
    try:
        return HP_LAMBDA_BY_FREQUENCY[frequency]
    except KeyError:
        raise ValueError(
            f"Unknown frequency '{frequency}'. Expected one of {sorted(HP_LAMBDA_BY_FREQUENCY)}."
        ) from None


def _penalty_bands(n: int, lamb: float) -> np.ndarray:
    """
    Upper banded storage of I + lamb * D'D, as expected by solveh_banded.

    Row 2 holds the diagonal, row 1 the first super-diagonal (shifted right
    by one), row 0 the second super-diagonal (shifted right by two).
    """
    diag = np.full(n, 6.0)
    diag[[0, -1]] = 1.0
    diag[[1, -2]] = 5.0
    off1 = np.full(n - 1, -4.0)
    off1[[0, -1]] = -2.0

    bands = np.zeros((3, n))
    bands[0, 2:] = lamb
    bands[1, 1:] = lamb * off1
    bands[2, :] = 1.0 + lamb * diag
    return bands


def _trend_banded(y: np.ndarray, lamb: float) -> np.ndarray:
    return solveh_banded(_penalty_bands(len(y), lamb), y)


def _trend_dense(y: np.ndarray, lamb: float) -> np.ndarray:
    n = len(y)
    D = np.diff(np.eye(n), n=2, axis=0)
    return np.linalg.solve(np.eye(n) + lamb * (D.T @ D), y)


def _trend_sparse(y: np.ndarray, lamb: float) -> np.ndarray:
    _, trend = sm.tsa.filters.hpfilter(y, lamb=lamb)
    return np.asarray(trend, dtype=float)


_SOLVERS = {
    "banded": _trend_banded,
    "sparse": _trend_sparse,
    "dense": _trend_dense,
}


def hp_filter(y, lamb: float = HP_LAMBDA_QUARTERLY, method: str = HP_DEFAULT_METHOD) -> tuple:
    """
    Decomposes a series into cyclical and trend components.

    Parameters
    ----------
    y : array-like or pd.Series
        Ordered observations. Must not contain NaN values.
    lamb : float
        Smoothing weight, >= 0. 1600 for quarterly data. With lamb=0 the
        penalty vanishes and the trend equals the input.
    method : str
        'banded' (default), 'sparse' or 'dense'.

    Returns
    -------
    tuple : (cycle, trend)
        pd.Series on the input index when y is a Series, else np.ndarray.
        cycle = y - trend.
    """
    if method not in _SOLVERS:
        raise ValueError(f"Unknown HP method '{method}'. Expected one of {HP_METHODS}.")
    lamb = float(lamb)
    if not np.isfinite(lamb) or lamb < 0:
        raise ValueError(f"HP lambda must be finite and non-negative, got {lamb}.")

    values = np.asarray(y, dtype=float)
    if values.ndim != 1:
        raise ValueError("HP filter expects a one-dimensional series.")
    if len(values) < HP_MIN_OBSERVATIONS:
        raise InsufficientData(
            f"HP filter needs at least {HP_MIN_OBSERVATIONS} observations, got {len(values)}."
        )
    if np.isnan(values).any():
        raise ValueError("HP filter input contains NaN values.")

    trend = _SOLVERS[method](values, lamb)
    cycle = values - trend

    if isinstance(y, pd.Series):
        name = y.name
        return (pd.Series(cycle, index=y.index, name=f"{name}_cycle" if name else "cycle"),
                pd.Series(trend, index=y.index, name=f"{name}_trend" if name else "trend"))
    return cycle, trend


def decompose(frame: pd.DataFrame, series_names, lamb: float = HP_LAMBDA_QUARTERLY,
              log_transform: bool = True, method: str = HP_DEFAULT_METHOD) -> pd.DataFrame:
    """
    Applies the HP filter independently to each series of a loaded frame.

    Returns a new frame indexed by date with the 'period' label and, per
    series, '<name>_log', '<name>_trend' and '<name>_cycle'. With
    log_transform=False the input is taken to be on log scale already and
    is filtered as is.
    """
    index = pd.DatetimeIndex(frame["date"], name="date")
    out = pd.DataFrame({"period": frame["period"].to_numpy()}, index=index)

    for name in series_names:
        levels = frame[name].to_numpy(dtype=float)
        if log_transform:
            if (levels <= 0).any():
                raise NonPositiveSeries(f"'{name}' has non-positive values; cannot take logs.")
            logged = np.log(levels)
        else:
            logged = levels
        cycle, trend = hp_filter(logged, lamb=lamb, method=method)
        out[f"{name}_log"] = logged
        out[f"{name}_trend"] = trend
        out[f"{name}_cycle"] = cycle
        logger.info(
            "HP filter | %s: T=%d, lambda=%g, method=%s, cycle std=%.4f",
            name, len(logged), lamb, method, np.std(cycle, ddof=1),
        )
    return out
