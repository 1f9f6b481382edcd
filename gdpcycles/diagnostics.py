"""
diagnostics.py
--------------
Post-decomposition checks on the HP output.

Contains:
    - StationarityTester: ADF and KPSS tests on each cycle component.
      An HP cycle that still carries a unit root means lambda is too
      large for the sample (or the series has a structural break), and
      its volatility and correlations are not business-cycle moments.
    - check_decomposition_identity: verifies log = trend + cycle.

The two tests have opposite null hypotheses and are read together:
    ADF  H0: unit root        -> stationary if p <  significance
    KPSS H0: level stationary -> stationary if p >= significance

References:
    - Dickey, D. & Fuller, W. (1979). Distribution of the Estimators
      for Autoregressive Time Series with a Unit Root. JASA, 74(366),
      427-431. DOI:10.2307/2286348
    - Kwiatkowski, D., Phillips, P., Schmidt, P. & Shin, Y. (1992).
      Testing the null hypothesis of stationarity against the
      alternative of a unit root. Journal of Econometrics, 54(1-3).
"""

import logging
import warnings
import numpy as np
import pandas as pd
from statsmodels.tools.sm_exceptions import InterpolationWarning
from statsmodels.tsa.stattools import adfuller, kpss

from gdpcycles.config import IDENTITY_RTOL, MIN_OBS_STATIONARITY, STATIONARITY_SIGNIFICANCE
from gdpcycles.errors import DecompositionError

logger = logging.getLogger(__name__)


def _insufficient(n):
    return {"statistic": np.nan, "p_value": np.nan, "is_stationary": None,
            "verdict": "INSUFFICIENT DATA", "n_obs": n}


class StationarityTester:
    """
    Unit-root and stationarity tests for a single series.

    Series shorter than MIN_OBS_STATIONARITY are not tested: the result
    carries verdict 'INSUFFICIENT DATA' and a warning is logged.
    """

    def __init__(self, significance: float = STATIONARITY_SIGNIFICANCE,
                 min_obs: int = MIN_OBS_STATIONARITY):
        self.significance = significance
        self.min_obs = min_obs

    def adf(self, series: pd.Series) -> dict:
        clean = series.dropna()
        if len(clean) < self.min_obs:
            logger.warning("Insufficient observations (%d) for ADF test on '%s'.",
                           len(clean), series.name)
            return _insufficient(len(clean))
        stat, p_value, *_ = adfuller(clean, autolag="AIC")
        is_stat = bool(p_value < self.significance)
        logger.debug("ADF '%s': stat=%.3f, p=%.4f -> %s", series.name, stat, p_value,
                     "stationary" if is_stat else "non-stationary")
        return {"statistic": round(float(stat), 4), "p_value": round(float(p_value), 4),
                "is_stationary": is_stat, "verdict": "PASS" if is_stat else "FAIL",
                "n_obs": len(clean)}

    def kpss(self, series: pd.Series) -> dict:
        clean = series.dropna()
        if len(clean) < self.min_obs:
            logger.warning("Insufficient observations (%d) for KPSS test on '%s'.",
                           len(clean), series.name)
            return _insufficient(len(clean))
        # p-values are interpolated from a table bounded to [0.01, 0.10]
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", InterpolationWarning)
            stat, p_value, _, _ = kpss(clean, regression="c", nlags="auto")
        is_stat = bool(p_value >= self.significance)
        logger.debug("KPSS '%s': stat=%.3f, p=%.4f -> %s", series.name, stat, p_value,
                     "stationary" if is_stat else "non-stationary")
        return {"statistic": round(float(stat), 4), "p_value": round(float(p_value), 4),
                "is_stationary": is_stat, "verdict": "PASS" if is_stat else "FAIL",
                "n_obs": len(clean)}


def cycle_stationarity_table(decomposed: pd.DataFrame, series_names,
                             tester: StationarityTester = None) -> pd.DataFrame:
    """One row per cycle component with ADF and KPSS results."""
    tester = tester or StationarityTester()
    rows = []
    for name in series_names:
        cycle = decomposed[f"{name}_cycle"]
        adf_res = tester.adf(cycle)
        kpss_res = tester.kpss(cycle)
        both = adf_res["is_stationary"] and kpss_res["is_stationary"]
        rows.append({
            "Series": name,
            "N": adf_res["n_obs"],
            "ADF_stat": adf_res["statistic"], "ADF_p": adf_res["p_value"],
            "KPSS_stat": kpss_res["statistic"], "KPSS_p": kpss_res["p_value"],
            "Verdict": (
                "INSUFFICIENT DATA" if adf_res["is_stationary"] is None
                else "STATIONARY" if both
                else "MIXED" if adf_res["is_stationary"] or kpss_res["is_stationary"]
                else "NON-STATIONARY"
            ),
        })
        if rows[-1]["Verdict"] in ("MIXED", "NON-STATIONARY"):
            logger.warning("%s cycle: stationarity verdict %s (ADF p=%s, KPSS p=%s).",
                           name, rows[-1]["Verdict"], adf_res["p_value"], kpss_res["p_value"])
    return pd.DataFrame(rows)


def check_decomposition_identity(decomposed: pd.DataFrame, series_names,
                                 rtol: float = IDENTITY_RTOL):
    """Raises DecompositionError if log != trend + cycle beyond rtol."""
    for name in series_names:
        logged = decomposed[f"{name}_log"].to_numpy()
        rebuilt = decomposed[f"{name}_trend"].to_numpy() + decomposed[f"{name}_cycle"].to_numpy()
        # absolute floor so values near zero are judged on the series scale
        atol = rtol * max(float(np.max(np.abs(logged))), 1.0)
        if not np.allclose(rebuilt, logged, rtol=rtol, atol=atol):
            worst = float(np.max(np.abs(rebuilt - logged)))
            raise DecompositionError(
                f"{name}: trend + cycle deviates from log series (max abs error {worst:.3e})."
            )
    logger.info("Decomposition identity holds for %s (rtol=%g).", ", ".join(series_names), rtol)
