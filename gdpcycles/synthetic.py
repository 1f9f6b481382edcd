"""
synthetic.py
------------
Synthetic quarterly GDP pair for offline runs and tests.

Each series is log-trend growth plus an AR(1) cycle; the two cycles share
a common world shock so their correlation is positive but well below one.
Output is written in the input dialect (semicolon separator, comma
decimal mark) so it goes through the real loader.
"""

import logging
import numpy as np
import pandas as pd

from gdpcycles.config import CSV_DECIMAL, CSV_SEPARATOR, SERIES_NAMES

logger = logging.getLogger(__name__)

# Annualised trend growth and AR(1) cycle parameters per series position.
_GROWTH = (0.008, 0.022)
_LEVEL = (420_000.0, 650_000.0)
_PERSISTENCE = (0.85, 0.75)
_SHOCK_SD = (0.006, 0.010)
_COMMON_WEIGHT = 0.5


def generate_synthetic_quarters(start_year: int = 1994, n_quarters: int = 123,
                                series_names=SERIES_NAMES, seed: int = 42) -> pd.DataFrame:
    """Returns a frame with 'period' and one GDP level column per series."""
    rng = np.random.default_rng(seed)
    periods = [f"{start_year + q // 4}-Q{q % 4 + 1}" for q in range(n_quarters)]
    common = rng.standard_normal(n_quarters)

    data = {"period": periods}
    for i, name in enumerate(series_names):
        idio = rng.standard_normal(n_quarters)
        shocks = _SHOCK_SD[i] * (_COMMON_WEIGHT * common + (1 - _COMMON_WEIGHT) * idio)
        cycle = np.zeros(n_quarters)
        for t in range(1, n_quarters):
            cycle[t] = _PERSISTENCE[i] * cycle[t - 1] + shocks[t]
        trend = np.log(_LEVEL[i]) + _GROWTH[i] / 4 * np.arange(n_quarters)
        data[name] = np.exp(trend + cycle)

    logger.info("Synthetic data: %d quarters from %s, seed=%d.", n_quarters, periods[0], seed)
    return pd.DataFrame(data)


def write_synthetic_csv(path, missing_periods=(), sep: str = CSV_SEPARATOR,
                        decimal: str = CSV_DECIMAL, **kwargs) -> pd.DataFrame:
    """
    Writes the synthetic pair in the input file dialect.

    Quarters listed in missing_periods get a blank second series, so the
    loader's drop policy can be exercised. Returns the frame written.
    """
    frame = generate_synthetic_quarters(**kwargs)
    if missing_periods:
        second = frame.columns[2]
        frame.loc[frame["period"].isin(missing_periods), second] = np.nan
    frame.to_csv(path, sep=sep, decimal=decimal, index=False, float_format="%.3f")
    logger.info("Synthetic dataset written to %s", path)
    return frame
