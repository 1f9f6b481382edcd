"""
config.py
---------
Central configuration for the GDP business-cycle analysis.

Defines the HP smoothing conventions, the input file dialect, the series
pair under study, and the window settings of the statistics engine.
All economic assumptions are documented inline with references.

References:
    - Hodrick, R. & Prescott, E. (1997). Postwar US Business Cycles.
      Journal of Money, Credit and Banking, 29(1), 1-16.
    - Ravn, M. & Uhlig, H. (2002). On adjusting the HP filter for the
      frequency of observations. Review of Economics and Statistics, 84(2).
    - Backus, D. & Kehoe, P. (1992). International Evidence on the
      Historical Properties of Business Cycles. AER, 82(4), 864-888.
"""

import logging

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Hodrick-Prescott Filter
# ---------------------------------------------------------------------------
# 1600 for quarterly data is the Hodrick & Prescott (1997) convention.
# Monthly and annual values follow the Ravn & Uhlig (2002) power-4 rule:
# lambda scales with the fourth power of the observation frequency ratio.
HP_LAMBDA_QUARTERLY = 1600
HP_LAMBDA_MONTHLY = 129600
HP_LAMBDA_ANNUAL = 6.25

HP_LAMBDA_BY_FREQUENCY = {
    "quarterly": HP_LAMBDA_QUARTERLY,
    "monthly": HP_LAMBDA_MONTHLY,
    "annual": HP_LAMBDA_ANNUAL,
}

# Second-difference operator needs at least two interior points.
HP_MIN_OBSERVATIONS = 4

# "banded" is the documented solver; "sparse" and "dense" are kept for
# cross-checking against statsmodels and the textbook formula.
HP_METHODS = ("banded", "sparse", "dense")
HP_DEFAULT_METHOD = "banded"

# ---------------------------------------------------------------------------
# Input File Dialect
# ---------------------------------------------------------------------------
# National accounts downloads in a European locale: semicolon separator,
# comma as decimal mark. Both are overridable per loader instance.
CSV_SEPARATOR = ";"
CSV_DECIMAL = ","

DEFAULT_INPUT_PATH = "data/gdp_quarterly.csv"

# Mid-quarter convention: each quarter is dated on the first day of its
# middle month.
QUARTER_MONTHS = {1: 2, 2: 5, 3: 8, 4: 11}

# ---------------------------------------------------------------------------
# Series Pair
# ---------------------------------------------------------------------------
# Column 2 and column 3 of the input file, in order.
SERIES_NAMES = ("Japan", "South_Africa")

SERIES_LABELS = {
    "Japan": "Japan",
    "South_Africa": "South Africa",
}

# ---------------------------------------------------------------------------
# Statistics Engine
# ---------------------------------------------------------------------------
# Volatility is reported in percent of trend (std of log-deviation x 100),
# the Backus & Kehoe (1992) reporting unit.
VOLATILITY_SCALE = 100.0

# Short window (5 quarters) tracks near-term co-movement and is always
# computed: a sample shorter than it halts the run with WindowTooLarge.
ROLLING_WINDOWS = (5,)

# The 20-quarter window approximates one full business cycle. It is
# skipped with a warning when the sample is shorter.
SUPPLEMENTARY_ROLLING_WINDOWS = (20,)

# Leads/lags tested in the cross-correlation table (two years either side).
MAX_LEAD_QUARTERS = 8

# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------
MIN_OBS_STATIONARITY = 20
STATIONARITY_SIGNIFICANCE = 0.05
IDENTITY_RTOL = 1e-9

# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------
# One tick every two years of quarterly data.
TICK_STRIDE = 8
OUTPUT_DIR = "outputs"

SUMMARY_VOLATILITY_DECIMALS = 2
SUMMARY_CORRELATION_DECIMALS = 3
