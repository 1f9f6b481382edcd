"""
data_loader.py
--------------
Quarterly GDP ingestion for the business-cycle analysis.

Reads a semicolon-delimited national accounts extract (period label plus
two GDP level series), drops incomplete quarters, and dates each quarter
at its middle month.

DATA-QUALITY POLICY: HARD DROP
    A quarter with a missing or unparseable value in EITHER series is
    removed before dating. Values are never interpolated or carried
    forward: the HP filter treats every retained row as an observed
    point, and an imputed level would leak into both the trend and the
    cycle. The number of dropped rows is logged.
"""

import logging
import re
import pandas as pd

from gdpcycles.config import CSV_DECIMAL, CSV_SEPARATOR, QUARTER_MONTHS, SERIES_NAMES
from gdpcycles.errors import EmptyDataset, MalformedPeriodLabel, ParseError

logger = logging.getLogger(__name__)

PERIOD_PATTERN = re.compile(r"^(\d{4})-Q([1-4])$")


def parse_period_label(label) -> pd.Timestamp:
    """
    Converts a 'YYYY-Qn' label to the first day of the quarter's middle
    month (Q1 -> Feb, Q2 -> May, Q3 -> Aug, Q4 -> Nov).
    """
    match = PERIOD_PATTERN.match(str(label).strip())
    if match is None:
        raise MalformedPeriodLabel(f"Period label '{label}' does not match YYYY-Qn.")
    year, quarter = int(match.group(1)), int(match.group(2))
    return pd.Timestamp(year=year, month=QUARTER_MONTHS[quarter], day=1)


class QuarterlyGDPLoader:
    """
    Loads a pair of quarterly GDP series from a delimited text file.

    Parameters
    ----------
    path : str
        Location of the input file. Header row required; the first three
        columns are read as (period label, series A, series B).
    sep : str
        Field separator. Defaults to CSV_SEPARATOR.
    decimal : str
        Decimal mark of the numeric columns. Defaults to CSV_DECIMAL.
    series_names : tuple of str
        Column names given to series A and series B in the output.
    """

    def __init__(self, path, sep: str = CSV_SEPARATOR, decimal: str = CSV_DECIMAL,
                 series_names=SERIES_NAMES):
        if len(series_names) != 2:
            raise ValueError("Exactly two series names are required.")
        self.path = path
        self.sep = sep
        self.decimal = decimal
        self.series_names = tuple(series_names)

    def _read_raw(self) -> pd.DataFrame:
        """Reads the first three columns as strings."""
        try:
            raw = pd.read_csv(self.path, sep=self.sep, dtype=str, skipinitialspace=True)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise ParseError(f"Cannot parse {self.path}: {e}") from e
        if raw.shape[1] < 3:
            raise ParseError(
                f"{self.path}: expected at least 3 columns separated by "
                f"'{self.sep}', found {raw.shape[1]}."
            )
        raw = raw.iloc[:, :3].copy()
        raw.columns = ["period", *self.series_names]
        return raw

    def _to_numeric(self, column: pd.Series) -> pd.Series:
        """Parses a locale-formatted column. Unparseable cells become NaN."""
        text = column.str.strip()
        if self.decimal != ".":
            text = text.str.replace(self.decimal, ".", regex=False)
        return pd.to_numeric(text, errors="coerce")

    def load(self) -> pd.DataFrame:
        """
        Returns the ordered table of quarters.

        Columns: 'period' (label), 'date' (mid-quarter timestamp) and one
        float column per series. Sorted ascending by date; quarters with
        equal dates keep their input order.
        """
        logger.info("=" * 60)
        logger.info("Loading quarterly GDP from %s", self.path)

        raw = self._read_raw()
        for name in self.series_names:
            raw[name] = self._to_numeric(raw[name])

        complete = raw.dropna(subset=list(self.series_names))
        n_dropped = len(raw) - len(complete)
        if n_dropped:
            logger.warning(
                "Dropped %d of %d quarters with missing values (no imputation).",
                n_dropped, len(raw),
            )
        if complete.empty:
            raise EmptyDataset(f"{self.path}: no complete quarters after dropping missing values.")

        complete = complete.assign(
            period=complete["period"].str.strip(),
            date=complete["period"].map(parse_period_label),
        )
        ordered = (
            complete.sort_values("date", kind="mergesort")
            .reset_index(drop=True)[["period", "date", *self.series_names]]
            .astype({name: "float64" for name in self.series_names})
        )

        logger.info(
            "  %d quarters loaded (%s -> %s)",
            len(ordered), ordered["period"].iloc[0], ordered["period"].iloc[-1],
        )
        return ordered
