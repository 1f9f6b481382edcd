"""
errors.py
---------
Failure taxonomy for the business-cycle pipeline.

Every error derives from ``GDPCyclesError``, which is itself a
``ValueError``: all of them describe input data the pipeline cannot turn
into a well-defined result. Missing files surface as the built-in
``FileNotFoundError``.
"""


class GDPCyclesError(ValueError):
    """Base class for all pipeline failures."""


class ParseError(GDPCyclesError):
    """The input file could not be read as a three-column table."""


class MalformedPeriodLabel(GDPCyclesError):
    """A period label does not match the ``YYYY-Qn`` pattern."""


class EmptyDataset(GDPCyclesError):
    """No rows remain after dropping missing values."""


class InsufficientData(GDPCyclesError):
    """Too few observations for the requested computation."""


class InvalidWindow(GDPCyclesError):
    """Rolling window size outside ``2 <= w <= T``."""


class WindowTooLarge(InvalidWindow):
    """Rolling window longer than the series."""


class ZeroVariance(GDPCyclesError):
    """Pearson correlation is undefined for a constant sequence."""


class NonPositiveSeries(GDPCyclesError):
    """Log transform requested on a series with values <= 0."""


class DecompositionError(GDPCyclesError):
    """Trend plus cycle does not reconstruct the filtered series."""
