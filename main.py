"""
main.py
-------
Orchestration pipeline for the Japan / South Africa business-cycle report.

Each stage takes the previous stage's output as an argument and returns a
new object; no stage reads or mutates shared state.

Pipeline stages:
    1. Data ingestion (semicolon-delimited quarterly GDP extract)
    2. Log transform and HP decomposition (lambda=1600 by default)
    3. Decomposition identity check
    4. Cycle statistics (volatility, correlation, persistence,
       rolling correlation, lead/lag cross-correlation)
    5. Cycle stationarity diagnostics (ADF / KPSS)
    6. Text summary, CSV export and charts

Rolling windows: 5 quarters (config.ROLLING_WINDOWS, required) and 20
quarters (config.SUPPLEMENTARY_ROLLING_WINDOWS, skipped on short samples).
The 5-quarter window is the short co-movement window; earlier write-ups of this
analysis described it as a "15-quarter window", which never matched the
computation.

Usage:
    python main.py [INPUT] [--lambda LAMBDA]
"""

import argparse
import logging
import sys
import warnings

# ---------------------------------------------------------------------------
warnings.filterwarnings("ignore", category=UserWarning, message=".*tight_layout.*")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-18s | %(levelname)-7s | %(message)s",
    datefmt="%Y-%m-%d %H:%M",
)
logger = logging.getLogger("gdpcycles")

# ---------------------------------------------------------------------------
from gdpcycles.config import (
    DEFAULT_INPUT_PATH, HP_DEFAULT_METHOD, HP_LAMBDA_QUARTERLY, MAX_LEAD_QUARTERS,
    OUTPUT_DIR, ROLLING_WINDOWS, SERIES_NAMES, SUPPLEMENTARY_ROLLING_WINDOWS,
)
from gdpcycles.cycle_stats import summarize_cycles
from gdpcycles.data_loader import QuarterlyGDPLoader
from gdpcycles.diagnostics import check_decomposition_identity, cycle_stationarity_table
from gdpcycles.filters import decompose
from gdpcycles.plotting import (
    plot_cross_correlation, plot_cycles, plot_rolling_correlation,
    plot_trend_decomposition, plot_volatility,
)
from gdpcycles.report import export_results, format_summary


def run_pipeline(input_path, lamb=HP_LAMBDA_QUARTERLY, out_dir=OUTPUT_DIR,
                 series_names=SERIES_NAMES, windows=ROLLING_WINDOWS,
                 max_lead=MAX_LEAD_QUARTERS, method=HP_DEFAULT_METHOD,
                 make_plots=True, optional_windows=SUPPLEMENTARY_ROLLING_WINDOWS):
    """
    Execute the full analysis for one input file.

    Returns:
        dict with 'data', 'decomposed', 'summary', 'stationarity',
        'report' (list of summary lines) and 'files' (written paths).
    """
    logger.info("=" * 70)
    logger.info("PIPELINE START: %s (lambda=%g)", input_path, lamb)
    logger.info("=" * 70)

    # --- Step 1: Data ---
    data = QuarterlyGDPLoader(input_path, series_names=series_names).load()

    # --- Step 2-3: Decomposition ---
    decomposed = decompose(data, series_names, lamb=lamb, method=method)
    check_decomposition_identity(decomposed, series_names)

    # --- Step 4: Statistics ---
    summary = summarize_cycles(decomposed, series_names, windows=windows,
                               max_lead=max_lead, optional_windows=optional_windows)

    # --- Step 5: Diagnostics ---
    stationarity = cycle_stationarity_table(decomposed, series_names)

    # --- Step 6: Presentation ---
    report = format_summary(summary, series_names)
    logger.info("-" * 70)
    for line in report:
        logger.info(line)
    logger.info("-" * 70)

    files = export_results(decomposed, summary, stationarity, series_names, out_dir)
    if make_plots:
        periods = decomposed["period"].tolist()
        files.append(plot_trend_decomposition(decomposed, series_names, out_dir))
        files.append(plot_cycles(decomposed, series_names, summary, out_dir))
        files.append(plot_volatility(summary, series_names, out_dir))
        for window, rolling in summary["rolling"].items():
            files.append(plot_rolling_correlation(rolling, window, periods, out_dir))
        files.append(plot_cross_correlation(summary["cross_correlation"], series_names, out_dir))

    logger.info("PIPELINE DONE: %d artefacts in %s", len(files), out_dir)
    return {
        "data": data,
        "decomposed": decomposed,
        "summary": summary,
        "stationarity": stationarity,
        "report": report,
        "files": files,
    }


# =========================================================================
# ENTRY POINT
# =========================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(description="HP-filter business-cycle report")
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT_PATH,
                        help="Semicolon-delimited quarterly GDP file "
                             f"(default: {DEFAULT_INPUT_PATH})")
    parser.add_argument("--lambda", dest="lamb", type=float, default=HP_LAMBDA_QUARTERLY,
                        help="HP smoothing weight (1600 quarterly, 129600 monthly, 6.25 annual)")
    args = parser.parse_args(argv)

    try:
        run_pipeline(args.input, lamb=args.lamb)
    # GDPCyclesError subclasses ValueError; a bad --lambda surfaces as ValueError
    except (ValueError, FileNotFoundError) as e:
        logger.error("Pipeline failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
