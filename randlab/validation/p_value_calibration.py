# P-value calibration and uniformity checks.
# This module:
# - generates deterministic pseudo-random bit streams (NumPy PCG64, seedable)
# - collects p-values of a test over those streams and builds QQ data
# - checks the p-values against U(0, 1) with a Kolmogorov-Smirnov test
# - optionally writes the results to CSV
from __future__ import annotations

import csv
import logging
import os
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy import stats

from ..plugins.monobit import monobit

logger = logging.getLogger(__name__)

DEFAULT_SEED = 0xC0FFEE


def generate_streams(count: int, length: int, seed: Optional[int] = None) -> List[Tuple[int, ...]]:
    """Generate ``count`` reproducible bit streams of ``length`` bits each.

    The same ``seed`` always yields the same streams.
    """
    if count < 0 or length < 0:
        raise ValueError("count and length must be non-negative")
    rng = np.random.default_rng(DEFAULT_SEED if seed is None else seed)
    return [tuple(rng.integers(0, 2, size=length, dtype=np.uint8).tolist()) for _ in range(count)]


def compute_pvalues_from_streams(
    streams: Sequence[Sequence[int]], test_func: Callable[[Sequence[int]], float]
) -> List[float]:
    """Call ``test_func`` on every stream and collect the p-values, clamped to [0, 1]."""
    pvals: List[float] = []
    for s in streams:
        p = float(test_func(s))
        pvals.append(min(1.0, max(0.0, p)))
    return pvals


def qq_data(p_values: Sequence[float]) -> Tuple[List[float], List[float]]:
    """Return (theoretical_quantiles, empirical_quantiles) for a QQ plot against U(0, 1)."""
    n = len(p_values)
    if n == 0:
        return [], []
    theoretical = [(i + 1) / (n + 1) for i in range(n)]
    return theoretical, sorted(p_values)


def ks_test_uniform(p_values: Sequence[float]) -> Dict[str, float]:
    """Kolmogorov-Smirnov test of ``p_values`` against U(0, 1).

    Returns ``{"D": statistic, "p_value": p}``; an empty sample gives D = 0, p = 1.
    """
    if len(p_values) == 0:
        return {"D": 0.0, "p_value": 1.0}
    res = stats.kstest(np.asarray(p_values, dtype=float), "uniform")
    return {"D": float(res.statistic), "p_value": float(res.pvalue)}


def save_calibration_csv(
    path: str,
    p_values: Sequence[float],
    qq_theoretical: Sequence[float],
    qq_empirical: Sequence[float],
    ks_result: Dict[str, float],
) -> None:
    """Write the calibration run to CSV.

    Columns: stream_index, p_value, qq_theoretical, qq_empirical; a blank row and the
    KS summary rows follow.
    """
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as csvf:
        writer = csv.writer(csvf)
        writer.writerow(["stream_index", "p_value", "qq_theoretical", "qq_empirical"])
        for i, (p, t, e) in enumerate(zip(p_values, qq_theoretical, qq_empirical)):
            writer.writerow([i, f"{p:.12g}", f"{t:.12g}", f"{e:.12g}"])
        writer.writerow([])
        writer.writerow(["KS_D", ks_result.get("D")])
        writer.writerow(["KS_pvalue", ks_result.get("p_value")])


def calibrate_p_values(
    *,
    num_streams: int = 100,
    stream_length: int = 1024,
    generator_seed: Optional[int] = None,
    test_func: Optional[Callable[[Sequence[int]], float]] = None,
    save_csv: Optional[str] = None,
) -> Dict[str, object]:
    """Main calibration entry point.

    - num_streams: number of generated streams
    - stream_length: bits per stream
    - generator_seed: seed for reproducible runs
    - test_func: test applied to each stream, returning a p-value; defaults to
      :func:`randlab.monobit` (streams then need at least 100 bits)
    - save_csv: when given, the results are also written there as CSV

    Returns:
      {
        "p_values": [...],
        "qq_theoretical": [...],
        "qq_empirical": [...],
        "ks": {"D": ..., "p_value": ...},
        "num_streams": num_streams,
        "stream_length": stream_length,
      }
    """
    if test_func is None:
        test_func = monobit

    streams = generate_streams(num_streams, stream_length, seed=generator_seed)
    p_values = compute_pvalues_from_streams(streams, test_func)
    qq_theoretical, qq_empirical = qq_data(p_values)
    ks = ks_test_uniform(p_values)
    logger.debug("calibration done - %d streams, KS D=%.6f p=%.6f", num_streams, ks["D"], ks["p_value"])

    if save_csv:
        save_calibration_csv(save_csv, p_values, qq_theoretical, qq_empirical, ks)

    return {
        "p_values": p_values,
        "qq_theoretical": qq_theoretical,
        "qq_empirical": qq_empirical,
        "ks": ks,
        "num_streams": num_streams,
        "stream_length": stream_length,
    }
