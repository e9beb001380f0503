"""
Safety Factor Table

Precomputed grid of E(k) - E(k + q/sigma) values over k in [0, 5] and
q/sigma in [0, 3], both at 0.01 steps. The table is built once per process
on first use and is read-only afterwards.
"""

import math
import threading
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..utils.logger import get_logger
from ..utils.numeric import round_half_up
from .safety_stock_models import normal_cdf, shortfall_difference

logger = get_logger(__name__)

K_MAX = 5.0
Q_OVER_SIGMA_MAX = 3.0
GRID_STEP = 0.01

# A row matches a requested k when it lies within half a grid step
K_MATCH_TOLERANCE = 0.005

# Bisection bounds and stopping width for the inverse CDF
OPTIMAL_K_LOW = 0.0
OPTIMAL_K_HIGH = 4.0
OPTIMAL_K_TOLERANCE = 0.001
MAX_SERVICE_LEVEL = 0.9999
MIN_SERVICE_LEVEL = 0.5


def _descending_grid(upper: float) -> np.ndarray:
    steps = int(round(upper / GRID_STEP))
    return np.round(np.arange(steps, -1, -1) * GRID_STEP, 2)


def format_grid_key(value: float) -> str:
    """Column key for a q/sigma value: rounded half up to 2 decimals."""
    return f"{round_half_up(value, 2):.2f}"


class SafetyFactorTable:
    """
    Read-only safety factor grid.

    Rows are k values (5.00 down to 0.00), columns are q/sigma keys
    ("3.00" down to "0.00").
    """

    def __init__(self):
        self.k_values = _descending_grid(K_MAX)
        self.q_over_sigma_values = _descending_grid(Q_OVER_SIGMA_MAX)
        self.q_over_sigma_keys = [f"{q:.2f}" for q in self.q_over_sigma_values]
        self._column_index: Dict[str, int] = {
            key: idx for idx, key in enumerate(self.q_over_sigma_keys)
        }

        values = shortfall_difference(
            self.k_values[:, np.newaxis],
            self.q_over_sigma_values[np.newaxis, :]
        )
        values.setflags(write=False)
        self.values = values

        self.k_values.setflags(write=False)
        self.q_over_sigma_values.setflags(write=False)

    @property
    def shape(self):
        return self.values.shape

    def _row_index(self, k: float) -> int:
        """Row for k: exact grid match first, otherwise the nearest row (smaller k on ties)."""
        distances = np.abs(self.k_values - k)

        matches = np.flatnonzero(distances < K_MATCH_TOLERANCE)
        if matches.size > 0:
            return int(matches[0])

        nearest = np.flatnonzero(distances == distances.min())
        return int(nearest[np.argmin(self.k_values[nearest])])

    def lookup(self, k: float, q_over_sigma: float) -> float:
        """
        Look up the safety factor for (k, q/sigma).

        q/sigma is rounded to 2 decimals and must match a column exactly;
        values outside the grid return 0 rather than being interpolated
        or clamped.

        Args:
            k: Safety factor in standard deviations
            q_over_sigma: Order quantity over lead time standard deviation

        Returns:
            E(k) - E(k + q/sigma) from the grid, or 0 when no column matches
        """
        if not (math.isfinite(k) and math.isfinite(q_over_sigma)):
            return 0.0

        col = self._column_index.get(format_grid_key(q_over_sigma))
        if col is None:
            return 0.0

        row = self._row_index(round_half_up(k, 2))
        return float(self.values[row, col])

    def to_frame(self) -> pd.DataFrame:
        """Copy of the grid as a DataFrame indexed by k with q/sigma key columns."""
        frame = pd.DataFrame(
            np.array(self.values),
            index=pd.Index(np.array(self.k_values), name='k'),
            columns=list(self.q_over_sigma_keys)
        )
        frame.columns.name = 'q_over_sigma'
        return frame


_table: Optional[SafetyFactorTable] = None
_table_lock = threading.Lock()


def get_safety_factor_table() -> SafetyFactorTable:
    """Return the process-wide table, building it on first use."""
    global _table
    if _table is None:
        with _table_lock:
            if _table is None:
                logger.debug("Building safety factor table")
                built = SafetyFactorTable()
                logger.debug(f"Safety factor table ready: {built.shape[0]}x{built.shape[1]} cells")
                _table = built
    return _table


def lookup_safety_factor(k: float, q_over_sigma: float) -> float:
    """Look up E(k) - E(k + q/sigma) in the shared table."""
    return get_safety_factor_table().lookup(k, q_over_sigma)


def find_optimal_k(service_level: float) -> float:
    """
    Safety factor k for a target service level.

    Inverts the approximate normal CDF by bisection over [0, 4]. Service
    levels at or above 0.9999 return 4.0 and levels at or below 0.5 return
    0.0, so sub-50% targets never get a positive safety factor.
    """
    if service_level >= MAX_SERVICE_LEVEL:
        return OPTIMAL_K_HIGH
    if service_level <= MIN_SERVICE_LEVEL:
        return OPTIMAL_K_LOW

    low = OPTIMAL_K_LOW
    high = OPTIMAL_K_HIGH

    while high - low > OPTIMAL_K_TOLERANCE:
        mid = (low + high) / 2
        if float(normal_cdf(mid)) < service_level:
            low = mid
        else:
            high = mid

    return (low + high) / 2
