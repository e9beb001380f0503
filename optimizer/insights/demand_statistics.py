"""
Demand statistics for policy calculations.

Reduces a historical demand series to its mean, population standard
deviation, total and coefficient of variation. This is a plain sample
summary over the fixed history window, not a forecast.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class DemandStatistics:
    """Summary statistics of one item's demand history"""
    average_demand: float = 0.0
    standard_deviation: float = 0.0
    total_demand: float = 0.0
    coefficient_of_variation: float = 0.0
    observation_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def clean_demand_series(series: Iterable) -> np.ndarray:
    """
    Drop observations that cannot enter the statistics.

    Non-numeric and NaN entries and negative values are excluded from the
    sample; nothing is zero-filled.

    Args:
        series: Raw demand observations

    Returns:
        Float array of the valid observations, in their original order
    """
    values = pd.to_numeric(pd.Series(list(series), dtype=object), errors='coerce')
    values = values.astype(float)
    valid = values[values.notna() & np.isfinite(values) & (values >= 0)]
    return valid.to_numpy(dtype=float)


def compute_demand_statistics(series: Iterable) -> DemandStatistics:
    """
    Compute demand statistics over the valid observations of a series.

    An empty (or entirely invalid) series yields all zeros. The standard
    deviation divides by N, and the coefficient of variation is 0 when the
    average is 0.
    """
    valid = clean_demand_series(series)

    if valid.size == 0:
        return DemandStatistics()

    total_demand = float(valid.sum())
    average_demand = total_demand / valid.size
    variance = float(np.sum((valid - average_demand) ** 2)) / valid.size
    standard_deviation = float(np.sqrt(variance))

    coefficient_of_variation = standard_deviation / average_demand if average_demand > 0 else 0.0

    return DemandStatistics(
        average_demand=average_demand,
        standard_deviation=standard_deviation,
        total_demand=total_demand,
        coefficient_of_variation=coefficient_of_variation,
        observation_count=int(valid.size)
    )
