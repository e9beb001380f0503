"""
Insights module for demand analysis.
"""

from .demand_statistics import DemandStatistics, compute_demand_statistics, clean_demand_series

__all__ = ['DemandStatistics', 'compute_demand_statistics', 'clean_demand_series']
