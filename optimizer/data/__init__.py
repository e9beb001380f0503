"""
Data module for the optimizer package.

This module holds the input item model, tabular loading and warehouse
aggregation.
"""

from .items import InputItem, ItemDefaults, DEFAULTS
from .loader import dataframe_to_rows, load_items
from .aggregator import (
    WarehouseAggregator,
    UNKNOWN_WAREHOUSE,
    results_to_dataframe,
    group_results_by_warehouse,
    calculate_warehouse_summaries,
    get_aggregation_summary
)

__all__ = [
    'InputItem',
    'ItemDefaults',
    'DEFAULTS',
    'dataframe_to_rows',
    'load_items',
    'WarehouseAggregator',
    'UNKNOWN_WAREHOUSE',
    'results_to_dataframe',
    'group_results_by_warehouse',
    'calculate_warehouse_summaries',
    'get_aggregation_summary'
]
