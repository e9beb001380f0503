"""
Safety Stocks Module

This module holds the normal-distribution math and the safety factor table
used to size safety stock.
"""

from .safety_factor_table import (
    SafetyFactorTable,
    get_safety_factor_table,
    lookup_safety_factor,
    find_optimal_k
)
from .safety_stock_models import normal_pdf, normal_cdf, expected_shortfall, shortfall_difference

__all__ = [
    'SafetyFactorTable',
    'get_safety_factor_table',
    'lookup_safety_factor',
    'find_optimal_k',
    'normal_pdf',
    'normal_cdf',
    'expected_shortfall',
    'shortfall_difference'
]
