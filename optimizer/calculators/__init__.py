"""
Calculators Module

General and spreadsheet-replicating inventory policy engines and their
result records.
"""

from .results import (
    ResultStatus,
    CalculationResult,
    ExcelMatchingResult,
    PortfolioSummary,
    ExcelSummary,
    UnitsAndValue,
    WarehouseSummary
)
from .policy_calculator import InventoryCalculator, SafetyStockResult, TARGET_SERVICE_LEVEL
from .excel_matching_calculator import ExcelMatchingCalculator, beta_safety_factor

__all__ = [
    'ResultStatus',
    'CalculationResult',
    'ExcelMatchingResult',
    'PortfolioSummary',
    'ExcelSummary',
    'UnitsAndValue',
    'WarehouseSummary',
    'InventoryCalculator',
    'SafetyStockResult',
    'TARGET_SERVICE_LEVEL',
    'ExcelMatchingCalculator',
    'beta_safety_factor'
]
