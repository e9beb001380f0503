"""
Runner module for batch policy calculations.
"""

from .pipeline import OptimizationPipeline, CalculationContext, AnalyticsReport

__all__ = [
    'OptimizationPipeline',
    'CalculationContext',
    'AnalyticsReport'
]
