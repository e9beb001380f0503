"""
Utility modules for the optimizer package.
"""

from .logger import (
    OptimizerLogger,
    get_logger,
    setup_logging,
    configure_workflow_logging
)
from .pipeline_decorators import pipeline_step
from .numeric import round_half_up, is_missing, value_or_default, safe_divide

__all__ = [
    'OptimizerLogger',
    'get_logger',
    'setup_logging',
    'configure_workflow_logging',
    'pipeline_step',
    'round_half_up',
    'is_missing',
    'value_or_default',
    'safe_divide'
]
