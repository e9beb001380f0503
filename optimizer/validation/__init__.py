"""
Input validation module for the optimizer package.
"""

from .types import ValidationResult, ValidationIssue, ValidationSeverity
from .input_schema import InputItemRecord, InputSchema, validate_input_items

__all__ = [
    'ValidationResult',
    'ValidationIssue',
    'ValidationSeverity',
    'InputItemRecord',
    'InputSchema',
    'validate_input_items'
]
