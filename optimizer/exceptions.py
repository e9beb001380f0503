"""
Custom exceptions for the optimizer package.
"""

from typing import List


class OptimizerError(Exception):
    """Base exception for optimizer errors"""
    pass


class DataValidationError(OptimizerError):
    """Raised when data validation fails"""
    pass


class InputValidationError(DataValidationError):
    """Raised when an input batch is rejected; carries one message per failing row"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        summary = f"Data validation failed with {len(self.errors)} error(s)"
        if self.errors:
            summary += f": {self.errors[0]}"
        super().__init__(summary)


class ConfigurationError(OptimizerError):
    """Raised when a configuration value is not recognised"""
    pass
