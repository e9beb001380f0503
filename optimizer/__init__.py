"""
Optimizer package for inventory policy calculations.
"""

from .exceptions import (
    OptimizerError,
    DataValidationError,
    InputValidationError,
    ConfigurationError
)
from .config import (
    OptimizerConfig,
    ForecastingPeriod,
    ReorderQuantityApproach,
    load_config,
    create_default_config,
    create_config_from_env
)
from .utils import *
from .safety_stocks import *
from .insights import *
from .calculators import *
from .data import *
from .validation import *
from .runner import *

__version__ = "0.1.0"
