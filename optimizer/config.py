"""
Configuration settings for inventory policy calculations.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any, Union
import os

import yaml

from .exceptions import ConfigurationError


class ForecastingPeriod(Enum):
    """Period length of the demand series"""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self.value]


PERIODS_PER_YEAR = {
    'daily': 365,
    'weekly': 52,
    'monthly': 12
}


class ReorderQuantityApproach(Enum):
    """How the order quantity of an item is resolved"""
    EOQ = "EOQ"
    DIRECT_INPUT = "Direct input"


# camelCase keys used by the configuration collaborator
_KEY_ALIASES = {
    'volumeUnits': 'volume_units',
    'currency': 'currency',
    'otherMeasure': 'other_measure',
    'inputTimeUnit': 'input_time_unit',
    'forecastingPeriod': 'forecasting_period',
    'reorderQuantityApproach': 'reorder_quantity_approach',
    'previewLimit': 'preview_limit',
    'logLevel': 'log_level',
    'logFile': 'log_file',
    'outputDir': 'output_dir',
}


def _parse_enum(enum_cls, value, option: str):
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if str(value).strip().lower() == member.value.lower():
            return member
    valid = ", ".join(member.value for member in enum_cls)
    raise ConfigurationError(f"Invalid {option}: {value!r} (expected one of: {valid})")


@dataclass
class OptimizerConfig:
    """Configuration for a policy calculation run."""

    # Display settings, passed through to reports
    volume_units: str = "unit"
    currency: str = "EUR"
    other_measure: str = "kg"
    input_time_unit: str = "day"

    # Calculation settings
    forecasting_period: ForecastingPeriod = ForecastingPeriod.MONTHLY
    reorder_quantity_approach: ReorderQuantityApproach = ReorderQuantityApproach.EOQ

    # Run settings
    preview_limit: Optional[int] = 100
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    output_dir: Path = Path("output")

    def __post_init__(self):
        """Normalise enum and path fields given as plain strings."""
        self.forecasting_period = _parse_enum(
            ForecastingPeriod, self.forecasting_period, "forecastingPeriod")
        self.reorder_quantity_approach = _parse_enum(
            ReorderQuantityApproach, self.reorder_quantity_approach, "reorderQuantityApproach")
        self.output_dir = Path(self.output_dir)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        if self.preview_limit is not None:
            self.preview_limit = int(self.preview_limit)
            if self.preview_limit < 0:
                raise ConfigurationError("previewLimit cannot be negative")

    @property
    def periods_per_year(self) -> int:
        return self.forecasting_period.periods_per_year

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'OptimizerConfig':
        """Build a config from camelCase or snake_case keys; unknown keys are ignored."""
        known = set(_KEY_ALIASES.values())
        kwargs = {}
        for key, value in (values or {}).items():
            name = _KEY_ALIASES.get(key, key)
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to the camelCase form used in reports."""
        return {
            'volumeUnits': self.volume_units,
            'currency': self.currency,
            'otherMeasure': self.other_measure,
            'inputTimeUnit': self.input_time_unit,
            'forecastingPeriod': self.forecasting_period.value,
            'reorderQuantityApproach': self.reorder_quantity_approach.value,
        }


def create_default_config() -> OptimizerConfig:
    """Create a default configuration."""
    return OptimizerConfig()


def load_config(config_path: Union[str, Path]) -> OptimizerConfig:
    """
    Load configuration from a YAML file.

    The options may sit at the top level or under an ``optimizer:`` key.
    """
    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    if isinstance(raw.get('optimizer'), dict):
        raw = raw['optimizer']

    return OptimizerConfig.from_dict(raw)


def create_config_from_env(base: Optional[OptimizerConfig] = None) -> OptimizerConfig:
    """Create configuration from environment variables."""
    base = base or create_default_config()
    values = base.to_dict()
    values.update(previewLimit=base.preview_limit, logLevel=base.log_level,
                  logFile=base.log_file, outputDir=base.output_dir)

    if os.getenv('OPTIMIZER_FORECASTING_PERIOD'):
        values['forecastingPeriod'] = os.getenv('OPTIMIZER_FORECASTING_PERIOD')

    if os.getenv('OPTIMIZER_REORDER_QUANTITY_APPROACH'):
        values['reorderQuantityApproach'] = os.getenv('OPTIMIZER_REORDER_QUANTITY_APPROACH')

    if os.getenv('OPTIMIZER_CURRENCY'):
        values['currency'] = os.getenv('OPTIMIZER_CURRENCY')

    if os.getenv('OPTIMIZER_PREVIEW_LIMIT'):
        values['previewLimit'] = int(os.getenv('OPTIMIZER_PREVIEW_LIMIT'))

    if os.getenv('OPTIMIZER_LOG_LEVEL'):
        values['logLevel'] = os.getenv('OPTIMIZER_LOG_LEVEL')

    return OptimizerConfig.from_dict(values)
