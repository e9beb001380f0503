"""
Shared fixtures for the optimizer test suite.
"""

import pytest

from optimizer.config import OptimizerConfig
from optimizer.data.items import InputItem


@pytest.fixture
def make_item():
    """Factory for input items with a flat 12-month demand of 100 by default."""
    def _make(item_id="SKU-1", warehouse="WH-A", demand=None, **kwargs):
        if demand is None:
            demand = [100.0] * 12
        return InputItem(id=item_id, warehouse=warehouse, demand_data=demand, **kwargs)
    return _make


@pytest.fixture
def monthly_config():
    return OptimizerConfig()


@pytest.fixture
def variable_demand():
    """Alternating 80/120 demand: mean 100, population standard deviation 20."""
    return [80.0, 120.0] * 6
