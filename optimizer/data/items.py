"""
Input item definition.

An InputItem is one SKU/location row of an uploaded dataset, already parsed
into typed fields. Items are immutable once built.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ItemDefaults:
    """Parameter values used when an item does not supply its own"""
    unit_cost: float = 10.0
    lead_time: float = 30.0  # days
    service_level: float = 0.95
    order_cost: float = 100.0
    holding_cost_rate: float = 0.25


DEFAULTS = ItemDefaults()


@dataclass(frozen=True)
class InputItem:
    """One SKU/location combination with its demand history and cost parameters"""
    id: str
    warehouse: str = ""
    description: str = ""
    product: str = ""
    category1: str = ""
    category2: str = ""
    category3: str = ""
    replenishment_strategy: str = "MTS"
    transit_included: str = "no"
    demand_data: Tuple[float, ...] = field(default_factory=tuple)
    historic_inventory: Tuple[float, ...] = field(default_factory=tuple)
    unit_cost: Optional[float] = None
    lead_time: Optional[float] = None
    service_level: Optional[float] = None
    order_cost: Optional[float] = None
    holding_cost_rate: Optional[float] = None
    order_quantity: Optional[float] = None
    current_stock: Optional[float] = None

    def __post_init__(self):
        # Accept lists from callers but store tuples
        object.__setattr__(self, 'demand_data', tuple(self.demand_data))
        object.__setattr__(self, 'historic_inventory', tuple(self.historic_inventory))

    @property
    def includes_transit(self) -> bool:
        return self.transit_included == "yes"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['demand_data'] = list(self.demand_data)
        data['historic_inventory'] = list(self.historic_inventory)
        return data
