"""
Result records produced by the calculators.

Every per-item result carries a status so that a legitimately zero result
can be told apart from a placeholder written after a computation fault.
"""

from dataclasses import dataclass, asdict, fields
from enum import Enum
from typing import Any, Dict, Optional


class ResultStatus(Enum):
    """Outcome of a single item's computation"""
    COMPUTED = "computed"
    DEFAULTED = "defaulted"


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _to_camel_dict(record) -> Dict[str, Any]:
    data = {}
    for key, value in asdict(record).items():
        if isinstance(value, Enum):
            value = value.value
        data[_camel(key)] = value
    return data


@dataclass(frozen=True)
class CalculationResult:
    """Policy figures for one item (general engine)"""
    id: str
    cycle_stock: float = 0.0
    safety_stock: float = 0.0
    target_safety_stock: float = 0.0
    in_transit: float = 0.0
    target_stock: float = 0.0
    actual_stock: float = 0.0
    savings_potential: float = 0.0
    service_level: float = 0.0
    reorder_point: float = 0.0
    economic_order_quantity: float = 0.0
    safety_factor_k: float = 0.0
    status: ResultStatus = ResultStatus.COMPUTED
    error: Optional[str] = None

    @property
    def is_defaulted(self) -> bool:
        return self.status is ResultStatus.DEFAULTED

    # Aliases used by the reporting layer
    @property
    def in_transit_stock(self) -> float:
        return self.in_transit

    @property
    def total_target_stock(self) -> float:
        return self.target_stock

    @property
    def total_actual_stock(self) -> float:
        return self.actual_stock

    @classmethod
    def placeholder(cls, item_id: str, error: Optional[str] = None) -> 'CalculationResult':
        """All-zero result for an item whose computation faulted"""
        return cls(id=item_id, status=ResultStatus.DEFAULTED, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel_dict(self)


@dataclass(frozen=True)
class ExcelMatchingResult(CalculationResult):
    """
    Policy figures from the spreadsheet-replication engine.

    Adds the unit and EUR breakdowns the spreadsheet reports per row.
    """
    historic_yearly_demand: float = 0.0
    future_yearly_demand: float = 0.0
    avg_monthly_demand: float = 0.0
    eoq: float = 0.0
    final_reorder_quantity: float = 0.0
    cycle_stock_units: float = 0.0
    safety_stock_units: float = 0.0
    transit_stock_units: float = 0.0
    total_actual_stock_units: float = 0.0
    total_target_stock_units: float = 0.0
    total_potential_units: float = 0.0
    total_actual_stock_eur: float = 0.0
    total_target_stock_eur: float = 0.0
    total_potential_eur: float = 0.0
    actual_safety_stock_eur: float = 0.0
    target_safety_stock_eur: float = 0.0
    target_cycle_stock_eur: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = _to_camel_dict(self)
        # Spreadsheet column headers spell the currency in capitals
        return {key[:-3] + 'EUR' if key.endswith('Eur') else key: value
                for key, value in data.items()}


@dataclass(frozen=True)
class PortfolioSummary:
    """Batch-level totals from the general engine"""
    total_items: int = 0
    total_savings_potential: float = 0.0
    average_service_level: float = 0.0
    total_target_stock: float = 0.0
    total_actual_stock: float = 0.0
    inventory_turnover: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel_dict(self)


@dataclass(frozen=True)
class UnitsAndValue:
    """A quantity reported both in units and in currency"""
    units: float = 0.0
    eur: float = 0.0
    percentage: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'units': self.units, 'eur': self.eur}
        if self.percentage is not None:
            data['percentage'] = self.percentage
        return data


@dataclass(frozen=True)
class ExcelSummary:
    """Batch-level totals from the spreadsheet-replication engine, rounded to whole numbers"""
    total_items: int = 0
    yearly_demand: UnitsAndValue = UnitsAndValue()
    actual_total_inventory: UnitsAndValue = UnitsAndValue()
    target_total_inventory: UnitsAndValue = UnitsAndValue()
    total_potential: UnitsAndValue = UnitsAndValue(percentage=0.0)
    actual_safety_stock: UnitsAndValue = UnitsAndValue()
    target_safety_stock: UnitsAndValue = UnitsAndValue()
    target_cycle_stock: UnitsAndValue = UnitsAndValue()

    def to_dict(self) -> Dict[str, Any]:
        data = {'totalItems': self.total_items}
        for field in fields(self):
            if field.name == 'total_items':
                continue
            data[_camel(field.name)] = getattr(self, field.name).to_dict()
        return data


@dataclass(frozen=True)
class WarehouseSummary:
    """Totals for the items of one warehouse"""
    warehouse: str
    total_items: int = 0
    total_actual_stock: float = 0.0
    total_target_stock: float = 0.0
    total_savings_potential: float = 0.0
    average_service_level: float = 0.0
    actual_safety_stock: float = 0.0
    target_safety_stock: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return _to_camel_dict(self)
