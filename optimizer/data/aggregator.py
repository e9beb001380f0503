"""
Warehouse aggregation utilities.
Rolls per-item results up into warehouse-level summaries.
"""

from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from ..calculators.results import CalculationResult, WarehouseSummary
from .items import InputItem

UNKNOWN_WAREHOUSE = "Unknown"

_SUMMED_COLUMNS = {
    'actual_stock': 'total_actual_stock',
    'target_stock': 'total_target_stock',
    'savings_potential': 'total_savings_potential',
    'safety_stock': 'actual_safety_stock',
    'target_safety_stock': 'target_safety_stock',
}


def results_to_dataframe(results: Iterable[CalculationResult]) -> pd.DataFrame:
    """
    Convert result records into a DataFrame, one row per item.

    Args:
        results: Calculation results (general or spreadsheet engine)

    Returns:
        DataFrame with snake_case columns and the status as its string value
    """
    rows = []
    for result in results:
        row = dict(result.__dict__)
        row['status'] = result.status.value
        rows.append(row)
    return pd.DataFrame(rows)


def warehouse_lookup(items: Iterable[InputItem]) -> Dict[str, str]:
    """Map item id to warehouse; the first occurrence of an id wins."""
    lookup: Dict[str, str] = {}
    for item in items:
        lookup.setdefault(item.id, item.warehouse)
    return lookup


class WarehouseAggregator:
    """Groups a batch of results by the warehouse of their source item"""

    def __init__(self, items: Iterable[InputItem]):
        self.warehouses = warehouse_lookup(items)

    def warehouse_for(self, item_id: str) -> str:
        """Warehouse of an item, or 'Unknown' when the item has none or is not in the batch."""
        return self.warehouses.get(item_id) or UNKNOWN_WAREHOUSE

    def group_results(self, results: Sequence[CalculationResult]) -> Dict[str, List[CalculationResult]]:
        """Results per warehouse, in the order warehouses are first seen."""
        groups: Dict[str, List[CalculationResult]] = {}
        for result in results:
            groups.setdefault(self.warehouse_for(result.id), []).append(result)
        return groups

    def summarize(self, results: Sequence[CalculationResult]) -> List[WarehouseSummary]:
        """
        Warehouse totals: summed stock, savings and safety stock, averaged
        service level, one summary per warehouse.
        """
        if not results:
            return []

        df = results_to_dataframe(results)
        df['warehouse'] = [self.warehouse_for(item_id) for item_id in df['id']]

        grouped = df.groupby('warehouse', sort=False)
        totals = grouped[list(_SUMMED_COLUMNS)].sum().rename(columns=_SUMMED_COLUMNS)
        totals['total_items'] = grouped.size()
        totals['average_service_level'] = grouped['service_level'].mean()

        summaries = []
        for warehouse, row in totals.iterrows():
            summaries.append(WarehouseSummary(
                warehouse=str(warehouse),
                total_items=int(row['total_items']),
                total_actual_stock=float(row['total_actual_stock']),
                total_target_stock=float(row['total_target_stock']),
                total_savings_potential=float(row['total_savings_potential']),
                average_service_level=float(row['average_service_level']),
                actual_safety_stock=float(row['actual_safety_stock']),
                target_safety_stock=float(row['target_safety_stock'])
            ))
        return summaries


def group_results_by_warehouse(
    results: Sequence[CalculationResult],
    items: Iterable[InputItem]
) -> Dict[str, List[CalculationResult]]:
    return WarehouseAggregator(items).group_results(results)


def calculate_warehouse_summaries(
    results: Sequence[CalculationResult],
    items: Iterable[InputItem]
) -> List[WarehouseSummary]:
    """Warehouse summaries for a batch, joining results back to their items by id."""
    return WarehouseAggregator(items).summarize(results)


def get_aggregation_summary(summaries: List[WarehouseSummary]) -> Optional[pd.DataFrame]:
    """Warehouse summaries as a DataFrame for export, or None when there are none."""
    if not summaries:
        return None
    return pd.DataFrame([summary.to_dict() for summary in summaries])
