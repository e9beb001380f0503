"""
Loading of tabular item data.

Turns a DataFrame with one row per item into the raw row mappings the input
schema validates. Demand and inventory history are spread over numbered
columns (demand_1 ... demand_12, inventory_1 ...).
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from ..exceptions import InputValidationError
from ..utils.logger import get_logger
from ..validation.input_schema import InputSchema
from .items import InputItem

logger = get_logger(__name__)

DEMAND_PREFIX = "demand_"
INVENTORY_PREFIX = "inventory_"

# camelCase headers accepted alongside the snake_case field names
COLUMN_ALIASES = {
    'replenishmentStrategy': 'replenishment_strategy',
    'transitIncluded': 'transit_included',
    'unitCost': 'unit_cost',
    'leadTime': 'lead_time',
    'serviceLevel': 'service_level',
    'orderCost': 'order_cost',
    'holdingCostRate': 'holding_cost_rate',
    'orderQuantity': 'order_quantity',
    'currentStock': 'current_stock',
}


def _numbered_columns(columns, prefix: str) -> List[str]:
    """Columns named <prefix><n>, ordered by n"""
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    numbered = []
    for column in columns:
        match = pattern.match(str(column))
        if match:
            numbered.append((int(match.group(1)), column))
    return [column for _, column in sorted(numbered)]


def dataframe_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert an item DataFrame into raw row dicts.

    Args:
        df: One row per item; demand in demand_<n> columns

    Returns:
        List of row dicts keyed by input field names, with demand_data and
        historic_inventory lists built from the numbered columns
    """
    df = df.rename(columns=COLUMN_ALIASES)
    demand_columns = _numbered_columns(df.columns, DEMAND_PREFIX)
    inventory_columns = _numbered_columns(df.columns, INVENTORY_PREFIX)
    series_columns = set(demand_columns) | set(inventory_columns)
    plain_columns = [column for column in df.columns if column not in series_columns]

    # NaN in object columns becomes None so blank cells read as missing
    df = df.astype(object).where(pd.notna(df), None)

    rows = []
    for record in df.to_dict(orient='records'):
        row = {column: record[column] for column in plain_columns}
        row['demand_data'] = [record[column] for column in demand_columns]
        row['historic_inventory'] = [record[column] for column in inventory_columns]
        rows.append(row)
    return rows


def load_items(source: Union[str, Path, pd.DataFrame]) -> List[InputItem]:
    """
    Load and validate a batch of items from a CSV file or DataFrame.

    Raises:
        InputValidationError: If any row fails validation; no item is returned
    """
    if isinstance(source, pd.DataFrame):
        df = source
        source_name = "DataFrame"
    else:
        df = pd.read_csv(source)
        source_name = str(source)

    logger.info(f"📂 Loaded {len(df):,} item rows from {source_name}")

    items, errors = InputSchema.validate_rows(dataframe_to_rows(df))
    logger.log_validation_result(source_name, not errors, len(errors))

    if errors:
        raise InputValidationError(errors)
    return items
