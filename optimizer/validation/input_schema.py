"""
Schema definitions for input item rows.
"""

import math
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, ValidationError, validator

from ..data.items import InputItem
from .types import ValidationIssue, ValidationResult, ValidationSeverity


def _to_float(value: Any) -> float:
    if isinstance(value, str):
        value = value.replace(',', '').strip()
    return float(value)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return isinstance(value, float) and math.isnan(value)


class InputItemRecord(BaseModel):
    """Schema for a single input row"""

    id: str = Field("", description="Item identifier, unique within a batch")
    warehouse: str = Field("", description="Warehouse the item is stocked in")
    description: str = Field("", description="Item description")
    product: str = Field("", description="Product reference")
    category1: str = Field("", description="Category level 1")
    category2: str = Field("", description="Category level 2")
    category3: str = Field("", description="Category level 3")
    replenishment_strategy: str = Field("MTS", description="Replenishment strategy tag")
    transit_included: str = Field("no", description="'yes' when in-transit stock counts towards stock")
    demand_data: List[float] = Field(default_factory=list, description="Demand per period, oldest first")
    historic_inventory: List[float] = Field(default_factory=list, description="Inventory per period")
    unit_cost: Optional[float] = Field(None, ge=0.0, description="Unit cost")
    lead_time: Optional[float] = Field(None, ge=0.0, description="Lead time in days")
    service_level: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Target service level (0.0 to 1.0)"
    )
    order_cost: Optional[float] = Field(None, ge=0.0, description="Fixed cost per order")
    holding_cost_rate: Optional[float] = Field(
        None, ge=0.0, description="Yearly holding cost as a fraction of unit cost"
    )
    order_quantity: Optional[float] = Field(None, ge=0.0, description="Directly specified order quantity")
    current_stock: Optional[float] = Field(None, ge=0.0, description="Current on-hand stock in units")

    @validator("id", "warehouse", "description", "product", "category1", "category2",
               "category3", pre=True)
    def validate_text(cls, v):
        """Blank cells become empty strings; whole-number floats lose their '.0'"""
        if _is_blank(v):
            return ""
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        return str(v).strip()

    @validator("replenishment_strategy", pre=True)
    def validate_replenishment_strategy(cls, v):
        if _is_blank(v):
            return "MTS"
        return str(v).strip()

    @validator("transit_included", pre=True)
    def validate_transit_included(cls, v):
        """Only a case-insensitive 'yes' counts as yes"""
        if _is_blank(v):
            return "no"
        return "yes" if str(v).strip().lower() == "yes" else "no"

    @validator("demand_data", "historic_inventory", pre=True)
    def validate_series(cls, v):
        """Non-numeric observations become NaN so the statistics can drop them"""
        if v is None:
            return []
        if isinstance(v, (str, bytes)):
            raise ValueError("expected a sequence of observations")
        series = []
        for value in v:
            try:
                series.append(_to_float(value))
            except (TypeError, ValueError):
                series.append(float('nan'))
        return series

    @validator("unit_cost", "lead_time", "service_level", "order_cost",
               "holding_cost_rate", "order_quantity", "current_stock", pre=True)
    def validate_optional_number(cls, v):
        """Handle empty cells and thousands separators"""
        if _is_blank(v):
            return None
        try:
            return _to_float(v)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid numeric value: {v}")

    def to_item(self) -> InputItem:
        return InputItem(**self.dict())


def _batch_issues(indexed_items: Iterable[Tuple[int, InputItem]]) -> List[ValidationIssue]:
    """Issues for items missing required content or repeating an earlier id"""
    issues: List[ValidationIssue] = []
    first_seen: Dict[str, int] = {}

    def add(category: str, message: str, row: int, item: InputItem):
        issues.append(ValidationIssue(
            severity=ValidationSeverity.ERROR,
            category=category,
            message=f"Row {row}: {message}",
            row=row,
            item_id=item.id or None
        ))

    for row, item in indexed_items:
        if not item.id:
            add("missing_id", "Missing ID", row, item)
        if not item.warehouse:
            add("missing_warehouse", "Missing warehouse", row, item)
        if len(item.demand_data) == 0:
            add("missing_demand", "No demand data found", row, item)

        if item.id:
            if item.id in first_seen:
                add("duplicate_id",
                    f"Duplicate ID '{item.id}' (first seen in row {first_seen[item.id]})",
                    row, item)
            else:
                first_seen[item.id] = row

    return issues


class InputSchema:
    """Schema validation and conversion utilities for input rows"""

    REQUIRED_FIELDS = ["id", "warehouse", "demand_data"]

    @staticmethod
    def validate_rows(rows: Iterable[Mapping[str, Any]]) -> Tuple[List[InputItem], List[str]]:
        """
        Parse and validate raw rows.

        Args:
            rows: Raw row mappings keyed by InputItemRecord field names

        Returns:
            (items, errors). Errors are 1-based, row-indexed messages; when
            there is any error the batch is rejected and items is empty.
        """
        rows = list(rows)
        if not rows:
            return [], ["No data found"]

        errors: List[str] = []
        parsed: List[Tuple[int, InputItem]] = []

        for index, row in enumerate(rows, start=1):
            try:
                record = InputItemRecord(**dict(row))
            except ValidationError as e:
                for error in e.errors():
                    location = ".".join(str(part) for part in error['loc'])
                    errors.append(f"Row {index}: {location}: {error['msg']}")
                continue
            parsed.append((index, record.to_item()))

        issues = _batch_issues(parsed)
        errors.extend(issue.message for issue in issues)

        if errors:
            errors.sort(key=_row_number)
            return [], errors
        return [item for _, item in parsed], []


def _row_number(message: str) -> int:
    # "Row 12: ..." -> 12; sort is stable so per-row order is kept
    return int(message.split(":", 1)[0].split()[-1])


def validate_input_items(items: Sequence[InputItem]) -> ValidationResult:
    """
    Check already-built items for the content every calculation needs.

    Returns:
        ValidationResult with one error issue per problem
    """
    start_time = time.time()
    issues: List[ValidationIssue] = []

    if len(items) == 0:
        issues.append(ValidationIssue(
            severity=ValidationSeverity.ERROR,
            category="empty_batch",
            message="No data found"
        ))

    issues.extend(_batch_issues(enumerate(items, start=1)))

    return ValidationResult(
        is_valid=not issues,
        issues=issues,
        summary={'total_items': len(items), 'error_count': len(issues)},
        execution_time=time.time() - start_time
    )
