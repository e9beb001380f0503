"""
Pipeline for running a full policy calculation over one uploaded batch.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..calculators.excel_matching_calculator import ExcelMatchingCalculator
from ..calculators.policy_calculator import InventoryCalculator
from ..calculators.results import (
    CalculationResult,
    ExcelMatchingResult,
    ExcelSummary,
    PortfolioSummary,
    WarehouseSummary
)
from ..config import OptimizerConfig
from ..data.aggregator import WarehouseAggregator
from ..data.items import InputItem
from ..exceptions import InputValidationError
from ..utils.logger import OptimizerLogger
from ..utils.pipeline_decorators import pipeline_step
from ..validation.input_schema import validate_input_items

TOTAL_STEPS = 4


@dataclass(frozen=True)
class CalculationContext:
    """The items of one batch together with the configuration to run them under"""
    items: Tuple[InputItem, ...]
    config: OptimizerConfig = field(default_factory=OptimizerConfig)

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    @property
    def has_data(self) -> bool:
        return len(self.items) > 0


@dataclass
class AnalyticsReport:
    """Everything the reporting layer needs from one batch run"""
    summary: PortfolioSummary
    excel_summary: ExcelSummary
    results: List[CalculationResult]
    excel_results: List[ExcelMatchingResult]
    warehouse_summaries: List[WarehouseSummary]
    config: OptimizerConfig
    total_items: int
    defaulted_items: List[str] = field(default_factory=list)
    execution_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hasData': self.total_items > 0,
            'summary': self.summary.to_dict(),
            'excelSummary': self.excel_summary.to_dict(),
            'results': [result.to_dict() for result in self.results],
            'excelResults': [result.to_dict() for result in self.excel_results],
            'warehouseSummaries': [summary.to_dict() for summary in self.warehouse_summaries],
            'config': self.config.to_dict(),
            'totalItems': self.total_items,
            'defaultedItems': list(self.defaulted_items),
        }

    def to_json(self, file_path: Optional[Union[str, Path]] = None) -> str:
        """Convert to JSON string or save to file"""
        json_str = json.dumps(self.to_dict(), indent=2, default=str)

        if file_path:
            with open(file_path, 'w') as f:
                f.write(json_str)

        return json_str


def _preview(records: Sequence, limit: Optional[int]) -> list:
    if limit is None:
        return list(records)
    return list(records[:limit])


class OptimizationPipeline:
    """Runs both calculators and all roll-ups over one batch."""

    def __init__(self, context: CalculationContext):
        self.context = context
        self.config = context.config
        self.logger = OptimizerLogger(__name__, self.config.log_level,
                                      str(self.config.log_file) if self.config.log_file else None)

        self.inventory_calculator = InventoryCalculator(self.config)
        self.excel_calculator = ExcelMatchingCalculator(self.config)

        # Full, uncapped result lists of the latest run
        self.results: List[CalculationResult] = []
        self.excel_results: List[ExcelMatchingResult] = []

    @pipeline_step("Validating items", 1, TOTAL_STEPS)
    def _validate_items(self):
        validation = validate_input_items(self.context.items)
        self.logger.log_validation_result("input batch", validation.is_valid, len(validation.issues))
        if not validation.is_valid:
            raise InputValidationError(validation.errors)

    @pipeline_step("Calculating policy parameters", 2, TOTAL_STEPS)
    def _calculate_policies(self) -> Tuple[List[CalculationResult], PortfolioSummary]:
        results = self.inventory_calculator.calculate_all(self.context.items)
        return results, self.inventory_calculator.calculate_summary(results)

    @pipeline_step("Calculating spreadsheet figures", 3, TOTAL_STEPS)
    def _calculate_excel_matching(self) -> Tuple[List[ExcelMatchingResult], ExcelSummary]:
        results = self.excel_calculator.calculate_all_excel_matching(self.context.items)
        return results, self.excel_calculator.calculate_excel_summary(results)

    @pipeline_step("Aggregating by warehouse", 4, TOTAL_STEPS)
    def _aggregate(self, results: List[CalculationResult]) -> List[WarehouseSummary]:
        return WarehouseAggregator(self.context.items).summarize(results)

    def run(self) -> AnalyticsReport:
        """
        Run the complete calculation for the batch.

        Raises:
            InputValidationError: If the batch is empty or an item is incomplete;
                nothing is calculated in that case
        """
        start_time = time.time()
        self.logger.info(f"Starting policy calculation for {len(self.context.items)} items")
        self.logger.info(f"Configuration: {self.config.to_dict()}")

        self._validate_items()
        results, summary = self._calculate_policies()
        excel_results, excel_summary = self._calculate_excel_matching()
        warehouse_summaries = self._aggregate(results)
        self.results = results
        self.excel_results = excel_results

        defaulted = [r.id for r in results if r.is_defaulted]
        defaulted += [r.id for r in excel_results if r.is_defaulted and r.id not in defaulted]

        limit = self.config.preview_limit
        report = AnalyticsReport(
            summary=summary,
            excel_summary=excel_summary,
            results=_preview(results, limit),
            excel_results=_preview(excel_results, limit),
            warehouse_summaries=warehouse_summaries,
            config=self.config,
            total_items=len(self.context.items),
            defaulted_items=defaulted,
            execution_time=time.time() - start_time
        )

        self.logger.log_step_completion(
            "Policy calculation", report.execution_time,
            {'items': report.total_items, 'warehouses': len(warehouse_summaries),
             'defaulted': len(defaulted)}
        )
        return report
