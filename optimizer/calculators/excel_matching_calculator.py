"""
Excel Matching Calculator

Alternate policy engine that reproduces the arithmetic of the legacy
inventory spreadsheet row by row. Its safety factor comes from a fixed step
function of q/sigma fitted to the spreadsheet's outputs, not from the
safety factor table. Column letters in the comments refer to that sheet.
"""

import math
from typing import Iterable, List, Optional

from ..config import OptimizerConfig
from ..data.items import InputItem, DEFAULTS
from ..insights.demand_statistics import compute_demand_statistics
from ..utils.logger import get_logger
from ..utils.numeric import value_or_default, is_missing, round_half_up, safe_divide
from .results import ExcelMatchingResult, ExcelSummary, ResultStatus, UnitsAndValue

# Average days per month used by the sheet for the lead time conversion
DAYS_PER_MONTH = 30.44

MONTHS_PER_YEAR = 12

# (upper q/sigma bound, beta safety factor), checked in order; fitted constants
BETA_BANDS = (
    (0.20, 1.56),
    (0.35, 1.50),
    (0.70, 1.35),
    (1.15, 1.17),
    (1.80, 0.94),
)
BETA_ABOVE_BANDS = 0.75

LOW_SERVICE_LEVEL = 0.90
HIGH_SERVICE_LEVEL = 0.99
LOW_SERVICE_MULTIPLIER = 0.85
HIGH_SERVICE_MULTIPLIER = 1.15


def beta_safety_factor(q_over_sigma: float, service_level: float) -> float:
    """
    Safety factor the spreadsheet applies for a q/sigma ratio and service level.

    Six q/sigma bands, then x0.85 below a 90% service level and x1.15 from
    99% upwards.
    """
    factor = BETA_ABOVE_BANDS
    for upper_bound, band_factor in BETA_BANDS:
        if q_over_sigma <= upper_bound:
            factor = band_factor
            break

    if service_level < LOW_SERVICE_LEVEL:
        factor *= LOW_SERVICE_MULTIPLIER
    elif service_level >= HIGH_SERVICE_LEVEL:
        factor *= HIGH_SERVICE_MULTIPLIER

    return factor


class ExcelMatchingCalculator:
    """
    Calculates per-item results with the spreadsheet's formulas.
    """

    def __init__(self, config: Optional[OptimizerConfig] = None):
        self.config = config or OptimizerConfig()
        self.logger = get_logger(__name__)

    def calculate_eoq(
        self,
        annual_demand: float,
        order_cost: float,
        carrying_rate: float,
        unit_cost: float
    ) -> float:
        if annual_demand <= 0 or order_cost <= 0 or carrying_rate <= 0 or unit_cost <= 0:
            return 0.0

        holding_cost = unit_cost * carrying_rate
        return math.sqrt((2 * annual_demand * order_cost) / holding_cost)

    def _calculate_excel_matching(self, item: InputItem) -> ExcelMatchingResult:
        lead_time_days = value_or_default(item.lead_time, DEFAULTS.lead_time)
        service_level = value_or_default(item.service_level, DEFAULTS.service_level)
        unit_cost_eur = value_or_default(item.unit_cost, DEFAULTS.unit_cost)
        order_cost_eur = value_or_default(item.order_cost, DEFAULTS.order_cost)
        carrying_rate = value_or_default(item.holding_cost_rate, DEFAULTS.holding_cost_rate)

        # Columns T and U: monthly average and standard deviation
        stats = compute_demand_statistics(item.demand_data)
        avg_monthly_demand = stats.average_demand
        monthly_std_dev = stats.standard_deviation

        # Columns AE, AF: the sheet carries history forward unchanged
        historic_yearly_demand = avg_monthly_demand * MONTHS_PER_YEAR
        future_yearly_demand = historic_yearly_demand

        # Columns AG, AL
        eoq = self.calculate_eoq(future_yearly_demand, order_cost_eur, carrying_rate, unit_cost_eur)
        final_reorder_quantity = eoq

        # Column AM
        cycle_stock_units = final_reorder_quantity / 2

        lead_time_months = lead_time_days / DAYS_PER_MONTH
        avg_demand_in_lead_time = avg_monthly_demand * lead_time_months

        # Column AT
        std_dev_over_lead_time = monthly_std_dev * math.sqrt(lead_time_months)

        q_over_sigma = final_reorder_quantity / (std_dev_over_lead_time or 1)
        safety_factor = beta_safety_factor(q_over_sigma, service_level)

        # Column AY
        safety_stock_units = safety_factor * std_dev_over_lead_time

        # Column BA
        transit_stock_units = avg_demand_in_lead_time if item.includes_transit else 0.0

        # Column BJ
        total_target_stock_units = cycle_stock_units + safety_stock_units + transit_stock_units

        # Column BF: measured stock when supplied, otherwise the computed total
        if is_missing(item.current_stock):
            total_actual_stock_units = total_target_stock_units
        else:
            total_actual_stock_units = float(item.current_stock)

        # Column BN
        total_potential_units = max(0.0, total_actual_stock_units - total_target_stock_units)

        total_actual_stock_eur = total_actual_stock_units * unit_cost_eur
        total_target_stock_eur = total_target_stock_units * unit_cost_eur
        total_potential_eur = total_potential_units * unit_cost_eur
        actual_safety_stock_eur = safety_stock_units * unit_cost_eur
        target_safety_stock_eur = safety_stock_units * unit_cost_eur
        target_cycle_stock_eur = cycle_stock_units * unit_cost_eur

        # Column AZ
        reorder_point = avg_demand_in_lead_time + safety_stock_units

        return ExcelMatchingResult(
            id=item.id,
            cycle_stock=cycle_stock_units,
            safety_stock=safety_stock_units,
            target_safety_stock=safety_stock_units,
            in_transit=transit_stock_units,
            target_stock=total_target_stock_units,
            actual_stock=total_actual_stock_units,
            savings_potential=total_potential_eur,
            service_level=service_level,
            reorder_point=reorder_point,
            economic_order_quantity=eoq,
            safety_factor_k=safety_factor,
            status=ResultStatus.COMPUTED,
            historic_yearly_demand=historic_yearly_demand,
            future_yearly_demand=future_yearly_demand,
            avg_monthly_demand=avg_monthly_demand,
            eoq=eoq,
            final_reorder_quantity=final_reorder_quantity,
            cycle_stock_units=cycle_stock_units,
            safety_stock_units=safety_stock_units,
            transit_stock_units=transit_stock_units,
            total_actual_stock_units=total_actual_stock_units,
            total_target_stock_units=total_target_stock_units,
            total_potential_units=total_potential_units,
            total_actual_stock_eur=total_actual_stock_eur,
            total_target_stock_eur=total_target_stock_eur,
            total_potential_eur=total_potential_eur,
            actual_safety_stock_eur=actual_safety_stock_eur,
            target_safety_stock_eur=target_safety_stock_eur,
            target_cycle_stock_eur=target_cycle_stock_eur
        )

    def calculate_excel_matching(self, item: InputItem) -> ExcelMatchingResult:
        """Spreadsheet result for one item; faults give a DEFAULTED all-zero record."""
        try:
            return self._calculate_excel_matching(item)
        except Exception as e:
            item_id = getattr(item, 'id', '')
            self.logger.log_item_fault(item_id, e, "Spreadsheet calculation")
            return ExcelMatchingResult.placeholder(item_id, str(e))

    def calculate_all_excel_matching(self, items: Iterable[InputItem]) -> List[ExcelMatchingResult]:
        items = list(items)
        self.logger.info(f"Calculating spreadsheet figures for {len(items)} items")
        return [self.calculate_excel_matching(item) for item in items]

    def calculate_excel_summary(self, results: List[ExcelMatchingResult]) -> ExcelSummary:
        """
        Batch totals in the layout of the spreadsheet's summary block.

        Actual safety stock is implied as actual - cycle - transit (floored at
        0), valued at each row's actual EUR per unit. All figures are rounded
        half up to whole numbers.
        """
        yearly_demand_units = 0.0
        yearly_demand_eur = 0.0
        actual_units = 0.0
        actual_eur = 0.0
        target_units = 0.0
        target_eur = 0.0
        potential_units = 0.0
        potential_eur = 0.0
        actual_safety_units = 0.0
        actual_safety_eur = 0.0
        target_safety_units = 0.0
        target_safety_eur = 0.0
        target_cycle_units = 0.0
        target_cycle_eur = 0.0

        for r in results:
            unit_cost = safe_divide(r.total_actual_stock_eur, r.total_actual_stock_units)
            actual_safety = max(
                0.0, r.total_actual_stock_units - r.cycle_stock_units - r.transit_stock_units
            )

            yearly_demand_units += r.future_yearly_demand
            yearly_demand_eur += r.future_yearly_demand * unit_cost
            actual_units += r.total_actual_stock_units
            actual_eur += r.total_actual_stock_eur
            target_units += r.total_target_stock_units
            target_eur += r.total_target_stock_eur
            potential_units += r.total_potential_units
            potential_eur += r.total_potential_eur
            actual_safety_units += actual_safety
            actual_safety_eur += actual_safety * unit_cost
            target_safety_units += r.safety_stock_units
            target_safety_eur += r.target_safety_stock_eur
            target_cycle_units += r.cycle_stock_units
            target_cycle_eur += r.target_cycle_stock_eur

        potential_percentage = safe_divide(potential_eur, actual_eur) * 100

        def rounded(units: float, eur: float) -> UnitsAndValue:
            return UnitsAndValue(units=round_half_up(units), eur=round_half_up(eur))

        return ExcelSummary(
            total_items=len(results),
            yearly_demand=rounded(yearly_demand_units, yearly_demand_eur),
            actual_total_inventory=rounded(actual_units, actual_eur),
            target_total_inventory=rounded(target_units, target_eur),
            total_potential=UnitsAndValue(
                units=round_half_up(potential_units),
                eur=round_half_up(potential_eur),
                percentage=round_half_up(potential_percentage)
            ),
            actual_safety_stock=rounded(actual_safety_units, actual_safety_eur),
            target_safety_stock=rounded(target_safety_units, target_safety_eur),
            target_cycle_stock=rounded(target_cycle_units, target_cycle_eur)
        )
