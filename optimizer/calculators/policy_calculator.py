"""
Inventory Policy Calculator

General formulaic engine: turns an item's demand history and cost parameters
into EOQ, cycle stock, safety stock, reorder point and savings potential,
using the safety factor table for the loss-function lookup.
"""

import math
from typing import Iterable, List, NamedTuple, Optional

from ..data.items import InputItem, DEFAULTS
from ..insights.demand_statistics import DemandStatistics, compute_demand_statistics
from ..config import OptimizerConfig, ReorderQuantityApproach, PERIODS_PER_YEAR
from ..safety_stocks.safety_factor_table import find_optimal_k, lookup_safety_factor
from ..utils.logger import get_logger
from ..utils.numeric import value_or_default, is_missing, safe_divide
from .results import CalculationResult, PortfolioSummary, ResultStatus

# Target safety stock is always sized at this service level
TARGET_SERVICE_LEVEL = 0.95

# Turnover treats EOQ x 12 as the yearly throughput
TURNOVER_PERIODS = 12

# Batch progress is logged every this many items
PROGRESS_INTERVAL = 1000


class SafetyStockResult(NamedTuple):
    safety_stock: float
    k: float


def periods_per_year(forecasting_period) -> int:
    """Annualization multiplier for a forecasting period; anything unrecognised counts as daily."""
    value = getattr(forecasting_period, 'value', forecasting_period)
    return PERIODS_PER_YEAR.get(str(value).lower(), PERIODS_PER_YEAR['daily'])


class InventoryCalculator:
    """
    Calculates inventory policy parameters per item.
    """

    def __init__(self, config: Optional[OptimizerConfig] = None):
        """
        Initialize the calculator.

        Args:
            config: Run configuration (forecasting period, order quantity approach)
        """
        self.config = config or OptimizerConfig()
        self.logger = get_logger(__name__)

    def calculate_demand_statistics(self, demand_data: Iterable) -> DemandStatistics:
        """Mean, population standard deviation, total and CV of the valid observations."""
        return compute_demand_statistics(demand_data)

    def calculate_eoq(
        self,
        annual_demand: float,
        order_cost: float,
        holding_cost_rate: float,
        unit_cost: float
    ) -> float:
        """
        Economic order quantity sqrt(2DS / (cH)).

        Returns 0 when any input is zero or negative.
        """
        if annual_demand <= 0 or order_cost <= 0 or holding_cost_rate <= 0 or unit_cost <= 0:
            return 0.0

        holding_cost = unit_cost * holding_cost_rate
        return math.sqrt((2 * annual_demand * order_cost) / holding_cost)

    def calculate_safety_stock(
        self,
        demand_stats: DemandStatistics,
        lead_time: float,
        service_level: float,
        order_quantity: float
    ) -> SafetyStockResult:
        """
        Safety stock from the loss-function table.

        Args:
            demand_stats: Demand statistics of the item
            lead_time: Lead time, combined as-is with the per-period demand deviation
            service_level: Target service level (0.0 to 1.0)
            order_quantity: Order quantity used for the q/sigma ratio

        Returns:
            Safety stock and the k factor used
        """
        if demand_stats.standard_deviation == 0 or lead_time <= 0:
            return SafetyStockResult(0.0, 0.0)

        # Lead time is in days while the deviation is per demand period;
        # no unit conversion happens here.
        lead_time_std_dev = demand_stats.standard_deviation * math.sqrt(lead_time)

        k = find_optimal_k(service_level)
        q_over_sigma = order_quantity / lead_time_std_dev
        safety_factor = lookup_safety_factor(k, q_over_sigma)

        return SafetyStockResult(safety_factor * lead_time_std_dev, k)

    def calculate_cycle_stock(self, order_quantity: float) -> float:
        """Average stock from ordering alone: half the order quantity."""
        return order_quantity / 2

    def calculate_in_transit_stock(
        self,
        average_demand: float,
        lead_time: float,
        include_transit: bool
    ) -> float:
        if not include_transit or lead_time <= 0:
            return 0.0
        return average_demand * lead_time

    def calculate_reorder_point(
        self,
        average_demand: float,
        lead_time: float,
        safety_stock: float
    ) -> float:
        return (average_demand * lead_time) + safety_stock

    def resolve_order_quantity(self, item: InputItem, eoq: float) -> float:
        """EOQ, or the item's own quantity under direct input when it supplies one."""
        if self.config.reorder_quantity_approach is ReorderQuantityApproach.DIRECT_INPUT:
            if not is_missing(item.order_quantity):
                return float(item.order_quantity)
        return eoq

    def _calculate_item(self, item: InputItem) -> CalculationResult:
        demand_stats = self.calculate_demand_statistics(item.demand_data)

        annual_demand = demand_stats.average_demand * periods_per_year(self.config.forecasting_period)

        unit_cost = value_or_default(item.unit_cost, DEFAULTS.unit_cost)
        lead_time = value_or_default(item.lead_time, DEFAULTS.lead_time)
        service_level = value_or_default(item.service_level, DEFAULTS.service_level)
        order_cost = value_or_default(item.order_cost, DEFAULTS.order_cost)
        holding_cost_rate = value_or_default(item.holding_cost_rate, DEFAULTS.holding_cost_rate)

        eoq = self.calculate_eoq(annual_demand, order_cost, holding_cost_rate, unit_cost)
        order_quantity = self.resolve_order_quantity(item, eoq)

        cycle_stock = self.calculate_cycle_stock(order_quantity)

        safety_stock, k = self.calculate_safety_stock(
            demand_stats, lead_time, service_level, order_quantity
        )
        target_safety_stock, _ = self.calculate_safety_stock(
            demand_stats, lead_time, TARGET_SERVICE_LEVEL, order_quantity
        )

        in_transit = self.calculate_in_transit_stock(
            demand_stats.average_demand, lead_time, item.includes_transit
        )
        reorder_point = self.calculate_reorder_point(
            demand_stats.average_demand, lead_time, safety_stock
        )

        total_target_stock = cycle_stock + target_safety_stock + in_transit
        total_actual_stock = cycle_stock + safety_stock + in_transit

        current_stock = value_or_default(item.current_stock, total_actual_stock)
        savings_potential = max(0.0, (current_stock - total_target_stock) * unit_cost)

        return CalculationResult(
            id=item.id,
            cycle_stock=cycle_stock,
            safety_stock=safety_stock,
            target_safety_stock=target_safety_stock,
            in_transit=in_transit,
            target_stock=total_target_stock,
            actual_stock=total_actual_stock,
            savings_potential=savings_potential,
            service_level=service_level,
            reorder_point=reorder_point,
            economic_order_quantity=order_quantity,
            safety_factor_k=k,
            status=ResultStatus.COMPUTED
        )

    def calculate_item(self, item: InputItem) -> CalculationResult:
        """
        Calculate policy figures for a single item.

        A failure inside the computation does not propagate: the item gets an
        all-zero placeholder marked DEFAULTED and the batch carries on.
        """
        try:
            return self._calculate_item(item)
        except Exception as e:
            item_id = getattr(item, 'id', '')
            self.logger.log_item_fault(item_id, e, "Policy calculation")
            return CalculationResult.placeholder(item_id, str(e))

    def calculate_all(self, items: Iterable[InputItem]) -> List[CalculationResult]:
        """Calculate every item of a batch, in input order."""
        items = list(items)
        self.logger.info(f"Calculating policy parameters for {len(items)} items")

        results = []
        for done, item in enumerate(items, start=1):
            results.append(self.calculate_item(item))
            if done % PROGRESS_INTERVAL == 0:
                self.logger.log_batch_progress(done, len(items), "Policy calculation")

        defaulted = sum(1 for result in results if result.is_defaulted)
        if defaulted:
            self.logger.warning(f"{defaulted} of {len(results)} items fell back to zero results")
        return results

    def calculate_summary(self, results: List[CalculationResult]) -> PortfolioSummary:
        """
        Portfolio totals over a batch of results.

        Inventory turnover is sum(EOQ x 12) over total actual stock, 0 when
        there is no actual stock.
        """
        total_items = len(results)
        total_savings_potential = sum(r.savings_potential for r in results)
        average_service_level = safe_divide(sum(r.service_level for r in results), total_items)
        total_target_stock = sum(r.target_stock for r in results)
        total_actual_stock = sum(r.actual_stock for r in results)

        total_annual_demand = sum(r.economic_order_quantity * TURNOVER_PERIODS for r in results)
        inventory_turnover = safe_divide(total_annual_demand, total_actual_stock)

        return PortfolioSummary(
            total_items=total_items,
            total_savings_potential=total_savings_potential,
            average_service_level=average_service_level,
            total_target_stock=total_target_stock,
            total_actual_stock=total_actual_stock,
            inventory_turnover=inventory_turnover
        )
