"""
Tests for the general policy calculator.
"""

import math

import pytest

from optimizer.calculators import (
    CalculationResult,
    InventoryCalculator,
    ResultStatus,
)
from optimizer.calculators.policy_calculator import (
    TARGET_SERVICE_LEVEL,
    periods_per_year,
)
from optimizer.config import ForecastingPeriod, OptimizerConfig, ReorderQuantityApproach
from optimizer.insights import compute_demand_statistics
from optimizer.safety_stocks import find_optimal_k, lookup_safety_factor

FLAT_EOQ = math.sqrt(96000)  # sqrt(2 * 1200 * 100 / (10 * 0.25))


@pytest.fixture
def calculator(monthly_config):
    return InventoryCalculator(monthly_config)


class TestEOQ:
    def test_known_value(self, calculator):
        assert calculator.calculate_eoq(1200, 100, 0.25, 10) == pytest.approx(FLAT_EOQ)

    @pytest.mark.parametrize("args", [
        (0, 100, 0.25, 10),
        (1200, 0, 0.25, 10),
        (1200, 100, 0, 10),
        (1200, 100, 0.25, 0),
        (-5, 100, 0.25, 10),
    ])
    def test_zero_or_negative_inputs_give_zero(self, calculator, args):
        assert calculator.calculate_eoq(*args) == 0.0

    def test_grows_with_demand_and_order_cost(self, calculator):
        base = calculator.calculate_eoq(1200, 100, 0.25, 10)
        assert calculator.calculate_eoq(2400, 100, 0.25, 10) > base
        assert calculator.calculate_eoq(1200, 200, 0.25, 10) > base

    def test_shrinks_with_holding_cost(self, calculator):
        base = calculator.calculate_eoq(1200, 100, 0.25, 10)
        assert calculator.calculate_eoq(1200, 100, 0.5, 10) < base
        assert calculator.calculate_eoq(1200, 100, 0.25, 20) < base


class TestSafetyStock:
    def test_zero_deviation_gives_zero(self, calculator):
        stats = compute_demand_statistics([100] * 12)
        assert calculator.calculate_safety_stock(stats, 30, 0.95, FLAT_EOQ) == (0.0, 0.0)

    def test_zero_lead_time_gives_zero(self, calculator, variable_demand):
        stats = compute_demand_statistics(variable_demand)
        assert calculator.calculate_safety_stock(stats, 0, 0.95, FLAT_EOQ).safety_stock == 0.0

    def test_uses_table_lookup(self, calculator, variable_demand):
        stats = compute_demand_statistics(variable_demand)
        sigma_lt = 20 * math.sqrt(30)

        result = calculator.calculate_safety_stock(stats, 30, 0.95, FLAT_EOQ)

        assert result.k == find_optimal_k(0.95)
        expected = lookup_safety_factor(result.k, FLAT_EOQ / sigma_lt) * sigma_lt
        assert result.safety_stock == pytest.approx(expected)
        assert result.safety_stock > 0

    def test_order_quantity_outside_grid_gives_zero(self, calculator, variable_demand):
        stats = compute_demand_statistics(variable_demand)
        # q / sigma_LT = 10000 / 109.5 is far beyond the grid
        assert calculator.calculate_safety_stock(stats, 30, 0.95, 10000).safety_stock == 0.0


class TestPeriodsPerYear:
    def test_known_periods(self):
        assert periods_per_year(ForecastingPeriod.MONTHLY) == 12
        assert periods_per_year(ForecastingPeriod.WEEKLY) == 52
        assert periods_per_year(ForecastingPeriod.DAILY) == 365

    def test_unrecognised_period_counts_as_daily(self):
        assert periods_per_year("fortnightly") == 365


class TestCalculateItem:
    def test_flat_demand(self, calculator, make_item):
        result = calculator.calculate_item(make_item())

        assert result.status is ResultStatus.COMPUTED
        assert result.economic_order_quantity == pytest.approx(309.84, abs=0.01)
        assert result.cycle_stock == pytest.approx(154.92, abs=0.01)
        assert result.safety_stock == 0.0
        assert result.target_safety_stock == 0.0
        assert result.in_transit == 0.0
        assert result.reorder_point == pytest.approx(3000.0)
        assert result.target_stock == pytest.approx(result.cycle_stock)
        assert result.actual_stock == pytest.approx(result.cycle_stock)
        assert result.savings_potential == 0.0
        assert result.service_level == 0.95

    def test_empty_demand_is_all_zero_but_computed(self, calculator, make_item):
        result = calculator.calculate_item(make_item(demand=[]))

        assert result.status is ResultStatus.COMPUTED
        assert result.economic_order_quantity == 0.0
        assert result.cycle_stock == 0.0
        assert result.safety_stock == 0.0
        assert result.reorder_point == 0.0
        assert result.savings_potential == 0.0

    def test_invalid_observations_are_ignored(self, calculator, make_item):
        noisy = calculator.calculate_item(make_item(demand=[100, float("nan"), -20, 100, 200]))
        clean = calculator.calculate_item(make_item(demand=[100, 100, 200]))

        assert noisy.to_dict() == clean.to_dict()

    def test_missing_parameters_use_defaults(self, calculator, make_item):
        explicit = calculator.calculate_item(make_item(
            unit_cost=10, lead_time=30, service_level=0.95, order_cost=100, holding_cost_rate=0.25
        ))
        zeros = calculator.calculate_item(make_item(
            unit_cost=0, lead_time=float("nan"), service_level=None, order_cost=0, holding_cost_rate=0
        ))

        assert zeros.to_dict() == explicit.to_dict()

    def test_transit_stock(self, calculator, make_item):
        result = calculator.calculate_item(make_item(transit_included="yes"))

        assert result.in_transit == pytest.approx(100 * 30)
        assert result.target_stock == pytest.approx(result.cycle_stock + 3000)

    def test_savings_potential(self, calculator, make_item):
        result = calculator.calculate_item(make_item(current_stock=1000))
        assert result.savings_potential == pytest.approx((1000 - FLAT_EOQ / 2) * 10)

    def test_savings_potential_is_never_negative(self, calculator, make_item):
        result = calculator.calculate_item(make_item(current_stock=1))
        assert result.savings_potential == 0.0

    def test_target_safety_stock_uses_fixed_service_level(self, calculator, make_item, variable_demand):
        item = make_item(demand=variable_demand, service_level=0.99)
        result = calculator.calculate_item(item)

        stats = compute_demand_statistics(variable_demand)
        target = calculator.calculate_safety_stock(stats, 30, TARGET_SERVICE_LEVEL, result.economic_order_quantity)
        actual = calculator.calculate_safety_stock(stats, 30, 0.99, result.economic_order_quantity)

        assert result.target_safety_stock == pytest.approx(target.safety_stock)
        assert result.safety_stock == pytest.approx(actual.safety_stock)
        assert result.safety_factor_k == actual.k
        assert result.reorder_point == pytest.approx(100 * 30 + actual.safety_stock)

    def test_weekly_period_annualizes_by_52(self, make_item):
        calculator = InventoryCalculator(OptimizerConfig(forecasting_period="weekly"))
        result = calculator.calculate_item(make_item())
        assert result.economic_order_quantity == pytest.approx(math.sqrt(416000))

    def test_direct_input_order_quantity(self, make_item):
        config = OptimizerConfig(reorder_quantity_approach=ReorderQuantityApproach.DIRECT_INPUT)
        calculator = InventoryCalculator(config)

        result = calculator.calculate_item(make_item(order_quantity=500))

        assert result.economic_order_quantity == 500
        assert result.cycle_stock == 250

    def test_direct_input_without_quantity_falls_back_to_eoq(self, make_item):
        calculator = InventoryCalculator(OptimizerConfig(reorder_quantity_approach="Direct input"))
        result = calculator.calculate_item(make_item())
        assert result.economic_order_quantity == pytest.approx(FLAT_EOQ)

    def test_eoq_approach_ignores_supplied_quantity(self, calculator, make_item):
        result = calculator.calculate_item(make_item(order_quantity=500))
        assert result.economic_order_quantity == pytest.approx(FLAT_EOQ)


class FailingCalculator(InventoryCalculator):
    """Raises for any item with an average demand above 1000"""

    def calculate_reorder_point(self, average_demand, lead_time, safety_stock):
        if average_demand > 1000:
            raise ZeroDivisionError("simulated fault")
        return super().calculate_reorder_point(average_demand, lead_time, safety_stock)


class TestFaultIsolation:
    def test_faulty_item_gets_defaulted_placeholder(self, make_item):
        calculator = FailingCalculator()
        items = [
            make_item("A"),
            make_item("B", demand=[5000] * 12),
            make_item("C"),
        ]

        results = calculator.calculate_all(items)

        assert [r.id for r in results] == ["A", "B", "C"]
        assert [r.status for r in results] == [
            ResultStatus.COMPUTED, ResultStatus.DEFAULTED, ResultStatus.COMPUTED
        ]
        faulty = results[1]
        assert faulty.is_defaulted
        assert faulty.error == "simulated fault"
        assert faulty.economic_order_quantity == 0.0
        assert faulty.actual_stock == 0.0
        assert faulty.service_level == 0.0

    def test_defaulted_differs_from_legitimate_zero(self, make_item):
        calculator = FailingCalculator()
        zero = calculator.calculate_item(make_item("Z", demand=[]))
        faulty = calculator.calculate_item(make_item("F", demand=[5000]))

        assert zero.economic_order_quantity == faulty.economic_order_quantity == 0.0
        assert not zero.is_defaulted
        assert faulty.is_defaulted


class TestSummary:
    def test_portfolio_totals(self, calculator, make_item):
        results = calculator.calculate_all([make_item("A"), make_item("B", current_stock=1000)])

        summary = calculator.calculate_summary(results)

        assert summary.total_items == 2
        assert summary.average_service_level == pytest.approx(0.95)
        assert summary.total_target_stock == pytest.approx(FLAT_EOQ)
        assert summary.total_actual_stock == pytest.approx(FLAT_EOQ)
        assert summary.total_savings_potential == pytest.approx(results[1].savings_potential)
        # EOQ * 12 over EOQ / 2 per item
        assert summary.inventory_turnover == pytest.approx(24.0)

    def test_empty_batch(self, calculator):
        summary = calculator.calculate_summary([])

        assert summary.total_items == 0
        assert summary.average_service_level == 0.0
        assert summary.inventory_turnover == 0.0

    def test_zero_actual_stock_gives_zero_turnover(self, calculator):
        summary = calculator.calculate_summary([CalculationResult(id="X", economic_order_quantity=10)])
        assert summary.inventory_turnover == 0.0


class TestResultRecords:
    def test_placeholder(self):
        result = CalculationResult.placeholder("X", "boom")

        assert result.status is ResultStatus.DEFAULTED
        assert result.cycle_stock == 0.0
        assert result.error == "boom"

    def test_to_dict_uses_camel_case(self, calculator, make_item):
        data = calculator.calculate_item(make_item()).to_dict()

        assert data["id"] == "SKU-1"
        assert data["economicOrderQuantity"] == pytest.approx(FLAT_EOQ)
        assert data["status"] == "computed"
        assert "safetyFactorK" in data
