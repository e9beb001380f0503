"""
Tests for the batch pipeline and its report.
"""

import json

import pytest

from optimizer.calculators import InventoryCalculator, ResultStatus
from optimizer.config import OptimizerConfig
from optimizer.exceptions import InputValidationError
from optimizer.runner import AnalyticsReport, CalculationContext, OptimizationPipeline


@pytest.fixture
def items(make_item, variable_demand):
    return [
        make_item("A", "W1", current_stock=1000),
        make_item("B", "W2", demand=variable_demand),
        make_item("C", "W1", transit_included="yes"),
        make_item("D", "W3", demand=[0, 0, 0]),
        make_item("E", "W2", demand=[5, "n/a", 7], unit_cost=2.5),
    ]


def run(items, **config_values):
    context = CalculationContext(items=items, config=OptimizerConfig(**config_values))
    return OptimizationPipeline(context)


class TestCalculationContext:
    def test_items_are_frozen_into_a_tuple(self, items):
        context = CalculationContext(items=items)

        assert isinstance(context.items, tuple)
        assert context.has_data

    def test_empty_context(self):
        assert not CalculationContext(items=[]).has_data


class TestPipelineRun:
    def test_report_contents(self, items):
        report = run(items).run()

        assert isinstance(report, AnalyticsReport)
        assert report.total_items == 5
        assert report.summary.total_items == 5
        assert report.excel_summary.total_items == 5
        assert [r.id for r in report.results] == ["A", "B", "C", "D", "E"]
        assert [r.id for r in report.excel_results] == ["A", "B", "C", "D", "E"]
        assert [s.warehouse for s in report.warehouse_summaries] == ["W1", "W2", "W3"]
        assert report.defaulted_items == []

    def test_results_match_calculator(self, items):
        report = run(items).run()
        direct = InventoryCalculator().calculate_all(items)

        assert [r.to_dict() for r in report.results] == [r.to_dict() for r in direct]

    def test_repeated_runs_are_identical(self, items):
        pipeline = run(items)

        first = pipeline.run().to_dict()
        second = pipeline.run().to_dict()
        fresh = run(items).run().to_dict()

        assert first == second == fresh

    def test_preview_limit_caps_result_lists_only(self, items):
        pipeline = run(items, preview_limit=2)
        report = pipeline.run()

        assert [r.id for r in report.results] == ["A", "B"]
        assert len(report.excel_results) == 2
        assert len(pipeline.results) == 5
        assert len(pipeline.excel_results) == 5
        assert report.summary.total_items == 5
        assert sum(s.total_items for s in report.warehouse_summaries) == 5

    def test_no_preview_limit(self, items):
        report = run(items, preview_limit=None).run()
        assert len(report.results) == 5

    def test_empty_batch_is_rejected(self):
        with pytest.raises(InputValidationError) as exc_info:
            run([]).run()

        assert exc_info.value.errors == ["No data found"]

    def test_incomplete_item_is_rejected(self, items, make_item):
        items.append(make_item("F", warehouse=""))
        pipeline = run(items)

        with pytest.raises(InputValidationError) as exc_info:
            pipeline.run()

        assert exc_info.value.errors == ["Row 6: Missing warehouse"]
        assert pipeline.results == []

    def test_defaulted_items_are_reported(self, items, monkeypatch):
        pipeline = run(items)
        original = pipeline.inventory_calculator._calculate_item

        def flaky(item):
            if item.id == "C":
                raise RuntimeError("boom")
            return original(item)

        monkeypatch.setattr(pipeline.inventory_calculator, "_calculate_item", flaky)
        report = pipeline.run()

        assert report.defaulted_items == ["C"]
        assert report.results[2].status is ResultStatus.DEFAULTED
        assert report.excel_results[2].status is ResultStatus.COMPUTED
        assert report.summary.total_items == 5


class TestReportSerialization:
    def test_to_dict(self, items):
        data = run(items).run().to_dict()

        assert data["hasData"] is True
        assert data["totalItems"] == 5
        assert data["config"]["forecastingPeriod"] == "monthly"
        assert data["results"][0]["id"] == "A"
        assert "totalActualStockEUR" in data["excelResults"][0]
        assert data["warehouseSummaries"][0]["warehouse"] == "W1"

    def test_to_json_file(self, items, tmp_path):
        path = tmp_path / "report.json"
        text = run(items).run().to_json(path)

        assert json.loads(path.read_text()) == json.loads(text)
        assert json.loads(text)["summary"]["totalItems"] == 5
