#!/usr/bin/env python3
"""
Inventory Optimization Script

Calculates cycle stock, safety stock, reorder points and savings potential
for every item of an items CSV, with both the general engine and the
spreadsheet-replicating engine, and writes the results and summaries to the
output directory.
"""

import argparse
import sys
from pathlib import Path

from optimizer.config import create_config_from_env, load_config
from optimizer.data.aggregator import get_aggregation_summary, results_to_dataframe
from optimizer.data.loader import load_items
from optimizer.exceptions import ConfigurationError, InputValidationError
from optimizer.runner.pipeline import CalculationContext, OptimizationPipeline
from optimizer.utils.logger import configure_workflow_logging


def run_inventory_optimization(
    items_file: str,
    config_file: str = None,
    output_dir: str = None,
    log_level: str = "INFO"
):
    """
    Run the policy calculation for an items file.

    Args:
        items_file: Path to the items CSV (demand in demand_<n> columns)
        config_file: Optional YAML config; environment overrides apply otherwise
        output_dir: Output directory for results (defaults to the config's)
        log_level: Logging level for the run

    Returns:
        AnalyticsReport, or None when the input or config was rejected
    """
    logger = configure_workflow_logging(
        workflow_name="inventory_optimization",
        log_level=log_level,
        log_dir="output/logs"
    )

    logger.info("🔍 Inventory Optimization")
    logger.info(f"Items file: {items_file}")

    try:
        config = load_config(config_file) if config_file else create_config_from_env()
    except (OSError, ConfigurationError) as e:
        logger.log_error_with_context(e, "Loading configuration")
        return None

    if output_dir:
        config.output_dir = Path(output_dir)
    config.log_level = log_level

    try:
        items = load_items(items_file)
    except InputValidationError as e:
        logger.error("❌ Data validation failed:")
        for message in e.errors:
            logger.error(f"   {message}")
        return None

    pipeline = OptimizationPipeline(CalculationContext(items=items, config=config))
    report = pipeline.run()

    config.output_dir.mkdir(parents=True, exist_ok=True)
    results_to_dataframe(pipeline.results).to_csv(config.output_dir / "policy_results.csv", index=False)
    results_to_dataframe(pipeline.excel_results).to_csv(config.output_dir / "excel_results.csv", index=False)

    warehouse_df = get_aggregation_summary(report.warehouse_summaries)
    if warehouse_df is not None:
        warehouse_df.to_csv(config.output_dir / "warehouse_summary.csv", index=False)

    report.to_json(config.output_dir / "analytics_report.json")
    logger.info(f"💾 Saved results to: {config.output_dir}")

    summary = report.summary
    logger.info("📊 Policy Calculation Summary:")
    logger.info(f"  Items: {summary.total_items}")
    logger.info(f"  Savings potential: {summary.total_savings_potential:,.2f} {config.currency}")
    logger.info(f"  Average service level: {summary.average_service_level:.1%}")
    logger.info(f"  Inventory turnover: {summary.inventory_turnover:.2f}")
    if report.defaulted_items:
        logger.warning(f"  Items with defaulted results: {len(report.defaulted_items)}")

    return report


def main():
    parser = argparse.ArgumentParser(description="Calculate inventory policy parameters for an items file")
    parser.add_argument("items_file", help="Path to the items CSV file")
    parser.add_argument("--config", dest="config_file", default=None,
                        help="YAML configuration file")
    parser.add_argument("--output-dir", default=None,
                        help="Directory for result files")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    args = parser.parse_args()

    report = run_inventory_optimization(
        items_file=args.items_file,
        config_file=args.config_file,
        output_dir=args.output_dir,
        log_level=args.log_level
    )
    if report is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
