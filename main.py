import argparse
import json
import logging
import numbers
import os

import mlflow
import yaml

from ride_analytics.catalog import build_reports
from ride_analytics.cleaning import RideCleaner
from ride_analytics.dashboard import render_dashboard
from ride_analytics.data_loader import RideDataLoader
from ride_analytics.data_validation import DataValidator
from ride_analytics.feature_engineering import FeatureEngineer
from ride_analytics.quality_report import before_after_sample, cleaning_property_checks, completeness_report
import ride_analytics.data_contract as dc


# Logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logging.getLogger("great_expectations").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def load_params(params_path: str) -> dict:
    with open(params_path, "r") as f:
        return yaml.safe_load(f)


def serialize_gx_results(results) -> dict:
    output = {"success": results.success, "results": []}
    for r in results.results:
        output["results"].append(
            {
                "success": r.success,
                "expectation": r.expectation_config.type,
                "column": r.expectation_config.kwargs.get("column"),
                "unexpected_list": r.result.get("partial_unexpected_list", []),
            }
        )
    return output


def safe_log_artifact(path: str, artifact_path: str | None = None) -> None:
    """Log file to MLflow if it exists (no crash if missing)."""
    if path and os.path.exists(path):
        mlflow.log_artifact(path, artifact_path=artifact_path)


def log_numeric_metrics(values: dict, prefix: str) -> None:
    for k, v in values.items():
        if isinstance(v, numbers.Number) and not isinstance(v, bool) and v == v:
            mlflow.log_metric(f"{prefix}_{k}", float(v))


def write_reports(reports: dict, output_dir: str) -> list[str]:
    os.makedirs(output_dir, exist_ok=True)
    paths = []
    for name, frame in reports.items():
        path = os.path.join(output_dir, f"{name}.csv")
        frame.to_csv(path, index=False)
        paths.append(path)
    logger.info(f"Wrote {len(paths)} reports to {output_dir}")
    return paths


def run_pipeline(params_path: str) -> dict:
    params = load_params(params_path)

    # --- Read config ---
    data_path = params["data"]["path"]
    output_dir = params["output"]["dir"]
    render = bool(params["output"].get("dashboard", True))
    z_threshold = float(params["analysis"].get("z_threshold", 3.0))
    warn_invalid_ratio = float(params["analysis"].get("warn_invalid_ratio", dc.REJECTION_WARNING_RATIO))

    exp_name = params["mlflow"]["experiment_name"]

    # --- Components ---
    # Write temp artifacts to a writable place
    artifact_dir = os.environ.get("LOCAL_ARTIFACT_DIR", "/tmp/ride_analytics_artifacts")
    loader = RideDataLoader(data_path)
    cleaner = RideCleaner(artifact_dir=artifact_dir, warn_invalid_ratio=warn_invalid_ratio)
    engineer = FeatureEngineer()

    # --- MLflow ---
    mlflow.set_experiment(exp_name)

    with mlflow.start_run() as run:
        logger.info(f"Starting Run: {run.info.run_id}")

        # Log pipeline configuration
        mlflow.log_param("contract_version", dc.CONTRACT_VERSION)
        mlflow.log_param("data_source", data_path)
        mlflow.log_param("output_dir", output_dir)
        mlflow.log_param("z_threshold", z_threshold)
        mlflow.log_param("warn_invalid_ratio", warn_invalid_ratio)

        # 1) Load & Clean
        try:
            raw = loader.load_data()
            log_numeric_metrics(raw.attrs.get("stats", {}), "loader")

            rides = cleaner.clean(raw)
            log_numeric_metrics(rides.attrs.get("stats", {}), "cleaning")
            safe_log_artifact(rides.attrs.get("rejected_sample_path"))
            if rides.attrs.get("rejection_warnings"):
                mlflow.set_tag("rejection_warnings", ",".join(rides.attrs["rejection_warnings"]))

        except Exception as e:
            mlflow.set_tag("status", "load_failed")
            logger.exception(f"Loading or cleaning failed: {e}")
            raise

        # 2) Validate with Great Expectations
        validator = DataValidator(rides, expected_rows=len(raw))
        try:
            validator.validate()
            mlflow.set_tag("data_quality", "passed")
        except Exception as e:
            mlflow.set_tag("data_quality", "failed")
            logger.exception(f"Validation failed: {e}")

            # Save GX report to writable dir then log
            os.makedirs(artifact_dir, exist_ok=True)
            gx_report_path = os.path.join(artifact_dir, "gx_report.json")
            if validator.validation_results:
                with open(gx_report_path, "w") as f:
                    json.dump(serialize_gx_results(validator.validation_results), f, indent=2)
                safe_log_artifact(gx_report_path)

            raise

        # 3) Time features + derived reports
        rides = engineer.add_time_features(rides)
        reports = build_reports(rides, z_threshold=z_threshold)
        reports["completeness_report"] = completeness_report(rides)
        reports["before_after_sample"] = before_after_sample(raw, rides)
        reports["cleaning_property_checks"] = cleaning_property_checks(raw, rides)

        log_numeric_metrics(reports["key_business_metrics"].iloc[0].to_dict(), "kpi")
        log_numeric_metrics(reports["anomaly_summary"].iloc[0].to_dict(), "anomaly")

        # 4) Persist
        write_reports(reports, output_dir)
        mlflow.log_artifacts(output_dir, artifact_path="reports")

        if render:
            dashboard_path = render_dashboard(rides, os.path.join(output_dir, "dashboard.png"))
            safe_log_artifact(dashboard_path, artifact_path="dashboard")

        mlflow.set_tag("status", "completed")
        logger.info("Pipeline finished successfully.")

    return reports


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="params.yaml", help="Path to config file")
    args = parser.parse_args()
    run_pipeline(args.config)
