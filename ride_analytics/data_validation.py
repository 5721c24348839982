import logging
import pandas as pd
import great_expectations as gx
import great_expectations.expectations as gxe
from great_expectations.core.expectation_suite import ExpectationSuite
import ride_analytics.data_contract as dc

logger = logging.getLogger(__name__)

class DataValidator:
    def __init__(self, df: pd.DataFrame, expected_rows: int | None = None):
        self.df = df
        self.expected_rows = expected_rows
        # Ephemeral Context: In-memory configuration suitable for batch runs.
        self.context = gx.get_context(mode="ephemeral")
        self.datasource_name = "pandas_datasource"
        self.asset_name = "rides_dataframe"
        self.suite_name = "cleaned_rides_suite"
        self.validation_results = None

    def build_suite(self) -> ExpectationSuite:
        suite = ExpectationSuite(name=self.suite_name)

        # --- Rule A: Structural Integrity ---
        # Cleaning never drops records, so the row count must match the raw input.
        if self.expected_rows is not None:
            suite.add_expectation(gxe.ExpectTableRowCountToEqual(value=self.expected_rows))
        else:
            suite.add_expectation(gxe.ExpectTableRowCountToBeBetween(min_value=1))
        for col in dc.CLEANED_COLUMNS:
            suite.add_expectation(gxe.ExpectColumnToExist(column=col))

        # --- Rule B: Identity ---
        for col in ["Booking_ID", "Customer_ID", "Booking_Status"]:
            suite.add_expectation(gxe.ExpectColumnValuesToNotBeNull(column=col))

        # --- Rule C: Semantic Domains (nulls are allowed, out-of-range is not) ---
        for col, rule in dc.NUMERIC_RULES.items():
            suite.add_expectation(
                gxe.ExpectColumnValuesToBeBetween(
                    column=col,
                    min_value=rule["min"],
                    max_value=rule["max"]
                )
            )

        # --- Rule D: Counters are never negative ---
        for col in dc.COUNTER_COLUMNS:
            suite.add_expectation(gxe.ExpectColumnValuesToNotBeNull(column=col))
            suite.add_expectation(gxe.ExpectColumnValuesToBeBetween(column=col, min_value=0))

        return suite

    def validate(self) -> bool:
        logger.info("Validating cleaned bookings with Great Expectations (v1.x)...")

        # 1. Setup Datasource (Idempotent)
        try:
            ds = self.context.data_sources.get(self.datasource_name)
        except KeyError:
            ds = self.context.data_sources.add_pandas(self.datasource_name)

        try:
            asset = ds.get_asset(self.asset_name)
        except LookupError:
            asset = ds.add_dataframe_asset(name=self.asset_name)

        # 2. Create Expectation Suite
        suite = self.build_suite()

        # 3. Run Validation
        batch_def = asset.add_batch_definition_whole_dataframe("whole_df")
        batch = batch_def.get_batch(batch_parameters={"dataframe": self.df})
        self.validation_results = batch.validate(suite)

        # 4. Result Handling
        if not self.validation_results.success:
            logger.error("GX VALIDATION FAILED!")
            for res in self.validation_results.results:
                if not res.success:
                    col = res.expectation_config.kwargs.get("column", "Table-Level")
                    type_ = res.expectation_config.type
                    logger.error(f"   - Violation: {col} | Rule: {type_}")

            raise ValueError("Critical Data Validation Failed. Check MLflow artifacts for details.")

        logger.info("Great Expectations passed.")
        return True
