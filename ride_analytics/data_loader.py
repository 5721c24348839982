import logging

import pandas as pd
import ride_analytics.data_contract as dc

logger = logging.getLogger(__name__)


class RideDataLoader:
    """
    Raw booking export loader:
    - Reads CSV (as text, so cleaning sees what was exported) or parquet
    - Validates the raw schema
    - Attaches stats + source path on df.attrs for main.py to log
    """

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> pd.DataFrame:
        if self.path.lower().endswith(".csv"):
            return pd.read_csv(self.path, dtype=str, keep_default_na=False)
        return pd.read_parquet(self.path)

    def load_data(self) -> pd.DataFrame:
        logger.info(f"Loading bookings from {self.path}...")

        try:
            df = self._read()
        except Exception as e:
            logger.error(f"Failed to read bookings file: {e}")
            raise

        # 1) Critical schema check (fail fast)
        df.columns = [str(c).strip() for c in df.columns]
        missing_cols = [c for c in dc.REQUIRED_RAW_COLUMNS if c not in df.columns]
        if missing_cols:
            raise ValueError(f"Schema Violation: Missing columns {missing_cols}")

        raw_count = len(df)
        logger.info(f"Initial row count: {raw_count}")

        if raw_count == 0:
            raise ValueError("Data Quality Critical: Bookings file contains no rows.")

        df.attrs["stats"] = {
            "initial_rows": raw_count,
            "raw_columns": len(df.columns),
        }
        df.attrs["source_path"] = self.path

        return df
