"""
Post-cleaning data quality reports.

completeness_report mirrors the "report after cleaning" table: total rows
plus non-null counts for the key and data fields. cleaning_property_checks
evaluates the cleaning guarantees on an actual run.
"""

import pandas as pd
import ride_analytics.data_contract as dc

KEY_FIELDS = ["Booking_ID", "Customer_ID"]
DATA_FIELDS = ["Booking_Value", "Ride_Distance", "Customer_Rating", "Driver_Ratings"]

SAMPLE_FIELDS = {
    "booking_id": "Booking_ID",
    "booking_value": "Booking_Value",
    "ride_distance": "Ride_Distance",
    "customer_rating": "Customer_Rating",
}


def completeness_report(cleaned: pd.DataFrame) -> pd.DataFrame:
    rows = [("key completion", "total rows", len(cleaned))]
    rows += [("key completion", f"effective {col}", int(cleaned[col].notna().sum())) for col in KEY_FIELDS]
    rows += [("data completion", f"effective {col}", int(cleaned[col].notna().sum())) for col in DATA_FIELDS]
    return pd.DataFrame(rows, columns=["report_section", "metric", "value"])


def before_after_sample(raw: pd.DataFrame, cleaned: pd.DataFrame, n: int = 5) -> pd.DataFrame:
    """First n rows of the headline fields, before and after cleaning, as text."""
    raw = raw.rename(columns=dc.RAW_TO_CLEAN)
    frames = []
    for label, frame in [("original data", raw), ("after cleaning", cleaned)]:
        sample = pd.DataFrame({alias: frame[col].head(n).astype(str) for alias, col in SAMPLE_FIELDS.items()})
        sample.insert(0, "data_type", label)
        frames.append(sample)
    return pd.concat(frames, ignore_index=True)


def _within(series: pd.Series, rule: dict) -> bool:
    values = series.dropna()
    return bool(values.between(rule["min"], rule["max"]).all())


def cleaning_property_checks(raw: pd.DataFrame, cleaned: pd.DataFrame) -> pd.DataFrame:
    rules = dc.NUMERIC_RULES
    checks = {
        "booking_id_never_null": bool(cleaned["Booking_ID"].notna().all()),
        "booking_value_in_range": _within(cleaned["Booking_Value"], rules["Booking_Value"]),
        "ratings_in_range": _within(cleaned["Driver_Ratings"], rules["Driver_Ratings"])
        and _within(cleaned["Customer_Rating"], rules["Customer_Rating"]),
        "row_count_preserved": len(raw) == len(cleaned),
    }
    return pd.DataFrame({"property": list(checks.keys()), "passed": list(checks.values())})
