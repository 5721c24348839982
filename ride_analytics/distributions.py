import pandas as pd
import ride_analytics.data_contract as dc
from ride_analytics.aggregations import order_by, share


def category_distribution(df: pd.DataFrame, column: str, exclude=None) -> pd.DataFrame:
    """Count and percentage per category, most frequent first."""
    if exclude:
        df = df[~df[column].isin(exclude)]
    out = df.groupby(column).size().reset_index(name="count")
    out["percentage"] = share(out["count"])
    return order_by(out, "count", ascending=False)


def booking_status_distribution(df: pd.DataFrame) -> pd.DataFrame:
    return category_distribution(df, "Booking_Status")


def vehicle_type_distribution(df: pd.DataFrame) -> pd.DataFrame:
    return category_distribution(df, "Vehicle_Type")


def payment_method_distribution(df: pd.DataFrame) -> pd.DataFrame:
    return category_distribution(df, "Payment_Method", exclude=[dc.UNKNOWN])
