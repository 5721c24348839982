import pandas as pd
from ride_analytics.aggregations import status_flags, where_completed, where_completed_or_zero


def key_business_metrics(df: pd.DataFrame) -> pd.DataFrame:
    """Headline numbers for the whole snapshot, as a single row."""
    flags = status_flags(df)
    total = len(df)
    cancelled = int(flags["is_cancelled"].sum())

    metrics = {
        "total_bookings": total,
        "completed_rides": int(flags["is_completed"].sum()),
        "cancelled_rides": cancelled,
        "cancellation_rate": round(cancelled * 100.0 / total, 2) if total else None,
        "total_revenue": round(float(where_completed_or_zero(df, "Booking_Value").sum()), 2),
        "avg_ride_value": round(where_completed(df, "Booking_Value").mean(), 2),
        "avg_customer_rating": round(where_completed(df, "Customer_Rating").mean(), 2),
        "avg_driver_rating": round(where_completed(df, "Driver_Ratings").mean(), 2),
    }
    return pd.DataFrame([metrics])
