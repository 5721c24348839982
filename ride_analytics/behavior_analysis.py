import numpy as np
import pandas as pd
from ride_analytics.aggregations import completed, order_by, rate, share, status_flags

FREQUENT_USER_MIN_BOOKINGS = 3
FREQUENT_USER_LIMIT = 20

# (label, lower bound) checked top-down; below the last bound is the fallback.
RATING_BANDS = [
    ("4.5-5.0 (Excellent)", 4.5),
    ("4.0-4.4 (Good)", 4.0),
    ("3.5-3.9 (Average)", 3.5),
    ("3.0-3.4 (Below Average)", 3.0),
]
RATING_FALLBACK = "Below 3.0 (Poor)"

RATING_SHARE_BANDS = RATING_BANDS[:3]
RATING_SHARE_FALLBACK = "Below 3.5 (Needs Improvement)"

DRIVER_BANDS = [
    ("Top Performers (4.5+)", 4.5),
    ("Good Performers (4.0-4.4)", 4.0),
    ("Average Performers (3.5-3.9)", 3.5),
]
DRIVER_FALLBACK = "Needs Improvement (<3.5)"


def band(values: pd.Series, bands, fallback: str) -> np.ndarray:
    conditions = [values >= bound for _, bound in bands]
    return np.select(conditions, [label for label, _ in bands], default=fallback)


def customer_rating_distribution(df: pd.DataFrame) -> pd.DataFrame:
    rides = completed(df, require=("Customer_Rating",))
    rides = rides.assign(rating_category=band(rides["Customer_Rating"], RATING_BANDS, RATING_FALLBACK))
    out = (
        rides.groupby("rating_category")
        .agg(
            rating_count=("Customer_Rating", "size"),
            avg_booking_value=("Booking_Value", "mean"),
            avg_distance=("Ride_Distance", "mean"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "rating_category")


def rating_category_share(df: pd.DataFrame) -> pd.DataFrame:
    rides = completed(df, require=("Customer_Rating",))
    rides = rides.assign(
        rating_category=band(rides["Customer_Rating"], RATING_SHARE_BANDS, RATING_SHARE_FALLBACK)
    )
    out = rides.groupby("rating_category").size().reset_index(name="rating_count")
    out["percentage"] = share(out["rating_count"])
    return order_by(out, "rating_count", ascending=False)


def wait_times_by_vehicle(df: pd.DataFrame) -> pd.DataFrame:
    rides = completed(df, require=("Avg_VTAT", "Avg_CTAT"))
    out = (
        rides.groupby("Vehicle_Type")
        .agg(
            avg_vehicle_arrival_time=("Avg_VTAT", "mean"),
            avg_customer_arrival_time=("Avg_CTAT", "mean"),
            completed_rides=("Avg_VTAT", "size"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "avg_vehicle_arrival_time")


def frequent_users(
    df: pd.DataFrame,
    min_bookings: int = FREQUENT_USER_MIN_BOOKINGS,
    top_n: int = FREQUENT_USER_LIMIT,
) -> pd.DataFrame:
    out = (
        status_flags(df)
        .groupby("Customer_ID")
        .agg(
            total_rides=("Booking_Status", "size"),
            completed_rides=("is_completed", "sum"),
            customer_cancellations=("is_customer_cancel", "sum"),
            avg_rating=("Customer_Rating", "mean"),
            total_spent=("Booking_Value", "sum"),
        )
        .round(2)
        .reset_index()
    )
    out = out[out["total_rides"] >= min_bookings]
    return order_by(out, "total_rides", ascending=False).head(top_n)


def vehicle_payment_preferences(df: pd.DataFrame) -> pd.DataFrame:
    """Payment method mix within each vehicle type."""
    out = completed(df).groupby(["Vehicle_Type", "Payment_Method"]).size().reset_index(name="preference_count")
    out["percentage"] = rate(
        out["preference_count"], out.groupby("Vehicle_Type")["preference_count"].transform("sum")
    )
    return order_by(out, ["Vehicle_Type", "preference_count"], ascending=[True, False])


def driver_performance(df: pd.DataFrame) -> pd.DataFrame:
    """Ride outcomes by driver rating band; ratings stand in for driver identity."""
    rides = status_flags(df[df["Driver_Ratings"].notna()])
    rides = rides.assign(performance_category=band(rides["Driver_Ratings"], DRIVER_BANDS, DRIVER_FALLBACK))
    out = (
        rides.groupby("performance_category")
        .agg(
            ride_count=("Booking_Status", "size"),
            avg_ride_value=("Booking_Value", "mean"),
            avg_ride_distance=("Ride_Distance", "mean"),
            completed=("is_completed", "sum"),
        )
        .reset_index()
    )
    out["completion_rate"] = rate(out["completed"], out["ride_count"])
    out = out.drop(columns="completed").round(2)
    return order_by(out, "performance_category")
