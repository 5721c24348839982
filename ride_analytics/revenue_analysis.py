"""
Revenue reports.

Every report except daily_booking_patterns only looks at completed rides
with a known Booking_Value.
"""

import pandas as pd
from ride_analytics.aggregations import completed, order_by, share
from ride_analytics.feature_engineering import ensure_time_features


def _paid_rides(df: pd.DataFrame, require=()) -> pd.DataFrame:
    return completed(df, require=("Booking_Value",) + tuple(require))


def revenue_by_vehicle_type(df: pd.DataFrame) -> pd.DataFrame:
    out = (
        _paid_rides(df)
        .groupby("Vehicle_Type")
        .agg(
            total_revenue=("Booking_Value", "sum"),
            completed_rides=("Booking_Value", "size"),
            avg_booking_value=("Booking_Value", "mean"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "total_revenue", ascending=False)


def vehicle_revenue_efficiency(df: pd.DataFrame) -> pd.DataFrame:
    """Average value, distance and revenue per km by vehicle type."""
    out = (
        _paid_rides(df, require=("Ride_Distance",))
        .groupby("Vehicle_Type")
        .agg(
            completed_rides=("Booking_Value", "size"),
            avg_booking_value=("Booking_Value", "mean"),
            total_revenue=("Booking_Value", "sum"),
            avg_distance=("Ride_Distance", "mean"),
            total_distance=("Ride_Distance", "sum"),
        )
        .reset_index()
    )
    # zero total distance leaves revenue_per_km null
    out["revenue_per_km"] = out["total_revenue"] / out["total_distance"].where(out["total_distance"] != 0)
    out = out.drop(columns="total_distance").round(2)
    return order_by(out, "total_revenue", ascending=False)


def monthly_revenue(df: pd.DataFrame) -> pd.DataFrame:
    rides = ensure_time_features(_paid_rides(df))
    out = (
        rides.groupby("month", dropna=False)
        .agg(
            completed_rides=("Booking_Value", "size"),
            monthly_revenue=("Booking_Value", "sum"),
            avg_ride_value=("Booking_Value", "mean"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "month")


def payment_method_revenue(df: pd.DataFrame) -> pd.DataFrame:
    out = (
        _paid_rides(df)
        .groupby("Payment_Method")
        .agg(
            transaction_count=("Booking_Value", "size"),
            total_revenue=("Booking_Value", "sum"),
            avg_transaction_value=("Booking_Value", "mean"),
        )
        .round(2)
        .reset_index()
    )
    out["payment_method_share"] = share(out["transaction_count"])
    return order_by(out, "total_revenue", ascending=False)


def peak_hours_revenue(df: pd.DataFrame) -> pd.DataFrame:
    rides = ensure_time_features(_paid_rides(df))
    out = (
        rides.groupby("time_slot")
        .agg(
            rides_count=("Booking_Value", "size"),
            total_revenue=("Booking_Value", "sum"),
            avg_ride_value=("Booking_Value", "mean"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "total_revenue", ascending=False)


def daily_booking_patterns(df: pd.DataFrame) -> pd.DataFrame:
    """Completed bookings and average revenue per weekday, Sunday first."""
    rides = ensure_time_features(completed(df))
    out = (
        rides.groupby(["day_of_week", "day_name"], dropna=False)
        .agg(
            bookings=("Booking_Status", "size"),
            avg_revenue=("Booking_Value", "mean"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "day_of_week")
