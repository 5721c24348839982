"""
Operational reports: where and when rides fail, and what that costs.

The cancellation and efficiency reports only use bookings that carry both
arrival-time measurements.
"""

import pandas as pd
from ride_analytics.aggregations import (
    order_by,
    rate,
    status_flags,
    where_completed,
    where_completed_or_zero,
)
from ride_analytics.feature_engineering import ensure_time_features

PREDICTOR_MIN_RIDES = 10
EFFICIENCY_MIN_REQUESTS = 5
DRIVER_CANCEL_RISK = 15
CUSTOMER_CANCEL_RISK = 20


def _timed_rides(df: pd.DataFrame) -> pd.DataFrame:
    rides = df[df["Avg_VTAT"].notna() & df["Avg_CTAT"].notna()]
    return status_flags(ensure_time_features(rides))


def cancellation_predictors(df: pd.DataFrame, min_rides: int = PREDICTOR_MIN_RIDES) -> pd.DataFrame:
    """Cancellation probabilities per vehicle type, hour and weekday."""
    out = (
        _timed_rides(df)
        .groupby(["Vehicle_Type", "hour", "day_of_week"], dropna=False)
        .agg(
            total_rides=("Booking_Status", "size"),
            driver_cancellations=("is_driver_cancel", "sum"),
            customer_cancellations=("is_customer_cancel", "sum"),
            avg_vehicle_wait_time=("Avg_VTAT", "mean"),
            avg_customer_wait_time=("Avg_CTAT", "mean"),
        )
        .reset_index()
        .rename(columns={"hour": "hour_of_day"})
    )
    out["driver_cancel_probability"] = rate(out["driver_cancellations"], out["total_rides"])
    out["customer_cancel_probability"] = rate(out["customer_cancellations"], out["total_rides"])
    return out[out["total_rides"] >= min_rides].reset_index(drop=True)


def high_risk_segments(predictors: pd.DataFrame) -> pd.DataFrame:
    risky = predictors[
        (predictors["driver_cancel_probability"] > DRIVER_CANCEL_RISK)
        | (predictors["customer_cancel_probability"] > CUSTOMER_CANCEL_RISK)
    ]
    combined = risky["driver_cancel_probability"] + risky["customer_cancel_probability"]
    return order_by(risky.assign(combined_probability=combined), "combined_probability", ascending=False)


def operational_dashboard(df: pd.DataFrame) -> pd.DataFrame:
    """Hourly KPIs per ride date, latest date first."""
    rides = status_flags(ensure_time_features(df)).assign(
        completed_value=where_completed_or_zero(df, "Booking_Value"),
        completed_only_value=where_completed(df, "Booking_Value"),
        completed_distance=where_completed(df, "Ride_Distance"),
        completed_rating=where_completed(df, "Customer_Rating"),
    )
    out = (
        rides.groupby(["ride_date", "hour"], dropna=False)
        .agg(
            total_bookings=("Booking_Status", "size"),
            completed_rides=("is_completed", "sum"),
            driver_cancellations=("is_driver_cancel", "sum"),
            customer_cancellations=("is_customer_cancel", "sum"),
            no_driver_found=("is_no_driver", "sum"),
            total_revenue=("completed_value", "sum"),
            avg_revenue_per_ride=("completed_only_value", "mean"),
            avg_ride_distance=("completed_distance", "mean"),
            avg_customer_rating=("completed_rating", "mean"),
        )
        .reset_index()
        .rename(columns={"hour": "hour_of_day"})
    )
    out["service_completion_rate"] = rate(out["completed_rides"], out["total_bookings"])
    out["driver_availability_failure_rate"] = rate(out["no_driver_found"], out["total_bookings"])
    out = out.drop(columns="no_driver_found")
    return order_by(out, ["ride_date", "hour_of_day"], ascending=[False, True])


def operational_efficiency(df: pd.DataFrame, min_requests: int = EFFICIENCY_MIN_REQUESTS) -> pd.DataFrame:
    rides = _timed_rides(df)
    rides = rides.assign(
        generated_value=where_completed_or_zero(rides, "Booking_Value"),
        lost_value=rides["Booking_Value"].where(rides["is_no_driver"] == 1, 0.0),
    )
    out = (
        rides.groupby(["hour", "day_of_week", "Vehicle_Type"], dropna=False)
        .agg(
            total_requests=("Booking_Status", "size"),
            completed_rides=("is_completed", "sum"),
            unmet_demand=("is_no_driver", "sum"),
            generated_revenue=("generated_value", "sum"),
            lost_revenue=("lost_value", "sum"),
            avg_driver_response_time=("Avg_VTAT", "mean"),
            avg_customer_wait_time=("Avg_CTAT", "mean"),
        )
        .reset_index()
        .rename(columns={"hour": "operation_hour", "day_of_week": "operation_day"})
    )
    out["success_rate"] = rate(out["completed_rides"], out["total_requests"])
    out["failure_rate"] = rate(out["unmet_demand"], out["total_requests"])
    out["revenue_per_request"] = (out["generated_revenue"] / out["total_requests"]).round(2)
    out = out[out["total_requests"] >= min_requests]
    return order_by(
        out,
        ["operation_day", "operation_hour", "revenue_per_request"],
        ascending=[True, True, False],
    )
