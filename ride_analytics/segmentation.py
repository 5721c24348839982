"""
Customer segmentation.

ride_patterns builds one behaviour profile per repeat customer, and
customer_segments buckets those profiles with fixed spend / frequency
thresholds. customer_lifetime_value works on completed, paid rides only.
"""

import numpy as np
import pandas as pd
import ride_analytics.data_contract as dc
from ride_analytics.aggregations import completed, order_by
from ride_analytics.feature_engineering import ensure_time_features

PATTERN_MIN_RIDES = 3

FREQUENT_RIDES = 10
PREMIUM_SPEND = 300
SCHEDULE_RATIO = 0.6

CLV_MIN_RIDES = 2
CLV_TOP_N = 20

# (label, minimum spend, minimum rides), both exclusive, checked top-down.
VALUE_TIERS = [
    ("High Value", 1000, 5),
    ("Medium Value", 500, 3),
    ("Low Value", 100, 0),
]
NEW_CUSTOMER = "New Customer"


def ride_patterns(df: pd.DataFrame, min_rides: int = PATTERN_MIN_RIDES) -> pd.DataFrame:
    rides = ensure_time_features(df)
    hour = rides["hour"].astype(float)
    payment = rides["Payment_Method"].str.upper()

    rides = rides.assign(
        is_morning=hour.between(7, 9).astype(int),
        is_evening=hour.between(17, 19).astype(int),
        is_weekend=rides["day_of_week"].isin([1, 7]).astype(int),
        is_customer_cancel=(rides["Booking_Status"] == dc.STATUS_CANCELLED_BY_CUSTOMER).astype(int),
        paid_upi=(payment == "UPI").astype(int),
        paid_cash=(payment == "CASH").astype(int),
    )
    out = (
        rides.groupby("Customer_ID")
        .agg(
            total_rides=("Booking_Status", "size"),
            avg_spend=("Booking_Value", "mean"),
            avg_distance=("Ride_Distance", "mean"),
            avg_rating=("Customer_Rating", "mean"),
            morning_ride_ratio=("is_morning", "mean"),
            evening_ride_ratio=("is_evening", "mean"),
            weekend_ride_ratio=("is_weekend", "mean"),
            customer_cancellations=("is_customer_cancel", "sum"),
            prefers_upi=("paid_upi", "max"),
            prefers_cash=("paid_cash", "max"),
            vehicle_variety_used=("Vehicle_Type", "nunique"),
        )
        .reset_index()
    )
    return out[out["total_rides"] >= min_rides].reset_index(drop=True)


def customer_segments(patterns: pd.DataFrame) -> pd.DataFrame:
    rides = patterns["total_rides"]
    spend = patterns["avg_spend"]

    # Unknown spend compares false everywhere and lands in "Other".
    segment = np.select(
        [
            (rides >= FREQUENT_RIDES) & (spend > PREMIUM_SPEND),
            (rides >= FREQUENT_RIDES) & (spend <= PREMIUM_SPEND),
            (rides < FREQUENT_RIDES) & (spend > PREMIUM_SPEND),
            (rides < FREQUENT_RIDES) & (spend <= PREMIUM_SPEND),
        ],
        ["Premium Frequent", "Regular Frequent", "Premium Occasional", "Budget Occasional"],
        default="Other",
    )
    time_pattern = np.select(
        [
            patterns["morning_ride_ratio"] > SCHEDULE_RATIO,
            patterns["evening_ride_ratio"] > SCHEDULE_RATIO,
            patterns["weekend_ride_ratio"] > SCHEDULE_RATIO,
        ],
        ["Morning Commuter", "Evening Commuter", "Weekend User"],
        default="Mixed Schedule",
    )
    out = patterns[["Customer_ID", "total_rides", "avg_spend", "avg_distance"]].copy()
    out["customer_segment"] = segment
    out["time_pattern"] = time_pattern
    return out


def segment_summary(segments: pd.DataFrame) -> pd.DataFrame:
    out = (
        segments.groupby(["customer_segment", "time_pattern"])
        .agg(
            customers=("Customer_ID", "size"),
            avg_rides=("total_rides", "mean"),
            avg_spend=("avg_spend", "mean"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "customers", ascending=False)


def _paid_customer_rides(df: pd.DataFrame, min_rides: int) -> pd.DataFrame:
    rides = completed(df, require=("Booking_Value",))
    out = (
        rides.groupby("Customer_ID")
        .agg(
            total_rides=("Booking_Value", "size"),
            first_ride_date=("Date", "min"),
            last_ride_date=("Date", "max"),
            total_spend=("Booking_Value", "sum"),
            avg_ride_value=("Booking_Value", "mean"),
            avg_rating_given=("Customer_Rating", "mean"),
            cancellation_count=("Booking_Status", lambda s: int((s == dc.STATUS_CANCELLED_BY_CUSTOMER).sum())),
        )
        .reset_index()
    )
    return out[out["total_rides"] >= min_rides]


def customer_lifetime_value(df: pd.DataFrame, min_rides: int = CLV_MIN_RIDES) -> pd.DataFrame:
    out = _paid_customer_rides(df, min_rides).copy()

    tenure = (out["last_ride_date"] - out["first_ride_date"]).dt.days
    out["customer_tenure_days"] = tenure.astype("Int64")
    # same-day customers have no measurable rate
    out["rides_per_day"] = out["total_rides"] / tenure.where(tenure != 0)

    spend = out["total_spend"]
    rides = out["total_rides"]
    out["value_segment"] = np.select(
        [(spend > min_spend) & (rides > min_count) for _, min_spend, min_count in VALUE_TIERS],
        [label for label, _, _ in VALUE_TIERS],
        default=NEW_CUSTOMER,
    )
    return order_by(out, "total_spend", ascending=False)


def top_customers_by_clv(df: pd.DataFrame, top_n: int = CLV_TOP_N, min_rides: int = CLV_MIN_RIDES) -> pd.DataFrame:
    out = _paid_customer_rides(df, min_rides)
    out = out[["Customer_ID", "total_rides", "total_spend", "avg_ride_value", "first_ride_date", "last_ride_date"]].copy()
    out.insert(4, "clv_per_ride", out["total_spend"] / out["total_rides"])
    out = out.round({"total_spend": 2, "avg_ride_value": 2, "clv_per_ride": 2})
    return order_by(out, "total_spend", ascending=False).head(top_n)
