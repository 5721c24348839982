import numpy as np
import pandas as pd
import ride_analytics.data_contract as dc
from ride_analytics.aggregations import (
    completed,
    order_by,
    rate,
    status_flags,
    where_completed,
    where_completed_or_zero,
)

NETWORK_MIN_PICKUPS = 20
ROUTE_MIN_RIDES = 5
ROUTE_LIMIT = 15
LOCATION_MIN_RIDES = 10
LOCATION_LIMIT = 15

# (label, revenue above, success rate above), checked top-down.
HUB_TIERS = [
    ("Premium Hub", 10000, 80),
    ("Established Hub", 5000, 70),
    ("Developing Hub", 1000, 60),
]
EMERGING_HUB = "Emerging Hub"


def location_network(df: pd.DataFrame, min_pickups: int = NETWORK_MIN_PICKUPS) -> pd.DataFrame:
    """Demand, supply and revenue per pickup location."""
    rides = status_flags(df).assign(
        completed_value=where_completed_or_zero(df, "Booking_Value"),
        completed_only_value=where_completed(df, "Booking_Value"),
        completed_rating=where_completed(df, "Customer_Rating"),
    )
    out = (
        rides.groupby("Pickup_Location")
        .agg(
            total_pickups=("Booking_Status", "size"),
            unique_customers=("Customer_ID", "nunique"),
            successful_pickups=("is_completed", "sum"),
            failed_pickups=("is_no_driver", "sum"),
            total_revenue=("completed_value", "sum"),
            avg_revenue_per_ride=("completed_only_value", "mean"),
            unique_destinations=("Drop_Location", "nunique"),
            avg_rating=("completed_rating", "mean"),
        )
        .reset_index()
    )
    out["success_rate"] = rate(out["successful_pickups"], out["total_pickups"])
    out = out[out["total_pickups"] >= min_pickups]
    return order_by(out, "total_revenue", ascending=False)


def network_hubs(network: pd.DataFrame) -> pd.DataFrame:
    out = network[["Pickup_Location", "total_pickups", "unique_customers", "total_revenue", "success_rate"]].copy()
    out["hub_category"] = np.select(
        [
            (out["total_revenue"] > revenue) & (out["success_rate"] > success)
            for _, revenue, success in HUB_TIERS
        ],
        [label for label, _, _ in HUB_TIERS],
        default=EMERGING_HUB,
    )
    return out


def hub_summary(hubs: pd.DataFrame) -> pd.DataFrame:
    out = (
        hubs.groupby("hub_category")
        .agg(
            hub_count=("Pickup_Location", "size"),
            avg_revenue_per_hub=("total_revenue", "mean"),
        )
        .round(2)
        .reset_index()
    )
    return order_by(out, "avg_revenue_per_hub", ascending=False)


def popular_routes(df: pd.DataFrame, min_rides: int = ROUTE_MIN_RIDES, top_n: int = ROUTE_LIMIT) -> pd.DataFrame:
    out = (
        completed(df)
        .groupby(["Pickup_Location", "Drop_Location"])
        .agg(
            route_frequency=("Booking_Status", "size"),
            avg_fare=("Booking_Value", "mean"),
            avg_distance=("Ride_Distance", "mean"),
        )
        .round(2)
        .reset_index()
    )
    out = out[out["route_frequency"] >= min_rides]
    return order_by(out, "route_frequency", ascending=False).head(top_n)


def location_service_quality(
    df: pd.DataFrame, min_rides: int = LOCATION_MIN_RIDES, top_n: int = LOCATION_LIMIT
) -> pd.DataFrame:
    rides = status_flags(df[df["Pickup_Location"] != dc.UNKNOWN_LOCATION])
    out = (
        rides.groupby("Pickup_Location")
        .agg(
            total_rides=("Booking_Status", "size"),
            avg_customer_rating=("Customer_Rating", "mean"),
            avg_booking_value=("Booking_Value", "mean"),
            completed=("is_completed", "sum"),
        )
        .reset_index()
    )
    out["completion_rate"] = rate(out["completed"], out["total_rides"])
    out = out.drop(columns="completed").round(2)
    out = out[out["total_rides"] >= min_rides]
    return order_by(out, "avg_customer_rating", ascending=False).head(top_n)
