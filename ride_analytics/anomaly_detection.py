"""
Z-score anomaly flags for completed rides.

Statistics (mean and sample standard deviation) are computed per vehicle
type over completed rides with a known value and distance. A ride is
flagged on a metric when its absolute z-score exceeds the threshold; a
zero standard deviation leaves the z-score null and the flag unset.
"""

import logging

import pandas as pd
from ride_analytics.aggregations import completed

logger = logging.getLogger(__name__)

Z_THRESHOLD = 3.0

# cleaned column -> (z-score column, flag column)
METRICS = {
    "Booking_Value": ("booking_value_zscore", "price_anomaly"),
    "Ride_Distance": ("distance_zscore", "distance_anomaly"),
    "Avg_VTAT": ("wait_time_zscore", "wait_time_anomaly"),
}


def vehicle_stats(df: pd.DataFrame) -> pd.DataFrame:
    rides = completed(df, require=("Booking_Value", "Ride_Distance"))
    grouped = rides.groupby("Vehicle_Type")[list(METRICS)]
    means = grouped.mean().add_prefix("mean_")
    stds = grouped.std(ddof=1).add_prefix("std_")
    return means.join(stds).reset_index()


def detect_anomalies(df: pd.DataFrame, z_threshold: float = Z_THRESHOLD) -> pd.DataFrame:
    stats = vehicle_stats(df)
    rides = completed(df, require=("Booking_Value", "Ride_Distance", "Avg_VTAT"))
    rides = rides[["Booking_ID", "Vehicle_Type"] + list(METRICS)].merge(stats, on="Vehicle_Type", how="inner")

    for col, (z_col, flag_col) in METRICS.items():
        std = rides[f"std_{col}"].where(rides[f"std_{col}"] != 0)
        rides[z_col] = ((rides[col] - rides[f"mean_{col}"]) / std).abs()
        rides[flag_col] = (rides[z_col] > z_threshold).astype(int)

    columns = ["Booking_ID", "Vehicle_Type"] + list(METRICS)
    columns += [z for z, _ in METRICS.values()] + [flag for _, flag in METRICS.values()]
    out = rides[columns]
    logger.info(f"Scored {len(out)} completed rides for anomalies (|z| > {z_threshold})")
    return out


def anomaly_summary(anomalies: pd.DataFrame) -> pd.DataFrame:
    total = len(anomalies)
    flags = [flag for _, flag in METRICS.values()]
    flagged = int(anomalies[flags].to_numpy().sum()) if total else 0
    summary = {
        "total_rides_analyzed": total,
        "price_anomalies": int(anomalies["price_anomaly"].sum()),
        "distance_anomalies": int(anomalies["distance_anomaly"].sum()),
        "wait_time_anomalies": int(anomalies["wait_time_anomaly"].sum()),
        "total_anomaly_percentage": round(flagged * 100.0 / total, 2) if total else None,
    }
    return pd.DataFrame([summary])
