"""
Report catalog: every derived table the pipeline writes, by output name.

build_reports evaluates them in dependency order so derived views
(ride_patterns -> customer_segments, location_network -> network_hubs,
cancellation_predictors -> high_risk_segments, anomalies -> summary)
are computed once.
"""

import logging

import pandas as pd
from ride_analytics import (
    anomaly_detection,
    behavior_analysis,
    cancellation_analysis,
    distributions,
    kpis,
    network_analysis,
    operations,
    revenue_analysis,
    segmentation,
    sequential_patterns,
)

logger = logging.getLogger(__name__)

SIMPLE_REPORTS = {
    "key_business_metrics": kpis.key_business_metrics,
    "booking_status_distribution": distributions.booking_status_distribution,
    "vehicle_type_distribution": distributions.vehicle_type_distribution,
    "payment_method_distribution": distributions.payment_method_distribution,
    "driver_cancellation_reasons": cancellation_analysis.driver_cancellation_reasons,
    "customer_cancellation_reasons": cancellation_analysis.customer_cancellation_reasons,
    "cancellation_by_vehicle_type": cancellation_analysis.cancellation_by_vehicle_type,
    "revenue_by_vehicle_type": revenue_analysis.revenue_by_vehicle_type,
    "vehicle_revenue_efficiency": revenue_analysis.vehicle_revenue_efficiency,
    "monthly_revenue": revenue_analysis.monthly_revenue,
    "payment_method_revenue": revenue_analysis.payment_method_revenue,
    "peak_hours_revenue": revenue_analysis.peak_hours_revenue,
    "daily_booking_patterns": revenue_analysis.daily_booking_patterns,
    "customer_rating_distribution": behavior_analysis.customer_rating_distribution,
    "rating_category_share": behavior_analysis.rating_category_share,
    "wait_times_by_vehicle": behavior_analysis.wait_times_by_vehicle,
    "frequent_users": behavior_analysis.frequent_users,
    "vehicle_payment_preferences": behavior_analysis.vehicle_payment_preferences,
    "driver_performance": behavior_analysis.driver_performance,
    "popular_routes": network_analysis.popular_routes,
    "location_service_quality": network_analysis.location_service_quality,
    "top_customers_by_clv": segmentation.top_customers_by_clv,
    "customer_lifetime_value": segmentation.customer_lifetime_value,
    "operational_dashboard": operations.operational_dashboard,
    "operational_efficiency": operations.operational_efficiency,
    "vehicle_transitions": sequential_patterns.vehicle_transitions,
}


def build_reports(rides: pd.DataFrame, z_threshold: float = anomaly_detection.Z_THRESHOLD) -> dict:
    reports = {}
    for name, fn in SIMPLE_REPORTS.items():
        reports[name] = fn(rides)

    reports["ride_patterns"] = segmentation.ride_patterns(rides)
    reports["customer_segments"] = segmentation.customer_segments(reports["ride_patterns"])
    reports["segment_summary"] = segmentation.segment_summary(reports["customer_segments"])

    reports["location_network"] = network_analysis.location_network(rides)
    reports["network_hubs"] = network_analysis.network_hubs(reports["location_network"])
    reports["hub_summary"] = network_analysis.hub_summary(reports["network_hubs"])

    reports["cancellation_predictors"] = operations.cancellation_predictors(rides)
    reports["high_risk_segments"] = operations.high_risk_segments(reports["cancellation_predictors"])

    reports["anomaly_detection"] = anomaly_detection.detect_anomalies(rides, z_threshold=z_threshold)
    reports["anomaly_summary"] = anomaly_detection.anomaly_summary(reports["anomaly_detection"])

    logger.info(f"Built {len(reports)} reports")
    return reports
