import pandas as pd
import ride_analytics.data_contract as dc
from ride_analytics.aggregations import order_by, rate, share, status_flags


def _reasons(df: pd.DataFrame, status: str, column: str, top_n: int | None) -> pd.DataFrame:
    subset = df[(df["Booking_Status"] == status) & (df[column] != dc.NO_REASON_PROVIDED)]
    out = subset.groupby(column).size().reset_index(name="cancellation_count")
    out["percentage"] = share(out["cancellation_count"])
    out = order_by(out, "cancellation_count", ascending=False)
    return out.head(top_n) if top_n else out


def driver_cancellation_reasons(df: pd.DataFrame, top_n: int | None = None) -> pd.DataFrame:
    return _reasons(df, dc.STATUS_CANCELLED_BY_DRIVER, "Driver_Cancellation_Reason", top_n)


def customer_cancellation_reasons(df: pd.DataFrame, top_n: int | None = None) -> pd.DataFrame:
    return _reasons(df, dc.STATUS_CANCELLED_BY_CUSTOMER, "Reason_for_cancelling_by_Customer", top_n)


def cancellation_by_vehicle_type(df: pd.DataFrame) -> pd.DataFrame:
    """Cancellations and unmet demand per vehicle type, worst first."""
    out = (
        status_flags(df)
        .groupby("Vehicle_Type")
        .agg(
            total_bookings=("Booking_Status", "size"),
            driver_cancellations=("is_driver_cancel", "sum"),
            customer_cancellations=("is_customer_cancel", "sum"),
            no_driver_found=("is_no_driver", "sum"),
            unfulfilled=("is_unfulfilled", "sum"),
        )
        .reset_index()
    )
    out["overall_cancellation_rate"] = rate(out["unfulfilled"], out["total_bookings"])
    out = out.drop(columns="unfulfilled")
    return order_by(out, "overall_cancellation_rate", ascending=False)
