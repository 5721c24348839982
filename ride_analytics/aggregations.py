"""Small helpers shared by the analysis modules."""

import pandas as pd
import ride_analytics.data_contract as dc


def rate(part, whole, decimals: int = 2):
    """Percentage of part in whole, rounded."""
    return (part * 100.0 / whole).round(decimals)


def share(counts: pd.Series, decimals: int = 2) -> pd.Series:
    """Percentage of each group in the total of counts."""
    return (counts * 100.0 / counts.sum()).round(decimals)


def status_flags(df: pd.DataFrame) -> pd.DataFrame:
    """One 0/1 column per booking status used by the reports."""
    status = df["Booking_Status"]
    return df.assign(
        is_completed=(status == dc.STATUS_COMPLETED).astype(int),
        is_driver_cancel=(status == dc.STATUS_CANCELLED_BY_DRIVER).astype(int),
        is_customer_cancel=(status == dc.STATUS_CANCELLED_BY_CUSTOMER).astype(int),
        is_cancelled=status.isin(dc.CANCELLED_STATUSES).astype(int),
        is_no_driver=(status == dc.STATUS_NO_DRIVER_FOUND).astype(int),
        is_unfulfilled=status.isin(dc.UNFULFILLED_STATUSES).astype(int),
    )


def completed(df: pd.DataFrame, require=()) -> pd.DataFrame:
    """Completed rides, optionally with non-null values in the given columns."""
    mask = df["Booking_Status"] == dc.STATUS_COMPLETED
    for col in require:
        mask &= df[col].notna()
    return df[mask]


def where_completed(df: pd.DataFrame, column: str) -> pd.Series:
    """The column for completed rides, null elsewhere."""
    return df[column].where(df["Booking_Status"] == dc.STATUS_COMPLETED)


def where_completed_or_zero(df: pd.DataFrame, column: str) -> pd.Series:
    """The column for completed rides, zero elsewhere."""
    return df[column].where(df["Booking_Status"] == dc.STATUS_COMPLETED, 0.0)


def order_by(df: pd.DataFrame, columns, ascending=True) -> pd.DataFrame:
    """Stable sort with a fresh index."""
    return df.sort_values(columns, ascending=ascending, kind="mergesort").reset_index(drop=True)
