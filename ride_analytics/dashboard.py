import logging

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import ride_analytics.data_contract as dc
from ride_analytics.aggregations import completed

logger = logging.getLogger(__name__)


def render_dashboard(df: pd.DataFrame, path: str) -> str:
    """Render the 2x2 rides dashboard to a PNG file and return its path."""
    logger.info(f"Rendering dashboard to {path}...")

    fig, axes = plt.subplots(2, 2, figsize=(15, 12))
    fig.suptitle("Ride Bookings Analytics Dashboard", fontsize=16, fontweight="bold")

    try:
        # 1. Cancellation reasons among cancelled rides
        cancelled = df[df["Booking_Status"].str.contains("Cancelled", na=False)]
        if not cancelled.empty:
            reasons = cancelled["Driver_Cancellation_Reason"].value_counts().head(10)
            axes[0, 0].bar(reasons.index, reasons.values)
        axes[0, 0].set_title("Top 10 Cancellation Reasons")
        axes[0, 0].tick_params(axis="x", rotation=45)

        # 2. Revenue by vehicle type
        done = completed(df)
        revenue = done.groupby("Vehicle_Type")["Booking_Value"].sum().sort_values(ascending=False)
        axes[0, 1].bar(revenue.index, revenue.values)
        axes[0, 1].set_title("Revenue by Vehicle Type")
        axes[0, 1].tick_params(axis="x", rotation=45)

        # 3. Rating distribution
        ratings = done["Customer_Rating"].dropna()
        axes[1, 0].hist(ratings, bins=10, alpha=0.7, edgecolor="black")
        axes[1, 0].set_title("Customer Rating Distribution")
        axes[1, 0].set_xlabel("Rating")
        axes[1, 0].set_ylabel("Frequency")

        # 4. Payment method distribution
        payments = df.loc[df["Payment_Method"] != dc.UNKNOWN, "Payment_Method"].value_counts()
        if not payments.empty:
            axes[1, 1].pie(payments.values, labels=payments.index, autopct="%1.1f%%")
        axes[1, 1].set_title("Payment Method Distribution")

        fig.tight_layout()
        fig.savefig(path)
    finally:
        plt.close(fig)

    return path
