import pandas as pd
from ride_analytics.aggregations import completed, order_by, rate

TRANSITION_MIN_FREQUENCY = 10


def ride_sequences(df: pd.DataFrame) -> pd.DataFrame:
    """Completed rides per customer in time order with previous/next context."""
    rides = completed(df).sort_values(
        ["Customer_ID", "Date", "Time"], kind="mergesort", na_position="first"
    )
    by_customer = rides.groupby("Customer_ID", sort=False)
    return rides.assign(
        previous_vehicle_type=by_customer["Vehicle_Type"].shift(1),
        previous_pickup=by_customer["Pickup_Location"].shift(1),
        previous_drop=by_customer["Drop_Location"].shift(1),
        next_vehicle_type=by_customer["Vehicle_Type"].shift(-1),
    ).reset_index(drop=True)


def vehicle_transitions(df: pd.DataFrame, min_frequency: int = TRANSITION_MIN_FREQUENCY) -> pd.DataFrame:
    """How often customers move from one vehicle type to the next."""
    sequences = ride_sequences(df)
    sequences = sequences[sequences["previous_vehicle_type"].notna()]
    out = (
        sequences.groupby(["previous_vehicle_type", "Vehicle_Type"])
        .agg(
            pattern_frequency=("Customer_ID", "size"),
            unique_customers=("Customer_ID", "nunique"),
            avg_ride_value=("Booking_Value", "mean"),
        )
        .reset_index()
        .rename(columns={"Vehicle_Type": "current_vehicle_type"})
    )
    # the share is taken over the transitions that pass the frequency bar
    out = out[out["pattern_frequency"] >= min_frequency].copy()
    out["pattern_percentage"] = rate(
        out["pattern_frequency"], out.groupby("previous_vehicle_type")["pattern_frequency"].transform("sum")
    )
    return order_by(out, "pattern_frequency", ascending=False)
