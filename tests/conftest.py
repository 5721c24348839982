import pytest
import pandas as pd

import ride_analytics.data_contract as dc
from ride_analytics.cleaning import RideCleaner

RAW_ROWS = [
    # Clean, complete booking
    ["CNR001", "CID001", "2024-03-23", "12:29:38", "Completed", "eBike", "Palam Vihar", "Jhilmil",
     "7.1", "58.5", "null", "null", "null", "null", "null", "null", "444", "25.99", "4.3", "4.7", "UPI"],
    # Quoted id, missing customer, 2025 time stamp, out-of-range numbers
    ['"CNR002"', "null", "2024-03-23", "2025-01-01 08:00:00", " Cancelled by Driver ", "null", "", "null",
     "61", "", "0", "1", "0", "null", "Personal & Car related issues", "null", "20000", "null", "0.5", "", "null"],
    # Missing booking id, unparseable value, distance above range
    ["null", "CID003", "2024-07-01", "08:10:00", "Completed", "Auto", "Khandsa", "Barakhamba Road",
     "3.33", "12.26", "", "", "", "", "", "", "abc", "250", "5", "4.26", "Cash"],
    # Blank booking id, negative distance
    ["  ", "CID001", "2024-03-24", "18:00:00", "No Driver Found", "Go Sedan", "Palam Vihar", "Jhilmil",
     "", "", "null", "null", "null", "null", "null", "null", "123.456", "-1", "null", "null", "null"],
    # Boundary values are kept
    ["CNR005", "CID001", "2024-03-25", "07:45:00", "Completed", "Auto", "Palam Vihar", "Khandsa",
     "0", "60", "null", "null", "null", "null", "null", "null", "0", "200", "1", "5", "Cash"],
]


@pytest.fixture
def raw_bookings():
    """Provides a raw export mimicking the source CSV, every value as text."""
    return pd.DataFrame(RAW_ROWS, columns=dc.REQUIRED_RAW_COLUMNS)


@pytest.fixture
def cleaner():
    return RideCleaner()


@pytest.fixture
def cleaned(raw_bookings, cleaner):
    return cleaner.clean(raw_bookings)


RIDE_DEFAULTS = {
    "Customer_ID": "CID001",
    "Date": "2024-03-23",
    "Time": "12:00:00",
    "Booking_Status": dc.STATUS_COMPLETED,
    "Vehicle_Type": "Auto",
    "Pickup_Location": "Palam Vihar",
    "Drop_Location": "Jhilmil",
    "Avg_VTAT": 5.0,
    "Avg_CTAT": 20.0,
    "Cancelled_Rides_by_Customer": 0,
    "Cancelled_Rides_by_Driver": 0,
    "Incomplete_Rides": 0,
    "Reason_for_cancelling_by_Customer": dc.NO_REASON_PROVIDED,
    "Driver_Cancellation_Reason": dc.NO_REASON_PROVIDED,
    "Incomplete_Rides_Reason": dc.NO_REASON_PROVIDED,
    "Booking_Value": 100.0,
    "Ride_Distance": 10.0,
    "Driver_Ratings": 4.5,
    "Customer_Rating": 4.5,
    "Payment_Method": "UPI",
}


@pytest.fixture
def make_rides():
    """Factory for cleaned ride frames: pass one dict of overrides per ride."""

    def _make(rows):
        records = []
        for i, overrides in enumerate(rows):
            record = {"Booking_ID": f"CNR{i:05d}", **RIDE_DEFAULTS, **overrides}
            records.append(record)
        df = pd.DataFrame(records, columns=dc.CLEANED_COLUMNS)
        df["Date"] = pd.to_datetime(df["Date"])
        for col in dc.NUMERIC_RULES:
            df[col] = df[col].astype(float)
        for col in dc.COUNTER_COLUMNS:
            df[col] = df[col].astype("Int64")
        return df

    return _make
