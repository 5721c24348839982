"""
ride_analytics/data_contract.py

Single Source of Truth for Ride Booking Data Quality Rules.
"""

# Versioning allows us to track which rules were active
# for a specific analytics run.
CONTRACT_VERSION = "1.0.0"

# -------------------------------------------------------------------
# System Limits
# -------------------------------------------------------------------
# Rejected values are nulled and never stop a run. Above 15% of the values
# present in a numeric field the cleaner logs a warning, since that points
# at an upstream export problem rather than ordinary noise.
REJECTION_WARNING_RATIO = 0.15

# Literal strings that count as "no value" in the raw export.
MISSING_TOKENS = ["null"]


# -------------------------------------------------------------------
# Schema Definition (raw export -> cleaned name)
# -------------------------------------------------------------------
RAW_TO_CLEAN = {
    "Booking ID": "Booking_ID",
    "Customer ID": "Customer_ID",
    "Date": "Date",
    "Time": "Time",
    "Booking Status": "Booking_Status",
    "Vehicle Type": "Vehicle_Type",
    "Pickup Location": "Pickup_Location",
    "Drop Location": "Drop_Location",
    "Avg VTAT": "Avg_VTAT",
    "Avg CTAT": "Avg_CTAT",
    "Cancelled Rides by Customer": "Cancelled_Rides_by_Customer",
    "Cancelled Rides by Driver": "Cancelled_Rides_by_Driver",
    "Incomplete Rides": "Incomplete_Rides",
    "Reason for cancelling by Customer": "Reason_for_cancelling_by_Customer",
    "Driver Cancellation Reason": "Driver_Cancellation_Reason",
    "Incomplete Rides Reason": "Incomplete_Rides_Reason",
    "Booking Value": "Booking_Value",
    "Ride Distance": "Ride_Distance",
    "Driver Ratings": "Driver_Ratings",
    "Customer Rating": "Customer_Rating",
    "Payment Method": "Payment_Method",
}

REQUIRED_RAW_COLUMNS = list(RAW_TO_CLEAN.keys())
CLEANED_COLUMNS = list(RAW_TO_CLEAN.values())


# -------------------------------------------------------------------
# Identifiers
# -------------------------------------------------------------------
# Missing identifiers are synthesized so every record stays addressable.
BOOKING_ID_PREFIX = "MISSING_"
CUSTOMER_ID_PREFIX = "UNKNOWN_CUST_"

# The dataset covers 2024; Time values stamped with a 2025 date are corrupt.
INVALID_TIME_PREFIX = "2025-"


# -------------------------------------------------------------------
# Categorical Defaults
# -------------------------------------------------------------------
UNKNOWN = "UNKNOWN"
UNKNOWN_LOCATION = "UNKNOWN_LOCATION"
NO_REASON_PROVIDED = "NO_REASON_PROVIDED"

CATEGORICAL_DEFAULTS = {
    "Booking_Status": UNKNOWN,
    "Vehicle_Type": UNKNOWN,
    "Pickup_Location": UNKNOWN_LOCATION,
    "Drop_Location": UNKNOWN_LOCATION,
    "Reason_for_cancelling_by_Customer": NO_REASON_PROVIDED,
    "Driver_Cancellation_Reason": NO_REASON_PROVIDED,
    "Incomplete_Rides_Reason": NO_REASON_PROVIDED,
    "Payment_Method": UNKNOWN,
}

# Ride counters default to zero when absent.
COUNTER_COLUMNS = [
    "Cancelled_Rides_by_Customer",
    "Cancelled_Rides_by_Driver",
    "Incomplete_Rides",
]


# -------------------------------------------------------------------
# Domain Rules (Inclusive Boundaries, rounding in decimal places)
# -------------------------------------------------------------------
# Values outside a range are discarded (set to null), never clamped.
NUMERIC_RULES = {
    # Arrival times in minutes.
    "Avg_VTAT": {"min": 0.0, "max": 60.0, "decimals": 1},
    "Avg_CTAT": {"min": 0.0, "max": 60.0, "decimals": 1},
    # Currency.
    "Booking_Value": {"min": 0.0, "max": 10000.0, "decimals": 2},
    "Ride_Distance": {"min": 0.0, "max": 200.0, "decimals": 2},
    # Star ratings.
    "Driver_Ratings": {"min": 1.0, "max": 5.0, "decimals": 1},
    "Customer_Rating": {"min": 1.0, "max": 5.0, "decimals": 1},
}


# -------------------------------------------------------------------
# Booking Status Values
# -------------------------------------------------------------------
STATUS_COMPLETED = "Completed"
STATUS_CANCELLED_BY_DRIVER = "Cancelled by Driver"
STATUS_CANCELLED_BY_CUSTOMER = "Cancelled by Customer"
STATUS_NO_DRIVER_FOUND = "No Driver Found"
STATUS_INCOMPLETE = "Incomplete"

CANCELLED_STATUSES = [STATUS_CANCELLED_BY_DRIVER, STATUS_CANCELLED_BY_CUSTOMER]
UNFULFILLED_STATUSES = CANCELLED_STATUSES + [STATUS_NO_DRIVER_FOUND]
