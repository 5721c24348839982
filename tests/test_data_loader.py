import pandas as pd
import pytest

from ride_analytics.data_loader import RideDataLoader

# We write the fixture to a temp file instead of reading the full
# bookings export during testing.


def test_csv_values_stay_raw_text(raw_bookings, tmp_path):
    path = tmp_path / "bookings.csv"
    raw_bookings.to_csv(path, index=False)

    df = RideDataLoader(str(path)).load_data()

    assert len(df) == len(raw_bookings)
    # 'null' and blanks are left for the cleaner to interpret
    assert df.loc[0, "Cancelled Rides by Customer"] == "null"
    assert df.loc[2, "Cancelled Rides by Customer"] == ""
    assert df.loc[3, "Booking ID"] == "  "
    assert df.attrs["stats"]["initial_rows"] == 5
    assert df.attrs["source_path"] == str(path)


def test_parquet_is_supported(raw_bookings, tmp_path):
    path = tmp_path / "bookings.parquet"
    raw_bookings.to_parquet(path, index=False)

    df = RideDataLoader(str(path)).load_data()

    assert len(df) == 5


def test_missing_columns_fail_fast(raw_bookings, tmp_path):
    path = tmp_path / "bookings.csv"
    raw_bookings.drop(columns=["Booking Status", "Payment Method"]).to_csv(path, index=False)

    with pytest.raises(ValueError, match="Schema Violation") as err:
        RideDataLoader(str(path)).load_data()

    assert "Booking Status" in str(err.value)


def test_empty_file_is_rejected(raw_bookings, tmp_path):
    path = tmp_path / "bookings.csv"
    raw_bookings.head(0).to_csv(path, index=False)

    with pytest.raises(ValueError, match="no rows"):
        RideDataLoader(str(path)).load_data()


def test_unreadable_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        RideDataLoader(str(tmp_path / "missing.csv")).load_data()
