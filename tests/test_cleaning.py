import logging

import pandas as pd
import pytest

import ride_analytics.data_contract as dc
from ride_analytics.cleaning import RideCleaner, missing_mask


def test_row_count_preserved(raw_bookings, cleaned):
    assert len(cleaned) == len(raw_bookings)
    assert list(cleaned.columns) == dc.CLEANED_COLUMNS


def test_booking_ids_never_null(cleaned):
    assert cleaned["Booking_ID"].notna().all()
    assert cleaned.loc[0, "Booking_ID"] == "CNR001"
    # Quotes are stripped from exported identifiers
    assert cleaned.loc[1, "Booking_ID"] == "CNR002"
    # 'null' and blank ids are synthesized, each one unique
    assert cleaned.loc[2, "Booking_ID"].startswith(dc.BOOKING_ID_PREFIX)
    assert cleaned.loc[3, "Booking_ID"].startswith(dc.BOOKING_ID_PREFIX)
    assert cleaned.loc[2, "Booking_ID"] != cleaned.loc[3, "Booking_ID"]


def test_missing_customer_is_synthesized(cleaned):
    assert cleaned.loc[1, "Customer_ID"].startswith(dc.CUSTOMER_ID_PREFIX)
    assert cleaned.loc[0, "Customer_ID"] == "CID001"


def test_time_stamped_2025_is_nulled(cleaned):
    assert pd.isna(cleaned.loc[1, "Time"])
    assert cleaned.loc[0, "Time"] == "12:29:38"
    assert cleaned.attrs["stats"]["invalid_time"] == 1


def test_dates_are_parsed(cleaned):
    assert pd.api.types.is_datetime64_any_dtype(cleaned["Date"])
    assert cleaned.loc[2, "Date"] == pd.Timestamp("2024-07-01")


def test_categorical_sentinels(cleaned):
    row = cleaned.loc[1]
    assert row["Booking_Status"] == "Cancelled by Driver"
    assert row["Vehicle_Type"] == dc.UNKNOWN
    assert row["Pickup_Location"] == dc.UNKNOWN_LOCATION
    assert row["Drop_Location"] == dc.UNKNOWN_LOCATION
    assert row["Reason_for_cancelling_by_Customer"] == dc.NO_REASON_PROVIDED
    assert row["Driver_Cancellation_Reason"] == "Personal & Car related issues"
    assert row["Payment_Method"] == dc.UNKNOWN


def test_counters_default_to_zero(cleaned):
    assert cleaned["Cancelled_Rides_by_Customer"].tolist() == [0, 0, 0, 0, 0]
    assert cleaned["Cancelled_Rides_by_Driver"].tolist() == [0, 1, 0, 0, 0]


def test_out_of_range_values_are_nulled_not_clamped(cleaned):
    row = cleaned.loc[1]
    assert pd.isna(row["Avg_VTAT"])
    assert pd.isna(row["Booking_Value"])
    assert pd.isna(row["Driver_Ratings"])

    assert pd.isna(cleaned.loc[2, "Booking_Value"])  # unparseable
    assert pd.isna(cleaned.loc[2, "Ride_Distance"])  # above 200
    assert pd.isna(cleaned.loc[3, "Ride_Distance"])  # negative


def test_values_are_rounded(cleaned):
    assert cleaned.loc[2, "Avg_VTAT"] == pytest.approx(3.3)
    assert cleaned.loc[2, "Avg_CTAT"] == pytest.approx(12.3)
    assert cleaned.loc[2, "Customer_Rating"] == pytest.approx(4.3)
    assert cleaned.loc[3, "Booking_Value"] == pytest.approx(123.46)


def test_range_boundaries_are_inclusive(cleaned):
    row = cleaned.loc[4]
    assert row["Avg_VTAT"] == 0
    assert row["Avg_CTAT"] == 60
    assert row["Booking_Value"] == 0
    assert row["Ride_Distance"] == 200
    assert row["Driver_Ratings"] == 1
    assert row["Customer_Rating"] == 5


def test_valid_values_stay_within_contract(cleaned):
    for col, rule in dc.NUMERIC_RULES.items():
        values = cleaned[col].dropna()
        assert values.between(rule["min"], rule["max"]).all(), col


def test_stats_count_rejections(cleaned):
    stats = cleaned.attrs["stats"]
    assert stats["input_rows"] == 5
    assert stats["clean_rows"] == 5
    assert stats["synthesized_booking_ids"] == 2
    assert stats["rejected_Booking_Value"] == 2
    assert stats["missing_Customer_Rating"] == 2
    assert stats["rejected_Ride_Distance"] == 2


def test_high_rejection_rate_warns_instead_of_failing(raw_bookings, caplog):
    with caplog.at_level(logging.WARNING, logger="ride_analytics.cleaning"):
        out = RideCleaner().clean(raw_bookings)

    assert len(out) == len(raw_bookings)
    assert "Booking_Value" in out.attrs["rejection_warnings"]
    assert out.attrs["stats"]["rejected_ratio_Booking_Value"] == 0.4
    assert any("High rejection rate in Booking_Value" in r.message for r in caplog.records)


def test_out_of_range_ratings_are_nulled_in_a_larger_export(raw_bookings):
    raw = pd.concat([raw_bookings.iloc[[0]]] * 10, ignore_index=True)
    raw.loc[[3, 7], "Customer Rating"] = "6"

    out = RideCleaner().clean(raw)

    assert len(out) == 10
    assert out["Customer_Rating"].isna().sum() == 2
    assert out.attrs["stats"]["rejected_Customer_Rating"] == 2
    assert out.attrs["rejection_warnings"] == ["Customer_Rating"]


def test_unusable_counters_default_to_zero(raw_bookings, cleaner):
    raw = raw_bookings.copy()
    raw.loc[0, "Cancelled Rides by Customer"] = "inf"
    raw.loc[0, "Incomplete Rides"] = "1e30"
    raw.loc[1, "Cancelled Rides by Customer"] = "-inf"
    raw.loc[2, "Cancelled Rides by Driver"] = "abc"
    raw.loc[4, "Cancelled Rides by Driver"] = "2.7"

    out = cleaner.clean(raw)

    assert out["Cancelled_Rides_by_Customer"].tolist() == [0, 0, 0, 0, 0]
    assert out["Incomplete_Rides"].tolist() == [0, 0, 0, 0, 0]
    assert out["Cancelled_Rides_by_Driver"].tolist() == [0, 1, 0, 0, 2]
    assert out.attrs["stats"]["defaulted_Cancelled_Rides_by_Customer"] == 5
    assert out.attrs["stats"]["defaulted_Incomplete_Rides"] == 4


def test_rejected_sample_written_when_artifact_dir_set(raw_bookings, tmp_path):
    out = RideCleaner(artifact_dir=str(tmp_path)).clean(raw_bookings)
    path = out.attrs["rejected_sample_path"]
    assert path is not None
    assert len(pd.read_csv(path)) == 3


def test_missing_column_is_a_schema_violation(raw_bookings, cleaner):
    with pytest.raises(ValueError, match="Schema Violation"):
        cleaner.clean(raw_bookings.drop(columns=["Booking Value"]))


def test_missing_mask_tokens():
    s = pd.Series(["null", "", "   ", None, "x", "NULLABLE"])
    assert missing_mask(s).tolist() == [True, True, True, True, False, False]
