import numpy as np
import pandas as pd

DAY_NAMES = {
    1: "Sunday",
    2: "Monday",
    3: "Tuesday",
    4: "Wednesday",
    5: "Thursday",
    6: "Friday",
    7: "Saturday",
}

# (label, first hour, last hour), inclusive. Anything else is Off-Peak.
TIME_SLOTS = [
    ("Morning Peak (6-9)", 6, 9),
    ("Evening Peak (16-19)", 16, 19),
    ("Night (20-23)", 20, 23),
    ("Late Night (0-5)", 0, 5),
]
OFF_PEAK = "Off-Peak"

TIME_FEATURES = ["hour", "day_of_week", "day_name", "month", "ride_date", "time_slot"]


class FeatureEngineer:
    def __init__(self, time_format: str = "%H:%M:%S"):
        self.time_format = time_format

    def hour_of_day(self, time: pd.Series) -> pd.Series:
        parsed = pd.to_datetime(time, format=self.time_format, errors="coerce")
        return parsed.dt.hour.astype("Int64")

    def add_time_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Derive calendar columns from Date and Time."""
        df = df.copy()
        date = pd.to_datetime(df["Date"], errors="coerce")

        df["hour"] = self.hour_of_day(df["Time"])
        # Sunday-first numbering: Sunday=1 ... Saturday=7
        df["day_of_week"] = ((date.dt.dayofweek + 1) % 7 + 1).astype("Int64")
        df["day_name"] = df["day_of_week"].map(DAY_NAMES)
        df["month"] = date.dt.strftime("%Y-%m")
        df["ride_date"] = date.dt.strftime("%Y-%m-%d")

        hour = df["hour"].astype(float)
        conditions = [hour.between(lo, hi) for _, lo, hi in TIME_SLOTS]
        labels = [label for label, _, _ in TIME_SLOTS]
        df["time_slot"] = np.select(conditions, labels, default=OFF_PEAK)

        return df


def ensure_time_features(df: pd.DataFrame) -> pd.DataFrame:
    if all(col in df.columns for col in TIME_FEATURES):
        return df
    return FeatureEngineer().add_time_features(df)
