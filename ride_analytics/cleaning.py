import logging
import os
import uuid
from datetime import datetime, timezone

import numpy as np
import pandas as pd
import ride_analytics.data_contract as dc

logger = logging.getLogger(__name__)


def missing_mask(s: pd.Series) -> pd.Series:
    """True where a raw value is null, the literal 'null' or blank."""
    text = s.astype(str).str.strip()
    return s.isna() | (text == "") | text.isin(dc.MISSING_TOKENS)


def _synthesize_ids(s: pd.Series, prefix: str) -> tuple[pd.Series, int]:
    missing = missing_mask(s)
    cleaned = s.astype(str).str.replace('"', "", regex=False).str.strip()
    cleaned.loc[missing] = [f"{prefix}{uuid.uuid4()}" for _ in range(int(missing.sum()))]
    return cleaned, int(missing.sum())


class RideCleaner:
    """
    Field-level cleaner for raw ride bookings.

    No record is ever dropped and no input makes it fail: invalid values
    become null, absent categoricals become sentinels, absent counters
    become zero. Per-field stats land on df.attrs["stats"]; fields whose
    rejected share exceeds warn_invalid_ratio are logged as warnings and
    listed on df.attrs["rejection_warnings"].
    """

    def __init__(self, artifact_dir: str | None = None, warn_invalid_ratio: float = dc.REJECTION_WARNING_RATIO):
        self.artifact_dir = artifact_dir
        self.warn_invalid_ratio = warn_invalid_ratio

    def _clean_numeric(self, s: pd.Series, rule: dict) -> tuple[pd.Series, pd.Series, pd.Series]:
        missing = missing_mask(s)
        parsed = pd.to_numeric(s.where(~missing).astype(str).str.strip(), errors="coerce")
        in_range = parsed.between(rule["min"], rule["max"])
        rejected = ~missing & ~in_range
        return parsed.where(in_range).round(rule["decimals"]).astype(float), missing, rejected

    def _clean_counter(self, s: pd.Series) -> tuple[pd.Series, pd.Series]:
        missing = missing_mask(s)
        parsed = pd.to_numeric(s.where(~missing).astype(str).str.strip(), errors="coerce").astype(float)
        # inf and values beyond int64 cannot be counters
        parsed = parsed.where(np.isfinite(parsed) & (parsed.abs() < 2.0**63))
        defaulted = parsed.isna()
        return np.trunc(parsed.fillna(0)).astype("Int64"), defaulted

    def _clean_time(self, s: pd.Series) -> tuple[pd.Series, pd.Series]:
        missing = missing_mask(s)
        text = s.astype(str).str.strip()
        invalid = ~missing & text.str.startswith(dc.INVALID_TIME_PREFIX)
        return text.where(~missing & ~invalid), invalid

    def _save_rejected_sample(self, raw: pd.DataFrame, rejected_any: pd.Series) -> str | None:
        if not self.artifact_dir or not rejected_any.any():
            return None
        try:
            os.makedirs(self.artifact_dir, exist_ok=True)
            ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            path = os.path.join(self.artifact_dir, f"rejected_values_sample_{ts}.csv")
            raw[rejected_any].head(100).to_csv(path, index=False)
            logger.info(f"Saved rejected values sample to: {path}")
            return path
        except Exception as e:
            logger.warning(f"Could not write rejected values sample CSV: {e}")
            return None

    def clean(self, raw: pd.DataFrame) -> pd.DataFrame:
        logger.info("Cleaning ride bookings...")
        raw = raw.rename(columns=dc.RAW_TO_CLEAN).reset_index(drop=True)

        missing_cols = [c for c in dc.CLEANED_COLUMNS if c not in raw.columns]
        if missing_cols:
            raise ValueError(f"Schema Violation: Missing columns {missing_cols}")

        out = pd.DataFrame(index=raw.index)
        stats = {"input_rows": len(raw)}

        # 1) Identifiers
        out["Booking_ID"], stats["synthesized_booking_ids"] = _synthesize_ids(
            raw["Booking_ID"], dc.BOOKING_ID_PREFIX
        )
        out["Customer_ID"], stats["synthesized_customer_ids"] = _synthesize_ids(
            raw["Customer_ID"], dc.CUSTOMER_ID_PREFIX
        )

        # 2) Date / Time
        date_missing = missing_mask(raw["Date"])
        out["Date"] = pd.to_datetime(raw["Date"].where(~date_missing), errors="coerce").dt.normalize()
        stats["invalid_date"] = int((~date_missing & out["Date"].isna()).sum())

        out["Time"], invalid_time = self._clean_time(raw["Time"])
        stats["invalid_time"] = int(invalid_time.sum())

        # 3) Categoricals and reasons
        for col, default in dc.CATEGORICAL_DEFAULTS.items():
            missing = missing_mask(raw[col])
            out[col] = raw[col].astype(str).str.strip().where(~missing, default)
            stats[f"defaulted_{col}"] = int(missing.sum())

        # 4) Counters
        for col in dc.COUNTER_COLUMNS:
            out[col], defaulted = self._clean_counter(raw[col])
            stats[f"defaulted_{col}"] = int(defaulted.sum())

        # 5) Range-checked numerics
        rejected_any = pd.Series(False, index=raw.index)
        warnings = []
        for col, rule in dc.NUMERIC_RULES.items():
            out[col], missing, rejected = self._clean_numeric(raw[col], rule)
            rejected_any |= rejected

            present = int((~missing).sum())
            n_rejected = int(rejected.sum())
            ratio = (n_rejected / present) if present > 0 else 0.0
            stats[f"missing_{col}"] = int(missing.sum())
            stats[f"rejected_{col}"] = n_rejected
            stats[f"rejected_ratio_{col}"] = round(ratio, 4)

            if ratio > self.warn_invalid_ratio:
                warnings.append(col)
                logger.warning(
                    f"High rejection rate in {col}: {n_rejected}/{present} values ({ratio:.2%}) "
                    f"were unparseable or out of range and set to null."
                )

        out = out[dc.CLEANED_COLUMNS]
        stats["clean_rows"] = len(out)
        logger.info(f"Cleaning stats: {stats}")

        rejected_sample_path = self._save_rejected_sample(raw, rejected_any)

        # Guards
        if len(out) != len(raw):
            raise ValueError(
                f"Cleaning Invariant Broken: {len(raw)} rows in, {len(out)} rows out."
            )

        out.attrs["stats"] = stats
        out.attrs["rejected_sample_path"] = rejected_sample_path
        out.attrs["rejection_warnings"] = warnings
        return out
