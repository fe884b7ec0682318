import logging
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from .exceptions import DataQualityError

logger = logging.getLogger(__name__)

#this module turns the raw seed payload into rows for the transactions table

# the feed has shipped both spellings for these two fields
FIELD_RENAMES = {"productTitle": "title", "productDescription": "description"}
REQUIRED_FIELDS = ["title", "price", "dateOfSale", "category", "sold"]


def seed_to_dataframe(raw_records: Iterable[Dict]) -> pd.DataFrame:
    df = pd.DataFrame(list(raw_records))
    if df.empty:
        raise DataQualityError("Seed payload contains no records")

    for old, new in FIELD_RENAMES.items():
        if old not in df.columns:
            continue
        df[new] = df[new].combine_first(df[old]) if new in df.columns else df[old]
        df = df.drop(columns=old)

    missing = [field for field in REQUIRED_FIELDS if field not in df.columns]
    if missing:
        raise DataQualityError(f"Seed payload is missing required fields: {', '.join(missing)}")
    return df


def _first_bad_row(mask: pd.Series) -> int:
    return int(np.flatnonzero(mask.to_numpy())[0])


def _check_not_null(df: pd.DataFrame, field: str) -> None:
    nulls = df[field].isna()
    if nulls.any():
        raise DataQualityError(f"Record {_first_bad_row(nulls)} has no value for {field!r}")


def parse_price(values: pd.Series) -> pd.Series:
    prices = pd.to_numeric(values, errors="coerce")
    invalid = prices.isna()
    if invalid.any():
        row = _first_bad_row(invalid)
        raise DataQualityError(f"Record {row} has an invalid price: {values.iloc[row]!r}")
    return prices.astype(float)


def _is_epoch(value) -> bool:
    return isinstance(value, (int, float, np.number)) and not isinstance(value, (bool, np.bool_))


def parse_date_of_sale(values: pd.Series) -> pd.Series:
    """Parse ISO 8601 strings or numeric epoch milliseconds into naive UTC.

    Naive UTC keeps the month filter on the UTC calendar month.
    """
    epoch = values.map(_is_epoch).astype(bool)
    from_epoch = pd.to_datetime(values[epoch].astype(float), unit="ms", utc=True, errors="coerce")
    from_text = pd.to_datetime(values[~epoch], utc=True, errors="coerce", format="ISO8601")
    dates = pd.concat([from_epoch, from_text]).reindex(values.index)
    invalid = dates.isna()
    if invalid.any():
        row = _first_bad_row(invalid)
        raise DataQualityError(f"Record {row} has an invalid dateOfSale: {values.iloc[row]!r}")
    return dates.dt.tz_convert(None)


def parse_sold(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    return value == "true"


def _optional(value):
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    return str(value)


def _identifier(value):
    # integer ids come back as floats when some records lack one
    if isinstance(value, float) and not np.isnan(value) and value.is_integer():
        return str(int(value))
    return _optional(value)


def normalize_seed_records(raw_records: Iterable[Dict]) -> List[Dict]:
    """Validate raw seed records and map them onto Transaction columns.

    Raises DataQualityError for the first record missing a required field or
    holding an unparseable price or date; nothing is returned in that case.
    """
    df = seed_to_dataframe(raw_records)
    for field in REQUIRED_FIELDS:
        _check_not_null(df, field)

    prices = parse_price(df["price"])
    dates = parse_date_of_sale(df["dateOfSale"])
    sold = df["sold"].map(parse_sold)
    ids = df["id"] if "id" in df.columns else pd.Series([None] * len(df), index=df.index)
    descriptions = df["description"] if "description" in df.columns else pd.Series([None] * len(df), index=df.index)
    images = df["image"] if "image" in df.columns else pd.Series([None] * len(df), index=df.index)

    records = []
    for i in range(len(df)):
        records.append({
            "id": _identifier(ids.iloc[i]),
            "title": str(df["title"].iloc[i]),
            "price": float(prices.iloc[i]),
            "description": _optional(descriptions.iloc[i]),
            "date_of_sale": dates.iloc[i].to_pydatetime(),
            "category": str(df["category"].iloc[i]),
            "sold": bool(sold.iloc[i]),
            "image": _optional(images.iloc[i]),
        })
    logger.debug("Normalized %d seed records", len(records))
    return records
