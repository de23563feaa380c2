# offer_model/data/readers.py
"""
Functions for reading input data: parameter tables, deal tables and advisor
profiles, plus the mapping from raw external-store records into table rows.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

import pandas as pd
import yaml

from offer_model.models import AdvisorProfile, FirmDeal, FirmParameter
from offer_model.schema.columns import (
    DEAL_COLS,
    PARAM_DEAL_LENGTH,
    PARAM_DEFERRED_MATCH,
    PARAM_FIRM_TYPE,
    PARAM_GRID,
    PARAM_HURDLES,
    PARAMETER_COLS,
    DealColumns,
    ParameterColumns,
)
from offer_model.utils.numeric import coerce_number, parse_number

logger = logging.getLogger(__name__)

# Spellings seen in exports, mapped to canonical column names
COLUMN_ALIASES: Dict[str, str] = {
    "Firm": ParameterColumns.FIRM.value,
    "Firm Name": ParameterColumns.FIRM.value,
    "firm_name": ParameterColumns.FIRM.value,
    "paramName": ParameterColumns.PARAM_NAME.value,
    "Parameter": ParameterColumns.PARAM_NAME.value,
    "paramValue": ParameterColumns.PARAM_VALUE.value,
    "Value": ParameterColumns.PARAM_VALUE.value,
    "Notes": ParameterColumns.NOTES.value,
    "upfrontMin": DealColumns.UPFRONT_MIN.value,
    "upfrontMax": DealColumns.UPFRONT_MAX.value,
    "backendMin": DealColumns.BACKEND_MIN.value,
    "backendMax": DealColumns.BACKEND_MAX.value,
    "totalDealMin": DealColumns.TOTAL_DEAL_MIN.value,
    "totalDealMax": DealColumns.TOTAL_DEAL_MAX.value,
}

# Band applied around a single stated deal percentage to form min/max
DEAL_BAND_LOW = 0.9
DEAL_BAND_HIGH = 1.1

PathLike = Union[str, Path]


class DataReadError(Exception):
    """Custom exception for errors during data reading."""
    pass


def _apply_aliases(df: pd.DataFrame) -> pd.DataFrame:
    """Rename alias columns; where both spellings exist, merge them row by row."""
    for alias, canonical in COLUMN_ALIASES.items():
        if alias not in df.columns:
            continue
        if canonical in df.columns:
            df[canonical] = df[canonical].combine_first(df[alias])
            df = df.drop(columns=alias)
        else:
            df = df.rename(columns={alias: canonical})
    return df


def _read_frame(file_path: PathLike) -> pd.DataFrame:
    """Read a CSV, JSON or YAML table into a DataFrame."""
    if not isinstance(file_path, Path):
        file_path = Path(file_path)

    logger.info(f"Attempting to read table from: {file_path}")
    if not file_path.is_file():
        logger.error(f"Table file not found: {file_path}")
        raise DataReadError(f"Table file not found: {file_path}")

    suffix = file_path.suffix.lower()
    try:
        if suffix == ".csv":
            df = pd.read_csv(file_path)
        elif suffix in (".json", ".yaml", ".yml"):
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
            if data is None:
                data = []
            if not isinstance(data, list):
                raise DataReadError(f"Expected a list of rows in {file_path}")
            df = pd.DataFrame.from_records(data)
        else:
            logger.error(f"Unsupported table format: {file_path}. Use .csv, .json or .yaml.")
            raise DataReadError(f"Unsupported table format: {file_path.suffix}")
    except DataReadError:
        raise
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.exception(f"Error reading table {file_path}: {e}")
        raise DataReadError(f"Error reading table {file_path}") from e

    df = _apply_aliases(df)
    logger.info(f"Loaded {len(df)} rows from {file_path}")
    logger.debug(f"Columns loaded: {df.columns.tolist()}")
    return df


def _frame_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame rows as dicts with NaN replaced by None."""
    if df.empty:
        return []
    clean = df.astype(object).where(df.notna(), None)
    return clean.to_dict(orient="records")


def read_parameter_table(file_path: PathLike) -> List[FirmParameter]:
    """Read a firm parameter table. Unusable rows are dropped with a warning."""
    df = _read_frame(file_path)
    missing = [c for c in (ParameterColumns.FIRM.value, ParameterColumns.PARAM_NAME.value)
               if c not in df.columns]
    if missing:
        raise DataReadError(f"Parameter table {file_path} is missing columns: {missing}")

    rows = []
    for record in _frame_records(df):
        param = FirmParameter.from_record(record)
        if param is None:
            logger.warning(f"Dropping unusable parameter row: {record}")
            continue
        rows.append(param)
    extra = sorted(set(df.columns) - set(PARAMETER_COLS))
    if extra:
        logger.debug(f"Ignoring parameter table columns: {extra}")
    return rows


def read_deal_table(file_path: PathLike) -> List[FirmDeal]:
    """Read a firm deal table. Unusable rows are dropped with a warning."""
    df = _read_frame(file_path)
    if DealColumns.FIRM.value not in df.columns:
        raise DataReadError(f"Deal table {file_path} is missing column: firm")

    rows = []
    for record in _frame_records(df):
        deal = FirmDeal.from_record(record)
        if deal is None:
            logger.warning(f"Dropping unusable deal row: {record}")
            continue
        rows.append(deal)
    extra = sorted(set(df.columns) - set(DEAL_COLS))
    if extra:
        logger.debug(f"Ignoring deal table columns: {extra}")
    return rows


def read_profile(file_path: PathLike) -> AdvisorProfile:
    """Load an advisor profile from a YAML or JSON mapping."""
    file_path = Path(file_path)
    if not file_path.is_file():
        raise DataReadError(f"Profile file not found: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f) if file_path.suffix.lower() == ".json" else yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise DataReadError(f"Error reading profile {file_path}") from e
    if not isinstance(data, dict):
        raise DataReadError(f"Profile {file_path} did not parse into a mapping")
    return AdvisorProfile.model_validate(data)


# ---------------------- External store records ----------------------


def _fields(record: Mapping[str, Any]) -> Mapping[str, Any]:
    fields = record.get("fields", record) if isinstance(record, Mapping) else {}
    return fields if isinstance(fields, Mapping) else {}


def deals_from_records(records: Iterable[Mapping[str, Any]]) -> List[FirmDeal]:
    """Map raw store records (``Upfront`` / ``Total Deal`` percentages) to deals.

    Min/max form a band around the stated figure; backend is total less upfront.
    """
    deals = []
    for record in records or ():
        fields = _fields(record)
        upfront = parse_number(fields.get("Upfront")) or 0.0
        total = parse_number(fields.get("Total Deal")) or 0.0
        backend = total - upfront
        deals.append(
            FirmDeal(
                firm=str(fields.get("Firm Name") or ""),
                upfront_min=upfront * DEAL_BAND_LOW,
                upfront_max=upfront * DEAL_BAND_HIGH,
                backend_min=backend * DEAL_BAND_LOW,
                backend_max=backend * DEAL_BAND_HIGH,
                total_deal_min=total * DEAL_BAND_LOW,
                total_deal_max=total * DEAL_BAND_HIGH,
                notes=str(fields.get("Firm Overview") or ""),
            )
        )
    logger.info(f"Mapped {len(deals)} deal records")
    return deals


# field name -> (parameter name, notes)
_PARAMETER_FIELDS = (
    ("Length of Deal", PARAM_DEAL_LENGTH, "Length of deal in years"),
    ("Hurdles", PARAM_HURDLES, "Performance hurdles"),
    ("Grid", PARAM_GRID, "Grid percentage"),
    ("Deferred Match", PARAM_DEFERRED_MATCH, "Deferred match percentage"),
)


def parameters_from_records(records: Iterable[Mapping[str, Any]]) -> List[FirmParameter]:
    """Explode raw store records into one parameter row per populated field."""
    params = []
    for record in records or ():
        fields = _fields(record)
        firm = str(fields.get("Firm Name") or "")
        for field_name, param_name, notes in _PARAMETER_FIELDS:
            if fields.get(field_name):
                params.append(
                    FirmParameter(
                        firm=firm,
                        param_name=param_name,
                        param_value=coerce_number(fields.get(field_name)),
                        notes=notes,
                    )
                )
        if fields.get("Type"):
            params.append(
                FirmParameter(
                    firm=firm,
                    param_name=PARAM_FIRM_TYPE,
                    param_value=0.0,
                    notes=str(fields.get("Type")),
                )
            )
    logger.info(f"Mapped {len(params)} parameter rows from store records")
    return params
