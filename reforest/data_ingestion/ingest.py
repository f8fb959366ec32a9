from __future__ import annotations

import logging
import math
import re
import sys
from pathlib import Path
from typing import Any, Iterable, Mapping
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..exceptions import (
    DatasetNotFoundError,
    DatasetReadError,
    EmptyDatasetError,
    UnsupportedDatasetFormatError,
)
from ..recommendations.data_store import DatasetStore
from ..recommendations.models import SpeciesProfile
from .columns import DEFAULT_COLUMN_MAP, ColumnMap
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from .ranges import ParsedRange, format_range, parse_range

logger = logging.getLogger(__name__)

NATIVE_VALUES = {"true", "yes", "y", "1", "native"}
UNKNOWN = "Unknown"

# Spreadsheet row numbers are 1-based and the header occupies row 1.
_HEADER_OFFSET = 2

_LEADING_INT = re.compile(r"^[+-]?\d+")


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _parse_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value).strip())
    return int(match.group(0)) if match else None


def _is_native(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value if value is not None else "").strip().lower() in NATIVE_VALUES


def _text(value: Any, default: str) -> str:
    return str(value).strip() if value is not None else default


def _tolerance_range(
    parsed: ParsedRange,
    floor: float,
    fraction: float,
    bounds: tuple[float, float] | None = None,
) -> tuple[float, float, float]:
    """Return ``(low, high, midpoint)`` of midpoint ± tolerance, clamped to ``bounds``."""
    midpoint = (parsed.min + parsed.max) / 2
    tolerance = max(floor, midpoint * fraction)
    low, high = midpoint - tolerance, midpoint + tolerance
    if bounds is not None:
        low, high = _clamp(low, *bounds), _clamp(high, *bounds)
    return low, high, midpoint


def _parse_row(
    row: Mapping[str, Any], row_number: int, seq: int, columns: ColumnMap
) -> SpeciesProfile | None:
    moisture = parse_range(columns.resolve(row, "moisture"))
    ph = parse_range(columns.resolve(row, "ph"))
    temperature = parse_range(columns.resolve(row, "temperature"))

    if not (moisture.valid and ph.valid and temperature.valid):
        logger.warning(
            "Row %d: invalid range data - moisture: %s, pH: %s, temperature: %s",
            row_number, moisture.valid, ph.valid, temperature.valid,
        )
        return None

    common_name = _text(columns.resolve(row, "common_name"), UNKNOWN)
    scientific_name = _text(columns.resolve(row, "scientific_name"), UNKNOWN)
    if common_name == UNKNOWN or scientific_name == UNKNOWN:
        logger.warning("Row %d: missing species name", row_number)
        return None

    moisture_min, moisture_max, pref_moisture = _tolerance_range(moisture, 5, 0.2, (0, 100))
    temp_min, temp_max, pref_temp = _tolerance_range(temperature, 2, 0.15)
    ph_min, ph_max, pref_ph = _tolerance_range(ph, 0.5, 0.1, (0, 14))

    is_native = _is_native(columns.resolve(row, "native"))

    success_rate = _parse_int(columns.resolve(row, "success_rate"))
    if success_rate is None:
        success_rate = 85 if is_native else 75
    adaptability = _parse_int(columns.resolve(row, "adaptability_score"))
    if adaptability is None:
        adaptability = 90 if is_native else 80

    return SpeciesProfile(
        id=f"seed_{seq:03d}",
        common_name=common_name,
        scientific_name=scientific_name,
        soil_type=_text(columns.resolve(row, "soil_type"), "Various soil types"),
        category=_text(
            columns.resolve(row, "category"), "native" if is_native else "non-native"
        ),
        climate_suitability=_text(columns.resolve(row, "climate_suitability"), "Tropical"),
        growth_rate=_text(columns.resolve(row, "growth_rate"), "Medium"),
        uses=_text(columns.resolve(row, "uses"), "Reforestation"),
        is_native=is_native,
        moisture_min=moisture_min,
        moisture_max=moisture_max,
        ph_min=ph_min,
        ph_max=ph_max,
        temp_min=temp_min,
        temp_max=temp_max,
        pref_moisture=round(pref_moisture, 1),
        pref_ph=round(pref_ph, 1),
        pref_temp=round(pref_temp, 1),
        success_rate=int(_clamp(success_rate, 0, 100)),
        adaptability_score=int(_clamp(adaptability, 0, 100)),
        original_ranges={
            "moisture": format_range(moisture.min, moisture.max),
            "pH": format_range(ph.min, ph.max),
            "temperature": format_range(temperature.min, temperature.max),
        },
    )


def parse_dataset(
    rows: Iterable[Mapping[str, Any]],
    columns: ColumnMap = DEFAULT_COLUMN_MAP,
) -> list[SpeciesProfile]:
    """
    Normalize raw dataset rows into species profiles.

    Rows with unparseable tolerance ranges or without both species names are
    dropped and logged with their spreadsheet row number. A failure inside
    one row never aborts the rest of the dataset.
    """
    rows = list(rows)
    profiles: list[SpeciesProfile] = []

    for index, row in enumerate(rows):
        row_number = index + _HEADER_OFFSET
        try:
            profile = _parse_row(row, row_number, len(profiles) + 1, columns)
        except Exception:
            logger.exception("Row %d: failed to parse species row", row_number)
            continue
        if profile is not None:
            profiles.append(profile)

    logger.info("Parsed %d valid species from %d rows", len(profiles), len(rows))
    return profiles


def read_raw_rows(
    path: str | Path, config: IngestionConfig = DEFAULT_INGESTION_CONFIG
) -> list[dict[str, Any]]:
    """Read the first sheet of a spreadsheet (or a CSV file) as row dicts."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".xlsx", ".xls", ".csv"):
        raise UnsupportedDatasetFormatError(path)

    try:
        if suffix == ".csv":
            df = pd.read_csv(path, dtype=object)
        else:
            df = pd.read_excel(path, sheet_name=config.sheet_name, dtype=object)
    except pd.errors.EmptyDataError:
        return []
    except (ValueError, OSError, BadZipFile, InvalidFileException) as exc:
        # ParserError and UnicodeDecodeError are ValueErrors
        logger.warning("Failed to read dataset %s: %s", path, exc)
        raise DatasetReadError(path, str(exc)) from exc

    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def load_dataset_from_file(
    path: str | Path | None,
    store: DatasetStore,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
) -> list[SpeciesProfile]:
    """
    Ingest a dataset file and publish it as the store's new snapshot.

    On any failure the store keeps its previous snapshot.
    """
    path = Path(path) if path is not None else config.dataset_path
    logger.info("Loading species dataset from %s", path)

    if not path.is_file():
        raise DatasetNotFoundError(path)

    raw_rows = read_raw_rows(path, config)
    if not raw_rows:
        raise EmptyDatasetError(f"Dataset file contains no data rows: {path}")

    profiles = parse_dataset(raw_rows, config.column_map)
    store.replace(profiles, source=str(path), raw_row_count=len(raw_rows))
    return profiles


if __name__ == "__main__":
    from ..analytics.aggregator import summarize_species

    logging.basicConfig(level=logging.INFO)
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    dataset_store = DatasetStore()
    species = load_dataset_from_file(target, dataset_store)
    summary = summarize_species(dataset_store.snapshot())
    print(f"Ingestion complete. {len(species)} species ready.")
    print(f"Native: {summary['native_species']}, non-native: {summary['non_native_species']}")
    print(f"Categories: {summary['categories']}")
