"""
Shared pytest fixtures for the seedling recommendation test suite.

Provides:
  - ``sample_csv``: a small species CSV with two rows that must be dropped
    (unparseable moisture, missing names).
  - ``sample_profiles``: the profiles parsed from that CSV.
  - ``loaded_store``: a DatasetStore holding those profiles.
  - an autouse override that points the API at the test's ``tmp_path`` as
    its dataset directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from reforest.app import app, get_ingestion_config
from reforest.data_ingestion.config import IngestionConfig
from reforest.data_ingestion.ingest import parse_dataset, read_raw_rows
from reforest.recommendations.cache import clear_cache
from reforest.recommendations.data_store import DatasetStore
from reforest.recommendations.models import SensorReading, SpeciesProfile

SAMPLE_CSV = """\
Common Name,Scientific Name,Soil Moisture,pH Range,Temperature,Native,Success Rate (%),Adaptability Score,Category
Narra,Pterocarpus indicus,40-60%,6.0-7.0,20-30°C,Yes,90,95,Hardwood
Mahogany,Swietenia macrophylla,60-80%,5.5–6.5,25-35°C,No,80,85,Hardwood
Ipil,Intsia bijuga,N/A,6.0-7.0,22-32°C,Yes,88,90,Hardwood
Acacia,Acacia mangium,20-30%,7.5-8.5,30-40°C,No,,,
,,40-60%,6.0-7.0,20-30°C,Yes,90,90,Hardwood
Molave,Vitex parviflora,45-55%,6.5,24-26°C,Y,70,75,Hardwood
"""


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    path = tmp_path / "species.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def sample_profiles(sample_csv: Path) -> list[SpeciesProfile]:
    return parse_dataset(read_raw_rows(sample_csv))


@pytest.fixture
def loaded_store(sample_profiles: list[SpeciesProfile]) -> DatasetStore:
    store = DatasetStore()
    store.replace(sample_profiles, source="fixture")
    return store


@pytest.fixture
def reading() -> SensorReading:
    return SensorReading(ph=6.5, soil_moisture=50, temperature=25)


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture(autouse=True)
def _dataset_dir(tmp_path: Path):
    app.dependency_overrides[get_ingestion_config] = lambda: IngestionConfig(
        dataset_path=tmp_path / "Tree_Seedling_Dataset.xlsx",
        dataset_dir=tmp_path,
    )
    yield
    app.dependency_overrides.pop(get_ingestion_config, None)
