from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .columns import DEFAULT_COLUMN_MAP, ColumnMap

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for loading the species tolerance dataset.
    """

    dataset_path: Path = Path(
        os.getenv("REFOREST_DATASET_PATH", "data/Tree_Seedling_Dataset.xlsx")
    )
    # Directory the HTTP adapter may load datasets from
    dataset_dir: Path = Path(os.getenv("REFOREST_DATASET_DIR", "data"))
    sheet_name: int | str = 0
    column_map: ColumnMap = field(default_factory=lambda: DEFAULT_COLUMN_MAP)


DEFAULT_INGESTION_CONFIG = IngestionConfig()
