from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class EngineConfig:
    scoring_strategy: str = os.getenv("REFOREST_SCORING_STRATEGY", "tapered")
    default_top_n: int = 3
    cache_ttl_seconds: float = 300.0
    cache_max_entries: int = 256
    cache_enabled: bool = True


DEFAULT_ENGINE_CONFIG = EngineConfig()
