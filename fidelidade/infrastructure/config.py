# fidelidade/infrastructure/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    duckdb_path: str
    debug: bool
    cors_origins: tuple[str, ...]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = os.environ.get("API_CORS_ORIGINS", "http://localhost:5173")
    return Settings(
        duckdb_path=os.environ.get("DUCKDB_PATH", ":memory:"),
        debug=os.environ.get("API_DEBUG", "false").lower() == "true",
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
