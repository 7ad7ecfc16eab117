from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[2]
DATA_DIR = BASE_DIR / "data"

LOG_LEVEL = os.getenv("RECIPE_LOG_LEVEL", "INFO").upper()
API_HOST = os.getenv("RECIPE_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("RECIPE_API_PORT", "8000"))


def db_url() -> str:
    url = os.getenv("RECIPE_DB_URL")
    if url:
        return url
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{(DATA_DIR / 'recipes.db').as_posix()}"


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
