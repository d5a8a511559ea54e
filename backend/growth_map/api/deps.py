"""FastAPI dependencies shared by the planning routes."""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from growth_map.core.config import get_settings
from growth_map.db.deps import get_db
from growth_map.db.store import RecordStore
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.llm_client import build_completion_client


@lru_cache
def get_content_generator() -> ContentGenerator:
    """Process-wide generator; falls back to heuristics when no API key is set."""
    return ContentGenerator(build_completion_client(get_settings()))


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)
