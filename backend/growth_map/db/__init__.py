"""Database utilities and models."""

from growth_map.db.base import Base
from growth_map.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
