"""
Base class for the entity services.

The database session is injected via the constructor so routers and tests
can hand in their own session.
"""
from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Session


class BaseService:
    def __init__(self, db: Session):
        self._db = db

    @property
    def db(self) -> Session:
        """Database session accessor."""
        return self._db

    @staticmethod
    def _now() -> dt.datetime:
        return dt.datetime.now(dt.timezone.utc)
