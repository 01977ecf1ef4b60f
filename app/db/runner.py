from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.orm import Session


class SQLRunner:
    """
    Thin wrapper for hand-written SQL over the request's session.

    All statements are caller-supplied and parameter-bound (``:name`` style).
    Driver errors propagate as ``SQLAlchemyError``; committing is left to the
    caller so several statements can share one transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        self._last_insert_id: Optional[int] = None

    def run(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Result:
        return self.db.execute(text(sql), dict(params or {}))

    def fetch_all(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.run(sql, params).mappings().all()]

    def fetch_one(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Optional[Dict[str, Any]]:
        row = self.run(sql, params).mappings().first()
        return dict(row) if row is not None else None

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Runs a write statement and returns the affected row count."""
        result = self.run(sql, params)
        self._last_insert_id = getattr(result, "lastrowid", None)
        return result.rowcount

    def last_insert_id(self) -> Optional[int]:
        return self._last_insert_id
