from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field
from sqlmodel import Field as SQLField, SQLModel


class PortLookupResponse(BaseModel):
    pid: int
    platform: str
    ports: List[str] = Field(default_factory=list)
    found: bool
    checked_at: datetime


class LookupRecord(SQLModel, table=True):
    id: Optional[int] = SQLField(default=None, primary_key=True)
    pid: int = SQLField(index=True)
    platform: Optional[str] = None
    ports_json: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    checked_at: datetime = SQLField(default_factory=lambda: datetime.now(timezone.utc), index=True)


class LookupHistoryEntry(BaseModel):
    id: int
    pid: int
    platform: Optional[str] = None
    ports: Optional[List[str]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    checked_at: datetime

    @classmethod
    def from_record(cls, record: LookupRecord) -> "LookupHistoryEntry":
        return cls(
            id=record.id,
            pid=record.pid,
            platform=record.platform,
            ports=json.loads(record.ports_json) if record.ports_json else None,
            error=record.error,
            error_kind=record.error_kind,
            checked_at=record.checked_at,
        )
