from __future__ import annotations

import json
import os
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException

from portfinder.config import ConfigLoadError, load_settings
from portfinder.errors import (
    AccessDenied,
    InvalidArgument,
    PlatformQueryFailed,
    PortLookupError,
    ProcessNotFound,
    UnsupportedPlatform,
)
from portfinder.ports import validate_pid
from portfinder.resolver import PortResolver
from .database import get_session, lifespan
from .models import LookupHistoryEntry, LookupRecord, PortLookupResponse


app = FastAPI(title="Port Finder", version="1.0.0", lifespan=lifespan)
MAX_HISTORY = 500
ERROR_STATUS = {
    InvalidArgument: 400,
    AccessDenied: 403,
    ProcessNotFound: 404,
    UnsupportedPlatform: 501,
    PlatformQueryFailed: 502,
}


def _build_resolver() -> PortResolver:
    try:
        return PortResolver(load_settings(os.getenv("PORTFINDER_CONFIG")))
    except ConfigLoadError as exc:
        raise RuntimeError(f"Failed to load port finder config: {exc}") from exc


resolver = _build_resolver()


def _status_for(exc: PortLookupError) -> int:
    for exc_type, status in ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return status
    return 500


def _record_lookup(record: LookupRecord) -> None:
    with get_session() as session:
        session.add(record)
        session.commit()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/ports/{pid}", response_model=PortLookupResponse)
def get_ports(pid: int) -> PortLookupResponse:
    checked_at = datetime.now(timezone.utc)
    platform_name = None
    try:
        validate_pid(pid)
        platform_name = resolver.platform().value
        ports = resolver.resolve(pid)
    except PortLookupError as exc:
        _record_lookup(
            LookupRecord(
                pid=pid,
                platform=platform_name,
                error=str(exc),
                error_kind=type(exc).__name__,
                checked_at=checked_at,
            )
        )
        raise HTTPException(status_code=_status_for(exc), detail=str(exc))

    _record_lookup(
        LookupRecord(
            pid=pid,
            platform=platform_name,
            ports_json=json.dumps(ports) if ports else None,
            checked_at=checked_at,
        )
    )
    return PortLookupResponse(
        pid=pid,
        platform=platform_name,
        ports=ports or [],
        found=bool(ports),
        checked_at=checked_at,
    )


@app.get("/lookups", response_model=list[LookupHistoryEntry])
def list_lookups(pid: int | None = None, limit: int = 50) -> list[LookupHistoryEntry]:
    if limit < 1 or limit > MAX_HISTORY:
        raise HTTPException(status_code=400, detail=f"limit must be between 1 and {MAX_HISTORY}")
    with get_session() as session:
        query = session.query(LookupRecord)
        if pid is not None:
            query = query.filter(LookupRecord.pid == pid)
        records = query.order_by(LookupRecord.checked_at.desc(), LookupRecord.id.desc()).limit(limit).all()
        return [LookupHistoryEntry.from_record(record) for record in records]
