from fastapi import APIRouter
from datetime import datetime, timezone

from ..services.nlu_config import get_default_tables

router = APIRouter()
_START_TIME = datetime.now(timezone.utc)


@router.get("/health")
def health():
    now = datetime.now(timezone.utc)
    resp = {
        "status": "healthy",
        "timestamp": now.isoformat(),
        "uptime_seconds": (now - _START_TIME).total_seconds(),
        "nlu_tables": {
            "status": "unknown",
            "languages": 0,
        },
    }
    try:
        tables = get_default_tables()
        resp["nlu_tables"].update({
            "status": "loaded",
            "languages": len(tables["language_patterns"]),
        })
    except Exception:
        resp["status"] = "degraded"
        resp["nlu_tables"]["status"] = "error"
    return resp
